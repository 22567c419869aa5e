"""Unit tests for analysis.aggregator."""

from __future__ import annotations

from appraisal360.analysis.aggregator import (
    competency_scores,
    group_by_manager,
    manager_summaries,
    mean,
)
from appraisal360.competencies import COMPETENCIES, Category


def test_mean_of_empty_is_zero():
    assert mean([]) == 0
    assert mean([2, 4]) == 3


def test_single_category_overall_uses_evaluated_dimensions_only(make_response, bucket):
    """Two Jane responses with only team-leadership scores average to 3.0."""

    responses = [
        make_response("Jane", scores=bucket(Category.TEAM_LEADERSHIP, 4)),
        make_response("Jane", scores=bucket(Category.TEAM_LEADERSHIP, 2)),
    ]

    (jane,) = manager_summaries(responses)

    assert jane.manager_name == "Jane"
    assert jane.total_responses == 2
    assert jane.avg_team_leadership == 3.0
    assert jane.avg_results_orientation == 0
    assert jane.avg_cultural_fit == 0
    assert jane.overall_score == 3.0


def test_overall_is_mean_of_non_zero_categories(make_response, bucket):
    scores = {
        **bucket(Category.TEAM_LEADERSHIP, 4),
        **bucket(Category.RESULTS_ORIENTATION, 3),
        **bucket(Category.CULTURAL_FIT, 2),
    }
    (summary,) = manager_summaries([make_response("Ann", scores=scores)])

    assert summary.overall_score == 3.0
    assert summary.percentage == 60.0
    assert (
        summary.avg_team_leadership,
        summary.avg_results_orientation,
        summary.avg_cultural_fit,
    ) == (4.0, 3.0, 2.0)


def test_response_without_scores_reports_zero(make_response):
    (summary,) = manager_summaries([make_response("Empty")])

    assert summary.total_responses == 1
    assert summary.overall_score == 0
    assert summary.avg_team_leadership == 0


def test_results_rounded_to_two_decimals(make_response):
    responses = [
        make_response("Bo", scores={"empowers_team_score": 4}),
        make_response("Bo", scores={"empowers_team_score": 4}),
        make_response("Bo", scores={"empowers_team_score": 3}),
    ]
    (summary,) = manager_summaries(responses)
    assert summary.avg_team_leadership == 3.67
    assert summary.overall_score == 3.67


def test_summaries_sorted_descending_with_stable_ties(make_response, bucket):
    responses = [
        make_response("Alpha", scores=bucket(Category.CULTURAL_FIT, 3)),
        make_response("Beta", scores=bucket(Category.CULTURAL_FIT, 5)),
        make_response("Gamma", scores=bucket(Category.CULTURAL_FIT, 3)),
    ]

    names = [s.manager_name for s in manager_summaries(responses)]

    assert names == ["Beta", "Alpha", "Gamma"]


def test_counts_sum_to_filtered_total(make_response):
    responses = [
        make_response("A"),
        make_response("B"),
        make_response("A"),
        make_response("C"),
    ]
    summaries = manager_summaries(responses)
    assert sum(s.total_responses for s in summaries) == len(responses)


def test_summary_owns_its_responses(make_response):
    responses = [make_response("A"), make_response("A")]
    (summary,) = manager_summaries(responses)

    responses.clear()

    assert len(summary.responses) == 2


def test_group_by_manager_keeps_first_occurrence_order(make_response):
    groups = group_by_manager(
        [make_response("Zed"), make_response("Amy"), make_response("Zed")]
    )
    assert list(groups) == ["Zed", "Amy"]
    assert len(groups["Zed"]) == 2


def test_empty_input_yields_empty_and_zero_results():
    assert manager_summaries([]) == []

    scores = competency_scores([])

    assert len(scores) == 13
    assert all(s.score == 0 and s.percentage == 0 for s in scores)


def test_competency_scores_follow_catalog_order_and_names(make_response):
    responses = [
        make_response(scores={"approachable_score": 5, "final_say_score": 2}),
        make_response(scores={"approachable_score": 3}),
    ]

    scores = competency_scores(responses)

    assert [s.name for s in scores] == [c.name for c in COMPETENCIES]
    by_name = {s.name: s for s in scores}
    assert by_name["Approachable"].score == 4.0
    assert by_name["Approachable"].percentage == 80.0
    assert by_name["Approachable"].count == 2
    assert (by_name["Approachable"].min_score, by_name["Approachable"].max_observed) == (
        3,
        5,
    )
    assert by_name["Final Say"].score == 2.0
    assert by_name["Empowers Team"].count == 0
