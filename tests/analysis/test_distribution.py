"""Unit tests for analysis.distribution."""

from __future__ import annotations

from appraisal360.analysis.distribution import (
    relationship_breakdown,
    relationship_distribution,
    score_distribution,
)


def test_relationship_distribution_counts_missing_as_unknown(make_response):
    responses = [
        make_response(relationship="Peer"),
        make_response(relationship="Direct Report"),
        make_response(relationship="Peer"),
        make_response(relationship=None),
    ]

    assert relationship_distribution(responses) == {
        "Peer": 2,
        "Direct Report": 1,
        "Unknown": 1,
    }


def test_relationship_breakdown_sorted_by_count(make_response):
    responses = [
        make_response(relationship="Line Manager"),
        make_response(relationship="Peer"),
        make_response(relationship="Peer"),
        make_response(relationship="Peer"),
    ]

    shares = relationship_breakdown(responses)

    assert [(s.relationship, s.count, s.percentage) for s in shares] == [
        ("Peer", 3, 75.0),
        ("Line Manager", 1, 25.0),
    ]


def test_score_distribution_counts_each_score_field(make_response):
    responses = [
        make_response(scores={"empowers_team_score": 5, "approachable_score": 5}),
        make_response(scores={"final_say_score": 1, "open_to_ideas_score": 3}),
        make_response(),
    ]

    histogram = score_distribution(responses)

    assert histogram == {1: 1, 2: 0, 3: 1, 4: 0, 5: 2}
    assert sum(histogram.values()) == 4


def test_score_distribution_ignores_out_of_range(make_response):
    responses = [make_response(scores={"empowers_team_score": 7, "final_say_score": 0})]

    assert score_distribution(responses) == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


def test_distributions_tolerate_empty_input():
    assert relationship_distribution([]) == {}
    assert relationship_breakdown([]) == []
    assert sum(score_distribution([]).values()) == 0
