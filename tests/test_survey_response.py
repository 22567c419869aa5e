"""Tests for SurveyResponse construction and accessors."""

from __future__ import annotations

import datetime

import pytest

from appraisal360.survey_response import SurveyResponse


def _make_row(**overrides):
    row = {
        "id": "abc",
        "manager_name": "Jane Doe",
        "relationship": "Peer",
        "response_number": "3",
        "timestamp": "2024-05-01T10:30:00Z",
        "created_at": None,
        "empowers_team_score": 4,
        "approachable_score": "5",
        "final_say_score": None,
        "stop_doing": "  ",
        "continue_doing": "Clear goals",
        "unexpected_column": "ignored",
    }
    row.update(overrides)
    return row


def test_from_row_coerces_values():
    response = SurveyResponse.from_row(_make_row())

    assert response.id == "abc"
    assert response.response_number == 3
    assert response.empowers_team_score == 4
    assert response.approachable_score == 5
    assert response.final_say_score is None
    assert response.stop_doing is None
    assert response.continue_doing == "Clear goals"
    assert response.timestamp == datetime.datetime(
        2024, 5, 1, 10, 30, tzinfo=datetime.timezone.utc
    )
    assert response.created_at is None


def test_from_row_tolerates_bad_values():
    response = SurveyResponse.from_row(
        _make_row(empowers_team_score="n/a", timestamp="yesterday")
    )

    assert response.empowers_team_score is None
    assert response.timestamp is None


def test_from_row_requires_manager_name():
    with pytest.raises(ValueError):
        SurveyResponse.from_row(_make_row(manager_name="  "))

    with pytest.raises(ValueError):
        SurveyResponse.from_row({"id": "x"})


def test_relationship_label_defaults_to_unknown(make_response):
    assert make_response(relationship=None).relationship_label == "Unknown"
    assert make_response(relationship="Peer").relationship_label == "Peer"


def test_iter_scores_and_mean(make_response):
    response = make_response(
        scores={"empowers_team_score": 4, "approachable_score": 2}
    )

    assert dict(response.iter_scores()) == {
        "empowers_team_score": 4,
        "approachable_score": 2,
    }
    assert response.mean_score() == 3.0
    assert response.score("final_say_score") is None
    assert make_response().mean_score() is None


def test_responses_are_immutable(make_response):
    response = make_response()
    with pytest.raises(AttributeError):
        response.manager_name = "Someone else"  # type: ignore[misc]


@pytest.mark.parametrize(
    "raw,expected",
    [(4, 4), (4.0, 4), ("4", 4), ("4.0", 4), (3.7, None), ("3.7", None), ("nan", None), (True, None)],
)
def test_scores_must_be_integral(raw, expected):
    response = SurveyResponse.from_row(_make_row(empowers_team_score=raw))
    assert response.empowers_team_score == expected
