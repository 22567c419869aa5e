"""Shared fixtures for building survey responses in tests."""
from __future__ import annotations

import itertools
from typing import Dict, Optional

import pytest

from appraisal360.competencies import Category, competencies_in
from appraisal360.survey_response import SurveyResponse


def bucket_scores(category: Category, value: int) -> Dict[str, int]:
    """Return ``{key: value}`` for every competency of *category*."""
    return {c.key: value for c in competencies_in(category)}


@pytest.fixture()
def make_response():
    """Factory producing :class:`SurveyResponse` objects with unique ids."""

    counter = itertools.count(1)

    def _make(
        manager: str = "Jane Doe",
        relationship: Optional[str] = "Peer",
        scores: Optional[Dict[str, int]] = None,
        **fields,
    ) -> SurveyResponse:
        data = dict(fields)
        data.update(scores or {})
        return SurveyResponse(
            id=f"r{next(counter)}",
            manager_name=manager,
            relationship=relationship,
            **data,
        )

    return _make


@pytest.fixture()
def bucket():
    """Expose :func:`bucket_scores` to tests."""
    return bucket_scores


@pytest.fixture()
def team_responses(make_response):
    """A small organisation: three managers, mixed reviewers and comments."""

    tl, ro, cf = (
        Category.TEAM_LEADERSHIP,
        Category.RESULTS_ORIENTATION,
        Category.CULTURAL_FIT,
    )
    return [
        make_response(
            "Jane Doe",
            "Peer",
            scores={**bucket_scores(tl, 4), **bucket_scores(ro, 4), **bucket_scores(cf, 3)},
            stop_doing="Skipping one-on-ones",
            continue_doing="Mentors & Coaches the team",
            team_leadership_comments="Gives clear direction",
        ),
        make_response(
            "Jane Doe",
            "Direct Report",
            scores={**bucket_scores(tl, 4), **bucket_scores(cf, 4)},
            start_doing="Sharing the roadmap earlier",
        ),
        make_response(
            "Bob Smith",
            "Peer",
            scores={**bucket_scores(tl, 2), **bucket_scores(ro, 3), **bucket_scores(cf, 2)},
            stop_doing="skipping ONE-ON-ONES",
            results_orientation_comments="Slow to decide",
        ),
        make_response(
            "Cara Lee",
            None,
            scores={**bucket_scores(ro, 5), **bucket_scores(cf, 4)},
            cultural_fit_comments="Always approachable",
        ),
    ]
