"""Aggregate survey responses into manager summaries and competency scores.

All functions here are pure and total: empty input yields empty/zero
results and averages over no values resolve to ``0``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from appraisal360.competencies import (
    COMPETENCIES,
    SCORE_SCALE_MAX,
    Category,
    competencies_in,
)
from appraisal360.reporting.models import (
    CompetencyScore,
    ManagerSummary,
    percent_of_scale,
)
from appraisal360.survey_response import SurveyResponse

logger = logging.getLogger(__name__)

__all__ = [
    "mean",
    "group_by_manager",
    "category_averages_for",
    "manager_summaries",
    "competency_scores",
]

_CATEGORY_KEYS: Dict[Category, tuple] = {
    category: tuple(c.key for c in competencies_in(category)) for category in Category
}


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, ``0`` for an empty sequence."""
    return sum(values) / len(values) if values else 0


def group_by_manager(
    responses: Iterable[SurveyResponse],
) -> Dict[str, List[SurveyResponse]]:
    """Group *responses* by manager name in first-occurrence order."""
    groups: Dict[str, List[SurveyResponse]] = {}
    for response in responses:
        groups.setdefault(response.manager_name, []).append(response)
    return groups


def category_averages_for(
    responses: Iterable[SurveyResponse],
) -> Dict[Category, float]:
    """Return the unrounded average of each category bucket.

    Every non-null score of a bucket's competencies, across all
    *responses*, contributes one value to that bucket.
    """

    buckets: Dict[Category, List[int]] = {category: [] for category in Category}
    for response in responses:
        for category, keys in _CATEGORY_KEYS.items():
            for key in keys:
                value = response.score(key)
                if value is not None:
                    buckets[category].append(value)
    return {category: mean(values) for category, values in buckets.items()}


def _summarise(manager_name: str, responses: List[SurveyResponse]) -> ManagerSummary:
    averages = category_averages_for(responses)
    # Categories without any score are left out rather than counted as 0
    overall = mean([avg for avg in averages.values() if avg > 0])
    return ManagerSummary(
        manager_name=manager_name,
        total_responses=len(responses),
        avg_team_leadership=round(averages[Category.TEAM_LEADERSHIP], 2),
        avg_results_orientation=round(averages[Category.RESULTS_ORIENTATION], 2),
        avg_cultural_fit=round(averages[Category.CULTURAL_FIT], 2),
        overall_score=round(overall, 2),
        responses=tuple(responses),
    )


def manager_summaries(responses: Sequence[SurveyResponse]) -> List[ManagerSummary]:
    """Return one :class:`ManagerSummary` per manager, best overall first.

    Ties keep the order in which managers first appear in *responses*.
    """

    summaries = [
        _summarise(name, group) for name, group in group_by_manager(responses).items()
    ]
    summaries.sort(key=lambda s: s.overall_score, reverse=True)
    logger.debug(
        "Summarised %d managers from %d responses", len(summaries), len(responses)
    )
    return summaries


def competency_scores(responses: Sequence[SurveyResponse]) -> List[CompetencyScore]:
    """Return a score per catalog competency, in catalog order."""

    scores: List[CompetencyScore] = []
    for competency in COMPETENCIES:
        values = [
            v for v in (r.score(competency.key) for r in responses) if v is not None
        ]
        avg = mean(values)
        scores.append(
            CompetencyScore(
                name=competency.name,
                score=round(avg, 2),
                max_score=SCORE_SCALE_MAX,
                percentage=percent_of_scale(avg),
                key=competency.key,
                count=len(values),
                min_score=min(values) if values else 0,
                max_observed=max(values) if values else 0,
            )
        )
    return scores
