"""Count-based distributions over a response set."""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from appraisal360.competencies import SCORE_KEYS, SCORE_SCALE_MAX, SCORE_SCALE_MIN
from appraisal360.reporting.models import RelationshipShare
from appraisal360.survey_response import SurveyResponse

__all__ = [
    "relationship_distribution",
    "relationship_breakdown",
    "score_distribution",
]


def relationship_distribution(responses: Sequence[SurveyResponse]) -> Dict[str, int]:
    """Return a mapping relationship→count (absent relationships as ``Unknown``)."""
    counts: Dict[str, int] = {}
    for r in responses:
        label = r.relationship_label
        counts[label] = counts.get(label, 0) + 1
    return counts


def relationship_breakdown(
    responses: Sequence[SurveyResponse],
) -> List[RelationshipShare]:
    """Relationship counts with their share of *responses*, largest first."""

    total = len(responses)
    counts = relationship_distribution(responses)
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        RelationshipShare(
            relationship=label,
            count=count,
            percentage=round(count / total * 100, 1) if total else 0.0,
        )
        for label, count in ordered
    ]


def score_distribution(responses: Sequence[SurveyResponse]) -> Dict[int, int]:
    """Histogram of every individual catalog score over the buckets 1–5.

    Each non-null score field counts once; values outside the scale are
    ignored.
    """

    counts: Counter[int] = Counter()
    for r in responses:
        for key in SCORE_KEYS:
            value = r.score(key)
            if value is not None and SCORE_SCALE_MIN <= value <= SCORE_SCALE_MAX:
                counts[value] += 1
    return {bucket: counts[bucket] for bucket in range(SCORE_SCALE_MIN, SCORE_SCALE_MAX + 1)}
