"""Ranking, tiering and drill-down views shared by the dashboard and exporters.

Exporters must call these helpers rather than re-deriving tiers or
top/bottom selections themselves, so every view classifies a score the same
way.
"""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from appraisal360.analysis.aggregator import competency_scores, mean
from appraisal360.analysis.distribution import relationship_breakdown
from appraisal360.analysis.feedback import feedback_themes
from appraisal360.reporting.models import (
    CategoryAverages,
    CompetencyScore,
    CompetencySplit,
    ManagerDetail,
    ManagerSummary,
    OverallStats,
    PerformerSplit,
    RankedManager,
    TierBucket,
)

__all__ = [
    "TIERS",
    "score_tier",
    "competency_status",
    "rank_managers",
    "top_and_bottom",
    "strengths_and_weaknesses",
    "tier_distribution",
    "priority_focus",
    "overall_stats",
    "category_averages",
    "manager_detail",
]


class Tier(NamedTuple):
    name: str
    floor: float
    label: str
    # Wording used for competencies rather than managers
    status: str


# Ordered from best to worst; the last tier catches everything below 2.0.
TIERS: tuple[Tier, ...] = (
    Tier("Exceptional", 3.5, "Exceptional (3.5+)", "Strength"),
    Tier("Strong", 3.0, "Strong (3.0-3.49)", "Good"),
    Tier("Developing", 2.5, "Developing (2.5-2.99)", "Developing"),
    Tier("Needs Improvement", 2.0, "Needs Improvement (2.0-2.49)", "Focus Area"),
    Tier("Critical", float("-inf"), "Critical (<2.0)", "Focus Area"),
)


def _tier_for(score: float) -> Tier:
    for tier in TIERS:
        if score >= tier.floor:
            return tier
    return TIERS[-1]  # pragma: no cover – NaN only


def score_tier(score: float) -> str:
    """Classify a manager score into its performance tier name."""
    return _tier_for(score).name


def competency_status(score: float) -> str:
    """Classify a competency average as Strength / Good / Developing / Focus Area."""
    return _tier_for(score).status


def rank_managers(summaries: Sequence[ManagerSummary]) -> List[RankedManager]:
    """Stable descending sort by overall score with 1-based ranks."""
    ordered = sorted(summaries, key=lambda s: s.overall_score, reverse=True)
    return [RankedManager(rank=i + 1, summary=s) for i, s in enumerate(ordered)]


def top_and_bottom(summaries: Sequence[ManagerSummary], count: int = 5) -> PerformerSplit:
    """Return the best *count* managers and the worst *count* (worst first).

    With fewer than ``2 * count`` managers the two lists overlap.
    """

    if count <= 0:
        return PerformerSplit()
    ranked = rank_managers(summaries)
    return PerformerSplit(top=ranked[:count], bottom=list(reversed(ranked[-count:])))


def strengths_and_weaknesses(
    competencies: Sequence[CompetencyScore], count: int = 3
) -> CompetencySplit:
    """Return the *count* highest-scoring and lowest-scoring competencies."""

    if count <= 0:
        return CompetencySplit()
    ordered = sorted(competencies, key=lambda c: c.score, reverse=True)
    return CompetencySplit(
        strengths=ordered[:count], weaknesses=list(reversed(ordered[-count:]))
    )


def tier_distribution(summaries: Sequence[ManagerSummary]) -> List[TierBucket]:
    """Bucket managers by :func:`score_tier`; every tier is always present."""

    buckets = {tier.name: TierBucket(tier=tier.name, label=tier.label) for tier in TIERS}
    for summary in summaries:
        bucket = buckets[score_tier(summary.overall_score)]
        bucket.count += 1
        bucket.managers.append(summary.manager_name)
    return list(buckets.values())


def priority_focus(summary: ManagerSummary) -> str:
    """Name of the category a manager should develop first (lowest average)."""

    tl = summary.avg_team_leadership
    ro = summary.avg_results_orientation
    cf = summary.avg_cultural_fit
    if tl < ro and tl < cf:
        return "Team Leadership"
    if ro < cf:
        return "Results Orientation"
    return "Cultural Fit"


def overall_stats(
    summaries: Sequence[ManagerSummary], total_responses: int
) -> OverallStats:
    """Headline figures; the average ignores managers without any score."""

    scored = [s.overall_score for s in summaries if s.overall_score > 0]
    leader: Optional[ManagerSummary] = summaries[0] if summaries else None
    return OverallStats(
        total_responses=total_responses,
        total_managers=len(summaries),
        avg_overall_score=round(mean(scored), 2),
        top_performer=leader.manager_name if leader else "N/A",
        top_score=leader.overall_score if leader else 0.0,
    )


def category_averages(summaries: Sequence[ManagerSummary]) -> CategoryAverages:
    """Organisation means over the managers evaluated in each category."""

    def _avg(values: List[float]) -> float:
        return round(mean([v for v in values if v > 0]), 2)

    return CategoryAverages(
        overall=_avg([s.overall_score for s in summaries]),
        team_leadership=_avg([s.avg_team_leadership for s in summaries]),
        results_orientation=_avg([s.avg_results_orientation for s in summaries]),
        cultural_fit=_avg([s.avg_cultural_fit for s in summaries]),
    )


def manager_detail(summary: ManagerSummary, org_average: float) -> ManagerDetail:
    """Build the drill-down view for one manager from its own responses."""

    competencies = competency_scores(summary.responses)
    scored = [c for c in competencies if c.count]
    reviewers = relationship_breakdown(summary.responses)
    return ManagerDetail(
        summary=summary,
        tier=score_tier(summary.overall_score),
        competencies=competencies,
        themes=feedback_themes(summary.responses),
        reviewers=reviewers,
        strongest=max(scored, key=lambda c: c.score) if scored else None,
        weakest=min(scored, key=lambda c: c.score) if scored else None,
        primary_reviewers=reviewers[0].relationship if reviewers else "N/A",
        priority_focus=priority_focus(summary),
        gap_from_average=round(summary.overall_score - org_average, 2),
    )
