"""Context dataclass for the report exporters.

This module defines :class:`ReportContext`, a typed container holding every
derived view the workbook and document exporters print.  The exporters are
pure formatting layers: rankings, tiers, strengths and per-manager details
are all computed here through :mod:`appraisal360.analysis.ranking`, once.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime as _dt
from datetime import timezone as _tz
from typing import List, Optional

from appraisal360.analysis.feedback import collect_comments
from appraisal360.analysis.distribution import relationship_breakdown
from appraisal360.analysis.ranking import (
    category_averages,
    manager_detail,
    rank_managers,
    strengths_and_weaknesses,
    tier_distribution,
    top_and_bottom,
)
from appraisal360.reporting import config
from appraisal360.reporting.models import (
    CategoryAverages,
    CommentCollection,
    CompetencyScore,
    CompetencySplit,
    DashboardSnapshot,
    ManagerDetail,
    PerformerSplit,
    RankedManager,
    RelationshipShare,
    TierBucket,
)
from appraisal360.reporting.render import render_lines
from appraisal360.survey_response import SurveyResponse

__all__ = ["ReportContext", "build_report_context"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the exporters."""

    # Header & meta
    title: str
    generated_at: _dt

    # Population
    responses: List[SurveyResponse]
    rankings: List[RankedManager]
    averages: CategoryAverages

    # Derived views
    summary_performers: PerformerSplit
    document_performers: PerformerSplit
    competencies: List[CompetencyScore]
    competency_split: CompetencySplit
    relationships: List[RelationshipShare]
    tiers: List[TierBucket]
    details: List[ManagerDetail]
    comments: CommentCollection

    # Text sections
    findings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def date(self) -> str:
        """ISO-8601 date used in artifact file names."""
        return self.generated_at.date().isoformat()

    @property
    def total_managers(self) -> int:
        return len(self.rankings)

    @property
    def total_responses(self) -> int:
        return len(self.responses)

    @property
    def avg_responses_per_manager(self) -> float:
        if not self.rankings:
            return 0.0
        return round(self.total_responses / self.total_managers, 1)

    @property
    def ranked_competencies(self) -> List[CompetencyScore]:
        """Competencies sorted by average, best first."""
        return sorted(self.competencies, key=lambda c: c.score, reverse=True)


# ---------------------------------------------------------------------------
# Conversion helper
# ---------------------------------------------------------------------------
def build_report_context(
    snapshot: DashboardSnapshot, *, generated_at: Optional[_dt] = None
) -> ReportContext:
    """Convert a :class:`DashboardSnapshot` into a :class:`ReportContext`.

    The function is *pure* – it does not mutate *snapshot*.
    """

    summaries = snapshot.manager_summaries
    rankings = rank_managers(summaries)
    averages = category_averages(summaries)
    split = strengths_and_weaknesses(snapshot.competency_scores, config.MAX_STRENGTHS)
    document_performers = top_and_bottom(summaries, config.DOCUMENT_PERFORMERS)
    tiers = tier_distribution(summaries)

    details = [manager_detail(r.summary, averages.overall) for r in rankings]

    strength = split.strengths[0] if split.strengths else None
    weakness = split.weaknesses[0] if split.weaknesses else None
    exceptional = next(t for t in tiers if t.tier == "Exceptional")
    top = rankings[0].summary if rankings else None

    findings = render_lines(
        "findings.txt.j2",
        total_managers=len(summaries),
        total_responses=len(snapshot.responses),
        averages=averages,
        exceptional=exceptional,
        top=top,
        strength=strength,
        weakness=weakness,
    )
    recommendations = render_lines(
        "recommendations.txt.j2",
        strength=strength,
        weakness=weakness,
        development_count=len(document_performers.bottom),
    )

    logger.debug(
        "Built report context: %d managers, %d responses",
        len(summaries),
        len(snapshot.responses),
    )

    return ReportContext(
        title=config.REPORT_TITLE,
        generated_at=generated_at or _dt.now(tz=_tz.utc),
        responses=list(snapshot.responses),
        rankings=rankings,
        averages=averages,
        summary_performers=top_and_bottom(summaries, config.SUMMARY_PERFORMERS),
        document_performers=document_performers,
        competencies=list(snapshot.competency_scores),
        competency_split=split,
        relationships=relationship_breakdown(snapshot.responses),
        tiers=tiers,
        details=details,
        comments=collect_comments(snapshot.responses),
        findings=findings,
        recommendations=recommendations,
    )
