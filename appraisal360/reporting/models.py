"""Data structures produced by the aggregation engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from appraisal360.competencies import SCORE_SCALE_MAX
from appraisal360.survey_response import SurveyResponse


def percent_of_scale(score: float, digits: int = 1) -> float:
    """Return *score* as a percentage of the 5-point scale."""
    return round(score / SCORE_SCALE_MAX * 100, digits)


@dataclass(slots=True)
class ManagerSummary:
    """Per-manager category averages over the filtered responses."""

    manager_name: str
    total_responses: int
    avg_team_leadership: float
    avg_results_orientation: float
    avg_cultural_fit: float
    overall_score: float
    # Owned copy so summaries stay valid when the filter changes
    responses: Tuple[SurveyResponse, ...] = ()

    @property
    def percentage(self) -> float:
        return percent_of_scale(self.overall_score)


@dataclass(slots=True)
class CompetencyScore:
    """Mean score of one catalog competency across a response set."""

    name: str
    score: float
    max_score: int = SCORE_SCALE_MAX
    percentage: float = 0.0
    key: str = ""
    count: int = 0
    min_score: int = 0
    max_observed: int = 0

    @property
    def spread(self) -> int:
        return self.max_observed - self.min_score


@dataclass(slots=True)
class FeedbackThemes:
    """Deduplicated stop/start/continue entries."""

    stop_doing: List[str] = field(default_factory=list)
    start_doing: List[str] = field(default_factory=list)
    continue_doing: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.stop_doing or self.start_doing or self.continue_doing)


@dataclass(slots=True)
class CommentCollection:
    """Verbatim ``"<manager>: <text>"`` entries for every free-text field."""

    stop_doing: List[str] = field(default_factory=list)
    start_doing: List[str] = field(default_factory=list)
    continue_doing: List[str] = field(default_factory=list)
    team_leadership: List[str] = field(default_factory=list)
    results_orientation: List[str] = field(default_factory=list)
    cultural_fit: List[str] = field(default_factory=list)


@dataclass(slots=True)
class OverallStats:
    total_responses: int = 0
    total_managers: int = 0
    avg_overall_score: float = 0.0
    top_performer: str = "N/A"
    top_score: float = 0.0


@dataclass(slots=True)
class CategoryAverages:
    """Organisation-level means of the per-manager category averages."""

    overall: float = 0.0
    team_leadership: float = 0.0
    results_orientation: float = 0.0
    cultural_fit: float = 0.0

    def rows(self) -> List[Tuple[str, float]]:
        return [
            ("Overall Performance", self.overall),
            ("Team Leadership", self.team_leadership),
            ("Results Orientation", self.results_orientation),
            ("Cultural Fit", self.cultural_fit),
        ]


@dataclass(slots=True)
class RankedManager:
    rank: int
    summary: ManagerSummary


@dataclass(slots=True)
class PerformerSplit:
    top: List[RankedManager] = field(default_factory=list)
    # Worst first
    bottom: List[RankedManager] = field(default_factory=list)


@dataclass(slots=True)
class CompetencySplit:
    strengths: List[CompetencyScore] = field(default_factory=list)
    # Worst first
    weaknesses: List[CompetencyScore] = field(default_factory=list)


@dataclass(slots=True)
class TierBucket:
    tier: str
    label: str
    count: int = 0
    managers: List[str] = field(default_factory=list)

    def share_of(self, total: int) -> float:
        return round(self.count / total * 100, 1) if total else 0.0


@dataclass(slots=True)
class RelationshipShare:
    relationship: str
    count: int
    percentage: float


@dataclass(slots=True)
class ManagerDetail:
    """Drill-down view for a single manager."""

    summary: ManagerSummary
    tier: str
    competencies: List[CompetencyScore]
    themes: FeedbackThemes
    reviewers: List[RelationshipShare]
    strongest: Optional[CompetencyScore]
    weakest: Optional[CompetencyScore]
    primary_reviewers: str
    priority_focus: str
    gap_from_average: float

    @property
    def name(self) -> str:
        return self.summary.manager_name


@dataclass(slots=True)
class DashboardSnapshot:
    """Every aggregate derived from one filtered response set."""

    responses: List[SurveyResponse]
    manager_summaries: List[ManagerSummary]
    competency_scores: List[CompetencyScore]
    relationship_distribution: Dict[str, int]
    score_distribution: Dict[int, int]
    feedback_themes: FeedbackThemes
    overall_stats: OverallStats
    unique_managers: List[str] = field(default_factory=list)
    unique_relationships: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` without the raw responses."""
        data = asdict(self)
        data.pop("responses")
        for summary in data["manager_summaries"]:
            summary.pop("responses")
        return data
