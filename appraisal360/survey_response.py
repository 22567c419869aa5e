"""Read model for a single submitted 360° feedback form."""
from __future__ import annotations

import datetime
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from appraisal360.competencies import SCORE_KEYS

__all__ = ["SurveyResponse", "UNKNOWN_RELATIONSHIP", "TEXT_FIELDS"]

# Sentinel used wherever a response carries no reviewer relationship.
UNKNOWN_RELATIONSHIP = "Unknown"

TEXT_FIELDS: Tuple[str, ...] = (
    "stop_doing",
    "start_doing",
    "continue_doing",
    "team_leadership_comments",
    "results_orientation_comments",
    "cultural_fit_comments",
)


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _to_datetime(value: Any) -> Optional[datetime.datetime]:
    if value is None or isinstance(value, datetime.datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    # Postgres may emit a trailing "Z" which fromisoformat rejects before 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class SurveyResponse:
    """One submitted feedback form about a manager.

    Instances are immutable once fetched.  Every competency score is an
    optional integer on a 1–5 scale; free-text answers are optional strings.
    """

    id: str
    manager_name: str
    relationship: Optional[str] = None
    response_number: Optional[int] = None
    timestamp: Optional[datetime.datetime] = None
    created_at: Optional[datetime.datetime] = None

    # Team Leadership
    empowers_team_score: Optional[int] = None
    mentors_coaches_score: Optional[int] = None
    effective_direction_score: Optional[int] = None
    establishes_rapport_score: Optional[int] = None
    sets_clear_goals_score: Optional[int] = None
    # Results Orientation
    open_to_ideas_score: Optional[int] = None
    sense_of_urgency_score: Optional[int] = None
    analyzes_change_score: Optional[int] = None
    final_say_score: Optional[int] = None
    # Cultural Fit
    confidence_integrity_score: Optional[int] = None
    patient_humble_score: Optional[int] = None
    flat_collaborative_score: Optional[int] = None
    approachable_score: Optional[int] = None

    # Qualitative feedback
    stop_doing: Optional[str] = None
    start_doing: Optional[str] = None
    continue_doing: Optional[str] = None
    team_leadership_comments: Optional[str] = None
    results_orientation_comments: Optional[str] = None
    cultural_fit_comments: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.manager_name or not self.manager_name.strip():
            raise ValueError(f"Response {self.id!r} has no manager name.")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def relationship_label(self) -> str:
        """Relationship value, or ``"Unknown"`` when the reviewer gave none."""
        return self.relationship or UNKNOWN_RELATIONSHIP

    def score(self, key: str) -> Optional[int]:
        """Return the competency score stored under *key* (``None`` if unset)."""
        return getattr(self, key, None)

    def iter_scores(self) -> Iterator[Tuple[str, int]]:
        """Yield ``(key, score)`` for every non-null competency score."""
        for key in SCORE_KEYS:
            value = getattr(self, key)
            if value is not None:
                yield key, value

    def mean_score(self) -> Optional[float]:
        """Mean of all non-null competency scores, ``None`` if there are none."""
        values = [v for _, v in self.iter_scores()]
        if not values:
            return None
        return sum(values) / len(values)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SurveyResponse":
        """Build a response from a raw store row.

        Unknown columns are ignored; numeric strings are coerced to ``int``;
        blank strings become ``None``.

        Raises
        ------
        ValueError
            If the row has no manager name.
        """

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for name in known:
            if name not in row:
                continue
            value = row[name]
            if name in SCORE_KEYS or name == "response_number":
                kwargs[name] = _to_int(value)
            elif name in ("timestamp", "created_at"):
                kwargs[name] = _to_datetime(value)
            elif name == "relationship" or name in TEXT_FIELDS:
                kwargs[name] = _to_text(value)
            else:
                kwargs[name] = "" if value is None else str(value)

        kwargs.setdefault("id", "")
        kwargs.setdefault("manager_name", "")
        return cls(**kwargs)
