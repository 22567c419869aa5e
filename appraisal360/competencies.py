"""Fixed competency catalog used by every aggregate and report."""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Tuple

__all__ = [
    "Category",
    "Competency",
    "COMPETENCIES",
    "SCORE_KEYS",
    "SCORE_SCALE_MAX",
    "SCORE_SCALE_MIN",
    "competencies_in",
]

# Single percentage denominator for every view (dashboard and exports).
SCORE_SCALE_MAX: int = 5
SCORE_SCALE_MIN: int = 1


class Category(str, Enum):
    """The three competency buckets a manager is evaluated on."""

    TEAM_LEADERSHIP = "Team Leadership"
    RESULTS_ORIENTATION = "Results Orientation"
    CULTURAL_FIT = "Cultural Fit"


class Competency(NamedTuple):
    key: str
    name: str
    category: Category


COMPETENCIES: Tuple[Competency, ...] = (
    Competency("empowers_team_score", "Empowers Team", Category.TEAM_LEADERSHIP),
    Competency("mentors_coaches_score", "Mentors & Coaches", Category.TEAM_LEADERSHIP),
    Competency(
        "effective_direction_score", "Effective Direction", Category.TEAM_LEADERSHIP
    ),
    Competency(
        "establishes_rapport_score", "Establishes Rapport", Category.TEAM_LEADERSHIP
    ),
    Competency("sets_clear_goals_score", "Sets Clear Goals", Category.TEAM_LEADERSHIP),
    Competency("open_to_ideas_score", "Open to Ideas", Category.RESULTS_ORIENTATION),
    Competency(
        "sense_of_urgency_score", "Sense of Urgency", Category.RESULTS_ORIENTATION
    ),
    Competency("analyzes_change_score", "Analyzes Change", Category.RESULTS_ORIENTATION),
    Competency("final_say_score", "Final Say", Category.RESULTS_ORIENTATION),
    Competency(
        "confidence_integrity_score", "Confidence & Integrity", Category.CULTURAL_FIT
    ),
    Competency("patient_humble_score", "Patient & Humble", Category.CULTURAL_FIT),
    Competency(
        "flat_collaborative_score", "Flat & Collaborative", Category.CULTURAL_FIT
    ),
    Competency("approachable_score", "Approachable", Category.CULTURAL_FIT),
)

SCORE_KEYS: Tuple[str, ...] = tuple(c.key for c in COMPETENCIES)


def competencies_in(category: Category) -> Tuple[Competency, ...]:
    """Return the catalog entries belonging to *category*, in catalog order."""
    return tuple(c for c in COMPETENCIES if c.category is category)
