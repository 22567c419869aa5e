"""Qualitative feedback extraction (stop / start / continue and comments)."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

from appraisal360.reporting.models import CommentCollection, FeedbackThemes
from appraisal360.survey_response import SurveyResponse

__all__ = ["feedback_themes", "collect_comments"]

_PROMPT_FIELDS = ("stop_doing", "start_doing", "continue_doing")

_COMMENT_FIELDS: Dict[str, str] = {
    "stop_doing": "stop_doing",
    "start_doing": "start_doing",
    "continue_doing": "continue_doing",
    "team_leadership_comments": "team_leadership",
    "results_orientation_comments": "results_orientation",
    "cultural_fit_comments": "cultural_fit",
}


def feedback_themes(
    responses: Sequence[SurveyResponse], *, independent: bool = False
) -> FeedbackThemes:
    """Return deduplicated stop/start/continue entries.

    Entries are compared on their trimmed, lower-cased text and kept in
    trimmed original casing.  By default a single seen-set spans all three
    prompts, so a sentence given as both "stop" and "start" is kept only in
    the field processed first (stop, then start, then continue, response by
    response).  Pass ``independent=True`` to deduplicate each prompt on its
    own.
    """

    themes = FeedbackThemes()
    shared: Set[str] = set()
    per_field: Dict[str, Set[str]] = {name: set() for name in _PROMPT_FIELDS}

    for r in responses:
        for name in _PROMPT_FIELDS:
            text: Optional[str] = getattr(r, name)
            if not text or not text.strip():
                continue
            trimmed = text.strip()
            normalized = trimmed.lower()
            seen = per_field[name] if independent else shared
            if normalized in seen:
                continue
            seen.add(normalized)
            getattr(themes, name).append(trimmed)

    return themes


def collect_comments(responses: Sequence[SurveyResponse]) -> CommentCollection:
    """Compile every free-text answer as ``"<manager>: <text>"`` in response order."""

    collection = CommentCollection()
    for r in responses:
        for source, target in _COMMENT_FIELDS.items():
            text: Optional[str] = getattr(r, source)
            if text and text.strip():
                entries: List[str] = getattr(collection, target)
                entries.append(f"{r.manager_name}: {text}")
    return collection
