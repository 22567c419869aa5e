"""Narrow a response collection before aggregation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from appraisal360.survey_response import SurveyResponse

__all__ = [
    "FilterState",
    "apply_filters",
    "unique_managers",
    "unique_relationships",
]


@dataclass(frozen=True)
class FilterState:
    """User-controlled filter selection.

    Empty manager/relationship sets and a ``None`` score range mean "no
    restriction", so ``FilterState()`` is the identity filter.
    """

    managers: FrozenSet[str] = field(default_factory=frozenset)
    relationships: FrozenSet[str] = field(default_factory=frozenset)
    score_range: Optional[Tuple[float, float]] = None

    def __post_init__(self) -> None:
        # Accept any iterable from callers (lists from the CLI, sets in tests)
        object.__setattr__(self, "managers", frozenset(self.managers))
        object.__setattr__(self, "relationships", frozenset(self.relationships))
        if self.score_range is not None:
            low, high = self.score_range
            if low > high:
                raise ValueError(f"Invalid score range: {low} > {high}")
            object.__setattr__(self, "score_range", (float(low), float(high)))

    @property
    def is_empty(self) -> bool:
        return not self.managers and not self.relationships and self.score_range is None

    def matches(self, response: SurveyResponse) -> bool:
        """Return *True* if *response* passes every active restriction."""
        if self.managers and response.manager_name not in self.managers:
            return False
        if self.relationships and response.relationship_label not in self.relationships:
            return False
        if self.score_range is not None:
            mean = response.mean_score()
            if mean is None:
                return False
            low, high = self.score_range
            if not low <= mean <= high:
                return False
        return True


def apply_filters(
    responses: Iterable[SurveyResponse], filters: FilterState
) -> List[SurveyResponse]:
    """Return the responses that pass *filters*, preserving input order."""
    return [r for r in responses if filters.matches(r)]


def unique_managers(responses: Sequence[SurveyResponse]) -> List[str]:
    """Sorted distinct manager names (filter options)."""
    return sorted({r.manager_name for r in responses})


def unique_relationships(responses: Sequence[SurveyResponse]) -> List[str]:
    """Distinct non-empty relationship values in first-seen order."""
    seen: dict[str, None] = {}
    for r in responses:
        if r.relationship:
            seen.setdefault(r.relationship, None)
    return list(seen)
