"""Session-scoped dashboard state: base responses, filters and aggregates."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from appraisal360.analysis.aggregator import competency_scores, manager_summaries
from appraisal360.analysis.distribution import (
    relationship_distribution,
    score_distribution,
)
from appraisal360.analysis.feedback import feedback_themes
from appraisal360.analysis.ranking import overall_stats
from appraisal360.exceptions import DataUnavailable
from appraisal360.filters import (
    FilterState,
    apply_filters,
    unique_managers,
    unique_relationships,
)
from appraisal360.reporting.models import DashboardSnapshot
from appraisal360.store import ResponseStore
from appraisal360.survey_response import SurveyResponse

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load appraisal data"


def build_snapshot(
    responses: Sequence[SurveyResponse],
    filters: Optional[FilterState] = None,
    *,
    error: Optional[str] = None,
) -> DashboardSnapshot:
    """Filter *responses* and compute every aggregate from scratch.

    The function is read-only; it does not mutate *responses*.
    """

    filters = filters or FilterState()
    filtered = apply_filters(responses, filters)
    summaries = manager_summaries(filtered)

    return DashboardSnapshot(
        responses=filtered,
        manager_summaries=summaries,
        competency_scores=competency_scores(filtered),
        relationship_distribution=relationship_distribution(filtered),
        score_distribution=score_distribution(filtered),
        feedback_themes=feedback_themes(filtered),
        overall_stats=overall_stats(summaries, len(filtered)),
        unique_managers=unique_managers(responses),
        unique_relationships=unique_relationships(responses),
        error=error,
    )


class Dashboard:
    """Holds the fetched responses and the current filter selection.

    Aggregates are recomputed in full whenever the base collection or the
    filter state changes; the last snapshot is reused otherwise.
    """

    def __init__(
        self,
        store: Optional[ResponseStore] = None,
        responses: Optional[Sequence[SurveyResponse]] = None,
    ) -> None:
        self._store = store
        self._responses: List[SurveyResponse] = list(responses or [])
        self._filters = FilterState()
        self.error: Optional[str] = None
        self._cache: Optional[Tuple[int, FilterState, DashboardSnapshot]] = None

    # ------------------------------------------------------------------
    # Loading & filter state
    # ------------------------------------------------------------------
    def load(self) -> bool:
        """Fetch responses once from the store.

        Returns *True* on success.  On failure the collection is left empty
        and :pyattr:`error` holds a user-facing message.
        """

        if self._store is None:
            raise RuntimeError("Dashboard has no response store configured.")

        try:
            fetched = self._store.fetch_responses()
        except DataUnavailable as exc:
            logger.warning("Error loading appraisal data: %s", exc)
            self._responses = []
            self.error = LOAD_ERROR_MESSAGE
            self._cache = None
            return False

        self._responses = fetched
        self.error = None
        self._cache = None
        return True

    @property
    def all_responses(self) -> List[SurveyResponse]:
        return list(self._responses)

    @property
    def filters(self) -> FilterState:
        return self._filters

    def set_filters(self, filters: FilterState) -> None:
        self._filters = filters

    def reset_filters(self) -> None:
        self._filters = FilterState()

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------
    def snapshot(self) -> DashboardSnapshot:
        """Return the aggregates for the current responses and filters."""

        key = (id(self._responses), self._filters)
        if self._cache is not None and self._cache[:2] == key:
            return self._cache[2]

        snap = build_snapshot(self._responses, self._filters, error=self.error)
        logger.debug(
            "Recomputed snapshot: %d of %d responses after filtering",
            len(snap.responses),
            len(self._responses),
        )
        self._cache = (key[0], key[1], snap)
        return snap
