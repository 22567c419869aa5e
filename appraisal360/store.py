"""Read-only accessor for survey responses held in the hosted backend.

The backend exposes the responses table through a PostgREST-style API:

    GET <SUPABASE_URL>/rest/v1/<table>?select=*&order=manager_name.asc

The whole table is read in one request (no pagination) which assumes the
dataset fits comfortably in memory.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from appraisal360.config import Settings
from appraisal360.exceptions import DataUnavailable
from appraisal360.survey_response import SurveyResponse

logger = logging.getLogger(__name__)


class ResponseStore:
    """Fetches :class:`SurveyResponse` rows; one fresh read per call."""

    def __init__(
        self, settings: Settings, session: Optional[requests.Session] = None
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def fetch_responses(self) -> List[SurveyResponse]:
        """Return every response ordered by manager name ascending.

        The list is only returned once every row parsed successfully, so
        callers never see a partially populated collection.

        Raises
        ------
        DataUnavailable
            On transport errors, non-2xx statuses or malformed payloads.
        """

        url = self._settings.rest_url
        logger.debug("Fetching responses from %s", url)
        try:
            resp = self._session.get(
                url,
                params={"select": "*", "order": "manager_name.asc"},
                headers=self._settings.auth_headers(),
                timeout=self._settings.request_timeout,
            )
            resp.raise_for_status()
            payload: Any = resp.json()
        except requests.RequestException as exc:
            raise DataUnavailable(f"Failed to fetch responses: {exc}") from exc
        except ValueError as exc:  # JSON decoding
            raise DataUnavailable("Backend returned a non-JSON payload") from exc

        if not isinstance(payload, list):
            raise DataUnavailable(
                f"Expected a list of rows, got {type(payload).__name__}"
            )

        responses: List[SurveyResponse] = []
        for index, row in enumerate(payload):
            if not isinstance(row, dict):
                raise DataUnavailable(f"Row {index} is not an object")
            try:
                responses.append(SurveyResponse.from_row(row))
            except ValueError as exc:
                raise DataUnavailable(f"Row {index} is invalid: {exc}") from exc

        responses.sort(key=lambda r: r.manager_name)
        logger.info("Fetched %d survey responses", len(responses))
        return responses
