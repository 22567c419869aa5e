"""Runtime settings for the store accessor and the chat client.

Credentials are passed explicitly to :class:`~appraisal360.store.ResponseStore`
and :class:`~appraisal360.chat_client.ChatClient` through a :class:`Settings`
instance instead of being read from process-wide globals at import time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from appraisal360.exceptions import ConfigurationError

__all__ = ["Settings"]

_DEFAULT_TABLE = "demo_appraisal_responses"
_DEFAULT_CHAT_FUNCTION = "chat"


def _optional_float(raw: Optional[str], name: str) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    """Connection settings for the hosted backend."""

    supabase_url: str
    supabase_key: str
    responses_table: str = _DEFAULT_TABLE
    chat_function: str = _DEFAULT_CHAT_FUNCTION
    # None == wait indefinitely
    request_timeout: Optional[float] = None
    output_dir: str = "."

    @property
    def rest_url(self) -> str:
        """Endpoint of the responses table in the REST API."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1/{self.responses_table}"

    @property
    def chat_url(self) -> str:
        """Endpoint of the streaming chat function."""
        return f"{self.supabase_url.rstrip('/')}/functions/v1/{self.chat_function}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from *environ* (defaults to :data:`os.environ`).

        Raises
        ------
        ConfigurationError
            If ``SUPABASE_URL`` or ``SUPABASE_KEY`` is missing or empty.
        """

        env = os.environ if environ is None else environ

        url = env.get("SUPABASE_URL", "").strip()
        if not url:
            raise ConfigurationError("SUPABASE_URL environment variable is not set.")
        key = env.get("SUPABASE_KEY", "").strip()
        if not key:
            raise ConfigurationError("SUPABASE_KEY environment variable is not set.")

        return cls(
            supabase_url=url,
            supabase_key=key,
            responses_table=env.get("RESPONSES_TABLE") or _DEFAULT_TABLE,
            chat_function=env.get("CHAT_FUNCTION") or _DEFAULT_CHAT_FUNCTION,
            request_timeout=_optional_float(
                env.get("REQUEST_TIMEOUT"), "REQUEST_TIMEOUT"
            ),
            output_dir=env.get("REPORT_OUTPUT_DIR") or ".",
        )

    def auth_headers(self) -> dict[str, str]:
        return {
            "apikey": self.supabase_key,
            "Authorization": f"Bearer {self.supabase_key}",
        }
