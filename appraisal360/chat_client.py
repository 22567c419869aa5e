"""Streaming client for the conversational analytics endpoint.

The endpoint accepts ``{"messages": [...], "dataContext": "..."}`` and
answers with server-sent events, one JSON chunk per ``data:`` line:

    data: {"choices": [{"delta": {"content": "Top performer is"}}]}
    data: [DONE]

Prompting and model selection happen server-side; this module only relays
the conversation and reassembles the streamed text.
"""
from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import requests

from appraisal360.config import Settings
from appraisal360.exceptions import AssistantUnavailable

logger = logging.getLogger(__name__)

__all__ = ["ChatClient", "ChatMessage", "ChatSession", "ERROR_REPLY"]

_DATA_PREFIX = "data: "
_DONE_SENTINEL = "[DONE]"
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

ERROR_REPLY = "I apologize, but I encountered an error. Please try again."


def format_response(text: str) -> str:
    """Collapse runs of blank lines and trim surrounding whitespace."""
    return _EXCESS_NEWLINES_RE.sub("\n\n", text).strip()


def _parse_delta(payload: str) -> Optional[str]:
    """Return the content delta carried by one event payload, if any."""

    try:
        data: Any = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed stream fragment: %.80s", payload)
        return None
    try:
        content = data["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return content or None


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChatClient:
    """Relay a conversation to the streaming chat function."""

    def __init__(
        self, settings: Settings, session: Optional[requests.Session] = None
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def stream_reply(
        self,
        messages: List[ChatMessage],
        data_context: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[str]:
        """Yield content deltas as they arrive.

        Setting *cancel_event* stops the iteration at the next received line
        and closes the underlying HTTP response.

        Raises
        ------
        AssistantUnavailable
            If the request fails, the endpoint answers with a non-2xx status
            or the connection drops mid-stream.
        """

        body = {
            "messages": [m.to_dict() for m in messages],
            "dataContext": data_context,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.supabase_key}",
        }
        try:
            resp = self._session.post(
                self._settings.chat_url,
                json=body,
                headers=headers,
                stream=True,
                timeout=self._settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise AssistantUnavailable(f"Chat request failed: {exc}") from exc

        try:
            if not resp.ok:
                raise AssistantUnavailable(
                    f"Chat endpoint returned HTTP {resp.status_code}"
                )
            # Event streams are UTF-8; requests would fall back to ISO-8859-1
            for raw in resp.iter_lines():
                if cancel_event is not None and cancel_event.is_set():
                    logger.debug("Chat stream cancelled by caller")
                    return
                line = raw.decode("utf-8", errors="replace")
                if not line or not line.startswith(_DATA_PREFIX):
                    continue
                payload = line[len(_DATA_PREFIX) :].strip()
                if payload == _DONE_SENTINEL:
                    return
                delta = _parse_delta(payload)
                if delta:
                    yield delta
        except requests.RequestException as exc:
            raise AssistantUnavailable(f"Chat stream interrupted: {exc}") from exc
        finally:
            resp.close()


@dataclass
class ChatSession:
    """Conversation history plus the data context it is grounded on."""

    client: ChatClient
    data_context: str
    messages: List[ChatMessage] = field(default_factory=list)
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        """Abandon the reply currently streaming (if any)."""
        self.cancel_event.set()

    def ask(self, question: str, on_delta=None) -> Optional[str]:
        """Send *question* and return the assistant's (formatted) reply.

        Blank questions are ignored and return *None*.  *on_delta* is called
        with the accumulated reply after every received chunk.  Endpoint
        failures never raise; they are recorded as a single apology message.
        """

        if not question.strip():
            return None

        self.cancel_event.clear()
        self.messages.append(ChatMessage("user", question))

        content = ""
        try:
            for delta in self.client.stream_reply(
                self.messages, self.data_context, self.cancel_event
            ):
                content += delta
                if on_delta is not None:
                    on_delta(format_response(content))
        except AssistantUnavailable as exc:
            logger.warning("Assistant unavailable: %s", exc)
            self.messages.append(ChatMessage("assistant", ERROR_REPLY))
            return ERROR_REPLY

        reply = format_response(content)
        self.messages.append(ChatMessage("assistant", reply))
        return reply
