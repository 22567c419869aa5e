"""Tests for the streaming chat client (HTTP layer mocked)."""

from __future__ import annotations

import io
import json
import threading
from unittest.mock import MagicMock

import pytest
import requests

from appraisal360.chat_client import (
    ERROR_REPLY,
    ChatClient,
    ChatMessage,
    ChatSession,
    format_response,
)
from appraisal360.config import Settings
from appraisal360.exceptions import AssistantUnavailable

_SETTINGS = Settings(supabase_url="https://example.supabase.co", supabase_key="anon")


def _chunk(text: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]})


def _make_client(lines=None, *, ok=True, status=200, post_error=None):
    session = MagicMock()
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status
    resp.iter_lines.return_value = iter([line.encode("utf-8") for line in lines or []])
    if post_error is not None:
        session.post.side_effect = post_error
    else:
        session.post.return_value = resp
    return ChatClient(_SETTINGS, session=session), session, resp


def test_stream_reply_yields_deltas_until_done():
    client, session, resp = _make_client(
        [
            _chunk("Top "),
            "",
            ": keep-alive",
            "data: {not json",
            _chunk("performer"),
            "data: [DONE]",
            _chunk("ignored"),
        ]
    )

    deltas = list(client.stream_reply([ChatMessage("user", "Who?")], "ctx"))

    assert deltas == ["Top ", "performer"]
    resp.close.assert_called_once()
    _, kwargs = session.post.call_args
    assert session.post.call_args.args[0] == "https://example.supabase.co/functions/v1/chat"
    assert kwargs["json"] == {
        "messages": [{"role": "user", "content": "Who?"}],
        "dataContext": "ctx",
    }
    assert kwargs["headers"]["Authorization"] == "Bearer anon"
    assert kwargs["stream"] is True


def test_stream_skips_chunks_without_content():
    client, _, _ = _make_client(
        ['data: {"choices": []}', 'data: {"choices": [{"delta": {}}]}', _chunk("ok")]
    )
    assert list(client.stream_reply([], "")) == ["ok"]


def test_http_error_raises_assistant_unavailable():
    client, _, resp = _make_client(ok=False, status=500)

    with pytest.raises(AssistantUnavailable, match="500"):
        list(client.stream_reply([], ""))
    resp.close.assert_called_once()


def test_transport_error_raises_assistant_unavailable():
    client, _, _ = _make_client(post_error=requests.ConnectionError("refused"))

    with pytest.raises(AssistantUnavailable):
        list(client.stream_reply([], ""))


def test_cancel_stops_stream_and_closes_response():
    cancel = threading.Event()
    client, _, resp = _make_client([_chunk("a"), _chunk("b"), _chunk("c")])

    received = []
    for delta in client.stream_reply([], "", cancel):
        received.append(delta)
        cancel.set()

    assert received == ["a"]
    resp.close.assert_called_once()


def test_format_response_collapses_blank_lines():
    assert format_response("  a\n\n\n\nb\n\nc  ") == "a\n\nb\n\nc"


def test_chat_session_records_history():
    client, _, _ = _make_client([_chunk("Jane "), _chunk("leads.")])
    session = ChatSession(client=client, data_context="ctx")
    seen = []

    reply = session.ask("Who leads?", on_delta=seen.append)

    assert reply == "Jane leads."
    assert seen == ["Jane", "Jane leads."]
    assert session.messages == [
        ChatMessage("user", "Who leads?"),
        ChatMessage("assistant", "Jane leads."),
    ]


def test_chat_session_ignores_blank_question():
    client, session_mock, _ = _make_client()
    session = ChatSession(client=client, data_context="")

    assert session.ask("   ") is None
    assert session.messages == []
    session_mock.post.assert_not_called()


def test_chat_session_apologises_on_failure():
    client, _, _ = _make_client(ok=False, status=502)
    session = ChatSession(client=client, data_context="")

    reply = session.ask("Anything?")

    assert reply == ERROR_REPLY
    assert session.messages[-1] == ChatMessage("assistant", ERROR_REPLY)
    assert len(session.messages) == 2


def _make_event_stream(body: bytes) -> requests.Response:
    resp = requests.Response()
    resp.status_code = 200
    resp.headers["Content-Type"] = "text/event-stream"
    resp.raw = io.BytesIO(body)
    return resp


def test_stream_decodes_utf8_without_charset():
    text = "Dèmọ́la — café 360°"
    body = (
        "data: " + json.dumps({"choices": [{"delta": {"content": text}}]}, ensure_ascii=False)
        + "\n\ndata: [DONE]\n\n"
    ).encode("utf-8")
    session = MagicMock()
    session.post.return_value = _make_event_stream(body)
    client = ChatClient(_SETTINGS, session=session)

    assert list(client.stream_reply([], "")) == [text]
