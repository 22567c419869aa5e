"""Tests for the CLI entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from appraisal360 import main as cli
from appraisal360.exceptions import DataUnavailable
from appraisal360.filters import FilterState


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon")
    # Keep a developer's .env out of the test run
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)


def _patch_store(responses=None, error=None):
    store = MagicMock()
    if error is not None:
        store.fetch_responses.side_effect = error
    else:
        store.fetch_responses.return_value = list(responses or [])
    return patch.object(cli, "ResponseStore", return_value=store)


def test_filters_from_args():
    args = cli.build_parser().parse_args(
        ["--manager", "Jane", "--manager", "Bob", "--min-score", "3", "summary"]
    )

    state = cli.filters_from_args(args)

    assert state == FilterState(
        managers={"Jane", "Bob"}, score_range=(3.0, float("inf"))
    )


def test_filters_from_args_without_options():
    args = cli.build_parser().parse_args(["summary"])
    assert cli.filters_from_args(args).is_empty


def test_summary_prints_snapshot(team_responses, capsys):
    with _patch_store(team_responses):
        status = cli.main(["--relationship", "Peer", "summary"])

    out = capsys.readouterr().out
    assert status == 0
    assert "- Total responses: 2" in out


def test_missing_configuration_exits_nonzero(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL")
    assert cli.main(["summary"]) == 1


def test_inverted_score_range_exits_nonzero():
    assert cli.main(["--min-score", "4", "--max-score", "2", "summary"]) == 1


def test_export_refuses_when_load_failed(capsys):
    with _patch_store(error=DataUnavailable("offline")):
        status = cli.main(["export", "xlsx"])

    assert status == 1
    assert "Failed to load appraisal data" in capsys.readouterr().err


def test_export_all_writes_both_artifacts(team_responses, tmp_path, capsys):
    with _patch_store(team_responses):
        status = cli.main(["export", "all", "--output-dir", str(tmp_path)])

    assert status == 0
    written = capsys.readouterr().out.split()
    assert [p.rsplit(".", 1)[-1] for p in written] == ["xlsx", "pdf"]
    assert len(list(tmp_path.iterdir())) == 2


def test_ask_prints_reply(team_responses, capsys):
    client = MagicMock()
    client.stream_reply.return_value = iter(["Cara ", "Lee"])
    with _patch_store(team_responses), patch.object(
        cli, "ChatClient", return_value=client
    ):
        status = cli.main(["ask", "Who is top?"])

    assert status == 0
    assert capsys.readouterr().out.strip() == "Cara Lee"
    _, data_context, _ = client.stream_reply.call_args.args
    assert "Cara Lee" in data_context
