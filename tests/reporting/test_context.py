"""Unit tests for build_report_context."""
from __future__ import annotations

from datetime import datetime, timezone

from appraisal360.reporting.context import build_report_context
from appraisal360.reporting.dashboard import build_snapshot

_WHEN = datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc)


def test_context_core_fields(team_responses) -> None:
    ctx = build_report_context(build_snapshot(team_responses), generated_at=_WHEN)

    assert ctx.title == "360° Performance Analytics"
    assert ctx.date == "2025-03-14"
    assert ctx.total_managers == 3
    assert ctx.total_responses == 4
    assert ctx.avg_responses_per_manager == 1.3
    assert [r.rank for r in ctx.rankings] == [1, 2, 3]
    assert [d.name for d in ctx.details] == [r.summary.manager_name for r in ctx.rankings]


def test_context_views_are_consistent(team_responses) -> None:
    ctx = build_report_context(build_snapshot(team_responses), generated_at=_WHEN)

    assert len(ctx.summary_performers.top) == 3
    assert ctx.document_performers.bottom[0].summary is ctx.rankings[-1].summary
    assert len(ctx.competency_split.strengths) == 3
    assert ctx.ranked_competencies[0].score >= ctx.ranked_competencies[-1].score
    assert sum(t.count for t in ctx.tiers) == 3
    # Comments keep duplicates, unlike the deduplicated themes
    assert len(ctx.comments.stop_doing) == 2


def test_findings_and_recommendations(team_responses) -> None:
    ctx = build_report_context(build_snapshot(team_responses), generated_at=_WHEN)
    top = ctx.rankings[0].summary

    assert ctx.findings[0].startswith("• The organization has 3 managers")
    assert f"• Top performer: {top.manager_name} with score {top.overall_score:.2f}" in ctx.findings
    assert ctx.findings[-1] == "• Total of 4 feedback responses collected across all managers"
    assert len(ctx.recommendations) == 5
    assert ctx.recommendations[-1] == "Increase feedback frequency to track improvement over time"


def test_empty_snapshot_context() -> None:
    ctx = build_report_context(build_snapshot([]), generated_at=_WHEN)

    assert ctx.total_managers == 0
    assert ctx.avg_responses_per_manager == 0.0
    assert ctx.details == []
    assert not any(line.startswith("• Top performer") for line in ctx.findings)
    assert ctx.recommendations[1].startswith("Create mentorship pairing")
