"""Multi-sheet spreadsheet export built with openpyxl."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from appraisal360.analysis.ranking import competency_status, score_tier
from appraisal360.competencies import COMPETENCIES, SCORE_SCALE_MAX
from appraisal360.exporters.base import PathLike, artifact_path
from appraisal360.reporting import config
from appraisal360.reporting.context import ReportContext
from appraisal360.reporting.models import RankedManager, percent_of_scale

logger = logging.getLogger(__name__)

__all__ = ["SHEET_NAMES", "build_workbook", "export_workbook"]

SHEET_NAMES = (
    "Executive Summary",
    "Manager Rankings",
    "Competency Analysis",
    "Relationship Breakdown",
    "Score Distribution",
    "Manager Details",
    "All Responses",
    "Qualitative Feedback",
    "Category Comments",
)

_BOLD = Font(bold=True)
_RULE = "═" * 60


# ---------------------------------------------------------------------------
# Sheet helpers
# ---------------------------------------------------------------------------
def _set_widths(ws: Worksheet, widths: Sequence[int]) -> None:
    for index, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width


def _cell(value: Any) -> Any:
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _append(ws: Worksheet, row: Sequence[Any]) -> None:
    # openpyxl refuses control characters such as \x0b in cell text
    ws.append([_cell(value) for value in row])


def _write_table(
    ws: Worksheet,
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    widths: Optional[Sequence[int]] = None,
) -> None:
    _append(ws, headers)
    for cell in ws[1]:
        cell.font = _BOLD
    for row in rows:
        _append(ws, row)
    ws.freeze_panes = "A2"
    if widths:
        _set_widths(ws, widths)


def _write_lines(ws: Worksheet, lines: Iterable[Sequence[Any]], width: int) -> None:
    for line in lines:
        _append(ws, line)
    _set_widths(ws, [width])


def _pct(score: float) -> str:
    return f"{percent_of_scale(score):.1f}%"


def _performer_rows(ranked: List[RankedManager]) -> List[List[Any]]:
    return [
        [
            f"{i}. {r.summary.manager_name}",
            f"{r.summary.overall_score:.2f}",
            f"{r.summary.percentage:.1f}%",
        ]
        for i, r in enumerate(ranked, start=1)
    ]


def _section(title: str) -> List[List[str]]:
    return [[""], [_RULE], [title], [_RULE]]


# ---------------------------------------------------------------------------
# Sheets
# ---------------------------------------------------------------------------
def _executive_summary(ws: Worksheet, ctx: ReportContext) -> None:
    avg = ctx.averages
    split = ctx.summary_performers
    comp = ctx.competency_split
    n = len(split.top)
    rows: List[List[Any]] = [
        [f"{ctx.title.upper()} - EXECUTIVE SUMMARY"],
        ["Generated:", ctx.generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()],
        [""],
        ["KEY METRICS"],
        ["Total Managers Evaluated:", ctx.total_managers],
        ["Total Feedback Responses:", ctx.total_responses],
        ["Average Responses per Manager:", ctx.avg_responses_per_manager],
        [""],
        [f"OVERALL PERFORMANCE SCORES (out of {SCORE_SCALE_MAX}.0)"],
    ]
    labels = {
        "Overall Performance": "Organization Average:",
        "Team Leadership": "Team Leadership Average:",
        "Results Orientation": "Results Orientation Average:",
        "Cultural Fit": "Cultural Fit Average:",
    }
    for name, value in avg.rows():
        rows.append([labels[name], f"{value:.2f}", f"({_pct(value)})"])

    rows += [[""], [f"TOP {n} PERFORMERS"], *_performer_rows(split.top)]
    rows += [
        [""],
        [f"BOTTOM {len(split.bottom)} PERFORMERS (Needs Development)"],
        *_performer_rows(split.bottom),
    ]
    rows += [[""], [f"ORGANIZATIONAL STRENGTHS (Top {len(comp.strengths)} Competencies)"]]
    rows += [
        [f"{i}. {c.name}", f"{c.score:.2f}", f"{c.percentage:.1f}%"]
        for i, c in enumerate(comp.strengths, start=1)
    ]
    rows += [[""], [f"AREAS FOR IMPROVEMENT (Bottom {len(comp.weaknesses)} Competencies)"]]
    rows += [
        [f"{i}. {c.name}", f"{c.score:.2f}", f"{c.percentage:.1f}%"]
        for i, c in enumerate(comp.weaknesses, start=1)
    ]

    for row in rows:
        _append(ws, row)
    _set_widths(ws, [45, 15, 15])
    ws["A1"].font = Font(bold=True, size=14)


def _manager_rankings(ws: Worksheet, ctx: ReportContext) -> None:
    top_score = ctx.rankings[0].summary.overall_score if ctx.rankings else 0.0
    org_avg = ctx.averages.overall
    rows = [
        [
            r.rank,
            r.summary.manager_name,
            r.summary.total_responses,
            r.summary.avg_team_leadership,
            r.summary.avg_results_orientation,
            r.summary.avg_cultural_fit,
            r.summary.overall_score,
            f"{r.summary.percentage:.1f}%",
            score_tier(r.summary.overall_score),
            round(top_score - r.summary.overall_score, 2),
            round(r.summary.overall_score - org_avg, 2),
        ]
        for r in ctx.rankings
    ]
    _write_table(
        ws,
        [
            "Rank",
            "Manager Name",
            "Total Reviews",
            "Team Leadership",
            "Results Orientation",
            "Cultural Fit",
            "Overall Score",
            "Performance %",
            "Performance Tier",
            "Gap from Top",
            "Gap from Org Avg",
        ],
        rows,
        [6, 25, 12, 15, 18, 12, 12, 14, 18, 12, 14],
    )


def _competency_analysis(ws: Worksheet, ctx: ReportContext) -> None:
    rows = [
        [
            rank,
            c.name,
            c.score,
            f"{c.percentage:.1f}%",
            c.min_score,
            c.max_observed,
            c.spread,
            c.count,
            competency_status(c.score),
        ]
        for rank, c in enumerate(ctx.ranked_competencies, start=1)
    ]
    _write_table(
        ws,
        [
            "Rank",
            "Competency",
            "Average Score",
            "Performance %",
            "Min Score",
            "Max Score",
            "Score Range",
            "Response Count",
            "Status",
        ],
        rows,
        [6, 22, 14, 14, 10, 10, 12, 14, 14],
    )


def _relationship_breakdown(ws: Worksheet, ctx: ReportContext) -> None:
    rows = [[r.relationship, r.count, f"{r.percentage:.1f}%"] for r in ctx.relationships]
    _write_table(
        ws, ["Relationship Type", "Response Count", "Percentage"], rows, [50, 15, 12]
    )


def _score_distribution(ws: Worksheet, ctx: ReportContext) -> None:
    rows = [
        [
            t.label,
            t.count,
            f"{t.share_of(ctx.total_managers):.1f}%",
            ", ".join(t.managers) or "None",
        ]
        for t in ctx.tiers
    ]
    _write_table(
        ws,
        ["Performance Tier", "Manager Count", "Percentage", "Managers"],
        rows,
        [28, 14, 12, 60],
    )


def _manager_details(ws: Worksheet, ctx: ReportContext) -> None:
    rows = []
    for d in ctx.details:
        s = d.summary
        gap = d.gap_from_average
        rows.append(
            [
                s.manager_name,
                s.total_responses,
                s.overall_score,
                f"{s.percentage:.1f}%",
                s.avg_team_leadership,
                s.avg_results_orientation,
                s.avg_cultural_fit,
                d.strongest.name if d.strongest else "N/A",
                d.strongest.score if d.strongest else "N/A",
                d.weakest.name if d.weakest else "N/A",
                d.weakest.score if d.weakest else "N/A",
                d.primary_reviewers,
                f"{'+' if gap > 0 else ''}{gap:.2f}",
            ]
        )
    _write_table(
        ws,
        [
            "Manager Name",
            "Total Responses",
            "Overall Score",
            "Performance %",
            "Team Leadership",
            "Results Orientation",
            "Cultural Fit",
            "Strongest Competency",
            "Strongest Score",
            "Weakest Competency",
            "Weakest Score",
            "Primary Reviewers",
            "vs Org Average",
        ],
        rows,
        [25, 14, 12, 14, 15, 18, 12, 22, 14, 22, 14, 35, 12],
    )


def _all_responses(ws: Worksheet, ctx: ReportContext) -> None:
    headers = ["#", "Timestamp", "Manager", "Relationship"]
    headers += [c.name for c in COMPETENCIES]
    headers += [
        "Team Leadership Comments",
        "Results Comments",
        "Cultural Fit Comments",
        "Stop Doing",
        "Start Doing",
        "Continue Doing",
    ]
    rows = []
    for i, r in enumerate(ctx.responses, start=1):
        row: List[Any] = [
            i,
            # Excel cannot store timezone-aware datetimes
            r.timestamp.isoformat() if r.timestamp else "",
            r.manager_name,
            r.relationship or "",
        ]
        row += [r.score(c.key) for c in COMPETENCIES]
        row += [
            r.team_leadership_comments or "",
            r.results_orientation_comments or "",
            r.cultural_fit_comments or "",
            r.stop_doing or "",
            r.start_doing or "",
            r.continue_doing or "",
        ]
        rows.append(row)
    _write_table(ws, headers, rows)


def _qualitative_feedback(ws: Worksheet, ctx: ReportContext) -> None:
    limit = config.MAX_FEEDBACK_ITEMS
    comments = ctx.comments
    lines: List[List[str]] = [[f"{ctx.title.upper()} - QUALITATIVE FEEDBACK COMPILATION"]]
    lines += _section("STOP DOING (Areas for Immediate Attention)")
    lines += [[f] for f in comments.stop_doing[:limit]]
    lines += _section("START DOING (Recommended Actions)")
    lines += [[f] for f in comments.start_doing[:limit]]
    lines += _section("CONTINUE DOING (Positive Behaviors to Maintain)")
    lines += [[f] for f in comments.continue_doing[:limit]]
    _write_lines(ws, lines, 120)


def _category_comments(ws: Worksheet, ctx: ReportContext) -> None:
    limit = config.MAX_CATEGORY_COMMENTS
    comments = ctx.comments
    lines: List[List[str]] = [[f"{ctx.title.upper()} - COMMENTS BY CATEGORY"]]
    lines += _section("TEAM LEADERSHIP COMMENTS")
    lines += [[f] for f in comments.team_leadership[:limit]]
    lines += _section("RESULTS ORIENTATION COMMENTS")
    lines += [[f] for f in comments.results_orientation[:limit]]
    lines += _section("CULTURAL FIT COMMENTS")
    lines += [[f] for f in comments.cultural_fit[:limit]]
    _write_lines(ws, lines, 120)


_BUILDERS = (
    _executive_summary,
    _manager_rankings,
    _competency_analysis,
    _relationship_breakdown,
    _score_distribution,
    _manager_details,
    _all_responses,
    _qualitative_feedback,
    _category_comments,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def build_workbook(ctx: ReportContext) -> Workbook:
    """Return an in-memory workbook with the sheets in :data:`SHEET_NAMES` order."""

    wb = Workbook()
    first = wb.active
    for index, (name, builder) in enumerate(zip(SHEET_NAMES, _BUILDERS)):
        ws = first if index == 0 else wb.create_sheet()
        ws.title = name
        builder(ws, ctx)
    return wb


def export_workbook(ctx: ReportContext, directory: PathLike = ".") -> Path:
    """Write the workbook to ``<directory>/<name>_<date>.xlsx`` and return the path."""

    path = artifact_path(directory, config.WORKBOOK_REPORT_NAME, ctx.date, "xlsx")
    wb = build_workbook(ctx)
    wb.save(path)
    logger.debug("Workbook written with %d sheets", len(wb.sheetnames))
    return path
