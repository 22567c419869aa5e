"""Paginated PDF report built with reportlab's platypus layout engine."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from appraisal360.analysis.ranking import competency_status, priority_focus, score_tier
from appraisal360.exporters.base import PathLike, artifact_path
from appraisal360.reporting import config
from appraisal360.reporting.context import ReportContext
from appraisal360.reporting.models import percent_of_scale

logger = logging.getLogger(__name__)

__all__ = ["build_story", "export_document"]

_MARGIN = 14 * mm
_CONTENT_WIDTH = A4[0] - 2 * _MARGIN

_TEAL = colors.Color(20 / 255, 60 / 255, 60 / 255)
_HEADER = colors.Color(34 / 255, 100 / 255, 100 / 255)
_GREEN = colors.Color(34 / 255, 139 / 255, 87 / 255)
_RED = colors.Color(180 / 255, 80 / 255, 80 / 255)
_SLATE = colors.Color(75 / 255, 85 / 255, 99 / 255)
_INDIGO = colors.Color(99 / 255, 102 / 255, 241 / 255)
_VIOLET = colors.Color(139 / 255, 92 / 255, 246 / 255)

# Text colour per tier / competency status
_STATUS_COLOURS = {
    "Exceptional": _GREEN,
    "Strength": _GREEN,
    "Strong": colors.Color(59 / 255, 130 / 255, 246 / 255),
    "Good": colors.Color(59 / 255, 130 / 255, 246 / 255),
    "Developing": colors.Color(234 / 255, 179 / 255, 8 / 255),
}
_DEFAULT_STATUS_COLOUR = colors.Color(220 / 255, 38 / 255, 38 / 255)

_styles = getSampleStyleSheet()
_COVER_TITLE = ParagraphStyle(
    "CoverTitle", parent=_styles["Title"], textColor=colors.white, alignment=0
)
_COVER_SUB = ParagraphStyle(
    "CoverSub", parent=_styles["Normal"], textColor=colors.white, fontSize=12
)
_SMALL = ParagraphStyle("Small", parent=_styles["BodyText"], fontSize=8, leading=10)


class _NumberedCanvas(canvas.Canvas):
    """Canvas that stamps "Page i of n" once the page count is known."""

    footer_title = ""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._saved_page_states: List[dict] = []

    def showPage(self) -> None:  # noqa: N802 – reportlab API
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width, _ = self._pagesize
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawString(
            _MARGIN,
            8 * mm,
            f"{self.footer_title} Report | Page {self._pageNumber} of {total}",
        )
        self.drawRightString(width - _MARGIN, 8 * mm, "Confidential")


# ---------------------------------------------------------------------------
# Flowable helpers
# ---------------------------------------------------------------------------
def _p(text: str, style: str | ParagraphStyle = "BodyText") -> Paragraph:
    if isinstance(style, str):
        style = _styles[style]
    return Paragraph(escape(text), style)


def _pct0(score: float) -> str:
    return f"{percent_of_scale(score, 0):.0f}%"


def _section_header(title: str, colour: colors.Color = _HEADER) -> Table:
    table = Table([[title]], colWidths=[_CONTENT_WIDTH])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colour),
                ("TEXTCOLOR", (0, 0), (-1, -1), colors.white),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 12),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    return table


def _data_table(
    head: Sequence[str],
    body: Sequence[Sequence[Any]],
    header_colour: colors.Color = _HEADER,
    font_size: int = 9,
    status_column: int | None = None,
    col_widths: Sequence[float] | None = None,
) -> Table:
    table = Table(
        [list(head)] + [list(row) for row in body], colWidths=col_widths, repeatRows=1
    )
    commands: List[tuple] = [
        ("BACKGROUND", (0, 0), (-1, 0), header_colour),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    if status_column is not None:
        for row_index, row in enumerate(body, start=1):
            colour = _STATUS_COLOURS.get(str(row[status_column]), _DEFAULT_STATUS_COLOUR)
            commands.append(
                ("TEXTCOLOR", (status_column, row_index), (status_column, row_index), colour)
            )
    table.setStyle(TableStyle(commands))
    return table


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------
def _cover(ctx: ReportContext) -> List[Any]:
    banner = Table(
        [
            [Paragraph(escape(ctx.title), _COVER_TITLE)],
            [Paragraph("Comprehensive Leadership Assessment Report", _COVER_SUB)],
        ],
        colWidths=[_CONTENT_WIDTH],
    )
    banner.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), _TEAL),
                ("TOPPADDING", (0, 0), (-1, -1), 10),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
            ]
        )
    )

    avg = ctx.averages
    metrics = Table(
        [
            ["KEY METRICS AT A GLANCE", ""],
            [
                f"Managers Evaluated: {ctx.total_managers}",
                f"Total Responses: {ctx.total_responses}",
            ],
            [
                f"Avg Responses/Manager: {ctx.avg_responses_per_manager:.1f}",
                f"Org Average Score: {avg.overall:.2f} ({_pct0(avg.overall)})",
            ],
        ],
        colWidths=[_CONTENT_WIDTH / 2] * 2,
    )
    metrics.setStyle(
        TableStyle(
            [
                ("SPAN", (0, 0), (-1, 0)),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("BACKGROUND", (0, 0), (-1, -1), colors.Color(245 / 255, 247 / 255, 250 / 255)),
                ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ]
        )
    )

    overview_rows = [
        [
            name,
            f"{value:.2f}",
            _pct0(value),
            "Strong" if value >= config.STRONG_THRESHOLD else "Developing",
        ]
        for name, value in avg.rows()
    ]

    return [
        banner,
        Spacer(1, 8),
        _p(
            f"Generated: {ctx.generated_at.strftime('%Y-%m-%d %H:%M %Z').strip()}"
            "    Report Period: Full Dataset Analysis",
            "Normal",
        ),
        Spacer(1, 10),
        metrics,
        Spacer(1, 14),
        _section_header("ORGANIZATIONAL PERFORMANCE OVERVIEW"),
        Spacer(1, 6),
        _data_table(["Category", "Score", "Performance", "Status"], overview_rows),
    ]


def _rankings(ctx: ReportContext) -> List[Any]:
    split = ctx.document_performers
    avg = ctx.averages.overall
    top_rows = [
        [
            f"#{r.rank}",
            r.summary.manager_name,
            f"{r.summary.overall_score:.2f}",
            _pct0(r.summary.overall_score),
            f"{r.summary.avg_team_leadership:.2f}",
            f"{r.summary.avg_results_orientation:.2f}",
            f"{r.summary.avg_cultural_fit:.2f}",
        ]
        for r in split.top
    ]
    bottom_rows = [
        [
            f"#{r.rank}",
            r.summary.manager_name,
            f"{r.summary.overall_score:.2f}",
            _pct0(r.summary.overall_score),
            f"{r.summary.overall_score - avg:.2f}",
            priority_focus(r.summary),
        ]
        for r in split.bottom
    ]
    all_rows = [
        [
            r.rank,
            r.summary.manager_name,
            r.summary.total_responses,
            f"{r.summary.overall_score:.2f}",
            _pct0(r.summary.overall_score),
            score_tier(r.summary.overall_score),
        ]
        for r in ctx.rankings
    ]
    return [
        PageBreak(),
        _section_header(f"TOP {len(split.top)} PERFORMERS", _GREEN),
        Spacer(1, 6),
        _data_table(
            ["Rank", "Manager", "Score", "Performance", "Team Lead", "Results", "Culture"],
            top_rows,
            _GREEN,
        ),
        Spacer(1, 14),
        _section_header("MANAGERS REQUIRING DEVELOPMENT", _RED),
        Spacer(1, 6),
        _data_table(
            ["Rank", "Manager", "Score", "Performance", "Gap from Avg", "Priority Focus"],
            bottom_rows,
            _RED,
        ),
        Spacer(1, 14),
        _section_header("COMPLETE MANAGER RANKINGS"),
        Spacer(1, 6),
        _data_table(
            ["#", "Manager", "Reviews", "Overall", "%", "Tier"],
            all_rows,
            font_size=8,
            status_column=5,
        ),
    ]


def _competencies(ctx: ReportContext) -> List[Any]:
    rows = [
        [
            rank,
            c.name,
            f"{c.score:.2f}",
            f"{c.percentage:.0f}%",
            c.min_score,
            c.max_observed,
            c.spread,
            competency_status(c.score),
        ]
        for rank, c in enumerate(ctx.ranked_competencies, start=1)
    ]
    split = ctx.competency_split
    strengths = [
        _p(f"{i}. {c.name}: {c.score:.2f}") for i, c in enumerate(split.strengths, start=1)
    ]
    weaknesses = [
        _p(f"{i}. {c.name}: {c.score:.2f}") for i, c in enumerate(split.weaknesses, start=1)
    ]
    summary = Table(
        [["ORGANIZATIONAL STRENGTHS", "AREAS FOR IMPROVEMENT"], [strengths, weaknesses]],
        colWidths=[_CONTENT_WIDTH / 2] * 2,
    )
    summary.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("TEXTCOLOR", (0, 0), (0, 0), _GREEN),
                ("TEXTCOLOR", (1, 0), (1, 0), _DEFAULT_STATUS_COLOUR),
                ("BACKGROUND", (0, 0), (0, -1), colors.Color(240 / 255, 253 / 255, 244 / 255)),
                ("BACKGROUND", (1, 0), (1, -1), colors.Color(254 / 255, 242 / 255, 242 / 255)),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    relationship_rows = [
        [r.relationship, r.count, f"{r.percentage:.1f}%"] for r in ctx.relationships
    ]
    return [
        PageBreak(),
        _section_header("COMPETENCY PERFORMANCE ANALYSIS"),
        Spacer(1, 6),
        _data_table(
            ["Rank", "Competency", "Avg Score", "Performance", "Min", "Max", "Range", "Status"],
            rows,
            _SLATE,
            font_size=8,
            status_column=7,
        ),
        Spacer(1, 14),
        summary,
        Spacer(1, 14),
        _section_header("FEEDBACK SOURCE ANALYSIS"),
        Spacer(1, 6),
        _data_table(["Relationship Type", "Count", "Percentage"], relationship_rows, _INDIGO),
    ]


def _distribution(ctx: ReportContext) -> List[Any]:
    rows = [
        [
            t.label,
            t.count,
            f"{t.share_of(ctx.total_managers):.0f}%",
            _p(", ".join(t.managers) or "None", _SMALL),
        ]
        for t in ctx.tiers
    ]
    story: List[Any] = [
        PageBreak(),
        _section_header("PERFORMANCE DISTRIBUTION ANALYSIS"),
        Spacer(1, 6),
        _data_table(
            ["Performance Tier", "Count", "%", "Managers"],
            rows,
            _VIOLET,
            8,
            col_widths=[45 * mm, 15 * mm, 15 * mm, _CONTENT_WIDTH - 75 * mm],
        ),
        Spacer(1, 18),
        _section_header("QUALITATIVE FEEDBACK HIGHLIGHTS"),
        Spacer(1, 6),
    ]
    limit = config.MAX_DOCUMENT_SAMPLES
    samples = (
        ("STOP DOING (Sample)", ctx.comments.stop_doing),
        ("START DOING (Sample)", ctx.comments.start_doing),
        ("CONTINUE DOING (Sample)", ctx.comments.continue_doing),
    )
    for heading, entries in samples:
        story.append(_p(heading, "Heading4"))
        story.extend(_p(entry, _SMALL) for entry in entries[:limit])
        if not entries:
            story.append(_p("No feedback recorded.", _SMALL))
        story.append(Spacer(1, 6))
    return story


def _findings(ctx: ReportContext) -> List[Any]:
    story: List[Any] = [
        PageBreak(),
        _section_header("Executive Summary & Recommendations", _TEAL),
        Spacer(1, 12),
        _p("KEY FINDINGS:", "Heading3"),
    ]
    story.extend(_p(line) for line in ctx.findings)
    story += [Spacer(1, 10), _p("RECOMMENDATIONS:", "Heading3")]
    story.extend(_p(f"{i}. {line}") for i, line in enumerate(ctx.recommendations, start=1))
    return story


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def build_story(ctx: ReportContext) -> List[Any]:
    """Return the platypus flowables for the whole report."""
    return [
        *_cover(ctx),
        *_rankings(ctx),
        *_competencies(ctx),
        *_distribution(ctx),
        *_findings(ctx),
    ]


def export_document(ctx: ReportContext, directory: PathLike = ".") -> Path:
    """Write the PDF to ``<directory>/<name>_<date>.pdf`` and return the path."""

    path = artifact_path(directory, config.DOCUMENT_REPORT_NAME, ctx.date, "pdf")
    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        leftMargin=_MARGIN,
        rightMargin=_MARGIN,
        topMargin=_MARGIN,
        bottomMargin=_MARGIN + 6 * mm,
        title=f"{ctx.title} Report",
    )
    canvas_class = type(
        "_ReportCanvas", (_NumberedCanvas,), {"footer_title": ctx.title}
    )
    doc.build(build_story(ctx), canvasmaker=canvas_class)
    logger.debug("PDF report written to %s", path)
    return path
