"""Render text views of the aggregates using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from appraisal360.competencies import SCORE_SCALE_MAX
from appraisal360.reporting import config
from appraisal360.reporting.models import DashboardSnapshot

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Plain-text/markdown templates don't need HTML escaping – it breaks "&" in
# competency names like "Mentors & Coaches".
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)
_env.globals["scale_max"] = SCORE_SCALE_MAX


def _fixed(value: float, digits: int = 2) -> str:
    return f"{value:.{digits}f}"


_env.filters["fixed"] = _fixed


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_lines(template_name: str, **context: Any) -> List[str]:
    """Render *template_name* and return its non-blank lines."""

    template = _env.get_template(template_name)
    text = template.render(**context)
    return [line.strip() for line in text.splitlines() if line.strip()]


def render_data_context(snapshot: DashboardSnapshot) -> str:
    """Render a Markdown snapshot of the aggregates.

    The text is sent as ``dataContext`` to the conversational endpoint and
    printed by the ``summary`` command.
    """

    themes = snapshot.feedback_themes
    limit = config.MAX_CONTEXT_FEEDBACK
    template = _env.get_template("data_context.md.j2")
    text = template.render(
        stats=snapshot.overall_stats,
        managers=snapshot.manager_summaries,
        competencies=snapshot.competency_scores,
        relationships=snapshot.relationship_distribution,
        score_distribution=snapshot.score_distribution,
        stop_doing=themes.stop_doing[:limit],
        start_doing=themes.start_doing[:limit],
        continue_doing=themes.continue_doing[:limit],
        error=snapshot.error,
    )
    logger.debug("Rendered data context (len=%d)", len(text))
    return text
