"""Shared helpers for the report exporters."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Union

from appraisal360.exceptions import ExportFailed
from appraisal360.reporting.context import ReportContext

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

EXPORT_KINDS = ("xlsx", "pdf")


def artifact_path(directory: PathLike, stem: str, date: str, extension: str) -> Path:
    """Return ``<directory>/<stem>_<date>.<extension>``, creating *directory*."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    return target_dir / f"{stem}_{date}.{extension}"


def _exporters() -> Dict[str, Callable[[ReportContext, PathLike], Path]]:
    # Local import to avoid cycles (exporters import this module)
    from appraisal360.exporters.document import export_document
    from appraisal360.exporters.workbook import export_workbook

    return {"xlsx": export_workbook, "pdf": export_document}


def run_export(kind: str, context: ReportContext, directory: PathLike = ".") -> Path:
    """Write the *kind* artifact (``"xlsx"`` or ``"pdf"``) and return its path.

    Raises
    ------
    ExportFailed
        If *kind* is unknown or the exporter fails for any reason.
    """

    exporters = _exporters()
    if kind not in exporters:
        raise ExportFailed(kind, f"unknown export format (expected one of {EXPORT_KINDS})")

    try:
        path = exporters[kind](context, directory)
    except Exception as exc:  # noqa: BLE001 – any formatting error fails the export
        logger.exception("Export to %s failed", kind)
        raise ExportFailed(kind, str(exc)) from exc

    logger.info("Exported %s report to %s", kind, path)
    return path
