"""Command-line entry point for the appraisal analytics toolkit.

Keeping the runtime bootstrap here (instead of in the library modules)
ensures the analytics code can be imported by unit tests and tooling without
side-effects such as reading ``.env`` or configuring logging.

Examples::

    appraisal360 summary --relationship Peer
    appraisal360 export all --output-dir reports/
    appraisal360 ask "Who are the top 3 performing managers?"
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from appraisal360.chat_client import ChatClient, ChatSession
from appraisal360.config import Settings
from appraisal360.exceptions import ConfigurationError, ExportFailed
from appraisal360.exporters.base import EXPORT_KINDS, run_export
from appraisal360.filters import FilterState
from appraisal360.reporting.context import build_report_context
from appraisal360.reporting.dashboard import Dashboard
from appraisal360.reporting.render import render_data_context
from appraisal360.store import ResponseStore

logger = logging.getLogger("appraisal360")


def _configure_logging() -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=os.environ.get("LOG_LEVEL", "INFO"),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appraisal360", description="360° appraisal analytics"
    )
    parser.add_argument(
        "--manager",
        action="append",
        default=[],
        help="Restrict to this manager (repeatable).",
    )
    parser.add_argument(
        "--relationship",
        action="append",
        default=[],
        help='Restrict to this reviewer relationship, "Unknown" for none (repeatable).',
    )
    parser.add_argument("--min-score", type=float, default=None)
    parser.add_argument("--max-score", type=float, default=None)

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("summary", help="Print a text snapshot of the aggregates.")

    export = sub.add_parser("export", help="Write workbook and/or PDF reports.")
    export.add_argument("format", choices=[*EXPORT_KINDS, "all"])
    export.add_argument("--output-dir", default=None)

    ask = sub.add_parser("ask", help="Ask the analytics assistant a question.")
    ask.add_argument("question")
    return parser


def filters_from_args(args: argparse.Namespace) -> FilterState:
    """Translate CLI options into a :class:`FilterState`."""

    score_range = None
    if args.min_score is not None or args.max_score is not None:
        low = args.min_score if args.min_score is not None else float("-inf")
        high = args.max_score if args.max_score is not None else float("inf")
        score_range = (low, high)
    return FilterState(
        managers=args.manager,
        relationships=args.relationship,
        score_range=score_range,
    )


def _export(dashboard: Dashboard, kind: str, directory: str) -> int:
    context = build_report_context(dashboard.snapshot())
    kinds = EXPORT_KINDS if kind == "all" else (kind,)
    status = 0
    for each in kinds:
        try:
            path = run_export(each, context, directory)
        except ExportFailed as exc:
            print(f"Export failed: {exc}", file=sys.stderr)
            status = 1
            continue
        print(path)
    return status


def _ask(dashboard: Dashboard, settings: Settings, question: str) -> int:
    session = ChatSession(
        client=ChatClient(settings),
        data_context=render_data_context(dashboard.snapshot()),
    )
    try:
        reply = session.ask(question)
    except KeyboardInterrupt:  # pragma: no cover – manual run path
        session.cancel()
        return 130
    print(reply or "")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status."""

    load_dotenv()
    _configure_logging()
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        filters = filters_from_args(args)
    except (ConfigurationError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    dashboard = Dashboard(store=ResponseStore(settings))
    loaded = dashboard.load()
    dashboard.set_filters(filters)

    if args.command == "summary":
        print(render_data_context(dashboard.snapshot()))
        return 0 if loaded else 1

    if not loaded:
        print(f"Error: {dashboard.error}", file=sys.stderr)
        return 1

    if args.command == "export":
        return _export(dashboard, args.format, args.output_dir or settings.output_dir)
    return _ask(dashboard, settings, args.question)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
