"""Configuration constants for the reporting pipeline."""
from __future__ import annotations

import os

# Heading used on the cover page and workbook title rows
REPORT_TITLE: str = os.getenv("REPORT_TITLE", "360° Performance Analytics")

# File name stems; the ISO date and extension are appended at export time
WORKBOOK_REPORT_NAME: str = os.getenv(
    "WORKBOOK_REPORT_NAME", "360_Analytics_Complete"
)
DOCUMENT_REPORT_NAME: str = os.getenv("DOCUMENT_REPORT_NAME", "360_Analytics_Report")

# Managers listed in the workbook's executive summary (top and bottom)
SUMMARY_PERFORMERS: int = int(os.getenv("REPORT_SUMMARY_PERFORMERS", "3"))

# Managers listed in the document's ranking tables (top and bottom)
DOCUMENT_PERFORMERS: int = int(os.getenv("REPORT_DOCUMENT_PERFORMERS", "5"))

# Competencies listed as strengths and as improvement areas
MAX_STRENGTHS: int = int(os.getenv("REPORT_MAX_STRENGTHS", "3"))

# Stop/start/continue entries per prompt in the workbook
MAX_FEEDBACK_ITEMS: int = int(os.getenv("REPORT_MAX_FEEDBACK_ITEMS", "50"))

# Category comments per category in the workbook
MAX_CATEGORY_COMMENTS: int = int(os.getenv("REPORT_MAX_CATEGORY_COMMENTS", "40"))

# Samples per prompt in the document's qualitative highlights
MAX_DOCUMENT_SAMPLES: int = int(os.getenv("REPORT_MAX_DOCUMENT_SAMPLES", "5"))

# Feedback entries per prompt included in the assistant's data context
MAX_CONTEXT_FEEDBACK: int = int(os.getenv("REPORT_MAX_CONTEXT_FEEDBACK", "15"))

# Category average at or above which the overview marks a category "Strong"
STRONG_THRESHOLD: float = float(os.getenv("REPORT_STRONG_THRESHOLD", "3.0"))
