"""Report generation for classified audit findings."""

from .generator import HINT_LINE, MAX_EXIT_STATUS, Report, ReportGenerator, clamp_exit_status, format_finding

__all__ = [
    "HINT_LINE",
    "MAX_EXIT_STATUS",
    "Report",
    "ReportGenerator",
    "clamp_exit_status",
    "format_finding",
]
