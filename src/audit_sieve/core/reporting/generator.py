"""Plain-text report generation from classified findings.

Produces the lines printed at the end of a run and the exit status that
goes with them.
"""

import json
from dataclasses import dataclass, field

import structlog

from audit_sieve.core.classifier import ClassifiedFindings
from audit_sieve.core.config import Config
from audit_sieve.core.output import Finding

logger = structlog.get_logger()

MAX_EXIT_STATUS = 255

HINT_LINE = "Run `yarn audit` for more information"


@dataclass
class Report:
    """Rendered report for one run.

    Attributes:
        lines: Report lines in print order
        reportable_count: Number of unsuppressed findings
        exit_status: Process exit status, clamped to MAX_EXIT_STATUS
    """
    lines: list[str] = field(default_factory=list)
    reportable_count: int = 0
    exit_status: int = 0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def format_finding(finding: Finding) -> str:
    return f"Vulnerability Found: {finding.severity.value.upper()} - {finding.url}"


def clamp_exit_status(count: int) -> int:
    """Clamp a count into the portable exit status range 0..255."""
    return max(0, min(count, MAX_EXIT_STATUS))


class ReportGenerator:
    """Turn classified findings into report lines and an exit status.

    Layout:
    - Total advisory count
    - One line per non-empty exemption bucket
    - Stale exclusion warning, if any
    - One line per reportable finding
    - Constant hint line
    """

    def __init__(self, config: Config):
        self.config = config

    def generate(self, classified: ClassifiedFindings) -> Report:
        """Build the report.

        Args:
            classified: Output of classify()

        Returns:
            Report with lines, reportable count and exit status
        """
        lines = [f"Found {classified.total} vulnerabilities"]

        if classified.dev_exempt:
            lines.append(
                f"{len(classified.dev_exempt)} ignored because they are dev dependencies"
            )
        if classified.severity_exempt:
            lines.append(
                f"{len(classified.severity_exempt)} ignored because severity was lower "
                f'than "{self.config.min_severity.value}"'
            )
        if classified.explicitly_excluded:
            lines.append(
                f"{len(classified.explicitly_excluded)} ignored because they are "
                "excluded advisories"
            )
        if classified.stale_exclusions:
            ids = ", ".join(str(advisory_id) for advisory_id in classified.stale_exclusions)
            lines.append(f"Excluded advisories not found in audit output: {ids}")

        for finding in classified.reportable:
            lines.append(format_finding(finding))

        lines.append(HINT_LINE)

        count = len(classified.reportable)
        failing = count
        if self.config.fail_on_missing_exclusions:
            failing += len(classified.stale_exclusions)

        exit_status = clamp_exit_status(failing)
        if exit_status != failing:
            logger.warning(
                "exit_status_clamped", failing=failing, exit_status=exit_status
            )

        return Report(lines=lines, reportable_count=count, exit_status=exit_status)

    def debug_dump(self, classified: ClassifiedFindings) -> list[str]:
        """Raw advisory payloads of every exempted finding, as JSON lines."""
        sections = [
            ("Dev dependency advisories", classified.dev_exempt),
            ("Excluded advisories", classified.explicitly_excluded),
            ("Severity ignored advisories", classified.severity_exempt),
        ]
        lines = []
        for title, findings in sections:
            lines.append(f"{title}:")
            for finding in findings:
                lines.append(json.dumps(finding.raw, sort_keys=True))
        return lines
