"""Advisory classification into disjoint disposition buckets.

Each finding lands in exactly one bucket, checked in this order:

1. dev_exempt: every path is dev-only and dev dependencies are ignored
2. severity_exempt: severity is strictly below the configured floor
3. explicitly_excluded: advisory id is in the exclusion set
4. reportable: none of the above

Provides:
- ClassifiedFindings: The four buckets for one run
- classify: Sort findings into buckets under a Config
"""

from dataclasses import dataclass, field

import structlog

from .config import Config
from .dependencies import DevDependencyMatcher, is_dev_only_finding
from .output import Finding
from .severity import severity_should_be_ignored

logger = structlog.get_logger()


@dataclass
class ClassifiedFindings:
    """Partition of one run's findings."""
    reportable: list[Finding] = field(default_factory=list)
    dev_exempt: list[Finding] = field(default_factory=list)
    severity_exempt: list[Finding] = field(default_factory=list)
    explicitly_excluded: list[Finding] = field(default_factory=list)
    stale_exclusions: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.reportable)
            + len(self.dev_exempt)
            + len(self.severity_exempt)
            + len(self.explicitly_excluded)
        )


def classify(
    findings: list[Finding],
    config: Config,
    matcher: DevDependencyMatcher | None = None,
) -> ClassifiedFindings:
    """Apply dev, severity and exclusion policy to each finding.

    Args:
        findings: One Finding per advisory id
        config: Run configuration
        matcher: Dev dependency matcher, or None if dev exemption is unavailable

    Returns:
        ClassifiedFindings, plus excluded ids the scanner never reported
    """
    result = ClassifiedFindings()

    for finding in findings:
        if config.ignore_dev_dependencies and is_dev_only_finding(finding, matcher):
            result.dev_exempt.append(finding)
        elif severity_should_be_ignored(finding.severity, config.min_severity):
            result.severity_exempt.append(finding)
        elif finding.id in config.excluded_advisory_ids:
            result.explicitly_excluded.append(finding)
        else:
            result.reportable.append(finding)

    reported_ids = {finding.id for finding in findings}
    result.stale_exclusions = sorted(config.excluded_advisory_ids - reported_ids)

    logger.debug(
        "findings_classified",
        total=result.total,
        reportable=len(result.reportable),
        dev_exempt=len(result.dev_exempt),
        severity_exempt=len(result.severity_exempt),
        explicitly_excluded=len(result.explicitly_excluded),
        stale_exclusions=result.stale_exclusions,
    )
    return result
