"""Typed records produced from the scanner's JSON-lines output.

Provides:
- RecordType: Known record type tags
- RawRecord: One parsed line of scanner output
- Finding: One advisory with its dependency paths
- DependencyPath: Package chain from the project root to the vulnerable package
- finding_from_record: Build a Finding from an auditAdvisory record
- merge_findings: Collapse repeated advisories into one Finding per id
"""

from enum import Enum
from typing import Any

import structlog
from pydantic import BaseModel, Field

from .severity import Severity

logger = structlog.get_logger()

DependencyPath = tuple[str, ...]

PATH_SEPARATOR = ">"

_JSON_NAMES = {dict: "object", list: "array", str: "string"}


class RecordType(str, Enum):
    """Record type tags emitted by ``yarn audit --json``."""

    AUDIT_ADVISORY = "auditAdvisory"
    AUDIT_SUMMARY = "auditSummary"


class RawRecord(BaseModel):
    """One JSON record from the scanner stream.

    Only ``auditAdvisory`` records and the trailing summary carry meaning;
    every other type is kept but ignored.

    Attributes:
        type: Record type tag (e.g. "auditAdvisory", "info", "warning")
        data: Record payload as decoded from JSON
        line_number: Scanner output line the record was parsed from (0 if unknown)
    """

    type: str = ""
    data: Any = None
    line_number: int = 0

    @property
    def is_advisory(self) -> bool:
        return self.type == RecordType.AUDIT_ADVISORY.value


class Finding(BaseModel):
    """A single vulnerability advisory reported by the scanner.

    Attributes:
        id: Advisory id
        severity: Advisory severity
        url: Advisory URL
        paths: Dependency paths through which the vulnerable package is reached
        raw: Original advisory payload, kept for debug dumps
    """

    id: int
    severity: Severity
    url: str = ""
    paths: list[DependencyPath] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)


def split_path(path: str) -> DependencyPath:
    """Split a scanner path string such as ``"a>b>c"`` into package names."""
    return tuple(part for part in path.split(PATH_SEPARATOR) if part)


def _expect(value, kind: type, what: str):
    if not isinstance(value, kind):
        raise ValueError(f"{what} must be a JSON {_JSON_NAMES[kind]}, got {type(value).__name__}")
    return value


def finding_from_record(record: RawRecord) -> Finding:
    """Build a Finding from an ``auditAdvisory`` record.

    Dependency paths come from ``advisory.findings[].paths``; when the
    advisory has none, the record's ``resolution.path`` is used instead.

    Args:
        record: An advisory record

    Returns:
        Finding for the advisory

    Raises:
        ValueError: If the payload is not shaped like an advisory, lacks an id,
            or has an unknown severity
    """
    data = _expect(record.data, dict, "advisory record data")
    advisory = _expect(data.get("advisory") or {}, dict, "advisory")
    resolution = _expect(data.get("resolution") or {}, dict, "resolution")

    if "id" not in advisory:
        raise ValueError("advisory record without an id")

    paths: list[DependencyPath] = []
    for entry in _expect(advisory.get("findings") or [], list, "advisory.findings"):
        entry = _expect(entry, dict, "advisory.findings entry")
        for path in _expect(entry.get("paths") or [], list, "advisory.findings paths"):
            split = split_path(_expect(path, str, "dependency path"))
            if split and split not in paths:
                paths.append(split)

    resolution_path = resolution.get("path")
    if not paths and resolution_path:
        paths.append(split_path(_expect(resolution_path, str, "resolution.path")))

    return Finding(
        id=int(advisory["id"]),
        severity=Severity.parse(str(advisory.get("severity", ""))),
        url=advisory.get("url", ""),
        paths=paths,
        raw=data,
    )


def merge_findings(findings: list[Finding]) -> list[Finding]:
    """Collapse findings that share an advisory id.

    The scanner emits one record per resolution, so the same advisory can
    appear several times. Paths are unioned in first-seen order; the first
    record wins for every other field.

    Args:
        findings: Findings in scanner order

    Returns:
        One Finding per advisory id, in first-seen order
    """
    merged: dict[int, Finding] = {}
    for finding in findings:
        existing = merged.get(finding.id)
        if existing is None:
            merged[finding.id] = finding.model_copy(update={"paths": list(finding.paths)})
            continue
        for path in finding.paths:
            if path not in existing.paths:
                existing.paths.append(path)

    if len(merged) != len(findings):
        logger.debug(
            "duplicate_advisories_merged",
            records=len(findings),
            advisories=len(merged),
        )
    return list(merged.values())
