"""JSON-lines stream parsing for scanner output.

Provides:
- ParsedStream: Parsed records plus the trailing summary record
- parse_records: Parse every non-blank line, failing on the first bad one
- extract_findings: Pull merged Findings out of advisory records
"""

import json
from dataclasses import dataclass, field

import structlog

from .errors import MalformedOutput
from .output import Finding, RawRecord, finding_from_record, merge_findings

logger = structlog.get_logger()


@dataclass
class ParsedStream:
    """Scanner records split into the general sequence and the run summary."""
    records: list[RawRecord] = field(default_factory=list)
    summary: RawRecord | None = None


def _to_record(value, line_number: int) -> RawRecord:
    if isinstance(value, dict):
        return RawRecord(
            type=str(value.get("type", "")), data=value.get("data"), line_number=line_number
        )
    return RawRecord(data=value, line_number=line_number)


def parse_records(lines: list[str]) -> ParsedStream:
    """Parse scanner output lines into records.

    Blank lines are skipped. The last parsed record is removed from the
    general sequence and returned as the summary.

    Args:
        lines: Scanner output, one JSON document per line

    Returns:
        ParsedStream with records and summary

    Raises:
        MalformedOutput: If any non-blank line is not valid JSON
    """
    records = []

    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue

        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            logger.debug("json_parse_error", line_number=line_number, line=line[:100])
            raise MalformedOutput(line_number, line, str(e)) from e

        records.append(_to_record(value, line_number))

    summary = records.pop() if records else None
    if summary is not None:
        logger.debug("audit_summary", type=summary.type, data=summary.data)

    return ParsedStream(records=records, summary=summary)


def extract_findings(records: list[RawRecord]) -> list[Finding]:
    """Build one Finding per advisory id from advisory records.

    Non-advisory records are ignored.

    Raises:
        MalformedOutput: If an advisory record is not shaped like an advisory,
            lacks an id, or has an unknown severity
    """
    findings = []
    for record in records:
        if not record.is_advisory:
            continue
        try:
            findings.append(finding_from_record(record))
        except (TypeError, ValueError) as e:
            raise MalformedOutput(record.line_number, json.dumps(record.data), str(e)) from e

    return merge_findings(findings)
