"""Tests for report generation and exit status."""

import json

import pytest

from audit_sieve.core.classifier import ClassifiedFindings
from audit_sieve.core.config import Config
from audit_sieve.core.output import Finding
from audit_sieve.core.reporting import HINT_LINE, ReportGenerator, clamp_exit_status, format_finding
from audit_sieve.core.severity import Severity


def make_finding(advisory_id, severity):
    return Finding(
        id=advisory_id,
        severity=Severity(severity),
        url=f"https://www.npmjs.com/advisories/{advisory_id}",
        raw={"advisory": {"id": advisory_id}},
    )


def test_format_finding():
    assert format_finding(make_finding(100, "high")) == (
        "Vulnerability Found: HIGH - https://www.npmjs.com/advisories/100"
    )


def test_report_lists_reportable_findings_and_hint():
    classified = ClassifiedFindings(
        reportable=[make_finding(100, "high"), make_finding(101, "critical")]
    )

    report = ReportGenerator(Config()).generate(classified)

    assert report.reportable_count == 2
    assert report.exit_status == 2
    assert report.lines[0] == "Found 2 vulnerabilities"
    assert "Vulnerability Found: HIGH - https://www.npmjs.com/advisories/100" in report.lines
    assert "Vulnerability Found: CRITICAL - https://www.npmjs.com/advisories/101" in report.lines
    assert report.lines[-1] == HINT_LINE


def test_report_exemption_counts_precede_findings():
    classified = ClassifiedFindings(
        reportable=[make_finding(100, "high")],
        dev_exempt=[make_finding(1, "high"), make_finding(2, "low")],
        severity_exempt=[make_finding(3, "low")],
        explicitly_excluded=[make_finding(4, "critical")],
    )

    report = ReportGenerator(Config(min_severity=Severity.MODERATE)).generate(classified)

    assert report.lines == [
        "Found 5 vulnerabilities",
        "2 ignored because they are dev dependencies",
        '1 ignored because severity was lower than "moderate"',
        "1 ignored because they are excluded advisories",
        "Vulnerability Found: HIGH - https://www.npmjs.com/advisories/100",
        HINT_LINE,
    ]
    assert report.exit_status == 1


def test_report_omits_empty_exemption_buckets():
    report = ReportGenerator(Config()).generate(ClassifiedFindings())

    assert report.lines == ["Found 0 vulnerabilities", HINT_LINE]
    assert report.exit_status == 0


def test_stale_exclusions_warn_without_failing():
    classified = ClassifiedFindings(stale_exclusions=[42, 999])

    report = ReportGenerator(Config()).generate(classified)

    assert "Excluded advisories not found in audit output: 42, 999" in report.lines
    assert report.exit_status == 0


def test_stale_exclusions_fail_when_requested():
    classified = ClassifiedFindings(
        reportable=[make_finding(100, "high")], stale_exclusions=[42, 999]
    )

    report = ReportGenerator(Config(fail_on_missing_exclusions=True)).generate(classified)

    assert report.reportable_count == 1
    assert report.exit_status == 3


@pytest.mark.parametrize("count,expected", [(0, 0), (1, 1), (255, 255), (256, 255), (10_000, 255)])
def test_clamp_exit_status(count, expected):
    assert clamp_exit_status(count) == expected


def test_exit_status_clamped_for_many_findings():
    classified = ClassifiedFindings(
        reportable=[make_finding(advisory_id, "high") for advisory_id in range(300)]
    )

    report = ReportGenerator(Config()).generate(classified)

    assert report.reportable_count == 300
    assert report.exit_status == 255


def test_debug_dump_includes_raw_records():
    classified = ClassifiedFindings(
        dev_exempt=[make_finding(1, "high")],
        severity_exempt=[make_finding(3, "low")],
        explicitly_excluded=[make_finding(4, "critical")],
    )

    lines = ReportGenerator(Config(debug=True)).debug_dump(classified)

    assert lines[0] == "Dev dependency advisories:"
    assert json.loads(lines[1]) == {"advisory": {"id": 1}}
    assert lines[2] == "Excluded advisories:"
    assert json.loads(lines[3]) == {"advisory": {"id": 4}}
    assert lines[4] == "Severity ignored advisories:"
    assert json.loads(lines[5]) == {"advisory": {"id": 3}}
