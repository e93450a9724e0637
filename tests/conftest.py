"""Shared fixtures: builders for ``yarn audit --json`` output."""

import json

import pytest
import structlog


def advisory_record(advisory_id, severity, paths, url=None, module_name="pkg"):
    return {
        "type": "auditAdvisory",
        "data": {
            "resolution": {"id": advisory_id, "path": paths[0] if paths else "", "dev": False},
            "advisory": {
                "id": advisory_id,
                "severity": severity,
                "url": url or f"https://www.npmjs.com/advisories/{advisory_id}",
                "title": f"Advisory {advisory_id}",
                "module_name": module_name,
                "findings": [{"version": "1.0.0", "paths": list(paths)}],
            },
        },
    }


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the CLI's structlog level filter between tests."""
    yield
    structlog.reset_defaults()


SUMMARY_RECORD = {
    "type": "auditSummary",
    "data": {
        "vulnerabilities": {"info": 0, "low": 1, "moderate": 0, "high": 1, "critical": 0},
        "dependencies": 120,
    },
}


@pytest.fixture
def make_advisory():
    """Factory for auditAdvisory records as dicts."""
    return advisory_record


@pytest.fixture
def audit_output():
    """Render records as the JSON-lines text yarn audit prints."""
    def render(*records, summary=True):
        lines = [json.dumps(record) for record in records]
        if summary:
            lines.append(json.dumps(SUMMARY_RECORD))
        return "\n".join(lines) + "\n"
    return render
