"""Core audit-sieve functionality.

Provides:
- Run configuration and severity ordering
- Scanner record models and stream parsing
- Dev dependency matching and advisory classification
"""

from .classifier import ClassifiedFindings, classify
from .config import Config, load_config
from .dependencies import DevDependencyMatcher, is_dev_only_finding, load_dev_dependencies
from .errors import AuditSieveError, ConfigError, FatalScanError, MalformedOutput, TransientScanError
from .exclusions import load_exclusions, parse_exclusions, resolve_exclusions
from .output import Finding, RawRecord
from .severity import Severity, severity_should_be_ignored
from .stream import ParsedStream, extract_findings, parse_records

__all__ = [
    "ClassifiedFindings",
    "classify",
    "Config",
    "load_config",
    "DevDependencyMatcher",
    "is_dev_only_finding",
    "load_dev_dependencies",
    "AuditSieveError",
    "ConfigError",
    "FatalScanError",
    "MalformedOutput",
    "TransientScanError",
    "load_exclusions",
    "parse_exclusions",
    "resolve_exclusions",
    "Finding",
    "RawRecord",
    "Severity",
    "severity_should_be_ignored",
    "ParsedStream",
    "extract_findings",
    "parse_records",
]
