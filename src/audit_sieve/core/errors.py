"""Exception taxonomy for audit-sieve.

Every fatal path raises one of these; the CLI turns them into a message on
stderr and a non-zero exit status.
"""


class AuditSieveError(Exception):
    """Base exception for audit-sieve."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(AuditSieveError):
    """Bad option value or malformed exclusion file. Never retried."""


class ScanError(AuditSieveError):
    """Scanner invocation failed. Carries the scanner's raw output."""

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output


class TransientScanError(ScanError):
    """Network failure signature found in scanner output."""


class FatalScanError(ScanError):
    """Scanner failed for a reason other than the network."""


class MalformedOutput(AuditSieveError):
    """A line of scanner output could not be parsed as a JSON record."""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(
            f"Failed to parse scanner output on line {line_number}: {reason}"
        )
        self.line_number = line_number
        self.line = line
        self.reason = reason
