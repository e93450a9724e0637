"""Advisory severity levels and the severity floor check.

Provides:
- Severity: Ordered enum of advisory severities reported by the scanner
- severity_should_be_ignored: True when a severity falls below the floor
"""

from enum import Enum


class Severity(str, Enum):
    """Advisory severity as reported by the scanner.

    Values are the scanner's lowercase names. Ordering follows ``rank``:
    info < low < moderate < high < critical.
    """

    INFO = "info"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, name: str) -> "Severity":
        """Look up a severity by name, case-insensitively.

        Raises:
            ValueError: If name is not a known severity
        """
        return cls(name.strip().lower())


_RANKS = {
    Severity.INFO: 0,
    Severity.LOW: 1,
    Severity.MODERATE: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


def severity_should_be_ignored(severity: Severity, min_severity: Severity) -> bool:
    """Check whether a finding's severity is strictly below the configured floor.

    Args:
        severity: Severity of the finding
        min_severity: Configured severity floor

    Returns:
        True if the finding should be exempted on severity grounds
    """
    return severity.rank < min_severity.rank
