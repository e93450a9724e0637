"""Run configuration for audit-sieve.

The CLI builds a single Config per run and passes it explicitly into the
agent, classifier and report generator. It is frozen once constructed.

Provides:
- Config: Pydantic model with all run settings
- DEFAULT_SCANNER_COMMAND: Command used to invoke the scanner
- load_config: Factory that applies environment defaults
"""

import math
import os

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError
from .severity import Severity

DEFAULT_SCANNER_COMMAND = ("yarn", "audit", "--json")

DEFAULT_EXCLUSIONS_FILE = ".iyarc"
DEFAULT_MANIFEST_FILE = "package.json"

DEFAULT_RETRY_DELAY_SECONDS = 1.0
RETRY_DELAY_ENV = "AUDIT_SIEVE_RETRY_DELAY"


class Config(BaseModel):
    """Immutable settings for one audit run.

    Attributes:
        min_severity: Findings strictly below this severity are exempted
        excluded_advisory_ids: Advisory ids the user has accepted
        ignore_dev_dependencies: Exempt findings reachable only via devDependencies
        retry_on_network_failure: Re-run the scanner when it hits a network error
        debug: Dump raw records of exempted findings
        fail_on_missing_exclusions: Count stale exclusions toward the exit status
        scanner_command: Command and arguments used to run the scanner
        retry_delay_seconds: Fixed delay before each network retry
    """

    model_config = ConfigDict(frozen=True)

    min_severity: Severity = Field(default=Severity.INFO)
    excluded_advisory_ids: frozenset[int] = Field(default_factory=frozenset)
    ignore_dev_dependencies: bool = Field(default=False)
    retry_on_network_failure: bool = Field(default=False)
    debug: bool = Field(default=False)
    fail_on_missing_exclusions: bool = Field(default=False)

    scanner_command: tuple[str, ...] = Field(default=DEFAULT_SCANNER_COMMAND)
    retry_delay_seconds: float = Field(default=DEFAULT_RETRY_DELAY_SECONDS, ge=0)


def load_config(**overrides) -> Config:
    """Create a Config, falling back to environment and defaults for unset values.

    The retry delay comes from AUDIT_SIEVE_RETRY_DELAY unless overridden.

    Args:
        **overrides: Field values supplied by the caller (usually the CLI)

    Returns:
        Populated, frozen Config instance

    Raises:
        ConfigError: If AUDIT_SIEVE_RETRY_DELAY is not a non-negative number
    """
    if "retry_delay_seconds" not in overrides:
        raw = os.getenv(RETRY_DELAY_ENV)
        if raw is not None and raw.strip():
            try:
                delay = float(raw)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid {RETRY_DELAY_ENV} value {raw!r}: expected a number of seconds"
                ) from e
            if not math.isfinite(delay) or delay < 0:
                raise ConfigError(
                    f"Invalid {RETRY_DELAY_ENV} value {raw!r}: must be a non-negative number"
                )
            overrides["retry_delay_seconds"] = delay

    return Config(**overrides)
