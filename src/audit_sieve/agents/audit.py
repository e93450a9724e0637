"""Audit agent: invokes the scanner, retries network failures, parses output.

Flow:
1. Run the scanner
2. On a network failure, retry after a fixed delay (if enabled) or fail
3. On any other scanner failure, fail with the raw output
4. Parse the JSON-lines stream and build one Finding per advisory
"""

import asyncio
from typing import Awaitable, Callable

from audit_sieve.core.config import Config
from audit_sieve.core.errors import FatalScanError, TransientScanError
from audit_sieve.core.output import Finding
from audit_sieve.core.stream import extract_findings, parse_records
from audit_sieve.tools import ScanOutcome, Tool, ToolStatus, YarnAuditTool

from .base import BaseAgent

SleepFunc = Callable[[float], Awaitable[None]]


class AuditAgent(BaseAgent):
    """Runs the scanner until it produces a usable result.

    Network failures are retried without limit when
    ``config.retry_on_network_failure`` is set. The delay function is
    injectable so tests do not have to wait.
    """

    def __init__(
        self,
        config: Config,
        tool: Tool | None = None,
        sleep: SleepFunc | None = None,
        run_id: str | None = None,
    ):
        super().__init__(config, run_id=run_id)
        self.tool = tool or YarnAuditTool(config.scanner_command)
        self.sleep = sleep or asyncio.sleep
        self.attempts = 0

    async def invoke(self) -> ScanOutcome:
        """Run the scanner, retrying network failures per policy.

        Returns:
            First outcome that is neither a network error nor a failure

        Raises:
            TransientScanError: Network failure with retries disabled
            FatalScanError: Scanner failed or is not installed
        """
        while True:
            self.attempts += 1
            outcome = await self.tool.run()
            self.log.debug(
                "scan_attempt",
                attempt=self.attempts,
                status=outcome.status.value,
                duration_seconds=round(outcome.duration_seconds, 3),
            )

            if outcome.status == ToolStatus.NETWORK_ERROR:
                if not self.config.retry_on_network_failure:
                    self.log.error("network_failure", attempt=self.attempts)
                    raise TransientScanError(
                        "Network failure while running the audit",
                        raw_output=outcome.raw_output,
                    )

                self.log.warning(
                    "network_failure_retrying",
                    attempt=self.attempts,
                    delay_seconds=self.config.retry_delay_seconds,
                )
                await self.sleep(self.config.retry_delay_seconds)
                continue

            if outcome.status == ToolStatus.NOT_INSTALLED:
                raise FatalScanError(outcome.error)

            if outcome.status == ToolStatus.ERROR:
                self.log.error(
                    "scan_failed", attempt=self.attempts, exit_code=outcome.exit_code
                )
                raise FatalScanError(
                    "Audit failed with exit code 1",
                    raw_output=outcome.raw_output,
                )

            return outcome

    async def run(self) -> list[Finding]:
        """Run the audit and return one Finding per advisory.

        Raises:
            TransientScanError: Network failure with retries disabled
            FatalScanError: Scanner failed or is not installed
            MalformedOutput: Scanner output contained an unparseable line
        """
        self.log.debug("audit_start", cmd=list(self.config.scanner_command))

        outcome = await self.invoke()
        stream = parse_records(outcome.lines)
        findings = extract_findings(stream.records)

        self.log.debug(
            "audit_complete",
            attempts=self.attempts,
            records=len(stream.records),
            findings=len(findings),
        )
        return findings
