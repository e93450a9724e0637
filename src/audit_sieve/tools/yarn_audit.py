"""yarn audit wrapper: runs the scanner and classifies the raw outcome.

Runs ``yarn audit --json`` and sorts the result into success, transient
network failure, or fatal failure. Does not retry; see AuditAgent.
"""

import time
import structlog
from .base import ScanOutcome, ToolStatus, check_binary, normalize_lines, run_subprocess

logger = structlog.get_logger()

NETWORK_ERROR_SIGNATURE = "Error: Request failed "

# yarn audit exits with a severity bitmask when advisories are found; only 1
# means the audit itself failed.
FATAL_EXIT_CODE = 1


def is_network_error(lines: list[str]) -> bool:
    """Check scanner output for the registry request failure signature.

    Args:
        lines: Scanner output lines

    Returns:
        True if any line contains the known request failure prefix
    """
    return any(NETWORK_ERROR_SIGNATURE in line for line in lines)


class YarnAuditTool:
    """Wrapper for ``yarn audit`` in JSON-lines mode.

    stdout and stderr are concatenated into one buffer after the process
    exits. Their relative order is not meaningful.
    """

    name = "yarn-audit"

    def __init__(self, command: tuple[str, ...] | list[str] = ("yarn", "audit", "--json")):
        """Initialize the wrapper.

        Args:
            command: Scanner command and arguments (default: yarn audit --json)
        """
        self.command = list(command)
        self.binary_name = self.command[0]
        self.log = logger.bind(tool=self.name)

    def is_available(self) -> bool:
        return check_binary(self.binary_name)

    async def run(self) -> ScanOutcome:
        """Invoke the scanner once and classify the result.

        Returns:
            ScanOutcome with status:
                NETWORK_ERROR if the request failure signature appears anywhere
                ERROR if the exit code is 1 without that signature
                NOT_INSTALLED if the binary is missing
                SUCCESS otherwise (including non-zero severity bitmask codes)
        """
        start_time = time.time()
        self.log.debug("scan_start", cmd=self.command)

        if not self.is_available():
            self.log.warning("binary_not_found", binary=self.binary_name)
            return ScanOutcome(
                status=ToolStatus.NOT_INSTALLED,
                error=(
                    f"{self.binary_name} not installed. "
                    "Install: npm install --global yarn"
                ),
                duration_seconds=time.time() - start_time
            )

        stdout, stderr, returncode = await run_subprocess(self.command)

        # Newline-joined so no record spans both streams
        raw_output = "\n".join(part for part in (stdout, stderr) if part)
        lines = normalize_lines(raw_output)
        duration = time.time() - start_time

        if is_network_error(lines):
            self.log.debug("scan_network_error", returncode=returncode)
            status = ToolStatus.NETWORK_ERROR
            error = "Network failure while contacting the package registry"
        elif returncode == FATAL_EXIT_CODE:
            self.log.debug("scan_failed", returncode=returncode)
            status = ToolStatus.ERROR
            error = f"{self.binary_name} failed with code {returncode}"
        else:
            status = ToolStatus.SUCCESS
            error = ""

        self.log.debug(
            "scan_complete",
            status=status.value,
            returncode=returncode,
            lines=len(lines),
            duration=duration
        )

        return ScanOutcome(
            status=status,
            exit_code=returncode,
            raw_output=raw_output,
            lines=lines,
            error=error,
            duration_seconds=duration
        )
