"""Base tool protocol and shared subprocess infrastructure.

Provides:
- Tool protocol for scanner wrappers
- ToolStatus / ScanOutcome for classified scanner runs
- Helper functions for binary checking and subprocess execution
- normalize_lines for line terminator handling
"""

import asyncio
import shutil
import structlog
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

logger = structlog.get_logger()


class ToolStatus(str, Enum):
    """Classified outcome of one scanner invocation."""
    SUCCESS = "success"
    NETWORK_ERROR = "network_error"
    ERROR = "error"
    NOT_INSTALLED = "not_installed"


@dataclass
class ScanOutcome:
    """Result of one scanner invocation.

    ``lines`` holds the combined stdout/stderr split on normalized newlines.
    """
    status: ToolStatus
    exit_code: int = 0
    raw_output: str = ""
    lines: list[str] = field(default_factory=list)
    error: str = ""
    duration_seconds: float = 0.0

    @property
    def network_error(self) -> bool:
        return self.status == ToolStatus.NETWORK_ERROR


@runtime_checkable
class Tool(Protocol):
    """Protocol for scanner wrappers."""
    name: str
    binary_name: str

    async def run(self) -> ScanOutcome:
        """Invoke the scanner once."""
        ...

    def is_available(self) -> bool:
        """Check if the scanner binary is available."""
        ...


def check_binary(binary_name: str) -> bool:
    """Check if binary exists on PATH.

    Args:
        binary_name: Name of binary to check (e.g., "yarn")

    Returns:
        True if binary is available, False otherwise
    """
    return shutil.which(binary_name) is not None


def normalize_lines(text: str) -> list[str]:
    """Convert CRLF and bare CR terminators to LF and split into lines."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


async def run_subprocess(cmd: list[str]) -> tuple[str, str, int]:
    """Run command via subprocess and collect both output streams.

    Uses asyncio.create_subprocess_exec (never a shell). Output is only
    returned once the process has exited. There is no timeout: a hung
    process blocks indefinitely.

    Args:
        cmd: Command and arguments as list (e.g., ["yarn", "audit", "--json"])

    Returns:
        Tuple of (stdout, stderr, returncode)
    """
    log = logger.bind(cmd=cmd[0])

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        log.debug("subprocess_started", pid=process.pid)

        stdout_bytes, stderr_bytes = await process.communicate()

        stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
        stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")
        returncode = process.returncode or 0

        log.debug(
            "subprocess_completed",
            returncode=returncode,
            stdout_len=len(stdout),
            stderr_len=len(stderr)
        )

        return stdout, stderr, returncode

    except Exception as e:
        log.error("subprocess_failed", error=str(e))
        raise
