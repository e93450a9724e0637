"""Scanner wrappers.

Provides:
- Base tool protocol and subprocess infrastructure
- YarnAuditTool for ``yarn audit --json``
"""

from .base import ScanOutcome, Tool, ToolStatus, check_binary, normalize_lines, run_subprocess
from .yarn_audit import NETWORK_ERROR_SIGNATURE, YarnAuditTool, is_network_error

__all__ = [
    "ScanOutcome",
    "Tool",
    "ToolStatus",
    "check_binary",
    "normalize_lines",
    "run_subprocess",
    "NETWORK_ERROR_SIGNATURE",
    "YarnAuditTool",
    "is_network_error",
]
