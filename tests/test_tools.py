"""Unit tests for the yarn audit wrapper.

All tests use mocked subprocess calls; no yarn binary is required.
"""

import json
import pytest
from unittest.mock import AsyncMock, patch
from audit_sieve.tools import (
    NETWORK_ERROR_SIGNATURE,
    ToolStatus,
    YarnAuditTool,
    is_network_error,
    normalize_lines,
    run_subprocess,
)


NETWORK_ERROR_OUTPUT = (
    '{"type":"info","data":"fetching advisories"}\n'
    'Error: Request failed "503 Service Unavailable"\n'
)


def mock_process(stdout: bytes, stderr: bytes = b"", returncode: int = 0):
    process = AsyncMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.returncode = returncode
    return process


def test_network_error_signature_matches_known_message():
    """Test the literal registry failure message is detected."""
    assert NETWORK_ERROR_SIGNATURE == "Error: Request failed "
    assert is_network_error(['Error: Request failed "500 Internal Server Error"'])
    assert is_network_error(["info", 'yarn audit v1 Error: Request failed "ETIMEDOUT"'])


def test_network_error_signature_not_matched_by_other_errors():
    assert not is_network_error(["Error: Something else went wrong"])
    assert not is_network_error(["Error: Request failed"])  # no trailing space
    assert not is_network_error([])


def test_normalize_lines_handles_all_terminators():
    assert normalize_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


@pytest.mark.asyncio
async def test_yarn_audit_success(audit_output, make_advisory):
    """Test that a run with advisories (bitmask exit code) is a success."""
    tool = YarnAuditTool()
    output = audit_output(make_advisory(100, "high", ["lodash"]))

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(output.encode(), returncode=8)

            outcome = await tool.run()

            assert outcome.status == ToolStatus.SUCCESS
            assert outcome.exit_code == 8
            assert not outcome.network_error
            assert json.loads(outcome.lines[0])["data"]["advisory"]["id"] == 100
            mock_exec.assert_called_once()
            assert mock_exec.call_args.args == ("yarn", "audit", "--json")


@pytest.mark.asyncio
async def test_yarn_audit_combines_stdout_and_stderr():
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(
                b'{"type":"info","data":"a"}\r\n',
                b'{"type":"warning","data":"b"}\r\n',
            )

            outcome = await tool.run()

            assert outcome.status == ToolStatus.SUCCESS
            assert '{"type":"info","data":"a"}' in outcome.lines
            assert '{"type":"warning","data":"b"}' in outcome.lines
            assert all("\r" not in line for line in outcome.lines)


@pytest.mark.asyncio
async def test_yarn_audit_network_error_wins_over_exit_code():
    """Test that the network signature is reported even with exit code 1."""
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(b"", NETWORK_ERROR_OUTPUT.encode(), returncode=1)

            outcome = await tool.run()

            assert outcome.status == ToolStatus.NETWORK_ERROR
            assert outcome.network_error
            assert NETWORK_ERROR_SIGNATURE in outcome.raw_output


@pytest.mark.asyncio
async def test_yarn_audit_network_error_with_zero_exit_code():
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(NETWORK_ERROR_OUTPUT.encode(), returncode=0)

            outcome = await tool.run()

            assert outcome.status == ToolStatus.NETWORK_ERROR


@pytest.mark.asyncio
async def test_yarn_audit_exit_code_one_is_fatal():
    """Test that exit code 1 without the network signature is an error."""
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(
                b"", b"error An unexpected error occurred\n", returncode=1
            )

            outcome = await tool.run()

            assert outcome.status == ToolStatus.ERROR
            assert outcome.exit_code == 1
            assert "unexpected error" in outcome.raw_output


@pytest.mark.asyncio
async def test_yarn_audit_handles_missing_binary():
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value=None):
        outcome = await tool.run()

        assert outcome.status == ToolStatus.NOT_INSTALLED
        assert "not installed" in outcome.error


@pytest.mark.asyncio
async def test_yarn_audit_custom_command():
    tool = YarnAuditTool(("npx", "yarn", "audit", "--json", "--groups", "dependencies"))

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/npx"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(b"")

            outcome = await tool.run()

            assert outcome.status == ToolStatus.SUCCESS
            assert mock_exec.call_args.args[0] == "npx"


@pytest.mark.asyncio
async def test_yarn_audit_keeps_streams_on_separate_lines():
    """Test that stdout without a trailing newline does not merge into stderr."""
    tool = YarnAuditTool()

    with patch("audit_sieve.tools.base.shutil.which", return_value="/usr/bin/yarn"):
        with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = mock_process(
                b'{"type":"info","data":"a"}',
                b'{"type":"warning","data":"b"}\n',
            )

            outcome = await tool.run()

            non_blank = [line for line in outcome.lines if line]
            assert non_blank == ['{"type":"info","data":"a"}', '{"type":"warning","data":"b"}']
            assert all(json.loads(line) for line in non_blank)


@pytest.mark.asyncio
async def test_run_subprocess_waits_for_exit_without_timeout():
    with patch("audit_sieve.tools.base.asyncio.create_subprocess_exec") as mock_exec:
        process = mock_process(b"out", b"err", returncode=3)
        mock_exec.return_value = process

        stdout, stderr, returncode = await run_subprocess(["yarn", "audit", "--json"])

        assert (stdout, stderr, returncode) == ("out", "err", 3)
        process.communicate.assert_awaited_once_with()
        with pytest.raises(TypeError):
            await run_subprocess(["yarn"], timeout=5)
