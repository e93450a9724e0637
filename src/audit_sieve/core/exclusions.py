"""Advisory exclusion list parsing.

The exclusion file is plain text: lines starting with ``#`` are comments,
everything else is a comma-separated list of integer advisory ids.

Provides:
- parse_exclusions: Parse exclusion text into a set of advisory ids
- load_exclusions: Read and parse the exclusion file, if present
- resolve_exclusions: Pick command-line exclusions over the file
"""

import re
from pathlib import Path

import structlog

from .errors import ConfigError

logger = structlog.get_logger()

_ADVISORY_ID = re.compile(r"^\d+$")


def parse_exclusions(text: str, source: str = "exclusions") -> frozenset[int]:
    """Parse comma-separated advisory ids.

    Comment lines are dropped first. Line breaks separate ids the same way
    commas do. Whitespace around ids is ignored; empty entries are not.

    Args:
        text: Raw exclusion text
        source: Where the text came from, used in error messages

    Returns:
        Set of advisory ids

    Raises:
        ConfigError: If any entry is not an integer

    Example:
        >>> sorted(parse_exclusions("123,45\\n# comment\\n67"))
        [45, 67, 123]
    """
    ids = set()
    for line in text.splitlines():
        if line.lstrip().startswith("#") or not line.strip():
            continue

        for entry in line.split(","):
            entry = entry.strip()
            if not _ADVISORY_ID.match(entry):
                raise ConfigError(
                    f"Invalid advisory id {entry!r} in {source}: "
                    "expected a comma-separated list of integers"
                )
            ids.add(int(entry))

    return frozenset(ids)


def load_exclusions(path: str | Path) -> frozenset[int] | None:
    """Read the exclusion file.

    Args:
        path: Path to the exclusion file

    Returns:
        Parsed advisory ids, or None when the file does not exist

    Raises:
        ConfigError: If the file cannot be read or is malformed
    """
    path = Path(path)
    if not path.is_file():
        return None

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read exclusions file {path}: {e}") from e

    ids = parse_exclusions(text, source=str(path))
    logger.debug("exclusions_loaded", path=str(path), count=len(ids))
    return ids


def resolve_exclusions(
    cli_value: str | None, path: str | Path
) -> tuple[frozenset[int], list[str]]:
    """Choose the exclusion set for a run.

    Command-line exclusions win outright; the file is never merged in.

    Args:
        cli_value: Raw ``--exclude`` value, if given
        path: Exclusion file path

    Returns:
        Tuple of (advisory ids, warnings to show the user)

    Raises:
        ConfigError: If the chosen source is malformed
    """
    warnings = []

    if cli_value is not None and cli_value.strip():
        ids = parse_exclusions(cli_value, source="--exclude")
        if Path(path).is_file():
            warnings.append(
                f"Ignoring {path} because exclusions were passed on the command line"
            )
        return ids, warnings

    return load_exclusions(path) or frozenset(), warnings
