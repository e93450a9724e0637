"""Dev-dependency detection via dependency path matching.

A finding is dev-only when every one of its dependency paths starts at a
package declared in the manifest's ``devDependencies``.

Provides:
- DevDependencyMatcher: Compiled matcher over declared dev dependency names
- load_dev_dependencies: Read devDependencies names from the manifest
- is_dev_only_finding: Check a finding against an optional matcher
"""

import json
import re
from pathlib import Path

import structlog

from .output import PATH_SEPARATOR, DependencyPath, Finding

logger = structlog.get_logger()


class DevDependencyMatcher:
    """Matches dependency paths whose root package is a dev dependency.

    The pattern is built once per run from the declared names. Matching is
    a case-sensitive exact match on the first path segment.
    """

    def __init__(self, names: frozenset[str]):
        self.names = frozenset(names)
        alternatives = "|".join(re.escape(name) for name in sorted(self.names))
        self.pattern = re.compile(
            rf"^(?:{alternatives})(?:{re.escape(PATH_SEPARATOR)}|$)"
        )

    @classmethod
    def build(cls, names) -> "DevDependencyMatcher | None":
        """Build a matcher, or None when there are no dev dependencies.

        Args:
            names: Declared dev dependency names (None if no manifest)

        Returns:
            Matcher instance, or None if names is empty or None
        """
        if not names:
            return None
        return cls(frozenset(names))

    def is_dev_only_path(self, path: DependencyPath) -> bool:
        """Check whether a dependency path is rooted at a dev dependency."""
        return self.pattern.match(PATH_SEPARATOR.join(path)) is not None

    def is_dev_only(self, finding: Finding) -> bool:
        """Check whether every path of a finding is rooted at a dev dependency.

        A finding with no known paths is never dev-only.
        """
        if not finding.paths:
            return False
        return all(self.is_dev_only_path(path) for path in finding.paths)


def is_dev_only_finding(finding: Finding, matcher: DevDependencyMatcher | None) -> bool:
    """Dev-only check that answers False when no matcher was built."""
    if matcher is None:
        return False
    return matcher.is_dev_only(finding)


def load_dev_dependencies(path: str | Path) -> tuple[frozenset[str] | None, list[str]]:
    """Read ``devDependencies`` names from a package manifest.

    A missing, unreadable, or dependency-less manifest disables the dev
    exemption with a warning rather than failing the run.

    Args:
        path: Path to package.json

    Returns:
        Tuple of (dev dependency names or None, warnings to show the user)
    """
    path = Path(path)
    warnings = []

    if not path.is_file():
        warnings.append(f"{path} not found; dev dependency exemption is disabled")
        return None, warnings

    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("manifest_unreadable", path=str(path), error=str(e))
        warnings.append(
            f"Unable to read {path} ({e}); dev dependency exemption is disabled"
        )
        return None, warnings

    dev_dependencies = manifest.get("devDependencies") if isinstance(manifest, dict) else None
    if not isinstance(dev_dependencies, dict) or not dev_dependencies:
        warnings.append(
            f"No devDependencies declared in {path}; dev dependency exemption is disabled"
        )
        return None, warnings

    names = frozenset(dev_dependencies)
    logger.debug("dev_dependencies_loaded", path=str(path), count=len(names))
    return names, warnings
