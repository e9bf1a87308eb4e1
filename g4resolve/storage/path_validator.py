"""Path validation against traversal and escape from allowed directories."""

from __future__ import annotations

import logging
from pathlib import Path

from g4resolve.errors import SecurityError

logger = logging.getLogger(__name__)


class PathValidator:
    """Restrict file access to a set of allowed base directories."""

    def __init__(self, allowed_paths: list[str | Path] | None = None, enabled: bool = True) -> None:
        """Initialize path validator.

        Args:
            allowed_paths: Directories that grammar files may live under.
                Symlinks are resolved, so a link pointing outside every
                allowed directory is rejected.
            enabled: When False every path is accepted.

        """
        self.enabled = enabled
        self.allowed_paths = _unique([Path(p).expanduser().resolve() for p in allowed_paths or []])
        logger.debug("PathValidator allowed paths: %s", [str(p) for p in self.allowed_paths])

    @classmethod
    def from_config(cls, config) -> PathValidator:
        return cls(config.allowed_base_paths, enabled=config.sanitize_paths)

    def is_allowed(self, path: str | Path | None) -> bool:
        """Check if a path is inside one of the allowed directories."""
        if not self.enabled:
            return True
        if path is None:
            return False

        resolved = Path(path).resolve()
        allowed = any(resolved.is_relative_to(base) for base in self.allowed_paths)
        if not allowed:
            logger.warning("Path access denied: %s (not in allowed paths)", resolved)
        return allowed

    def validate(self, path: str | Path | None) -> None:
        """Validate a path.

        Raises:
            SecurityError: If the path contains traversal segments or
                resolves outside every allowed directory.

        """
        if not self.enabled:
            return

        if path is None:
            msg = "Path cannot be None"
            raise SecurityError(msg)

        parts = Path(path).parts
        if ".." in parts or any(part.startswith("~") for part in parts):
            logger.error("Path traversal attempt detected: %s", path)
            msg = f"Path traversal attempt detected: {path}"
            raise SecurityError(msg, path)

        if not self.is_allowed(path):
            msg = f"Path not allowed: {path}"
            raise SecurityError(msg, path)

        logger.debug("Path validation passed: %s", path)

    def get_allowed_paths(self) -> list[Path]:
        return list(self.allowed_paths)


def _unique(paths: list[Path]) -> list[Path]:
    # Preserve order
    seen = set()
    unique_paths = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            unique_paths.append(path)
    return unique_paths
