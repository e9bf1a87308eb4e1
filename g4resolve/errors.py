"""Exceptions raised while resolving grammar imports.

Every exception derives from :class:`ImportResolutionError` and also from the
builtin exception closest to its meaning, so callers can catch either.
"""

from __future__ import annotations

from pathlib import Path


class ImportResolutionError(Exception):
    """Base class for import resolution failures."""


class NotFoundError(ImportResolutionError, FileNotFoundError):
    """Imported grammar has no file under any searched directory."""

    def __init__(self, name: str, searched: list[Path] | None = None) -> None:
        self.name = name
        self.searched = list(searched or [])
        msg = f"Could not find imported grammar '{name}'"
        if self.searched:
            msg += f". Searched: {', '.join(str(p) for p in self.searched)}"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.args[0]


class SecurityError(ImportResolutionError, PermissionError):
    """Candidate path failed path validation."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return self.args[0]


class CircularImportError(ImportResolutionError, RecursionError):
    """Adding an import edge would close a cycle."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Circular import detected: {source} -> {target}")


class DepthExceededError(ImportResolutionError):
    """Dependency chain is longer than the configured maximum."""

    def __init__(self, name: str, depth: int, max_depth: int) -> None:
        self.name = name
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Import depth {depth} exceeds maximum allowed depth {max_depth} "
            f"for grammar {name}",
        )


class GrammarIOError(ImportResolutionError, OSError):
    """File store failed for a reason other than a missing file."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return self.args[0]


class ConfigError(ImportResolutionError, ValueError):
    """Invalid resolver configuration."""
