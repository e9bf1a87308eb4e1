"""File store used to load grammar sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from g4resolve.errors import GrammarIOError, NotFoundError
from g4resolve.version import GRAMMAR_FILE_SUFFIX

logger = logging.getLogger(__name__)


@runtime_checkable
class FileStore(Protocol):
    """Read access to grammar files.

    Paths are validated by the caller before they reach the store.
    """

    def exists(self, path: Path) -> bool: ...

    def read(self, path: Path) -> str: ...


@runtime_checkable
class SupportsDiscovery(Protocol):
    """File store that can list grammar files under a directory."""

    def discover_grammar_files(self, directory: Path) -> list[Path]: ...


class LocalFileStore:
    """File store backed by the local filesystem."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read(self, path: Path) -> str:
        path = Path(path)
        logger.debug("Loading grammar file: %s", path)
        try:
            content = path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            raise NotFoundError(path.stem, [path]) from None
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read grammar file {path}: {e}"
            raise GrammarIOError(msg, path) from e

        logger.debug("Loaded grammar file %s (%d chars)", path, len(content))
        return content

    def discover_grammar_files(self, directory: Path) -> list[Path]:
        """Find every grammar file below a directory."""
        directory = Path(directory)
        if not directory.is_dir():
            return []

        files = sorted(p for p in directory.rglob(f"*{GRAMMAR_FILE_SUFFIX}") if p.is_file())
        logger.debug("Found %d grammar files in %s", len(files), directory)
        return files
