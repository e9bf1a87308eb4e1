"""Grammar file access and path validation."""

from .file_store import FileStore, LocalFileStore, SupportsDiscovery
from .path_validator import PathValidator

__all__ = [
    "FileStore",
    "LocalFileStore",
    "PathValidator",
    "SupportsDiscovery",
]
