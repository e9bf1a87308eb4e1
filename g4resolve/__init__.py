"""g4resolve - resolve transitive imports of ANTLR grammars."""

from g4resolve.config import ResolverConfig
from g4resolve.errors import (
    CircularImportError,
    ConfigError,
    DepthExceededError,
    GrammarIOError,
    ImportResolutionError,
    NotFoundError,
    SecurityError,
)
from g4resolve.resolution import DependencyGraph, ImportedGrammar, ImportResolver, ResolutionReport
from g4resolve.version import (
    ANTLR_SYNTAX_VERSION,
    G4RESOLVE_VERSION,
    G4RESOLVE_VERSION_MAJOR,
    G4RESOLVE_VERSION_MINOR,
    G4RESOLVE_VERSION_PATCH,
    get_version_info,
    get_version_string,
)

__version__ = G4RESOLVE_VERSION
__all__ = [
    "ANTLR_SYNTAX_VERSION",
    "G4RESOLVE_VERSION",
    "G4RESOLVE_VERSION_MAJOR",
    "G4RESOLVE_VERSION_MINOR",
    "G4RESOLVE_VERSION_PATCH",
    "CircularImportError",
    "ConfigError",
    "DependencyGraph",
    "DepthExceededError",
    "GrammarIOError",
    "ImportResolutionError",
    "ImportResolver",
    "ImportedGrammar",
    "NotFoundError",
    "ResolutionReport",
    "ResolverConfig",
    "SecurityError",
    "get_version_info",
    "get_version_string",
]
