"""Grammar import resolution package."""

from .dependency_graph import DependencyGraph
from .import_resolver import ImportResolver, ResolutionReport
from .imported_grammar import ImportedGrammar

__all__ = [
    "DependencyGraph",
    "ImportResolver",
    "ImportedGrammar",
    "ResolutionReport",
]
