"""Grammar import resolver with path validation, caching, and cycle detection."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from g4resolve.cache.grammar_cache import GrammarCache, create_cache
from g4resolve.cache.keys import generate_import_key
from g4resolve.config import ResolverConfig
from g4resolve.errors import CircularImportError, NotFoundError
from g4resolve.resolution.dependency_graph import DependencyGraph
from g4resolve.resolution.imported_grammar import ImportedGrammar
from g4resolve.storage.file_store import FileStore, LocalFileStore, SupportsDiscovery
from g4resolve.storage.path_validator import PathValidator
from g4resolve.version import GRAMMAR_FILE_SUFFIX

logger = logging.getLogger(__name__)

NAME = r"[A-Za-z][A-Za-z0-9_]*"
IMPORT_PATTERN = re.compile(rf"\bimport\s+({NAME}(?:\s*,\s*{NAME})*)\s*;")
GRAMMAR_HEADER_PATTERN = re.compile(rf"\b(?:(?:lexer|parser)\s+)?grammar\s+({NAME})\s*;")
# String literals are matched so comment markers inside them are kept
COMMENT_PATTERN = re.compile(r"'(?:\\.|[^'\\\n])*'|//[^\n]*|/\*.*?\*/", re.DOTALL)
UNKNOWN_GRAMMAR = "Unknown"


@dataclass
class ResolutionReport:
    """Outcome of resolving a grammar file and all its imports."""

    root_name: str
    root_path: Path | None
    imports: dict[str, ImportedGrammar] = field(default_factory=dict)
    graph: DependencyGraph = field(default_factory=DependencyGraph)

    @property
    def order(self) -> list[str]:
        """Grammars in dependency order, root last."""
        order = self.graph.get_topological_order()
        return order or [self.root_name]

    def to_dict(self) -> dict:
        return {
            "root": self.root_name,
            "path": str(self.root_path) if self.root_path else None,
            "imports": {name: grammar.to_dict() for name, grammar in self.imports.items()},
            "dependencies": self.graph.to_dict(),
            "order": self.order,
        }


class ImportResolver:
    """Resolves ANTLR grammar imports into a flat name -> grammar mapping."""

    def __init__(
        self,
        config: ResolverConfig | None = None,
        file_store: FileStore | None = None,
        path_validator: PathValidator | None = None,
        cache: GrammarCache | None = None,
    ) -> None:
        """Initialize import resolver.

        Args:
            config: Resolver settings. Defaults to ``ResolverConfig()``.
            file_store: Source of grammar text. Defaults to the local filesystem.
            path_validator: Checked before every file store access. Defaults to
                a validator built from ``config``.
            cache: Shared cache for resolved imports. Defaults to a cache
                built from ``config``.

        """
        self.config = config or ResolverConfig()
        self.file_store = file_store or LocalFileStore()
        self.path_validator = path_validator or PathValidator.from_config(self.config)
        self.cache = cache if cache is not None else create_cache(self.config)

    def extract_imports(self, grammar_content: str) -> list[str]:
        """Extract imported grammar names in order of appearance."""
        imports = []
        for match in IMPORT_PATTERN.finditer(_strip_comments(grammar_content)):
            imports.extend(re.split(r"\s*,\s*", match.group(1)))

        logger.debug("Extracted %d imports", len(imports))
        return imports

    def has_imports(self, grammar_content: str) -> bool:
        return IMPORT_PATTERN.search(_strip_comments(grammar_content)) is not None

    def extract_grammar_name(self, grammar_content: str) -> str:
        """Name declared by the grammar header, or ``Unknown``."""
        match = GRAMMAR_HEADER_PATTERN.search(_strip_comments(grammar_content))
        return match.group(1) if match else UNKNOWN_GRAMMAR

    def resolve_import(self, import_name: str, base_dir: str | Path) -> ImportedGrammar:
        """Resolve a single imported grammar.

        Args:
            import_name: Name used in the ``import`` declaration.
            base_dir: Directory of the importing grammar.

        Returns:
            The imported grammar, from the cache when present.

        Raises:
            SecurityError: If a candidate path fails validation.
            NotFoundError: If no candidate file exists.
            GrammarIOError: If the file store cannot read the file.

        """
        base_dir = Path(base_dir)
        logger.debug("Resolving import: %s from %s", import_name, base_dir)

        cache_key = generate_import_key(import_name, base_dir)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for import: %s", import_name)
            return cached

        grammar_path = self._find_grammar_file(import_name, base_dir)
        content = self.file_store.read(grammar_path)
        imported = ImportedGrammar.from_file(import_name, content, grammar_path)

        self.cache.put(cache_key, imported)

        logger.debug("Resolved import %s to %s", import_name, grammar_path)
        return imported

    def resolve_imports(
        self,
        grammar_content: str,
        grammar_path: str | Path | None = None,
    ) -> dict[str, ImportedGrammar]:
        """Resolve all transitive imports of a grammar.

        Args:
            grammar_content: Source of the root grammar.
            grammar_path: Location of the root grammar; its directory is the
                base for the root's own imports. Defaults to the current
                directory.

        Returns:
            Mapping of import name to imported grammar. The root grammar is
            never part of it. Empty when import resolution is disabled.

        Raises:
            CircularImportError: If an import chain leads back to a grammar
                already on it.
            DepthExceededError: If a chain is longer than ``max_import_depth``.
            NotFoundError, SecurityError, GrammarIOError: From ``resolve_import``.

        """
        if not self.config.import_resolution_enabled:
            logger.debug("Import resolution is disabled")
            return {}

        _, resolved, _ = self._resolve_run(grammar_content, grammar_path)
        return resolved

    def load_grammar(self, file_path: str | Path) -> str:
        """Validate a grammar path and read it through the file store."""
        path = Path(file_path)
        self.path_validator.validate(path)
        if not self.file_store.exists(path):
            raise NotFoundError(path.stem, [path])
        return self.file_store.read(path)

    def resolve_file(self, file_path: str | Path) -> ResolutionReport:
        """Load a grammar file through the file store and resolve its imports."""
        path = Path(file_path)
        content = self.load_grammar(path)

        if not self.config.import_resolution_enabled:
            logger.debug("Import resolution is disabled")
            root_name = self.extract_grammar_name(content)
            return ResolutionReport(root_name=root_name, root_path=path)

        root_name, resolved, graph = self._resolve_run(content, path)
        return ResolutionReport(root_name=root_name, root_path=path, imports=resolved, graph=graph)

    def get_import_tree(
        self,
        grammar_content: str,
        grammar_path: str | Path | None = None,
    ) -> dict:
        """Get the import tree of a grammar.

        Returns:
            Nested ``{"name", "path", "imports"}`` dictionaries, root first.

        """
        if not self.config.import_resolution_enabled:
            root_name = self.extract_grammar_name(grammar_content)
            return {"name": root_name, "path": _path_str(grammar_path), "imports": []}

        root_name, resolved, graph = self._resolve_run(grammar_content, grammar_path)
        return self._build_import_tree(root_name, grammar_path, resolved, graph)

    def _resolve_run(
        self,
        grammar_content: str,
        grammar_path: str | Path | None,
    ) -> tuple[str, dict[str, ImportedGrammar], DependencyGraph]:
        root_name = self.extract_grammar_name(grammar_content)
        root_dir = Path(grammar_path).parent if grammar_path else Path.cwd()
        logger.info("Resolving imports for grammar %s at %s", root_name, grammar_path or root_dir)

        graph = DependencyGraph(self.config.max_import_depth)
        resolved: dict[str, ImportedGrammar] = {}

        # Each frame holds a grammar, its directory, and its unvisited imports
        stack = [(root_name, root_dir, iter(self.extract_imports(grammar_content)))]
        while stack:
            current, base_dir, pending = stack[-1]
            import_name = next(pending, None)
            if import_name is None:
                stack.pop()
                continue

            if graph.would_create_cycle(current, import_name):
                raise CircularImportError(current, import_name)
            graph.add_dependency(current, import_name)
            graph.validate_depth(current)
            if current != root_name:
                graph.validate_depth(root_name)

            if import_name in resolved:
                continue

            imported = self.resolve_import(import_name, base_dir)
            resolved[import_name] = imported
            stack.append(
                (import_name, imported.base_dir, iter(self.extract_imports(imported.content))),
            )

        logger.info("Resolved %d imports for %s", len(resolved), root_name)
        return root_name, resolved, graph

    def _find_grammar_file(self, grammar_name: str, base_dir: Path) -> Path:
        """Find a grammar file by name.

        The importing grammar's directory is tried first, then each allowed
        base path, then (with auto discovery) any file of that name below the
        allowed base paths. Every candidate is validated before it is checked.
        """
        file_name = f"{grammar_name}{GRAMMAR_FILE_SUFFIX}"
        searched = []

        candidates = [base_dir / file_name]
        candidates.extend(Path(allowed) / file_name for allowed in self.config.allowed_base_paths)
        for candidate in candidates:
            if candidate in searched:
                continue
            searched.append(candidate)
            self.path_validator.validate(candidate)
            if self.file_store.exists(candidate):
                return candidate

        if self.config.auto_discovery and isinstance(self.file_store, SupportsDiscovery):
            for allowed in self.config.allowed_base_paths:
                for discovered in self.file_store.discover_grammar_files(Path(allowed)):
                    if discovered.name == file_name:
                        self.path_validator.validate(discovered)
                        return discovered

        raise NotFoundError(grammar_name, searched)

    def _build_import_tree(
        self,
        name: str,
        path: str | Path | None,
        resolved: dict[str, ImportedGrammar],
        graph: DependencyGraph,
    ) -> dict:
        tree = {"name": name, "path": _path_str(path), "imports": []}
        for dep in sorted(graph.get_dependencies(name)):
            tree["imports"].append(
                self._build_import_tree(dep, resolved[dep].source_path, resolved, graph),
            )
        return tree


def _strip_comments(grammar_content: str) -> str:
    """Blank out ``//`` and ``/* */`` comments, leaving string literals alone."""

    def replace(match: re.Match) -> str:
        text = match.group(0)
        return text if text.startswith("'") else " "

    return COMMENT_PATTERN.sub(replace, grammar_content)


def _path_str(path: str | Path | None) -> str | None:
    return str(path) if path is not None else None
