"""Dependency graph over grammar names for a single resolution run."""

from __future__ import annotations

import graphlib
import logging

from g4resolve.errors import CircularImportError, DepthExceededError

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Track grammar import dependencies and reject cycles and deep chains."""

    def __init__(self, max_depth: int = 10) -> None:
        self.max_depth = max_depth
        self.edges: dict[str, set[str]] = {}

    @property
    def nodes(self) -> set[str]:
        """Every grammar name that appears in the graph."""
        names = set(self.edges)
        for deps in self.edges.values():
            names.update(deps)
        return names

    def add_dependency(self, source: str, target: str) -> None:
        """Record that ``source`` imports ``target``.

        No validation happens here; call :meth:`would_create_cycle` first.
        """
        self.edges.setdefault(source, set()).add(target)
        logger.debug("Added dependency: %s -> %s", source, target)

    def would_create_cycle(self, source: str, target: str) -> bool:
        """Check if adding ``source -> target`` would close a cycle."""
        if source == target:
            return True

        visited = set()
        to_visit = [target]
        while to_visit:
            current = to_visit.pop()
            if current == source:
                return True
            if current in visited:
                continue
            visited.add(current)
            to_visit.extend(self.edges.get(current, ()))
        return False

    def get_dependencies(self, name: str) -> set[str]:
        """Get direct dependencies of a grammar."""
        return set(self.edges.get(name, ()))

    def get_transitive_dependencies(self, name: str) -> set[str]:
        """Get every grammar reachable from ``name``."""
        visited = set()
        to_visit = list(self.edges.get(name, ()))
        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            to_visit.extend(self.edges.get(current, ()))
        return visited

    def get_depth(self, name: str) -> int:
        """Length in edges of the longest dependency chain starting at ``name``."""
        return self._depth(name, {}, set())

    def _depth(self, name: str, memo: dict[str, int], active: set[str]) -> int:
        if name in memo:
            return memo[name]

        children = self.edges.get(name)
        if not children:
            memo[name] = 0
            return 0

        active.add(name)
        deepest = 0
        for child in children:
            if child in active:
                raise CircularImportError(name, child)
            deepest = max(deepest, self._depth(child, memo, active))
        active.discard(name)

        memo[name] = deepest + 1
        return deepest + 1

    def validate_depth(self, name: str) -> None:
        """Raise DepthExceededError if the chain from ``name`` is too long."""
        depth = self.get_depth(name)
        if depth > self.max_depth:
            raise DepthExceededError(name, depth, self.max_depth)

    def get_topological_order(self) -> list[str]:
        """Order grammars so every dependency precedes its dependents.

        Raises:
            CircularImportError: If the graph contains a cycle.

        """
        sorter = graphlib.TopologicalSorter(
            {name: sorted(deps) for name, deps in sorted(self.edges.items())},
        )
        try:
            return list(sorter.static_order())
        except graphlib.CycleError as e:
            # args[1] lists the cycle with its first node repeated at the end
            cycle = e.args[1]
            raise CircularImportError(cycle[-1], cycle[-2]) from e

    def clear(self) -> None:
        self.edges.clear()

    def get_statistics(self) -> dict:
        """Get graph statistics."""
        nodes = self.nodes
        return {
            "total_nodes": len(nodes),
            "total_edges": sum(len(deps) for deps in self.edges.values()),
            "leaf_nodes": len([n for n in nodes if not self.edges.get(n)]),
            "max_depth": max((self.get_depth(n) for n in nodes), default=0),
            "depth_limit": self.max_depth,
        }

    def to_dict(self) -> dict[str, list[str]]:
        return {name: sorted(self.edges.get(name, ())) for name in sorted(self.nodes)}

    def export_dot(self) -> str:
        """Export graph to DOT format for visualization."""
        lines = ["digraph GrammarImports {"]
        lines.append("  rankdir=LR;")
        lines.append("  node [shape=box,style=filled,fillcolor=lightblue];")

        for name in sorted(self.nodes):
            safe_name = name.replace('"', '\\"')
            lines.append(f'  "{safe_name}";')

        for name, deps in sorted(self.edges.items()):
            safe_name = name.replace('"', '\\"')
            for dep in sorted(deps):
                safe_dep = dep.replace('"', '\\"')
                lines.append(f'  "{safe_name}" -> "{safe_dep}";')

        lines.append("}")
        return "\n".join(lines)
