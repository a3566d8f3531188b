"""Exceptions raised by the alias-graph engine, builder and loaders."""

from __future__ import annotations

from typing import Any


class AliasGraphError(Exception):
    """Base class for every alias-graph error."""
    pass


class CyclicDependency(AliasGraphError):
    """Raised by strict ordering when the graph contains a cycle.

    ``component`` holds the strongly connected component that blocks the
    ordering, in the order the traversal pushed its members.
    """

    def __init__(self, component: list[Any]):
        self.component = list(component)
        names = ", ".join(str(node) for node in self.component)
        super().__init__(f"Circular dependency: {names}")


class UnknownEntity(AliasGraphError):
    """Raised when a name has no corresponding definition."""

    def __init__(self, name: Any, reason: str = "no definition"):
        self.name = name
        super().__init__(f"Unknown entity {name}: {reason}")


class DuplicateDeclaration(AliasGraphError):
    """Raised when the same alias is declared twice in one environment."""

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"Duplicate declaration: {name}")


class DefinitionsError(AliasGraphError):
    """Raised when a definitions document cannot be loaded."""
    pass
