"""Circular alias diagnostics — cycles, dangling references, alias order."""

from __future__ import annotations

from alias_graph.analysis.alias_dependency import TypeAliasDependency
from alias_graph.analysis.tsort import strongly_connected_components, topological_sort
from alias_graph.models import TypeName


def _children(builder: TypeAliasDependency):
    def each_child(name: TypeName) -> list[TypeName]:
        return sorted(builder.direct_dependencies_of(name), key=str)
    return each_child


def alias_components(builder: TypeAliasDependency) -> list[list[TypeName]]:
    """Every alias grouped into strongly connected components, dependencies first."""
    return strongly_connected_components(builder.env.alias_names, _children(builder))


def alias_order(builder: TypeAliasDependency) -> list[TypeName]:
    """Aliases ordered so each comes after the aliases it references.

    Raises ``CyclicDependency`` when any alias is circular.
    """
    return topological_sort(builder.env.alias_names, _children(builder))


def find_circular_aliases(builder: TypeAliasDependency) -> list[dict]:
    """Group circular aliases by cycle.

    Returns list of dicts: {members, size, self_reference}
    """
    results: list[dict] = []
    for component in alias_components(builder):
        head = component[0]
        self_reference = head in builder.direct_dependencies_of(head)
        if len(component) == 1 and not self_reference:
            continue
        results.append({
            "members": [str(name) for name in component],
            "size": len(component),
            "self_reference": len(component) == 1,
        })
    return results


def find_dangling_references(builder: TypeAliasDependency) -> list[dict]:
    """Alias references that do not resolve to any declared alias.

    Returns list of dicts: {alias, reference}
    """
    results: list[dict] = []
    for name in builder.env.alias_names():
        for ref in builder.dangling_references_of(name):
            results.append({"alias": str(name), "reference": str(ref)})
    return results


def summarize(builder: TypeAliasDependency) -> dict:
    """Full circularity report for an environment.

    Returns: {aliases, circular, cycles, dangling}
    """
    names = builder.env.alias_names()
    return {
        "aliases": len(names),
        "circular": [str(name) for name in names if builder.is_circular(name)],
        "cycles": find_circular_aliases(builder),
        "dangling": find_dangling_references(builder),
    }
