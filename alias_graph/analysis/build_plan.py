"""Build plan — order targets after their inputs and find what to rebuild."""

from __future__ import annotations

from typing import Iterable

from alias_graph.analysis.tsort import MappingGraph, Sortable


class BuildPlan(Sortable[str]):
    """Targets and the inputs they are built from.

    Inputs that are not targets themselves (source files) are leaves.
    """

    def __init__(self):
        self.inputs: dict[str, list[str]] = {}

    def add(self, target: str, inputs: Iterable[str] = ()) -> None:
        deps = self.inputs.setdefault(target, [])
        for name in inputs:
            if name not in deps:
                deps.append(name)
            self.inputs.setdefault(name, [])

    def each_node(self) -> Iterable[str]:
        return iter(self.inputs)

    def each_child(self, node: str) -> Iterable[str]:
        return iter(self.inputs.get(node, ()))

    def build_order(self) -> list[str]:
        """Every node, inputs first. Raises ``CyclicDependency`` on loops."""
        return self.topological_sort()

    def cycles(self) -> list[list[str]]:
        return [
            component for component in self.strongly_connected_components()
            if len(component) > 1 or component[0] in self.inputs.get(component[0], ())
        ]

    def stale_targets(self, changed: Iterable[str]) -> list[str]:
        """Targets that must be rebuilt after *changed* inputs, in build order."""
        dirty = set(changed)
        dependents: dict[str, list[str]] = {}
        for target, deps in self.inputs.items():
            for dep in deps:
                dependents.setdefault(dep, []).append(target)

        affected: set[str] = set()
        for name in dirty:
            for component in MappingGraph(dependents).strongly_connected_components_from(name):
                affected.update(component)

        return [
            node for node in self.build_order()
            if node in affected and self.inputs.get(node)
        ]
