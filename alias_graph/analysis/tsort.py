"""Strongly connected components and topological sort over implicit graphs.

The graph is never materialized: callers supply ``each_node()`` (every node
once) and ``each_child(node)`` (direct successors, duplicates allowed). Nodes
only need ``==`` and ``hash``.

Components come out sink-first: a component is emitted before any component
that has an edge into it, so flattening them yields dependencies before
dependents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Iterable, Iterator, Mapping, TypeVar

from alias_graph.errors import CyclicDependency

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

EachNode = Callable[[], Iterable[T]]
EachChild = Callable[[T], Iterable[T]]
ComponentCallback = Callable[[list[T]], None]


@dataclass
class TraversalState(Generic[T]):
    """Bookkeeping owned by one traversal.

    Pass the same instance to several ``*_from`` calls to skip nodes that an
    earlier call already assigned to a component.
    """
    index: dict[T, int] = field(default_factory=dict)
    lowlink: dict[T, int] = field(default_factory=dict)
    on_stack: set[T] = field(default_factory=set)
    stack: list[T] = field(default_factory=list)
    self_loops: set[T] = field(default_factory=set)
    counter: int = 0

    def visited(self, node: T) -> bool:
        return node in self.index

    def enter(self, node: T) -> None:
        self.index[node] = self.counter
        self.lowlink[node] = self.counter
        self.counter += 1
        self.stack.append(node)
        self.on_stack.add(node)

    def pop_component(self, root: T) -> list[T]:
        component: list[T] = []
        while True:
            member = self.stack.pop()
            self.on_stack.discard(member)
            component.append(member)
            if member == root:
                break
        component.reverse()
        return component

    def is_cyclic(self, component: list[T]) -> bool:
        """True for components of size > 1 and for self-referencing singletons."""
        return len(component) > 1 or component[0] in self.self_loops


# ── Tarjan ───────────────────────────────────────────────────


def each_strongly_connected_component_from(
    start: T,
    each_child: EachChild,
    callback: ComponentCallback,
    state: TraversalState | None = None,
) -> None:
    """Emit every component reachable from *start* that *state* has not seen.

    Iterative Tarjan: the work stack holds ``(node, child iterator)`` frames,
    so graph depth is bounded by memory rather than the interpreter's
    recursion limit.
    """
    if state is None:
        state = TraversalState()
    if state.visited(start):
        return

    state.enter(start)
    work: list[tuple[T, Iterator[T]]] = [(start, iter(each_child(start)))]

    while work:
        node, children = work[-1]
        descended = False

        for child in children:
            if child == node:
                state.self_loops.add(node)
            if not state.visited(child):
                state.enter(child)
                work.append((child, iter(each_child(child))))
                descended = True
                break
            if child in state.on_stack:
                # index, not lowlink: the child is an ancestor on the current path
                if state.index[child] < state.lowlink[node]:
                    state.lowlink[node] = state.index[child]

        if descended:
            continue

        work.pop()
        if work:
            parent = work[-1][0]
            if state.lowlink[node] < state.lowlink[parent]:
                state.lowlink[parent] = state.lowlink[node]

        if state.lowlink[node] == state.index[node]:
            component = state.pop_component(node)
            logger.debug("component of %d rooted at %s", len(component), node)
            callback(component)


def strongly_connected_components_from(start: T, each_child: EachChild) -> list[list[T]]:
    """Components reachable from *start*, sink-first. Never enumerates other nodes."""
    components: list[list[T]] = []
    each_strongly_connected_component_from(start, each_child, components.append)
    return components


def each_strongly_connected_component(
    each_node: EachNode,
    each_child: EachChild,
    callback: ComponentCallback,
) -> None:
    state: TraversalState = TraversalState()
    for node in each_node():
        each_strongly_connected_component_from(node, each_child, callback, state)


def strongly_connected_components(each_node: EachNode, each_child: EachChild) -> list[list[T]]:
    """All components of the graph, sink-first."""
    components: list[list[T]] = []
    each_strongly_connected_component(each_node, each_child, components.append)
    return components


# ── Topological order ────────────────────────────────────────


def _strict(state: TraversalState, emit: Callable[[T], None]) -> ComponentCallback:
    def on_component(component: list[T]) -> None:
        if state.is_cyclic(component):
            logger.warning("cycle blocks ordering: %s", ", ".join(map(str, component)))
            raise CyclicDependency(component)
        emit(component[0])
    return on_component


def each_topological(
    each_node: EachNode,
    each_child: EachChild,
    callback: Callable[[T], None],
) -> None:
    """Call *callback* with each node, dependencies first.

    Raises ``CyclicDependency`` at the first cyclic component; nodes already
    handed to *callback* stay handed.
    """
    state: TraversalState = TraversalState()
    on_component = _strict(state, callback)
    for node in each_node():
        each_strongly_connected_component_from(node, each_child, on_component, state)


def topological_sort(each_node: EachNode, each_child: EachChild) -> list[T]:
    order: list[T] = []
    each_topological(each_node, each_child, order.append)
    return order


def topological_sort_from(start: T, each_child: EachChild) -> list[T]:
    """Strict order of the nodes reachable from *start*; *start* comes last."""
    order: list[T] = []
    state: TraversalState = TraversalState()
    each_strongly_connected_component_from(start, each_child, _strict(state, order.append), state)
    return order


# ── Capability interface ─────────────────────────────────────


class Sortable(Generic[T]):
    """Mixin for graphs that can enumerate their nodes and children.

    Subclasses implement ``each_node`` and ``each_child``.
    """

    def each_node(self) -> Iterable[T]:
        raise NotImplementedError

    def each_child(self, node: T) -> Iterable[T]:
        raise NotImplementedError

    def each_strongly_connected_component(self, callback: ComponentCallback) -> None:
        each_strongly_connected_component(self.each_node, self.each_child, callback)

    def strongly_connected_components(self) -> list[list[T]]:
        return strongly_connected_components(self.each_node, self.each_child)

    def strongly_connected_components_from(self, node: T) -> list[list[T]]:
        return strongly_connected_components_from(node, self.each_child)

    def topological_sort(self) -> list[T]:
        return topological_sort(self.each_node, self.each_child)


class MappingGraph(Sortable[T]):
    """Adapts ``{node: [children]}``; children absent from the mapping are leaves."""

    def __init__(self, mapping: Mapping[T, Iterable[T]]):
        self.mapping = mapping

    def each_node(self) -> Iterable[T]:
        return iter(self.mapping)

    def each_child(self, node: T) -> Iterable[T]:
        return iter(self.mapping.get(node, ()))
