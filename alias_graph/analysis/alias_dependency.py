"""Type alias dependency closure — direct/transitive deps and circularity.

An alias depends on every alias its right-hand side names. An alias is
circular when it can reach itself, which includes ``type foo = foo``.
Results are cached for the lifetime of the builder; build a new one when the
environment changes.
"""

from __future__ import annotations

import logging
import threading

from alias_graph.analysis.tsort import TraversalState, each_strongly_connected_component_from
from alias_graph.environment import Environment
from alias_graph.models import (
    Alias,
    AliasDecl,
    Block,
    ClassInstance,
    FunctionType,
    Interface,
    Proc,
    Record,
    Tuple,
    TypeExpr,
    TypeName,
)

logger = logging.getLogger(__name__)

# Constructors whose arguments make a self reference productive
_GUARDING = (ClassInstance, Interface, Alias, Tuple, Record, FunctionType, Block, Proc)


class TypeAliasDependency:
    """Dependency closure over the aliases of one ``Environment``.

    Args:
        env: The alias snapshot to analyze.
        guarded_recursion: Skip references nested under class, interface or
            alias arguments, tuples, records and function types, so that
            ``type json = String | Array[json]`` is not circular.
    """

    def __init__(self, env: Environment, guarded_recursion: bool = False):
        self.env = env
        self.guarded_recursion = guarded_recursion
        self.walk_count = 0
        self._direct: dict[TypeName, tuple[TypeName, ...]] = {}
        self._dangling: dict[TypeName, tuple[TypeName, ...]] = {}
        self._transitive: dict[TypeName, dict[TypeName, bool]] = {}
        self._cycles: dict[TypeName, tuple[TypeName, ...]] = {}
        self._direct_locks: dict[TypeName, threading.Lock] = {}
        self._guard = threading.Lock()
        self._closure_lock = threading.Lock()

    # ── Public queries ──────────────────────────────────────

    def is_circular(self, name: TypeName | str) -> bool:
        canonical = self._canonical(name)
        return canonical in self._transitive_of(canonical)

    def direct_dependencies_of(self, name: TypeName | str) -> frozenset[TypeName]:
        return frozenset(self._direct_of(self._canonical(name)))

    def dependencies_of(self, name: TypeName | str) -> set[TypeName]:
        """Every alias reachable from *name*; includes *name* itself iff circular."""
        return set(self._transitive_of(self._canonical(name)))

    def transitive_dependencies_of(self, name: TypeName | str) -> dict[TypeName, bool]:
        """Reachable aliases mapped to whether they share a cycle with *name*."""
        return dict(self._transitive_of(self._canonical(name)))

    def cycle_of(self, name: TypeName | str) -> list[TypeName]:
        """Members of the cycle through *name*, empty when it is not circular."""
        canonical = self._canonical(name)
        self._transitive_of(canonical)
        return list(self._cycles.get(canonical, ()))

    def dangling_references_of(self, name: TypeName | str) -> list[TypeName]:
        """Alias references in the definition of *name* that resolve to nothing."""
        canonical = self._canonical(name)
        self._direct_of(canonical)
        return list(self._dangling[canonical])

    # ── Eager construction ──────────────────────────────────

    def build_dependencies(self) -> None:
        for name in self.env.alias_names():
            self._direct_of(name)

    def transitive_closure(self) -> None:
        self.build_dependencies()
        for name in self.env.alias_names():
            self._transitive_of(name)
        logger.info(
            "closed %d aliases (%d walks, %d circular)",
            len(self._transitive), self.walk_count, len(self._cycles),
        )

    # ── Direct dependencies ─────────────────────────────────

    def _canonical(self, name: TypeName | str) -> TypeName:
        if isinstance(name, str):
            name = TypeName.parse(name)
        return self.env.normalize_type_name(name)

    def _lock_for(self, name: TypeName) -> threading.Lock:
        with self._guard:
            lock = self._direct_locks.get(name)
            if lock is None:
                lock = self._direct_locks[name] = threading.Lock()
            return lock

    def _direct_of(self, name: TypeName) -> tuple[TypeName, ...]:
        deps = self._direct.get(name)
        if deps is not None:
            return deps
        with self._lock_for(name):
            deps = self._direct.get(name)
            if deps is None:
                deps = self._walk(self.env.alias_decl(name))
                self._direct[name] = deps
        return deps

    def _walk(self, decl: AliasDecl) -> tuple[TypeName, ...]:
        with self._guard:
            self.walk_count += 1

        found: dict[TypeName, None] = {}
        dangling: list[TypeName] = []
        stack: list[tuple[TypeExpr, bool]] = [(decl.type, False)]

        while stack:
            type_, guarded = stack.pop()
            if isinstance(type_, Alias):
                target = self.env.resolve_type_name(type_.name, decl.context)
                if target is None:
                    logger.debug("%s: dangling alias reference %s", decl.name, type_.name)
                    dangling.append(type_.name)
                elif not guarded:
                    found.setdefault(target, None)

            nested_guarded = guarded or (self.guarded_recursion and isinstance(type_, _GUARDING))
            # reversed so sub-expressions are visited left to right
            for sub in reversed(list(type_.each_type())):
                stack.append((sub, nested_guarded))

        self._dangling[decl.name] = tuple(dangling)
        logger.debug("%s -> %s", decl.name, ", ".join(map(str, found)) or "(none)")
        return tuple(found)

    # ── Transitive closure ──────────────────────────────────

    def _transitive_of(self, name: TypeName) -> dict[TypeName, bool]:
        closure = self._transitive.get(name)
        if closure is not None:
            return closure
        with self._closure_lock:
            closure = self._transitive.get(name)
            if closure is None:
                self._close(name)
                closure = self._transitive[name]
        return closure

    def _close(self, start: TypeName) -> None:
        """Close every component reachable from *start*, sink-first.

        Already closed aliases are leaves here; their sets are spliced in.
        All members of one component share one closure.
        """
        state: TraversalState = TraversalState()

        def children(node: TypeName) -> tuple[TypeName, ...]:
            if node in self._transitive:
                return ()
            return self._direct_of(node)

        def on_component(component: list[TypeName]) -> None:
            if component[0] in self._transitive:
                return
            cyclic = state.is_cyclic(component)
            members = set(component)
            closure: dict[TypeName, bool] = dict.fromkeys(component, True) if cyclic else {}
            for member in component:
                for dep in self._direct_of(member):
                    if dep in members:
                        continue
                    closure.setdefault(dep, False)
                    for reached in self._transitive[dep]:
                        closure.setdefault(reached, False)
            if cyclic:
                logger.warning("circular alias definition: %s", ", ".join(map(str, component)))
            for member in component:
                if cyclic:
                    self._cycles[member] = tuple(component)
                self._transitive[member] = closure

        each_strongly_connected_component_from(start, children, on_component, state)
