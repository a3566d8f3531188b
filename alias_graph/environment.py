"""In-memory snapshot of alias declarations with name canonicalization."""

from __future__ import annotations

import logging
from typing import Iterable

from alias_graph.errors import DuplicateDeclaration, UnknownEntity
from alias_graph.models import AliasDecl, TypeName

logger = logging.getLogger(__name__)


class Environment:
    """Alias declarations keyed by canonical (absolute) name.

    Module aliases (``module Kernel2 = Kernel``) rewrite namespace prefixes,
    so ``::Kernel2::str`` and ``::Kernel::str`` collapse to the same entry.
    """

    def __init__(self):
        self._aliases: dict[TypeName, AliasDecl] = {}
        self._module_aliases: dict[tuple[str, ...], tuple[str, ...]] = {}

    @classmethod
    def from_decls(
        cls,
        decls: Iterable[AliasDecl],
        module_aliases: Iterable[tuple[TypeName, TypeName]] = (),
    ) -> Environment:
        env = cls()
        for new_name, old_name in module_aliases:
            env.add_module_alias(new_name, old_name)
        for decl in decls:
            env.add_alias(decl)
        return env

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, name: TypeName) -> bool:
        return self.resolve_type_name(name) is not None

    # ── Registration ────────────────────────────────────────

    def add_alias(self, decl: AliasDecl) -> None:
        key = self._rewrite_namespace(decl.name.to_absolute())
        if key in self._aliases:
            raise DuplicateDeclaration(key)
        if key != decl.name:
            decl = AliasDecl(name=key, type=decl.type, type_params=decl.type_params)
        self._aliases[key] = decl

    def add_module_alias(self, new_name: TypeName, old_name: TypeName) -> None:
        """Register ``module new_name = old_name``.

        Aliases already declared under *new_name* are re-keyed to their
        canonical names. On a clash or a loop nothing is registered.
        """
        new_path = _path(new_name)
        if new_path in self._module_aliases:
            raise DuplicateDeclaration(new_name)
        self._module_aliases[new_path] = _path(old_name)
        try:
            self._rekey()
        except (DuplicateDeclaration, UnknownEntity):
            del self._module_aliases[new_path]
            raise

    def _rekey(self) -> None:
        aliases: dict[TypeName, AliasDecl] = {}
        for decl in self._aliases.values():
            key = self._rewrite_namespace(decl.name)
            if key in aliases:
                raise DuplicateDeclaration(key)
            if key != decl.name:
                logger.debug("re-keyed %s as %s", decl.name, key)
                decl = AliasDecl(name=key, type=decl.type, type_params=decl.type_params)
            aliases[key] = decl
        self._aliases = aliases

    # ── Queries ─────────────────────────────────────────────

    def alias_names(self) -> list[TypeName]:
        return list(self._aliases)

    def alias_decl(self, name: TypeName) -> AliasDecl:
        decl = self._aliases.get(name)
        if decl is None:
            raise UnknownEntity(name)
        return decl

    def normalize_type_name(self, name: TypeName, context: tuple[str, ...] = ()) -> TypeName:
        """Map any written form of an alias name to its canonical name.

        Relative names are looked up in *context* innermost-first, then at
        the top level. Raises ``UnknownEntity`` when nothing matches or when
        the name runs into a module alias loop.
        """
        canonical = self._lookup(name, context, strict=True)
        if canonical is None:
            raise UnknownEntity(name)
        return canonical

    def resolve_type_name(self, name: TypeName, context: tuple[str, ...] = ()) -> TypeName | None:
        """Like ``normalize_type_name`` but returns ``None`` instead of raising."""
        return self._lookup(name, context, strict=False)

    def _lookup(self, name: TypeName, context: tuple[str, ...], strict: bool) -> TypeName | None:
        for candidate in _candidates(name, context):
            try:
                canonical = self._rewrite_namespace(candidate)
            except UnknownEntity as e:
                if strict:
                    raise
                logger.debug("%s", e)
                continue
            if canonical in self._aliases:
                return canonical
        return None

    def _rewrite_namespace(self, name: TypeName) -> TypeName:
        namespace = name.namespace
        seen: set[tuple[str, ...]] = set()
        rewritten = True
        while rewritten:
            rewritten = False
            for i in range(len(namespace), 0, -1):
                target = self._module_aliases.get(namespace[:i])
                if target is None:
                    continue
                if namespace[:i] in seen:
                    raise UnknownEntity(name, "module alias loop")
                seen.add(namespace[:i])
                namespace = target + namespace[i:]
                rewritten = True
                break
        return name.with_namespace(namespace)


def _path(name: TypeName) -> tuple[str, ...]:
    return (*name.namespace, name.name)


def _candidates(name: TypeName, context: tuple[str, ...]) -> list[TypeName]:
    if name.absolute:
        return [name]
    return [
        name.with_namespace(context[:i] + name.namespace)
        for i in range(len(context), -1, -1)
    ]
