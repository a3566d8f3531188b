"""Data models for alias definitions and the analysis pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Union as _Union


class NameKind(enum.Enum):
    ALIAS = "alias"
    INTERFACE = "interface"
    CLASS = "class"


@dataclass(frozen=True)
class TypeName:
    """A written or canonical type name such as ``::Foo::bar``."""
    name: str
    namespace: tuple[str, ...] = ()
    absolute: bool = False

    @classmethod
    def parse(cls, text: str) -> TypeName:
        text = text.strip()
        absolute = text.startswith("::")
        parts = [p for p in text.split("::") if p]
        if not parts:
            raise ValueError(f"Invalid type name: {text!r}")
        return cls(name=parts[-1], namespace=tuple(parts[:-1]), absolute=absolute)

    @property
    def kind(self) -> NameKind:
        if self.name.startswith("_"):
            return NameKind.INTERFACE
        if self.name[0].islower():
            return NameKind.ALIAS
        return NameKind.CLASS

    def to_absolute(self) -> TypeName:
        if self.absolute:
            return self
        return TypeName(self.name, self.namespace, absolute=True)

    def with_namespace(self, namespace: tuple[str, ...]) -> TypeName:
        return TypeName(self.name, namespace, absolute=True)

    def __str__(self) -> str:
        prefix = "::" if self.absolute else ""
        return prefix + "::".join([*self.namespace, self.name])


# ── Type expressions ─────────────────────────────────────────


@dataclass(frozen=True)
class BaseType:
    """Builtin type: ``untyped``, ``bool``, ``nil``, ``void``, ``self``..."""
    name: str

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(())


@dataclass(frozen=True)
class Variable:
    name: str

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(())


@dataclass(frozen=True)
class Literal:
    value: str | int | bool

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(())


@dataclass(frozen=True)
class ClassSingleton:
    name: TypeName

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(())


@dataclass(frozen=True)
class ClassInstance:
    name: TypeName
    args: tuple[TypeExpr, ...] = ()

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.args)


@dataclass(frozen=True)
class Interface:
    name: TypeName
    args: tuple[TypeExpr, ...] = ()

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.args)


@dataclass(frozen=True)
class Alias:
    """Reference to a type alias, possibly with type arguments."""
    name: TypeName
    args: tuple[TypeExpr, ...] = ()

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.args)


@dataclass(frozen=True)
class Union:
    types: tuple[TypeExpr, ...]

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.types)


@dataclass(frozen=True)
class Intersection:
    types: tuple[TypeExpr, ...]

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.types)


@dataclass(frozen=True)
class Optional:
    type: TypeExpr

    def each_type(self) -> Iterator[TypeExpr]:
        yield self.type


@dataclass(frozen=True)
class Tuple:
    types: tuple[TypeExpr, ...]

    def each_type(self) -> Iterator[TypeExpr]:
        return iter(self.types)


@dataclass(frozen=True)
class Record:
    fields: tuple[tuple[str, TypeExpr], ...]

    def each_type(self) -> Iterator[TypeExpr]:
        for _, type_ in self.fields:
            yield type_


@dataclass(frozen=True)
class FunctionType:
    required: tuple[TypeExpr, ...] = ()
    optional: tuple[TypeExpr, ...] = ()
    rest: TypeExpr | None = None
    keywords: tuple[tuple[str, TypeExpr], ...] = ()
    return_type: TypeExpr = BaseType("void")

    def each_type(self) -> Iterator[TypeExpr]:
        yield from self.required
        yield from self.optional
        if self.rest is not None:
            yield self.rest
        for _, type_ in self.keywords:
            yield type_
        yield self.return_type


@dataclass(frozen=True)
class Block:
    function: FunctionType
    required: bool = True

    def each_type(self) -> Iterator[TypeExpr]:
        yield self.function


@dataclass(frozen=True)
class Proc:
    function: FunctionType
    block: Block | None = None

    def each_type(self) -> Iterator[TypeExpr]:
        yield self.function
        if self.block is not None:
            yield self.block


TypeExpr = _Union[
    BaseType, Variable, Literal, ClassSingleton, ClassInstance, Interface,
    Alias, Union, Intersection, Optional, Tuple, Record, FunctionType,
    Block, Proc,
]


# ── Declarations and configuration ───────────────────────────


@dataclass(frozen=True)
class AliasDecl:
    """``type name[params] = type`` declared inside ``name.namespace``."""
    name: TypeName
    type: TypeExpr
    type_params: tuple[str, ...] = ()

    @property
    def context(self) -> tuple[str, ...]:
        return self.name.namespace


@dataclass
class AnalysisReport:
    """Result from the analysis pipeline."""
    aliases: int = 0
    circular: list[str] = field(default_factory=list)
    cycles: list[dict] = field(default_factory=list)
    dangling: list[dict] = field(default_factory=list)
    order: list[str] | None = None  # None when a cycle blocks ordering

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    def to_dict(self) -> dict:
        return {
            "aliases": self.aliases,
            "circular": self.circular,
            "cycles": self.cycles,
            "dangling": self.dangling,
            "order": self.order,
        }


@dataclass
class AnalysisConfig:
    """Configuration for the analysis pipeline."""
    definitions_path: Path = field(default_factory=lambda: Path("aliases.yaml"))
    guarded_recursion: bool = False
    eager: bool = True
    strict: bool = False
