"""Pydantic schema for definitions documents (JSON / YAML / HTTP bodies).

Type nodes carry a ``kind`` discriminator and convert to the frozen
dataclasses in ``alias_graph.models`` via ``to_type()``.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, Field

from alias_graph.environment import Environment
from alias_graph import models
from alias_graph.models import NameKind, TypeName


def _check_name(value: str) -> str:
    TypeName.parse(value)
    return value


def _check_alias_name(value: str) -> str:
    if TypeName.parse(value).kind is not NameKind.ALIAS:
        raise ValueError(f"{value!r} is not an alias name (must start with a lowercase letter)")
    return value


NameStr = Annotated[str, AfterValidator(_check_name)]
AliasNameStr = Annotated[str, AfterValidator(_check_alias_name)]


class BaseNode(BaseModel):
    kind: Literal["base"]
    name: str

    def to_type(self) -> models.TypeExpr:
        return models.BaseType(self.name)


class VariableNode(BaseModel):
    kind: Literal["variable"]
    name: str

    def to_type(self) -> models.TypeExpr:
        return models.Variable(self.name)


class LiteralNode(BaseModel):
    kind: Literal["literal"]
    value: Union[bool, int, str]

    def to_type(self) -> models.TypeExpr:
        return models.Literal(self.value)


class ClassSingletonNode(BaseModel):
    kind: Literal["class_singleton"]
    name: NameStr

    def to_type(self) -> models.TypeExpr:
        return models.ClassSingleton(TypeName.parse(self.name))


class ClassInstanceNode(BaseModel):
    kind: Literal["class_instance"]
    name: NameStr
    args: list[TypeNode] = []

    def to_type(self) -> models.TypeExpr:
        return models.ClassInstance(TypeName.parse(self.name), _convert(self.args))


class InterfaceNode(BaseModel):
    kind: Literal["interface"]
    name: NameStr
    args: list[TypeNode] = []

    def to_type(self) -> models.TypeExpr:
        return models.Interface(TypeName.parse(self.name), _convert(self.args))


class AliasNode(BaseModel):
    kind: Literal["alias"]
    name: AliasNameStr
    args: list[TypeNode] = []

    def to_type(self) -> models.TypeExpr:
        return models.Alias(TypeName.parse(self.name), _convert(self.args))


class UnionNode(BaseModel):
    kind: Literal["union"]
    types: list[TypeNode] = Field(min_length=1)

    def to_type(self) -> models.TypeExpr:
        return models.Union(_convert(self.types))


class IntersectionNode(BaseModel):
    kind: Literal["intersection"]
    types: list[TypeNode] = Field(min_length=1)

    def to_type(self) -> models.TypeExpr:
        return models.Intersection(_convert(self.types))


class OptionalNode(BaseModel):
    kind: Literal["optional"]
    type: TypeNode

    def to_type(self) -> models.TypeExpr:
        return models.Optional(self.type.to_type())


class TupleNode(BaseModel):
    kind: Literal["tuple"]
    types: list[TypeNode] = []

    def to_type(self) -> models.TypeExpr:
        return models.Tuple(_convert(self.types))


class RecordNode(BaseModel):
    kind: Literal["record"]
    fields: dict[str, TypeNode] = {}

    def to_type(self) -> models.TypeExpr:
        return models.Record(tuple((key, node.to_type()) for key, node in self.fields.items()))


class FunctionNode(BaseModel):
    kind: Literal["function"] = "function"
    required: list[TypeNode] = []
    optional: list[TypeNode] = []
    rest: TypeNode | None = None
    keywords: dict[str, TypeNode] = {}
    return_type: TypeNode | None = None

    def to_type(self) -> models.FunctionType:
        return models.FunctionType(
            required=_convert(self.required),
            optional=_convert(self.optional),
            rest=self.rest.to_type() if self.rest is not None else None,
            keywords=tuple((key, node.to_type()) for key, node in self.keywords.items()),
            return_type=(
                self.return_type.to_type() if self.return_type is not None
                else models.BaseType("void")
            ),
        )


class BlockNode(BaseModel):
    kind: Literal["block"] = "block"
    function: FunctionNode
    required: bool = True

    def to_type(self) -> models.Block:
        return models.Block(self.function.to_type(), self.required)


class ProcNode(BaseModel):
    kind: Literal["proc"]
    function: FunctionNode
    block: BlockNode | None = None

    def to_type(self) -> models.TypeExpr:
        block = self.block.to_type() if self.block is not None else None
        return models.Proc(self.function.to_type(), block)


TypeNode = Annotated[
    Union[
        BaseNode, VariableNode, LiteralNode, ClassSingletonNode, ClassInstanceNode,
        InterfaceNode, AliasNode, UnionNode, IntersectionNode, OptionalNode,
        TupleNode, RecordNode, FunctionNode, BlockNode, ProcNode,
    ],
    Field(discriminator="kind"),
]


def _convert(nodes: list[TypeNode]) -> tuple[models.TypeExpr, ...]:
    return tuple(node.to_type() for node in nodes)


# ── Document ─────────────────────────────────────────────────


class ModuleAliasEntry(BaseModel):
    name: NameStr
    target: NameStr


class AliasEntry(BaseModel):
    name: AliasNameStr
    type_params: list[str] = []
    type: TypeNode

    def to_decl(self) -> models.AliasDecl:
        return models.AliasDecl(
            name=TypeName.parse(self.name).to_absolute(),
            type=self.type.to_type(),
            type_params=tuple(self.type_params),
        )


class DefinitionsDocument(BaseModel):
    module_aliases: list[ModuleAliasEntry] = []
    aliases: list[AliasEntry] = []

    def to_environment(self) -> Environment:
        return Environment.from_decls(
            (entry.to_decl() for entry in self.aliases),
            [
                (TypeName.parse(entry.name), TypeName.parse(entry.target))
                for entry in self.module_aliases
            ],
        )


for _model in (
    ClassInstanceNode, InterfaceNode, AliasNode, UnionNode, IntersectionNode,
    OptionalNode, TupleNode, RecordNode, FunctionNode, BlockNode, ProcNode,
    AliasEntry, DefinitionsDocument,
):
    _model.model_rebuild()
