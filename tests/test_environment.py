"""Tests for type names and the alias environment."""

import pytest

from alias_graph.environment import Environment
from alias_graph.errors import DuplicateDeclaration, UnknownEntity
from alias_graph.models import AliasDecl, BaseType, NameKind, TypeName


def _decl(text):
    return AliasDecl(TypeName.parse(text).to_absolute(), BaseType("untyped"))


# ── TypeName ──────────────────────────────────────────────────

class TestTypeName:
    def test_parse_absolute(self):
        name = TypeName.parse("::Foo::Bar::baz")
        assert name.absolute
        assert name.namespace == ("Foo", "Bar")
        assert name.name == "baz"
        assert str(name) == "::Foo::Bar::baz"

    def test_parse_relative(self):
        name = TypeName.parse("Bar::baz")
        assert not name.absolute
        assert str(name) == "Bar::baz"
        assert str(name.to_absolute()) == "::Bar::baz"

    def test_kind(self):
        assert TypeName.parse("foo").kind is NameKind.ALIAS
        assert TypeName.parse("::M::_Each").kind is NameKind.INTERFACE
        assert TypeName.parse("String").kind is NameKind.CLASS

    def test_invalid(self):
        with pytest.raises(ValueError):
            TypeName.parse("::")

    def test_hashable(self):
        assert len({TypeName.parse("::a"), TypeName.parse("::a"), TypeName.parse("a")}) == 2


# ── Environment ───────────────────────────────────────────────

class TestEnvironment:
    def test_alias_names_in_insertion_order(self):
        env = Environment.from_decls([_decl("b"), _decl("::M::a")])
        assert [str(n) for n in env.alias_names()] == ["::b", "::M::a"]
        assert len(env) == 2

    def test_duplicate(self):
        env = Environment.from_decls([_decl("a")])
        with pytest.raises(DuplicateDeclaration):
            env.add_alias(_decl("::a"))

    def test_normalize_absolute(self):
        env = Environment.from_decls([_decl("::M::a")])
        assert env.normalize_type_name(TypeName.parse("::M::a")) == TypeName.parse("::M::a")

    def test_normalize_relative_innermost_first(self):
        env = Environment.from_decls([_decl("::A::B::x"), _decl("::A::x"), _decl("::x")])
        name = TypeName.parse("x")
        assert str(env.normalize_type_name(name, ("A", "B"))) == "::A::B::x"
        assert str(env.normalize_type_name(name, ("A",))) == "::A::x"
        assert str(env.normalize_type_name(name, ("A", "C"))) == "::A::x"
        assert str(env.normalize_type_name(name)) == "::x"

    def test_normalize_relative_with_namespace(self):
        env = Environment.from_decls([_decl("::A::B::x")])
        assert str(env.normalize_type_name(TypeName.parse("B::x"), ("A",))) == "::A::B::x"

    def test_unknown(self):
        env = Environment.from_decls([_decl("a")])
        with pytest.raises(UnknownEntity):
            env.normalize_type_name(TypeName.parse("b"))
        assert env.resolve_type_name(TypeName.parse("b")) is None
        with pytest.raises(UnknownEntity):
            env.alias_decl(TypeName.parse("::b"))

    def test_module_alias(self):
        env = Environment.from_decls(
            [_decl("::Kernel::str")],
            [(TypeName.parse("::K2"), TypeName.parse("::Kernel"))],
        )
        assert str(env.normalize_type_name(TypeName.parse("::K2::str"))) == "::Kernel::str"
        assert TypeName.parse("::K2::str") in env

    def test_module_alias_chain(self):
        env = Environment.from_decls(
            [_decl("::C::Inner::t")],
            [
                (TypeName.parse("::A"), TypeName.parse("::B")),
                (TypeName.parse("::B"), TypeName.parse("::C")),
            ],
        )
        assert str(env.normalize_type_name(TypeName.parse("::A::Inner::t"))) == "::C::Inner::t"

    def test_declaration_through_module_alias(self):
        env = Environment.from_decls(
            [_decl("::K2::str")],
            [(TypeName.parse("::K2"), TypeName.parse("::Kernel"))],
        )
        assert [str(n) for n in env.alias_names()] == ["::Kernel::str"]

    def test_module_alias_loop(self):
        env = Environment.from_decls(
            [],
            [
                (TypeName.parse("::A"), TypeName.parse("::B")),
                (TypeName.parse("::B"), TypeName.parse("::A")),
            ],
        )
        with pytest.raises(UnknownEntity, match="loop"):
            env.normalize_type_name(TypeName.parse("::A::t"))

    def test_module_alias_loop_is_not_membership(self):
        env = Environment.from_decls(
            [_decl("::t")],
            [
                (TypeName.parse("::A"), TypeName.parse("::B")),
                (TypeName.parse("::B"), TypeName.parse("::A")),
            ],
        )
        assert TypeName.parse("::A::t") not in env
        assert env.resolve_type_name(TypeName.parse("::A::t")) is None

    def test_relative_lookup_skips_looping_namespace(self):
        env = Environment.from_decls(
            [_decl("::t")],
            [
                (TypeName.parse("::A"), TypeName.parse("::B")),
                (TypeName.parse("::B"), TypeName.parse("::A")),
            ],
        )
        assert str(env.resolve_type_name(TypeName.parse("t"), ("A",))) == "::t"


# ── Late module aliases ───────────────────────────────────────

class TestLateModuleAlias:
    def test_existing_aliases_are_rekeyed(self):
        env = Environment()
        env.add_alias(_decl("::K2::foo"))
        env.add_module_alias(TypeName.parse("::K2"), TypeName.parse("::K"))
        assert [str(n) for n in env.alias_names()] == ["::K::foo"]
        assert str(env.normalize_type_name(TypeName.parse("::K2::foo"))) == "::K::foo"
        assert env.alias_decl(TypeName.parse("::K::foo")).name == TypeName.parse("::K::foo")

    def test_clash_leaves_environment_unchanged(self):
        env = Environment()
        env.add_alias(_decl("::K::foo"))
        env.add_alias(_decl("::K2::foo"))
        with pytest.raises(DuplicateDeclaration):
            env.add_module_alias(TypeName.parse("::K2"), TypeName.parse("::K"))
        assert [str(n) for n in env.alias_names()] == ["::K::foo", "::K2::foo"]
        assert TypeName.parse("::K2::foo") in env

    def test_loop_over_declared_alias_is_rejected(self):
        env = Environment()
        env.add_module_alias(TypeName.parse("::A"), TypeName.parse("::B"))
        env.add_alias(_decl("::B::t"))
        with pytest.raises(UnknownEntity, match="loop"):
            env.add_module_alias(TypeName.parse("::B"), TypeName.parse("::A"))
        assert str(env.normalize_type_name(TypeName.parse("::A::t"))) == "::B::t"
