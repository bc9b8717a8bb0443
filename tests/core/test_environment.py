"""Tests for the type environment and alias resolution."""

from __future__ import annotations

import pytest

from native_schema.core.ast.nodes import (
    EnumDeclaration,
    EnumMember,
    ExpressionStatement,
    Identifier,
    InterfaceDeclaration,
    KeywordType,
    ObjectLiteralType,
    Program,
    PropertySignature,
    TypeAliasDeclaration,
    TypeReference,
    UnionType,
)
from native_schema.core.schema.environment import (
    NOT_ALIASED,
    AliasResolution,
    build_type_environment,
    resolve_type_annotation,
)

NUMBER = KeywordType("number")
STRING = KeywordType("string")
NULL = KeywordType("null")
UNDEFINED = KeywordType("undefined")

# ---------------------------------------------------------------------------
# build_type_environment
# ---------------------------------------------------------------------------


class TestBuildTypeEnvironment:
    def test_records_declarations_by_name(self) -> None:
        alias = TypeAliasDeclaration("Id", STRING)
        interface = InterfaceDeclaration("Point")
        enum = EnumDeclaration("Mode")
        program = Program(body=(alias, interface, enum, ExpressionStatement(Identifier("x"))))

        types = build_type_environment(program)

        assert dict(types) == {"Id": alias, "Point": interface, "Mode": enum}

    def test_last_declaration_wins(self) -> None:
        first = TypeAliasDeclaration("Id", STRING)
        second = TypeAliasDeclaration("Id", NUMBER)
        types = build_type_environment(Program(body=(first, second)))
        assert types["Id"] is second

    def test_is_read_only(self) -> None:
        types = build_type_environment(Program())
        with pytest.raises(TypeError):
            types["Foo"] = TypeAliasDeclaration("Foo", STRING)  # type: ignore[index]


# ---------------------------------------------------------------------------
# resolve_type_annotation
# ---------------------------------------------------------------------------


class TestResolveTypeAnnotation:
    def test_plain_type_is_untouched(self) -> None:
        resolved = resolve_type_annotation(NUMBER, {})
        assert resolved.nullable is False
        assert resolved.type_annotation == NUMBER
        assert resolved.alias_resolution == NOT_ALIASED

    def test_null_union_sets_nullable(self) -> None:
        resolved = resolve_type_annotation(UnionType((NUMBER, NULL)), {})
        assert resolved.nullable is True
        assert resolved.type_annotation == NUMBER

    def test_undefined_union_sets_nullable(self) -> None:
        resolved = resolve_type_annotation(UnionType((UNDEFINED, STRING, NULL)), {})
        assert resolved.nullable is True
        assert resolved.type_annotation == STRING

    def test_remaining_members_stay_a_union(self) -> None:
        resolved = resolve_type_annotation(UnionType((NUMBER, STRING, NULL)), {})
        assert resolved.nullable is True
        assert resolved.type_annotation == UnionType((NUMBER, STRING))

    def test_readonly_is_transparent(self) -> None:
        resolved = resolve_type_annotation(TypeReference("Readonly", (NUMBER,)), {})
        assert resolved.type_annotation == NUMBER

    def test_readonly_with_two_arguments_is_left_alone(self) -> None:
        node = TypeReference("Readonly", (NUMBER, STRING))
        assert resolve_type_annotation(node, {}).type_annotation == node

    def test_type_alias_is_followed(self) -> None:
        types = build_type_environment(Program(body=(TypeAliasDeclaration("Id", STRING),)))
        resolved = resolve_type_annotation(TypeReference("Id"), types)
        assert resolved.type_annotation == STRING
        assert resolved.alias_resolution == AliasResolution(successful=True, name="Id")

    def test_alias_chain_records_last_name(self) -> None:
        obj = ObjectLiteralType((PropertySignature("x", NUMBER),))
        types = build_type_environment(
            Program(
                body=(
                    TypeAliasDeclaration("Outer", TypeReference("Inner")),
                    TypeAliasDeclaration("Inner", obj),
                )
            )
        )
        resolved = resolve_type_annotation(TypeReference("Outer"), types)
        assert resolved.type_annotation == obj
        assert resolved.alias_resolution.name == "Inner"

    def test_nullable_alias(self) -> None:
        types = build_type_environment(
            Program(body=(TypeAliasDeclaration("MaybeId", UnionType((STRING, NULL))),))
        )
        resolved = resolve_type_annotation(TypeReference("MaybeId"), types)
        assert resolved.nullable is True
        assert resolved.type_annotation == STRING

    def test_interface_becomes_object_literal(self) -> None:
        members = (PropertySignature("x", NUMBER), PropertySignature("y", NUMBER))
        types = build_type_environment(
            Program(body=(InterfaceDeclaration("Point", members=members),))
        )
        resolved = resolve_type_annotation(TypeReference("Point"), types)
        assert resolved.type_annotation == ObjectLiteralType(members)
        assert resolved.alias_resolution == AliasResolution(successful=True, name="Point")

    def test_enum_reference_is_left_in_place(self) -> None:
        types = build_type_environment(
            Program(body=(EnumDeclaration("Mode", (EnumMember("A"),)),))
        )
        node = TypeReference("Mode")
        resolved = resolve_type_annotation(node, types)
        assert resolved.type_annotation == node
        assert resolved.alias_resolution == NOT_ALIASED

    def test_unknown_reference_is_left_in_place(self) -> None:
        node = TypeReference("Missing")
        assert resolve_type_annotation(node, {}).type_annotation == node

    def test_alias_cycle_terminates(self) -> None:
        types = build_type_environment(
            Program(
                body=(
                    TypeAliasDeclaration("A", TypeReference("B")),
                    TypeAliasDeclaration("B", TypeReference("A")),
                )
            )
        )
        resolved = resolve_type_annotation(TypeReference("A"), types)
        assert resolved.type_annotation == TypeReference("A")

    def test_generic_arguments_are_not_resolved(self) -> None:
        types = build_type_environment(Program(body=(TypeAliasDeclaration("Id", STRING),)))
        node = TypeReference("Promise", (TypeReference("Id"),))
        assert resolve_type_annotation(node, types).type_annotation == node
