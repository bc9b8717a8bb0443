"""Tests for the TypeScript / TSX spec front end."""

from __future__ import annotations

import pytest

from native_schema.core.ast.nodes import (
    ArrayType,
    BooleanLiteral,
    CallExpression,
    EnumDeclaration,
    ExportDefaultDeclaration,
    FunctionType,
    Identifier,
    InterfaceDeclaration,
    KeywordType,
    LiteralType,
    MemberExpression,
    MethodSignature,
    NumericLiteral,
    ObjectLiteralType,
    PropertySignature,
    StringLiteral,
    TypeAliasDeclaration,
    TypeOperator,
    TypeReference,
    UnionType,
    UnsupportedStatement,
    UnsupportedType,
    VariableDeclaration,
    walk,
)
from native_schema.core.parsers.typescript import TypeScriptSpecParser

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ts_parser() -> TypeScriptSpecParser:
    return TypeScriptSpecParser(dialect="typescript")


@pytest.fixture
def tsx_parser() -> TypeScriptSpecParser:
    return TypeScriptSpecParser(dialect="tsx")


def _alias_type(parser: TypeScriptSpecParser, source: str):
    """Parse ``type T = <source>;`` and return the converted right-hand side."""
    program = parser.parse(f"type T = {source};\n", "T.ts")
    (alias,) = program.body
    assert isinstance(alias, TypeAliasDeclaration)
    return alias.type_annotation


# ---------------------------------------------------------------------------
# 1. Dialects
# ---------------------------------------------------------------------------


def test_unknown_dialect() -> None:
    with pytest.raises(ValueError, match="Unknown dialect"):
        TypeScriptSpecParser(dialect="javascript")


def test_empty_source(ts_parser: TypeScriptSpecParser) -> None:
    assert ts_parser.parse("", "Empty.ts").body == ()


# ---------------------------------------------------------------------------
# 2. Interfaces
# ---------------------------------------------------------------------------


def test_interface_with_extends_and_members(ts_parser: TypeScriptSpecParser) -> None:
    code = """\
export interface Spec extends TurboModule {
  getConstants(): {foo: number};
  add(a: number, b?: string): void;
  readonly version?: string;
}
"""
    program = ts_parser.parse(code, "NativeFoo.ts")

    (spec,) = program.body
    assert isinstance(spec, InterfaceDeclaration)
    assert spec.name == "Spec"
    assert [base.name for base in spec.extends] == ["TurboModule"]

    get_constants, add, version = spec.members
    assert isinstance(get_constants, MethodSignature)
    assert get_constants.name == "getConstants"
    assert get_constants.params == ()
    assert get_constants.return_type == ObjectLiteralType(
        (PropertySignature("foo", KeywordType("number")),)
    )

    assert isinstance(add, MethodSignature)
    assert [p.name for p in add.params] == ["a", "b"]
    assert add.params[0].type_annotation == KeywordType("number")
    assert add.params[0].optional is False
    assert add.params[1].optional is True
    assert add.return_type == KeywordType("void")

    assert version == PropertySignature("version", KeywordType("string"), optional=True)


def test_optional_method(ts_parser: TypeScriptSpecParser) -> None:
    program = ts_parser.parse("interface Spec { run?: () => void; stop?(): void; }", "a.ts")
    (spec,) = program.body
    run, stop = spec.members
    assert run.optional is True
    assert isinstance(run.type_annotation, FunctionType)
    assert isinstance(stop, MethodSignature)
    assert stop.optional is True


def test_untyped_parameter(ts_parser: TypeScriptSpecParser) -> None:
    program = ts_parser.parse("interface Spec { run(a): void; }", "a.ts")
    (spec,) = program.body
    (run,) = spec.members
    (param,) = run.params
    assert param.name == "a"
    assert param.type_annotation is None


def test_method_without_return_type(ts_parser: TypeScriptSpecParser) -> None:
    program = ts_parser.parse("interface Spec { run(); }", "a.ts")
    (spec,) = program.body
    assert spec.members[0].return_type is None


def test_spans_use_one_based_lines(ts_parser: TypeScriptSpecParser) -> None:
    code = """\
// header

interface Spec {
  run(): void;
}
"""
    program = ts_parser.parse(code, "a.ts")
    (spec,) = program.body
    assert spec.span.start_line == 3
    assert spec.members[0].span.start_line == 4


# ---------------------------------------------------------------------------
# 3. Types
# ---------------------------------------------------------------------------


class TestTypes:
    def test_predefined(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "boolean") == KeywordType("boolean")
        assert _alias_type(ts_parser, "unknown") == KeywordType("unknown")

    def test_reference(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "RootTag") == TypeReference("RootTag")

    def test_generic(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "Promise<string>") == TypeReference(
            "Promise", (KeywordType("string"),)
        )

    def test_array(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "number[]") == ArrayType(KeywordType("number"))

    def test_readonly_array(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "readonly string[]") == TypeOperator(
            "readonly", ArrayType(KeywordType("string"))
        )

    def test_nullable_union(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "string | null") == UnionType(
            (KeywordType("string"), KeywordType("null"))
        )

    def test_union_is_flattened(self, ts_parser: TypeScriptSpecParser) -> None:
        union = _alias_type(ts_parser, "1 | 2 | 3")
        assert union == UnionType(
            (
                LiteralType(NumericLiteral(1)),
                LiteralType(NumericLiteral(2)),
                LiteralType(NumericLiteral(3)),
            )
        )

    def test_string_literal_type(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "'small'") == LiteralType(StringLiteral("small"))

    def test_boolean_literal_type(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "true") == LiteralType(BooleanLiteral(True))

    def test_parenthesized(self, ts_parser: TypeScriptSpecParser) -> None:
        assert _alias_type(ts_parser, "(number)") == KeywordType("number")

    def test_function_type(self, ts_parser: TypeScriptSpecParser) -> None:
        fn = _alias_type(ts_parser, "(value: number) => void")
        assert isinstance(fn, FunctionType)
        assert [p.name for p in fn.params] == ["value"]
        assert fn.return_type == KeywordType("void")

    def test_object_type(self, ts_parser: TypeScriptSpecParser) -> None:
        obj = _alias_type(ts_parser, "{x: number, y?: number | null}")
        assert isinstance(obj, ObjectLiteralType)
        x, y = obj.members
        assert x == PropertySignature("x", KeywordType("number"))
        assert y.optional is True
        assert isinstance(y.type_annotation, UnionType)

    def test_unsupported_type(self, ts_parser: TypeScriptSpecParser) -> None:
        tuple_type = _alias_type(ts_parser, "[number, string]")
        assert isinstance(tuple_type, UnsupportedType)
        assert tuple_type.kind == "tuple_type"


# ---------------------------------------------------------------------------
# 4. Enums
# ---------------------------------------------------------------------------


def test_enum_members(ts_parser: TypeScriptSpecParser) -> None:
    code = """\
export enum Quality {
  Low = 'low',
  High = 'high',
}
enum Level { A = 1, B }
"""
    quality, level = ts_parser.parse(code, "a.ts").body

    assert isinstance(quality, EnumDeclaration)
    assert quality.name == "Quality"
    assert [m.name for m in quality.members] == ["Low", "High"]
    assert quality.members[0].initializer == StringLiteral("low")

    assert isinstance(level, EnumDeclaration)
    assert level.members[0].initializer == NumericLiteral(1)
    assert level.members[1].initializer is None


# ---------------------------------------------------------------------------
# 5. Registration calls
# ---------------------------------------------------------------------------


def test_export_default_registry_call(ts_parser: TypeScriptSpecParser) -> None:
    code = "export default TurboModuleRegistry.getEnforcing<Spec>('Foo');\n"
    (statement,) = ts_parser.parse(code, "a.ts").body

    assert isinstance(statement, ExportDefaultDeclaration)
    call = statement.expression
    assert isinstance(call, CallExpression)
    assert call.callee == MemberExpression(
        Identifier("TurboModuleRegistry"), Identifier("getEnforcing")
    )
    assert call.arguments == (StringLiteral("Foo"),)
    assert call.type_args == (TypeReference("Spec"),)


def test_untyped_call_has_no_type_args(ts_parser: TypeScriptSpecParser) -> None:
    code = "const m = TurboModuleRegistry.get('Foo');\n"
    (statement,) = ts_parser.parse(code, "a.ts").body

    assert isinstance(statement, VariableDeclaration)
    (declarator,) = statement.declarators
    assert declarator.name == "m"
    assert isinstance(declarator.init, CallExpression)
    assert declarator.init.type_args is None


def test_nested_call_is_reachable(ts_parser: TypeScriptSpecParser) -> None:
    code = """\
function load() {
  return TurboModuleRegistry.get<Spec>('Foo');
}
"""
    program = ts_parser.parse(code, "a.ts")
    assert isinstance(program.body[0], UnsupportedStatement)

    calls = [node for node in walk(program) if isinstance(node, CallExpression)]
    assert len(calls) == 1
    assert calls[0].arguments == (StringLiteral("Foo"),)


def test_imports_are_unsupported_statements(ts_parser: TypeScriptSpecParser) -> None:
    code = "import type {TurboModule} from 'react-native';\n"
    (statement,) = ts_parser.parse(code, "a.ts").body
    assert isinstance(statement, UnsupportedStatement)
    assert statement.kind == "import_statement"


def test_tsx_dialect(tsx_parser: TypeScriptSpecParser) -> None:
    code = "export interface Spec extends TurboModule { run(): void; }\n"
    (spec,) = tsx_parser.parse(code, "NativeFoo.tsx").body
    assert isinstance(spec, InterfaceDeclaration)
    assert spec.name == "Spec"
