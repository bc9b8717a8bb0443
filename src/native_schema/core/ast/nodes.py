"""Syntax tree consumed by the schema builder.

A small, closed family of frozen dataclasses covering the parts of a
TypeScript module spec the schema builder understands: top-level
declarations, type annotations, interface members and the call expressions
used to register a module.  Anything outside that grammar is carried as one of
the ``Unsupported*`` variants, which record the front end's own node kind so
that faults can name it.

Every node carries a :class:`Span` for fault reporting.  Spans never take
part in equality.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Union

@dataclass(frozen=True)
class Span:
    """Source position of a node (1-based lines, 0-based columns)."""

    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0

NO_SPAN = Span()

def _span() -> Span:
    return field(default=NO_SPAN, compare=False, repr=False)

class Node:
    """Base class of all syntax nodes."""

    span: Span

    @property
    def kind(self) -> str:
        return type(self).__name__

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Identifier(Node):
    name: str
    span: Span = _span()

@dataclass(frozen=True)
class StringLiteral(Node):
    value: str
    span: Span = _span()

@dataclass(frozen=True)
class NumericLiteral(Node):
    value: float
    span: Span = _span()

@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool
    span: Span = _span()

@dataclass(frozen=True)
class MemberExpression(Node):
    """``object.property``; computed access (``object[key]``) sets *computed*."""

    object: Expression
    property: Expression
    computed: bool = False
    span: Span = _span()

@dataclass(frozen=True)
class CallExpression(Node):
    """A call; *type_args* is ``None`` when the call has no ``<...>`` list."""

    callee: Expression
    arguments: tuple[Expression, ...] = ()
    type_args: tuple[TypeNode, ...] | None = None
    span: Span = _span()

@dataclass(frozen=True)
class UnsupportedExpression(Node):
    """Any other expression, with its converted sub-expressions."""

    node_kind: str
    children: tuple[Node, ...] = ()
    span: Span = _span()

    @property
    def kind(self) -> str:
        return self.node_kind

Expression = Union[
    Identifier,
    StringLiteral,
    NumericLiteral,
    BooleanLiteral,
    MemberExpression,
    CallExpression,
    UnsupportedExpression,
]

# ---------------------------------------------------------------------------
# Type annotations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KeywordType(Node):
    """Predefined keyword types: ``boolean``, ``number``, ``void``, ``null``..."""

    keyword: str
    span: Span = _span()

@dataclass(frozen=True)
class TypeReference(Node):
    """A named type, optionally generic (``Foo``, ``Promise<T>``)."""

    name: str
    type_args: tuple[TypeNode, ...] | None = None
    span: Span = _span()

@dataclass(frozen=True)
class ArrayType(Node):
    """``T[]``."""

    element_type: TypeNode
    span: Span = _span()

@dataclass(frozen=True)
class TypeOperator(Node):
    """A prefix type operator such as ``readonly T[]`` or ``keyof T``."""

    operator: str
    type_annotation: TypeNode
    span: Span = _span()

@dataclass(frozen=True)
class LiteralType(Node):
    """A literal used as a type: ``1``, ``'a'``, ``true``."""

    literal: Expression
    span: Span = _span()

@dataclass(frozen=True)
class UnionType(Node):
    members: tuple[TypeNode, ...]
    span: Span = _span()

@dataclass(frozen=True)
class ObjectLiteralType(Node):
    members: tuple[Member, ...] = ()
    span: Span = _span()

@dataclass(frozen=True)
class Parameter(Node):
    name: str
    type_annotation: TypeNode | None = None
    optional: bool = False
    span: Span = _span()

@dataclass(frozen=True)
class FunctionType(Node):
    """``(a: T) => R``."""

    params: tuple[Parameter, ...] = ()
    return_type: TypeNode | None = None
    span: Span = _span()

@dataclass(frozen=True)
class UnsupportedType(Node):
    node_kind: str
    span: Span = _span()

    @property
    def kind(self) -> str:
        return self.node_kind

TypeNode = Union[
    KeywordType,
    TypeReference,
    ArrayType,
    TypeOperator,
    LiteralType,
    UnionType,
    ObjectLiteralType,
    FunctionType,
    UnsupportedType,
]

# ---------------------------------------------------------------------------
# Interface / object members
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PropertySignature(Node):
    name: str
    type_annotation: TypeNode | None = None
    optional: bool = False
    span: Span = _span()

@dataclass(frozen=True)
class MethodSignature(Node):
    name: str
    params: tuple[Parameter, ...] = ()
    return_type: TypeNode | None = None
    optional: bool = False
    span: Span = _span()

@dataclass(frozen=True)
class UnsupportedMember(Node):
    """Index, call and construct signatures."""

    node_kind: str
    name: str = ""
    span: Span = _span()

    @property
    def kind(self) -> str:
        return self.node_kind

Member = Union[PropertySignature, MethodSignature, UnsupportedMember]

# ---------------------------------------------------------------------------
# Declarations and statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExpressionWithTypeArguments(Node):
    """An entry of an ``extends`` clause."""

    name: str
    type_args: tuple[TypeNode, ...] | None = None
    span: Span = _span()

@dataclass(frozen=True)
class InterfaceDeclaration(Node):
    name: str
    extends: tuple[ExpressionWithTypeArguments, ...] = ()
    members: tuple[Member, ...] = ()
    span: Span = _span()

@dataclass(frozen=True)
class TypeAliasDeclaration(Node):
    name: str
    type_annotation: TypeNode
    span: Span = _span()

@dataclass(frozen=True)
class EnumMember(Node):
    name: str
    initializer: Expression | None = None
    span: Span = _span()

@dataclass(frozen=True)
class EnumDeclaration(Node):
    name: str
    members: tuple[EnumMember, ...] = ()
    span: Span = _span()

@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Expression
    span: Span = _span()

@dataclass(frozen=True)
class VariableDeclarator(Node):
    name: str
    init: Expression | None = None
    span: Span = _span()

@dataclass(frozen=True)
class VariableDeclaration(Node):
    declarators: tuple[VariableDeclarator, ...] = ()
    span: Span = _span()

@dataclass(frozen=True)
class ExportDefaultDeclaration(Node):
    expression: Expression
    span: Span = _span()

@dataclass(frozen=True)
class UnsupportedStatement(Node):
    node_kind: str
    children: tuple[Node, ...] = ()
    span: Span = _span()

    @property
    def kind(self) -> str:
        return self.node_kind

Declaration = Union[InterfaceDeclaration, TypeAliasDeclaration, EnumDeclaration]

Statement = Union[
    InterfaceDeclaration,
    TypeAliasDeclaration,
    EnumDeclaration,
    ExpressionStatement,
    VariableDeclaration,
    ExportDefaultDeclaration,
    UnsupportedStatement,
]

@dataclass(frozen=True)
class Program(Node):
    """Root of one source file."""

    body: tuple[Statement, ...] = ()
    span: Span = _span()

# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of *node* in field order."""
    for f in fields(node):  # type: ignore[arg-type]
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, Node):
                    yield item

def walk(node: Node) -> Iterator[Node]:
    """Yield *node* and every node beneath it, depth-first, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))
