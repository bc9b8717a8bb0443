"""TypeScript / TSX front end using tree-sitter.

Converts a tree-sitter-typescript concrete syntax tree into the
:mod:`native_schema.core.ast.nodes` tree the schema builder consumes.  Only
the grammar a module spec uses is converted structurally: top-level
interfaces, type aliases and enums, the type forms that can appear in them,
and the expressions that make up a registration call.  Every other node is
kept as an ``Unsupported*`` variant named after its tree-sitter node type, with
its named children converted so that calls nested anywhere stay reachable.
"""

from __future__ import annotations

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

from native_schema.core.ast.nodes import (
    ArrayType,
    BooleanLiteral,
    CallExpression,
    EnumDeclaration,
    EnumMember,
    ExportDefaultDeclaration,
    Expression,
    ExpressionStatement,
    ExpressionWithTypeArguments,
    FunctionType,
    Identifier,
    InterfaceDeclaration,
    KeywordType,
    LiteralType,
    Member,
    MemberExpression,
    MethodSignature,
    NumericLiteral,
    ObjectLiteralType,
    Parameter,
    Program,
    PropertySignature,
    Span,
    Statement,
    StringLiteral,
    TypeAliasDeclaration,
    TypeNode,
    TypeOperator,
    TypeReference,
    UnionType,
    UnsupportedExpression,
    UnsupportedMember,
    UnsupportedStatement,
    UnsupportedType,
    VariableDeclaration,
    VariableDeclarator,
)

TS_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

_DIALECT_MAP: dict[str, Language] = {
    "typescript": TS_LANGUAGE,
    "tsx": TSX_LANGUAGE,
}

_NULL_LITERALS: frozenset[str] = frozenset({"null", "undefined"})

_TYPE_OPERATORS: dict[str, str] = {
    "readonly_type": "readonly",
    "index_type_query": "keyof",
}

def _span(node: Node) -> Span:
    return Span(
        start_line=node.start_point[0] + 1,
        start_column=node.start_point[1],
        end_line=node.end_point[0] + 1,
        end_column=node.end_point[1],
    )

def _text(node: Node) -> str:
    return node.text.decode()

def _named(node: Node) -> list[Node]:
    """Named children of *node*, without comments."""
    return [child for child in node.named_children if child.type != "comment"]

def _has_token(node: Node, token: str) -> bool:
    return any(not child.is_named and child.type == token for child in node.children)

def _child_of_type(node: Node, *types: str) -> Node | None:
    for child in node.children:
        if child.type in types:
            return child
    return None

class TypeScriptSpecParser:
    """Parse TypeScript or TSX module specs via tree-sitter.

    Args:
        dialect: One of ``"typescript"`` or ``"tsx"``.
    """

    def __init__(self, dialect: str = "typescript") -> None:
        if dialect not in _DIALECT_MAP:
            raise ValueError(
                f"Unknown dialect {dialect!r}. "
                f"Expected one of: {', '.join(sorted(_DIALECT_MAP))}"
            )
        self.dialect = dialect
        self._language = _DIALECT_MAP[dialect]

    def parse(self, content: str, file_path: str = "") -> Program:
        """Parse *content* and return its :class:`Program`.

        A fresh tree-sitter ``Parser`` is used per call so that one instance
        can serve several threads.
        """
        tree = Parser(self._language).parse(content.encode("utf-8"))
        root = tree.root_node
        body = tuple(self._statement(child) for child in _named(root))
        return Program(body=body, span=_span(root))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _statement(self, node: Node) -> Statement:
        ntype = node.type

        if ntype == "interface_declaration":
            return self._interface(node)
        if ntype == "type_alias_declaration":
            return self._type_alias(node)
        if ntype == "enum_declaration":
            return self._enum(node)
        if ntype in ("lexical_declaration", "variable_declaration"):
            return self._variable_declaration(node)
        if ntype == "expression_statement":
            children = _named(node)
            if len(children) == 1:
                return ExpressionStatement(self._expression(children[0]), span=_span(node))
        if ntype == "export_statement":
            return self._export(node)

        return UnsupportedStatement(
            ntype,
            tuple(self._expression(child) for child in _named(node)),
            span=_span(node),
        )

    def _export(self, node: Node) -> Statement:
        """Unwrap ``export <declaration>`` and ``export default <expression>``."""
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            return self._statement(declaration)

        value = node.child_by_field_name("value")
        if value is not None and _has_token(node, "default"):
            return ExportDefaultDeclaration(self._expression(value), span=_span(node))

        return UnsupportedStatement(
            node.type,
            tuple(self._expression(child) for child in _named(node)),
            span=_span(node),
        )

    def _interface(self, node: Node) -> InterfaceDeclaration:
        name_node = node.child_by_field_name("name")
        name = _text(name_node) if name_node is not None else ""

        extends: list[ExpressionWithTypeArguments] = []
        clause = _child_of_type(node, "extends_type_clause", "extends_clause")
        if clause is not None:
            for sub in _named(clause):
                if sub.type == "generic_type":
                    base = self._generic(sub)
                    extends.append(
                        ExpressionWithTypeArguments(base.name, base.type_args, span=_span(sub))
                    )
                else:
                    extends.append(ExpressionWithTypeArguments(_text(sub), span=_span(sub)))

        body = node.child_by_field_name("body")
        if body is None:
            body = _child_of_type(node, "interface_body", "object_type")
        members = self._members(body) if body is not None else ()

        return InterfaceDeclaration(name, tuple(extends), members, span=_span(node))

    def _type_alias(self, node: Node) -> TypeAliasDeclaration:
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        annotation = self._type(value) if value is not None else UnsupportedType("missing")
        return TypeAliasDeclaration(
            _text(name_node) if name_node is not None else "",
            annotation,
            span=_span(node),
        )

    def _enum(self, node: Node) -> EnumDeclaration:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")

        members: list[EnumMember] = []
        if body is not None:
            for child in _named(body):
                if child.type == "enum_assignment":
                    member_name = child.child_by_field_name("name") or _named(child)[0]
                    value = child.child_by_field_name("value")
                    members.append(
                        EnumMember(
                            self._property_name(member_name) if member_name is not None else "",
                            self._expression(value) if value is not None else None,
                            span=_span(child),
                        )
                    )
                else:
                    members.append(EnumMember(self._property_name(child), span=_span(child)))

        return EnumDeclaration(
            _text(name_node) if name_node is not None else "",
            tuple(members),
            span=_span(node),
        )

    def _variable_declaration(self, node: Node) -> VariableDeclaration:
        declarators: list[VariableDeclarator] = []
        for child in _named(node):
            if child.type != "variable_declarator":
                continue
            name_node = child.child_by_field_name("name")
            value = child.child_by_field_name("value")
            declarators.append(
                VariableDeclarator(
                    _text(name_node) if name_node is not None else "",
                    self._expression(value) if value is not None else None,
                    span=_span(child),
                )
            )
        return VariableDeclaration(tuple(declarators), span=_span(node))

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _members(self, body: Node) -> tuple[Member, ...]:
        return tuple(self._member(child) for child in _named(body))

    def _member(self, node: Node) -> Member:
        name_node = node.child_by_field_name("name")
        name = self._property_name(name_node) if name_node is not None else ""

        if node.type == "property_signature":
            annotation = node.child_by_field_name("type")
            return PropertySignature(
                name,
                self._annotation(annotation) if annotation is not None else None,
                optional=_has_token(node, "?"),
                span=_span(node),
            )

        if node.type == "method_signature":
            params, return_type = self._signature(node)
            return MethodSignature(
                name,
                params,
                return_type,
                optional=_has_token(node, "?"),
                span=_span(node),
            )

        return UnsupportedMember(node.type, name, span=_span(node))

    def _signature(self, node: Node) -> tuple[tuple[Parameter, ...], TypeNode | None]:
        """Parameters and return type of a method signature or function type."""
        params_node = node.child_by_field_name("parameters")
        if params_node is None:
            params_node = _child_of_type(node, "formal_parameters")
        params = self._parameters(params_node) if params_node is not None else ()

        return_node = node.child_by_field_name("return_type")
        return_type = self._annotation(return_node) if return_node is not None else None
        return params, return_type

    def _parameters(self, node: Node) -> tuple[Parameter, ...]:
        params: list[Parameter] = []
        for child in _named(node):
            if child.type not in ("required_parameter", "optional_parameter"):
                continue

            name_node = child.child_by_field_name("pattern")
            if name_node is None:
                name_node = child.child_by_field_name("name")
            if name_node is None:
                name_node = _child_of_type(child, "identifier")
            annotation = child.child_by_field_name("type")

            params.append(
                Parameter(
                    _text(name_node) if name_node is not None else "",
                    self._annotation(annotation) if annotation is not None else None,
                    optional=child.type == "optional_parameter",
                    span=_span(child),
                )
            )
        return tuple(params)

    @staticmethod
    def _property_name(node: Node) -> str:
        if node.type == "string":
            return TypeScriptSpecParser._string_value(node)
        return _text(node)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _annotation(self, node: Node) -> TypeNode:
        """Convert a ``type_annotation`` wrapper (``: T``) or a bare type."""
        if node.type == "type_annotation":
            children = _named(node)
            if not children:
                return UnsupportedType(node.type, span=_span(node))
            return self._type(children[0])
        return self._type(node)

    def _type(self, node: Node) -> TypeNode:
        ntype = node.type
        span = _span(node)

        if ntype == "predefined_type":
            return KeywordType(_text(node), span=span)
        if ntype in ("type_identifier", "nested_type_identifier", "identifier"):
            return TypeReference(_text(node), span=span)
        if ntype == "generic_type":
            return self._generic(node)
        if ntype == "array_type":
            children = _named(node)
            if children:
                return ArrayType(self._type(children[0]), span=span)
        if ntype in _TYPE_OPERATORS:
            children = _named(node)
            if children:
                return TypeOperator(_TYPE_OPERATORS[ntype], self._type(children[-1]), span=span)
        if ntype == "literal_type":
            return self._literal_type(node)
        if ntype == "union_type":
            return UnionType(tuple(self._union_members(node)), span=span)
        if ntype == "parenthesized_type":
            children = _named(node)
            if len(children) == 1:
                return self._type(children[0])
        if ntype == "object_type":
            return ObjectLiteralType(self._members(node), span=span)
        if ntype == "function_type":
            params, return_type = self._signature(node)
            return FunctionType(params, return_type, span=span)
        if ntype == "type_annotation":
            return self._annotation(node)

        return UnsupportedType(ntype, span=span)

    def _generic(self, node: Node) -> TypeReference:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            name_node = _named(node)[0]
        args_node = node.child_by_field_name("type_arguments")
        if args_node is None:
            args_node = _child_of_type(node, "type_arguments")
        type_args = (
            tuple(self._type(arg) for arg in _named(args_node)) if args_node is not None else ()
        )
        return TypeReference(_text(name_node), type_args, span=_span(node))

    def _union_members(self, node: Node) -> list[TypeNode]:
        """Flatten tree-sitter's nested binary unions into one member list."""
        members: list[TypeNode] = []
        for child in _named(node):
            if child.type == "union_type":
                members.extend(self._union_members(child))
            else:
                members.append(self._type(child))
        return members

    def _literal_type(self, node: Node) -> TypeNode:
        span = _span(node)
        children = node.children
        if not children:
            return UnsupportedType(node.type, span=span)

        literal = children[0]
        if literal.type in _NULL_LITERALS:
            return KeywordType(literal.type, span=span)
        return LiteralType(self._expression(literal), span=span)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self, node: Node) -> Expression:
        ntype = node.type
        span = _span(node)

        if ntype in ("identifier", "property_identifier", "this"):
            return Identifier(_text(node), span=span)
        if ntype == "string":
            return StringLiteral(self._string_value(node), span=span)
        if ntype == "number":
            return NumericLiteral(self._number_value(_text(node)), span=span)
        if ntype in ("true", "false"):
            return BooleanLiteral(ntype == "true", span=span)
        if ntype == "unary_expression":
            operand = node.child_by_field_name("argument")
            operator = node.child_by_field_name("operator")
            if (
                operand is not None
                and operand.type == "number"
                and operator is not None
                and _text(operator) == "-"
            ):
                return NumericLiteral(-self._number_value(_text(operand)), span=span)
        if ntype == "member_expression":
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None:
                return MemberExpression(
                    self._expression(obj), self._expression(prop), computed=False, span=span
                )
        if ntype == "subscript_expression":
            obj = node.child_by_field_name("object")
            index = node.child_by_field_name("index")
            if obj is not None and index is not None:
                return MemberExpression(
                    self._expression(obj), self._expression(index), computed=True, span=span
                )
        if ntype == "call_expression":
            return self._call(node)

        return UnsupportedExpression(
            ntype,
            tuple(self._expression(child) for child in _named(node)),
            span=span,
        )

    def _call(self, node: Node) -> Expression:
        callee = node.child_by_field_name("function")
        if callee is None:
            return UnsupportedExpression(node.type, span=_span(node))

        args_node = node.child_by_field_name("arguments")
        arguments = (
            tuple(self._expression(arg) for arg in _named(args_node))
            if args_node is not None
            else ()
        )

        type_args_node = node.child_by_field_name("type_arguments")
        type_args = (
            tuple(self._type(arg) for arg in _named(type_args_node))
            if type_args_node is not None
            else None
        )

        return CallExpression(self._expression(callee), arguments, type_args, span=_span(node))

    @staticmethod
    def _string_value(string_node: Node) -> str:
        """Extract the raw string value from a tree-sitter ``string`` node.

        String nodes look like: string -> [quote, string_fragment, quote].
        """
        fragments = [
            _text(child)
            for child in string_node.children
            if child.type in ("string_fragment", "escape_sequence")
        ]
        if fragments:
            return "".join(fragments)
        # Fallback: strip outer quotes from the whole text.
        text = _text(string_node)
        if len(text) >= 2 and text[0] in ("'", '"', "`") and text[-1] in ("'", '"', "`"):
            return text[1:-1]
        return text

    @staticmethod
    def _number_value(text: str) -> float:
        text = text.replace("_", "").removesuffix("n")
        try:
            return float(text)
        except ValueError:
            return float(int(text, 0))
