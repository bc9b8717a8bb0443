"""Per-file type environment and alias resolution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from native_schema.core.ast.nodes import (
    Declaration,
    EnumDeclaration,
    InterfaceDeclaration,
    KeywordType,
    ObjectLiteralType,
    Program,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
)

TypeDeclarationMap = Mapping[str, Declaration]

_NULL_KEYWORDS: frozenset[str] = frozenset({"null", "undefined"})

def build_type_environment(program: Program) -> TypeDeclarationMap:
    """Map every top-level interface, type alias and enum name to its declaration.

    A later declaration of the same name replaces an earlier one.  The
    returned mapping is read-only.
    """
    types: dict[str, Declaration] = {}
    for statement in program.body:
        if isinstance(statement, (InterfaceDeclaration, TypeAliasDeclaration, EnumDeclaration)):
            types[statement.name] = statement
    return MappingProxyType(types)

@dataclass(frozen=True)
class AliasResolution:
    """Whether a resolved annotation came from a named alias, and which one."""

    successful: bool = False
    name: str | None = None

NOT_ALIASED = AliasResolution()

@dataclass(frozen=True)
class ResolvedAnnotation:
    nullable: bool
    type_annotation: TypeNode
    alias_resolution: AliasResolution = NOT_ALIASED

def _is_null_like(node: TypeNode) -> bool:
    return isinstance(node, KeywordType) and node.keyword in _NULL_KEYWORDS

def resolve_type_annotation(node: TypeNode, types: TypeDeclarationMap) -> ResolvedAnnotation:
    """Strip nullability and follow alias chains down to a concrete annotation.

    ``T | null`` and ``T | undefined`` collapse into a single nullable flag,
    ``Readonly<T>`` is transparent, and references to type aliases or
    interfaces declared in *types* are replaced by their definition.  Enum
    references are left in place for the translator.  Generic arguments are
    not resolved.
    """
    nullable = False
    alias_resolution = NOT_ALIASED
    seen: set[str] = set()

    while True:
        match node:
            case UnionType(members=members) if any(_is_null_like(m) for m in members):
                nullable = True
                remaining = tuple(m for m in members if not _is_null_like(m))
                if not remaining:
                    node = members[0]
                    break
                node = remaining[0] if len(remaining) == 1 else UnionType(remaining, span=node.span)
            case TypeReference(name="Readonly", type_args=(inner,)):
                node = inner
            case TypeReference(name=name) if name in types and name not in seen:
                declaration = types[name]
                if isinstance(declaration, EnumDeclaration):
                    break
                seen.add(name)
                alias_resolution = AliasResolution(successful=True, name=name)
                if isinstance(declaration, TypeAliasDeclaration):
                    node = declaration.type_annotation
                else:
                    node = ObjectLiteralType(declaration.members, span=declaration.span)
            case _:
                break

    return ResolvedAnnotation(nullable, node, alias_resolution)
