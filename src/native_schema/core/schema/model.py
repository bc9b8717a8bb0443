"""Intermediate representation of a native module schema.

The IR is a closed set of frozen annotation dataclasses.  Nullability is not
an annotation of its own: every place that can be nullable holds a
:class:`Nullable` pair, built only through :func:`wrap_nullable` so that the
flag never nests.

``to_dict`` on every value produces the JSON shape handed to the code
generators.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar, Union

T = TypeVar("T")

@dataclass(frozen=True)
class Nullable(Generic[T]):
    """A value tagged with whether it may be ``null``."""

    nullable: bool
    value: T

    def to_dict(self) -> dict[str, Any]:
        inner = self.value.to_dict()  # type: ignore[attr-defined]
        if not self.nullable:
            return inner
        return {"type": "NullableTypeAnnotation", "typeAnnotation": inner}

def wrap_nullable(nullable: bool, value: T | Nullable[T]) -> Nullable[T]:
    """Tag *value* with *nullable*.

    Wrapping an already wrapped value ORs the two flags instead of nesting.
    """
    if isinstance(value, Nullable):
        return Nullable(nullable or value.nullable, value.value)
    return Nullable(nullable, value)

def unwrap_nullable(value: T | Nullable[T]) -> tuple[T, bool]:
    """Return ``(value, is_nullable)``; bare values are not nullable."""
    if isinstance(value, Nullable):
        return value.value, value.nullable
    return value, False

class MemberKind(Enum):
    """Kind of the members of an enum or union."""

    NUMBER = "NumberTypeAnnotation"
    STRING = "StringTypeAnnotation"
    OBJECT = "ObjectTypeAnnotation"

class TypeAnnotation:
    """Base class of IR type annotations."""

    type_name: ClassVar[str]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name}

@dataclass(frozen=True)
class BooleanTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "BooleanTypeAnnotation"

@dataclass(frozen=True)
class NumberTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "NumberTypeAnnotation"

@dataclass(frozen=True)
class Int32TypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "Int32TypeAnnotation"

@dataclass(frozen=True)
class DoubleTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "DoubleTypeAnnotation"

@dataclass(frozen=True)
class FloatTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "FloatTypeAnnotation"

@dataclass(frozen=True)
class StringTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "StringTypeAnnotation"

@dataclass(frozen=True)
class StringishTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "StringishTypeAnnotation"

@dataclass(frozen=True)
class VoidTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "VoidTypeAnnotation"

@dataclass(frozen=True)
class PromiseTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "PromiseTypeAnnotation"

@dataclass(frozen=True)
class RootTagTypeAnnotation(TypeAnnotation):
    """Opaque identifier of the root view a module call originates from."""

    type_name: ClassVar[str] = "ReservedTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "name": "RootTag"}

@dataclass(frozen=True)
class GenericObjectTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "GenericObjectTypeAnnotation"

@dataclass(frozen=True)
class MixedTypeAnnotation(TypeAnnotation):
    type_name: ClassVar[str] = "MixedTypeAnnotation"

@dataclass(frozen=True)
class EnumDeclarationTypeAnnotation(TypeAnnotation):
    member_type: MemberKind
    type_name: ClassVar[str] = "EnumDeclaration"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "memberType": self.member_type.value}

@dataclass(frozen=True)
class UnionTypeAnnotation(TypeAnnotation):
    member_type: MemberKind
    type_name: ClassVar[str] = "UnionTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "memberType": self.member_type.value}

@dataclass(frozen=True)
class TypeAliasTypeAnnotation(TypeAnnotation):
    """Reference to an object registered in the module's alias map."""

    name: str
    type_name: ClassVar[str] = "TypeAliasTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "name": self.name}

@dataclass(frozen=True)
class NamedShape:
    """A named, optionally absent value: object member, parameter or method."""

    name: str
    optional: bool
    type_annotation: Nullable[Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "optional": self.optional,
            "typeAnnotation": self.type_annotation.to_dict(),
        }

@dataclass(frozen=True)
class ObjectTypeAnnotation(TypeAnnotation):
    properties: tuple[NamedShape, ...] = ()
    type_name: ClassVar[str] = "ObjectTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "properties": [prop.to_dict() for prop in self.properties],
        }

@dataclass(frozen=True)
class ArrayTypeAnnotation(TypeAnnotation):
    """An array; *element_type* is ``None`` when the element could not be typed."""

    element_type: Nullable[Any] | None = None
    type_name: ClassVar[str] = "ArrayTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type_name}
        if self.element_type is not None:
            result["elementType"] = self.element_type.to_dict()
        return result

@dataclass(frozen=True)
class FunctionTypeAnnotation(TypeAnnotation):
    params: tuple[NamedShape, ...]
    return_type_annotation: Nullable[Any]
    type_name: ClassVar[str] = "FunctionTypeAnnotation"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "returnTypeAnnotation": self.return_type_annotation.to_dict(),
            "params": [param.to_dict() for param in self.params],
        }

IRTypeAnnotation = Union[
    BooleanTypeAnnotation,
    NumberTypeAnnotation,
    Int32TypeAnnotation,
    DoubleTypeAnnotation,
    FloatTypeAnnotation,
    StringTypeAnnotation,
    StringishTypeAnnotation,
    ObjectTypeAnnotation,
    ArrayTypeAnnotation,
    FunctionTypeAnnotation,
    PromiseTypeAnnotation,
    VoidTypeAnnotation,
    RootTagTypeAnnotation,
    EnumDeclarationTypeAnnotation,
    UnionTypeAnnotation,
    GenericObjectTypeAnnotation,
    MixedTypeAnnotation,
    TypeAliasTypeAnnotation,
]

AliasMap = dict[str, ObjectTypeAnnotation]

@dataclass(frozen=True)
class ModuleSchema:
    """Schema of one native module.

    *excluded_platforms* is ``None`` when the module is generated for every
    platform.  Collections are copied into read-only containers on
    construction.
    """

    aliases: Mapping[str, ObjectTypeAnnotation] = field(default_factory=dict)
    properties: tuple[NamedShape, ...] = ()
    module_names: tuple[str, ...] = ()
    excluded_platforms: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        object.__setattr__(self, "properties", tuple(self.properties))
        object.__setattr__(self, "module_names", tuple(self.module_names))
        if self.excluded_platforms is not None:
            object.__setattr__(self, "excluded_platforms", tuple(self.excluded_platforms))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": "NativeModule",
            "aliasMap": {name: obj.to_dict() for name, obj in self.aliases.items()},
            "spec": {"properties": [prop.to_dict() for prop in self.properties]},
            "moduleNames": list(self.module_names),
        }
        if self.excluded_platforms is not None:
            result["excludedPlatforms"] = list(self.excluded_platforms)
        return result
