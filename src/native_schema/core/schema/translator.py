"""Translation of TypeScript type annotations into the schema IR.

:class:`TypeAnnotationTranslator` is the recursive core of the schema builder.
One instance is created per module property and carries everything the
recursion needs explicitly: the owning module's name, the file's type
environment, the property's alias map, the fault capturer and whether the
module is C++-only ("native-only").

Translation returns a :class:`~native_schema.core.schema.model.Nullable`
annotation or raises a :class:`~native_schema.core.schema.errors.RecoverableParserError`.
Object members and function parameters are translated inside the capturer, so
one bad member only drops that member.  Array element types are translated
with a pass-through capturer: any fault beneath the element is absorbed by the
array, which is kept without an element type.
"""

from __future__ import annotations

from functools import partial

from native_schema.core.ast.nodes import (
    ArrayType,
    EnumDeclaration,
    FunctionType,
    KeywordType,
    LiteralType,
    Member,
    MethodSignature,
    NumericLiteral,
    ObjectLiteralType,
    PropertySignature,
    StringLiteral,
    TypeNode,
    TypeOperator,
    TypeReference,
    UnionType,
)
from native_schema.core.schema.capture import PASSTHROUGH, Capture
from native_schema.core.schema.environment import AliasResolution, TypeDeclarationMap, resolve_type_annotation
from native_schema.core.schema.errors import (
    MissingTypeParameterGenericError,
    MoreThanOneTypeParameterGenericError,
    ParserError,
    UnsupportedArrayElementTypeAnnotationError,
    UnsupportedEnumDeclarationError,
    UnsupportedGenericError,
    UnsupportedObjectPropertyTypeAnnotationError,
    UnsupportedObjectPropertyValueTypeAnnotationError,
    UnsupportedTypeAnnotationError,
    UnsupportedUnionTypeAnnotationError,
)
from native_schema.core.schema.model import (
    AliasMap,
    ArrayTypeAnnotation,
    BooleanTypeAnnotation,
    DoubleTypeAnnotation,
    EnumDeclarationTypeAnnotation,
    FloatTypeAnnotation,
    FunctionTypeAnnotation,
    GenericObjectTypeAnnotation,
    Int32TypeAnnotation,
    MemberKind,
    MixedTypeAnnotation,
    NamedShape,
    Nullable,
    NumberTypeAnnotation,
    ObjectTypeAnnotation,
    PromiseTypeAnnotation,
    RootTagTypeAnnotation,
    StringishTypeAnnotation,
    StringTypeAnnotation,
    TypeAliasTypeAnnotation,
    TypeAnnotation,
    UnionTypeAnnotation,
    VoidTypeAnnotation,
    unwrap_nullable,
    wrap_nullable,
)
from native_schema.core.schema.signature import translate_function_type

# Annotations that cannot be stored in an array or an object property.
_INVALID_VALUE_TYPES: dict[type[TypeAnnotation], str] = {
    VoidTypeAnnotation: "void",
    PromiseTypeAnnotation: "Promise",
    FunctionTypeAnnotation: "FunctionTypeAnnotation",
}

_KEYWORD_ANNOTATIONS: dict[str, TypeAnnotation] = {
    "boolean": BooleanTypeAnnotation(),
    "number": NumberTypeAnnotation(),
    "string": StringTypeAnnotation(),
    "void": VoidTypeAnnotation(),
}

_NAMED_ANNOTATIONS: dict[str, TypeAnnotation] = {
    "RootTag": RootTagTypeAnnotation(),
    "Stringish": StringishTypeAnnotation(),
    "Int32": Int32TypeAnnotation(),
    "Double": DoubleTypeAnnotation(),
    "Float": FloatTypeAnnotation(),
    "Object": GenericObjectTypeAnnotation(),
    "UnsafeObject": GenericObjectTypeAnnotation(),
}

def assert_exactly_one_type_argument(module_name: str, node: TypeReference) -> TypeNode:
    """Return the single type argument of a generic reference."""
    if not node.type_args:
        raise MissingTypeParameterGenericError(module_name, node, node.name)
    if len(node.type_args) > 1:
        raise MoreThanOneTypeParameterGenericError(module_name, node, node.name)
    return node.type_args[0]

def literal_member_kind(node: TypeNode) -> MemberKind:
    """Kind of one union member: number literal, string literal or anything else."""
    if isinstance(node, LiteralType):
        if isinstance(node.literal, NumericLiteral):
            return MemberKind.NUMBER
        if isinstance(node.literal, StringLiteral):
            return MemberKind.STRING
    return MemberKind.OBJECT

class TypeAnnotationTranslator:
    """Translate type annotations of one module property.

    Args:
        module_name: Logical name of the module being built, used in faults.
        types: The file's type environment.
        alias_map: Receives every named object type met during translation.
        capture: Fault capturer for object members and parameters.
        native_only: Whether the module is C++-only, which allows unions,
            enums, ``unknown`` and function-typed returns.
        fault_sink: Receives faults an array records about its own element.
            Defaults to *capture*, and is kept when the capturer is swapped.
    """

    def __init__(
        self,
        module_name: str,
        types: TypeDeclarationMap,
        alias_map: AliasMap,
        capture: Capture,
        native_only: bool = False,
        fault_sink: Capture | None = None,
    ) -> None:
        self.module_name = module_name
        self.types = types
        self.alias_map = alias_map
        self.capture = capture
        self.native_only = native_only
        self.fault_sink = fault_sink if fault_sink is not None else capture

    def with_capture(self, capture: Capture) -> TypeAnnotationTranslator:
        return TypeAnnotationTranslator(
            self.module_name,
            self.types,
            self.alias_map,
            capture,
            self.native_only,
            fault_sink=self.fault_sink,
        )

    def translate(self, node: TypeNode) -> Nullable[TypeAnnotation]:
        """Translate *node* into an IR annotation."""
        resolved = resolve_type_annotation(node, self.types)
        nullable = resolved.nullable
        annotation = resolved.type_annotation

        match annotation:
            case ArrayType(element_type=element):
                return self._translate_array("Array", element, nullable)
            case TypeOperator(operator="readonly", type_annotation=ArrayType(element_type=element)):
                return self._translate_array("ReadonlyArray", element, nullable)
            case TypeOperator(operator=operator):
                raise UnsupportedGenericError(self.module_name, annotation, operator)
            case TypeReference():
                return self._translate_reference(annotation, nullable)
            case ObjectLiteralType():
                return self._translate_object(annotation, resolved.alias_resolution, nullable)
            case KeywordType(keyword=keyword) if keyword in _KEYWORD_ANNOTATIONS:
                return wrap_nullable(nullable, _KEYWORD_ANNOTATIONS[keyword])
            case FunctionType():
                return wrap_nullable(nullable, self.translate_function(annotation))
            case UnionType():
                return self._translate_union(annotation, nullable)
            case KeywordType(keyword="unknown") if self.native_only:
                return wrap_nullable(nullable, MixedTypeAnnotation())
            case _:
                raise UnsupportedTypeAnnotationError(self.module_name, annotation)

    def translate_function(self, node: FunctionType | MethodSignature) -> FunctionTypeAnnotation:
        """Translate a function type or method signature."""
        return translate_function_type(self, node)

    def _translate_array(
        self, array_kind: str, element_node: TypeNode, nullable: bool
    ) -> Nullable[TypeAnnotation]:
        # Faults raised beneath the element are absorbed: the array survives
        # with an unknown element type.  An invalid element type is recorded
        # on the fault sink, at whatever depth the array sits.
        try:
            element, element_nullable = unwrap_nullable(
                self.with_capture(PASSTHROUGH).translate(element_node)
            )
        except ParserError:
            return wrap_nullable(nullable, ArrayTypeAnnotation())

        invalid = _INVALID_VALUE_TYPES.get(type(element))
        if invalid is not None:
            self.fault_sink.record(
                UnsupportedArrayElementTypeAnnotationError(
                    self.module_name, element_node, array_kind, invalid
                )
            )
            return wrap_nullable(nullable, ArrayTypeAnnotation())

        return wrap_nullable(
            nullable, ArrayTypeAnnotation(wrap_nullable(element_nullable, element))
        )

    def _translate_reference(self, node: TypeReference, nullable: bool) -> Nullable[TypeAnnotation]:
        match node.name:
            case "Promise":
                assert_exactly_one_type_argument(self.module_name, node)
                return wrap_nullable(nullable, PromiseTypeAnnotation())
            case "Array" | "ReadonlyArray":
                element = assert_exactly_one_type_argument(self.module_name, node)
                return self._translate_array(node.name, element, nullable)
            case name if name in _NAMED_ANNOTATIONS:
                return wrap_nullable(nullable, _NAMED_ANNOTATIONS[name])
            case _:
                declaration = self.types.get(node.name)
                if self.native_only and isinstance(declaration, EnumDeclaration):
                    return wrap_nullable(
                        nullable,
                        EnumDeclarationTypeAnnotation(self._enum_member_kind(node, declaration)),
                    )
                raise UnsupportedGenericError(self.module_name, node, node.name)

    def _enum_member_kind(self, node: TypeReference, declaration: EnumDeclaration) -> MemberKind:
        if not declaration.members:
            raise UnsupportedEnumDeclarationError(self.module_name, node, "empty")
        initializer = declaration.members[0].initializer
        if initializer is None or isinstance(initializer, StringLiteral):
            return MemberKind.STRING
        if isinstance(initializer, NumericLiteral):
            return MemberKind.NUMBER
        raise UnsupportedEnumDeclarationError(self.module_name, node, initializer.kind)

    def _translate_object(
        self,
        node: ObjectLiteralType,
        alias_resolution: AliasResolution,
        nullable: bool,
    ) -> Nullable[TypeAnnotation]:
        properties: list[NamedShape] = []
        for member in node.members:
            shape = self.capture(partial(self._translate_object_member, member))
            if shape is not None:
                properties.append(shape)

        object_annotation = ObjectTypeAnnotation(tuple(properties))
        if not alias_resolution.successful or alias_resolution.name is None:
            return wrap_nullable(nullable, object_annotation)

        self.alias_map.setdefault(alias_resolution.name, object_annotation)
        return wrap_nullable(nullable, TypeAliasTypeAnnotation(alias_resolution.name))

    def _translate_object_member(self, member: Member) -> NamedShape:
        if not isinstance(member, PropertySignature):
            raise UnsupportedObjectPropertyTypeAnnotationError(self.module_name, member, member.kind)
        if member.type_annotation is None:
            raise UnsupportedObjectPropertyTypeAnnotationError(
                self.module_name, member, "untyped PropertySignature"
            )

        value, value_nullable = unwrap_nullable(self.translate(member.type_annotation))
        invalid = _INVALID_VALUE_TYPES.get(type(value))
        if invalid is not None:
            raise UnsupportedObjectPropertyValueTypeAnnotationError(
                self.module_name, member.type_annotation, member.name, invalid
            )

        return NamedShape(member.name, member.optional, wrap_nullable(value_nullable, value))

    def _translate_union(self, node: UnionType, nullable: bool) -> Nullable[TypeAnnotation]:
        if not self.native_only:
            raise UnsupportedUnionTypeAnnotationError(self.module_name, node)

        kinds: list[MemberKind] = []
        for member in node.members:
            kind = literal_member_kind(member)
            if kind not in kinds:
                kinds.append(kind)

        if len(kinds) > 1:
            raise UnsupportedUnionTypeAnnotationError(
                self.module_name, node, [kind.value for kind in kinds]
            )
        return wrap_nullable(nullable, UnionTypeAnnotation(kinds[0]))
