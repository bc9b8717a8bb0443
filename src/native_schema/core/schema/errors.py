"""Faults raised while building a module schema.

Two families share the :class:`ParserError` base:

- :class:`ModuleShapeParserError`: the file as a whole is not a valid module
  spec (no interface, no registration call...).  Always fatal.
- :class:`RecoverableParserError`: one member, parameter or nested type is
  unsupported.  Captured by :class:`~native_schema.core.schema.capture.ErrorCapturer`
  so that the rest of the module is still translated.

Every fault carries the module name, the offending node (for its span), a
stable ``kind`` string and a human readable message.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from native_schema.config.conventions import MODULE_BASE_MARKER, MODULE_REGISTRY, SPEC_INTERFACE_NAME
from native_schema.core.ast.nodes import NO_SPAN, Node, Span

LANGUAGE = "TypeScript"

class ParserError(Exception):
    """Base class of all schema faults."""

    kind: ClassVar[str] = "ParserError"

    def __init__(self, module_name: str, node: Node | Sequence[Node], message: str) -> None:
        self.module_name = module_name
        self.nodes: tuple[Node, ...] = tuple(node) if isinstance(node, Sequence) else (node,)
        self.message = f"Module {module_name}: {message}"
        super().__init__(self.message)

    @property
    def node(self) -> Node | None:
        return self.nodes[0] if self.nodes else None

    @property
    def span(self) -> Span:
        node = self.node
        return node.span if node is not None else NO_SPAN

    @property
    def line(self) -> int:
        return self.span.start_line

class ModuleShapeParserError(ParserError):
    """The file does not declare exactly one well-formed module."""

class RecoverableParserError(ParserError):
    """A single member or type inside an otherwise valid module."""

# ---------------------------------------------------------------------------
# Module interface
# ---------------------------------------------------------------------------

class ModuleInterfaceNotFoundError(ModuleShapeParserError):
    kind = "ModuleInterfaceNotFound"

    def __init__(self, module_name: str, node: Node) -> None:
        super().__init__(
            module_name,
            node,
            f"No {LANGUAGE} interfaces extending {MODULE_BASE_MARKER} were detected in this spec.",
        )

class MoreThanOneModuleInterfaceError(ModuleShapeParserError):
    kind = "MoreThanOneModuleInterface"

    def __init__(self, module_name: str, nodes: Sequence[Node], names: Sequence[str]) -> None:
        self.names = list(names)
        listed = ", ".join(names)
        super().__init__(
            module_name,
            nodes,
            f"Every spec file must declare exactly one {LANGUAGE} interface extending "
            f"{MODULE_BASE_MARKER}. This file declares {len(names)}: {listed}. "
            f"Please remove the extraneous interface declarations.",
        )

class MisnamedModuleInterfaceError(ModuleShapeParserError):
    kind = "MisnamedModuleInterface"

    def __init__(self, module_name: str, node: Node, name: str) -> None:
        super().__init__(
            module_name,
            node,
            f"All {LANGUAGE} interfaces extending {MODULE_BASE_MARKER} must be called "
            f"'{SPEC_INTERFACE_NAME}'. Please rename interface '{name}' to '{SPEC_INTERFACE_NAME}'.",
        )

# ---------------------------------------------------------------------------
# Registration call
# ---------------------------------------------------------------------------

class UnusedModuleInterfaceError(ModuleShapeParserError):
    kind = "UnusedModuleInterface"

    def __init__(self, module_name: str, node: Node) -> None:
        super().__init__(
            module_name,
            node,
            f"Unused module spec. Please load the module by calling "
            f"{MODULE_REGISTRY}.get<{SPEC_INTERFACE_NAME}>('<moduleName>').",
        )

class MoreThanOneModuleRegistryCallsError(ModuleShapeParserError):
    kind = "MoreThanOneModuleRegistryCalls"

    def __init__(self, module_name: str, nodes: Sequence[Node], count: int) -> None:
        super().__init__(
            module_name,
            nodes,
            f"Every spec file must load its module exactly once. This file contains {count} "
            f"loads. Please split the file to remove the extraneous loads.",
        )

class UntypedModuleRegistryCallError(ModuleShapeParserError):
    kind = "UntypedModuleRegistryCall"

    def __init__(self, module_name: str, node: Node, method_name: str, registered_name: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Please type this module load: "
            f"{MODULE_REGISTRY}.{method_name}<{SPEC_INTERFACE_NAME}>('{registered_name}').",
        )

class IncorrectModuleRegistryCallTypeParameterError(ModuleShapeParserError):
    kind = "IncorrectModuleRegistryCallTypeParameter"

    def __init__(self, module_name: str, node: Node, method_name: str, registered_name: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Please change these type arguments to reflect "
            f"{MODULE_REGISTRY}.{method_name}<{SPEC_INTERFACE_NAME}>('{registered_name}').",
        )

class IncorrectModuleRegistryCallArityError(ModuleShapeParserError):
    kind = "IncorrectModuleRegistryCallArity"

    def __init__(self, module_name: str, node: Node, method_name: str, arity: int) -> None:
        self.arity = arity
        super().__init__(
            module_name,
            node,
            f"Please call {MODULE_REGISTRY}.{method_name}<{SPEC_INTERFACE_NAME}>() with "
            f"exactly one argument. Detected {arity}.",
        )

class IncorrectModuleRegistryCallArgumentTypeError(ModuleShapeParserError):
    kind = "IncorrectModuleRegistryCallArgumentType"

    def __init__(self, module_name: str, node: Node, method_name: str, argument_kind: str) -> None:
        self.argument_kind = argument_kind
        super().__init__(
            module_name,
            node,
            f"Please call {MODULE_REGISTRY}.{method_name}<{SPEC_INTERFACE_NAME}>() with a "
            f"string literal. Detected '{argument_kind}'.",
        )

# ---------------------------------------------------------------------------
# Members and parameters
# ---------------------------------------------------------------------------

class UnsupportedModulePropertyError(RecoverableParserError):
    kind = "UnsupportedModuleProperty"

    def __init__(self, module_name: str, node: Node, property_name: str, value_kind: str) -> None:
        self.property_name = property_name
        self.value_kind = value_kind
        super().__init__(
            module_name,
            node,
            f"{LANGUAGE} interfaces extending {MODULE_BASE_MARKER} must only contain "
            f"functions. Property '{property_name}' refers to a '{value_kind}'.",
        )

class UnnamedFunctionParamError(RecoverableParserError):
    kind = "UnnamedFunctionParam"

    def __init__(self, module_name: str, node: Node, param_name: str) -> None:
        self.param_name = param_name
        super().__init__(
            module_name,
            node,
            f"All function parameters must be named and typed. Parameter '{param_name}' "
            f"has no type annotation.",
        )

class UnsupportedFunctionParamTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedFunctionParamTypeAnnotation"

    def __init__(self, module_name: str, node: Node, param_name: str, invalid_type: str) -> None:
        self.param_name = param_name
        super().__init__(
            module_name,
            node,
            f"Function parameter '{param_name}' cannot have type '{invalid_type}'.",
        )

class UnsupportedFunctionReturnTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedFunctionReturnTypeAnnotation"

    def __init__(self, module_name: str, node: Node, invalid_type: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Function return cannot have type '{invalid_type}'.",
        )

class UnsupportedObjectPropertyTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedObjectPropertyTypeAnnotation"

    def __init__(self, module_name: str, node: Node, property_kind: str) -> None:
        super().__init__(
            module_name,
            node,
            f"'ObjectTypeAnnotation' cannot contain '{property_kind}'.",
        )

class UnsupportedObjectPropertyValueTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedObjectPropertyValueTypeAnnotation"

    def __init__(self, module_name: str, node: Node, property_name: str, invalid_type: str) -> None:
        self.property_name = property_name
        super().__init__(
            module_name,
            node,
            f"Object property '{property_name}' cannot have type '{invalid_type}'.",
        )

# ---------------------------------------------------------------------------
# Type annotations
# ---------------------------------------------------------------------------

class UnsupportedArrayElementTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedArrayElementTypeAnnotation"

    def __init__(self, module_name: str, node: Node, array_kind: str, invalid_type: str) -> None:
        super().__init__(
            module_name,
            node,
            f"{array_kind} element types cannot be '{invalid_type}'.",
        )

class UnsupportedGenericError(RecoverableParserError):
    kind = "UnsupportedGeneric"

    def __init__(self, module_name: str, node: Node, generic_name: str) -> None:
        self.generic_name = generic_name
        super().__init__(
            module_name,
            node,
            f"Unrecognized generic type '{generic_name}' in module spec.",
        )

class MissingTypeParameterGenericError(RecoverableParserError):
    kind = "MissingTypeParameterGeneric"

    def __init__(self, module_name: str, node: Node, generic_name: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Generic '{generic_name}' must have type parameters.",
        )

class MoreThanOneTypeParameterGenericError(RecoverableParserError):
    kind = "MoreThanOneTypeParameterGeneric"

    def __init__(self, module_name: str, node: Node, generic_name: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Generic '{generic_name}' must have exactly one type parameter.",
        )

class UnsupportedTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedTypeAnnotation"

    def __init__(self, module_name: str, node: Node) -> None:
        super().__init__(
            module_name,
            node,
            f"{LANGUAGE} type annotation '{node.kind}' is unsupported in module specs.",
        )

class UnsupportedEnumDeclarationError(RecoverableParserError):
    kind = "UnsupportedEnumDeclaration"

    def __init__(self, module_name: str, node: Node, member_kind: str) -> None:
        super().__init__(
            module_name,
            node,
            f"Unexpected enum member type '{member_kind}'. Only string and number enum "
            f"members are supported.",
        )

class UnsupportedUnionTypeAnnotationError(RecoverableParserError):
    kind = "UnsupportedUnionTypeAnnotation"

    def __init__(self, module_name: str, node: Node, member_kinds: Sequence[str] | None = None) -> None:
        if member_kinds is None:
            message = "Union types are only supported in C++-only modules."
        else:
            message = (
                "Union members must be of the same type, but multiple types were found: "
                f"{', '.join(member_kinds)}."
            )
        super().__init__(module_name, node, message)
