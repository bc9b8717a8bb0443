"""Build the schema of one native module spec file.

The builder locates the single ``Spec`` interface extending ``TurboModule``,
the single ``TurboModuleRegistry.get<Spec>('Name')`` call that registers it,
derives platform facts from naming conventions, and folds the interface's
methods into a :class:`~native_schema.core.schema.model.ModuleSchema`.

Faults about the shape of the file are raised and abort the build.  Faults
inside individual methods are captured; the method is dropped and the rest of
the module is still built.  :func:`parse_module` returns the captured faults
alongside the schema.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import partial, reduce

from native_schema.config.conventions import (
    MODULE_BASE_MARKER,
    MODULE_REGISTRY,
    NATIVE_ONLY_SUFFIX,
    PLATFORM_SUFFIXES,
    REGISTRY_ACCESSORS,
    SPEC_INTERFACE_NAME,
)
from native_schema.core.ast.nodes import (
    ArrayType,
    CallExpression,
    FunctionType,
    Identifier,
    InterfaceDeclaration,
    KeywordType,
    LiteralType,
    MemberExpression,
    MethodSignature,
    Node,
    ObjectLiteralType,
    Program,
    PropertySignature,
    StringLiteral,
    TypeNode,
    TypeOperator,
    TypeReference,
    UnionType,
    walk,
)
from native_schema.core.schema.capture import Capture, ErrorCapturer
from native_schema.core.schema.environment import (
    TypeDeclarationMap,
    build_type_environment,
    resolve_type_annotation,
)
from native_schema.core.schema.errors import (
    IncorrectModuleRegistryCallArgumentTypeError,
    IncorrectModuleRegistryCallArityError,
    IncorrectModuleRegistryCallTypeParameterError,
    MisnamedModuleInterfaceError,
    ModuleInterfaceNotFoundError,
    MoreThanOneModuleInterfaceError,
    MoreThanOneModuleRegistryCallsError,
    ParserError,
    UnsupportedModulePropertyError,
    UntypedModuleRegistryCallError,
    UnusedModuleInterfaceError,
)
from native_schema.core.schema.model import AliasMap, ModuleSchema, NamedShape, wrap_nullable
from native_schema.core.schema.translator import TypeAnnotationTranslator

@dataclass(frozen=True)
class PlatformFacts:
    """What a module's names say about where it runs."""

    native_only: bool = False
    excluded_platforms: tuple[str, ...] = ()

@dataclass(frozen=True)
class ModuleParseResult:
    """A built schema plus every fault captured while building it."""

    schema: ModuleSchema
    errors: tuple[ParserError, ...] = ()

def is_module_interface(node: Node) -> bool:
    """Return ``True`` for an interface whose only base is ``TurboModule``."""
    return (
        isinstance(node, InterfaceDeclaration)
        and len(node.extends) == 1
        and node.extends[0].name == MODULE_BASE_MARKER
    )

def is_module_registry_call(node: Node) -> bool:
    """Return ``True`` for ``TurboModuleRegistry.get(...)`` / ``.getEnforcing(...)``."""
    match node:
        case CallExpression(
            callee=MemberExpression(
                object=Identifier(name=receiver),
                property=Identifier(name=accessor),
                computed=False,
            )
        ):
            return receiver == MODULE_REGISTRY and accessor in REGISTRY_ACCESSORS
    return False

def derive_platform_facts(names: list[str]) -> PlatformFacts:
    """Apply the ``Android`` / ``IOS`` / ``Cxx`` suffix conventions to *names*.

    Each name is checked on its own and the first matching suffix applies.
    Exclusions accumulate across names without duplicates.
    """
    native_only = False
    excluded: list[str] = []
    for name in names:
        for suffix, platforms in PLATFORM_SUFFIXES.items():
            if not name.endswith(suffix):
                continue
            if suffix == NATIVE_ONLY_SUFFIX:
                native_only = True
            for platform in platforms:
                if platform not in excluded:
                    excluded.append(platform)
            break
    return PlatformFacts(native_only=native_only, excluded_platforms=tuple(excluded))

def find_module_interface(
    module_name: str, program: Program, types: TypeDeclarationMap
) -> InterfaceDeclaration:
    """Return the file's one ``Spec`` interface."""
    module_specs = [decl for decl in types.values() if is_module_interface(decl)]

    if not module_specs:
        raise ModuleInterfaceNotFoundError(module_name, program)

    if len(module_specs) > 1:
        raise MoreThanOneModuleInterfaceError(
            module_name, module_specs, [spec.name for spec in module_specs]
        )

    (module_spec,) = module_specs
    if module_spec.name != SPEC_INTERFACE_NAME:
        raise MisnamedModuleInterfaceError(module_name, module_spec, module_spec.name)
    return module_spec  # type: ignore[return-value]

def find_registered_module_name(
    module_name: str, program: Program, module_spec: InterfaceDeclaration
) -> str:
    """Validate the file's one registration call and return the name it registers."""
    calls = [node for node in walk(program) if is_module_registry_call(node)]

    if not calls:
        raise UnusedModuleInterfaceError(module_name, module_spec)

    if len(calls) > 1:
        raise MoreThanOneModuleRegistryCallsError(module_name, calls, len(calls))

    call = calls[0]
    assert isinstance(call, CallExpression) and isinstance(call.callee, MemberExpression)
    method_name = call.callee.property.name  # type: ignore[union-attr]

    if len(call.arguments) != 1:
        raise IncorrectModuleRegistryCallArityError(
            module_name, call, method_name, len(call.arguments)
        )

    argument = call.arguments[0]
    if not isinstance(argument, StringLiteral):
        raise IncorrectModuleRegistryCallArgumentTypeError(
            module_name, argument, method_name, argument.kind
        )

    if call.type_args is None:
        raise UntypedModuleRegistryCallError(module_name, call, method_name, argument.value)

    match call.type_args:
        case (TypeReference(name=name, type_args=None),) if name == SPEC_INTERFACE_NAME:
            return argument.value
    raise IncorrectModuleRegistryCallTypeParameterError(
        module_name, call, method_name, argument.value
    )

def describe_type(node: TypeNode) -> str:
    """Name *node* the way it reads in the source: ``number``, ``Options``, ``union type``."""
    match node:
        case KeywordType(keyword=keyword):
            return keyword
        case TypeReference(name=name):
            return name
        case TypeOperator(operator=operator):
            return f"{operator} type"
        case ArrayType():
            return "array type"
        case LiteralType():
            return "literal type"
        case UnionType():
            return "union type"
        case ObjectLiteralType():
            return "object type"
    return node.kind

def build_property_schema(
    translator: TypeAnnotationTranslator,
    member: MethodSignature | PropertySignature,
) -> NamedShape:
    """Translate one member of the ``Spec`` interface into a method shape."""
    nullable = False
    if isinstance(member, MethodSignature):
        value = member
    elif member.type_annotation is None:
        raise UnsupportedModulePropertyError(translator.module_name, member, member.name, "missing")
    else:
        resolved = resolve_type_annotation(member.type_annotation, translator.types)
        nullable, value = resolved.nullable, resolved.type_annotation

    if not isinstance(value, (FunctionType, MethodSignature)):
        raise UnsupportedModulePropertyError(
            translator.module_name, member, member.name, describe_type(value)
        )

    return NamedShape(
        member.name,
        member.optional,
        wrap_nullable(nullable, translator.translate_function(value)),
    )

def _fold_property(
    schema: ModuleSchema, entry: tuple[AliasMap, NamedShape]
) -> ModuleSchema:
    alias_map, property_shape = entry
    aliases = dict(schema.aliases)
    for name, annotation in alias_map.items():
        aliases.setdefault(name, annotation)
    return replace(
        schema,
        aliases=aliases,
        properties=(*schema.properties, property_shape),
    )

def build_module_schema(module_name: str, program: Program, capture: Capture) -> ModuleSchema:
    """Build the schema of the module spec in *program*.

    Args:
        module_name: The file's logical module name.
        program: The file's syntax tree.
        capture: Receives faults for unsupported methods, which are dropped.

    Raises:
        ModuleShapeParserError: The file does not declare exactly one properly
            named and registered module interface.
    """
    types = build_type_environment(program)
    module_spec = find_module_interface(module_name, program, types)
    module_names = [find_registered_module_name(module_name, program, module_spec)]
    facts = derive_platform_facts([*module_names, module_name])

    entries: list[tuple[AliasMap, NamedShape]] = []
    for member in module_spec.members:
        if not isinstance(member, (MethodSignature, PropertySignature)):
            continue
        alias_map: AliasMap = {}
        translator = TypeAnnotationTranslator(
            module_name, types, alias_map, capture, native_only=facts.native_only
        )
        property_shape = capture(partial(build_property_schema, translator, member))
        if property_shape is not None:
            entries.append((alias_map, property_shape))

    initial = ModuleSchema(
        aliases={},
        properties=(),
        module_names=module_names,
        excluded_platforms=facts.excluded_platforms or None,
    )
    return reduce(_fold_property, entries, initial)

def parse_module(module_name: str, program: Program) -> ModuleParseResult:
    """Build a module schema and collect its captured faults.

    Raises:
        ModuleShapeParserError: As for :func:`build_module_schema`.
    """
    capturer = ErrorCapturer()
    schema = build_module_schema(module_name, program, capturer)
    return ModuleParseResult(schema=schema, errors=tuple(capturer.errors))
