"""Translation of function signatures (function types and method signatures)."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from native_schema.core.ast.nodes import FunctionType, MethodSignature, Parameter
from native_schema.core.schema.errors import (
    UnnamedFunctionParamError,
    UnsupportedFunctionParamTypeAnnotationError,
    UnsupportedFunctionReturnTypeAnnotationError,
)
from native_schema.core.schema.model import (
    FunctionTypeAnnotation,
    NamedShape,
    PromiseTypeAnnotation,
    VoidTypeAnnotation,
    unwrap_nullable,
    wrap_nullable,
)

if TYPE_CHECKING:
    from native_schema.core.schema.translator import TypeAnnotationTranslator

def translate_function_type(
    translator: TypeAnnotationTranslator,
    node: FunctionType | MethodSignature,
) -> FunctionTypeAnnotation:
    """Translate the parameters and return type of *node*.

    Each parameter is translated inside the translator's capturer, so an
    unsupported parameter is dropped and its siblings still translate.  Faults
    in the return type propagate to the caller.

    Raises:
        UnsupportedFunctionReturnTypeAnnotationError: The return type is
            missing, or is a function outside a C++-only module.
    """
    params: list[NamedShape] = []
    for param in node.params:
        shape = translator.capture(partial(_translate_param, translator, param))
        if shape is not None:
            params.append(shape)

    if node.return_type is None:
        raise UnsupportedFunctionReturnTypeAnnotationError(translator.module_name, node, "missing")

    return_type, return_nullable = unwrap_nullable(translator.translate(node.return_type))
    if not translator.native_only and isinstance(return_type, FunctionTypeAnnotation):
        raise UnsupportedFunctionReturnTypeAnnotationError(
            translator.module_name, node.return_type, "FunctionTypeAnnotation"
        )

    return FunctionTypeAnnotation(tuple(params), wrap_nullable(return_nullable, return_type))

def _translate_param(translator: TypeAnnotationTranslator, param: Parameter) -> NamedShape:
    if param.type_annotation is None:
        raise UnnamedFunctionParamError(translator.module_name, param, param.name)

    value, value_nullable = unwrap_nullable(translator.translate(param.type_annotation))

    # Neither can be passed across the bridge as an argument.
    if isinstance(value, VoidTypeAnnotation):
        raise UnsupportedFunctionParamTypeAnnotationError(
            translator.module_name, param.type_annotation, param.name, "void"
        )
    if isinstance(value, PromiseTypeAnnotation):
        raise UnsupportedFunctionParamTypeAnnotationError(
            translator.module_name, param.type_annotation, param.name, "Promise"
        )

    return NamedShape(param.name, param.optional, wrap_nullable(value_nullable, value))
