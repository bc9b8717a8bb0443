"""Configuration — ignore patterns, source detection and spec conventions."""

from native_schema.config.ignore import (
    DEFAULT_IGNORE_PATTERNS,
    GENERATED_OUTPUT_GLOBS,
    is_generated_output,
    load_gitignore,
    should_ignore,
)
from native_schema.config.languages import (
    SUPPORTED_EXTENSIONS,
    get_dialect,
    is_supported,
    logical_module_name,
)

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "GENERATED_OUTPUT_GLOBS",
    "SUPPORTED_EXTENSIONS",
    "get_dialect",
    "is_generated_output",
    "is_supported",
    "load_gitignore",
    "logical_module_name",
    "should_ignore",
]
