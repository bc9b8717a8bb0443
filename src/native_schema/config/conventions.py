"""Naming conventions that identify a native module spec."""

from __future__ import annotations

# The interface every module spec extends.
MODULE_BASE_MARKER = "TurboModule"

# The only accepted name for that interface.
SPEC_INTERFACE_NAME = "Spec"

# ``TurboModuleRegistry.get<Spec>('Name')`` / ``getEnforcing``.
MODULE_REGISTRY = "TurboModuleRegistry"
REGISTRY_ACCESSORS: frozenset[str] = frozenset({"get", "getEnforcing"})

# Files declaring UI components go through a different pipeline.
COMPONENT_MARKER = "codegenNativeComponent"

IOS = "iOS"
ANDROID = "android"

# Name suffix -> platforms the module is not generated for.  Checked in order,
# the first matching suffix wins for a given name.
PLATFORM_SUFFIXES: dict[str, tuple[str, ...]] = {
    "Android": (IOS,),
    "IOS": (ANDROID,),
    "Cxx": (IOS, ANDROID),
}

# Modules with this suffix are implemented in shared C++ only and may use the
# wider type grammar (unions, enums, unknown, function returns).
NATIVE_ONLY_SUFFIX = "Cxx"

# Spec files are named ``Native<Module>.ts``; platform-specific variants put
# the platform between the name and the extension (``NativeFoo.android.ts``).
SPEC_FILE_PREFIX = "Native"

# ``--platform`` values -> the platform names used in ``excludedPlatforms``.
PLATFORM_OPTIONS: dict[str, str] = {
    "ios": IOS,
    "android": ANDROID,
}
