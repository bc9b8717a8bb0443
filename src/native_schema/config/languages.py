"""Source detection based on file extensions."""

from __future__ import annotations

from pathlib import Path

SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "tsx",
}

# Ambient declaration files never contain a module spec.
DECLARATION_SUFFIX = ".d.ts"

def get_dialect(file_path: str | Path) -> str | None:
    """Return the tree-sitter dialect for *file_path* based on its extension.

    Returns ``None`` when the extension is not in :data:`SUPPORTED_EXTENSIONS`
    or the file is a ``.d.ts`` declaration file.
    """
    path = Path(file_path)
    if path.name.endswith(DECLARATION_SUFFIX):
        return None
    return SUPPORTED_EXTENSIONS.get(path.suffix)

def is_supported(file_path: str | Path) -> bool:
    """Return ``True`` if *file_path* can hold a module spec."""
    return get_dialect(file_path) is not None

def logical_module_name(file_path: str | Path) -> str:
    """Return the module name a spec file stands for.

    The name is the file name up to its first dot, so ``NativeFoo.ts`` and
    ``NativeFoo.android.ts`` both stand for ``NativeFoo``.
    """
    return Path(file_path).name.split(".", 1)[0]
