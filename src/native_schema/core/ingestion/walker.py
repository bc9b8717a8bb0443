"""File system walker for discovering and reading module spec sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from native_schema.config.ignore import should_ignore
from native_schema.config.languages import get_dialect, is_supported, logical_module_name

logger = logging.getLogger(__name__)

@dataclass
class FileEntry:
    """A source file discovered during walking."""

    path: str  # path as given or relative to the scanned root (e.g. "src/NativeFoo.ts")
    content: str
    module_name: str  # file name up to its first dot (e.g. "NativeFoo")
    dialect: str  # "typescript" or "tsx"

def discover_files(
    root: Path,
    gitignore_patterns: list[str] | None = None,
) -> list[Path]:
    """Discover candidate source file paths without reading their content.

    A file passed as *root* is returned as-is when its extension is
    supported.  A directory is walked recursively, skipping ignored paths
    and generated build outputs.

    Parameters
    ----------
    root:
        A directory to walk, or a single source file.
    gitignore_patterns:
        Optional list of gitignore-style patterns (e.g. from
        :func:`native_schema.config.ignore.load_gitignore`).

    Returns
    -------
    list[Path]
        Sorted list of absolute :class:`Path` objects.
    """
    root = root.resolve()

    if root.is_file():
        return [root] if is_supported(root) else []

    discovered: list[Path] = []
    for file_path in root.rglob("*"):
        if not file_path.is_file():
            continue

        relative = file_path.relative_to(root)

        if should_ignore(str(relative), gitignore_patterns):
            continue

        if not is_supported(file_path):
            continue

        discovered.append(file_path)

    discovered.sort()
    return discovered

def read_file(root: Path, file_path: Path) -> FileEntry | None:
    """Read a single file and return a :class:`FileEntry`, or ``None`` on failure.

    Returns ``None`` when the file cannot be decoded as UTF-8, when the file
    is empty, or when an OS-level error occurs.
    """
    root = root.resolve()
    relative = file_path.relative_to(root) if file_path != root else Path(file_path.name)

    try:
        content = file_path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, ValueError, OSError):
        logger.debug("Skipping unreadable file %s", file_path)
        return None

    if not content:
        return None

    dialect = get_dialect(file_path)
    if dialect is None:
        return None

    return FileEntry(
        path=relative.as_posix(),
        content=content,
        module_name=logical_module_name(file_path),
        dialect=dialect,
    )
