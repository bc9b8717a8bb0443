"""Ignore-pattern handling for spec file discovery."""

from __future__ import annotations

import fnmatch
from pathlib import Path

import pathspec

DEFAULT_IGNORE_PATTERNS: frozenset[str] = frozenset(
    {
        # Directories
        "node_modules",
        ".git",
        ".gradle",
        ".idea",
        ".vscode",
        "Pods",
        "DerivedData",
        "coverage",
        "__tests__",
        "__mocks__",
        # File globs
        "*.min.js",
        "*.bundle.js",
        "*.map",
    }
)

# Build outputs where generated sources, source maps and bundled assets end
# up.  Picking them up would feed generated code back into the generator.
GENERATED_OUTPUT_GLOBS: tuple[str, ...] = (
    "**/generated/source/codegen/**",
    "**/build/generated/assets/react/**",
    "**/build/generated/res/react/**",
    "**/build/generated/sourcemaps/react/**",
    "**/build/intermediates/sourcemaps/react/**",
)

_GLOB_PATTERNS: frozenset[str] = frozenset(p for p in DEFAULT_IGNORE_PATTERNS if "*" in p or "?" in p)
_LITERAL_PATTERNS: frozenset[str] = DEFAULT_IGNORE_PATTERNS - _GLOB_PATTERNS

_GENERATED_SPEC = pathspec.PathSpec.from_lines("gitignore", GENERATED_OUTPUT_GLOBS)

def _matches_default_patterns(path: Path) -> bool:
    """Check whether *path* (relative) matches any default ignore pattern."""
    for part in path.parts:
        if part in _LITERAL_PATTERNS:
            return True
        for pattern in _GLOB_PATTERNS:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False

_pathspec_cache: dict[tuple[str, ...], pathspec.PathSpec] = {}

def _matches_gitignore(path: Path, gitignore_patterns: list[str]) -> bool:
    """Check *path* against a list of gitignore-style patterns.

    The compiled spec is cached by pattern content so it is only built once
    per unique pattern set.
    """
    if not gitignore_patterns:
        return False

    cache_key = tuple(gitignore_patterns)
    spec = _pathspec_cache.get(cache_key)
    if spec is None:
        spec = pathspec.PathSpec.from_lines("gitignore", gitignore_patterns)
        _pathspec_cache[cache_key] = spec
    return spec.match_file(path.as_posix())

def is_generated_output(path: str | Path) -> bool:
    """Return ``True`` if *path* lies in a generated build-output directory."""
    return _GENERATED_SPEC.match_file(Path(path).as_posix())

def should_ignore(
    path: str | Path,
    gitignore_patterns: list[str] | None = None,
) -> bool:
    """Return ``True`` if *path* should be skipped during file discovery.

    Parameters
    ----------
    path:
        A path relative to the scanned root (e.g. ``src/NativeFoo.ts``).
    gitignore_patterns:
        Optional list of gitignore-style patterns loaded via :func:`load_gitignore`.
    """
    p = Path(path)

    if _matches_default_patterns(p):
        return True

    if is_generated_output(p):
        return True

    if gitignore_patterns and _matches_gitignore(p, gitignore_patterns):
        return True

    return False

def load_gitignore(root: Path) -> list[str]:
    """Read ``.gitignore`` from *root* and return a list of patterns.

    Blank lines and comments are stripped.  Returns an empty list when the
    file does not exist.
    """
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return []

    lines: list[str] = []
    text = gitignore.read_text(encoding="utf-8")
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line and not line.startswith("#"):
            lines.append(line)
    return lines
