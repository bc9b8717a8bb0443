"""Combine module spec files into one schema document.

Discovers spec files under the given paths, builds each file's schema in a
thread pool, and merges the successful ones into
``{"modules": {<module name>: <schema>}}``.

A fatal fault only fails the file it occurred in; the caller decides what to
do with a combine run that contains failed files.
"""

from __future__ import annotations

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from native_schema.config.conventions import (
    COMPONENT_MARKER,
    MODULE_BASE_MARKER,
    PLATFORM_OPTIONS,
    SPEC_FILE_PREFIX,
)
from native_schema.config.ignore import load_gitignore
from native_schema.core.ingestion.walker import FileEntry, discover_files, read_file
from native_schema.core.parsers.typescript import TypeScriptSpecParser
from native_schema.core.schema.errors import ParserError
from native_schema.core.schema.model import ModuleSchema
from native_schema.core.schema.module_builder import parse_module

logger = logging.getLogger(__name__)

_MODULE_MARKER_RE = re.compile(rf"\b{MODULE_BASE_MARKER}")
_COMPONENT_MARKER_RE = re.compile(rf"\b{COMPONENT_MARKER}\b")

@dataclass
class FileSchemaResult:
    """Outcome of building one file's schema.

    Exactly one of *schema* and *fatal* is set.
    """

    path: str
    module_name: str
    schema: ModuleSchema | None = None
    errors: tuple[ParserError, ...] = ()
    fatal: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.fatal is None

@dataclass
class CombineResult:
    """Merged schemas plus the per-file results they came from."""

    modules: dict[str, ModuleSchema] = field(default_factory=dict)
    results: list[FileSchemaResult] = field(default_factory=list)

    @property
    def failed(self) -> list[FileSchemaResult]:
        return [result for result in self.results if not result.ok]

    @property
    def captured_errors(self) -> list[ParserError]:
        return [error for result in self.results for error in result.errors]

    def to_dict(self) -> dict[str, Any]:
        return {"modules": {name: schema.to_dict() for name, schema in self.modules.items()}}

_PARSER_CACHE: dict[str, TypeScriptSpecParser] = {}

def get_parser(dialect: str) -> TypeScriptSpecParser:
    """Return the cached front end for *dialect*.

    Raises:
        ValueError: If *dialect* is not supported.
    """
    cached = _PARSER_CACHE.get(dialect)
    if cached is not None:
        return cached

    parser = TypeScriptSpecParser(dialect=dialect)
    _PARSER_CACHE[dialect] = parser
    return parser

def is_module_candidate(content: str) -> bool:
    """Return ``True`` if *content* looks like a native module spec.

    Files declaring UI components go through a different pipeline and are
    never candidates.
    """
    if _COMPONENT_MARKER_RE.search(content):
        return False
    return _MODULE_MARKER_RE.search(content) is not None

def is_spec_file(
    path: str | Path,
    platform: str | None = None,
    exclude: re.Pattern[str] | None = None,
) -> bool:
    """Return ``True`` if *path* is named like a spec file for *platform*.

    ``NativeFoo.ts`` applies to every platform.  ``NativeFoo.android.ts``
    applies only when *platform* is ``"android"``.  Paths matching *exclude*
    are rejected.
    """
    p = Path(path)
    if not p.name.startswith(SPEC_FILE_PREFIX):
        return False

    if exclude is not None and exclude.search(p.as_posix()):
        return False

    name_parts = p.name.split(".")
    if len(name_parts) == 2:
        return True
    return platform is not None and name_parts[1] == platform

def collect_spec_files(
    paths: list[Path],
    platform: str | None = None,
    exclude: re.Pattern[str] | None = None,
    max_workers: int = 8,
) -> list[FileEntry]:
    """Read every spec file under *paths*.

    Files passed directly are taken as-is; directories are walked, honouring
    their ``.gitignore`` and the spec file naming convention.
    """
    candidates: list[tuple[Path, Path]] = []
    for path in paths:
        root = path.resolve()
        if root.is_file():
            candidates.extend((root, fp) for fp in discover_files(root))
            continue

        gitignore = load_gitignore(root)
        for file_path in discover_files(root, gitignore):
            relative = file_path.relative_to(root)
            if is_spec_file(relative, platform, exclude):
                candidates.append((root, file_path))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(lambda pair: read_file(*pair), candidates)

    entries = [entry for entry in results if entry is not None]
    entries.sort(key=lambda e: e.path)
    return entries

def build_file_schema(entry: FileEntry) -> FileSchemaResult:
    """Parse one file and build its module schema.

    Fatal faults, and any unexpected failure of the front end, are recorded
    on the result instead of raised.
    """
    try:
        program = get_parser(entry.dialect).parse(entry.content, entry.path)
        parsed = parse_module(entry.module_name, program)
    except ParserError as exc:
        logger.debug("Fatal fault in %s: %s", entry.path, exc)
        return FileSchemaResult(path=entry.path, module_name=entry.module_name, fatal=exc)
    except Exception as exc:
        logger.warning("Failed to build schema for %s, skipping", entry.path, exc_info=True)
        return FileSchemaResult(path=entry.path, module_name=entry.module_name, fatal=exc)

    for error in parsed.errors:
        logger.debug("Captured fault in %s:%d: %s", entry.path, error.line, error)

    return FileSchemaResult(
        path=entry.path,
        module_name=entry.module_name,
        schema=parsed.schema,
        errors=parsed.errors,
    )

def combine_schemas(
    paths: list[Path],
    platform: str | None = None,
    exclude: str | re.Pattern[str] | None = None,
    max_workers: int = 8,
) -> CombineResult:
    """Build and merge the schemas of every spec file under *paths*.

    Parameters
    ----------
    paths:
        Directories to walk and/or individual spec files.
    platform:
        ``"ios"`` or ``"android"``.  Selects platform-specific files and drops
        modules excluded for that platform.
    exclude:
        Regular expression; matching file paths are skipped.
    max_workers:
        Maximum number of threads for reading and building.

    Raises:
        ValueError: If *platform* is not a known platform.
    """
    if platform is not None and platform not in PLATFORM_OPTIONS:
        raise ValueError(
            f"Unknown platform {platform!r}. "
            f"Expected one of: {', '.join(sorted(PLATFORM_OPTIONS))}"
        )
    exclude_re = re.compile(exclude) if isinstance(exclude, str) else exclude

    entries = collect_spec_files(paths, platform, exclude_re, max_workers)

    candidates: list[FileEntry] = []
    for entry in entries:
        if is_module_candidate(entry.content):
            candidates.append(entry)
        else:
            logger.debug("Skipping %s: not a native module spec", entry.path)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(build_file_schema, candidates))

    excluded_platform = PLATFORM_OPTIONS[platform] if platform is not None else None
    combined = CombineResult(results=results)
    for result in results:
        if result.schema is None:
            continue

        if excluded_platform is not None and excluded_platform in (
            result.schema.excluded_platforms or ()
        ):
            logger.debug("Dropping %s: excluded on %s", result.module_name, excluded_platform)
            continue

        if result.module_name in combined.modules:
            logger.warning(
                "Duplicate module %s in %s, keeping the first definition",
                result.module_name,
                result.path,
            )
            continue

        combined.modules[result.module_name] = result.schema

    return combined

def write_schema(result: CombineResult, output: Path) -> Path:
    """Write *result* as JSON to *output*, creating parent directories."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote %d module(s) to %s", len(result.modules), output)
    return output
