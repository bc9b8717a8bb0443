"""Native Schema CLI — TypeScript module specs to a language-neutral schema."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from native_schema import __version__
from native_schema.config.conventions import PLATFORM_OPTIONS
from native_schema.config.languages import get_dialect, logical_module_name
from native_schema.core.schema.errors import ParserError

console = Console()

app = typer.Typer(
    name="native-schema",
    help="Native Schema — TypeScript module specs to a language-neutral schema.",
    no_args_is_help=True,
)

def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"Native Schema v{__version__}")
        raise typer.Exit()

def _print_fault(path: str, error: Exception, label: str = "Error", style: str = "red") -> None:
    line = f":{error.line}" if isinstance(error, ParserError) and error.line else ""
    kind = f" ({error.kind})" if isinstance(error, ParserError) else ""
    console.print(f"[{style}]{label}:[/{style}] {escape(path)}{line}{kind} {escape(str(error))}")

@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: N803
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Native Schema — TypeScript module specs to a language-neutral schema."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

@app.command()
def combine(
    output: Path = typer.Argument(..., help="Path of the schema JSON file to write."),
    paths: list[Path] = typer.Argument(..., help="Spec files or directories to scan."),
    platform: Optional[str] = typer.Option(
        None, "--platform", help="Only build modules for this platform (ios or android)."
    ),
    exclude: Optional[str] = typer.Option(
        None, "--exclude", help="Regular expression of file paths to skip."
    ),
) -> None:
    """Combine module specs into one schema JSON file."""
    from native_schema.core.ingestion.combine import combine_schemas, write_schema

    if platform is not None and platform not in PLATFORM_OPTIONS:
        console.print(
            f"[red]Error:[/red] Unknown platform {platform!r}. "
            f"Expected one of: {', '.join(sorted(PLATFORM_OPTIONS))}."
        )
        raise typer.Exit(code=1)

    if exclude is not None:
        try:
            re.compile(exclude)
        except re.error as exc:
            console.print(f"[red]Error:[/red] Invalid --exclude pattern: {escape(str(exc))}")
            raise typer.Exit(code=1)

    for path in paths:
        if not path.exists():
            console.print(f"[red]Error:[/red] {escape(str(path))} does not exist.")
            raise typer.Exit(code=1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Building schemas...", total=None)
        result = combine_schemas(paths, platform=platform, exclude=exclude)

    for file_result in result.results:
        for error in file_result.errors:
            _print_fault(file_result.path, error, "Warning", "yellow")

    if result.failed:
        for file_result in result.failed:
            _print_fault(file_result.path, file_result.fatal)  # type: ignore[arg-type]
        console.print(
            f"[bold red]Failed:[/bold red] {len(result.failed)} file(s) could not be "
            f"translated. Nothing was written."
        )
        raise typer.Exit(code=1)

    write_schema(result, output)

    console.print("[bold green]Schema written.[/bold green]")
    console.print(f"  Output:         {escape(str(output))}")
    console.print(f"  Modules:        {len(result.modules)}")
    captured = len(result.captured_errors)
    if captured > 0:
        console.print(f"  Warnings:       {captured}")

@app.command()
def inspect(
    file: Path = typer.Argument(..., help="The module spec file to translate."),
) -> None:
    """Translate one module spec and print its schema."""
    from native_schema.core.ingestion.combine import get_parser
    from native_schema.core.schema.module_builder import parse_module

    if not file.is_file():
        console.print(f"[red]Error:[/red] {escape(str(file))} is not a file.")
        raise typer.Exit(code=1)

    dialect = get_dialect(file)
    if dialect is None:
        console.print(f"[red]Error:[/red] {escape(str(file))} is not a TypeScript source file.")
        raise typer.Exit(code=1)

    try:
        content = file.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        console.print(f"[red]Error:[/red] {escape(str(file))} is not valid UTF-8.")
        raise typer.Exit(code=1)
    program = get_parser(dialect).parse(content, str(file))

    try:
        parsed = parse_module(logical_module_name(file), program)
    except ParserError as exc:
        _print_fault(str(file), exc)
        raise typer.Exit(code=1)

    console.print(
        json.dumps(parsed.schema.to_dict(), indent=2),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    for error in parsed.errors:
        _print_fault(str(file), error, "Warning", "yellow")
