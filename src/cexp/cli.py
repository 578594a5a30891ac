"""Typer-based CLI for cexp."""

from __future__ import annotations

import json
import sys
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

import typer
from rich.console import Console
from rich.json import JSON
from rich.markup import escape

from .api import CompilerExplorerError, CompilerInfo
from .compilation import build_compile_job, filters_for_compiler, resolve_filters
from .reporting import CompileReporter, open_sink, render_compilers, render_languages, render_shortlink
from .selection import CompilerQuery, find_compilers
from .state import AppState, build_state
from .utils import to_json

app = typer.Typer(add_completion=False, help="Query and drive a Compiler Explorer instance.")
console = Console()
err_console = Console(stderr=True)


@dataclass(slots=True)
class GlobalOptions:
    config_path: Optional[Path] = None
    base_url: Optional[str] = None
    verbosity: Optional[str] = None


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config TOML"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Compiler Explorer instance (default https://godbolt.org)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings"),
) -> None:
    """Query and drive a Compiler Explorer instance."""

    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    verbosity = "verbose" if verbose else "quiet" if quiet else None
    ctx.obj = GlobalOptions(config_path=config_path, base_url=base_url, verbosity=verbosity)


def _state(ctx: typer.Context) -> AppState:
    options: GlobalOptions = ctx.obj or GlobalOptions()
    state = build_state(options.config_path, base_url=options.base_url, verbosity=options.verbosity)
    console.no_color = not state.config.output.color
    return state


@contextmanager
def _service_errors() -> Iterator[None]:
    try:
        yield
    except CompilerExplorerError as exc:
        err_console.print(f"[red]Error: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _print_json(payload: object) -> None:
    console.print(JSON.from_data(json.loads(to_json(payload))))


@app.command("list-languages")
def list_languages(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Emit JSON instead of a table"),
) -> None:
    """List the languages supported by the service."""

    state = _state(ctx)
    with _service_errors(), state.client:
        languages = state.client.languages()

    if json_output:
        _print_json(languages)
    else:
        render_languages(console, languages)


@app.command("list-compilers")
def list_compilers(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Case-insensitive substring of the compiler name"),
    language: Optional[str] = typer.Option(None, "--language", help="Language id, case-insensitive (e.g. c++)"),
    instruction_set: Optional[str] = typer.Option(None, "--instruction-set", help="Exact instruction set (e.g. amd64)"),
    version_min: Optional[str] = typer.Option(None, "--version-min", help="Lowest version to keep (inclusive)"),
    version_max: Optional[str] = typer.Option(None, "--version-max", help="Highest version to keep (inclusive)"),
    regex: bool = typer.Option(False, "--regex", help="Treat --name as a regular expression"),
    all_fields: bool = typer.Option(False, "--all", help="Fetch every compiler field"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON instead of text"),
) -> None:
    """List compilers, optionally narrowed by name, language, ISA and version."""

    query = CompilerQuery(
        name=name,
        language=language,
        instruction_set=instruction_set,
        version_min=version_min,
        version_max=version_max,
        regex=regex,
    )
    _validate_query(query)

    state = _state(ctx)
    with _service_errors(), state.client:
        candidates = state.client.compilers(all_fields=all_fields)
    compilers = find_compilers(candidates, query)

    if json_output:
        _print_json(compilers)
    else:
        render_compilers(console, compilers)


@app.command("compile")
def compile_source(
    ctx: typer.Context,
    source: Optional[str] = typer.Option(None, "--source", help="Source code to compile"),
    source_file: Optional[str] = typer.Option(None, "--source-file", help="File holding the source code (- for stdin)"),
    compiler_id: Optional[str] = typer.Option(None, "--id", help="Compiler id (e.g. g132)"),
    name: Optional[str] = typer.Option(None, "--name", help="Case-insensitive substring of the compiler name"),
    language: Optional[str] = typer.Option(None, "--language", help="Exact language id"),
    instruction_set: Optional[str] = typer.Option(None, "--instruction-set", help="Exact instruction set"),
    version_min: Optional[str] = typer.Option(None, "--version-min", help="Lowest version to use (inclusive)"),
    version_max: Optional[str] = typer.Option(None, "--version-max", help="Highest version to use (inclusive)"),
    regex: bool = typer.Option(False, "--regex", help="Treat --name as a regular expression"),
    flags: Optional[str] = typer.Option(None, "--flags", help="Compiler flags, e.g. --flags=-O2"),
    binary: bool = typer.Option(False, "--binary", help="Link and disassemble the binary"),
    binary_object: bool = typer.Option(False, "--binary-object", help="Disassemble the object file"),
    execute: bool = typer.Option(False, "--execute", help="Run the program after compiling"),
    summary: bool = typer.Option(False, "--summary", help="One pass/fail line per compiler"),
    stdout: Optional[str] = typer.Option(None, "--stdout", help="Write compiler stdout to file (- for stdout)"),
    stderr: Optional[str] = typer.Option(None, "--stderr", help="Write compiler stderr to file (- for stderr)"),
    filters: Optional[List[str]] = typer.Option(
        None, "--filters", "-f", help="Comma separated output filters replacing the defaults"
    ),
) -> None:
    """Compile source with one or more compilers."""

    if (source is None) == (source_file is None):
        raise typer.BadParameter("exactly one of --source or --source-file is required")
    if sum((binary, binary_object, execute)) > 1:
        raise typer.BadParameter("--binary, --binary-object and --execute are mutually exclusive")

    query = CompilerQuery(
        name=name,
        language=language,
        instruction_set=instruction_set,
        version_min=version_min,
        version_max=version_max,
        regex=regex,
    )
    if compiler_id is not None and not query.is_empty():
        raise typer.BadParameter("--id cannot be combined with --name/--language/--instruction-set/--version-*")
    if compiler_id is None and query.is_empty():
        raise typer.BadParameter("select compilers with --id or at least one of --name/--language/--instruction-set/--version-*")
    _validate_query(query)

    source_text = source if source is not None else _read_source(source_file)

    state = _state(ctx)
    if flags is None:
        flags = state.config.compile.flags
    if not filters:
        filters = state.config.compile.filters
    # The mode switches apply on top of an explicit --filters list.
    requested = resolve_filters(filters=filters, binary=binary, binary_object=binary_object, execute=execute)

    failures = 0
    with ExitStack() as sinks, _service_errors(), state.client:
        out_sink = _enter_sink(sinks, stdout, sys.stdout)
        err_sink = _enter_sink(sinks, stderr, sys.stderr)

        compilers: list[CompilerInfo]
        if compiler_id is not None:
            compilers = [state.client.get_compiler(compiler_id)]
        else:
            compilers = find_compilers(state.client.compilers(all_fields=True), query)

        if not compilers:
            console.print("No compiler found")
            raise typer.Exit(code=1)

        reporter = CompileReporter(console, summary=summary, stdout_sink=out_sink, stderr_sink=err_sink)
        for compiler in compilers:
            local = filters_for_compiler(requested, compiler)
            job = build_compile_job(source_text, flags, local, lang=compiler.lang)
            result = state.client.compile(compiler.id, job)
            reporter.report(compiler, result, execution_dropped=requested.execute and not local.execute)
            if not result.succeeded:
                failures += 1

    if failures:
        raise typer.Exit(code=1)


@app.command("shortlink-info")
def shortlink_info(
    ctx: typer.Context,
    link_id: str = typer.Argument(..., help="Short link id (the part after /z/)"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON instead of text"),
) -> None:
    """Show the sessions stored behind a short link."""

    state = _state(ctx)
    with _service_errors(), state.client:
        info = state.client.shortlink_info(link_id)

    if json_output:
        _print_json(info)
    else:
        render_shortlink(console, link_id, info)


def _validate_query(query: CompilerQuery) -> None:
    try:
        query.validate()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _read_source(source_file: str) -> str:
    if source_file == "-":
        return sys.stdin.read()
    try:
        return Path(source_file).read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(f"cannot read source file {source_file}: {exc}") from exc


def _enter_sink(stack: ExitStack, target: Optional[str], stream: TextIO) -> Optional[TextIO]:
    try:
        return stack.enter_context(open_sink(target, stream))
    except OSError as exc:
        raise typer.BadParameter(f"cannot write {target}: {exc}") from exc


def run() -> None:
    app()
