"""Terminal rendering for listings and compile results."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .api.models import CompileResult, CompilerInfo, Language, ShortLinkInfo

PASS_MARK = "[green]✔[/green]"
FAIL_MARK = "[red]✗[/red]"


def _mark(ok: bool) -> str:
    return PASS_MARK if ok else FAIL_MARK


@contextmanager
def open_sink(target: str | None, stream: TextIO) -> Iterator[TextIO | None]:
    """Yield where captured output should go.

    ``None`` disables the sink, ``-`` selects ``stream``, anything else is a
    file path truncated for the duration of the run.
    """
    if target is None:
        yield None
    elif target == "-":
        yield stream
    else:
        with Path(target).open("w", encoding="utf-8") as fh:
            yield fh


def _write(sink: TextIO | None, text: str) -> None:
    if sink is None or not text:
        return
    sink.write(text if text.endswith("\n") else text + "\n")
    sink.flush()


class CompileReporter:
    """Print one block (or one line in summary mode) per compiled result."""

    def __init__(
        self,
        console: Console,
        *,
        summary: bool = False,
        stdout_sink: TextIO | None = None,
        stderr_sink: TextIO | None = None,
    ) -> None:
        self._console = console
        self._summary = summary
        self._stdout_sink = stdout_sink
        self._stderr_sink = stderr_sink

    def report(self, compiler: CompilerInfo, result: CompileResult, *, execution_dropped: bool = False) -> None:
        _write(self._stdout_sink, result.stdout_text)
        _write(self._stderr_sink, result.stderr_text)

        name = escape(compiler.name)
        if self._summary:
            self._line(f'{_mark(result.succeeded)} Compilation "{name}" ({result.code})')
        else:
            self._console.out(result.asm_text, highlight=False)

        if execution_dropped:
            if self._summary:
                self._line(f'{FAIL_MARK} Execution not supported for "{name}".')
            else:
                self._console.out("Execution not supported\n", highlight=False)

        exec_result = result.exec_result
        if exec_result is not None:
            if self._summary:
                self._line(f'{_mark(exec_result.succeeded)} Execution "{name}" ({exec_result.code})')
            else:
                self._console.out(f"Execution:\n{exec_result.stdout_text}", highlight=False)

    def _line(self, markup: str) -> None:
        self._console.print(markup, soft_wrap=True, highlight=False)


def render_languages(console: Console, languages: Iterable[Language]) -> None:
    table = Table(title="Languages")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Extensions")
    table.add_column("Default compiler")
    for language in languages:
        table.add_row(
            escape(language.id),
            escape(language.name),
            escape(", ".join(language.extensions)),
            escape(language.default_compiler or "-"),
        )
    console.print(table)


def render_compilers(console: Console, compilers: list[CompilerInfo]) -> None:
    if not compilers:
        console.print("No compiler found")
        return
    for compiler in compilers:
        console.out(f"- {compiler.to_text()}", highlight=False)


def render_shortlink(console: Console, link_id: str, info: ShortLinkInfo) -> None:
    console.rule(f"Short link: {escape(link_id)}")
    if not info.sessions:
        console.print("[yellow]No sessions stored for this link")
        return
    for session in info.sessions:
        console.print(f"[cyan]Session {session.id}[/cyan] ({escape(session.language)})")
        for config in session.compilers:
            filters = ",".join(config.filters.enabled()) or "-"
            console.out(f"  compiler: {config.id}  options: {config.options or '-'}  filters: {filters}", highlight=False)
        if session.source:
            console.out(session.source, highlight=False)
