"""Pydantic models mirroring the Compiler Explorer JSON API.

This module defines:
- Language and compiler descriptors returned by the listing endpoints
- The output filter flag set and the compile request payload
- Compile, execution and build results returned by the compile endpoint
- Short-link session information

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CEModel(BaseModel):
    """Base model mapping snake_case attributes onto camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Languages and compilers
# ---------------------------------------------------------------------------


class Language(CEModel):
    id: str
    name: str
    monaco: str = ""
    extensions: list[str] = Field(default_factory=list)
    alias: list[str] | None = None
    formatter: str | None = None
    supports_execute: bool | None = None
    logo_url: str | None = None
    logo_url_dark: str | None = None
    example: str | None = None
    preview_filter: str | None = None
    monaco_disassembly: str | None = None
    tooltip: str | None = None
    default_compiler: str | None = None


class CompilerInfo(CEModel):
    """A compiler as listed by ``/api/compilers``.

    The six identifying fields are always present; the rest only come back
    when the listing is requested with ``fields=all``.
    """

    id: str
    name: str
    lang: str
    compiler_type: str = ""
    semver: str = ""
    instruction_set: str = ""

    version: str | None = None
    full_version: str | None = None
    base_name: str | None = None
    alias: list[str] | None = None
    options: str | None = None
    group: str | None = None
    group_name: str | None = None
    compiler_categories: list[str] | None = None
    notification: str | None = None
    supports_execute: bool | None = None
    supports_binary: bool | None = None
    supports_binary_object: bool | None = None
    supports_intel: bool | None = None
    supports_demangle: bool | None = None
    supports_library_code_filter: bool | None = None
    disabled_filters: list[str] | None = None
    is_semver: bool | None = None
    is_nightly: bool | None = None
    hidden: bool | None = None

    @field_validator("compiler_type", "semver", "instruction_set", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        # The service sends null for compilers without a known ISA or version.
        if v is None:
            return ""
        return v

    @property
    def can_execute(self) -> bool:
        return bool(self.supports_execute)

    def to_text(self) -> str:
        return (
            f'"{self.name}", id: {self.id}, language: {self.lang}, type: {self.compiler_type}, '
            f"version: {self.semver}, ISA: {self.instruction_set}"
        )


# ---------------------------------------------------------------------------
# Compile request
# ---------------------------------------------------------------------------

FILTER_NAMES: tuple[str, ...] = (
    "binary",
    "binaryObject",
    "commentOnly",
    "demangle",
    "directives",
    "execute",
    "intel",
    "labels",
    "libraryCode",
    "trim",
    "debugCalls",
)


class Filters(CEModel):
    """Output filters applied by the service to the compiler output."""

    binary: bool = False
    binary_object: bool = False
    comment_only: bool = False
    demangle: bool = False
    directives: bool = False
    execute: bool = False
    intel: bool = False
    labels: bool = False
    library_code: bool = False
    trim: bool = False
    debug_calls: bool = False

    @classmethod
    def none(cls) -> Filters:
        return cls()

    @classmethod
    def default(cls) -> Filters:
        """The filter set the web UI starts with."""
        return cls(
            comment_only=True,
            demangle=True,
            directives=True,
            intel=True,
            labels=True,
            library_code=True,
            debug_calls=True,
        )

    def enabled(self) -> list[str]:
        """Wire names of the filters switched on."""
        dumped = self.model_dump(by_alias=True)
        return [name for name in FILTER_NAMES if dumped[name]]


class CompilerOptions(CEModel):
    skip_asm: bool = False
    executor_request: bool = False


class CompileOptions(CEModel):
    user_arguments: str = ""
    compiler_options: CompilerOptions = Field(default_factory=CompilerOptions)
    filters: Filters = Field(default_factory=Filters.default)
    tools: list[dict[str, Any]] = Field(default_factory=list)
    libraries: list[dict[str, Any]] = Field(default_factory=list)


class CompileJob(CEModel):
    source: str
    options: CompileOptions = Field(default_factory=CompileOptions)
    lang: str | None = None
    allow_store_code_debug: bool = True

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by ``/api/compiler/{id}/compile``."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Compile results
# ---------------------------------------------------------------------------


class Tag(CEModel):
    line: int | None = None
    column: int | None = None
    text: str = ""
    severity: int | None = None
    file: str | None = None


class OutputLine(CEModel):
    text: str = ""
    tag: Tag | None = None


class SourceLocation(CEModel):
    file: str | None = None
    line: int | None = None


class AsmLine(CEModel):
    text: str = ""
    source: SourceLocation | None = None
    labels: list[dict[str, Any]] = Field(default_factory=list)


class PopularArgument(CEModel):
    description: str = ""
    timesused: int = 0


def output_text(lines: Iterable[OutputLine | AsmLine]) -> str:
    """Join the text of each output line with newlines."""
    return "\n".join(line.text for line in lines)


class ExecBuildResult(CEModel):
    code: int = 0
    input_filename: str | None = None
    executable_filename: str | None = None
    ok_to_cache: bool | None = None
    timed_out: bool = False
    truncated: bool | None = None
    stdout: list[OutputLine] = Field(default_factory=list)
    stderr: list[OutputLine] = Field(default_factory=list)
    exec_time: str | float | None = None
    compilation_options: list[str] = Field(default_factory=list)


class ExecutionResult(CEModel):
    code: int
    did_execute: bool = False
    timed_out: bool = False
    ok_to_cache: bool | None = None
    truncated: bool | None = None
    stdout: list[OutputLine] = Field(default_factory=list)
    stderr: list[OutputLine] = Field(default_factory=list)
    exec_time: str | float | None = None
    build_result: ExecBuildResult | None = None

    @property
    def stdout_text(self) -> str:
        return output_text(self.stdout)

    @property
    def stderr_text(self) -> str:
        return output_text(self.stderr)

    @property
    def succeeded(self) -> bool:
        return self.code == 0


class CompileResult(CEModel):
    code: int
    timed_out: bool = False
    input_filename: str | None = None
    ok_to_cache: bool | None = None
    truncated: bool | None = None
    stdout: list[OutputLine] = Field(default_factory=list)
    stderr: list[OutputLine] = Field(default_factory=list)
    asm: list[AsmLine] = Field(default_factory=list)
    exec_time: str | float | None = None
    parsing_time: str | float | None = None
    compilation_options: list[str] = Field(default_factory=list)
    label_definitions: dict[str, int] = Field(default_factory=dict)
    filtered_count: int | None = None
    popular_arguments: dict[str, PopularArgument] | None = None
    exec_result: ExecutionResult | None = None

    @property
    def stdout_text(self) -> str:
        return output_text(self.stdout)

    @property
    def stderr_text(self) -> str:
        return output_text(self.stderr)

    @property
    def asm_text(self) -> str:
        return output_text(self.asm)

    @property
    def succeeded(self) -> bool:
        return self.code == 0


# ---------------------------------------------------------------------------
# Short links
# ---------------------------------------------------------------------------


class CompilerConfig(CEModel):
    internal_id: int | None = Field(default=None, alias="_internalid")
    id: str
    options: str = ""
    filters: Filters = Field(default_factory=Filters)
    libs: list[dict[str, Any]] = Field(default_factory=list)
    specialoutputs: list[Any] = Field(default_factory=list)
    tools: list[dict[str, Any]] = Field(default_factory=list)


class Session(CEModel):
    id: int
    language: str
    source: str = ""
    conformanceview: bool | dict[str, Any] = False
    compilers: list[CompilerConfig] = Field(default_factory=list)
    executors: list[dict[str, Any]] = Field(default_factory=list)


class ShortLinkInfo(CEModel):
    sessions: list[Session] = Field(default_factory=list)
    trees: list[dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "AsmLine",
    "CompileJob",
    "CompileOptions",
    "CompileResult",
    "CompilerConfig",
    "CompilerInfo",
    "CompilerOptions",
    "ExecBuildResult",
    "ExecutionResult",
    "FILTER_NAMES",
    "Filters",
    "Language",
    "OutputLine",
    "PopularArgument",
    "Session",
    "ShortLinkInfo",
    "SourceLocation",
    "Tag",
    "output_text",
]
