"""Build compile requests from CLI inputs.

Covers:
- Translating user-facing filter names into a ``Filters`` flag set
- Layering the ``--binary``/``--binary-object``/``--execute`` switches
- Dropping execution for compilers that cannot run code
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..api.models import (
    FILTER_NAMES,
    CompileJob,
    CompileOptions,
    CompilerInfo,
    CompilerOptions,
    Filters,
)

_LOGGER = logging.getLogger(__name__)


def parse_filter_names(names: Iterable[str]) -> tuple[Filters, list[str]]:
    """Enable exactly the named filters.

    Names use the wire spelling (``commentOnly``, ``libraryCode``...) and may
    be given comma separated. Returns the flag set and the names that were
    not recognised.
    """
    enabled: dict[str, bool] = {}
    unknown: list[str] = []
    for chunk in names:
        for name in chunk.split(","):
            name = name.strip()
            if not name:
                continue
            if name in FILTER_NAMES:
                enabled[name] = True
            else:
                _LOGGER.warning("Unknown filter: %s", name)
                unknown.append(name)
    return Filters.model_validate(enabled), unknown


def resolve_filters(
    base: Filters | None = None,
    filters: Iterable[str] | None = None,
    *,
    binary: bool = False,
    binary_object: bool = False,
    execute: bool = False,
) -> Filters:
    """Combine the starting filter set with the output mode switches.

    An explicit ``filters`` list replaces ``base`` entirely; the switches are
    applied on top of whichever set results.
    """
    resolved = base if base is not None else Filters.default()
    if filters is not None:
        resolved, _ = parse_filter_names(filters)

    updates: dict[str, bool] = {}
    if binary:
        updates["binary"] = True
    if binary_object:
        updates["binary_object"] = True
    if execute:
        updates["execute"] = True
    return resolved.model_copy(update=updates) if updates else resolved


def filters_for_compiler(filters: Filters, compiler: CompilerInfo) -> Filters:
    """Return ``filters`` with execution switched off if ``compiler`` can't run code."""
    if filters.execute and not compiler.can_execute:
        _LOGGER.info("Execution not supported by %s; compiling only", compiler.id)
        return filters.model_copy(update={"execute": False})
    return filters


def build_compile_job(source: str, flags: str, filters: Filters, lang: str | None = None) -> CompileJob:
    """Assemble the request payload for a single compilation."""
    return CompileJob(
        source=source,
        options=CompileOptions(
            user_arguments=flags,
            compiler_options=CompilerOptions(skip_asm=False, executor_request=False),
            filters=filters.model_copy(),
            tools=[],
            libraries=[],
        ),
        lang=lang,
        allow_store_code_debug=True,
    )
