"""Compile request assembly."""

from .job import (
    build_compile_job,
    filters_for_compiler,
    parse_filter_names,
    resolve_filters,
)

__all__ = [
    "build_compile_job",
    "filters_for_compiler",
    "parse_filter_names",
    "resolve_filters",
]
