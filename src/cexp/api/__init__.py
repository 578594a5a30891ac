"""Compiler Explorer API client and records."""

from .client import CompilerExplorerClient
from .errors import CompilerExplorerError, CompilerNotFound, DecodeError, TransportError
from .models import (
    CompileJob,
    CompileResult,
    CompilerInfo,
    ExecutionResult,
    Filters,
    FILTER_NAMES,
    Language,
    ShortLinkInfo,
)

__all__ = [
    "CompilerExplorerClient",
    "CompilerExplorerError",
    "CompilerNotFound",
    "DecodeError",
    "TransportError",
    "CompileJob",
    "CompileResult",
    "CompilerInfo",
    "ExecutionResult",
    "Filters",
    "FILTER_NAMES",
    "Language",
    "ShortLinkInfo",
]
