"""Error taxonomy for Compiler Explorer API calls."""

from __future__ import annotations


class CompilerExplorerError(RuntimeError):
    """Base class for every failure raised by the API client."""


class TransportError(CompilerExplorerError):
    """The request could not be completed or the service returned an HTTP error."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(CompilerExplorerError):
    """The response body was not JSON or did not match the expected records."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class CompilerNotFound(CompilerExplorerError, LookupError):
    """No compiler matches the requested id."""

    def __init__(self, compiler_id: str) -> None:
        super().__init__(f"No compiler with id {compiler_id!r}")
        self.compiler_id = compiler_id


__all__ = ["CompilerExplorerError", "CompilerNotFound", "DecodeError", "TransportError"]
