"""Thin wrapper around the Compiler Explorer REST API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..config import AppConfig, DEFAULT_BASE_URL
from .errors import CompilerNotFound, DecodeError, TransportError
from .models import CompileJob, CompileResult, CompilerInfo, Language, ShortLinkInfo

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_LANGUAGES = TypeAdapter(list[Language])
_COMPILERS = TypeAdapter(list[CompilerInfo])


class CompilerExplorerClient:
    """Blocking client for the five Compiler Explorer endpoints used by the CLI."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 60.0,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if user_agent:
            self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, config: AppConfig, session: requests.Session | None = None) -> CompilerExplorerClient:
        return cls(
            config.api.base_url,
            timeout=config.api.timeout,
            user_agent=config.api.user_agent,
            session=session,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> CompilerExplorerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def languages(self) -> list[Language]:
        """List every language known to the service."""
        return self._get_json("/api/languages", _LANGUAGES)

    def compilers(self, all_fields: bool = False) -> list[CompilerInfo]:
        """List every compiler; ``all_fields`` asks for the full descriptor."""
        params = {"fields": "all"} if all_fields else None
        return self._get_json("/api/compilers", _COMPILERS, params=params)

    def compiler_detail(self, ident: str, all_fields: bool = False) -> list[CompilerInfo]:
        """Fetch ``/api/compilers/{ident}``.

        The service answers this route with the compilers registered for
        the language ``ident``, so the result is always a list.
        """
        params = {"fields": "all"} if all_fields else None
        return self._get_json(f"/api/compilers/{_segment(ident)}", _COMPILERS, params=params)

    def shortlink_info(self, link_id: str) -> ShortLinkInfo:
        """Resolve a short link into the sessions it stores."""
        return self._get_json(f"/api/shortlinkinfo/{_segment(link_id)}", ShortLinkInfo)

    def compile(self, compiler_id: str, job: CompileJob) -> CompileResult:
        """Submit ``job`` to the compiler ``compiler_id``."""
        path = f"/api/compiler/{_segment(compiler_id)}/compile"
        payload = job.to_payload()
        _LOGGER.debug(
            "Compiling with %s (flags=%r, filters=%s)",
            compiler_id,
            job.options.user_arguments,
            ",".join(job.options.filters.enabled()) or "-",
        )
        data = self._request("POST", path, json=payload)
        return _decode(data, CompileResult, self._url(path))

    def get_compiler(self, compiler_id: str) -> CompilerInfo:
        """Return the full descriptor of ``compiler_id``.

        Raises:
            CompilerNotFound: no compiler carries that id.
        """
        for compiler in self.compilers(all_fields=True):
            if compiler.id == compiler_id:
                return compiler
        raise CompilerNotFound(compiler_id)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _get_json(self, path: str, model: Any, *, params: dict[str, str] | None = None) -> Any:
        data = self._request("GET", path, params=params)
        return _decode(data, model, self._url(path))

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        _LOGGER.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"{method} {url} failed with HTTP {status}", url=url, status_code=status) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON in response from {url}: {exc}", url=url) from exc


def _segment(value: str) -> str:
    return quote(value, safe="")


def _decode(data: Any, model: type[T] | TypeAdapter[T], url: str) -> T:
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(data)
        if isinstance(model, type) and issubclass(model, BaseModel):
            return model.model_validate(data)  # type: ignore[return-value]
        raise TypeError(f"Unsupported model {model!r}")
    except ValidationError as exc:
        raise DecodeError(f"Unexpected response shape from {url}: {exc.error_count()} error(s)", url=url) from exc


__all__ = ["CompilerExplorerClient"]
