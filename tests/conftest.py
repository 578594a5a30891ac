"""Shared pytest fixtures for cexp tests."""

from __future__ import annotations

import copy
from typing import Any, Callable
from urllib.parse import urlsplit

import pytest
import requests

from cexp.api import CompilerExplorerClient
from cexp.api.models import CompilerInfo

BASE_URL = "https://ce.test"


# ============================================================================
# Fake HTTP layer
# ============================================================================

class FakeResponse:
    """Stand-in for ``requests.Response`` carrying a canned JSON body."""

    def __init__(self, payload: Any = None, status_code: int = 200, body: str | None = None):
        self.payload = payload
        self.status_code = status_code
        self.body = body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self.body is not None:
            raise requests.JSONDecodeError("Expecting value", self.body, 0)
        return copy.deepcopy(self.payload)


Route = FakeResponse | Callable[[dict[str, Any]], FakeResponse]


class FakeSession:
    """Route ``(method, path)`` pairs to canned responses and record every call."""

    def __init__(self, routes: dict[tuple[str, str], Route] | None = None):
        self.routes: dict[tuple[str, str], Route] = dict(routes or {})
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = urlsplit(url).path
        call = {"method": method, "url": url, "path": path, **kwargs}
        self.calls.append(call)
        route = self.routes.get((method, path))
        if route is None:
            raise requests.ConnectionError(f"no route for {method} {path}")
        return route(call) if callable(route) else route

    def close(self) -> None:
        self.closed = True


# ============================================================================
# Payload Fixtures
# ============================================================================

def _compiler(cid: str, name: str, lang: str, semver: str | None, isa: str | None, **extra: Any) -> dict[str, Any]:
    return {
        "id": cid,
        "name": name,
        "lang": lang,
        "compilerType": extra.pop("compilerType", "gcc" if "gcc" in name else "clang"),
        "semver": semver,
        "instructionSet": isa,
        **extra,
    }


@pytest.fixture
def compilers_payload() -> list[dict[str, Any]]:
    """Return a small /api/compilers?fields=all listing."""
    return [
        _compiler("g132", "x86-64 gcc 13.2", "c++", "13.2", "amd64", supportsExecute=True, supportsBinary=True),
        _compiler("g122", "x86-64 gcc 12.2", "c++", "12.2", "amd64", supportsExecute=True),
        _compiler("g95", "x86-64 gcc 9.5", "c++", "9.5", "amd64", supportsExecute=True),
        _compiler("gsnapshot", "x86-64 gcc (trunk)", "c++", "(trunk)", "amd64", supportsExecute=True),
        _compiler("armg132", "ARM64 gcc 13.2", "c++", "13.2", "aarch64", supportsExecute=False),
        _compiler("clang1701", "x86-64 clang 17.0.1", "c++", "17.0.1", "amd64", supportsExecute=True),
        _compiler("cg132", "x86-64 gcc 13.2", "c", "13.2", "amd64", supportsExecute=True),
        _compiler("r1750", "rustc 1.75.0", "rust", "1.75.0", "amd64", compilerType="rustc", supportsExecute=True),
        _compiler("vcpp_v19_latest_x64", "x64 msvc v19.latest", "c++", None, None, compilerType="win32-vc"),
    ]


@pytest.fixture
def compilers(compilers_payload: list[dict[str, Any]]) -> list[CompilerInfo]:
    """Return the listing as parsed records."""
    return [CompilerInfo.model_validate(item) for item in compilers_payload]


@pytest.fixture
def languages_payload() -> list[dict[str, Any]]:
    """Return a small /api/languages listing."""
    return [
        {
            "id": "c++",
            "name": "C++",
            "monaco": "cppp",
            "extensions": [".cpp", ".cxx", ".h"],
            "alias": ["gcc", "cpp"],
            "defaultCompiler": "g132",
            "supportsExecute": True,
            "logoUrl": "c++.svg",
        },
        {
            "id": "rust",
            "name": "Rust",
            "monaco": "rust",
            "extensions": [".rs"],
            "defaultCompiler": "r1750",
        },
    ]


@pytest.fixture
def compile_payload() -> dict[str, Any]:
    """Return a successful compile response without execution."""
    return {
        "inputFilename": "/app/example.cpp",
        "code": 0,
        "okToCache": True,
        "timedOut": False,
        "stdout": [{"text": "note: compiled"}],
        "stderr": [
            {
                "text": "<source>:1:5: warning: unused variable 'y'",
                "tag": {"line": 1, "column": 5, "text": "unused variable 'y'", "severity": 1, "file": "<source>"},
            }
        ],
        "truncated": False,
        "execTime": "38",
        "processExecutionResultTime": 0.7,
        "compilationOptions": ["-g", "-o", "/app/output.s", "-S"],
        "downloads": [],
        "tools": [],
        "asm": [
            {"text": "square(int):", "source": None, "labels": []},
            {"text": "        mov     eax, DWORD PTR [rbp-4]", "source": {"file": None, "line": 1}, "labels": []},
            {"text": "        imul    eax, eax", "source": {"file": None, "line": 1}, "labels": []},
            {"text": "        ret", "source": {"file": None, "line": 1}, "labels": []},
        ],
        "labelDefinitions": {"square(int)": 1},
        "parsingTime": "0",
        "filteredCount": 17,
        "popularArguments": {"-O3": {"description": "Optimize more", "timesused": 12}},
    }


@pytest.fixture
def execute_payload(compile_payload: dict[str, Any]) -> dict[str, Any]:
    """Return a compile response carrying an execution result."""
    payload = copy.deepcopy(compile_payload)
    payload["execResult"] = {
        "code": 3,
        "okToCache": True,
        "timedOut": False,
        "stdout": [{"text": "Hello, world!"}],
        "stderr": [],
        "truncated": False,
        "execTime": "2",
        "didExecute": True,
        "buildResult": {
            "inputFilename": "/app/example.cpp",
            "code": 0,
            "okToCache": True,
            "timedOut": False,
            "stdout": [],
            "stderr": [],
            "truncated": False,
            "execTime": "120",
            "processExecutionResultTime": 0.2,
            "downloads": [],
            "executableFilename": "/app/output.s",
            "compilationOptions": ["-o", "/app/output.s"],
        },
    }
    return payload


@pytest.fixture
def shortlink_payload() -> dict[str, Any]:
    """Return a /api/shortlinkinfo response with one session."""
    return {
        "sessions": [
            {
                "id": 1,
                "language": "c++",
                "source": "int main() { return 0; }",
                "conformanceview": False,
                "compilers": [
                    {
                        "_internalid": 1,
                        "id": "g132",
                        "options": "-O2",
                        "filters": {"binary": False, "intel": True, "labels": True, "directives": True},
                        "libs": [],
                        "specialoutputs": [],
                        "tools": [],
                    }
                ],
                "executors": [],
            }
        ],
        "trees": [],
    }


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest.fixture
def fake_session() -> FakeSession:
    """Return an empty fake session; tests register their own routes."""
    return FakeSession()


@pytest.fixture
def client(fake_session: FakeSession) -> CompilerExplorerClient:
    """Return a client talking to the fake session."""
    return CompilerExplorerClient(BASE_URL, timeout=5.0, user_agent="cexp-tests", session=fake_session)


@pytest.fixture
def response_factory() -> type[FakeResponse]:
    """Return the fake response class for building routes."""
    return FakeResponse


@pytest.fixture
def session_factory() -> type[FakeSession]:
    """Return the fake session class for tests that build their own client."""
    return FakeSession
