"""Configuration loading and modelling."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from . import __version__

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "default_config.toml"
USER_CONFIG_PATH = Path("~/.config/cexp/config.toml").expanduser()

DEFAULT_BASE_URL = "https://godbolt.org"


class ApiSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=60.0, gt=0)
    user_agent: str = f"cexp/{__version__}"


class OutputSettings(BaseModel):
    verbosity: str = "normal"
    color: bool = True


class CompileSettings(BaseModel):
    flags: str = ""
    # None keeps the service-side default filter set.
    filters: list[str] | None = None


class AppConfig(BaseModel):
    api: ApiSettings = Field(default_factory=ApiSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    compile: CompileSettings = Field(default_factory=CompileSettings)
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def verbosity(self) -> str:
        return self.output.verbosity


def _load_toml(path: Path) -> dict[str, Any]:
    import tomllib

    with path.open("rb") as fh:
        return tomllib.load(fh)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from defaults and optional user overrides."""

    load_dotenv()

    data: dict[str, Any] = {}
    if DEFAULT_CONFIG_PATH.exists():
        data = _merge(data, _load_toml(DEFAULT_CONFIG_PATH))

    resolved_path = config_path
    if resolved_path is None and USER_CONFIG_PATH.exists():
        resolved_path = USER_CONFIG_PATH

    if resolved_path and resolved_path.exists():
        data = _merge(data, _load_toml(resolved_path))

    config = AppConfig(raw=data)

    # Re-bind nested models from merged dict to capture overrides.
    if "api" in data:
        config.api = ApiSettings.model_validate(data["api"])
    if "output" in data:
        config.output = OutputSettings.model_validate(data["output"])
    if "compile" in data:
        config.compile = CompileSettings.model_validate(data["compile"])

    # Environment wins over files so CI jobs can point at a private instance.
    env_base_url = os.getenv("CEXP_BASE_URL")
    if env_base_url:
        config.api.base_url = env_base_url

    env_timeout = os.getenv("CEXP_TIMEOUT")
    if env_timeout:
        config.api = ApiSettings.model_validate({**config.api.model_dump(), "timeout": env_timeout})

    return config
