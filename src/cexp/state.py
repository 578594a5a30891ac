"""Shared application state for CLI entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .api import CompilerExplorerClient
from .config import AppConfig, load_config
from .logging import configure_logging


@dataclass(slots=True)
class AppState:
    config: AppConfig
    client: CompilerExplorerClient


def build_state(
    config_path: Optional[Path],
    *,
    base_url: str | None = None,
    verbosity: str | None = None,
) -> AppState:
    """Construct an application state bundle.

    Command-line overrides take precedence over the loaded configuration.
    """

    config = load_config(config_path)
    if base_url:
        config.api.base_url = base_url
    if verbosity:
        config.output.verbosity = verbosity
    configure_logging(config.verbosity)  # type: ignore[arg-type]

    client = CompilerExplorerClient.from_config(config)
    return AppState(config=config, client=client)
