"""Configuration loading from environment variables and minidoc.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "minidoc.toml"


@dataclass
class StoreConfig:
    """Top-level minidoc configuration."""

    persistence_file: Path | None = None
    log_level: str = "INFO"


def _to_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def load_config(config_path: Path | None = None) -> StoreConfig:
    """Load configuration from environment variables and optional minidoc.toml.

    Priority: environment variables > minidoc.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.minidoc/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".minidoc" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    store_data = file_data.get("store", {})

    return StoreConfig(
        persistence_file=_to_path(
            os.getenv("MINIDOC_PERSISTENCE_FILE", store_data.get("persistence_file"))
        ),
        log_level=os.getenv("MINIDOC_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
