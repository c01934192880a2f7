"""Runtime configuration for a migration run."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_NAME = "config.json"

REQUIRED_KEYS = ("graphql_url", "graphql_api_key", "plex_csv")


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or incomplete."""


@dataclass(frozen=True)
class MigrationConfig:
    """Settings read from ``config.json``.

    Input paths are resolved against the directory holding the config file.
    ``STASH_GRAPHQL_URL`` and ``STASH_API_KEY`` override the file values.
    """

    graphql_url: str
    graphql_api_key: str
    plex_csv: Path
    stash_json: Path | None = None

    @classmethod
    def from_file(cls, path: Path) -> "MigrationConfig":
        if not path.exists():
            raise ConfigError(f"Missing {path.name}. Expected it at {path}")

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"{path} must contain a JSON object")

        raw = dict(raw)
        raw["graphql_url"] = os.getenv("STASH_GRAPHQL_URL") or raw.get("graphql_url")
        raw["graphql_api_key"] = os.getenv("STASH_API_KEY") or raw.get("graphql_api_key")

        missing = [key for key in REQUIRED_KEYS if not raw.get(key)]
        if missing:
            raise ConfigError(f"{path} is missing required keys: {', '.join(missing)}")

        base = path.resolve().parent
        stash_json = raw.get("stash_json")
        return cls(
            graphql_url=str(raw["graphql_url"]),
            graphql_api_key=str(raw["graphql_api_key"]),
            plex_csv=base / str(raw["plex_csv"]),
            stash_json=base / str(stash_json) if stash_json else None,
        )
