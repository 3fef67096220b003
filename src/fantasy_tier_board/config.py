from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml


class AppConfig(Protocol):
    def __getitem__(self, key: str) -> object: ...


_DEFAULTS: dict[str, object] = {
    "storage": {
        "db_path": "~/.config/ftb/board.db",
        "key": "rankings",
    },
    "source": {
        "url": "https://api.sleeper.app/v1/players/nfl",
        "timeout": 30,
    },
    "cache": {
        "candidates_ttl": 86400,
    },
    "render": {
        "initial_chunk": 100,
        "load_more_chunk": 50,
    },
    "persistence": {
        "debounce_seconds": 1.5,
    },
    "filter": {
        "debounce_seconds": 0.15,
    },
}


@dataclass(frozen=True)
class BoardSettings:
    db_path: Path
    storage_key: str
    source_url: str
    source_timeout: float
    candidates_ttl: int
    initial_chunk: int
    load_more_chunk: int
    save_debounce_seconds: float
    filter_debounce_seconds: float


def create_config(
    yaml_path: str = "tierboard.yaml",
    env_prefix: str = "TIERBOARD",
    defaults: dict[str, object] | None = None,
    *,
    db_path: str | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file.
        env_prefix: Prefix for environment variables.
        defaults: Default configuration values.
        db_path: Override the storage database path.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if db_path is not None:
        layers.insert(0, config_from_dict({"storage": {"db_path": db_path}}))

    return ConfigurationSet(*layers)


def load_board_settings(cfg: AppConfig | None = None) -> BoardSettings:
    if cfg is None:
        cfg = create_config()
    return BoardSettings(
        db_path=Path(str(cfg["storage.db_path"])).expanduser(),
        storage_key=str(cfg["storage.key"]),
        source_url=str(cfg["source.url"]),
        source_timeout=float(str(cfg["source.timeout"])),
        candidates_ttl=int(str(cfg["cache.candidates_ttl"])),
        initial_chunk=int(str(cfg["render.initial_chunk"])),
        load_more_chunk=int(str(cfg["render.load_more_chunk"])),
        save_debounce_seconds=float(str(cfg["persistence.debounce_seconds"])),
        filter_debounce_seconds=float(str(cfg["filter.debounce_seconds"])),
    )
