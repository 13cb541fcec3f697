"""Runtime settings loaded from ``config/duafinder.yml`` and the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_PATH = BASE_DIR / "config" / "duafinder.yml"
ENV_PREFIX = "DUAFINDER_"

_ENV_LOADED = False


@dataclass(frozen=True)
class Settings:
    db_path: Path = BASE_DIR / "data" / "duas.duckdb"
    catalog_table: str = "dua_master"
    cache_ttl_seconds: float = 30.0
    session_ttl_seconds: float = 15 * 60.0
    search_limit: int = 3
    watch_interval_seconds: float = 2.0

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping at the top level")
        return cls().merge(data.get("duafinder", data))

    def merge(self, overrides: Dict[str, Any]) -> "Settings":
        changes: Dict[str, Any] = {}
        for f in fields(self):
            if f.name not in overrides or overrides[f.name] is None:
                continue
            changes[f.name] = _coerce_field(f.name, overrides[f.name])
        return replace(self, **changes) if changes else self


def _coerce_field(name: str, value: Any) -> Any:
    if name == "db_path":
        path = Path(str(value)).expanduser()
        return path if path.is_absolute() else BASE_DIR / path
    if name == "catalog_table":
        return str(value)
    if name == "search_limit":
        return int(value)
    return float(value)


def _load_env_once() -> None:
    """Populate os.environ from a local .env file if available."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return

    env_paths = [BASE_DIR / ".env"]
    cwd_path = Path.cwd() / ".env"
    if cwd_path not in env_paths:
        env_paths.append(cwd_path)

    for env_path in env_paths:
        if not env_path.exists():
            continue
        try:
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            logger.debug("Unable to read .env file at %s", env_path)

    _ENV_LOADED = True


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for f in fields(Settings):
        raw = os.getenv(ENV_PREFIX + f.name.upper())
        if raw is not None and raw.strip():
            overrides[f.name] = raw.strip()
    return overrides


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read the YAML config (if present) and apply ``DUAFINDER_*`` overrides."""
    _load_env_once()
    config_path = path or Path(os.getenv(ENV_PREFIX + "CONFIG", str(CONFIG_PATH)))
    if config_path.exists():
        settings = Settings.from_yaml(config_path)
    else:
        logger.debug("No config file at %s; using defaults", config_path)
        settings = Settings()
    return settings.merge(_env_overrides())
