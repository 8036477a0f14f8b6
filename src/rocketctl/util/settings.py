from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_FLIGHT_DIR = "flights"
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    flight_dir: Path = Path(DEFAULT_FLIGHT_DIR)
    log_level: str = DEFAULT_LOG_LEVEL


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def default_settings_path() -> Path:
    return _repo_root() / "rocketctl.toml"


# ---------------------------------------- #


def _table(data: dict[str, Any], name: str) -> dict[str, Any]:
    table = data.get(name)
    return table if isinstance(table, dict) else {}


def load_settings(path: Path | None = None) -> Settings:
    """
    Read rocketctl.toml. Missing files and wrong-typed values fall back to defaults.

    Relative flight directories are resolved against the settings file's folder.
    """
    if path is None:
        path = default_settings_path()

    try:
        data: Any = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid settings file {path}: {exc}") from exc

    flight_dir = _table(data, "flights").get("dir")
    if not isinstance(flight_dir, str) or not flight_dir:
        flight_dir = DEFAULT_FLIGHT_DIR

    level = _table(data, "logging").get("level")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        level = DEFAULT_LOG_LEVEL

    resolved = Path(flight_dir)
    if not resolved.is_absolute():
        resolved = path.parent / resolved

    return Settings(flight_dir=resolved, log_level=level.upper())
