"""
JSON persistence for simulation configs and simulated series.

Config documents are migrated to the current schema on load, so older files
naming the drag term "finCd" load into the same SimulationConfig.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from rocketctl.model.types import SimulationConfig, SimulationSeries

logger = logging.getLogger(__name__)


def _read_json_object(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _write_json_object(path: Path, data: dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


# ---------------------------------------- #


def load_simulation_config(path: str | os.PathLike[str]) -> SimulationConfig:
    path = Path(path)
    logger.info(f"Loading simulation config from: {path}")
    data = _read_json_object(path)
    try:
        return SimulationConfig.from_dict(data)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc


def save_simulation_config(path: str | os.PathLike[str], config: SimulationConfig) -> None:
    path = Path(path)
    logger.info(f"Saving simulation config to: {path}")
    _write_json_object(path, config.to_dict())


# ---------------------------------------- #


def load_simulation_series(path: str | os.PathLike[str]) -> SimulationSeries:
    path = Path(path)
    logger.info(f"Loading simulation series from: {path}")
    data = _read_json_object(path)
    try:
        return SimulationSeries.from_dict(data)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc


def save_simulation_series(path: str | os.PathLike[str], series: SimulationSeries) -> None:
    path = Path(path)
    logger.info(f"Saving simulation series ({len(series)} samples) to: {path}")
    _write_json_object(path, series.to_dict())
