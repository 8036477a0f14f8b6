from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from rocketctl.util.names import is_invalid_name

logger = logging.getLogger(__name__)

FLIGHT_LOG_SUFFIX = ".csv"


def _created_time(path: Path) -> float:
    try:
        st = path.stat()
    except OSError:
        return time.time()
    return getattr(st, "st_birthtime", st.st_ctime)


# ---------------------------------------- #


def list_flight_logs(directory: str | os.PathLike[str]) -> list[str]:
    """
    Return the names of the recorded flights in a directory, newest first.

    A flight is a .csv file; its name is the file stem.
    """
    root = Path(directory)
    entries = sorted(root.iterdir(), key=_created_time, reverse=True)

    names = [
        p.stem
        for p in entries
        if p.is_file() and p.suffix == FLIGHT_LOG_SUFFIX
    ]
    logger.debug("Found %d flight logs in %s", len(names), root)
    return names


# ---------------------------------------- #


def flight_log_path(directory: str | os.PathLike[str], name: str) -> Path:
    if is_invalid_name(name):
        raise ValueError(f"invalid flight name {name!r}")
    return Path(directory) / f"{name}{FLIGHT_LOG_SUFFIX}"
