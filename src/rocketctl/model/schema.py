from __future__ import annotations

from typing import Any, Final

# Version 1 documents carry no "schema" key and may name the control-surface drag
# term either "canardCd" or "finCd". Version 2 always writes "canardCd".
SCHEMA_KEY: Final[str] = "schema"
SCHEMA_VERSION: Final[int] = 2

CONTROL_CD_KEY: Final[str] = "canardCd"
LEGACY_CONTROL_CD_KEYS: Final[tuple[str, ...]] = ("finCd",)


# ---------------------------------------- #


def schema_version(data: dict[str, Any]) -> int:
    version = data.get(SCHEMA_KEY, 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise ValueError(f"{SCHEMA_KEY} must be an integer")
    if version < 1 or version > SCHEMA_VERSION:
        raise ValueError(f"unsupported {SCHEMA_KEY} version {version}")
    return version


# ---------------------------------------- #


def migrate_config_dict(data: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of a simulation config document in the current schema.

    The control-surface drag coefficient is folded into "canardCd" whichever
    name it was stored under. Conflicting values are rejected.
    """
    schema_version(data)
    out = dict(data)
    out[SCHEMA_KEY] = SCHEMA_VERSION

    for legacy in LEGACY_CONTROL_CD_KEYS:
        if legacy not in out:
            continue
        value = out.pop(legacy)
        if CONTROL_CD_KEY in out and out[CONTROL_CD_KEY] != value:
            raise ValueError(
                f"conflicting drag terms: {CONTROL_CD_KEY}={out[CONTROL_CD_KEY]!r}, "
                f"{legacy}={value!r}"
            )
        out[CONTROL_CD_KEY] = value

    return out
