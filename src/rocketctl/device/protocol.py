from __future__ import annotations

import struct
from typing import Final

from rocketctl.model.types import DeviceConfig, DeviceStatus

CMD_SERVO_MIN: Final[int] = 0
CMD_SERVO_MAX: Final[int] = 1
CMD_STATUS: Final[int] = 2
CMD_CONFIG_WRITE: Final[int] = 3
CMD_DATA_READ: Final[int] = 4

COMMAND_TYPES: Final[frozenset[int]] = frozenset(
    (CMD_SERVO_MIN, CMD_SERVO_MAX, CMD_STATUS, CMD_CONFIG_WRITE, CMD_DATA_READ)
)

# Matches the controller firmware's packed config struct:
# init, s1min, s2min, s3min, s1max, s2max, s3max, control, param, burntime, alpha, mass
_CONFIG: Final[struct.Struct] = struct.Struct("<I6i?fIff")
_STATUS_HEADER: Final[struct.Struct] = struct.Struct("<?")
_COMMAND_HEADER: Final[struct.Struct] = struct.Struct("<B")

CONFIG_SIZE: Final[int] = _CONFIG.size
STATUS_SIZE: Final[int] = _STATUS_HEADER.size + _CONFIG.size
COMMAND_SIZE: Final[int] = _COMMAND_HEADER.size + _CONFIG.size


# ---------------------------------------- #


def encode_config(config: DeviceConfig) -> bytes:
    # The firmware has no slot for p_gain; start_time travels in the burntime slot.
    try:
        return _CONFIG.pack(
            config.init,
            config.s1min,
            config.s2min,
            config.s3min,
            config.s1max,
            config.s2max,
            config.s3max,
            config.control,
            config.param,
            int(round(config.start_time)),
            config.alpha,
            config.mass,
        )
    except struct.error as exc:
        raise ValueError(f"config does not fit the device layout: {exc}") from exc


# ---------------------------------------- #


def decode_config(payload: bytes) -> DeviceConfig:
    if len(payload) != CONFIG_SIZE:
        raise ValueError("unexpected config payload length")

    (
        init,
        s1min,
        s2min,
        s3min,
        s1max,
        s2max,
        s3max,
        control,
        param,
        burntime,
        alpha,
        mass,
    ) = _CONFIG.unpack(payload)
    return DeviceConfig(
        init=init,
        s1min=s1min,
        s2min=s2min,
        s3min=s3min,
        s1max=s1max,
        s2max=s2max,
        s3max=s3max,
        control=control,
        param=param,
        start_time=float(burntime),
        alpha=alpha,
        mass=mass,
    )


# ---------------------------------------- #


def decode_status(frame: bytes) -> DeviceStatus:
    if len(frame) != STATUS_SIZE:
        raise ValueError("unexpected status frame length")

    (has_data,) = _STATUS_HEADER.unpack(frame[: _STATUS_HEADER.size])
    if not has_data:
        return DeviceStatus(has_data=False)
    return DeviceStatus(has_data=True, config=decode_config(frame[_STATUS_HEADER.size :]))


# ---------------------------------------- #


def encode_command(command_type: int, config: DeviceConfig | None = None) -> bytes:
    if command_type not in COMMAND_TYPES:
        raise ValueError(f"unknown command type {command_type}")

    if config is None:
        config = DeviceConfig()
    return _COMMAND_HEADER.pack(command_type) + encode_config(config)
