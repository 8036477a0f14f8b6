from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Final

import numpy as np
import numpy.typing as npt

from rocketctl.model.schema import CONTROL_CD_KEY, SCHEMA_KEY, SCHEMA_VERSION, migrate_config_dict
from rocketctl.util.equality import structural_equals

SERVO_COUNT: Final[int] = 3


# ---------------------------------------- #
#  Field readers                           #
# ---------------------------------------- #


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise ValueError(f"missing key {key!r}") from exc


def _float(data: dict[str, Any], key: str) -> float:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _int(data: dict[str, Any], key: str) -> int:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


def _bool(data: dict[str, Any], key: str) -> bool:
    value = _require(data, key)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def _str(data: dict[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _floats(data: dict[str, Any], key: str) -> tuple[float, ...]:
    value = _require(data, key)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list of numbers")
    out = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"{key} must be a list of numbers")
        out.append(float(v))
    return tuple(out)


# ---------------------------------------- #
#  Simulation input                        #
# ---------------------------------------- #


@dataclass(frozen=True)
class SimulationConfig:
    """
    Physical and control parameters for one simulated flight.

    All units are SI. The thrust curve is a lookup table: thrust_curve_force[i]
    is the motor force at thrust_curve_time[i].
    """

    rho: float  # Air density, kg/m^3
    area: float  # Reference area, m^2
    mass: float  # kg
    base_cd: float
    control_cd: float  # Cd added at full control-surface deflection
    thrust_curve_time: tuple[float, ...]
    thrust_curve_force: tuple[float, ...]
    thrust_curve_name: str
    control: bool
    start_time: float  # Control is enabled after this time, s
    param: float  # Target apogee, m
    p_gain: float

    def __post_init__(self) -> None:
        times = tuple(float(t) for t in self.thrust_curve_time)
        forces = tuple(float(f) for f in self.thrust_curve_force)
        object.__setattr__(self, "thrust_curve_time", times)
        object.__setattr__(self, "thrust_curve_force", forces)

        if len(times) != len(forces):
            raise ValueError(
                f"thrust curve has {len(times)} time points but {len(forces)} force points"
            )
        if not bool(np.all(np.isfinite(times))):
            raise ValueError("thrust curve time must be finite")
        if not bool(np.all(np.isfinite(forces))):
            raise ValueError("thrust curve force must be finite")
        if len(times) > 1 and not bool(np.all(np.diff(np.asarray(times)) >= 0.0)):
            raise ValueError("thrust curve time must be non-decreasing")

    # ---------------------------------------- #

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        data = migrate_config_dict(data)
        return cls(
            rho=_float(data, "rho"),
            area=_float(data, "A"),
            mass=_float(data, "mass"),
            base_cd=_float(data, "baseCd"),
            control_cd=_float(data, CONTROL_CD_KEY),
            thrust_curve_time=_floats(data, "thrustCurveTime"),
            thrust_curve_force=_floats(data, "thrustCurveForce"),
            thrust_curve_name=_str(data, "thrustCurveName"),
            control=_bool(data, "control"),
            start_time=_float(data, "startTime"),
            param=_float(data, "param"),
            p_gain=_float(data, "P"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            SCHEMA_KEY: SCHEMA_VERSION,
            "rho": self.rho,
            "A": self.area,
            "mass": self.mass,
            "baseCd": self.base_cd,
            CONTROL_CD_KEY: self.control_cd,
            "thrustCurveTime": list(self.thrust_curve_time),
            "thrustCurveForce": list(self.thrust_curve_force),
            "thrustCurveName": self.thrust_curve_name,
            "control": self.control,
            "startTime": self.start_time,
            "param": self.param,
            "P": self.p_gain,
        }


# ---------------------------------------- #
#  Device status                           #
# ---------------------------------------- #


@dataclass(frozen=True)
class DeviceConfig:
    """Configuration currently held by the flight controller."""

    init: int = 0  # Non-zero once the controller has been configured
    s1min: int = 0
    s2min: int = 0
    s3min: int = 0
    s1max: int = 0
    s2max: int = 0
    s3max: int = 0
    control: bool = False
    param: float = 0.0
    start_time: float = 0.0
    alpha: float = 0.0
    mass: float = 0.0
    p_gain: float = 0.0

    def servo_limits(self, index: int) -> tuple[int, int]:
        """Return (min, max) travel for actuator 1, 2 or 3."""
        if not 1 <= index <= SERVO_COUNT:
            raise IndexError(f"servo index must be 1..{SERVO_COUNT}, got {index}")
        return getattr(self, f"s{index}min"), getattr(self, f"s{index}max")

    # ---------------------------------------- #

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceConfig:
        return cls(
            init=_int(data, "init"),
            s1min=_int(data, "s1min"),
            s2min=_int(data, "s2min"),
            s3min=_int(data, "s3min"),
            s1max=_int(data, "s1max"),
            s2max=_int(data, "s2max"),
            s3max=_int(data, "s3max"),
            control=_bool(data, "control"),
            param=_float(data, "param"),
            start_time=_float(data, "starttime"),
            alpha=_float(data, "alpha"),
            mass=_float(data, "mass"),
            p_gain=_float(data, "P"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "alpha": self.alpha,
            "starttime": self.start_time,
            "P": self.p_gain,
            "control": self.control,
            "mass": self.mass,
            "param": self.param,
            "s1min": self.s1min,
            "s2min": self.s2min,
            "s3min": self.s3min,
            "s1max": self.s1max,
            "s2max": self.s2max,
            "s3max": self.s3max,
            "init": self.init,
        }


@dataclass(frozen=True)
class DeviceStatus:
    """
    Snapshot of the flight controller.

    config is only meaningful when has_data is set; otherwise it is None.
    """

    has_data: bool
    config: DeviceConfig | None = None

    def __post_init__(self) -> None:
        if not self.has_data:
            object.__setattr__(self, "config", None)
        elif self.config is None:
            raise ValueError("has_data is set but no config was given")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceStatus:
        has_data = _bool(data, "has_data")
        if not has_data:
            return cls(has_data=False)
        config = _require(data, "config")
        if not isinstance(config, dict):
            raise ValueError("config must be an object")
        return cls(has_data=True, config=DeviceConfig.from_dict(config))

    def to_dict(self) -> dict[str, Any]:
        config = self.config if self.config is not None else DeviceConfig()
        return {"has_data": self.has_data, "config": config.to_dict()}


# ---------------------------------------- #
#  Simulation output                       #
# ---------------------------------------- #


def _series_array(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=np.float64, copy=True)
    if arr.ndim != 1:
        raise ValueError("series values must be one-dimensional")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SimulationSeries:
    """
    One simulated trajectory as parallel arrays.

    Index i of every array refers to the same instant. Any array-like input
    (list, tuple, ndarray) is copied into a read-only float64 ndarray.
    """

    time: npt.ArrayLike = ()  # s
    alt: npt.ArrayLike = ()  # m
    vz: npt.ArrayLike = ()  # m/s
    vx: npt.ArrayLike = ()  # m/s
    az: npt.ArrayLike = ()  # m/s^2
    angle: npt.ArrayLike = ()  # Control-surface angle, deg

    def __post_init__(self) -> None:
        lengths = set()
        for f in fields(self):
            arr = _series_array(getattr(self, f.name))
            object.__setattr__(self, f.name, arr)
            lengths.add(len(arr))
        if len(lengths) > 1:
            raise ValueError(f"series arrays differ in length: {sorted(lengths)}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimulationSeries):
            return NotImplemented
        return structural_equals(self, other)

    def __len__(self) -> int:
        return len(self.time)

    @classmethod
    def empty(cls) -> SimulationSeries:
        return cls()

    # ---------------------------------------- #

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationSeries:
        return cls(**{f.name: _floats(data, f.name) for f in fields(cls)})

    def to_dict(self) -> dict[str, list[float]]:
        return {f.name: getattr(self, f.name).tolist() for f in fields(self)}
