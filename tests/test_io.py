import json

import pytest

from rocketctl.model.io import (
    load_simulation_config,
    load_simulation_series,
    save_simulation_config,
    save_simulation_series,
)
from rocketctl.model.types import SimulationConfig, SimulationSeries

CONFIG = SimulationConfig(
    rho=1.225,
    area=0.008,
    mass=1.2,
    base_cd=0.45,
    control_cd=0.6,
    thrust_curve_time=(0.0, 1.0, 2.0),
    thrust_curve_force=(0.0, 100.0, 0.0),
    thrust_curve_name="F32",
    control=False,
    start_time=0.0,
    param=0.0,
    p_gain=0.0,
)


def test_config_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    save_simulation_config(path, CONFIG)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["canardCd"] == 0.6
    assert "finCd" not in data
    assert load_simulation_config(path) == CONFIG


def test_loads_legacy_document(tmp_path):
    data = CONFIG.to_dict()
    del data["schema"]
    data["finCd"] = data.pop("canardCd")
    path = tmp_path / "old.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    assert load_simulation_config(path) == CONFIG


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_simulation_config(path)


def test_not_an_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a JSON object"):
        load_simulation_config(path)


def test_error_names_file_and_key(tmp_path):
    data = CONFIG.to_dict()
    del data["rho"]
    path = tmp_path / "partial.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(ValueError, match=r"partial\.json: missing key 'rho'"):
        load_simulation_config(path)


def test_non_finite_thrust_curve_is_rejected(tmp_path):
    text = json.dumps(CONFIG.to_dict()).replace(
        '"thrustCurveTime": [0.0, 1.0, 2.0]', '"thrustCurveTime": [0, NaN, -5]'
    )
    assert "NaN" in text
    path = tmp_path / "nan.json"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError, match=r"nan\.json: thrust curve time must be finite"):
        load_simulation_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_simulation_config(tmp_path / "none.json")


def test_series_save_and_load(tmp_path):
    series = SimulationSeries(
        time=[0.0, 0.05],
        alt=[0.0, 1.0],
        vz=[20.0, 19.5],
        vx=[0.0, 0.0],
        az=[-9.81, -9.81],
        angle=[0.0, 0.0],
    )
    path = tmp_path / "sim.json"
    save_simulation_series(path, series)
    assert load_simulation_series(path) == series


def test_series_with_uneven_lengths(tmp_path):
    path = tmp_path / "sim.json"
    path.write_text(
        json.dumps({"time": [0.0], "alt": [], "vz": [], "vx": [], "az": [], "angle": []}),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="differ in length"):
        load_simulation_series(path)
