import json

import pytest

from rocketctl.app import EXIT_DIFFERENT, EXIT_ERROR, EXIT_OK, main
from rocketctl.model.io import save_simulation_config
from rocketctl.model.types import SimulationConfig


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "rocketctl.toml"
    path.write_text('[flights]\ndir = "flights"\n', encoding="utf-8")
    (tmp_path / "flights").mkdir()
    return path


def _config(mass: float) -> SimulationConfig:
    return SimulationConfig(
        rho=1.225,
        area=0.008,
        mass=mass,
        base_cd=0.45,
        control_cd=0.6,
        thrust_curve_time=(0.0, 1.0),
        thrust_curve_force=(50.0, 0.0),
        thrust_curve_name="E12",
        control=True,
        start_time=1.0,
        param=200.0,
        p_gain=0.01,
    )


def test_diff_identical(tmp_path, settings_file, capsys):
    a = tmp_path / "a.json"
    b = tmp_path / "b.json"
    save_simulation_config(a, _config(1.0))
    # Same config written under the legacy key
    data = _config(1.0).to_dict()
    data["finCd"] = data.pop("canardCd")
    b.write_text(json.dumps(data), encoding="utf-8")

    code = main(["--settings", str(settings_file), "diff", str(a), str(b)])
    assert code == EXIT_OK
    assert capsys.readouterr().out == "identical\n"


def test_diff_different(tmp_path, settings_file, capsys):
    a = tmp_path / "a.json"
    b = tmp_path / "b.json"
    save_simulation_config(a, _config(1.0))
    save_simulation_config(b, _config(1.1))

    code = main(["--settings", str(settings_file), "diff", str(a), str(b)])
    assert code == EXIT_DIFFERENT
    assert capsys.readouterr().out == "different\n"


def test_diff_series(tmp_path, settings_file, capsys):
    doc = {"time": [0.0], "alt": [1.0], "vz": [0.0], "vx": [0.0], "az": [0.0], "angle": [0.0]}
    a = tmp_path / "a.json"
    b = tmp_path / "b.json"
    a.write_text(json.dumps(doc), encoding="utf-8")
    b.write_text(json.dumps(doc), encoding="utf-8")

    code = main(["--settings", str(settings_file), "diff", "--series", str(a), str(b)])
    assert code == EXIT_OK


def test_diff_missing_file_is_an_error(tmp_path, settings_file):
    code = main(["--settings", str(settings_file), "diff", str(tmp_path / "x"), str(tmp_path / "y")])
    assert code == EXIT_ERROR


def test_flights_uses_settings_dir(tmp_path, settings_file, capsys):
    (tmp_path / "flights" / "launch1.csv").write_text("", encoding="utf-8")
    code = main(["--settings", str(settings_file), "flights"])
    assert code == EXIT_OK
    assert capsys.readouterr().out == "launch1\n"


def test_flights_explicit_dir(tmp_path, settings_file, capsys):
    other = tmp_path / "other"
    other.mkdir()
    (other / "b.csv").write_text("", encoding="utf-8")
    code = main(["--settings", str(settings_file), "flights", str(other)])
    assert code == EXIT_OK
    assert capsys.readouterr().out == "b\n"


@pytest.mark.parametrize("name, expected", [("abc", EXIT_OK), ("a.b", EXIT_DIFFERENT)])
def test_check_name(settings_file, name, expected):
    assert main(["--settings", str(settings_file), "check-name", name]) == expected


def test_bad_settings_file(tmp_path):
    path = tmp_path / "rocketctl.toml"
    path.write_text("[flights\n", encoding="utf-8")
    assert main(["--settings", str(path), "check-name", "abc"]) == EXIT_ERROR


@pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
def test_log_level_accepts_every_settings_level(settings_file, level):
    assert main(["--settings", str(settings_file), "--log-level", level, "check-name", "abc"]) == EXIT_OK
