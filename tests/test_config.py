import json
import logging

from core.config import DEFAULT_SETTINGS, SETTINGS_ENV, load_settings
from core.global_ctrl import GlobalController


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_partial_override_is_merged(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"speed": 2.0, "stack": {"max_size": 4}}), encoding="utf-8")

    settings = load_settings(path)
    assert settings["speed"] == 2.0
    assert settings["stack"]["max_size"] == 4
    assert settings["stack"]["peek_ms"] == DEFAULT_SETTINGS["stack"]["peek_ms"]
    assert DEFAULT_SETTINGS["stack"]["max_size"] == 8


def test_environment_variable_points_at_file(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"toast_ms": 1200}), encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV, str(path))
    assert load_settings()["toast_ms"] == 1200


def test_broken_file_falls_back_with_warning(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="core.config"):
        settings = load_settings(path)
    assert settings == DEFAULT_SETTINGS
    assert "Ignoring settings file" in caplog.text


def test_non_object_file_is_ignored(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_speed_is_clamped_and_scales_durations():
    ctrl = GlobalController({"speed": 10})
    assert ctrl.speed == GlobalController.MAX_SPEED

    changes = []
    ctrl.speedChanged.connect(changes.append)
    ctrl.set_speed(2.0)
    assert changes == [2.0]
    assert ctrl.scale_duration(400) == 200
    assert ctrl.scale_duration(0) == 0
    ctrl.set_speed(0.1)
    assert ctrl.speed == GlobalController.MIN_SPEED
    assert ctrl.scale_duration(400) == 800
