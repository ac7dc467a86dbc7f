"""Tests for settings persistence."""

import json

from valvemap.settings import (
    EMPTY_TEXTURE,
    GeometrySettings,
    get_config_dir,
    load_settings,
    save_settings,
)


def test_defaults():
    settings = GeometrySettings()
    assert settings.epsilon == 0.001
    assert settings.scale == 1.0
    assert settings.default_texture_size == (64, 64)
    assert settings.empty_texture == EMPTY_TEXTURE
    assert settings.max_workers == 1
    assert not settings.strict


def test_replace_returns_copy():
    settings = GeometrySettings()
    changed = settings.replace(scale=0.5, y_up=True)
    assert changed.scale == 0.5
    assert changed.y_up
    assert settings.scale == 1.0


def test_round_trip(tmp_path):
    settings = GeometrySettings(
        epsilon=0.01,
        recenter=True,
        default_texture_size=(128, 32),
        texture_extensions=(".png",),
        max_workers=4,
    )
    path = save_settings(settings, tmp_path / "nested" / "settings.json")
    assert path.exists()
    assert load_settings(path) == settings


def test_saved_file_is_plain_json(tmp_path):
    path = save_settings(GeometrySettings(), tmp_path / "settings.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["default_texture_size"] == [64, 64]
    assert data["texture_property"] == "_tb_textures"


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.json") == GeometrySettings()


def test_unknown_keys_ignored(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"scale": 2.0, "colour": "red"}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.scale == 2.0
    assert "colour" in caplog.text


def test_invalid_json_gives_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{ not json", encoding="utf-8")
    assert load_settings(path) == GeometrySettings()
    assert "Invalid settings file" in caplog.text


def test_non_object_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_settings(path) == GeometrySettings()


def test_config_dir_under_home():
    assert get_config_dir().name == "valvemap"
