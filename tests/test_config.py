"""
Tests for mercator_image.config — defaults, validation and persistence.
"""
from __future__ import annotations

import json
import os

import pytest

from mercator_image.config import DEFAULT_CONFIG, Config, _default_config_path


class TestLoad:
    def test_missing_file_gives_defaults(self, isolated_config):
        cfg = Config.load()
        assert cfg.path == str(isolated_config)
        assert cfg.tile_size == (256, 256)
        assert cfg.viewport_size == (800, 600)
        assert cfg["output"]["precision"] == 6
        assert not isolated_config.exists()

    def test_create_if_missing(self, isolated_config):
        Config.load(create_if_missing=True)
        assert isolated_config.exists()
        data = json.loads(isolated_config.read_text(encoding="utf-8"))
        assert data["tile"]["width"] == 256

    def test_user_values_override(self, isolated_config):
        isolated_config.write_text(json.dumps({"tile": {"width": 512}, "viewport": {"height": 300}}))
        cfg = Config.load()
        assert cfg.tile_size == (512, 256)
        assert cfg.viewport_size == (800, 300)

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"output": {"precision": 2}}))
        assert Config.load(str(path))["output"]["precision"] == 2

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2, 3]"])
    def test_corrupt_file_is_backed_up(self, isolated_config, payload):
        isolated_config.write_text(payload)
        cfg = Config.load()
        assert cfg.tile_size == (256, 256)
        backup = str(isolated_config) + ".corrupt.bak"
        assert os.path.exists(backup)
        with open(backup, encoding="utf-8") as f:
            assert f.read() == payload


class TestValidation:
    @pytest.mark.parametrize("width,expected", [
        ("abc", 256),
        (None, 256),
        (0, 1),
        (-5, 1),
        (100000, 8192),
        ("300", 300),
    ])
    def test_tile_width_coercion(self, isolated_config, width, expected):
        isolated_config.write_text(json.dumps({"tile": {"width": width}}))
        assert Config.load()["tile"]["width"] == expected

    @pytest.mark.parametrize("level,expected", [
        ("debug", "DEBUG"),
        ("INFO", "INFO"),
        ("chatty", "WARNING"),
        (None, "WARNING"),
    ])
    def test_log_level(self, isolated_config, level, expected):
        isolated_config.write_text(json.dumps({"logging": {"level": level}}))
        assert Config.load()["logging"]["level"] == expected

    def test_non_dict_section_replaced(self, isolated_config):
        isolated_config.write_text(json.dumps({"tile": 7}))
        assert Config.load().tile_size == (256, 256)

    def test_defaults_not_mutated(self, isolated_config):
        isolated_config.write_text(json.dumps({"tile": {"width": 16}}))
        Config.load()
        Config().update({"viewport": {"width": 3}})
        assert DEFAULT_CONFIG["tile"]["width"] == 256
        assert DEFAULT_CONFIG["viewport"]["width"] == 800


class TestPersistence:
    def test_update_validates(self):
        cfg = Config()
        cfg.update({"output": {"precision": 99}})
        assert cfg["output"]["precision"] == 15

    def test_save_round_trip(self, isolated_config):
        cfg = Config.load()
        cfg["viewport"]["width"] = 1024
        cfg.save()
        again = Config.load()
        assert again.viewport_size == (1024, 600)

    def test_save_normalizes(self, isolated_config):
        cfg = Config.load()
        cfg["tile"]["height"] = "bogus"
        cfg.save()
        assert cfg["tile"]["height"] == 256
        assert json.loads(isolated_config.read_text())["tile"]["height"] == 256


def test_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("MERCATOR_IMAGE_CONFIG", str(tmp_path / "x.json"))
    assert _default_config_path() == str(tmp_path / "x.json")


def test_default_path_without_env(monkeypatch):
    monkeypatch.delenv("MERCATOR_IMAGE_CONFIG", raising=False)
    assert _default_config_path().endswith("mercator_image.json")
