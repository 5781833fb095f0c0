"""Tests for configuration loading."""

import pytest

from heifmeta import config as config_module
from heifmeta.config import (
    DisplayP3Config,
    HeifMetaConfig,
    WalkerConfig,
    get_config,
    load_config,
    reset_config,
)


def test_defaults():
    """Test default values without file or environment."""
    config = load_config()
    assert config.walker == WalkerConfig(max_depth=32, allow_rewind=True)
    assert config.display_p3 == DisplayP3Config(profiles=["apple", "legacy"], white_point_tolerance=0.01)


def test_default_profiles_not_shared():
    """Test each config gets its own profile list."""
    first = DisplayP3Config()
    first.profiles.append("extra")
    assert DisplayP3Config().profiles == ["apple", "legacy"]


def test_environment(monkeypatch):
    """Test HEIFMETA_* variables override the defaults."""
    monkeypatch.setenv("HEIFMETA_MAX_DEPTH", "8")
    monkeypatch.setenv("HEIFMETA_ALLOW_REWIND", "no")
    monkeypatch.setenv("HEIFMETA_P3_PROFILES", "apple, ")
    monkeypatch.setenv("HEIFMETA_WHITE_POINT_TOLERANCE", "0.005")
    config = load_config()
    assert config.walker.max_depth == 8
    assert config.walker.allow_rewind is False
    assert config.display_p3.profiles == ["apple"]
    assert config.display_p3.white_point_tolerance == 0.005


def test_yaml_file(tmp_path, monkeypatch):
    """Test values from a YAML config file."""
    pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text(
        "walker:\n"
        "  max_depth: 4\n"
        "  allow_rewind: false\n"
        "display_p3:\n"
        "  profiles: [legacy]\n"
        "  white_point_tolerance: 0.02\n"
    )
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [tmp_path / "missing.yaml", path])
    config = load_config()
    assert config.walker.max_depth == 4
    assert config.walker.allow_rewind is False
    assert config.display_p3.profiles == ["legacy"]
    assert config.display_p3.white_point_tolerance == 0.02


def test_environment_beats_file(tmp_path, monkeypatch):
    """Test environment variables take priority over the file."""
    pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text("walker:\n  max_depth: 4\n")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])
    monkeypatch.setenv("HEIFMETA_MAX_DEPTH", "16")
    assert load_config().walker.max_depth == 16


def test_empty_yaml_file(tmp_path, monkeypatch):
    """Test an empty file falls back to defaults."""
    pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text("")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])
    assert load_config() == HeifMetaConfig()


def test_global_config_cached(monkeypatch):
    """Test get_config caches until reset_config."""
    first = get_config()
    assert get_config() is first
    monkeypatch.setenv("HEIFMETA_MAX_DEPTH", "3")
    assert get_config().walker.max_depth == 32
    reset_config()
    assert get_config().walker.max_depth == 3
