import json

import pytest

from deckdev.config import (
    LauncherConfig,
    apply_env_overrides,
    load_launcher_config,
    parse_log_level,
    resolve_root,
)
from deckdev.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DECKDEV_CONFIG",
        "DECKDEV_COMMAND",
        "DECKDEV_PRESENTATIONS_DIR",
        "DECKDEV_PROPAGATE_EXIT_CODE",
        "DECKDEV_LOG_LEVEL",
        "DECKDEV_ROOT",
    ):
        monkeypatch.delenv(name, raising=False)


def _write_cfg(tmp_path, data, name="deckdev.config.json"):
    p = tmp_path / name
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


def test_defaults_when_no_config_file(tmp_path):
    assert load_launcher_config(root_dir=tmp_path) == LauncherConfig()


def test_default_file_under_root_is_read(tmp_path):
    _write_cfg(tmp_path, {"command": "npx slidev", "propagate_exit_code": True, "unknown": 1})
    cfg = load_launcher_config(root_dir=tmp_path)
    assert cfg.command == ("npx", "slidev")
    assert cfg.propagate_exit_code is True
    assert cfg.slide_filename == "slides.md"


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_launcher_config(str(tmp_path / "nope.json"))


def test_env_config_path_is_honoured(tmp_path, monkeypatch):
    p = _write_cfg(tmp_path, {"presentations_dir": "decks"}, name="other.json")
    monkeypatch.setenv("DECKDEV_CONFIG", str(p))
    assert load_launcher_config(root_dir=tmp_path / "elsewhere").presentations_dir == "decks"


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    _write_cfg(tmp_path, {"command": ["pnpm", "slidev"], "log_level": "info"})
    monkeypatch.setenv("DECKDEV_COMMAND", "yarn slidev --remote")
    monkeypatch.setenv("DECKDEV_PROPAGATE_EXIT_CODE", "yes")
    monkeypatch.setenv("DECKDEV_LOG_LEVEL", "debug")
    cfg = load_launcher_config(root_dir=tmp_path)
    assert cfg.command == ("yarn", "slidev", "--remote")
    assert cfg.propagate_exit_code is True
    assert cfg.log_level == "DEBUG"


def test_apply_env_overrides_without_changes_returns_same_object():
    cfg = LauncherConfig()
    assert apply_env_overrides(cfg, {}) is cfg


@pytest.mark.parametrize("data", [
    {"command": []},
    {"command": 5},
    {"log_level": "loud"},
    {"propagate_exit_code": "maybe"},
    {"presentations_dir": "  "},
])
def test_invalid_values_raise_config_error(tmp_path, data):
    _write_cfg(tmp_path, data)
    with pytest.raises(ConfigError):
        load_launcher_config(root_dir=tmp_path)


def test_malformed_json_raises_config_error(tmp_path):
    (tmp_path / "deckdev.config.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_launcher_config(root_dir=tmp_path)


@pytest.mark.parametrize("value", ["", "   "])
def test_blank_presentations_dir_override_raises(tmp_path, monkeypatch, value):
    monkeypatch.setenv("DECKDEV_PRESENTATIONS_DIR", value)
    with pytest.raises(ConfigError):
        load_launcher_config(root_dir=tmp_path)


def test_presentations_dir_override_is_stripped():
    cfg = apply_env_overrides(LauncherConfig(), {"DECKDEV_PRESENTATIONS_DIR": " decks "})
    assert cfg.presentations_dir == "decks"


def test_resolve_root_precedence(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_root(environ={}) == tmp_path.resolve()
    assert resolve_root(environ={"DECKDEV_ROOT": str(tmp_path / "env")}) == (tmp_path / "env").resolve()
    assert resolve_root(str(tmp_path / "opt"), {"DECKDEV_ROOT": "ignored"}) == (tmp_path / "opt").resolve()


def test_parse_log_level_accepts_any_case():
    assert parse_log_level("debug") == "DEBUG"
    with pytest.raises(ConfigError):
        parse_log_level("verbose")
