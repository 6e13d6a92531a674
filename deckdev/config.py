import json
import logging
import os
import shlex
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from deckdev.errors import ConfigError


DEFAULT_CONFIG_NAME = "deckdev.config.json"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class LauncherConfig:
    presentations_dir: str = "presentations"
    slide_filename: str = "slides.md"
    command: Tuple[str, ...] = ("pnpm", "slidev")
    usage_command: str = "pnpm dev"
    propagate_exit_code: bool = False
    log_level: str = "WARNING"


def _command(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, (list, tuple)):
        parts = [str(p) for p in value]
    else:
        raise ConfigError(f"command must be a string or a list, got {type(value).__name__}")
    parts = [p for p in parts if p.strip()]
    if not parts:
        raise ConfigError("command must not be empty")
    return tuple(parts)


def _bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def parse_log_level(value: Any) -> str:
    level = str(value or "").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level: {value!r}")
    return level


def resolve_root(explicit: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> Path:
    """Presentations live under the explicit root, then DECKDEV_ROOT, then the working directory."""
    env = os.environ if environ is None else environ
    raw = explicit or env.get("DECKDEV_ROOT", "").strip()
    return Path(raw or Path.cwd()).expanduser().resolve()


def _segment(data: Dict[str, Any], key: str, default: str) -> str:
    val = str(data.get(key, default)).strip()
    if not val:
        raise ConfigError(f"{key} must not be empty")
    return val


def _from_mapping(data: Dict[str, Any]) -> LauncherConfig:
    defaults = LauncherConfig()
    return LauncherConfig(
        presentations_dir=_segment(data, "presentations_dir", defaults.presentations_dir),
        slide_filename=_segment(data, "slide_filename", defaults.slide_filename),
        command=_command(data.get("command", defaults.command)),
        usage_command=str(data.get("usage_command", defaults.usage_command)).strip() or defaults.usage_command,
        propagate_exit_code=_bool(data.get("propagate_exit_code", defaults.propagate_exit_code), "propagate_exit_code"),
        log_level=parse_log_level(data.get("log_level", defaults.log_level)),
    )


def apply_env_overrides(cfg: LauncherConfig, environ: Optional[Dict[str, str]] = None) -> LauncherConfig:
    env = os.environ if environ is None else environ
    changes: Dict[str, Any] = {}
    if env.get("DECKDEV_COMMAND"):
        changes["command"] = _command(env["DECKDEV_COMMAND"])
    if "DECKDEV_PRESENTATIONS_DIR" in env:
        changes["presentations_dir"] = _segment(env, "DECKDEV_PRESENTATIONS_DIR", "")
    if "DECKDEV_PROPAGATE_EXIT_CODE" in env:
        changes["propagate_exit_code"] = _bool(env["DECKDEV_PROPAGATE_EXIT_CODE"], "DECKDEV_PROPAGATE_EXIT_CODE")
    if env.get("DECKDEV_LOG_LEVEL"):
        changes["log_level"] = parse_log_level(env["DECKDEV_LOG_LEVEL"])
    return replace(cfg, **changes) if changes else cfg


def load_launcher_config(path: Optional[str] = None, root_dir: Optional[Path] = None) -> LauncherConfig:
    """Load launcher settings from JSON, then apply DECKDEV_* environment overrides.

    An explicitly requested file (argument or DECKDEV_CONFIG) must exist; the
    default ``deckdev.config.json`` under the root is optional.
    """
    explicit = path or os.environ.get("DECKDEV_CONFIG")
    if explicit:
        cfg_path = Path(explicit).expanduser().resolve()
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
    else:
        cfg_path = Path(root_dir or resolve_root()) / DEFAULT_CONFIG_NAME

    data: Dict[str, Any] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be an object: {cfg_path}")

    return apply_env_overrides(_from_mapping(data))
