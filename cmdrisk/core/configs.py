"""Configuration management for cmdrisk.

Loads safety settings from ~/.config/cmdrisk/config.cfg, an optional .env
file next to it, and CMDRISK_* environment variables (later sources win).
"""

import configparser
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values

from .gate import THRESHOLDS

# Default location for user configuration.
CONFIG_PATH = Path.home() / ".config" / "cmdrisk" / "config.cfg"
ENV_PATH = CONFIG_PATH.parent / ".env"
ENV_PREFIX = "CMDRISK_"

DEFAULT_BLOCKED_COMMANDS = ["shutdown", "reboot", "init 0", "init 6", ":(){ :|:& };:"]
DEFAULT_PROTECTED_PATHS = ["/", "/etc", "/usr", "/bin", "/sbin", "/boot"]


@dataclass
class SafetySettings:
    blocked_commands: List[str] = field(default_factory=lambda: list(DEFAULT_BLOCKED_COMMANDS))
    allowed_paths: List[str] = field(default_factory=list)
    protected_paths: List[str] = field(default_factory=lambda: list(DEFAULT_PROTECTED_PATHS))
    confirm_threshold: str = "caution"
    require_confirmation: bool = True
    path_violation_level: str = "caution"
    max_affected_files: int = 100


def load_raw_config(path: Path = CONFIG_PATH, env_path: Optional[Path] = ENV_PATH) -> Dict[str, str]:
    """
    Load configuration values from the config file, .env and environment.
    Values are returned with lowercase keys for convenience.
    """
    cfg = configparser.ConfigParser(interpolation=None)
    data: Dict[str, str] = {}

    path = Path(path)
    if path.exists():
        cfg.read(path)
        if "DEFAULT" in cfg:
            data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})
        if "SAFETY" in cfg:
            data.update({k.lower(): v for k, v in cfg["SAFETY"].items()})

    if env_path is not None and Path(env_path).exists():
        env_values = dotenv_values(env_path)
        data.update({
            _strip_prefix(k): v for k, v in env_values.items() if v is not None
        })

    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            data[_strip_prefix(key)] = value

    return data


def _strip_prefix(key: str) -> str:
    key = key.lower()
    prefix = ENV_PREFIX.lower()
    return key[len(prefix):] if key.startswith(prefix) else key


def _get_bool(raw: Dict[str, str], key: str, default: bool = False) -> bool:
    value = raw.get(key)
    if isinstance(value, bool):
        return value
    if value is None or str(value).strip() == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_list(raw: Dict[str, str], key: str, default: List[str]) -> List[str]:
    """Comma- or newline-separated list. A present but empty key clears it."""
    if key not in raw:
        return list(default)
    value = raw[key]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    items = str(value).replace("\n", ",").split(",")
    return [item.strip() for item in items if item.strip()]


def get_safety_settings(raw: Optional[Dict[str, str]] = None) -> SafetySettings:
    """
    Build SafetySettings from raw configuration values.
    Raises ValueError naming the offending key if a value is invalid.
    """
    raw = load_raw_config() if raw is None else raw
    defaults = SafetySettings()

    confirm_threshold = str(raw.get("confirm_threshold", defaults.confirm_threshold)).strip().lower()
    if confirm_threshold not in THRESHOLDS:
        raise ValueError(
            f"Invalid confirm_threshold '{confirm_threshold}'. "
            f"Expected one of: {', '.join(THRESHOLDS.keys())}"
        )

    path_violation_level = str(
        raw.get("path_violation_level", defaults.path_violation_level)
    ).strip().lower()
    if path_violation_level not in ("caution", "dangerous"):
        raise ValueError(
            f"Invalid path_violation_level '{path_violation_level}'. "
            "Expected one of: caution, dangerous"
        )

    try:
        max_affected_files = int(float(raw.get("max_affected_files", defaults.max_affected_files)))
    except (TypeError, ValueError):
        raise ValueError(
            f"Invalid max_affected_files '{raw.get('max_affected_files')}'. Expected an integer"
        ) from None
    if max_affected_files < 0:
        raise ValueError("Invalid max_affected_files: must not be negative")

    return SafetySettings(
        blocked_commands=_get_list(raw, "blocked_commands", defaults.blocked_commands),
        allowed_paths=_get_list(raw, "allowed_paths", defaults.allowed_paths),
        protected_paths=_get_list(raw, "protected_paths", defaults.protected_paths),
        confirm_threshold=confirm_threshold,
        require_confirmation=_get_bool(raw, "require_confirmation", defaults.require_confirmation),
        path_violation_level=path_violation_level,
        max_affected_files=max_affected_files,
    )
