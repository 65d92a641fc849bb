"""Persisted default settings for the screen-melt command."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from screen_melt.options import MeltOptions, normalize_seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Immutable user defaults loaded from disk."""

    stripe_width: int = 5
    stripe_displacement: int = 10
    frame_count: int = 0
    max_random: int = 15
    random_seed: int = -1
    force_even: bool = False
    algorithm: int = 0
    keep_temp: bool = False
    temp_dir: Optional[str] = None
    ffmpeg_path: str = "ffmpeg"
    ffmpeg_options: str = ""
    framerate: int = 30

    def melt_options(self) -> MeltOptions:
        return MeltOptions(
            stripe_width=self.stripe_width,
            stripe_displacement=self.stripe_displacement,
            frame_count=self.frame_count,
            max_random=self.max_random,
            random_seed=normalize_seed(self.random_seed),
            force_even=self.force_even,
            algorithm=self.algorithm,
        )


def get_config_dir(app_name: str = "screen-melt") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    temp_path.write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False  # pyright: ignore[reportAttributeAccessIssue]


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    return default


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allow_empty: bool = False,
) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        return default
    if not value and not allow_empty:
        return default
    return value


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    algorithm = _get_int(raw, "algorithm", 0)
    if algorithm not in {0, 1, 2}:
        algorithm = 0
    temp_dir = raw.get("temp_dir")
    if temp_dir is not None and (not isinstance(temp_dir, str) or not temp_dir):
        temp_dir = None
    return AppConfig(
        stripe_width=_get_int(raw, "stripe_width", 5, min_value=1),
        stripe_displacement=_get_int(raw, "stripe_displacement", 10, min_value=1),
        frame_count=_get_int(raw, "frame_count", 0, min_value=0),
        max_random=_get_int(raw, "max_random", 15, min_value=0),
        random_seed=_get_int(raw, "random_seed", -1, min_value=-1),
        force_even=_get_bool(raw, "force_even", False),
        algorithm=algorithm,
        keep_temp=_get_bool(raw, "keep_temp", False),
        temp_dir=temp_dir,
        ffmpeg_path=_get_str(raw, "ffmpeg_path", "ffmpeg"),
        ffmpeg_options=_get_str(raw, "ffmpeg_options", "", allow_empty=True),
        framerate=_get_int(raw, "framerate", 30, min_value=1, max_value=240),
    )
