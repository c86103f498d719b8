"""
YAML → settings loader.

Merges user overrides from ~/.lift-tracker/config.yaml over the defaults
in config.py.  Recognised keys:

    store_path: ~/training/plan.json   # where the plan is persisted
    plan_source: ~/my_plan.json        # document imported on first use
    rest_seconds: 90                   # default rest countdown
    trend_window: 3                    # weight points used for trends
    trend_threshold_pct: 5.0           # % change that counts as a trend

A missing file yields the defaults.  A file that cannot be parsed, or a key
with an unusable value, is reported with a warning and ignored.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .config import (
    DEFAULT_REST_SECONDS,
    STORE_FILENAME,
    TREND_THRESHOLD_PCT,
    TREND_WINDOW,
    USER_DIR,
)


@dataclass
class Settings:
    """Effective runtime settings."""

    store_path: Path = USER_DIR / STORE_FILENAME
    plan_source: Path | None = None  # None → bundled document
    rest_seconds: int = DEFAULT_REST_SECONDS
    trend_window: int = TREND_WINDOW
    trend_threshold_pct: float = TREND_THRESHOLD_PCT


def get_user_config_path() -> Path:
    """Return the location of the user's config.yaml (it may not exist)."""
    return USER_DIR / "config.yaml"


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-tracker: ignoring {path} ({exc})", stacklevel=3)
        return {}
    return data if isinstance(data, dict) else {}


def _positive(raw: dict[str, Any], key: str, cast: type, default: Any) -> Any:
    if key not in raw:
        return default
    try:
        value = cast(raw[key])
    except (TypeError, ValueError):
        value = None
    if value is None or value <= 0:
        warnings.warn(
            f"lift-tracker: config key '{key}' must be a positive number; using {default}",
            stacklevel=3,
        )
        return default
    return value


def settings_from_dict(raw: dict[str, Any]) -> Settings:
    """Build Settings from a raw config mapping, falling back to defaults."""
    defaults = Settings()

    store_path = defaults.store_path
    if raw.get("store_path"):
        store_path = Path(str(raw["store_path"])).expanduser()

    plan_source = None
    if raw.get("plan_source"):
        plan_source = Path(str(raw["plan_source"])).expanduser()

    return Settings(
        store_path=store_path,
        plan_source=plan_source,
        rest_seconds=_positive(raw, "rest_seconds", int, defaults.rest_seconds),
        trend_window=_positive(raw, "trend_window", int, defaults.trend_window),
        trend_threshold_pct=_positive(
            raw, "trend_threshold_pct", float, defaults.trend_threshold_pct
        ),
    )


def load_settings(path: Path | None = None) -> Settings:
    """
    Load settings, merging the user's YAML file over the defaults.

    Args:
        path: Config file to read (defaults to ~/.lift-tracker/config.yaml)

    Returns:
        Settings
    """
    if path is None:
        path = get_user_config_path()
    if not path.exists():
        return Settings()
    return settings_from_dict(_load_yaml_file(path))
