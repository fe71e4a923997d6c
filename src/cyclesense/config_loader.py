"""Load, validate, and hot-reload the CycleSense engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_engine_config()`` to re-read from
disk after an edit.

Usage::

    from cyclesense.config_loader import get_engine_config

    config = get_engine_config()
    config.defaults.cycle_length_days   # 28
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from cyclesense.config import get_settings

logger = logging.getLogger("cyclesense.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DefaultsConfig:
    """Fallback statistics for under-determined histories."""

    cycle_length_days: int = 28
    period_length_days: int = 5


@dataclass(frozen=True)
class HistoryConfig:
    """Settings for derived cycle history records."""

    include_forecast: bool = True
    max_records: int = 12


@dataclass(frozen=True)
class EngineConfig:
    """Complete, validated engine configuration.

    Attributes:
        version:  Config schema version string.
        defaults: Fallback cycle and period lengths.
        history:  Cycle history display settings.
    """

    version: str = "1.0"
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _positive_int(section: dict, key: str, default: int, where: str, errors: list[str]) -> int:
    value = section.get(key, default)
    if isinstance(value, bool):
        errors.append(f"{where}.{key} must be an integer, got {value!r}")
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors.append(f"{where}.{key} must be an integer, got {value!r}")
        return default
    if number != value and not isinstance(value, str):
        errors.append(f"{where}.{key} must be a whole number of days, got {value!r}")
    if number < 1:
        errors.append(f"{where}.{key} = {number} must be a positive integer")
    return number


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Every problem is collected before raising, so one run reports them all.

    Raises:
        ConfigValidationError: If any field is missing its type or range.
    """
    errors: list[str] = []

    version = str(raw.get("version", "1.0"))

    # ── Defaults ──
    defaults_raw = raw.get("defaults") or {}
    if not isinstance(defaults_raw, dict):
        errors.append("'defaults' must be a mapping")
        defaults_raw = {}
    defaults = DefaultsConfig(
        cycle_length_days=_positive_int(defaults_raw, "cycle_length_days", 28, "defaults", errors),
        period_length_days=_positive_int(defaults_raw, "period_length_days", 5, "defaults", errors),
    )
    if defaults.period_length_days >= defaults.cycle_length_days:
        errors.append(
            f"defaults.period_length_days ({defaults.period_length_days}) must be shorter "
            f"than defaults.cycle_length_days ({defaults.cycle_length_days})"
        )

    # ── History ──
    history_raw = raw.get("history") or {}
    if not isinstance(history_raw, dict):
        errors.append("'history' must be a mapping")
        history_raw = {}
    include_forecast = history_raw.get("include_forecast", True)
    if not isinstance(include_forecast, bool):
        errors.append(f"history.include_forecast must be true/false, got {include_forecast!r}")
        include_forecast = True
    history = HistoryConfig(
        include_forecast=include_forecast,
        max_records=_positive_int(history_raw, "max_records", 12, "history", errors),
    )

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(version=version, defaults=defaults, history=history)


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML.  Falls back to ``Settings.engine_config_path``
              and then to the bundled engine_config.yaml.
    """
    target = path or get_settings().engine_config_path or _CONFIG_PATH
    raw = _load_yaml(Path(target))
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_engine_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded engine config: %s → %s", old_version, new_config.version)
    return new_config
