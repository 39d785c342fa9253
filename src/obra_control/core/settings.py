"""User settings that drive rounding and precision behaviour.

Settings are passed explicitly to every function that needs them; nothing in
the package reads a process-wide settings object.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .numbers import MONEY_THOUSANDS

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("config/settings.yaml")

# Keys written by the browser version of the tool.
_LEGACY_KEYS = {
    "moneyDecimals": "money_decimals",
    "qtyDecimals": "qty_decimals",
    "highlightExtraQty": "highlight_extra_qty",
    "shiftPlannedBySuspensions": "shift_planned_by_suspensions",
}

_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


def _to_bool(name: str, value: Any) -> bool:
    """Read a flag from YAML or JSON, where it may arrive as text or 0/1."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"Setting {name!r} must be true or false, got {value!r}")


@dataclass(frozen=True)
class Settings:
    """Valuation and display settings.

    Attributes:
        money_decimals: Digits kept when rounding money. `MONEY_THOUSANDS`
            (-3) truncates to whole thousands.
        qty_decimals: Digits expected in budget quantities.
        highlight_extra_qty: Flag quantities with more digits than `qty_decimals`.
        shift_planned_by_suspensions: Push planned-curve dates past suspensions
            when comparing against executed progress.
    """

    money_decimals: int = 0
    qty_decimals: int = 2
    highlight_extra_qty: bool = True
    shift_planned_by_suspensions: bool = True

    @property
    def rounds_to_thousands(self) -> bool:
        return self.money_decimals == MONEY_THOUSANDS

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "Settings":
        """Return a copy with known keys from `overrides` applied.

        Raises:
            ValueError: A known key holds a value of the wrong kind.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        values: Dict[str, Any] = {}
        for key, value in overrides.items():
            name = _LEGACY_KEYS.get(key, key)
            if name not in known:
                logger.debug("Ignoring unknown setting: %s", key)
                continue
            if value is None:
                continue
            if name in ("money_decimals", "qty_decimals"):
                values[name] = int(value)
            else:
                values[name] = _to_bool(name, value)
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Settings":
        """Build settings from a mapping merged over the defaults."""
        return cls().merged(data)


def load_settings(path: Path) -> Settings:
    """Load settings from YAML, falling back to defaults if the file is absent.

    Raises:
        ValueError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        logger.debug("Settings file not found, using defaults: %s", path)
        return Settings()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(settings.to_dict(), f, allow_unicode=True, sort_keys=False)


__all__ = [
    "MONEY_THOUSANDS",
    "DEFAULT_SETTINGS_PATH",
    "Settings",
    "load_settings",
    "save_settings",
]
