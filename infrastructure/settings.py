"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.dates import parse_date
from core.models import ANNIVERSARY_FALLBACK, Settings


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonSettings:
        """Build settings from an in-memory mapping (no file involved)."""
        inst = cls.__new__(cls)
        inst._path = Path()
        inst._data = data
        return inst

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Integer value for `key`; `default` when missing or not a number."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default


def _checked_anniversary(value: Any) -> str:
    return value if parse_date(value) else ANNIVERSARY_FALLBACK


def default_settings_from(settings: JsonSettings) -> Settings:
    """Initial couple settings as configured under `defaults.*`."""
    base = Settings()
    return Settings(
        couple_name=str(settings.get("defaults.couple_name", base.couple_name)),
        anniversary=_checked_anniversary(settings.get("defaults.anniversary")),
    )


def duration_presets_from(settings: JsonSettings, fallback: tuple[int, ...]) -> tuple[int, ...]:
    """Positive integer presets from `calendar.duration_presets`."""
    raw = settings.get("calendar.duration_presets", [])
    result: list[int] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, int) and not isinstance(item, bool) and item > 0:
                result.append(item)
    return tuple(result) or fallback
