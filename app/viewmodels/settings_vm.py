"""ViewModel for the settings screen: names, anniversary, stats and reset."""

from __future__ import annotations

from datetime import datetime

from core.dates import days_since
from core.models import Settings
from core.services.store import DomainStore


class SettingsVM:
    def __init__(self, store: DomainStore) -> None:
        self._store = store

    @property
    def settings(self) -> Settings:
        return self._store.settings

    def days_together(self, now: datetime | None = None) -> int:
        """Whole days since the anniversary."""
        return days_since(self._store.settings.anniversary, now)

    @property
    def album_count(self) -> int:
        return len(self._store.albums)

    @property
    def photo_count(self) -> int:
        return len(self._store.photos)

    def set_couple_name(self, name: str) -> Settings:
        return self._store.update_settings(couple_name=name)

    def commit_anniversary(self, value: str) -> Settings:
        """Store the edited anniversary; invalid input becomes the default date."""
        return self._store.update_settings(anniversary=value)

    def reset_all(self) -> None:
        """Wipe albums, photos and settings; confirm with the user before calling."""
        self._store.reset_all()
