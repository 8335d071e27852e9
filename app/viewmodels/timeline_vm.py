from __future__ import annotations

from core.models import Photo
from core.services.interfaces import TimelineSection
from core.services.store import DomainStore
from core.services.timeline_service import group_by_month


class TimelineVM:
    """Month-grouped, newest-first view of every photo."""

    def __init__(self, store: DomainStore) -> None:
        self._store = store

    @property
    def sections(self) -> list[TimelineSection]:
        return group_by_month(self._store.photos, self._store.albums)

    @property
    def is_empty(self) -> bool:
        return not self._store.photos

    def toggle_favorite(self, photo_id: str) -> Photo | None:
        return self._store.toggle_favorite(photo_id)
