"""Timeline ordering and month grouping for photos.

A photo's *effective date* is its album's date when it is filed in an album
that still exists, otherwise its own `date_iso`. The stored photo date is
never rewritten; the album date only decides timeline placement.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from core.dates import format_display, month_label
from core.models import Album, Photo
from core.services.album_service import album_display_name, album_index
from core.services.interfaces import TimelineEntry, TimelineSection


def effective_date(photo: Photo, index: Mapping[str, Album]) -> str:
    """Date used to place `photo` on the timeline."""
    if photo.album_id:
        album = index.get(photo.album_id)
        if album and album.date_iso:
            return album.date_iso
    return photo.date_iso


def sort_for_timeline(photos: Iterable[Photo], index: Mapping[str, Album]) -> list[Photo]:
    """Newest effective date first; ties go to the most recently added photo."""
    return sorted(
        photos,
        key=lambda p: (effective_date(p, index), p.created_at or ""),
        reverse=True,
    )


def group_by_month(photos: Iterable[Photo], albums: Iterable[Album]) -> list[TimelineSection]:
    """Group photos into month sections in timeline order.

    Section order follows the first occurrence of each month in the sorted
    sequence, so sections are newest-first as well.
    """
    index = album_index(albums)
    sections: dict[str, TimelineSection] = {}
    for photo in sort_for_timeline(photos, index):
        eff = effective_date(photo, index)
        title = month_label(eff)
        section = sections.get(title)
        if section is None:
            section = sections[title] = TimelineSection(title=title)
        section.items.append(
            TimelineEntry(
                photo=photo,
                effective_date=eff,
                display_date=format_display(eff),
                album_name=album_display_name(photo.album_id, index),
            )
        )
    return list(sections.values())
