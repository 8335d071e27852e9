"""Core domain records: albums, photos, planned events and settings.

Records are frozen; the store replaces them (and the list holding them) on
every change. `to_dict`/`from_dict` map to the persisted JSON shape, which
keeps the camelCase field names of the stored data.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

ANNIVERSARY_FALLBACK = "2024-02-14"


def _opt_str(value: Any) -> str | None:
    return str(value) if value else None


@dataclass(frozen=True)
class Album:
    """A named, dated grouping of photos."""

    id: str
    name: str
    date_iso: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "dateISO": self.date_iso,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Album:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            date_iso=str(data.get("dateISO") or ""),
            created_at=str(data.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class Photo:
    """A reference to picked image content plus its album, date and caption."""

    id: str
    uri: str
    album_id: str | None
    date_iso: str
    caption: str
    favorite: bool
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uri": self.uri,
            "albumId": self.album_id,
            "dateISO": self.date_iso,
            "caption": self.caption,
            "favorite": self.favorite,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Photo:
        return cls(
            id=str(data["id"]),
            uri=str(data["uri"]),
            album_id=_opt_str(data.get("albumId")),
            date_iso=str(data.get("dateISO") or ""),
            caption=str(data.get("caption") or ""),
            favorite=bool(data.get("favorite", False)),
            created_at=str(data.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class PlannedEvent:
    """A future date plan, optionally mirrored into a device calendar."""

    id: str
    date_iso: str
    time_hhmm: str
    duration_mins: int
    title: str
    notes: str = ""
    device_event_id: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "dateISO": self.date_iso,
            "timeHHMM": self.time_hhmm,
            "durationMins": self.duration_mins,
            "title": self.title,
            "notes": self.notes,
            "deviceEventId": self.device_event_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlannedEvent:
        return cls(
            id=str(data["id"]),
            date_iso=str(data["dateISO"]),
            time_hhmm=str(data.get("timeHHMM") or ""),
            duration_mins=int(data.get("durationMins") or 60),
            title=str(data["title"]),
            notes=str(data.get("notes") or ""),
            device_event_id=_opt_str(data.get("deviceEventId")),
            created_at=str(data.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class Settings:
    """The singleton settings record."""

    couple_name: str = "You & Partner"
    anniversary: str = ANNIVERSARY_FALLBACK

    def to_dict(self) -> dict[str, Any]:
        return {"coupleName": self.couple_name, "anniversary": self.anniversary}

    @classmethod
    def field_names(cls) -> set[str]:
        return set(asdict(cls()).keys())
