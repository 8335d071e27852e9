"""Device calendar adapters.

The desktop build has no platform calendar to write into, so the default
adapter reports that permission is never granted. Platform builds provide
their own `DeviceCalendar` implementation.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger


class NullDeviceCalendar:
    """Calendar adapter for hosts without a device calendar."""

    async def request_permission(self) -> bool:
        return False

    async def default_calendar_id(self) -> str | None:
        return None

    async def create_event(
        self,
        calendar_id: str,
        *,
        title: str,
        notes: str,
        start: datetime,
        end: datetime,
        alarm_offset_mins: int,
    ) -> str:
        raise RuntimeError("No device calendar available")

    async def delete_event(self, event_id: str) -> None:
        logger.debug("No device calendar; nothing to delete for {}", event_id)
