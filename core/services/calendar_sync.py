"""Best-effort mirroring of planned events into a device calendar.

Neither method raises: permission denial and platform failures come back as
`None`/`False` so the caller can tell the user, while the local event change
has already been applied.
"""

from __future__ import annotations

from loguru import logger

from core.models import PlannedEvent
from core.services.event_service import event_window
from core.services.interfaces import DeviceCalendar


class CalendarSyncService:
    """Creates and deletes device-calendar mirrors of planned events."""

    def __init__(
        self,
        calendar: DeviceCalendar,
        *,
        calendar_id: str | None = None,
        min_duration_mins: int = 15,
        alarm_offset_mins: int = -60,
    ) -> None:
        self._calendar = calendar
        self._calendar_id = calendar_id
        self._min_duration = min_duration_mins
        self._alarm_offset = alarm_offset_mins

    async def _ensure_permission(self) -> bool:
        granted = await self._calendar.request_permission()
        if not granted:
            logger.info("Device calendar permission not granted")
        return bool(granted)

    async def mirror(self, event: PlannedEvent) -> str | None:
        """Create the external copy of `event`; return its id or None."""
        window = event_window(event, self._min_duration)
        if window is None:
            logger.warning("Cannot mirror event {} with date {}", event.id, event.date_iso)
            return None
        start, end = window
        try:
            if not await self._ensure_permission():
                return None
            cal_id = self._calendar_id or await self._calendar.default_calendar_id()
            if not cal_id:
                logger.info("No device calendar available for event {}", event.id)
                return None
            device_id = await self._calendar.create_event(
                cal_id,
                title=event.title,
                notes=event.notes or "",
                start=start,
                end=end,
                alarm_offset_mins=self._alarm_offset,
            )
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Device calendar create failed for {}: {}", event.id, ex)
            return None
        logger.info("Mirrored event {} as device event {}", event.id, device_id)
        return str(device_id) if device_id else None

    async def unmirror(self, device_event_id: str) -> bool:
        """Delete the external event; True when the platform call succeeded."""
        try:
            if not await self._ensure_permission():
                return False
            await self._calendar.delete_event(device_event_id)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Device calendar delete failed for {}: {}", device_event_id, ex)
            return False
        return True
