"""
Rendering of slot start instants as text.
"""

import logging
from datetime import datetime
from typing import Dict, List

import pendulum
from pendulum import DateTime

from .models import RAW_INSTANT, Slot, resolve_timezone

logger = logging.getLogger(__name__)

RAW_INSTANT_FORMAT = "YYYY-MM-DD[T]HH:mm:ss.SSS[Z]"
ZONE_LOCAL_FORMAT = "YYYY-MM-DD h:mmA"


def _as_datetime(instant: datetime) -> DateTime:
    if isinstance(instant, DateTime):
        return instant
    return pendulum.instance(instant)


def format_raw_instant(instant: datetime) -> str:
    """UTC ISO 8601 with milliseconds and a Z suffix (2025-04-21T12:00:00.000Z)."""
    return _as_datetime(instant).in_timezone("UTC").format(RAW_INSTANT_FORMAT)


def format_zone_local(instant: datetime, zone_name: str) -> str:
    """
    Zone-local "YYYY-MM-DD h:mmAM" text.

    Built from the zone's calendar fields at that instant, so the offset in
    effect (standard or daylight time) is the one used. The locale is fixed
    to English for the AM/PM marker.
    """
    local = _as_datetime(instant).in_timezone(resolve_timezone(zone_name))
    return local.format(ZONE_LOCAL_FORMAT, locale="en")


class SlotFormatter:
    """Formats slots for one output zone ("raw-instant" for UTC ISO 8601)."""

    def __init__(self, output_timezone: str = RAW_INSTANT):
        self.output_timezone = output_timezone
        if output_timezone != RAW_INSTANT:
            resolve_timezone(output_timezone)

    def format_instant(self, instant: datetime) -> str:
        if self.output_timezone == RAW_INSTANT:
            return format_raw_instant(instant)
        return format_zone_local(instant, self.output_timezone)

    def format_slots(self, slots: List[Slot]) -> List[Dict[str, str]]:
        """
        Format each slot as ``{"start": text}``.

        A slot that fails to format is logged and left out.
        """
        formatted: List[Dict[str, str]] = []

        for slot in slots:
            try:
                formatted.append({"start": self.format_instant(slot.start)})
            except (ValueError, OverflowError) as exc:
                logger.error("Error formatting slot %r: %s", slot.start, exc)

        return formatted

    def date_key(self, instant: datetime) -> str:
        """Calendar date of an instant in the output zone (UTC for raw output)."""
        zone = "UTC" if self.output_timezone == RAW_INSTANT else resolve_timezone(self.output_timezone)
        return _as_datetime(instant).in_timezone(zone).to_date_string()
