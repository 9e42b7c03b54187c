"""
Input validation for slot requests.

Turns raw window bounds and raw appointment entries (as decoded from a JSON
body) into a ``TimeWindow`` and ``BusyInterval`` objects, or raises a
``ValidationError`` subclass the calling layer can map to a client error.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import (
    InvalidAppointmentShapeError,
    InvalidDateFormatError,
    MissingBoundError,
    NotAnArrayError,
)
from .models import AppointmentPolicy, BusyInterval, TimeWindow

logger = logging.getLogger(__name__)


def parse_instant(value: Any, default_tz: str = "UTC") -> DateTime:
    """
    Parse an ISO 8601 string (or datetime) into a UTC instant.

    Naive values are interpreted in ``default_tz``. Returning UTC keeps
    comparisons absolute, including around DST transitions.

    Raises:
        ValueError: If the value is not a date string or does not parse
    """
    if isinstance(value, datetime):
        parsed = pendulum.instance(value, tz=default_tz)
    elif isinstance(value, str):
        parsed = pendulum.parse(value.strip(), tz=default_tz)
    else:
        raise ValueError(f"Expected an ISO 8601 string, got {type(value).__name__}")

    # parse() can also return durations and intervals
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Not a date and time: {value!r}")

    return parsed.in_timezone("UTC")


@dataclass(frozen=True)
class ValidatedRequest:
    """A window plus the busy intervals that survived validation."""
    window: TimeWindow
    busy_intervals: Tuple[BusyInterval, ...]


class RequestValidator:
    """
    Validates window bounds and appointment entries.

    Shape errors follow ``policy``: STRICT raises on the first malformed
    entry, LENIENT drops it with a warning. Entries with the right shape but
    unparseable dates are skipped with a warning under both policies.
    """

    def __init__(
        self,
        policy: AppointmentPolicy = AppointmentPolicy.LENIENT,
        input_timezone: str = "UTC",
    ):
        self.policy = AppointmentPolicy(policy)
        self.input_timezone = input_timezone

    def validate(
        self,
        start: Any,
        end: Any,
        appointments: Any = None,
    ) -> ValidatedRequest:
        """
        Validate a full request.

        A degenerate window (start >= end) short-circuits: the appointment
        collection is not inspected and no intervals are returned.
        """
        window = self.validate_window(start, end)

        if window.is_empty():
            logger.debug("Degenerate window %s, skipping appointment validation", window)
            return ValidatedRequest(window=window, busy_intervals=())

        return ValidatedRequest(
            window=window,
            busy_intervals=tuple(self.validate_appointments(appointments)),
        )

    def validate_window(self, start: Any, end: Any) -> TimeWindow:
        """Validate and parse both window bounds."""
        if self._is_missing(start) or self._is_missing(end):
            raise MissingBoundError("start and end are both required.")

        try:
            start_instant = parse_instant(start, self.input_timezone)
            end_instant = parse_instant(end, self.input_timezone)
        except (ValueError, OverflowError) as exc:
            raise InvalidDateFormatError(
                f"Invalid start or end format provided: {exc}"
            ) from exc

        return TimeWindow(start=start_instant, end=end_instant)

    def validate_appointments(self, appointments: Any) -> List[BusyInterval]:
        """
        Validate the appointment collection and parse each entry.

        ``None`` means no appointments. Anything other than a list or tuple
        is rejected.
        """
        if appointments is None:
            return []

        if not isinstance(appointments, (list, tuple)):
            raise NotAnArrayError("appointments must be an array if provided.")

        intervals: List[BusyInterval] = []

        for index, entry in enumerate(appointments):
            if not self._has_valid_shape(entry):
                if self.policy is AppointmentPolicy.STRICT:
                    raise InvalidAppointmentShapeError(
                        f"Appointment at index {index} must have string 'start' and 'end' fields.",
                        index=index,
                    )
                logger.warning("Filtering out invalid appointment structure at index %d: %r", index, entry)
                continue

            interval = self._parse_interval(index, entry)
            if interval is not None:
                intervals.append(interval)

        return intervals

    def _parse_interval(self, index: int, entry: Mapping) -> Optional[BusyInterval]:
        try:
            return BusyInterval(
                start=parse_instant(entry["start"], self.input_timezone),
                end=parse_instant(entry["end"], self.input_timezone),
            )
        except (ValueError, OverflowError) as exc:
            logger.warning("Skipping appointment at index %d with invalid dates: %s", index, exc)
            return None

    @staticmethod
    def _has_valid_shape(entry: Any) -> bool:
        if not isinstance(entry, Mapping):
            return False
        return all(
            isinstance(entry.get(field), (str, datetime))
            for field in ("start", "end")
        )

    @staticmethod
    def _is_missing(value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())
