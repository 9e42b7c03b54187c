"""
Domain models for windows, busy intervals and open slots.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

import pendulum
from pendulum import DateTime

from .exceptions import ConfigError

RAW_INSTANT = "raw-instant"


def intervals_overlap(
    a_start: DateTime,
    a_end: DateTime,
    b_start: DateTime,
    b_end: DateTime,
) -> bool:
    """
    Half-open intersection test for [a_start, a_end) and [b_start, b_end).

    Ranges that only touch at a boundary instant do not overlap.
    """
    return a_start < b_end and a_end > b_start


@dataclass(frozen=True)
class TimeRange:
    """
    An immutable half-open range of aware datetimes.

    Unlike a busy interval coming out of the normalizer, a range is allowed to
    be empty (start >= end); callers check ``is_empty`` where it matters.
    """
    start: DateTime
    end: DateTime

    def is_empty(self) -> bool:
        """Return True if the range covers no time."""
        return self.start >= self.end

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return intervals_overlap(self.start, self.end, other.start, other.end)

    def contains(self, instant: DateTime) -> bool:
        """Check if an instant falls inside [start, end)."""
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


class TimeWindow(TimeRange):
    """The bounded query range."""


class BusyInterval(TimeRange):
    """An existing commitment, treated as [start, end)."""


@dataclass(frozen=True)
class Slot:
    """
    An open slot, identified by its first instant.

    Gap slots have no duration; their end is the next busy interval or the
    window end. Grid slots carry the fixed duration they were checked for.
    """
    start: DateTime
    duration: Optional[timedelta] = None

    @property
    def end(self) -> Optional[DateTime]:
        """
        End of a grid slot, None for gap slots.

        Raises:
            OverflowError: If the end is past the representable range
            ValueError: Same, where pendulum rebuilds the date itself
        """
        if self.duration is None:
            return None
        return self.start + self.duration


class Strategy(str, Enum):
    """Slot search strategy."""
    GAPS = "gaps"
    GRID = "grid"


class AppointmentPolicy(str, Enum):
    """What to do with a malformed appointment entry."""
    STRICT = "strict"
    LENIENT = "lenient"


def resolve_timezone(name: str):
    """
    Look up an IANA zone by name.

    Raises:
        ConfigError: If the zone is unknown
    """
    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise ConfigError(f"Unknown timezone: '{name}'") from exc


@dataclass(frozen=True)
class SlotOptions:
    """
    Per-call options for a slot search.

    ``output_timezone`` is an IANA zone name or ``"raw-instant"`` for UTC
    ISO 8601 output. ``input_timezone`` is applied to naive datetimes.
    """
    strategy: Strategy = Strategy.GAPS
    slot_duration_minutes: int = 60
    step_minutes: int = 30
    output_timezone: str = RAW_INSTANT
    group_by_date: bool = False
    appointment_policy: AppointmentPolicy = AppointmentPolicy.LENIENT
    fit_within_window: bool = True
    input_timezone: str = "UTC"

    def __post_init__(self):
        # Accept plain strings for the enum fields
        object.__setattr__(self, "strategy", self._coerce(Strategy, self.strategy))
        object.__setattr__(
            self,
            "appointment_policy",
            self._coerce(AppointmentPolicy, self.appointment_policy),
        )

        for name in ("slot_duration_minutes", "step_minutes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
            try:
                timedelta(minutes=value)
            except OverflowError as exc:
                raise ConfigError(f"{name} is too large, got {value}") from exc

        if self.output_timezone != RAW_INSTANT:
            resolve_timezone(self.output_timezone)
        resolve_timezone(self.input_timezone)

    @staticmethod
    def _coerce(enum_cls, value):
        try:
            return enum_cls(value)
        except ValueError as exc:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ConfigError(
                f"Invalid {enum_cls.__name__} '{value}', expected one of: {allowed}"
            ) from exc

    @property
    def slot_duration(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)
