"""
Domain layer - Pure business logic without external dependencies.
"""

from .formatter import SlotFormatter
from .models import (
    AppointmentPolicy,
    BusyInterval,
    Slot,
    SlotOptions,
    Strategy,
    TimeRange,
    TimeWindow,
    intervals_overlap,
)
from .normalizer import normalize_busy_intervals
from .slot_calculator import SlotCalculator
from .validator import RequestValidator, ValidatedRequest

__all__ = [
    "AppointmentPolicy",
    "BusyInterval",
    "RequestValidator",
    "Slot",
    "SlotCalculator",
    "SlotFormatter",
    "SlotOptions",
    "Strategy",
    "TimeRange",
    "TimeWindow",
    "ValidatedRequest",
    "intervals_overlap",
    "normalize_busy_intervals",
]
