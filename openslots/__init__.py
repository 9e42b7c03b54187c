"""
openslots - compute open time slots in a window around busy intervals.
"""

from .domain.exceptions import SlotFinderError, ValidationError
from .domain.models import AppointmentPolicy, SlotOptions, Strategy
from .services.slot_finder import SlotFinderService, compute_slots

__version__ = "0.1.0"

__all__ = [
    "AppointmentPolicy",
    "SlotFinderError",
    "SlotFinderService",
    "SlotOptions",
    "Strategy",
    "ValidationError",
    "compute_slots",
]
