"""
Service layer helpers that orchestrate domain logic.
"""

from .slot_finder import SlotFinderService, SlotResult, compute_slots

__all__ = ["SlotFinderService", "SlotResult", "compute_slots"]
