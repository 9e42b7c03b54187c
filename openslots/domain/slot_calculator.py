"""
Core business logic for calculating open time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from typing import List, Sequence

from pendulum import DateTime

from .models import BusyInterval, Slot, SlotOptions, Strategy, TimeWindow, intervals_overlap

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates open slots in a window from a sorted list of busy intervals.

    Two strategies are supported and selected by ``options.strategy``:

    - GAPS: sweep the busy intervals and report the start of every maximal
      free region of the window.
    - GRID: walk a fixed-step grid across the window and report every
      candidate whose fixed duration overlaps no busy interval.
    """

    def __init__(self, options: SlotOptions | None = None):
        self.options = options or SlotOptions()

    def find_available_slots(
        self,
        window: TimeWindow,
        busy_intervals: Sequence[BusyInterval],
    ) -> List[Slot]:
        """
        Find open slots using the configured strategy.

        Args:
            window: The query range
            busy_intervals: Busy intervals sorted by start

        Returns:
            List of Slot objects in ascending start order
        """
        if window.is_empty():
            return []

        if self.options.strategy is Strategy.GRID:
            return self.scan_grid(window, busy_intervals)

        return self.find_gaps(window, busy_intervals)

    def find_gaps(
        self,
        window: TimeWindow,
        busy_intervals: Sequence[BusyInterval],
    ) -> List[Slot]:
        """
        Report the start of each free region between busy intervals.

        Example:
        Window: 09:00 - 17:00
        Busy: [10:00-11:00, 10:30-12:00, 14:00-15:00]
        Result: [09:00, 12:00, 15:00]
        """
        if window.is_empty():
            return []

        slots: List[Slot] = []
        cursor = window.start

        for busy in busy_intervals:
            # Sorted by start, nothing later can open a gap inside the window
            if busy.start >= window.end:
                break

            if cursor < busy.start:
                slots.append(Slot(start=cursor))

            # max() so a contained interval cannot move the cursor backwards
            cursor = max(cursor, busy.end)

        if cursor < window.end:
            slots.append(Slot(start=cursor))

        return [slot for slot in slots if window.contains(slot.start)]

    def scan_grid(
        self,
        window: TimeWindow,
        busy_intervals: Sequence[BusyInterval],
    ) -> List[Slot]:
        """
        Report grid candidates whose full duration is free.

        Candidates start at window.start and advance by the step in UTC, so
        DST transitions do not stretch or shrink the grid. Candidates must
        end by the window end unless ``fit_within_window`` is turned off, in
        which case the last ones may run past it.
        """
        if window.is_empty():
            return []

        duration = self.options.slot_duration
        step_minutes = self.options.step_minutes
        slots: List[Slot] = []

        current: DateTime = window.start.in_timezone("UTC")

        while current < window.end:
            candidate = Slot(start=current, duration=duration)
            try:
                candidate_end = candidate.end
            except (OverflowError, ValueError):
                logger.error("Slot end out of range at %s, stopping grid scan", current.isoformat())
                break

            if self.options.fit_within_window and candidate_end > window.end:
                break

            if not self._overlaps_any(current, candidate_end, busy_intervals):
                slots.append(candidate)

            try:
                current = current.add(minutes=step_minutes)
            except (OverflowError, ValueError):
                logger.error("Grid step out of range after %s, stopping grid scan", current.isoformat())
                break

        return slots

    @staticmethod
    def _overlaps_any(
        slot_start: DateTime,
        slot_end: DateTime,
        busy_intervals: Sequence[BusyInterval],
    ) -> bool:
        for busy in busy_intervals:
            # Sorted by start, later intervals begin after this slot
            if busy.start >= slot_end:
                return False
            if intervals_overlap(slot_start, slot_end, busy.start, busy.end):
                return True
        return False
