"""
Application service for computing open slots.

The service runs one request through validation, normalization, the
configured slot strategy and formatting. It holds no state between calls,
so a single instance can be shared by a request-handling layer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from ..domain.formatter import SlotFormatter
from ..domain.models import Slot, SlotOptions, TimeWindow
from ..domain.normalizer import normalize_busy_intervals
from ..domain.slot_calculator import SlotCalculator
from ..domain.validator import RequestValidator

logger = logging.getLogger(__name__)

FormattedSlots = List[Dict[str, str]]
SlotResult = Union[FormattedSlots, Dict[str, FormattedSlots]]


class SlotFinderService:
    """
    Orchestrates validation, slot calculation and formatting.

    The pieces are built from ``SlotOptions`` but can be injected, which keeps
    the service easy to test.
    """

    def __init__(
        self,
        options: SlotOptions | None = None,
        *,
        validator: RequestValidator | None = None,
        slot_calculator: SlotCalculator | None = None,
        formatter: SlotFormatter | None = None,
    ) -> None:
        self.options = options or SlotOptions()
        self._validator = validator or RequestValidator(
            policy=self.options.appointment_policy,
            input_timezone=self.options.input_timezone,
        )
        self._slot_calculator = slot_calculator or SlotCalculator(self.options)
        self._formatter = formatter or SlotFormatter(self.options.output_timezone)

    def compute_slots(
        self,
        *,
        start: Any,
        end: Any,
        appointments: Any = None,
    ) -> SlotResult:
        """
        Validate the request and compute formatted open slots.

        Raises:
            ValidationError: If the window or the appointment list is rejected
        """
        request = self._validator.validate(start, end, appointments)
        slots = self.calculate_slots(request.window, request.busy_intervals)
        return self.build_result(request.window, slots)

    def calculate_slots(self, window: TimeWindow, busy_intervals) -> List[Slot]:
        """Sort the busy intervals and run the configured strategy."""
        if window.is_empty():
            return []

        sorted_busy = normalize_busy_intervals(busy_intervals)
        slots = self._slot_calculator.find_available_slots(window, sorted_busy)

        logger.debug(
            "Found %d %s slot(s) in %s against %d busy interval(s)",
            len(slots),
            self.options.strategy.value,
            window,
            len(sorted_busy),
        )
        return slots

    def build_result(self, window: TimeWindow, slots: List[Slot]) -> SlotResult:
        """Format slots, grouped under the window's start date if configured."""
        formatted = self._formatter.format_slots(slots)

        if not self.options.group_by_date:
            return formatted

        return {self._formatter.date_key(window.start): formatted}


def compute_slots(
    start: Any,
    end: Any,
    appointments: Any = None,
    options: SlotOptions | None = None,
) -> SlotResult:
    """Compute open slots for one request. See ``SlotFinderService``."""
    service = SlotFinderService(options)
    return service.compute_slots(start=start, end=end, appointments=appointments)
