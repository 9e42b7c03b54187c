"""
Ordering of busy intervals before slot calculation.
"""

import logging
from typing import Iterable, List

from .models import BusyInterval

logger = logging.getLogger(__name__)


def normalize_busy_intervals(intervals: Iterable[BusyInterval]) -> List[BusyInterval]:
    """
    Sort busy intervals by start, keeping input order for equal starts.

    Intervals that cover no time (end <= start) are dropped so they cannot
    split a free region. Overlapping intervals are left as they are.
    """
    usable: List[BusyInterval] = []

    for interval in intervals:
        if interval.is_empty():
            logger.debug("Dropping empty busy interval %s", interval)
            continue
        usable.append(interval)

    # sorted() is stable
    return sorted(usable, key=lambda interval: interval.start)
