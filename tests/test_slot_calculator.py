"""
Tests for slot calculator.
"""

import logging
from datetime import timedelta

import pendulum
from pendulum import DateTime

from openslots.domain.models import BusyInterval, Slot, SlotOptions, Strategy, TimeWindow, intervals_overlap
from openslots.domain.normalizer import normalize_busy_intervals
from openslots.domain.slot_calculator import SlotCalculator


def at(hhmm: str, day: str = "2025-04-21") -> DateTime:
    return pendulum.parse(f"{day}T{hhmm}:00Z")


def window(start: str, end: str) -> TimeWindow:
    return TimeWindow(start=at(start), end=at(end))


def busy(*pairs) -> list:
    return normalize_busy_intervals(
        BusyInterval(start=at(start), end=at(end)) for start, end in pairs
    )


def starts(slots) -> list:
    return [slot.start for slot in slots]


class TestGapFinder:
    """Tests for the gap strategy."""

    def setup_method(self):
        self.calculator = SlotCalculator(SlotOptions(strategy=Strategy.GAPS))

    def test_single_busy_interval(self):
        """Busy 12-13 in a 9-17 window leaves gaps at 09:00 and 13:00."""
        slots = self.calculator.find_available_slots(window("09:00", "17:00"), busy(("12:00", "13:00")))

        assert starts(slots) == [at("09:00"), at("13:00")]
        assert all(slot.end is None for slot in slots)

    def test_no_busy_intervals(self):
        """An empty schedule yields one slot at the window start."""
        slots = self.calculator.find_available_slots(window("09:00", "17:00"), [])

        assert starts(slots) == [at("09:00")]

    def test_busy_interval_equal_to_window(self):
        """A fully booked window has no gaps."""
        slots = self.calculator.find_available_slots(window("09:00", "17:00"), busy(("09:00", "17:00")))

        assert slots == []

    def test_overlapping_and_contained_intervals(self):
        """A contained interval must not reopen a gap inside a longer one."""
        slots = self.calculator.find_available_slots(
            window("09:00", "17:00"),
            busy(
                ("10:00", "12:00"),
                ("11:00", "11:30"),
                ("11:45", "13:00"),
                ("15:00", "16:00"),
            ),
        )

        assert starts(slots) == [at("09:00"), at("13:00"), at("16:00")]

    def test_out_of_order_input(self):
        """Input order does not matter once normalized."""
        ordered = busy(("10:00", "11:00"), ("14:00", "15:00"))
        reversed_input = busy(("14:00", "15:00"), ("10:00", "11:00"))

        first = self.calculator.find_gaps(window("09:00", "17:00"), ordered)
        second = self.calculator.find_gaps(window("09:00", "17:00"), reversed_input)

        assert first == second
        assert starts(first) == [at("09:00"), at("11:00"), at("15:00")]

    def test_busy_interval_starting_before_window(self):
        slots = self.calculator.find_gaps(window("09:00", "17:00"), busy(("08:00", "10:00")))

        assert starts(slots) == [at("10:00")]

    def test_busy_intervals_outside_window(self):
        """Intervals before or after the window do not create slots outside it."""
        slots = self.calculator.find_gaps(
            window("09:00", "17:00"),
            busy(("06:00", "07:00"), ("16:00", "18:00"), ("19:00", "20:00")),
        )

        assert starts(slots) == [at("09:00")]

    def test_back_to_back_intervals(self):
        """Adjacent busy intervals leave no gap between them."""
        slots = self.calculator.find_gaps(
            window("09:00", "17:00"),
            busy(("09:00", "10:00"), ("10:00", "12:00")),
        )

        assert starts(slots) == [at("12:00")]

    def test_degenerate_window(self):
        calculator = self.calculator

        assert calculator.find_available_slots(window("17:00", "09:00"), []) == []
        assert calculator.find_available_slots(window("09:00", "09:00"), busy(("10:00", "11:00"))) == []

    def test_gaps_and_busy_cover_window(self):
        """Every instant of the window is either in a gap or in a busy interval, never both."""
        win = window("08:00", "18:00")
        intervals = busy(("08:30", "09:00"), ("09:00", "10:00"), ("09:30", "09:45"), ("13:00", "14:30"), ("17:30", "19:00"))

        slots = self.calculator.find_gaps(win, intervals)

        boundaries = sorted({b.start for b in intervals} | {win.end})
        minute = win.start
        while minute < win.end:
            in_busy = any(b.contains(minute) for b in intervals)
            # The gap containing this minute starts at the last slot <= minute
            # and runs to the next busy start after that slot
            in_gap = False
            for slot in slots:
                gap_end = next(b for b in boundaries if b > slot.start)
                if slot.start <= minute < gap_end:
                    in_gap = True
            assert in_busy != in_gap, minute
            minute += timedelta(minutes=15)

        assert starts(slots) == sorted(set(starts(slots)))
        assert all(win.contains(slot.start) for slot in slots)


class TestGridScanner:
    """Tests for the grid strategy."""

    def setup_method(self):
        self.calculator = SlotCalculator(SlotOptions(strategy=Strategy.GRID))
        self.overrun_calculator = SlotCalculator(
            SlotOptions(strategy=Strategy.GRID, fit_within_window=False)
        )

    def test_grid_excludes_overlapping_candidates(self):
        """Window 9-11, busy 09:30-10:00: 09:00 and 09:30 collide, 10:00 fits."""
        slots = self.calculator.find_available_slots(window("09:00", "11:00"), busy(("09:30", "10:00")))

        assert starts(slots) == [at("10:00")]
        assert all(slot.duration == timedelta(hours=1) for slot in slots)

    def test_grid_allows_overrun_when_not_capped(self):
        """Without fit_within_window, 10:30-11:30 is offered in a window ending at 11:00."""
        slots = self.overrun_calculator.find_available_slots(
            window("09:00", "11:00"), busy(("09:30", "10:00"))
        )

        assert starts(slots) == [at("10:00"), at("10:30")]

    def test_grid_overrun_boundary(self):
        """The capped grid keeps a slot ending exactly at the window end."""
        capped = self.calculator.scan_grid(window("09:00", "11:00"), [])
        overrun = self.overrun_calculator.scan_grid(window("09:00", "11:00"), [])

        assert starts(capped) == [at("09:00"), at("09:30"), at("10:00")]
        assert capped[-1].end == at("11:00")
        assert starts(overrun) == [at("09:00"), at("09:30"), at("10:00"), at("10:30")]
        assert overrun[-1].end > at("11:00")

    def test_no_busy_intervals_one_candidate_per_step(self):
        slots = self.overrun_calculator.scan_grid(window("09:00", "17:00"), [])

        assert len(slots) == 16
        assert slots[0].start == at("09:00")
        assert slots[-1].start == at("16:30")

    def test_abutting_busy_interval_does_not_exclude(self):
        """A candidate that only touches a busy interval is still offered."""
        slots = self.calculator.scan_grid(window("09:00", "12:00"), busy(("10:00", "11:00")))

        assert starts(slots) == [at("09:00"), at("11:00")]

    def test_custom_duration_and_step(self):
        calculator = SlotCalculator(
            SlotOptions(strategy=Strategy.GRID, slot_duration_minutes=30, step_minutes=15)
        )

        slots = calculator.scan_grid(window("09:00", "10:15"), busy(("09:20", "09:40")))

        assert starts(slots) == [at("09:45")]

    def test_omitted_candidates_all_overlap(self):
        """Returned candidates are free and every omitted candidate collides."""
        win = window("08:00", "18:00")
        intervals = busy(("08:45", "09:15"), ("12:00", "13:30"), ("12:30", "12:45"), ("16:10", "16:20"))
        duration = timedelta(hours=1)

        slots = self.overrun_calculator.scan_grid(win, intervals)
        returned = set(starts(slots))

        candidate = win.start
        while candidate < win.end:
            collides = any(
                intervals_overlap(candidate, candidate + duration, b.start, b.end)
                for b in intervals
            )
            assert (candidate in returned) is not collides, candidate
            candidate += timedelta(minutes=30)

    def test_grid_steps_in_absolute_time_across_dst(self):
        """Spring-forward night in Toronto: the grid keeps exact 30 minute steps."""
        win = TimeWindow(
            start=pendulum.parse("2025-03-09T00:00:00-05:00"),
            end=pendulum.parse("2025-03-09T04:00:00-04:00"),
        )

        slots = self.overrun_calculator.scan_grid(win, [])

        # Three real hours between 05:00Z and 08:00Z
        assert len(slots) == 6
        gaps = {b.start - a.start for a, b in zip(slots, slots[1:])}
        assert gaps == {timedelta(minutes=30)}
        assert slots[0].start == pendulum.parse("2025-03-09T05:00:00Z")

    def test_grid_stops_at_end_of_representable_range(self, caplog):
        """A scan at the end of year 9999 stops instead of failing."""
        win = TimeWindow(
            start=pendulum.datetime(9999, 12, 31, 22, 0, tz="UTC"),
            end=pendulum.datetime(9999, 12, 31, 23, 59, 59, 999999, tz="UTC"),
        )

        with caplog.at_level(logging.ERROR):
            slots = self.calculator.scan_grid(win, [])

        assert starts(slots) == [
            pendulum.datetime(9999, 12, 31, 22, 0, tz="UTC"),
            pendulum.datetime(9999, 12, 31, 22, 30, tz="UTC"),
        ]
        assert "stopping grid scan" in caplog.text

    def test_degenerate_window(self):
        assert self.calculator.find_available_slots(window("11:00", "09:00"), []) == []


class TestIdempotence:
    """Running a strategy twice on the same input gives the same result."""

    def test_both_strategies_are_repeatable(self):
        win = window("09:00", "17:00")
        intervals = busy(("10:00", "11:00"), ("10:30", "12:00"), ("15:00", "15:30"))

        for strategy in Strategy:
            calculator = SlotCalculator(SlotOptions(strategy=strategy))
            first = calculator.find_available_slots(win, intervals)
            second = calculator.find_available_slots(win, intervals)

            assert first == second
            assert all(isinstance(slot, Slot) for slot in first)
