"""A file appender that rolls its file over at a fixed frequency."""

from __future__ import annotations

import calendar
import os
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Callable

from .appender import AppenderError, Layout, LoggingEvent
from .daily_file import format_date_pattern
from .file_appender import FileAppender


class RolloverFrequency(IntEnum):
    """How often the file is rolled over."""

    MINUTELY_ROLLOVER = 0
    HOURLY_ROLLOVER = 1
    HALFDAILY_ROLLOVER = 2
    DAILY_ROLLOVER = 3
    WEEKLY_ROLLOVER = 4
    MONTHLY_ROLLOVER = 5


_PATTERNS = {
    RolloverFrequency.MINUTELY_ROLLOVER: "'.'yyyy-MM-dd-hh-mm",
    RolloverFrequency.HOURLY_ROLLOVER: "'.'yyyy-MM-dd-hh",
    RolloverFrequency.HALFDAILY_ROLLOVER: "'.'yyyy-MM-dd-a",
    RolloverFrequency.DAILY_ROLLOVER: "'.'yyyy-MM-dd",
    RolloverFrequency.WEEKLY_ROLLOVER: "'.'yyyy-ww",
    RolloverFrequency.MONTHLY_ROLLOVER: "'.'yyyy-MM",
}


def _add_months(moment: datetime, months: int) -> datetime:
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


_PROBES: list[tuple[RolloverFrequency, Callable[[datetime], datetime]]] = [
    (RolloverFrequency.MINUTELY_ROLLOVER, lambda t: t + timedelta(seconds=60)),
    (RolloverFrequency.HOURLY_ROLLOVER, lambda t: t + timedelta(hours=1)),
    (RolloverFrequency.HALFDAILY_ROLLOVER, lambda t: t + timedelta(hours=12)),
    (RolloverFrequency.DAILY_ROLLOVER, lambda t: t + timedelta(days=1)),
    (RolloverFrequency.WEEKLY_ROLLOVER, lambda t: t + timedelta(days=7)),
    (RolloverFrequency.MONTHLY_ROLLOVER, lambda t: _add_months(t, 1)),
]


class DailyRollingFileAppender(FileAppender):
    """Rolls the log file over at a frequency read from the date pattern.

    On roll-over the current file is renamed to its name plus the date
    suffix of the interval that ended, and a new file is started.
    """

    def __init__(
        self,
        file: str = "",
        layout: Layout | None = None,
        date_pattern: RolloverFrequency | str = RolloverFrequency.DAILY_ROLLOVER,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(file, layout)
        self._date_pattern = ""
        self._frequency = RolloverFrequency.DAILY_ROLLOVER
        self._active_date_pattern = ""
        self._rollover_time: datetime | None = None
        self._rollover_suffix = ""
        self._clock = clock or datetime.now
        self.set_date_pattern(date_pattern)

    @property
    def date_pattern(self) -> str:
        with self._lock:
            return self._date_pattern

    @date_pattern.setter
    def date_pattern(self, value: RolloverFrequency | str) -> None:
        self.set_date_pattern(value)

    @property
    def frequency(self) -> RolloverFrequency:
        return self._frequency

    @property
    def rollover_time(self) -> datetime | None:
        return self._rollover_time

    @property
    def rollover_suffix(self) -> str:
        return self._rollover_suffix

    def set_date_pattern(self, pattern: RolloverFrequency | str) -> None:
        """Set the pattern from a frequency constant or a pattern string."""
        if isinstance(pattern, RolloverFrequency):
            pattern = _PATTERNS[pattern]
        with self._lock:
            self._date_pattern = pattern

    def compute_frequency(self) -> RolloverFrequency:
        """Derive the frequency from the date pattern.

        Raises ``AppenderError`` if the pattern changes in none of the
        probed intervals; the appender then has no active pattern.
        """
        start = datetime(1999, 1, 1, 0, 0)
        start_text = format_date_pattern(start, self._date_pattern)
        self._active_date_pattern = ""
        for frequency, step in _PROBES:
            if format_date_pattern(step(start), self._date_pattern) != start_text:
                self._frequency = frequency
                break
        else:
            raise AppenderError(
                f"The pattern '{self._date_pattern}' does not specify a frequency "
                f"for appender '{self.name}'",
                "APPENDER_INVALID_PATTERN_ERROR",
            )
        self._active_date_pattern = self._date_pattern
        self._logger.debug(
            "Frequency set to %s using date pattern %s",
            self._frequency.name,
            self._active_date_pattern,
        )
        return self._frequency

    def compute_rollover_time(self, now: datetime | None = None) -> datetime:
        """Compute the end of the interval holding ``now`` and its suffix."""
        if not self._active_date_pattern:
            raise AppenderError(
                f"Use of appender '{self.name}' without having a valid date "
                "pattern set",
                "APPENDER_USE_INVALID_PATTERN_ERROR",
            )
        if now is None:
            now = self._clock()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        frequency = self._frequency
        if frequency is RolloverFrequency.MINUTELY_ROLLOVER:
            start = now.replace(second=0, microsecond=0)
            rollover = start + timedelta(seconds=60)
        elif frequency is RolloverFrequency.HOURLY_ROLLOVER:
            start = now.replace(minute=0, second=0, microsecond=0)
            rollover = start + timedelta(hours=1)
        elif frequency is RolloverFrequency.HALFDAILY_ROLLOVER:
            start = midnight.replace(hour=12 if now.hour >= 12 else 0)
            rollover = start + timedelta(hours=12)
        elif frequency is RolloverFrequency.DAILY_ROLLOVER:
            start = midnight
            rollover = start + timedelta(days=1)
        elif frequency is RolloverFrequency.WEEKLY_ROLLOVER:
            # Weeks start on Sunday.
            day = now.isoweekday() % 7
            start = midnight - timedelta(days=day)
            rollover = start + timedelta(days=7)
        else:
            start = midnight.replace(day=1)
            rollover = _add_months(start, 1)
        self._rollover_time = rollover
        self._rollover_suffix = format_date_pattern(start, self._active_date_pattern)
        self._logger.debug(
            "Computing roll over time from %s: The interval start time is %s. "
            "The roll over time is %s",
            now, start, rollover,
        )
        return rollover

    def activate_options(self) -> None:
        with self._lock:
            self.compute_frequency()
            self.compute_rollover_time()
            super().activate_options()

    def check_entry_conditions(self) -> bool:
        if not self._active_date_pattern:
            self._report(
                "APPENDER_USE_INVALID_PATTERN_ERROR",
                f"Use of appender '{self.name}' without having a valid date "
                "pattern set",
            )
            return False
        return super().check_entry_conditions()

    def append(self, event: LoggingEvent) -> None:
        if self._rollover_time is not None and self._clock() > self._rollover_time:
            self.roll_over()
        if self._handle is None:
            return
        super().append(event)

    def roll_over(self) -> None:
        """Rename the current file with the finished interval's suffix."""
        previous_suffix = self._rollover_suffix
        self.compute_rollover_time()
        if previous_suffix == self._rollover_suffix:
            return
        self.close_file()
        target = self.file + previous_suffix
        if os.path.exists(target) and not self.remove_file(target):
            return
        if not self.rename_file(self.file, target):
            return
        self.open_file()