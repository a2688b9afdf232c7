"""A file appender that writes to a new file each day."""

from __future__ import annotations

import fnmatch
import os
import re
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time, timedelta

from .appender import Layout, LoggingEvent
from .file_appender import FileAppender

DEFAULT_DATE_PATTERN = "_yyyy_MM_dd"

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_WEEKDAYS = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
]
_RUN_LIMITS = {"M": 4, "d": 4, "h": 2, "H": 2, "m": 2, "s": 2, "w": 2}
_AMPM = {"AP", "ap", "A", "a"}


def _tokenize(pattern: str) -> list[tuple[bool, str]]:
    """Split a date pattern into (is_field, text) pairs."""
    tokens: list[tuple[bool, str]] = []

    def literal(text: str) -> None:
        if tokens and not tokens[-1][0]:
            tokens[-1] = (False, tokens[-1][1] + text)
        else:
            tokens.append((False, text))

    pos = 0
    length = len(pattern)
    while pos < length:
        char = pattern[pos]
        if char == "'":
            if pattern.startswith("''", pos):
                literal("'")
                pos += 2
                continue
            pos += 1
            text = []
            while pos < length:
                if pattern[pos] == "'":
                    if pattern.startswith("''", pos):
                        text.append("'")
                        pos += 2
                        continue
                    pos += 1
                    break
                text.append(pattern[pos])
                pos += 1
            literal("".join(text))
            continue
        run = len(pattern[pos:]) - len(pattern[pos:].lstrip(char))
        if char == "y":
            if run >= 4:
                tokens.append((True, "yyyy"))
                pos += 4
            elif run >= 2:
                tokens.append((True, "yy"))
                pos += 2
            else:
                literal("y")
                pos += 1
        elif char == "z":
            size = 3 if run >= 3 else 1
            tokens.append((True, "z" * size))
            pos += size
        elif char in "Aa":
            pair = "AP" if char == "A" else "ap"
            if pattern.startswith(pair, pos):
                tokens.append((True, pair))
                pos += 2
            else:
                tokens.append((True, char))
                pos += 1
        elif char in _RUN_LIMITS:
            size = min(run, _RUN_LIMITS[char])
            tokens.append((True, char * size))
            pos += size
        else:
            literal(char)
            pos += 1
    return tokens


def format_date_pattern(moment: date | datetime, pattern: str) -> str:
    """Format ``moment`` with a Qt style date/time pattern.

    Text in single quotes is copied literally and ``''`` stands for one
    quote. ``w``/``ww`` give the ISO week number. A plain date is treated
    as midnight of that day.
    """
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time())
    tokens = _tokenize(pattern)
    twelve_hour = any(is_field and text in _AMPM for is_field, text in tokens)
    hour12 = moment.hour % 12 or 12
    week = moment.isocalendar()[1]
    values = {
        "yyyy": f"{moment.year:04d}",
        "yy": f"{moment.year % 100:02d}",
        "M": str(moment.month),
        "MM": f"{moment.month:02d}",
        "MMM": _MONTHS[moment.month - 1][:3],
        "MMMM": _MONTHS[moment.month - 1],
        "d": str(moment.day),
        "dd": f"{moment.day:02d}",
        "ddd": _WEEKDAYS[moment.weekday()][:3],
        "dddd": _WEEKDAYS[moment.weekday()],
        "h": str(hour12 if twelve_hour else moment.hour),
        "hh": f"{hour12 if twelve_hour else moment.hour:02d}",
        "H": str(moment.hour),
        "HH": f"{moment.hour:02d}",
        "m": str(moment.minute),
        "mm": f"{moment.minute:02d}",
        "s": str(moment.second),
        "ss": f"{moment.second:02d}",
        "z": str(moment.microsecond // 1000),
        "zzz": f"{moment.microsecond // 1000:03d}",
        "AP": "PM" if moment.hour >= 12 else "AM",
        "A": "PM" if moment.hour >= 12 else "AM",
        "ap": "pm" if moment.hour >= 12 else "am",
        "a": "pm" if moment.hour >= 12 else "am",
        "w": str(week),
        "ww": f"{week:02d}",
    }
    return "".join(values[text] if is_field else text for is_field, text in tokens)


def _alternation(names: list[str]) -> str:
    return "(" + "|".join(re.escape(name) for name in names) + ")"


def parse_date_pattern(text: str, pattern: str) -> date | None:
    """Read a date written with ``pattern``; return None if it is not one.

    Fields that are not part of a date are matched but ignored. A missing
    year defaults to 1900, a missing month or day to 1.
    """
    parts: list[str] = []
    handlers: dict[str, tuple[str, object]] = {}
    for index, (is_field, token) in enumerate(_tokenize(pattern)):
        if not is_field:
            parts.append(re.escape(token))
            continue
        group = f"g{index}"
        if token == "yyyy":
            regex, handler = r"\d{4}", ("year", int)
        elif token == "yy":
            regex, handler = r"\d{2}", ("year", lambda v: 1900 + int(v))
        elif token in ("M", "d"):
            regex = r"\d{1,2}"
            handler = ("month" if token == "M" else "day", int)
        elif token in ("MM", "dd"):
            regex = r"\d{2}"
            handler = ("month" if token == "MM" else "day", int)
        elif token in ("MMM", "MMMM"):
            names = [m[:3] if token == "MMM" else m for m in _MONTHS]
            regex = _alternation(names)[1:-1]
            handler = ("month", lambda v, n=names: n.index(v) + 1)
        elif token in ("ddd", "dddd"):
            names = [d[:3] if token == "ddd" else d for d in _WEEKDAYS]
            regex, handler = _alternation(names)[1:-1], None
        elif token in _AMPM:
            regex, handler = "(?:[Aa][Mm]|[Pp][Mm])", None
        elif token == "zzz":
            regex, handler = r"\d{3}", None
        elif token == "z":
            regex, handler = r"\d{1,3}", None
        elif len(token) == 2:
            regex, handler = r"\d{2}", None
        else:
            regex, handler = r"\d{1,2}", None
        parts.append(f"(?P<{group}>{regex})")
        if handler is not None:
            handlers[group] = handler
    match = re.fullmatch("".join(parts), text)
    if match is None:
        return None
    fields = {"year": 1900, "month": 1, "day": 1}
    for group, (key, convert) in handlers.items():
        fields[key] = convert(match.group(group))
    try:
        return date(fields["year"], fields["month"], fields["day"])
    except ValueError:
        return None


def delete_obsolete_files(
    current_date: date,
    date_pattern: str,
    keep_days: int,
    original_filename: str,
) -> list[str]:
    """Delete daily log files older than ``keep_days`` days.

    The date of each file is read from its name, not from its attributes.
    Returns the paths that were removed.
    """
    if keep_days <= 0 or not original_filename:
        return []
    absolute = os.path.abspath(original_filename)
    directory = os.path.dirname(absolute)
    base, _, suffix = os.path.basename(absolute).partition(".")
    wildcard = "*." + suffix
    extractor = re.compile(re.escape(base) + "(.*)" + re.escape("." + suffix))
    start_of_logging = current_date - timedelta(days=keep_days)
    removed: list[str] = []
    try:
        entries = list(os.scandir(directory))
    except OSError:
        return removed
    for entry in entries:
        if entry.is_symlink() or not entry.is_file():
            continue
        if not fnmatch.fnmatchcase(entry.name, wildcard):
            continue
        match = extractor.fullmatch(entry.name)
        if match is None:
            continue
        created = parse_date_pattern(match.group(1), date_pattern)
        if created is not None and created < start_of_logging:
            try:
                os.remove(entry.path)
            except OSError:
                continue
            removed.append(entry.path)
    return removed


class DateRetriever(ABC):
    """Source of the current date for a ``DailyFileAppender``."""

    @abstractmethod
    def current_date(self) -> date:
        """Return today's date."""


class DefaultDateRetriever(DateRetriever):
    """Reports the date of the system clock."""

    def current_date(self) -> date:
        return date.today()


class DailyFileAppender(FileAppender):
    """A file appender that starts a new file for each day.

    The date, formatted with ``date_pattern``, is inserted between the base
    name and the suffix of the configured file name. With a positive
    ``keep_days`` files older than that many days are deleted on activation
    and in the background on each change of day.
    """

    def __init__(
        self,
        file: str = "",
        layout: Layout | None = None,
        date_pattern: str = DEFAULT_DATE_PATTERN,
        keep_days: int = 0,
    ) -> None:
        super().__init__(file, layout)
        self._date_pattern = date_pattern or DEFAULT_DATE_PATTERN
        self._keep_days = keep_days
        self._date_retriever: DateRetriever = DefaultDateRetriever()
        self._last_date: date | None = None
        self._original_filename = ""
        self._cleanup: ThreadPoolExecutor | None = None

    @property
    def date_pattern(self) -> str:
        with self._lock:
            return self._date_pattern

    @date_pattern.setter
    def date_pattern(self, value: str) -> None:
        with self._lock:
            self._date_pattern = value

    @property
    def keep_days(self) -> int:
        with self._lock:
            return self._keep_days

    @keep_days.setter
    def keep_days(self, value: int) -> None:
        with self._lock:
            self._keep_days = value

    @property
    def date_retriever(self) -> DateRetriever:
        with self._lock:
            return self._date_retriever

    @date_retriever.setter
    def date_retriever(self, value: DateRetriever) -> None:
        with self._lock:
            self._date_retriever = value

    def activate_options(self) -> None:
        with self._lock:
            self.close_file()
            self._set_log_file_for_current_day()
            delete_obsolete_files(
                self._date_retriever.current_date(),
                self._date_pattern,
                self._keep_days,
                self._original_filename,
            )
            super().activate_options()

    def append(self, event: LoggingEvent) -> None:
        current = self._date_retriever.current_date()
        if current != self._last_date:
            self._roll_over()
            if self._cleanup is None:
                self._cleanup = ThreadPoolExecutor(max_workers=1)
            self._cleanup.submit(
                delete_obsolete_files,
                current,
                self._date_pattern,
                self._keep_days,
                self._original_filename,
            )
        if self._handle is None:
            return
        super().append(event)

    def close(self) -> None:
        """Wait for pending clean-ups, then close the file."""
        with self._lock:
            if self._cleanup is not None:
                self._cleanup.shutdown(wait=True)
                self._cleanup = None
            super().close()

    def _dated_filename(self) -> str:
        absolute = os.path.abspath(self._original_filename)
        base, _, suffix = os.path.basename(absolute).partition(".")
        stamp = format_date_pattern(self._last_date, self._date_pattern)
        return os.path.join(os.path.dirname(absolute), f"{base}{stamp}.{suffix}")

    def _set_log_file_for_current_day(self) -> None:
        if not self._original_filename:
            self._original_filename = self.file
        self._last_date = self._date_retriever.current_date()
        self.file = self._dated_filename()

    def _roll_over(self) -> None:
        self.close_file()
        self._set_log_file_for_current_day()
        self.open_file()