"""Core logging types and the base appender implementation."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Level(IntEnum):
    """Severity of a logging event; higher values are more severe."""

    NULL = 0
    ALL = 32
    TRACE = 64
    DEBUG = 96
    INFO = 128
    WARN = 150
    ERROR = 182
    FATAL = 214
    OFF = 255

    def to_string(self) -> str:
        """Return the level's name as used in log output."""
        return self.name

    def __str__(self) -> str:
        return self.name


class Decision(Enum):
    """Outcome of a filter's decision about an event."""

    ACCEPT = "accept"
    DENY = "deny"
    NEUTRAL = "neutral"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _thread_name() -> str:
    return threading.current_thread().name


@dataclass
class LoggingEvent:
    """A single message sent through a logger to its appenders."""

    level: Level
    message: str
    logger_name: str = ""
    ndc: str = ""
    properties: dict[str, str] = field(default_factory=dict)
    thread_name: str = field(default_factory=_thread_name)
    timestamp: int = field(default_factory=_now_ms)


class Filter:
    """A link in an appender's filter chain.

    The base filter is neutral about every event; subclasses override
    ``decide``.
    """

    def __init__(self) -> None:
        self.next: Filter | None = None

    def decide(self, event: LoggingEvent) -> Decision:
        """Return the decision for ``event``."""
        return Decision.NEUTRAL


class Layout(ABC):
    """Turns a logging event into text."""

    def __init__(self) -> None:
        self.name = ""
        self.header = ""
        self.footer = ""

    @abstractmethod
    def format(self, event: LoggingEvent) -> str:
        """Return the text for ``event``."""

    def content_type(self) -> str:
        """Return the MIME type of the formatted output."""
        return "text/plain"

    def activate_options(self) -> None:
        """Apply the layout's settings; nothing to do by default."""


class AppenderError(Exception):
    """Raised when an appender cannot be configured or used."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class Appender(ABC):
    """Base class of everything that receives logging events."""

    @property
    @abstractmethod
    def requires_layout(self) -> bool:
        """Whether the appender needs a layout to work."""

    @abstractmethod
    def do_append(self, event: LoggingEvent) -> None:
        """Deliver ``event`` to the appender."""

    @abstractmethod
    def close(self) -> None:
        """Release the appender's resources."""

    @abstractmethod
    def add_filter(self, filter: Filter | None) -> None:
        """Append ``filter`` to the appender's filter chain."""

    @abstractmethod
    def clear_filters(self) -> None:
        """Remove all filters."""

    @property
    def _logger(self) -> logging.Logger:
        return logging.getLogger(f"{__name__}.{type(self).__name__}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AppenderSkeleton(Appender):
    """General appender behaviour: activation, threshold, filters, guards.

    Subclasses implement ``append``. All public operations are thread-safe.
    """

    def __init__(self, layout: Layout | None = None, active: bool = True) -> None:
        self._lock = threading.RLock()
        self._in_append = False
        self._active = active
        self._closed = False
        self._layout = layout
        self._threshold = Level.NULL
        self._name = ""
        self._head_filter: Filter | None = None
        self._tail_filter: Filter | None = None

    @property
    def name(self) -> str:
        with self._lock:
            return self._name

    @name.setter
    def name(self, value: str) -> None:
        with self._lock:
            self._name = value

    @property
    def layout(self) -> Layout | None:
        with self._lock:
            return self._layout

    @layout.setter
    def layout(self, value: Layout | None) -> None:
        with self._lock:
            self._layout = value

    @property
    def threshold(self) -> Level:
        return self._threshold

    @threshold.setter
    def threshold(self, value: Level) -> None:
        self._threshold = Level(value)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def filter(self) -> Filter | None:
        """The first filter of the chain, or None."""
        with self._lock:
            return self._head_filter

    def activate_options(self) -> None:
        """Activate the appender; raises if a required layout is missing."""
        with self._lock:
            if self.requires_layout and self.layout is None:
                raise AppenderError(
                    f"Activation of appender '{self.name}' that requires layout "
                    "and has no layout set",
                    "APPENDER_ACTIVATE_MISSING_LAYOUT_ERROR",
                )
            self._active = True

    def add_filter(self, filter: Filter | None) -> None:
        if filter is None:
            self._logger.warning("Adding null Filter to Appender '%s'", self.name)
            return
        with self._lock:
            if self._tail_filter is None:
                self._head_filter = filter
            else:
                self._tail_filter.next = filter
            self._tail_filter = filter

    def clear_filters(self) -> None:
        with self._lock:
            self._head_filter = None
            self._tail_filter = None

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._active = False

    def do_append(self, event: LoggingEvent) -> None:
        """Check conditions, threshold and filters, then call ``append``.

        Calls from another thread wait on the lock; a call from the same
        thread while appending (for example an appender logging through a
        logger that uses it) is dropped.
        """
        with self._lock:
            if self._in_append:
                return
            self._in_append = True
            try:
                if not self.check_entry_conditions():
                    return
                if not self.is_as_severe_as_threshold(event.level):
                    return
                current = self._head_filter
                while current is not None:
                    decision = current.decide(event)
                    if decision is Decision.ACCEPT:
                        break
                    if decision is Decision.DENY:
                        return
                    current = current.next
                self.append(event)
            finally:
                self._in_append = False

    def _report(self, code: str, message: str) -> None:
        self._logger.error("%s (%s)", message, code)

    def check_entry_conditions(self) -> bool:
        """Return whether ``append`` may be used; log the reason if not."""
        if not self.is_active:
            self._report(
                "APPENDER_NOT_ACTIVATED_ERROR",
                f"Use of non activated appender '{self.name}'",
            )
            return False
        if self.is_closed:
            self._report(
                "APPENDER_CLOSED_ERROR",
                f"Use of closed appender '{self.name}'",
            )
            return False
        if self.requires_layout and self.layout is None:
            self._report(
                "APPENDER_USE_MISSING_LAYOUT_ERROR",
                f"Use of appender '{self.name}' that requires layout and has no layout set",
            )
            return False
        return True

    def is_as_severe_as_threshold(self, level: Level) -> bool:
        return self._threshold <= level

    @abstractmethod
    def append(self, event: LoggingEvent) -> None:
        """Write ``event``; called once all checks have passed."""