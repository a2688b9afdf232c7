"""A logger for binary payloads and a stream that collects them."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

from .appender import Appender, Level
from .binary_event import BinaryLoggingEvent

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_millis(timestamp: datetime | int) -> int:
    if isinstance(timestamp, datetime):
        moment = timestamp
        if moment.tzinfo is None:
            moment = moment.astimezone()
        return (moment - _EPOCH) // _MILLISECOND
    return int(timestamp)


_MILLISECOND = datetime.resolution * 1000


class BinaryLogStream:
    """Collects bytes and logs them as one event when flushed.

    Use it as a context manager to log on leaving the block, or call
    ``flush`` directly. A stream logs at most once per collected batch.
    """

    def __init__(self, logger: "BinaryLogger", level: Level) -> None:
        self._logger = logger
        self._level = Level(level)
        self._buffer = bytearray()
        self._pending = True

    def write(self, data: bytes) -> "BinaryLogStream":
        """Append ``data`` to the buffer; returns the stream for chaining."""
        self._buffer += data
        self._pending = True
        return self

    __lshift__ = write

    def flush(self) -> None:
        """Log the collected bytes, if there is anything not yet logged."""
        if not self._pending:
            return
        payload = bytes(self._buffer)
        self._buffer.clear()
        self._pending = False
        if self._logger.is_enabled_for(self._level):
            self._logger.call_appenders(
                BinaryLoggingEvent(self._level, payload, self._logger.name)
            )

    def __enter__(self) -> "BinaryLogStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.flush()


class BinaryLogger:
    """A named logger that sends binary events to its appenders.

    A level of ``Level.NULL`` means the level is inherited from the parent.
    Events go to this logger's appenders and, while ``additivity`` holds,
    to those of its ancestors.
    """

    def __init__(
        self,
        name: str,
        level: Level = Level.NULL,
        parent: "BinaryLogger | None" = None,
        additivity: bool = True,
    ) -> None:
        self.name = name
        self.level = Level(level)
        self.parent = parent
        self.additivity = additivity
        self._appenders: list[Appender] = []
        self._lock = threading.RLock()

    @property
    def appenders(self) -> tuple[Appender, ...]:
        with self._lock:
            return tuple(self._appenders)

    @property
    def effective_level(self) -> Level:
        """The first level that is set, walking up through the parents."""
        logger: BinaryLogger | None = self
        while logger is not None:
            if logger.level is not Level.NULL:
                return logger.level
            logger = logger.parent
        return Level.NULL

    def add_appender(self, appender: Appender) -> None:
        """Attach ``appender``; attaching it twice has no effect."""
        with self._lock:
            if appender not in self._appenders:
                self._appenders.append(appender)

    def remove_appender(self, appender: Appender) -> None:
        with self._lock:
            if appender in self._appenders:
                self._appenders.remove(appender)

    def is_enabled_for(self, level: Level) -> bool:
        return Level(level) >= self.effective_level

    def call_appenders(self, event: BinaryLoggingEvent) -> None:
        """Deliver ``event`` up the hierarchy until additivity stops it."""
        logger: BinaryLogger | None = self
        while logger is not None:
            for appender in logger.appenders:
                appender.do_append(event)
            if not logger.additivity:
                break
            logger = logger.parent

    def forced_log(self, level: Level, message: bytes) -> None:
        """Log ``message`` without checking the level."""
        self.call_appenders(BinaryLoggingEvent(level, message, self.name))

    def log(
        self,
        level: Level,
        message: bytes,
        timestamp: datetime | int | None = None,
    ) -> None:
        """Log ``message`` at ``level`` if enabled.

        ``timestamp`` may be a datetime or milliseconds since the epoch.
        """
        if not self.is_enabled_for(level):
            return
        if timestamp is None:
            self.forced_log(level, message)
        else:
            self.call_appenders(
                BinaryLoggingEvent(
                    level, message, self.name, timestamp=_to_millis(timestamp)
                )
            )

    def stream(self, level: Level) -> BinaryLogStream:
        return BinaryLogStream(self, level)

    def _at(self, level: Level, message: bytes | None) -> BinaryLogStream | None:
        if message is None:
            return self.stream(level)
        self.log(level, message)
        return None

    def trace(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at TRACE, or return a stream when no message is given."""
        return self._at(Level.TRACE, message)

    def debug(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at DEBUG, or return a stream when no message is given."""
        return self._at(Level.DEBUG, message)

    def info(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at INFO, or return a stream when no message is given."""
        return self._at(Level.INFO, message)

    def warn(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at WARN, or return a stream when no message is given."""
        return self._at(Level.WARN, message)

    def error(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at ERROR, or return a stream when no message is given."""
        return self._at(Level.ERROR, message)

    def fatal(self, message: bytes | None = None) -> BinaryLogStream | None:
        """Log at FATAL, or return a stream when no message is given."""
        return self._at(Level.FATAL, message)