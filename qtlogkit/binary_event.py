"""Logging events that carry a binary payload instead of text."""

from __future__ import annotations

from typing import Mapping

from .appender import Level, LoggingEvent

BINARY_MARKER = "@@@ binary message @@@"


class BinaryLoggingEvent(LoggingEvent):
    """A logging event whose payload is a byte string.

    The text message of such an event is always the binary marker, so text
    layouts can find the spot where the payload belongs.
    """

    def __init__(
        self,
        level: Level = Level.NULL,
        binary_message: bytes = b"",
        logger_name: str = "",
        *,
        ndc: str = "",
        properties: Mapping[str, str] | None = None,
        thread_name: str | None = None,
        timestamp: int | None = None,
    ) -> None:
        extra: dict[str, object] = {}
        if thread_name is not None:
            extra["thread_name"] = thread_name
        if timestamp is not None:
            extra["timestamp"] = int(timestamp)
        super().__init__(
            level=Level(level),
            message=BINARY_MARKER,
            logger_name=logger_name,
            ndc=ndc,
            properties=dict(properties or {}),
            **extra,
        )
        self.binary_message = bytes(binary_message)

    def to_string(self) -> str:
        """Return the level name and the payload in lower-case hex."""
        return f"{self.level.to_string()}:{self.binary_message.hex()}"

    @staticmethod
    def binary_marker() -> str:
        """Return the text that stands in for the payload in the message."""
        return BINARY_MARKER

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryLoggingEvent):
            return NotImplemented
        return (
            LoggingEvent.__eq__(self, other)
            and self.binary_message == other.binary_message
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"BinaryLoggingEvent(level={self.level.name}, "
            f"binary_message={self.binary_message!r}, "
            f"logger_name={self.logger_name!r}, timestamp={self.timestamp})"
        )