"""Layouts for binary logging events."""

from __future__ import annotations

from .appender import Layout, LoggingEvent
from .binary_event import BinaryLoggingEvent


class BinaryLayout(Layout):
    """Passes the binary payload through unchanged.

    ``binary_header`` and ``binary_footer`` are written by binary appenders
    when they open and close their output.
    """

    def __init__(self) -> None:
        super().__init__()
        self.binary_header = b""
        self.binary_footer = b""

    def binary_format(self, event: BinaryLoggingEvent) -> bytes:
        """Return the bytes for ``event``: its payload."""
        return event.binary_message

    def format(self, event: LoggingEvent) -> str:
        """A binary layout has no text form; return an empty string."""
        return ""

    def content_type(self) -> str:
        return "application/octet-stream"


class BinaryToTextLayout(Layout):
    """Renders binary events as text through a sub-layout.

    The binary marker in the sub-layout's output is replaced with the
    payload size and a spaced hex dump. Non-binary events, or any event
    when no sub-layout is set, give an empty string.
    """

    def __init__(self, sub_layout: Layout | None = None) -> None:
        super().__init__()
        self.sub_layout = sub_layout

    def format(self, event: LoggingEvent) -> str:
        if self.sub_layout is None or not isinstance(event, BinaryLoggingEvent):
            return ""
        payload = event.binary_message
        spaced = "".join(f"{byte:02x} " for byte in payload)
        replacement = f"{len(payload)} bytes: {spaced}"
        return self.sub_layout.format(event).replace(
            BinaryLoggingEvent.binary_marker(), replacement
        )