"""An appender that writes logging events to a binary data stream."""

from __future__ import annotations

import struct
from enum import Enum
from typing import BinaryIO

from .appender import AppenderError, AppenderSkeleton, Layout, LoggingEvent
from .binary_event import BinaryLoggingEvent
from .binary_layout import BinaryLayout


class ByteOrder(Enum):
    """Byte order of the length prefixes and text written to a stream."""

    BIG_ENDIAN = ">"
    LITTLE_ENDIAN = "<"


class DataStream:
    """Serialises byte strings and text onto a binary device.

    Byte strings and text are written with a 32-bit length prefix; text is
    encoded as UTF-16 in the stream's byte order. Write failures do not
    raise: the first ``OSError`` is kept in ``error``.
    """

    def __init__(
        self, device: BinaryIO, byte_order: ByteOrder = ByteOrder.BIG_ENDIAN
    ) -> None:
        self.device = device
        self.byte_order = ByteOrder(byte_order)
        self.error: OSError | None = None

    @property
    def ok(self) -> bool:
        """Whether no write has failed so far."""
        return self.error is None

    def _length(self, size: int) -> bytes:
        return struct.pack(f"{self.byte_order.value}I", size)

    def _put(self, data: bytes) -> None:
        try:
            self.device.write(data)
        except OSError as exc:
            if self.error is None:
                self.error = exc

    def write_bytes(self, data: bytes) -> None:
        """Write ``data`` preceded by its length."""
        payload = bytes(data)
        self._put(self._length(len(payload)) + payload)

    def write_string(self, text: str) -> None:
        """Write ``text`` as UTF-16 preceded by its length in bytes."""
        codec = "utf-16-be" if self.byte_order is ByteOrder.BIG_ENDIAN else "utf-16-le"
        encoded = text.encode(codec)
        self._put(self._length(len(encoded)) + encoded)

    def write_raw(self, data: bytes) -> None:
        """Write ``data`` as it is, without a length prefix."""
        self._put(bytes(data))

    def flush(self) -> None:
        """Flush the underlying device."""
        try:
            self.device.flush()
        except OSError as exc:
            if self.error is None:
                self.error = exc


class BinaryWriterAppender(AppenderSkeleton):
    """Writes events to a ``DataStream``.

    Binary events are written as byte strings, through a ``BinaryLayout``
    when one is set. Text events are written as strings, through the layout
    unless it is a binary one. The layout's binary header and footer are
    written when a writer is attached and detached.
    """

    def __init__(
        self, writer: DataStream | None = None, layout: Layout | None = None
    ) -> None:
        super().__init__(layout, active=False)
        self._writer = writer

    @property
    def requires_layout(self) -> bool:
        return False

    @property
    def writer(self) -> DataStream | None:
        return self._writer

    def set_writer(self, writer: DataStream | None) -> None:
        """Detach the current writer (writing the footer) and attach ``writer``."""
        with self._lock:
            self._close_writer()
            self._writer = writer
            self._write_header()

    def activate_options(self) -> None:
        with self._lock:
            if self._writer is None:
                raise AppenderError(
                    f"Activation of Appender '{self.name}' that requires writer "
                    "and has no writer set",
                    "APPENDER_ACTIVATE_MISSING_WRITER_ERROR",
                )
            super().activate_options()

    def close(self) -> None:
        with self._lock:
            if not self.is_closed:
                self._close_writer()
            super().close()

    def check_entry_conditions(self) -> bool:
        if self._writer is None:
            self._report(
                "APPENDER_USE_MISSING_WRITER_ERROR",
                f"Use of appender '{self.name}' without a writer set",
            )
            return False
        return super().check_entry_conditions()

    def append(self, event: LoggingEvent) -> None:
        layout = self.layout
        binary_layout = layout if isinstance(layout, BinaryLayout) else None
        writer = self._writer
        if isinstance(event, BinaryLoggingEvent):
            if binary_layout is not None:
                writer.write_bytes(binary_layout.binary_format(event))
            else:
                writer.write_bytes(event.binary_message)
        elif layout is not None and binary_layout is None:
            writer.write_string(layout.format(event))
        else:
            writer.write_string(event.message)
        self.handle_io_errors()

    def handle_io_errors(self) -> bool:
        """Report a pending I/O error; return whether there was one."""
        return False

    def _close_writer(self) -> None:
        if self._writer is None:
            return
        self._write_footer()
        self._writer = None

    def _binary_layout(self) -> BinaryLayout | None:
        layout = self.layout
        return layout if isinstance(layout, BinaryLayout) else None

    def _write_header(self) -> None:
        layout = self._binary_layout()
        if layout is not None and self._writer is not None:
            self._write_raw_data(layout.binary_header)

    def _write_footer(self) -> None:
        layout = self._binary_layout()
        if layout is not None and self._writer is not None:
            self._write_raw_data(layout.binary_footer)

    def _write_raw_data(self, data: bytes) -> None:
        if not data:
            return
        self._writer.write_raw(data)
        self.handle_io_errors()