import io
import struct

import pytest

from qtlogkit.appender import AppenderError, Layout, Level, LoggingEvent
from qtlogkit.binary_event import BinaryLoggingEvent
from qtlogkit.binary_layout import BinaryLayout
from qtlogkit.binary_writer import BinaryWriterAppender, ByteOrder, DataStream


class UpperLayout(Layout):
    def format(self, event):
        return event.message.upper()


class FailingDevice:
    def write(self, data):
        raise OSError("disk full")

    def flush(self):
        raise OSError("disk full")


def make(layout=None, order=ByteOrder.LITTLE_ENDIAN):
    buf = io.BytesIO()
    appender = BinaryWriterAppender(layout=layout)
    appender.set_writer(DataStream(buf, order))
    appender.activate_options()
    return appender, buf


def test_write_bytes_little_endian_prefix():
    buf = io.BytesIO()
    DataStream(buf, ByteOrder.LITTLE_ENDIAN).write_bytes(b"abc")
    assert buf.getvalue() == b"\x03\x00\x00\x00abc"


def test_write_string_big_endian_utf16():
    buf = io.BytesIO()
    DataStream(buf).write_string("hi")
    assert buf.getvalue() == b"\x00\x00\x00\x04\x00h\x00i"


def test_write_raw_has_no_prefix():
    buf = io.BytesIO()
    DataStream(buf).write_raw(b"xyz")
    assert buf.getvalue() == b"xyz"


def test_data_stream_keeps_error():
    stream = DataStream(FailingDevice())
    stream.write_bytes(b"a")
    assert isinstance(stream.error, OSError)
    assert stream.ok is False


def test_activation_without_writer_raises():
    appender = BinaryWriterAppender()
    with pytest.raises(AppenderError) as info:
        appender.activate_options()
    assert info.value.code == "APPENDER_ACTIVATE_MISSING_WRITER_ERROR"
    assert appender.is_active is False


def test_check_entry_conditions_without_writer():
    appender = BinaryWriterAppender()
    assert appender.check_entry_conditions() is False
    assert appender.requires_layout is False


def test_binary_event_without_layout():
    appender, buf = make()
    appender.do_append(BinaryLoggingEvent(Level.INFO, b"abc"))
    data = buf.getvalue()
    assert struct.unpack("<I", data[:4])[0] == 3
    assert data[4:] == b"abc"


def test_text_event_without_layout_writes_message():
    appender, buf = make()
    appender.do_append(LoggingEvent(level=Level.INFO, message="hello"))
    expected = io.BytesIO()
    DataStream(expected, ByteOrder.LITTLE_ENDIAN).write_string("hello")
    assert buf.getvalue() == expected.getvalue()


def test_text_event_with_text_layout_is_formatted():
    appender, buf = make(layout=UpperLayout())
    appender.do_append(LoggingEvent(level=Level.INFO, message="hello"))
    expected = io.BytesIO()
    DataStream(expected, ByteOrder.LITTLE_ENDIAN).write_string("HELLO")
    assert buf.getvalue() == expected.getvalue()


def test_text_event_with_binary_layout_writes_plain_message():
    layout = BinaryLayout()
    appender, buf = make(layout=layout)
    appender.do_append(LoggingEvent(level=Level.INFO, message="abc"))
    expected = io.BytesIO()
    DataStream(expected, ByteOrder.LITTLE_ENDIAN).write_string("abc")
    assert buf.getvalue() == expected.getvalue()


def test_header_and_footer_from_binary_layout():
    layout = BinaryLayout()
    layout.binary_header = b"HEAD"
    layout.binary_footer = b"FOOT"
    appender, buf = make(layout=layout)
    assert buf.getvalue() == b"HEAD"
    appender.do_append(BinaryLoggingEvent(Level.INFO, b"zz"))
    appender.close()
    data = buf.getvalue()
    assert data.startswith(b"HEAD")
    assert data.endswith(b"FOOT")
    assert b"zz" in data
    assert appender.is_closed
    assert appender.writer is None


def test_replacing_writer_writes_footer_to_old_one():
    layout = BinaryLayout()
    layout.binary_footer = b"END"
    appender, first = make(layout=layout)
    second = io.BytesIO()
    appender.set_writer(DataStream(second))
    assert first.getvalue() == b"END"
    assert second.getvalue() == b""


def test_inactive_appender_writes_nothing():
    buf = io.BytesIO()
    appender = BinaryWriterAppender(DataStream(buf))
    appender.do_append(BinaryLoggingEvent(Level.INFO, b"abc"))
    assert buf.getvalue() == b""


def test_threshold_blocks_lower_levels():
    appender, buf = make()
    appender.threshold = Level.ERROR
    appender.do_append(BinaryLoggingEvent(Level.INFO, b"abc"))
    assert buf.getvalue() == b""
    appender.do_append(BinaryLoggingEvent(Level.FATAL, b"abc"))
    assert buf.getvalue().endswith(b"abc")