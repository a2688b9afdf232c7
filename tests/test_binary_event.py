from qtlogkit.appender import Level, LoggingEvent
from qtlogkit.binary_event import BINARY_MARKER, BinaryLoggingEvent


def test_marker_is_the_fixed_text():
    assert BinaryLoggingEvent.binary_marker() == "@@@ binary message @@@"
    assert BINARY_MARKER == BinaryLoggingEvent.binary_marker()


def test_message_is_marker_and_payload_is_kept():
    event = BinaryLoggingEvent(Level.INFO, b"\x00\x01\x02", "net")
    assert event.message == BINARY_MARKER
    assert event.binary_message == b"\x00\x01\x02"
    assert event.logger_name == "net"
    assert event.level is Level.INFO


def test_to_string_is_level_and_hex():
    event = BinaryLoggingEvent(Level.INFO, b"\x01\xab")
    assert event.to_string() == "INFO:01ab"
    assert str(event) == event.to_string()


def test_to_string_of_empty_payload_ends_with_colon():
    event = BinaryLoggingEvent(Level.ERROR, b"")
    assert event.to_string() == Level.ERROR.name + ":"


def test_default_event_has_null_level_and_empty_payload():
    event = BinaryLoggingEvent()
    assert event.level is Level.NULL
    assert event.binary_message == b""


def test_explicit_fields_are_stored():
    event = BinaryLoggingEvent(
        Level.WARN,
        b"x",
        "a.b",
        ndc="ctx",
        properties={"k": "v"},
        thread_name="worker",
        timestamp=1234,
    )
    assert event.ndc == "ctx"
    assert event.properties == {"k": "v"}
    assert event.thread_name == "worker"
    assert event.timestamp == 1234


def test_properties_are_copied():
    props = {"k": "v"}
    event = BinaryLoggingEvent(Level.INFO, b"", properties=props)
    props["k"] = "changed"
    assert event.properties == {"k": "v"}


def test_equality_includes_payload():
    first = BinaryLoggingEvent(Level.INFO, b"a", thread_name="t", timestamp=5)
    same = BinaryLoggingEvent(Level.INFO, b"a", thread_name="t", timestamp=5)
    other = BinaryLoggingEvent(Level.INFO, b"b", thread_name="t", timestamp=5)
    assert first == same
    assert not first == other


def test_is_a_logging_event():
    event = BinaryLoggingEvent(Level.DEBUG, bytearray(b"zz"))
    assert isinstance(event, LoggingEvent)
    assert event.binary_message == b"zz"