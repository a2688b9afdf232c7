import io
import sys

import pytest

from qtlogkit.appender import AppenderError, Layout, Level, LoggingEvent
from qtlogkit.console import ColorConsoleAppender, ConsoleAppender, Target


class MessageLayout(Layout):
    def format(self, event):
        return f"{event.level.name}:{event.message}\n"


def make_event(message="hello", level=Level.INFO):
    return LoggingEvent(level=level, message=message)


def test_default_target_is_stdout():
    appender = ConsoleAppender(MessageLayout())
    assert appender.target == "STDOUT_TARGET"


def test_set_target_from_enum_and_string():
    appender = ConsoleAppender(MessageLayout())
    appender.set_target(Target.STDERR_TARGET)
    assert appender.target == "STDERR_TARGET"
    appender.set_target("stdout_target")
    assert appender.target == "STDOUT_TARGET"


def test_invalid_target_name_is_ignored():
    appender = ConsoleAppender(MessageLayout(), target="STDERR_TARGET")
    appender.set_target("nowhere")
    assert appender.target == "STDERR_TARGET"


def test_writes_to_stdout(capsys):
    appender = ConsoleAppender(MessageLayout())
    appender.activate_options()
    appender.do_append(make_event("hello"))
    captured = capsys.readouterr()
    assert captured.out == "INFO:hello\n"
    assert captured.err == ""


def test_writes_to_stderr(capsys):
    appender = ConsoleAppender(MessageLayout(), Target.STDERR_TARGET)
    appender.activate_options()
    appender.do_append(make_event("oops", Level.ERROR))
    captured = capsys.readouterr()
    assert captured.err == "ERROR:oops\n"
    assert captured.out == ""


def test_writer_follows_replaced_stdout(monkeypatch):
    buffer = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buffer)
    appender = ConsoleAppender(MessageLayout())
    appender.activate_options()
    assert appender.writer is buffer
    appender.do_append(make_event("a"))
    appender.do_append(make_event("b"))
    assert buffer.getvalue() == "INFO:a\nINFO:b\n"


def test_not_activated_appender_writes_nothing(capsys):
    appender = ConsoleAppender(MessageLayout())
    assert appender.check_entry_conditions() is False
    appender.do_append(make_event("silent"))
    assert capsys.readouterr().out == ""


def test_closed_appender_writes_nothing(capsys):
    appender = ConsoleAppender(MessageLayout())
    appender.activate_options()
    appender.close()
    assert appender.is_closed is True
    assert appender.writer is None
    appender.do_append(make_event("after close"))
    assert capsys.readouterr().out == ""


def test_activation_without_layout_raises():
    appender = ConsoleAppender()
    with pytest.raises(AppenderError) as info:
        appender.activate_options()
    assert info.value.code == "APPENDER_ACTIVATE_MISSING_LAYOUT_ERROR"


def test_threshold_drops_lower_levels(capsys):
    appender = ConsoleAppender(MessageLayout())
    appender.threshold = Level.WARN
    appender.activate_options()
    appender.do_append(make_event("low", Level.DEBUG))
    appender.do_append(make_event("high", Level.ERROR))
    assert capsys.readouterr().out == "ERROR:high\n"


def test_color_appender_passes_escape_sequences(capsys):
    class ColorLayout(Layout):
        def format(self, event):
            return f"\033[31m{event.message}\033[0m\n"

    appender = ColorConsoleAppender(ColorLayout())
    appender.activate_options()
    appender.do_append(make_event("red"))
    assert capsys.readouterr().out == "\033[31mred\033[0m\n"