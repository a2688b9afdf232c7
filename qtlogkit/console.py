"""Appenders that write formatted events to standard output or error."""

from __future__ import annotations

import sys
from enum import Enum
from typing import TextIO

from .appender import AppenderError, AppenderSkeleton, Layout, LoggingEvent


class Target(Enum):
    """The console stream an appender writes to."""

    STDOUT_TARGET = "STDOUT_TARGET"
    STDERR_TARGET = "STDERR_TARGET"


class ConsoleAppender(AppenderSkeleton):
    """Writes events, formatted by its layout, to stdout or stderr.

    The stream is looked up when the appender is activated, so a replaced
    ``sys.stdout`` or ``sys.stderr`` is honoured. The appender never closes
    the console stream itself.
    """

    def __init__(
        self,
        layout: Layout | None = None,
        target: Target | str = Target.STDOUT_TARGET,
    ) -> None:
        super().__init__(layout, active=False)
        self._target = Target.STDOUT_TARGET
        self._stream: TextIO | None = None
        self.immediate_flush = True
        self.set_target(target)

    @property
    def requires_layout(self) -> bool:
        return True

    @property
    def target(self) -> str:
        """The target's name: ``STDOUT_TARGET`` or ``STDERR_TARGET``."""
        return self._target.value

    @target.setter
    def target(self, value: Target | str) -> None:
        self.set_target(value)

    @property
    def writer(self) -> TextIO | None:
        """The stream written to, or None before activation."""
        return self._stream

    def set_target(self, target: Target | str) -> None:
        """Set the target from a ``Target`` or its name.

        An unknown name leaves the target unchanged.
        """
        if isinstance(target, Target):
            self._target = target
            return
        key = str(target).strip().upper()
        try:
            self._target = Target[key]
        except KeyError:
            self._logger.warning(
                "Invalid target '%s' for appender '%s'", target, self.name
            )

    def activate_options(self) -> None:
        with self._lock:
            self._close_stream()
            if self._target is Target.STDOUT_TARGET:
                self._stream = sys.stdout
            else:
                self._stream = sys.stderr
            if self._stream is None:
                raise AppenderError(
                    f"Activation of Appender '{self.name}' that requires writer "
                    "and has no writer set",
                    "APPENDER_ACTIVATE_MISSING_WRITER_ERROR",
                )
            super().activate_options()

    def close(self) -> None:
        with self._lock:
            if not self.is_closed:
                self._close_stream()
            super().close()

    def _close_stream(self) -> None:
        self._stream = None

    def check_entry_conditions(self) -> bool:
        if self._stream is None:
            self._report(
                "APPENDER_USE_MISSING_WRITER_ERROR",
                f"Use of appender '{self.name}' without a writer set",
            )
            return False
        return super().check_entry_conditions()

    def append(self, event: LoggingEvent) -> None:
        text = self.layout.format(event)
        try:
            self._stream.write(text)
            if self.immediate_flush:
                self._stream.flush()
        except (OSError, ValueError) as exc:
            self._report(
                "APPENDER_WRITING_ERROR",
                f"Unable to write to the console for appender '{self.name}': {exc}",
            )


class ColorConsoleAppender(ConsoleAppender):
    """A console appender for layouts that emit ANSI colour sequences.

    The escape sequences in the formatted text are written through to the
    terminal unchanged, which renders them as colours.
    """