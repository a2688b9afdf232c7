"""An appender that writes formatted logging events to a text file."""

from __future__ import annotations

import os
from typing import TextIO

from .appender import AppenderError, AppenderSkeleton, Layout, LoggingEvent


class FileAppender(AppenderSkeleton):
    """Writes events, formatted by its layout, to a file.

    The file is opened on activation, truncated unless ``append_file`` is
    set, and line buffered when ``buffered_io`` is false. A missing parent
    directory is created.
    """

    def __init__(
        self,
        file: str = "",
        layout: Layout | None = None,
        append_file: bool = False,
        buffered_io: bool = True,
    ) -> None:
        super().__init__(layout, active=False)
        self.append_file = append_file
        self.buffered_io = buffered_io
        self.immediate_flush = True
        self._file_name = os.fspath(file)
        self._handle: TextIO | None = None

    @property
    def requires_layout(self) -> bool:
        return True

    @property
    def file(self) -> str:
        with self._lock:
            return self._file_name

    @file.setter
    def file(self, value: str) -> None:
        with self._lock:
            self._file_name = os.fspath(value)

    @property
    def writer(self) -> TextIO | None:
        """The open file, or None."""
        return self._handle

    def activate_options(self) -> None:
        with self._lock:
            if not self._file_name:
                raise AppenderError(
                    f"Activation of Appender '{self.name}' that requires file "
                    "and has no file set",
                    "APPENDER_ACTIVATE_MISSING_FILE_ERROR",
                )
            self.close_file()
            self.open_file()
            if self._handle is None:
                raise AppenderError(
                    f"Activation of Appender '{self.name}' that requires writer "
                    "and has no writer set",
                    "APPENDER_ACTIVATE_MISSING_WRITER_ERROR",
                )
            super().activate_options()

    def close(self) -> None:
        with self._lock:
            if not self.is_closed:
                self.close_file()
            super().close()

    def check_entry_conditions(self) -> bool:
        if self._handle is None:
            self._report(
                "APPENDER_NO_OPEN_FILE_ERROR",
                f"Use of appender '{self.name}' without open file",
            )
            return False
        return super().check_entry_conditions()

    def append(self, event: LoggingEvent) -> None:
        text = self.layout.format(event)
        try:
            self._handle.write(text)
            if self.immediate_flush:
                self._handle.flush()
        except OSError as exc:
            self._report(
                "APPENDER_WRITING_FILE_ERROR",
                f"Unable to write to file '{self._file_name}' for appender "
                f"'{self.name}': {exc}",
            )

    def close_file(self) -> None:
        """Close the open file, if any."""
        if self._handle is None:
            return
        self._logger.debug(
            "Closing file '%s' for appender '%s'", self._file_name, self.name
        )
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError:
            pass

    def open_file(self) -> None:
        """Open the file named by ``file``; report a failure and leave it closed."""
        parent = os.path.dirname(self._file_name)
        if parent and not os.path.isdir(parent):
            self._logger.debug(
                "Creating missing parent directory for file %s", self._file_name
            )
            try:
                os.mkdir(parent)
            except OSError:
                pass
        if os.name == "nt":
            self._file_name = os.path.expandvars(self._file_name)
        mode = "a" if self.append_file else "w"
        try:
            handle = open(
                self._file_name,
                mode,
                encoding="utf-8",
                buffering=-1 if self.buffered_io else 1,
            )
        except OSError as exc:
            self._report(
                "APPENDER_OPENING_FILE_ERROR",
                f"Unable to open file '{self._file_name}' for appender "
                f"'{self.name}': {exc}",
            )
            return
        self._handle = handle
        self._logger.debug(
            "Opened file '%s' for appender '%s'", self._file_name, self.name
        )

    def remove_file(self, path: str) -> bool:
        """Remove ``path``; report and return False on failure."""
        try:
            os.remove(path)
        except OSError as exc:
            self._report(
                "APPENDER_REMOVE_FILE_ERROR",
                f"Unable to remove file '{path}' for appender '{self.name}': {exc}",
            )
            return False
        return True

    def rename_file(self, path: str, new_path: str) -> bool:
        """Rename ``path`` to ``new_path``, which must not exist yet."""
        self._logger.debug("Renaming file '%s' to '%s'", path, new_path)
        try:
            if os.path.exists(new_path):
                raise FileExistsError(f"'{new_path}' already exists")
            os.rename(path, new_path)
        except OSError as exc:
            self._report(
                "APPENDER_RENAMING_FILE_ERROR",
                f"Unable to rename file '{path}' to '{new_path}' for appender "
                f"'{self.name}': {exc}",
            )
            return False
        return True