"""An appender that writes binary logging data to a file."""

from __future__ import annotations

import os
from typing import BinaryIO

from .binary_writer import BinaryWriterAppender, ByteOrder, DataStream
from .appender import AppenderError, Layout


class BinaryFileAppender(BinaryWriterAppender):
    """Writes events to a file through a little-endian ``DataStream``.

    The file is opened on activation, truncated unless ``append_file`` is
    set, and unbuffered when ``buffered_io`` is false. A missing parent
    directory is created.
    """

    def __init__(
        self,
        file: str = "",
        append_file: bool = False,
        buffered_io: bool = True,
        layout: Layout | None = None,
    ) -> None:
        super().__init__(layout=layout)
        self.append_file = append_file
        self.buffered_io = buffered_io
        self._file_name = os.fspath(file)
        self._handle: BinaryIO | None = None
        self._stream: DataStream | None = None
        self.byte_order = ByteOrder.LITTLE_ENDIAN

    @property
    def file(self) -> str:
        with self._lock:
            return self._file_name

    @file.setter
    def file(self, value: str) -> None:
        with self._lock:
            self._file_name = os.fspath(value)

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
            super().activate_options()

    def close(self) -> None:
        with self._lock:
            if not self.is_closed:
                self.close_file()
            super().close()

    def check_entry_conditions(self) -> bool:
        if self._handle is None or self._stream is None:
            self._report(
                "APPENDER_NO_OPEN_FILE_ERROR",
                f"Use of appender '{self.name}' without open file",
            )
            return False
        return super().check_entry_conditions()

    def close_file(self) -> None:
        """Detach the stream, writing the footer, and close the file."""
        if self._handle is not None:
            self._logger.debug(
                "Closing file '%s' for appender '%s'", self._file_name, self.name
            )
        self.set_writer(None)
        self._stream = None
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError:
                pass
        self._handle = None

    def handle_io_errors(self) -> bool:
        if self._stream is None or self._stream.error is None:
            return False
        self._report(
            "APPENDER_WRITING_FILE_ERROR",
            f"Unable to write to file '{self._file_name}' for appender "
            f"'{self.name}': {self._stream.error}",
        )
        return True

    def open_file(self) -> None:
        """Open the file and attach a data stream on it as the writer."""
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
        mode = "ab" if self.append_file else "wb"
        try:
            handle = open(self._file_name, mode, buffering=-1 if self.buffered_io else 0)
        except OSError as exc:
            self._report(
                "APPENDER_OPENING_FILE_ERROR",
                f"Unable to open file '{self._file_name}' for appender "
                f"'{self.name}': {exc}",
            )
            return
        self._handle = handle
        self._stream = DataStream(handle, self.byte_order)
        self.set_writer(self._stream)
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