"""A layout that turns events into table rows and an appender that inserts them."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .appender import AppenderError, AppenderSkeleton, Layout, LoggingEvent
from .daily_file import format_date_pattern

_TEXT_TIME_PATTERN = "dd.MM.yyyy hh:mm"
_PARAMSTYLES = ("qmark", "format", "pyformat", "named", "numeric")


def _local_time(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000)


class DatabaseLayout(Layout):
    """Maps the parts of an event onto named table columns.

    A part whose column name is empty is left out of the record.
    """

    def __init__(self) -> None:
        super().__init__()
        self.timestamp_column = ""
        self.logger_name_column = ""
        self.thread_name_column = ""
        self.level_column = ""
        self.message_column = ""

    def format_record(self, event: LoggingEvent) -> dict[str, Any]:
        """Return the column values for ``event``, in column order.

        The order is timestamp, logger name, thread name, level, message.
        The timestamp is a local ``datetime``; the other values are text.
        """
        record: dict[str, Any] = {}
        if self.timestamp_column:
            record[self.timestamp_column] = _local_time(event.timestamp)
        if self.logger_name_column:
            record[self.logger_name_column] = event.logger_name
        if self.thread_name_column:
            record[self.thread_name_column] = event.thread_name
        if self.level_column:
            record[self.level_column] = event.level.to_string()
        if self.message_column:
            record[self.message_column] = event.message
        return record

    def format(self, event: LoggingEvent) -> str:
        """Return a short text description of the configured columns."""
        parts: list[str] = []
        if self.timestamp_column:
            stamp = format_date_pattern(_local_time(event.timestamp), _TEXT_TIME_PATTERN)
            parts.append(f"{self.timestamp_column}:{stamp}")
        for column in (
            self.thread_name_column,
            self.level_column,
            self.logger_name_column,
            self.message_column,
        ):
            if column:
                parts.append(f"{column}:{column}; ")
        return "".join(parts)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DatabaseAppender(AppenderSkeleton):
    """Inserts each event as a row into a table of a DB-API connection.

    The row comes from a ``DatabaseLayout``. ``paramstyle`` names the
    placeholder style of the driver, as in its module's ``paramstyle``.
    Each insert is committed at once.
    """

    def __init__(
        self,
        layout: Layout | None = None,
        table: str = "",
        connection: Any = None,
        paramstyle: str = "qmark",
    ) -> None:
        super().__init__(layout, active=False)
        if paramstyle not in _PARAMSTYLES:
            raise ValueError(f"Unknown parameter style '{paramstyle}'")
        self._table = table
        self._connection = connection
        self._paramstyle = paramstyle

    @property
    def requires_layout(self) -> bool:
        return True

    @property
    def connection(self) -> Any:
        with self._lock:
            return self._connection

    @connection.setter
    def connection(self, value: Any) -> None:
        with self._lock:
            self._connection = value

    @property
    def table(self) -> str:
        with self._lock:
            return self._table

    @table.setter
    def table(self, value: str) -> None:
        with self._lock:
            self._table = value

    def activate_options(self) -> None:
        with self._lock:
            if self._connection is None or not self._table:
                raise AppenderError(
                    f"Activation of Appender '{self.name}' that requires sql "
                    "connection and table and has no connection or table set",
                    "APPENDER_MISSING_DATABASE_OR_TABLE_ERROR",
                )
            super().activate_options()

    def check_entry_conditions(self) -> bool:
        if self._connection is None or not self._table:
            self._report(
                "APPENDER_MISSING_DATABASE_OR_TABLE_ERROR",
                f"Use of appender '{self.name}' with invalid database or empty "
                "table name",
            )
            return False
        return super().check_entry_conditions()

    def _insert_statement(self, record: dict[str, Any]) -> tuple[str, Any]:
        columns = ", ".join(_quote_identifier(name) for name in record)
        values = [
            value.isoformat(sep=" ") if isinstance(value, datetime) else value
            for value in record.values()
        ]
        style = self._paramstyle
        if style == "qmark":
            marks = ["?"] * len(values)
            params: Any = values
        elif style == "format":
            marks = ["%s"] * len(values)
            params = values
        elif style == "numeric":
            marks = [f":{number}" for number in range(1, len(values) + 1)]
            params = values
        else:
            keys = [f"p{number}" for number in range(len(values))]
            marks = [f"%({key})s" if style == "pyformat" else f":{key}" for key in keys]
            params = dict(zip(keys, values))
        statement = (
            f"INSERT INTO {self._table} ({columns}) VALUES ({', '.join(marks)})"
        )
        return statement, params

    def append(self, event: LoggingEvent) -> None:
        layout = self.layout
        if not isinstance(layout, DatabaseLayout):
            self._report(
                "APPENDER_INVALID_DATABASE_LAYOUT_ERROR",
                f"Use of appender '{self.name}' with invalid layout",
            )
            return
        statement, params = self._insert_statement(layout.format_record(event))
        try:
            cursor = self._connection.cursor()
            cursor.execute(statement, params)
            self._connection.commit()
        except Exception as exc:  # drivers raise their own DB-API error types
            self._report(
                "APPENDER_EXEC_SQL_QUERY_ERROR",
                f"Sql query exec error: '{statement} {exc}'",
            )