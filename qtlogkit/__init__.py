"""Appenders, layouts and binary logging: console, file, rolling, database and asynchronous output."""

__version__ = "1.6.0"
__all__ = [
    "appender",
    "async_appender",
    "binary_event",
    "binary_file",
    "binary_layout",
    "binary_logger",
    "binary_writer",
    "console",
    "daily_file",
    "daily_rolling",
    "database",
    "file_appender",
]