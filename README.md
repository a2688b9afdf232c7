# qtlogkit

This package provides appenders and layouts for logging. It covers console
and file output, files that roll over by date, binary messages, database
rows and asynchronous dispatch. It uses only the standard library.

## Concepts

- `LoggingEvent` (in `qtlogkit.appender`) holds a `Level`, a message, a
  logger name, a nested diagnostic context (`ndc`), `properties`, the thread
  name and a timestamp in milliseconds since the epoch.
- A `Layout` turns an event into text. `Layout` is abstract: you implement
  `format(event)` yourself.
- A `Filter` returns a `Decision`: `ACCEPT`, `DENY` or `NEUTRAL`. Filters are
  chained with `add_filter` and removed with `clear_filters`.
- An appender receives events through `do_append`. It first checks its entry
  conditions. It must be active, it must not be closed, and it must have a
  layout if it needs one. It then checks the event against `threshold` and
  runs the filter chain. If the event passes, it calls `append`. A call to
  `do_append` made from inside `append` on the same thread is dropped.

`AppenderSkeleton` contains this shared logic. The concrete appenders build
on it:

| Module                     | Classes                                       |
|----------------------------|-----------------------------------------------|
| `qtlogkit.console`         | `ConsoleAppender`, `ColorConsoleAppender`, `Target` |
| `qtlogkit.file_appender`   | `FileAppender`                                |
| `qtlogkit.daily_file`      | `DailyFileAppender`, `DateRetriever`, `DefaultDateRetriever` |
| `qtlogkit.daily_rolling`   | `DailyRollingFileAppender`, `RolloverFrequency` |
| `qtlogkit.binary_writer`   | `BinaryWriterAppender`, `DataStream`, `ByteOrder` |
| `qtlogkit.binary_file`     | `BinaryFileAppender`                          |
| `qtlogkit.database`        | `DatabaseAppender`, `DatabaseLayout`          |
| `qtlogkit.async_appender`  | `AsyncAppender`                               |

Most appenders start inactive. Call `activate_options()` before you use
them. Activation raises `AppenderError` when something required is missing,
such as a layout, a file name, a writer, a connection or a table. When a
problem happens at use time, the event is dropped and an error is logged
through the standard `logging` module. Appenders work as context managers
and close themselves on exit.

## Example

    from qtlogkit.appender import Layout, Level, LoggingEvent
    from qtlogkit.console import ConsoleAppender, Target

    class LineLayout(Layout):
        def format(self, event):
            return f"{event.level} {event.logger_name}: {event.message}\n"

    with ConsoleAppender(LineLayout(), Target.STDERR_TARGET) as appender:
        appender.threshold = Level.INFO
        appender.activate_options()
        appender.do_append(LoggingEvent(Level.INFO, "started", "app"))

`ConsoleAppender` finds `sys.stdout` or `sys.stderr` at activation time.
`ColorConsoleAppender` passes ANSI colour sequences through unchanged.

## Files

- `FileAppender(file, layout, append_file=False, buffered_io=True)` writes
  UTF-8 text. It creates a missing parent directory.
- `DailyFileAppender` writes one file per day. It puts the date between the
  base name and the suffix, for example `app_2024_05_01.log` with the default
  pattern `_yyyy_MM_dd`. If `keep_days` is positive, it deletes older files.
  The date of each file is read from its name. Deletion runs when the
  appender is activated, and again in the background on each change of day.
  You can supply the current date through a `DateRetriever`.
- `DailyRollingFileAppender` rolls over every minute, hour, half day, day,
  week or month. It works out the frequency from `date_pattern`, which is a
  `RolloverFrequency` or a pattern string. At each roll-over, the current
  file is renamed to its name plus the suffix of the interval that just
  ended. Pass `clock` to control the current time.

`qtlogkit.daily_file` also provides `format_date_pattern` and
`parse_date_pattern`, which handle date patterns such as `yyyy-MM-dd`. Text
in single quotes in a pattern is copied literally.

## Binary logging

`BinaryLogger` (in `qtlogkit.binary_logger`) logs raw bytes as
`BinaryLoggingEvent`s. Loggers form a hierarchy: a logger inherits its level
from its parent and, while `additivity` holds, passes events up to it. You
can log a message in one call, or collect bytes in a `BinaryLogStream`:

    from qtlogkit.appender import Level
    from qtlogkit.binary_file import BinaryFileAppender
    from qtlogkit.binary_layout import BinaryLayout
    from qtlogkit.binary_logger import BinaryLogger

    appender = BinaryFileAppender("device.bin", layout=BinaryLayout())
    appender.activate_options()

    logger = BinaryLogger("device", Level.DEBUG)
    logger.add_appender(appender)
    logger.info(b"\x01\x02")
    with logger.stream(Level.INFO) as stream:
        stream.write(b"\x03").write(b"\x04")
    appender.close()

`BinaryWriterAppender` writes to a `DataStream`. A `DataStream` writes byte
strings, and UTF-16 text, each preceded by a 32-bit length. The default byte
order is big-endian; `BinaryFileAppender` uses little-endian. If a
`BinaryLayout` is set, its `binary_header` and `binary_footer` are written
when a writer is attached and when it is detached.

`BinaryToTextLayout` wraps another layout so that binary events can go to
text appenders. It replaces the binary marker in that layout's output with
the byte count and a hex dump.

## Databases and asynchronous output

`DatabaseAppender(layout, table, connection, paramstyle="qmark")` inserts one
row per event into a DB-API connection, such as one from `sqlite3`, and
commits after each insert. The `layout` must be a `DatabaseLayout`. Its
`timestamp_column`, `logger_name_column`, `thread_name_column`,
`level_column` and `message_column` give the column names. A part whose
column name is empty is not stored.

`AsyncAppender` queues events and delivers them on a background thread to
the appenders attached with `add_appender`. `flush()` waits until the queue
has been delivered. `close()` delivers the remaining events, then stops the
thread.

## What this package does not do

- It has no logger repository, global log manager or root logger. The only
  logger is `BinaryLogger`, and its hierarchy is built by hand through
  `parent`.
- It does not read configuration files. Appenders are configured in code.
- It provides no ready-made text layout, such as a pattern layout. Text
  appenders need a `Layout` subclass of your own.
- It has no command-line interface.