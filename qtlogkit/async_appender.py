"""An appender that hands events to other appenders on a worker thread."""

from __future__ import annotations

import copy
import queue
import threading

from .appender import Appender, AppenderSkeleton, LoggingEvent

_STOP = object()


class AsyncAppender(AppenderSkeleton):
    """Collects events and dispatches them to attached appenders in the background.

    ``activate_options`` starts the dispatcher thread. Events queued before
    ``close`` are still delivered; ``close`` waits for them.
    """

    def __init__(self) -> None:
        super().__init__()
        self._appenders: list[Appender] = []
        self._appender_lock = threading.Lock()
        self._queue: queue.Queue | None = None
        self._thread: threading.Thread | None = None

    @property
    def requires_layout(self) -> bool:
        return False

    @property
    def appenders(self) -> tuple[Appender, ...]:
        with self._appender_lock:
            return tuple(self._appenders)

    def add_appender(self, appender: Appender) -> None:
        """Attach ``appender``; attaching it twice has no effect."""
        with self._appender_lock:
            if appender not in self._appenders:
                self._appenders.append(appender)

    def remove_appender(self, appender: Appender) -> None:
        with self._appender_lock:
            if appender in self._appenders:
                self._appenders.remove(appender)

    def remove_all_appenders(self) -> None:
        with self._appender_lock:
            self._appenders.clear()

    def activate_options(self) -> None:
        """Start the dispatcher thread, unless it is already running."""
        with self._lock:
            if self._thread is not None:
                return
            self._queue = queue.Queue()
            self._thread = threading.Thread(
                target=self._dispatch,
                args=(self._queue,),
                name=f"AsyncAppender-{self.name or id(self)}",
                daemon=True,
            )
            self._thread.start()

    def _dispatch(self, events: queue.Queue) -> None:
        while True:
            item = events.get()
            try:
                if item is _STOP:
                    return
                self.call_appenders(item)
            except Exception as exc:  # one failing appender must not stop dispatch
                self._report(
                    "APPENDER_ASYNC_DISPATCH_ERROR",
                    f"Dispatching an event for appender '{self.name}' failed: {exc}",
                )
            finally:
                events.task_done()

    def close(self) -> None:
        """Deliver queued events, stop the dispatcher thread and close."""
        with self._lock:
            if not self.is_closed and self._thread is not None:
                self._queue.put(_STOP)
                self._thread.join()
                self._thread = None
                self._queue = None
            super().close()

    def call_appenders(self, event: LoggingEvent) -> None:
        """Deliver ``event`` to every attached appender, in order."""
        for appender in self.appenders:
            appender.do_append(event)

    def check_entry_conditions(self) -> bool:
        if self._thread is not None and not self._thread.is_alive():
            self._report(
                "APPENDER_ASNC_DISPATCHER_NOT_RUNNING",
                f"Use of appender '{self.name}' without a running dispatcher thread",
            )
            return False
        return super().check_entry_conditions()

    def append(self, event: LoggingEvent) -> None:
        events = self._queue
        if events is None:
            self._report(
                "APPENDER_ASNC_DISPATCHER_NOT_RUNNING",
                f"Use of appender '{self.name}' without a running dispatcher thread",
            )
            return
        events.put(copy.copy(event))

    def flush(self) -> None:
        """Wait until every queued event has been dispatched."""
        events = self._queue
        if events is not None:
            events.join()