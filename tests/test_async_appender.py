import threading

from qtlogkit.appender import AppenderSkeleton, Level, LoggingEvent
from qtlogkit.async_appender import AsyncAppender


class Collector(AppenderSkeleton):
    def __init__(self):
        super().__init__()
        self.messages = []
        self.threads = []

    @property
    def requires_layout(self):
        return False

    def append(self, event):
        self.messages.append(event.message)
        self.threads.append(threading.current_thread().name)


def event(message, level=Level.INFO):
    return LoggingEvent(level=level, message=message)


def test_events_reach_attached_appenders_in_order():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.activate_options()
    for message in ["a", "b", "c"]:
        appender.do_append(event(message))
    appender.flush()
    assert target.messages == ["a", "b", "c"]
    appender.close()


def test_dispatch_happens_on_another_thread():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.activate_options()
    appender.do_append(event("x"))
    appender.flush()
    assert target.threads
    assert threading.current_thread().name not in target.threads
    appender.close()


def test_close_delivers_pending_events():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.activate_options()
    for number in range(50):
        appender.do_append(event(str(number)))
    appender.close()
    assert target.messages == [str(number) for number in range(50)]
    assert appender.is_closed is True


def test_events_after_close_are_dropped():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.activate_options()
    appender.close()
    appender.do_append(event("late"))
    assert target.messages == []


def test_not_activated_appender_drops_events(caplog):
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.do_append(event("lost"))
    assert target.messages == []
    assert "APPENDER_ASNC_DISPATCHER_NOT_RUNNING" in caplog.text


def test_activating_twice_delivers_once():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.activate_options()
    appender.activate_options()
    appender.do_append(event("once"))
    appender.close()
    assert target.messages == ["once"]


def test_add_and_remove_appenders():
    first, second = Collector(), Collector()
    appender = AsyncAppender()
    appender.add_appender(first)
    appender.add_appender(first)
    appender.add_appender(second)
    assert appender.appenders == (first, second)
    appender.remove_appender(first)
    assert appender.appenders == (second,)
    appender.remove_all_appenders()
    assert appender.appenders == ()


def test_removed_appender_receives_nothing():
    first, second = Collector(), Collector()
    appender = AsyncAppender()
    appender.add_appender(first)
    appender.add_appender(second)
    appender.remove_appender(first)
    appender.activate_options()
    appender.do_append(event("only second"))
    appender.close()
    assert first.messages == []
    assert second.messages == ["only second"]


def test_threshold_applies_before_queueing():
    target = Collector()
    appender = AsyncAppender()
    appender.threshold = Level.ERROR
    appender.add_appender(target)
    appender.activate_options()
    appender.do_append(event("debug", Level.DEBUG))
    appender.do_append(event("error", Level.ERROR))
    appender.close()
    assert target.messages == ["error"]


def test_call_appenders_is_synchronous():
    target = Collector()
    appender = AsyncAppender()
    appender.add_appender(target)
    appender.call_appenders(event("direct"))
    assert target.messages == ["direct"]
    assert target.threads == [threading.current_thread().name]


def test_requires_no_layout_and_context_manager_closes():
    target = Collector()
    with AsyncAppender() as appender:
        appender.add_appender(target)
        appender.activate_options()
        appender.do_append(event("ctx"))
    assert appender.requires_layout is False
    assert appender.is_closed is True
    assert target.messages == ["ctx"]