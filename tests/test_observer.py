import datetime
import os
import threading
from types import SimpleNamespace

import pytest
from watchdog.events import DirModifiedEvent, FileCreatedEvent, FileDeletedEvent

from lssort import observer
from lssort.observer import SCHEDULE_REFRESH, ReportEvent


class Recorder:
    def __init__(self):
        self.scheduled = []
        self.refreshed = []

    def schedule(self, callback, delay):
        self.scheduled.append((callback, delay))

    def on_refresh(self, view_ids):
        self.refreshed.append(sorted(view_ids))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def handler(recorder):
    handler = ReportEvent(recorder.on_refresh, recorder.schedule)
    handler.paths = {1: '/home/user/a', 2: '/home/user/b'}
    return handler


def later(seconds=2):
    return datetime.datetime.now() + datetime.timedelta(seconds=seconds)


def test_change_in_watched_directory_schedules_refresh(handler, recorder):
    handler.on_any_event(FileCreatedEvent('/home/user/a/new.txt'))

    assert list(handler.scheduled_views) == [1]
    assert recorder.scheduled == [(handler.flush, SCHEDULE_REFRESH)]
    assert recorder.refreshed == []


def test_change_of_watched_directory_itself_counts(handler):
    handler.on_any_event(FileDeletedEvent('/home/user/b'))
    assert list(handler.scheduled_views) == [2]


def test_unrelated_and_ignored_events(handler, recorder):
    handler.on_any_event(FileCreatedEvent('/home/user/c/new.txt'))
    handler.on_any_event(DirModifiedEvent('/home/user/a'))
    handler.on_any_event(SimpleNamespace(event_type='opened', src_path='/home/user/a/x'))

    assert handler.scheduled_views == {}
    assert recorder.scheduled == []


def test_only_one_flush_is_pending(handler, recorder):
    handler.on_any_event(FileCreatedEvent('/home/user/a/1'))
    handler.on_any_event(FileCreatedEvent('/home/user/b/2'))
    assert len(recorder.scheduled) == 1


def test_flush_waits_for_quiet_views(handler, recorder):
    handler.on_any_event(FileCreatedEvent('/home/user/a/new.txt'))

    assert handler.flush(now=datetime.datetime.now()) == []
    assert recorder.refreshed == []
    assert len(recorder.scheduled) == 2

    assert handler.flush(now=later()) == [1]
    assert recorder.refreshed == [[1]]
    assert handler.scheduled_views == {}
    assert handler.pending is False


def test_event_during_flush_is_not_stranded(handler, recorder):
    # an event from the watchdog thread lands while flush is looking at an empty queue
    threads = []

    class EventDuringFlush(dict):
        def items(self):
            if not threads:
                thread = threading.Thread(
                    target=handler.on_any_event, args=(FileCreatedEvent('/home/user/a/late.txt'),))
                threads.append(thread)
                thread.start()
            return super().items()

    handler.scheduled_views = EventDuringFlush()
    handler.pending = True

    assert handler.flush(now=later()) == []
    threads[0].join(timeout=5)

    assert not threads[0].is_alive()
    assert list(handler.scheduled_views) == [1]
    assert handler.pending is True
    assert recorder.scheduled == [(handler.flush, SCHEDULE_REFRESH)]


def test_forget_drops_scheduled_views(handler):
    handler.on_any_event(FileCreatedEvent('/home/user/a/1'))
    handler.on_any_event(FileCreatedEvent('/home/user/b/2'))

    handler.forget(1)
    assert list(handler.scheduled_views) == [2]
    handler.forget()
    assert handler.scheduled_views == {}


def test_bytes_paths_are_decoded(handler):
    handler.on_any_event(FileCreatedEvent(os.fsencode('/home/user/a/new.txt')))
    assert list(handler.scheduled_views) == [1]


def test_notify_without_observer_is_a_no_op(monkeypatch):
    monkeypatch.setattr(observer, 'observer', None)
    observer.notify('watch', (1, '/tmp/'))


def test_watch_and_unwatch(tmp_path, recorder, monkeypatch):
    monkeypatch.setattr(observer, 'observer', None)
    watcher = observer.start(recorder.on_refresh, recorder.schedule)
    try:
        assert observer.start(recorder.on_refresh, recorder.schedule) is watcher

        observer.notify('watch', (7, str(tmp_path) + os.sep))
        assert watcher.paths == {7: str(tmp_path)}
        assert watcher.watched_paths == {str(tmp_path)}
        assert watcher.event_handler.paths == {7: str(tmp_path)}

        observer.notify('watch', (8, str(tmp_path / 'missing')))
        assert 8 not in watcher.paths

        observer.notify('view_closed', 7)
        assert watcher.paths == {}
        assert watcher.watched_paths == set()
    finally:
        observer.stop()
    assert observer.observer is None


def test_toggle_watch_all_off_forgets_views(tmp_path, recorder, monkeypatch):
    monkeypatch.setattr(observer, 'observer', None)
    watcher = observer.start(recorder.on_refresh, recorder.schedule)
    try:
        observer.notify('watch', (1, str(tmp_path)))
        watcher.event_handler.scheduled_views[1] = datetime.datetime.now()

        observer.notify('toggle_watch_all', False)
        assert watcher.paths == {}
        assert watcher.event_handler.scheduled_views == {}

        observer.notify('toggle_watch_all', True)
        assert watcher.paths == {}
    finally:
        observer.stop()
