'''This module keeps a file system observer which
    1. collects the listed directory of every listing view and
    2. waits for any change in these directories (create/remove/modify file), and in case of such change
    3. schedules a refresh for the corresponding view(s)

The host hands in two callables on `start`:
    schedule(callback, delay_ms)  run callback on the main thread later (sublime.set_timeout)
    on_refresh(view_ids)          refresh these views; always called through `schedule`
'''

from __future__ import annotations
import datetime
import os
import threading

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, DirModifiedEvent


REFRESH_TIMEOUT  = 1000  # milliseconds: auto-refresh shall not happen more than once per REFRESH_TIMEOUT
SCHEDULE_REFRESH = 700   # milliseconds: time out for checking REFRESH_TIMEOUT
IGNORED_EVENT_TYPES = {'opened', 'closed', 'closed_no_write'}
observer: ObservePaths | None = None


def start(on_refresh, schedule) -> ObservePaths:
    global observer
    if observer is None:
        observer = ObservePaths(on_refresh, schedule)
        print('LsSort: started file watcher:', observer.observer)
    return observer


def stop():
    global observer
    if observer:
        print('LsSort: shutting down file watcher:', observer.observer)
        observer.stop()
        observer = None


def notify(event: str, payload: object):
    '''Tell the running observer about changes in our views'''
    if observer:
        observer.handle(event, payload)


def time_out(past, now):
    return (now - past) > datetime.timedelta(milliseconds=REFRESH_TIMEOUT)


class ObservePaths:
    def __init__(self, on_refresh, schedule):
        self.observer = Observer()
        self.event_handler = ReportEvent(on_refresh, schedule)
        self.watched_paths: set[str] = set()
        self.paths: dict[int, str] = {}
        self.observer.start()

    def handle(self, event, payload):
        case = {
            'watch': lambda: self.watch(*payload),
            'view_closed': lambda: self.unwatch(payload),
            'stop_watch': lambda: self.unwatch(payload),
            'toggle_watch_all': lambda: self.toggle_watch_all(payload),
        }
        case[event]()

    def watch(self, vid: int, path: str):
        path = path.rstrip(os.sep) or os.sep
        if not os.path.isdir(path):
            print('LsSort: cannot watch {0}, it is not a directory'.format(path))
            self.unwatch(vid)
            return
        self.paths[vid] = path
        self.rewatch_all()

    def unwatch(self, vid: int):
        self.paths.pop(vid, None)
        self.event_handler.forget(vid)
        self.rewatch_all()

    def toggle_watch_all(self, watch):
        '''
        watch is the new value of the global ls_autorefresh setting,
        views register themselves again on their next refresh
        '''
        if not watch:
            self.paths = {}
            self.event_handler.forget()
            self.rewatch_all()

    def rewatch_all(self):
        self.event_handler.paths = dict(self.paths)
        next_set = set(self.paths.values())
        if self.watched_paths == next_set:
            return

        self.observer.unschedule_all()
        for p in next_set:
            self.observer.schedule(self.event_handler, p)
        self.watched_paths = next_set

    def stop(self):
        self.observer.stop()
        self.observer.join()


class ReportEvent(FileSystemEventHandler):
    '''
    Events arrive on the watchdog thread, `flush` runs on the main thread;
    `scheduled_views` and `pending` are only touched while holding `lock`.
    '''
    def __init__(self, on_refresh, schedule):
        self.on_refresh = on_refresh
        self.schedule = schedule
        self.paths: dict[int, str] = {}
        self.scheduled_views: dict[int, datetime.datetime] = {}
        self.pending = False
        self.lock = threading.Lock()

    def on_any_event(self, event):
        '''
        File system event received from watchdog module.
        A change of access time causes a modified event on the directory,
        actual changes fire their own (file/dir created, deleted, moved, modified) events.
        '''
        if isinstance(event, DirModifiedEvent) or event.event_type in IGNORED_EVENT_TYPES:
            return

        src_path = os.fsdecode(event.src_path).rstrip(os.sep)
        parent = os.path.dirname(src_path)
        now = datetime.datetime.now()
        with self.lock:
            for vid, path in list(self.paths.items()):
                if path in (src_path, parent):
                    self.scheduled_views[vid] = now
            if not self.scheduled_views or self.pending:
                return
            self.pending = True
        self.schedule(self.flush, SCHEDULE_REFRESH)

    def flush(self, now=None):
        '''refresh views which were quiet for REFRESH_TIMEOUT, check the rest later'''
        now = now or datetime.datetime.now()
        with self.lock:
            views = [v for v, t in self.scheduled_views.items() if time_out(t, now)]
            for v in views:
                self.scheduled_views.pop(v, None)
            self.pending = reschedule = bool(self.scheduled_views)

        if views:
            self.on_refresh(views)
        if reschedule:
            self.schedule(self.flush, SCHEDULE_REFRESH)
        return views

    def forget(self, vid=None):
        '''drop a scheduled refresh of `vid`, or of all views'''
        with self.lock:
            if vid is None:
                self.scheduled_views.clear()
            else:
                self.scheduled_views.pop(vid, None)
