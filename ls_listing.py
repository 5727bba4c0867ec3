'''Main module; opening and (re)drawing listing views'''
from __future__ import annotations
import os
from os.path import basename, isdir

import sublime
from sublime import Region
from sublime_plugin import EventListener, TextCommand, WindowCommand

from .common import (
    ICON, SYNTAX_FILE, LsBaseCommand, autorefresh_enabled, display_path, emit_event, first,
    listing_views, ls_executable)
from .lssort.listing import PATH_KEY, apply_listing, auto_reapply, is_listing_view, render_listing


def plugin_loaded():
    for v in listing_views():
        v.run_command('ls_listing_refresh')


class ls_listing(WindowCommand):
    """
    Open a listing view.  This is the main entrypoint.

    If `path` is given, list it right away.  Otherwise open an input box
    filled with the directory of the active view's file, the first open
    folder, or the users home directory as a last resort.
    """
    def run(self, path=None):
        if path:
            return self._show(path)

        self.window.show_input_panel('Directory:', self._fallback_path(), self._show, None, None)

    def _fallback_path(self) -> str:
        view = self.window.active_view()
        fpath = view.file_name() if view else None
        if fpath:
            return os.path.dirname(fpath) + os.sep
        if folders := self.window.folders():
            return folders[0] + os.sep
        return os.path.expanduser('~') + os.sep

    def _show(self, path):
        path = os.path.expanduser(path.strip())
        if not isdir(path):
            return sublime.status_message('Directory doesn’t exist “%s”' % path)
        show(self.window, path)


def create_listing_view(window: sublime.Window) -> sublime.View:
    """Create and return a new, empty listing view for the given window."""
    view = window.new_file()
    view.set_syntax_file(SYNTAX_FILE)
    view.set_scratch(True)
    view.set_read_only(True)
    return view


def show(window, path) -> sublime.View:
    """
    Determines the correct view to use, creating one if necessary, and lists `path` in it.
    """
    if not path.endswith(os.sep):
        path += os.sep

    same_path = lambda v: v.settings().get(PATH_KEY) == path
    view = first(window.views(), same_path) or create_listing_view(window)
    view.settings().set(PATH_KEY, path)
    view.run_command('ls_listing_refresh')
    window.focus_view(view)
    return view


class ViewHost:
    '''The view side of lssort.listing.apply_listing'''
    def __init__(self, view: sublime.View, edit: sublime.Edit, path: str, executable: str):
        self.view = view
        self.edit = edit
        self.path = path
        self.executable = executable

    def cursor(self) -> int:
        sels = self.view.sel()
        return sels[0].b if len(sels) else 0

    def set_cursor(self, offset: int):
        self.view.sel().clear()
        self.view.sel().add(Region(offset, offset))
        self.view.show(offset)

    def size(self) -> int:
        return self.view.size()

    def redraw(self, switches: str):
        text, error = render_listing(self.path, switches, self.executable)
        if error:
            sublime.status_message('LsSort: cannot list %s: %s' % (self.path, error))
        self.view.set_read_only(False)
        self.view.replace(self.edit, Region(0, self.view.size()), text)
        self.view.set_read_only(True)

    def insert_line(self, row: int, text: str):
        point = self.view.text_point(row, 0)
        if self.view.rowcol(point)[0] < row:  # fewer lines than row, e.g. an error listing
            text = '\n' + text
        self.view.set_read_only(False)
        self.view.insert(self.edit, point, text + '\n')
        self.view.set_read_only(True)


class ls_listing_refresh(TextCommand, LsBaseCommand):
    """
    Populates or repopulates a listing view according to its sort mode
    and hidden-files flag.
    """
    def is_enabled(self):
        return is_listing_view(self.view)

    def run(self, edit):
        path = self.path
        host = ViewHost(self.view, edit, path, ls_executable())
        if not apply_listing(self.state, host, host.executable):
            return

        norm_path = path.rstrip(os.sep)
        self.view.set_name('%s %s' % (ICON, basename(norm_path) or display_path(path)))
        if autorefresh_enabled(self.view):
            emit_event('watch', (self.view.id(), path))
        else:
            emit_event('stop_watch', self.view.id())


class ls_toggle_auto_refresh(TextCommand):
    def is_enabled(self):
        return is_listing_view(self.view)

    def is_visible(self):
        return self.is_enabled()

    def description(self):
        msg = 'auto-refresh for this view'
        if self.is_enabled() and autorefresh_enabled(self.view):
            return 'Disable ' + msg
        else:
            return 'Enable ' + msg

    def run(self, edit):
        s = self.view.settings()
        s.set('ls_autorefresh', not autorefresh_enabled(self.view))
        self.view.run_command('ls_listing_refresh')


class LsAutoReapply(EventListener):
    def on_activated(self, view):
        auto_reapply(view)

    def on_close(self, view):
        if view.settings().get(PATH_KEY):
            emit_event('view_closed', view.id())
