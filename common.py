'''Common stuff, used in other modules'''
from __future__ import annotations
import os

import sublime

from .lssort import observer
from .lssort.listing import PATH_KEY, is_listing_view
from .lssort.state import ViewState


SETTINGS_FILE = 'ls_sort.sublime-settings'
SYNTAX_FILE   = 'Packages/LsSort/ls-listing.sublime-syntax'
ICON = '𝌆'


def load_settings() -> sublime.Settings:
    return sublime.load_settings(SETTINGS_FILE)


def ls_executable() -> str:
    return load_settings().get('ls_executable') or 'ls'


def autorefresh_enabled(view: sublime.View) -> bool:
    '''a view setting wins over the global one'''
    s = view.settings()
    if s.has('ls_autorefresh'):
        return bool(s.get('ls_autorefresh'))
    return bool(load_settings().get('ls_autorefresh', True))


def first(seq, pred):
    '''similar to built-in any() but return the object instead of boolean'''
    return next((item for item in seq if pred(item)), None)


def display_path(folder):
    display = folder
    home = os.path.expanduser("~")
    if folder.startswith(home):
        display = folder.replace(home, "~", 1)
    return display


def listing_views():
    for w in sublime.windows():
        for v in w.views():
            if is_listing_view(v):
                yield v


def emit_event(event_type: str, payload: object):
    '''Notify our filesystem observer about changes in our views'''
    observer.notify(event_type, payload)


class LsBaseCommand:
    """
    Convenience functions for LsSort TextCommands
    """
    @property
    def path(self):
        return self.view.settings().get(PATH_KEY)

    @property
    def state(self) -> ViewState:
        return ViewState(self.view.settings(), load_settings().get('ls_show_hidden_files', False))
