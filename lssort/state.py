'''Sort order and hidden-files flag of a listing view'''
from __future__ import annotations
from enum import Enum


SORT_KEY   = 'ls_sort_mode'
HIDDEN_KEY = 'ls_show_hidden_files'
DIRTY_KEY  = 'ls_dirty'
BUSY_KEY   = 'ls_listing_in_progress'

VISIBLE_SWITCHES = '-Alh --group-directories-first'
HIDDEN_SWITCHES  = '-lh --group-directories-first'


class SortMode(Enum):
    BY_NAME = 'name'
    BY_NAME_REVERSE = 'name_reverse'
    BY_DATE = 'date'
    BY_DATE_REVERSE = 'date_reverse'
    BY_EXTENSION = 'extension'
    BY_EXTENSION_REVERSE = 'extension_reverse'

    @property
    def switches(self) -> str:
        return SORT_SWITCHES[self]


# date sorts read "oldest first" for the plain variant, as `ls -t` is newest first
SORT_SWITCHES = {
    SortMode.BY_NAME: '',
    SortMode.BY_NAME_REVERSE: '-r',
    SortMode.BY_DATE: '-t -r',
    SortMode.BY_DATE_REVERSE: '-t',
    SortMode.BY_EXTENSION: '-X',
    SortMode.BY_EXTENSION_REVERSE: '-X -r',
}


def compute_switches(show_hidden: bool, mode: SortMode) -> str:
    base = VISIBLE_SWITCHES if show_hidden else HIDDEN_SWITCHES
    return '%s %s' % (base, mode.switches)


class ViewState:
    """
    Sort mode and hidden-files flag of one listing view.

    Values are kept in the view's own settings (anything providing
    `get`, `set`, `has` and `erase`, i.e. `sublime.Settings`), hence two
    views never share a state and the state survives a plugin reload.
    Missing values are filled in on construction: sort by name, and
    `default_show_hidden` for the visibility flag.
    """
    def __init__(self, settings, default_show_hidden=False):
        self.settings = settings
        if not settings.has(SORT_KEY):
            settings.set(SORT_KEY, SortMode.BY_NAME.value)
        if not settings.has(HIDDEN_KEY):
            settings.set(HIDDEN_KEY, bool(default_show_hidden))

    @property
    def sort_mode(self) -> SortMode:
        try:
            return SortMode(self.settings.get(SORT_KEY))
        except ValueError:
            return SortMode.BY_NAME

    @property
    def show_hidden(self) -> bool:
        return bool(self.settings.get(HIDDEN_KEY, False))

    @property
    def switches(self) -> str:
        return compute_switches(self.show_hidden, self.sort_mode)

    @property
    def dirty(self) -> bool:
        return bool(self.settings.get(DIRTY_KEY, False))

    @dirty.setter
    def dirty(self, value: bool):
        if value:
            self.settings.set(DIRTY_KEY, True)
        else:
            self.settings.erase(DIRTY_KEY)

    @property
    def in_progress(self) -> bool:
        return bool(self.settings.get(BUSY_KEY, False))

    @in_progress.setter
    def in_progress(self, value: bool):
        if value:
            self.settings.set(BUSY_KEY, True)
        else:
            self.settings.erase(BUSY_KEY)

    def set_sort_mode(self, mode: SortMode):
        self.settings.set(SORT_KEY, mode.value)
        self.dirty = True

    def toggle_hidden(self) -> bool:
        '''flip the visibility flag, return the new value'''
        show = not self.show_hidden
        self.settings.set(HIDDEN_KEY, show)
        self.dirty = True
        return show
