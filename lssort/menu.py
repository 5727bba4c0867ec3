'''The sort menu: command table, its two renderings and dispatching a choice'''
from __future__ import annotations
from typing import NamedTuple

from .state import SortMode, ViewState


SORT_COMMAND   = 'ls_sort'
TOGGLE_COMMAND = 'ls_toggle_hidden_files'
INVALID_SELECTION = 'Invalid selection: {0!r}'


class CommandEntry(NamedTuple):
    command: str
    key_hint: str
    description: str
    mode: SortMode | None = None

    @property
    def args(self) -> dict:
        return {'mode': self.mode.value} if self.mode else {}

    def invoke(self, view):
        view.run_command(self.command, self.args)


# order matters, it is the numbering of the menu
COMMANDS = (
    CommandEntry(SORT_COMMAND, 's n', 'Sort by name', SortMode.BY_NAME),
    CommandEntry(SORT_COMMAND, 's N', 'Sort by name, reversed', SortMode.BY_NAME_REVERSE),
    CommandEntry(SORT_COMMAND, 's d', 'Sort by date', SortMode.BY_DATE),
    CommandEntry(SORT_COMMAND, 's D', 'Sort by date, reversed', SortMode.BY_DATE_REVERSE),
    CommandEntry(SORT_COMMAND, 's x', 'Sort by extension', SortMode.BY_EXTENSION),
    CommandEntry(SORT_COMMAND, 's X', 'Sort by extension, reversed', SortMode.BY_EXTENSION_REVERSE),
    CommandEntry(TOGGLE_COMMAND, '.', 'Toggle hidden files'),
    CommandEntry('ls_sort_menu', 's m', 'Show sort menu'),
    CommandEntry('ls_sort_picker', 's s', 'Pick sort order'),
)


def is_active(entry: CommandEntry, state: ViewState) -> bool:
    if entry.command == TOGGLE_COMMAND:
        return state.show_hidden
    return entry.mode is not None and entry.mode is state.sort_mode


def active_index(state: ViewState, entries=COMMANDS) -> int:
    '''index of the active sort entry, -1 if none'''
    for i, entry in enumerate(entries):
        if entry.mode is not None and is_active(entry, state):
            return i
    return -1


def column_widths(entries) -> tuple[int, int, int]:
    return (
        len(str(len(entries))),
        max((len(e.description) for e in entries), default=0),
        max((len(e.key_hint) for e in entries), default=0),
    )


def render_menu(state: ViewState, entries=COMMANDS) -> list[str]:
    '''
    Numbered menu, one aligned line per entry, e.g.
        1  [*] Sort by name                 s n
    '''
    iw, dw, kw = column_widths(entries)
    return [
        '{0:>{iw}}  [{1}] {2:<{dw}}  {3:<{kw}}'.format(
            i, '*' if is_active(entry, state) else ' ', entry.description, entry.key_hint,
            iw=iw, dw=dw, kw=kw)
        for i, entry in enumerate(entries, 1)
    ]


def render_candidates(state: ViewState, entries=COMMANDS) -> list[tuple[str, CommandEntry]]:
    '''labels for a filterable picker, paired with their entries'''
    iw, dw, _ = column_widths(entries)
    return [
        ('{0:>{iw}}. {1:<{dw}} ({2})'.format(i, entry.description, entry.key_hint, iw=iw, dw=dw), entry)
        for i, entry in enumerate(entries, 1)
    ]


def parse_choice(text: str, entries=COMMANDS) -> CommandEntry | None:
    '''entry for a 1-based number typed by the user, None if there is none'''
    try:
        number = int(text.strip())
    except ValueError:
        return None
    if 1 <= number <= len(entries):
        return entries[number - 1]
    return None


def dispatch_choice(text: str, view, report=print, entries=COMMANDS) -> CommandEntry | None:
    """
    Run the entry numbered `text` on `view`.

    An empty answer does nothing. Anything that is not a valid number
    is reported through `report` and changes nothing.
    """
    if not text.strip():
        return None
    entry = parse_choice(text, entries)
    if entry is None:
        report(INVALID_SELECTION.format(text))
        return None
    entry.invoke(view)
    return entry


def dispatch_candidate(index: int, view, entries=COMMANDS) -> CommandEntry | None:
    '''callback part of the picker; -1 means it was cancelled'''
    if not 0 <= index < len(entries):
        return None
    entry = entries[index]
    entry.invoke(view)
    return entry
