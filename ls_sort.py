'''Sort orders, hidden files and the sort menu of listing views'''
from __future__ import annotations

import sublime
from sublime_plugin import TextCommand

from .common import LsBaseCommand
from .lssort.listing import is_listing_view
from .lssort.menu import active_index, dispatch_candidate, dispatch_choice, render_candidates, render_menu
from .lssort.state import SortMode


PANEL_NAME = 'ls_sort_menu'
MENU_VIEW_SETTINGS = {
    "gutter": False,
    "line_numbers": False,
    "word_wrap": False,
    "scroll_past_end": False,
}


class ls_sort(TextCommand, LsBaseCommand):
    def is_enabled(self):
        return is_listing_view(self.view)

    def run(self, edit, mode='name'):
        self.state.set_sort_mode(SortMode(mode))
        self.view.run_command('ls_listing_refresh')


class ls_toggle_hidden_files(TextCommand, LsBaseCommand):
    def is_enabled(self):
        return is_listing_view(self.view)

    def description(self):
        if self.is_enabled() and self.state.show_hidden:
            return 'Hide hidden files'
        return 'Show hidden files'

    def run(self, edit):
        self.state.toggle_hidden()
        self.view.run_command('ls_listing_refresh')


def ensure_panel(window: sublime.Window) -> sublime.View:
    return window.find_output_panel(PANEL_NAME) or window.create_output_panel(PANEL_NAME)


def show_panel(window: sublime.Window, lines) -> sublime.View:
    panel = ensure_panel(window)
    for key, value in MENU_VIEW_SETTINGS.items():
        panel.settings().set(key, value)
    panel.set_read_only(False)
    panel.run_command("select_all")
    panel.run_command("right_delete")
    panel.run_command("append", {"characters": '\n'.join(lines)})
    panel.set_read_only(True)
    panel.sel().clear()
    window.run_command("show_panel", {"panel": "output.{}".format(PANEL_NAME)})
    return panel


def hide_panel(window: sublime.Window):
    if window.active_panel() == "output.{}".format(PANEL_NAME):
        window.run_command("hide_panel")


class ls_sort_menu(TextCommand, LsBaseCommand):
    '''numbered menu in an output panel, the number is asked for in an input panel'''
    def is_enabled(self):
        return is_listing_view(self.view)

    def run(self, edit):
        window = self.view.window()
        if not window:
            return
        view = self.view
        show_panel(window, render_menu(self.state))

        def on_done(text: str):
            hide_panel(window)
            dispatch_choice(text, view, report=sublime.status_message)

        def on_cancel():
            hide_panel(window)

        window.show_input_panel('Sort choice:', '', on_done, None, on_cancel)


class ls_sort_picker(TextCommand, LsBaseCommand):
    def is_enabled(self):
        return is_listing_view(self.view)

    def run(self, edit):
        window = self.view.window()
        if not window:
            return
        view = self.view
        state = self.state
        labels = [label for label, _ in render_candidates(state)]
        window.show_quick_panel(
            labels,
            lambda i: dispatch_candidate(i, view),
            sublime.MONOSPACE_FONT,
            active_index(state)
        )
