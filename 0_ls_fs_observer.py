# coding: utf-8

'''Starts and stops the file system observer of lssort.observer.

Filename of this module starts with 0_ because we want it being loaded before other LsSort
modules: ls_listing.plugin_loaded refreshes existing listing views, and each refresh
registers its directory with the observer, which hence must be running by then.
'''

from __future__ import annotations

import sublime

from .common import listing_views, load_settings
from .lssort import observer


def plugin_loaded():
    observer.start(on_refresh=refresh, schedule=sublime.set_timeout)
    settings = load_settings()
    settings.add_on_change('ls_autorefresh', lambda: toggle_watch_all(settings.get('ls_autorefresh', True)))


def plugin_unloaded():
    load_settings().clear_on_change('ls_autorefresh')
    observer.stop()


def refresh(view_ids):
    '''view_ids: list of integers which are view.id()'''
    for v in listing_views():
        if v.id() in view_ids:
            v.run_command('ls_listing_refresh')


def toggle_watch_all(watch):
    observer.notify('toggle_watch_all', watch)
    # each refresh registers the view again, or not, according to the new value
    sublime.set_timeout(refresh_all, 1)


def refresh_all():
    for v in listing_views():
        v.run_command('ls_listing_refresh')
