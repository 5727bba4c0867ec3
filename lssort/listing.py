'''Calling `ls` and applying its output to a listing view'''
from __future__ import annotations
import shlex
import subprocess
import sys

from .state import ViewState


PATH_KEY = 'ls_path'
PARENT_ROW = 2  # header is the "<path>:" line plus the "total N" line of ls

STARTUPINFO = None
if sys.platform == "win32":
    STARTUPINFO = subprocess.STARTUPINFO()
    STARTUPINFO.dwFlags |= subprocess.STARTF_USESHOWWINDOW


class ListingError(Exception):
    '''ls could not start or failed; `output` is whatever it printed to stdout'''
    def __init__(self, message: str, output: str = ''):
        super().__init__(message)
        self.output = output


def run_ls(args: list[str], cwd: str, executable: str = 'ls') -> str:
    '''call ls, return its output; raise ListingError if it cannot start or fails'''
    try:
        proc = subprocess.run(
            [executable] + args,
            cwd=cwd,
            capture_output=True,
            text=True,
            startupinfo=STARTUPINFO
        )
    except OSError as e:
        raise ListingError(e.strerror or str(e)) from e
    if proc.returncode != 0:
        # one line, it is shown as a single "<...>" line and in the status bar
        message = '; '.join(line.strip() for line in (proc.stderr or '').splitlines() if line.strip())
        raise ListingError(
            message or '%s exited with status %d' % (executable, proc.returncode),
            proc.stdout or '')
    return proc.stdout


def render_listing(path: str, switches: str, executable: str = 'ls') -> tuple[str, str | None]:
    '''
    Return the full text of a listing view and the error, if any.

    The text is a "<path>:" header line followed by the output of
    `ls <switches>` run inside `path`.  When ls fails but still listed
    something (GNU ls exits with 1 for e.g. an entry it cannot stat),
    that partial listing is kept; otherwise "<error>" goes below the header.
    '''
    header = '%s:' % path
    try:
        output = run_ls(shlex.split(switches), cwd=path, executable=executable)
    except ListingError as e:
        print('LsSort: cannot list {0}: {1}'.format(path, e))
        if e.output.strip():
            return '%s\n%s' % (header, e.output.rstrip('\n')), str(e)
        return '%s\n<%s>' % (header, e), str(e)
    return '%s\n%s' % (header, output.rstrip('\n')), None


def parent_entry(path: str, executable: str = 'ls') -> str | None:
    '''The `ls -ld ..` line for `path`, or None if it cannot be had'''
    try:
        output = run_ls(['-ld', '..'], cwd=path, executable=executable)
    except ListingError:
        return None
    lines = output.splitlines()
    return lines[0] if lines and lines[0].strip() else None


def apply_listing(state: ViewState, host, executable: str = 'ls') -> bool:
    """
    Redraw `host` with the switches of `state`.

    `host` is the view side of the operation and provides
        path                    listed directory
        cursor()                current caret offset
        set_cursor(offset)
        size()                  buffer length
        redraw(switches)        replace the buffer with a fresh listing
        insert_line(row, text)  insert `text` as line `row` (0-based)

    Without hidden files ls omits "..", so its own line is added under the
    header. The caret goes back where it was, clamped to the new buffer.
    Returns False if the view is being listed already, e.g. when the
    redraw itself fires an activation event.
    """
    if state.in_progress:
        return False

    state.in_progress = True
    try:
        offset = host.cursor()
        host.redraw(state.switches)
        if not state.show_hidden:
            line = parent_entry(host.path, executable)
            if line:
                host.insert_line(PARENT_ROW, line)
        host.set_cursor(min(offset, host.size()))
        state.dirty = False
    finally:
        state.in_progress = False
    return True


def is_listing_view(view) -> bool:
    settings = view.settings()
    return bool(settings and settings.get(PATH_KEY))


def auto_reapply(view) -> bool:
    '''re-apply the listing of `view` when it is a listing view at all'''
    if not is_listing_view(view):
        return False
    view.run_command('ls_listing_refresh')
    return True
