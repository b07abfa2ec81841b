"""
Terminal access for the Krill text editor.

Puts the controlling terminal into raw mode, reads single bytes with a
timeout, writes whole frames, and finds out how big the window is. Anything
going wrong here means the editor cannot run at all, so failures are raised
as TerminalError and end the program once the terminal has been restored.
"""
import contextlib
import os
import re
import select
import sys
import termios

from krill import logger

# VT100 sequences used by the editor
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_SCREEN = b"\x1b[2J"
CLEAR_LINE = b"\x1b[K"
INVERSE_ON = b"\x1b[7m"
ATTRS_OFF = b"\x1b[m"

# Cursor to the bottom-right corner, then ask where it ended up
_PROBE_SIZE = b"\x1b[999C\x1b[999B\x1b[6n"
_SIZE_REPLY = re.compile(rb"\x1b\[(\d+);(\d+)")


class TerminalError(Exception):
    """The terminal could not be set up, queried, read or written."""


def move_cursor(row: int, col: int) -> bytes:
    """Sequence placing the cursor at 1-based (row, col)."""
    return b"\x1b[%d;%dH" % (row, col)


@contextlib.contextmanager
def raw_mode(fd: int):
    """
    Switch `fd` to raw, non-echoing input with a 100ms read timeout for the
    duration of the block, then restore the original settings.
    """
    try:
        original = termios.tcgetattr(fd)
    except termios.error as e:
        raise TerminalError(f"tcgetattr: {e}") from e

    raw = termios.tcgetattr(fd)
    raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[1] &= ~termios.OPOST
    raw[2] |= termios.CS8
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[6][termios.VMIN] = 0
    raw[6][termios.VTIME] = 1
    try:
        termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    except termios.error as e:
        raise TerminalError(f"tcsetattr: {e}") from e
    try:
        yield
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSAFLUSH, original)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e


class Terminal:
    """Byte-level access to the terminal's input and output file descriptors."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out

    def read_byte(self, timeout: float):
        """Return the next input byte, or None if nothing arrived within `timeout` seconds."""
        ready, _, _ = select.select([self.fd_in], [], [], timeout)
        if not ready:
            return None
        try:
            data = os.read(self.fd_in, 1)
        except BlockingIOError:
            return None
        except OSError as e:
            raise TerminalError(f"read: {e}") from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes):
        """Write all of `data` to the terminal."""
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.fd_out, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"write: {e}") from e

    def get_window_size(self):
        """Return (rows, columns) of the terminal window."""
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is None or size.columns == 0:
            return self._query_window_size()
        return size.lines, size.columns

    def _query_window_size(self):
        self.write(_PROBE_SIZE)
        reply = bytearray()
        while len(reply) < 31:
            byte = self.read_byte(1.0)
            if byte is None or byte == ord("R"):
                break
            reply.append(byte)
        match = _SIZE_REPLY.fullmatch(bytes(reply))
        if not match:
            raise TerminalError("getWindowSize: terminal did not report its size")
        return int(match.group(1)), int(match.group(2))


def wrapper(func, *args, **kwargs):
    """
    Run `func(terminal, *args, **kwargs)` with the terminal in raw mode,
    clearing the screen and restoring the terminal however `func` exits.
    """
    terminal = Terminal()
    with raw_mode(terminal.fd_in):
        try:
            return func(terminal, *args, **kwargs)
        finally:
            try:
                terminal.write(CLEAR_SCREEN + CURSOR_HOME)
            except TerminalError as e:
                logger.log(f"could not clear the screen on exit: {e}")
