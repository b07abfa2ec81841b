"""
krill/ui/screen.py

Draws the editor: the visible slice of the document, an inverse-video status
bar and a message line. A whole frame is built into one byte buffer of VT100
sequences and written to the terminal in a single call, so the screen never
shows a half-drawn frame.

Also holds the save-as prompt, which reuses the same drawing and key reading
to collect a line of text in the message line.
"""
import os
import time

from wcwidth import wcwidth

from krill import __version__
from krill.terminal import (
    ATTRS_OFF, CLEAR_LINE, CURSOR_HOME, HIDE_CURSOR, INVERSE_ON, SHOW_CURSOR,
    move_cursor,
)
from krill.ui.keys import BACKSPACE, ENTER, Key, ctrl_key, read_key

WELCOME = f"Krill editor -- version {__version__}"
NO_NAME = "[No Name]"
FILENAME_WIDTH = 20
MESSAGE_TIMEOUT = 5

def truncate_to_width(text: str, width: int):
    """
    Cut `text` to at most `width` terminal columns.
    Returns the cut text and the number of columns it takes.
    """
    out = []
    used = 0
    for ch in text:
        w = wcwidth(ch)
        if w < 0:
            # Never let a control character reach the terminal
            ch, w = "?", 1
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out), used

def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="replace")

###############################################################################
# FRAME PARTS
###############################################################################

def draw_rows(buf: bytearray, document, cursor, screen_rows: int, screen_cols: int):
    """Append the text area: one line per screen row, `~` past the end of the file."""
    for y in range(screen_rows):
        row = document.row(y + cursor.rowoff)
        if row is not None:
            buf += row.render[cursor.coloff:cursor.coloff + screen_cols]
        elif len(document) == 0 and y == screen_rows // 3:
            welcome = WELCOME[:screen_cols]
            padding = (screen_cols - len(welcome)) // 2
            if padding:
                buf += b"~"
                padding -= 1
            buf += b" " * padding
            buf += _encode(welcome)
        else:
            buf += b"~"
        buf += CLEAR_LINE
        buf += b"\r\n"

def draw_status_bar(buf: bytearray, document, cursor, screen_cols: int):
    """
    Append the status bar: filename, line count and modified marker on the
    left, current line / total lines flush right, all in inverse video.
    """
    fname = os.path.basename(document.filename) if document.filename else NO_NAME
    name, _ = truncate_to_width(fname, FILENAME_WIDTH)
    modified = "(modified)" if document.dirty else ""
    status, length = truncate_to_width(f"{name} - {len(document)} lines {modified}", screen_cols)
    rstatus = f"{cursor.cy + 1}/{len(document)}"

    buf += INVERSE_ON
    buf += _encode(status)
    while length < screen_cols:
        if screen_cols - length == len(rstatus):
            buf += _encode(rstatus)
            break
        buf += b" "
        length += 1
    buf += ATTRS_OFF
    buf += b"\r\n"

def draw_message_bar(buf: bytearray, message: str, message_time: float, now: float,
                     screen_cols: int, timeout: float = MESSAGE_TIMEOUT):
    """Append the message line; messages older than `timeout` seconds are not shown."""
    buf += CLEAR_LINE
    if message and now - message_time < timeout:
        text, _ = truncate_to_width(message, screen_cols)
        buf += _encode(text)

def compose_frame(document, cursor, screen_rows: int, screen_cols: int,
                  message: str = "", message_time: float = 0.0, now: float = None,
                  message_timeout: float = MESSAGE_TIMEOUT) -> bytes:
    """Build one complete frame for the current editor state."""
    if now is None:
        now = time.time()
    cursor.scroll(document, screen_rows, screen_cols)

    buf = bytearray()
    buf += HIDE_CURSOR
    buf += CURSOR_HOME
    draw_rows(buf, document, cursor, screen_rows, screen_cols)
    draw_status_bar(buf, document, cursor, screen_cols)
    draw_message_bar(buf, message, message_time, now, screen_cols, message_timeout)
    buf += move_cursor(cursor.cy - cursor.rowoff + 1, cursor.rx - cursor.coloff + 1)
    buf += SHOW_CURSOR
    return bytes(buf)

def display(context):
    """Redraw the whole screen for `context`."""
    frame = compose_frame(
        context.document,
        context.cursor,
        context.screen_rows,
        context.screen_cols,
        message=context.status_message,
        message_time=context.status_time,
        message_timeout=context.config.message_timeout,
    )
    context.terminal.write(frame)

###############################################################################
# PROMPT
###############################################################################

def fill_prompt(prompt: str, typed: str) -> str:
    """Put the typed text where `%s` appears in `prompt`, taken literally."""
    before, marker, after = prompt.partition("%s")
    if not marker:
        return prompt + typed
    return before + typed + after

def prompt_input(context, prompt: str):
    """
    Ask for a line of text in the message line. `%s` in `prompt` marks where
    the typed text goes. Returns the entered string, or None if canceled.
    """
    typed = ""
    while True:
        context.set_status_message(fill_prompt(prompt, typed))
        display(context)
        event = read_key(context.terminal, context.decoder, context.config.read_timeout)
        if event is None:
            continue
        if (event.key is Key.DELETE or event.is_control(ctrl_key('h'))
                or event.is_control(BACKSPACE)):
            typed = typed[:-1]
        elif event.key is Key.ESCAPE:
            context.set_status_message("")
            return None
        elif event.is_control(ENTER):
            if typed:
                context.set_status_message("")
                return typed
        elif event.key is Key.CHAR and event.byte < 128:
            typed += chr(event.byte)
