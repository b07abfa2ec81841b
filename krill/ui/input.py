"""
Input handling for Krill text editor.

Applies decoded key events to the document and cursor held by the editor
context: typing, line breaks, deletion, movement, saving and quitting.
"""
from krill import fileio, logger
from krill.cursor import PAST_END, Direction
from krill.ui import screen
from krill.ui.keys import BACKSPACE, ENTER, TAB, Key, ctrl_key

QUIT = ctrl_key('q')
SAVE = ctrl_key('s')
REFRESH = ctrl_key('l')
CTRL_H = ctrl_key('h')

SAVE_PROMPT = "Save as: %s (ESC to cancel)"

_ARROWS = {
    Key.ARROW_UP: Direction.UP,
    Key.ARROW_DOWN: Direction.DOWN,
    Key.ARROW_LEFT: Direction.LEFT,
    Key.ARROW_RIGHT: Direction.RIGHT,
}

###############################################################################
# EDITING
###############################################################################

def insert_char(context, byte: int):
    """Insert `byte` at the cursor and step past it."""
    document, cursor = context.document, context.cursor
    if cursor.locate(document) is PAST_END:
        # Typing on the line after the end of the file starts a new row
        document.insert_row(len(document), b"")
    document.insert_char(cursor.cy, cursor.cx, byte)
    cursor.cx += 1

def insert_newline(context):
    """Break the line at the cursor and move to the start of the new line."""
    document, cursor = context.document, context.cursor
    if cursor.cx == 0:
        document.insert_row(cursor.cy, b"")
    else:
        document.split_row(cursor.cy, cursor.cx)
    cursor.cy += 1
    cursor.cx = 0

def delete_char(context):
    """Delete the byte left of the cursor, joining lines at the start of a row."""
    document, cursor = context.document, context.cursor
    if cursor.locate(document) is PAST_END:
        return
    if cursor.cx == 0 and cursor.cy == 0:
        return

    if cursor.cx > 0:
        document.delete_char(cursor.cy, cursor.cx - 1)
        cursor.cx -= 1
    else:
        prev_len = document.row_length(cursor.cy - 1)
        document.append_to_row(cursor.cy - 1, bytes(document.rows[cursor.cy].raw))
        document.delete_row(cursor.cy)
        cursor.cy -= 1
        cursor.cx = prev_len

###############################################################################
# MOVEMENT
###############################################################################

def move_cursor(context, key: Key):
    context.cursor.move(_ARROWS[key], context.document)

def page(context, key: Key):
    """Jump to the top or bottom edge of the screen, then scroll a screenful."""
    document, cursor = context.document, context.cursor
    if key is Key.PAGE_UP:
        cursor.cy = cursor.rowoff
        direction = Direction.UP
    else:
        cursor.cy = min(cursor.rowoff + context.screen_rows - 1, len(document))
        direction = Direction.DOWN
    for _ in range(context.screen_rows):
        cursor.move(direction, document)

###############################################################################
# FILE AND SESSION
###############################################################################

def save(context):
    """
    Write the document to its file, asking for a name first if it has none.
    Failures are reported in the message line and leave the document as it is.
    """
    document = context.document
    if document.filename is None:
        name = screen.prompt_input(context, SAVE_PROMPT)
        if name is None:
            context.set_status_message("Save aborted")
            logger.log("save aborted")
            return
        document.filename = name

    data = document.to_bytes()
    try:
        written = fileio.write_file(document.filename, data)
    except OSError as e:
        context.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
        logger.log(f"error saving {document.filename}: {e}")
        return
    document.dirty = 0
    context.set_status_message(f"{written} bytes written to disk")
    logger.log(f"wrote {written} bytes to {document.filename}")

def quit_editor(context):
    """
    Quit, unless there are unsaved changes: then Ctrl-Q has to be pressed
    `quit_times` more times in a row.
    """
    if context.document.dirty and context.quit_times_left > 0:
        context.set_status_message(
            "WARNING!!! File has unsaved changes. "
            f"Press Ctrl-Q {context.quit_times_left} more times to quit."
        )
        context.quit_times_left -= 1
        return
    context.graceful_exit()

###############################################################################
# DISPATCH
###############################################################################

def handle_keypress(context, event):
    """Apply one key event. `None` (no key before the read timed out) does nothing."""
    if event is None:
        return
    if event.is_control(QUIT):
        quit_editor(context)
        return

    key = event.key
    cursor = context.cursor
    if event.is_control(ENTER):
        insert_newline(context)
    elif event.is_control(SAVE):
        save(context)
    elif key is Key.HOME:
        cursor.cx = 0
    elif key is Key.END:
        cursor.cx = context.document.row_length(cursor.cy)
    elif event.is_control(BACKSPACE) or event.is_control(CTRL_H) or key is Key.DELETE:
        if key is Key.DELETE:
            cursor.move(Direction.RIGHT, context.document)
        delete_char(context)
    elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
        page(context, key)
    elif key in _ARROWS:
        move_cursor(context, key)
    elif event.is_control(REFRESH) or key is Key.ESCAPE:
        pass
    elif key is Key.CHAR or event.is_control(TAB):
        insert_char(context, event.byte)

    # Any key other than Ctrl-Q restarts the quit countdown
    context.quit_times_left = context.config.quit_times
