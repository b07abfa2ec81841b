"""
Main entry point and editor context for the Krill text editor.
"""
import sys
import time

from krill import config as config_module
from krill import fileio, logger, terminal
from krill.cursor import Cursor
from krill.document import Document
from krill.ui import input as key_input
from krill.ui import screen
from krill.ui.keys import KeyDecoder, read_key

USAGE = "usage: krill [path]"
HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"

class EditorContext:
    """
    Holds the state of the editor: the document, the cursor and viewport,
    the status message and the terminal it draws on.
    """
    def __init__(self, term, config=None):
        self.terminal = term
        self.config = config if config is not None else config_module.EditorConfig()

        # Two lines at the bottom are taken by the status bar and message line
        rows, cols = term.get_window_size()
        if rows < 3 or cols < 1:
            raise terminal.TerminalError(f"terminal too small: {rows}x{cols}")
        self.screen_rows = rows - 2
        self.screen_cols = cols

        self.document = Document(tab_stop=self.config.tab_stop)
        self.cursor = Cursor()
        self.decoder = KeyDecoder()

        # Message line
        self.status_message = ""
        self.status_time = 0.0

        # Ctrl-Q presses still needed to leave with unsaved changes
        self.quit_times_left = self.config.quit_times

        # Running flag
        self.exit_flag = False

    def set_status_message(self, message: str):
        """Show `message` in the message line, starting its expiry clock now."""
        self.status_message = message
        self.status_time = time.time()

    def open_file(self, filename: str):
        """
        Load `filename` into the document. A file that does not exist yet gives
        an empty document that will be created on save.
        """
        try:
            lines = fileio.read_lines(filename)
        except FileNotFoundError:
            self.document.filename = filename
            self.set_status_message(f"new file: {filename}")
            logger.log(f"new file: {filename}")
        except OSError as e:
            self.set_status_message(f"error opening file: {e.strerror or e}")
            logger.log(f"error opening file {filename}: {e}")
        else:
            self.document.filename = filename
            self.document.load_lines(lines)
            logger.log(f"file opened: {filename} ({len(lines)} lines)")

    def graceful_exit(self):
        """Stop the main loop; the terminal is restored by terminal.wrapper."""
        logger.log("Editor exited.")
        self.exit_flag = True

def main(term, filename=None, config=None):
    context = EditorContext(term, config)
    context.set_status_message(HELP_MESSAGE)
    if filename is not None:
        context.open_file(filename)

    # Main loop
    while not context.exit_flag:
        screen.display(context)
        event = read_key(context.terminal, context.decoder, context.config.read_timeout)
        key_input.handle_keypress(context, event)
    return context

def run():
    """
    Parse the command line and run the editor with the terminal in raw mode.
    """
    args = sys.argv[1:]
    if len(args) > 1 or (args and args[0].startswith("-")):
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    filename = args[0] if args else None

    config = config_module.load_config()
    logger.configure(config.log_file)
    logger.log("Editor started.")

    try:
        terminal.wrapper(main, filename, config)
    except terminal.TerminalError as e:
        logger.log(f"fatal: {e}")
        print(f"krill: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    run()
