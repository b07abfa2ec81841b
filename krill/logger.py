"""
Logger module for the Krill text editor.

Provides a simple file-based logger for debugging and error tracking.
The editor owns the whole terminal while it runs, so nothing is ever
printed; everything worth keeping goes to the log file instead.
"""
import datetime

# Define the log file path ("" disables logging)
LOG_FILE_PATH = "krill.log"

def configure(path: str) -> None:
    """Point the logger at a different file, or disable it with an empty path."""
    global LOG_FILE_PATH
    LOG_FILE_PATH = path

def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    if not LOG_FILE_PATH:
        return
    try:
        with open(LOG_FILE_PATH, 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # If logging fails (e.g., file not writable), ignore to avoid crashing the editor.
        pass
