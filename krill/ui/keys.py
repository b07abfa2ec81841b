"""
Key decoding for Krill text editor.

Turns the raw byte stream coming from the terminal into key events. Most
bytes are keys on their own; the escape byte starts a short sequence
(ESC [ A, ESC [ 5 ~, ESC O H, ...) that names a navigation key. The decoder
is a small state machine fed one byte at a time so it can be driven by a
real terminal or by a list of bytes in a test.
"""
from dataclasses import dataclass
from enum import Enum

ESC = 0x1B
ENTER = 0x0D
BACKSPACE = 0x7F
TAB = 0x09

def ctrl_key(ch: str) -> int:
    """Byte sent by Ctrl + `ch`."""
    return ord(ch) & 0x1F

class Key(Enum):
    CHAR = "char"          # printable byte, see KeyEvent.byte
    CONTROL = "control"    # byte < 0x20 or 0x7F, see KeyEvent.byte
    ESCAPE = "escape"      # lone ESC or an escape sequence we do not know
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    HOME = "home"
    END = "end"
    DELETE = "delete"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"

@dataclass(frozen=True)
class KeyEvent:
    key: Key
    byte: int = None

    def is_control(self, byte: int) -> bool:
        return self.key is Key.CONTROL and self.byte == byte

ESCAPE_EVENT = KeyEvent(Key.ESCAPE, ESC)

# ESC [ <digit> ~
_TILDE_KEYS = {
    ord("1"): Key.HOME,
    ord("3"): Key.DELETE,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}

# ESC [ <letter>
_CSI_KEYS = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

# ESC O <letter>
_SS3_KEYS = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

class State(Enum):
    GROUND = "ground"
    ESCAPE = "escape"        # seen ESC
    CSI = "csi"              # seen ESC [
    CSI_DIGIT = "csi_digit"  # seen ESC [ <digit>
    SS3 = "ss3"              # seen ESC O
    DISCARD = "discard"      # seen ESC <other>, swallow one more byte

class KeyDecoder:
    """Byte-at-a-time decoder producing KeyEvents."""
    def __init__(self):
        self.state = State.GROUND
        self.digit = None

    @property
    def pending(self) -> bool:
        """True while part of an escape sequence has been seen."""
        return self.state is not State.GROUND

    def reset(self):
        self.state = State.GROUND
        self.digit = None

    def timeout(self):
        """
        No more bytes arrived. A pending sequence collapses to a plain
        escape; with nothing pending there is no key.
        """
        if not self.pending:
            return None
        self.reset()
        return ESCAPE_EVENT

    def feed(self, byte: int):
        """Consume one byte. Returns a KeyEvent, or None if more bytes are needed."""
        state = self.state

        if state is State.GROUND:
            if byte == ESC:
                self.state = State.ESCAPE
                return None
            if byte < 0x20 or byte == BACKSPACE:
                return KeyEvent(Key.CONTROL, byte)
            return KeyEvent(Key.CHAR, byte)

        if state is State.ESCAPE:
            if byte == ord("["):
                self.state = State.CSI
            elif byte == ord("O"):
                self.state = State.SS3
            else:
                self.state = State.DISCARD
            return None

        if state is State.CSI:
            if ord("0") <= byte <= ord("9"):
                self.state = State.CSI_DIGIT
                self.digit = byte
                return None
            self.reset()
            key = _CSI_KEYS.get(byte)
            return KeyEvent(key) if key else ESCAPE_EVENT

        if state is State.CSI_DIGIT:
            digit = self.digit
            self.reset()
            if byte == ord("~") and digit in _TILDE_KEYS:
                return KeyEvent(_TILDE_KEYS[digit])
            return ESCAPE_EVENT

        if state is State.SS3:
            self.reset()
            key = _SS3_KEYS.get(byte)
            return KeyEvent(key) if key else ESCAPE_EVENT

        # DISCARD
        self.reset()
        return ESCAPE_EVENT

def decode(data: bytes) -> list:
    """Decode a complete byte string into key events (a trailing partial sequence becomes ESCAPE)."""
    decoder = KeyDecoder()
    events = []
    for byte in data:
        event = decoder.feed(byte)
        if event is not None:
            events.append(event)
    event = decoder.timeout()
    if event is not None:
        events.append(event)
    return events

def read_key(terminal, decoder: KeyDecoder, timeout: float):
    """
    Read bytes from `terminal` until they form a key. Every read waits at most
    `timeout` seconds; returns None when no key arrived in time.
    """
    while True:
        byte = terminal.read_byte(timeout)
        if byte is None:
            return decoder.timeout()
        event = decoder.feed(byte)
        if event is not None:
            return event
