"""
Cursor and viewport state for the Krill text editor.

The cursor lives in raw-text coordinates (cx, cy); rx is the same column in
rendered (tab-expanded) coordinates. rowoff/coloff are the top-left corner
of the visible window.
"""
from dataclasses import dataclass
from enum import Enum

class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

@dataclass(frozen=True)
class OnRow:
    """The cursor is on an existing row."""
    index: int

class PastEnd:
    """The cursor is on the virtual empty line after the last row."""
    def __repr__(self):
        return "PAST_END"

PAST_END = PastEnd()

def render_column(row, cx: int) -> int:
    """Convert raw column `cx` of `row` to a rendered column."""
    if row is None:
        return 0
    return row.cx_to_rx(cx)

class Cursor:
    """Cursor position plus the scroll offsets that keep it on screen."""
    def __init__(self):
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0

    def __repr__(self):
        return f"Cursor(cx={self.cx}, cy={self.cy}, rx={self.rx}, rowoff={self.rowoff}, coloff={self.coloff})"

    def locate(self, document):
        """Classify the cursor row as OnRow(index) or PAST_END."""
        if 0 <= self.cy < len(document):
            return OnRow(self.cy)
        return PAST_END

    def current_row(self, document):
        where = self.locate(document)
        if where is PAST_END:
            return None
        return document.rows[where.index]

    def clamp(self, document):
        """Keep cy inside [0, rows] and snap cx to the length of its row."""
        self.cy = max(0, min(self.cy, len(document)))
        row = self.current_row(document)
        rowlen = len(row) if row is not None else 0
        self.cx = max(0, min(self.cx, rowlen))

    def scroll(self, document, screen_rows: int, screen_cols: int):
        """Recompute rx and move the viewport so the cursor is visible."""
        self.rx = render_column(self.current_row(document), self.cx)

        # Vertical
        if self.cy < self.rowoff:
            self.rowoff = self.cy
        if self.cy >= self.rowoff + screen_rows:
            self.rowoff = self.cy - screen_rows + 1

        # Horizontal
        if self.rx < self.coloff:
            self.coloff = self.rx
        if self.rx >= self.coloff + screen_cols:
            self.coloff = self.rx - screen_cols + 1

    def move(self, direction: Direction, document):
        """Move one step in `direction`, wrapping across line ends."""
        row = self.current_row(document)
        if direction is Direction.LEFT:
            if self.cx > 0:
                self.cx -= 1
            elif self.cy > 0:
                # Start of line: go to the end of the previous one
                self.cy -= 1
                self.cx = document.row_length(self.cy)
        elif direction is Direction.RIGHT:
            if row is not None and self.cx < len(row):
                self.cx += 1
            elif row is not None and self.cx == len(row):
                self.cy += 1
                self.cx = 0
        elif direction is Direction.UP:
            if self.cy > 0:
                self.cy -= 1
        elif direction is Direction.DOWN:
            if self.cy < len(document):
                self.cy += 1
        self.clamp(document)
