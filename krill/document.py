"""
Document module for Krill text editor.

Defines the Row class (one line of text plus its tab-expanded render form) and
the Document class, an ordered list of rows with the editing primitives the key
handlers are built from.

Every index coming into this module is treated permissively: positions outside
the document are ignored or clamped, never reported as errors, since the key
handlers constantly produce boundary positions.
"""

TAB_STOP = 4

class Row:
    """One line of the document: raw bytes and the bytes actually drawn."""
    def __init__(self, raw=b"", tab_stop: int = TAB_STOP):
        self.tab_stop = tab_stop
        self.raw = bytearray(raw)
        self.render = b""
        self.update()

    def __len__(self):
        return len(self.raw)

    def __repr__(self):
        return f"Row({bytes(self.raw)!r})"

    def update(self):
        """Rebuild the render form, expanding each tab to the next tab stop."""
        out = bytearray()
        for byte in self.raw:
            if byte == 9:
                out.append(32)
                while len(out) % self.tab_stop != 0:
                    out.append(32)
            else:
                out.append(byte)
        self.render = bytes(out)

    def cx_to_rx(self, cx: int) -> int:
        """Convert an index into `raw` to a column in `render`."""
        rx = 0
        for byte in self.raw[:cx]:
            if byte == 9:
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx

    def insert(self, at: int, byte: int):
        """Insert one byte at `at`; out of range positions append at the end."""
        if at < 0 or at > len(self.raw):
            at = len(self.raw)
        self.raw.insert(at, byte)
        self.update()

    def delete(self, at: int) -> bool:
        """Remove the byte at `at`. Returns False if `at` is out of range."""
        if at < 0 or at >= len(self.raw):
            return False
        del self.raw[at]
        self.update()
        return True

    def append(self, text):
        """Concatenate `text` onto the end of the row."""
        self.raw.extend(text)
        self.update()

    def truncate(self, at: int):
        """Drop everything from `at` onwards."""
        del self.raw[max(at, 0):]
        self.update()


class Document:
    """
    The whole open file: an ordered list of rows, a filename (None for a new,
    unsaved buffer) and `dirty`, the number of changes since the last save.
    """
    def __init__(self, filename: str = None, tab_stop: int = TAB_STOP):
        self.filename = filename
        self.tab_stop = tab_stop
        self.rows = []
        self.dirty = 0

    def __len__(self):
        return len(self.rows)

    def row(self, at: int):
        """Return the row at `at`, or None if there is no such row."""
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return None

    def row_length(self, at: int) -> int:
        """Length of row `at`; zero for the virtual row past the end."""
        row = self.row(at)
        return len(row) if row is not None else 0

    def insert_row(self, at: int, text=b""):
        """Insert a new row holding `text` before position `at`."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int):
        """Remove the row at `at`."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def insert_char(self, at_row: int, col: int, byte: int):
        """Insert `byte` into row `at_row` at column `col` (clamped to the row)."""
        row = self.row(at_row)
        if row is None:
            return
        row.insert(col, byte)
        self.dirty += 1

    def delete_char(self, at_row: int, col: int):
        """Remove the byte at column `col` of row `at_row`."""
        row = self.row(at_row)
        if row is None:
            return
        if row.delete(col):
            self.dirty += 1

    def append_to_row(self, at_row: int, text):
        """Concatenate `text` onto row `at_row`."""
        row = self.row(at_row)
        if row is None:
            return
        row.append(text)
        self.dirty += 1

    def split_row(self, at_row: int, col: int):
        """
        Split row `at_row` at `col`: the bytes from `col` onwards move to a
        new row inserted right below it.
        """
        row = self.row(at_row)
        if row is None:
            return
        col = max(0, min(col, len(row)))
        self.insert_row(at_row + 1, bytes(row.raw[col:]))
        row.truncate(col)
        self.dirty += 1

    def to_bytes(self) -> bytes:
        """Join every row with a trailing newline, ready to be written to disk."""
        return b"".join(bytes(row.raw) + b"\n" for row in self.rows)

    def load_lines(self, lines):
        """Replace the contents with one row per line, stripping line endings."""
        self.rows = [Row(line.rstrip(b"\r\n"), self.tab_stop) for line in lines]
        self.dirty = 0
