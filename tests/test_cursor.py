import random

import pytest

from krill.cursor import PAST_END, Cursor, Direction, OnRow, render_column
from krill.document import Document


def make_document(*lines):
    doc = Document()
    doc.load_lines(list(lines))
    return doc


def at(cx, cy):
    cursor = Cursor()
    cursor.cx, cursor.cy = cx, cy
    return cursor


def test_locate():
    doc = make_document(b"a", b"b")
    assert at(0, 1).locate(doc) == OnRow(1)
    assert at(0, 2).locate(doc) is PAST_END
    assert at(0, 0).locate(make_document()) is PAST_END


def test_left_wraps_to_end_of_previous_row():
    doc = make_document(b"abc", b"de")
    cursor = at(0, 1)
    cursor.move(Direction.LEFT, doc)
    assert (cursor.cx, cursor.cy) == (3, 0)


def test_left_at_document_start_stays():
    doc = make_document(b"abc")
    cursor = at(0, 0)
    cursor.move(Direction.LEFT, doc)
    assert (cursor.cx, cursor.cy) == (0, 0)


def test_right_wraps_to_start_of_next_row():
    doc = make_document(b"ab", b"cd")
    cursor = at(2, 0)
    cursor.move(Direction.RIGHT, doc)
    assert (cursor.cx, cursor.cy) == (0, 1)


def test_right_past_end_of_file_stays():
    doc = make_document(b"ab")
    cursor = at(0, 1)
    cursor.move(Direction.RIGHT, doc)
    assert (cursor.cx, cursor.cy) == (0, 1)


def test_down_stops_on_virtual_last_row():
    doc = make_document(b"a", b"b")
    cursor = at(0, 0)
    for _ in range(5):
        cursor.move(Direction.DOWN, doc)
    assert cursor.cy == 2


def test_up_stops_at_top():
    doc = make_document(b"a", b"b")
    cursor = at(0, 1)
    for _ in range(5):
        cursor.move(Direction.UP, doc)
    assert cursor.cy == 0


def test_vertical_move_snaps_to_shorter_row():
    doc = make_document(b"a long line", b"short")
    cursor = at(11, 0)
    cursor.move(Direction.DOWN, doc)
    assert (cursor.cx, cursor.cy) == (5, 1)
    cursor.move(Direction.DOWN, doc)
    assert (cursor.cx, cursor.cy) == (0, 2)


def test_clamp_after_rows_removed():
    doc = make_document(b"abc", b"defgh")
    cursor = at(5, 1)
    doc.delete_row(1)
    cursor.clamp(doc)
    assert (cursor.cx, cursor.cy) == (0, 1)
    cursor.cy = 0
    cursor.cx = 10
    cursor.clamp(doc)
    assert cursor.cx == 3


def test_render_column():
    doc = make_document(b"\tx")
    assert render_column(doc.rows[0], 0) == 0
    assert render_column(doc.rows[0], 1) == 4
    assert render_column(doc.rows[0], 2) == 5
    assert render_column(None, 3) == 0


def test_scroll_down_and_back_up():
    doc = make_document(*[b"line"] * 50)
    cursor = at(0, 30)
    cursor.scroll(doc, 10, 80)
    assert cursor.rowoff == 21
    cursor.cy = 5
    cursor.scroll(doc, 10, 80)
    assert cursor.rowoff == 5


def test_scroll_horizontally_uses_render_column():
    doc = make_document(b"\t" * 30)
    cursor = at(30, 0)
    cursor.scroll(doc, 10, 80)
    assert cursor.rx == 120
    assert cursor.coloff == 41
    cursor.cx = 0
    cursor.scroll(doc, 10, 80)
    assert cursor.coloff == 0


def test_scroll_keeps_cursor_inside_window():
    doc = make_document(*[b"x" * 200] * 100)
    rng = random.Random(7)
    cursor = Cursor()
    for _ in range(300):
        cursor.cy = rng.randrange(0, 101)
        cursor.cx = rng.randrange(0, 201)
        cursor.clamp(doc)
        cursor.scroll(doc, 20, 60)
        assert cursor.rowoff <= cursor.cy < cursor.rowoff + 20
        assert cursor.coloff <= cursor.rx < cursor.coloff + 60


@pytest.mark.parametrize("seed", range(5))
def test_cursor_stays_valid_through_random_edits(seed):
    rng = random.Random(seed)
    doc = make_document(b"alpha", b"\tbeta", b"", b"gamma delta")
    cursor = Cursor()
    directions = list(Direction)
    for _ in range(500):
        op = rng.randrange(5)
        if op == 0:
            cursor.move(rng.choice(directions), doc)
        elif op == 1:
            if cursor.locate(doc) is PAST_END:
                doc.insert_row(len(doc), b"")
            doc.insert_char(cursor.cy, cursor.cx, rng.choice(b"ab\t "))
            cursor.cx += 1
        elif op == 2:
            doc.delete_char(cursor.cy, cursor.cx - 1)
            cursor.cx -= 1
        elif op == 3:
            doc.insert_row(rng.randrange(-1, len(doc) + 2), b"new")
        else:
            doc.delete_row(rng.randrange(-1, len(doc) + 1))
        cursor.clamp(doc)
        assert 0 <= cursor.cy <= len(doc)
        assert 0 <= cursor.cx <= doc.row_length(cursor.cy)
