import io

import blessed
import pytest

from librarydesk.screen import (
    DOWN,
    ENTER,
    HIGHLIGHT,
    NORMAL,
    TITLE,
    Screen,
)


def _text(screen, x, y, length):
    return "".join(screen[(x + i, y)][0] for i in range(length))


def test_write_records_text_and_colour():
    screen = Screen()
    screen.write(2, 1, "ab", TITLE)
    assert screen[(2, 1)] == ("a", TITLE)
    assert screen[(3, 1)] == ("b", TITLE)
    assert str(screen).splitlines()[1] == "  ab"


def test_empty_cell_is_blank():
    screen = Screen()
    assert screen[(5, 5)] == (" ", None)


def test_box_corners_and_edges():
    screen = Screen()
    screen.box(3, 4, 6)
    for corner in ((3, 4), (9, 4), (3, 6), (9, 6)):
        assert screen[corner] == ("+", NORMAL)
    assert screen[(3, 5)][0] == "|"
    assert screen[(9, 5)][0] == "|"
    assert _text(screen, 4, 4, 5) == "-" * 5
    assert _text(screen, 4, 6, 5) == "-" * 5
    assert screen[(5, 5)] == (" ", None)


def test_box_negative_width_rejected():
    with pytest.raises(ValueError):
        Screen().box(0, 0, -1)


def test_clear_empties_screen():
    screen = Screen()
    screen.write(0, 0, "hello")
    screen.clear()
    assert str(screen) == ""


def test_read_line_returns_and_echoes():
    screen = Screen(lines=["first", "second"])
    assert screen.read_line(1, 2) == "first"
    assert _text(screen, 1, 2, 5) == "first"
    assert screen.read_line(0, 0) == "second"
    with pytest.raises(EOFError):
        screen.read_line(0, 0)


def test_read_key_scripted():
    screen = Screen(keys=[DOWN, ENTER])
    assert screen.read_key() == DOWN
    assert screen.read_key() == ENTER
    with pytest.raises(EOFError):
        screen.read_key()


def test_read_key_without_keyboard():
    with pytest.raises(EOFError):
        Screen().read_key()


def test_menu_main_highlights_selection():
    screen = Screen()
    screen.menu_main(30, 2, 2)
    assert _text(screen, 30, 7, len("Doc gia")) == "Doc gia"
    assert screen[(30, 7)][1] == HIGHLIGHT
    assert screen[(30, 5)][1] == NORMAL
    assert "Menu" in str(screen)


def test_menu_manage_right_column():
    screen = Screen()
    screen.menu_manage(30, 2, 5)
    label = "Danh sach theo ma"
    assert _text(screen, 50, 5, len(label)) == label
    assert screen[(50, 5)][1] == HIGHLIGHT
    assert "Quan li" in str(screen)


def test_menu_reader_and_books():
    screen = Screen()
    screen.menu_reader(30, 2, 3)
    assert _text(screen, 30, 7, len("Tra cuu")) == "Tra cuu"
    assert screen[(30, 7)][1] == HIGHLIGHT
    screen.clear()
    screen.menu_books(30, 2, 1)
    assert _text(screen, 30, 3, len("Nhap sach")) == "Nhap sach"
    assert screen[(30, 3)][1] == HIGHLIGHT
    assert "Quan ly dau sach" in str(screen)


@pytest.mark.parametrize("selected", [0, 4])
def test_menu_main_rejects_bad_selection(selected):
    with pytest.raises(ValueError):
        Screen().menu_main(30, 2, selected)


def test_menu_manage_rejects_bad_selection():
    with pytest.raises(ValueError):
        Screen().menu_manage(30, 2, 7)


def test_write_goes_to_terminal():
    out = io.StringIO()
    term = blessed.Terminal(kind="xterm-256color", stream=out, force_styling=True)
    screen = Screen(terminal=term, out=out)
    screen.write(1, 1, "hello")
    assert "hello" in out.getvalue()