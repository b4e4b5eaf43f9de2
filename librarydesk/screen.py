"""Character-cell console screen: positioned coloured text, boxes and menus."""

import sys

NORMAL = 7
HIGHLIGHT = 11
ERROR = 12
TITLE = 14

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
ENTER = "enter"
ESCAPE = "escape"

HELP = "Cac nut: mui ten len/xuong: di chuyen, enter: chon, esc: thoat"

_MAIN_ITEMS = ("Menu", "Quan li", "Doc gia", "Dau sach")
_MANAGE_ITEMS = (
    "Them doc gia",
    "Xoa doc gia",
    "Chinh thong tin",
    "Danh sach theo ten",
    "Danh sach theo ma",
    "Black list",
)
_READER_ITEMS = ("Muon sach", "Tra sach", "Tra cuu")
_BOOK_ITEMS = ("Nhap sach", "Danh sach theo the loai", "Tim kiem", "Top 10 sach muon nhieu")


def _ansi(colour):
    """Console attribute colour (BGR bit order) to the ANSI 16-colour index."""
    return (colour & 8) | ((colour & 1) << 2) | (colour & 2) | ((colour & 4) >> 2)


def _check_selected(selected, count):
    if not 1 <= selected <= count:
        raise ValueError(f"menu entry {selected} is outside 1..{count}")


class Screen:
    """A screen of character cells, mirrored to a terminal when one is given.

    ``lines`` and ``keys`` supply scripted input in place of the keyboard.
    Indexing with ``(x, y)`` gives the ``(char, colour)`` held in that cell.
    """

    def __init__(self, terminal=None, lines=None, keys=None, out=None):
        self._term = terminal
        self._lines = None if lines is None else iter(lines)
        self._keys = None if keys is None else iter(keys)
        self._out = out if out is not None else sys.stdout
        self._cells = {}

    def __getitem__(self, position):
        x, y = position
        return self._cells.get((x, y), (" ", None))

    def __str__(self):
        cells = [(x, y) for x, y in self._cells if x >= 0 and y >= 0]
        if not cells:
            return ""
        width = max(x for x, _ in cells) + 1
        height = max(y for _, y in cells) + 1
        return "\n".join(
            "".join(self[(x, y)][0] for x in range(width)).rstrip()
            for y in range(height)
        )

    def _record(self, x, y, text, colour):
        for offset, ch in enumerate(text):
            self._cells[(x + offset, y)] = (ch, colour)

    def _emit(self, text):
        self._out.write(text)
        self._out.flush()

    def write(self, x, y, text, colour=NORMAL):
        """Put ``text`` at column ``x`` of row ``y`` in ``colour``."""
        self._record(x, y, text, colour)
        if self._term is not None:
            term = self._term
            self._emit(
                term.move_xy(max(x, 0), max(y, 0))
                + term.color(_ansi(colour))
                + text
                + term.normal
            )

    def box(self, x, y, width):
        """Draw a three-row box whose corners lie ``width`` columns apart."""
        if width < 0:
            raise ValueError(f"negative box width: {width}")
        edge = "+" if width == 0 else "+" + "-" * (width - 1) + "+"
        self.write(x, y, edge)
        self.write(x, y + 2, edge)
        self.write(x, y + 1, "|")
        self.write(x + width, y + 1, "|")

    def clear(self):
        self._cells.clear()
        if self._term is not None:
            self._emit(self._term.home + self._term.clear)

    def read_line(self, x, y):
        """Read one line of input typed at ``(x, y)``; EOFError when input ends."""
        if self._lines is not None:
            try:
                text = next(self._lines)
            except StopIteration:
                raise EOFError("no more input lines") from None
        else:
            if self._term is not None:
                self._emit(self._term.move_xy(max(x, 0), max(y, 0)) + self._term.normal)
            text = input()
        self._record(x, y, text, NORMAL)
        return text

    def read_key(self):
        """Wait for a key; arrows, Enter and Esc come back as their names."""
        if self._keys is not None:
            try:
                return next(self._keys)
            except StopIteration:
                raise EOFError("no more keys") from None
        if self._term is None:
            raise EOFError("no keyboard attached")
        term = self._term
        with term.cbreak():
            key = term.inkey()
        if key.is_sequence:
            names = {
                term.KEY_UP: UP,
                term.KEY_DOWN: DOWN,
                term.KEY_LEFT: LEFT,
                term.KEY_RIGHT: RIGHT,
                term.KEY_ENTER: ENTER,
                term.KEY_ESCAPE: ESCAPE,
            }
            return names.get(key.code, key.name)
        text = str(key)
        if text in ("\r", "\n"):
            return ENTER
        if text == "\x1b":
            return ESCAPE
        return text

    def menu_main(self, x, y, selected):
        _check_selected(selected, len(_MAIN_ITEMS) - 1)
        for i, item in enumerate(_MAIN_ITEMS):
            self.write(x + (5 if i == 0 else 0), y + 1 + 2 * i, item)
            self.box(x - 3, y + 2 * i, 20)
        self.write(x, y + 15, HELP)
        self.write(x, y + 1 + 2 * selected, _MAIN_ITEMS[selected], HIGHLIGHT)

    def menu_manage(self, x, y, selected):
        _check_selected(selected, len(_MANAGE_ITEMS))
        index = selected - 1
        self.box(x - 3, y - 2, 45)
        self.write(x + 15, y - 1, "Quan li")
        for i in range(3):
            self.write(x, y + 1 + 2 * i, _MANAGE_ITEMS[i])
            self.write(x + 20, y + 1 + 2 * i, _MANAGE_ITEMS[i + 3])
            self.box(x - 3, y + 2 * i, 20)
            self.box(x + 17, y + 2 * i, 25)
        self.write(x, y + 15, HELP)
        column = x + 20 if index > 2 else x
        self.write(column, y + 1 + 2 * (index % 3), _MANAGE_ITEMS[index], HIGHLIGHT)

    def _simple_menu(self, x, y, selected, heading, heading_offset, items, width):
        _check_selected(selected, len(items))
        self.box(x - 3, y - 2, width)
        self.write(x + heading_offset, y - 1, heading)
        for i, item in enumerate(items):
            self.write(x, y + 1 + 2 * i, item)
            self.box(x - 3, y + 2 * i, width)
        self.write(x, y + 15, HELP)
        self.write(x, y + 1 + 2 * (selected - 1), items[selected - 1], HIGHLIGHT)

    def menu_reader(self, x, y, selected):
        self._simple_menu(x, y, selected, "Doc gia", 2, _READER_ITEMS, 20)

    def menu_books(self, x, y, selected):
        self._simple_menu(x, y, selected, "Quan ly dau sach", 5, _BOOK_ITEMS, 30)