"""The library desk: menus tying readers, loans and the catalogue together."""

import argparse
import random
from pathlib import Path

from .books import AVAILABLE, LENT, load_catalogue
from .forms import (
    InvalidInput,
    browse_titles,
    read_reader,
    read_title,
    show_copies,
    show_favourites,
    show_loans,
    show_overdue,
    show_reader,
    show_readers,
    show_titles_by_genre,
)
from .readers import (
    PENALTY_LIMIT,
    Loan,
    LoanStatus,
    favourite_titles,
    load_loans,
    load_readers,
)
from .screen import DOWN, ENTER, ESCAPE, UP, Screen
from .validation import is_date, is_name, is_number, normalize, parse_number

MENU_X = 30
MENU_Y = 2
NOTICE_X = 30
NOTICE_Y = 15
LOOKUP_DATE = "20/10/2023"

READERS_FILE = "DocGia.txt"
LOANS_FILE = "MuonTra.txt"
TITLES_FILE = "DauSach.txt"


def _move(selected, key, count):
    """Selection after an arrow key, wrapping around ``1..count``."""
    if key == UP:
        return count if selected == 1 else selected - 1
    if key == DOWN:
        return 1 if selected == count else selected + 1
    return selected


class LibraryApp:
    """Menu-driven desk over a reader tree and a title catalogue."""

    def __init__(self, readers, catalogue, screen, rng=None):
        self.readers = readers
        self.catalogue = catalogue
        self.screen = screen
        self._rng = rng or random.Random()

    # Operations on the records

    def add_reader(self, reader):
        """Give ``reader`` a fresh card number, store it and return the card."""
        reader.card = self.readers.new_card(self._rng)
        self.readers.insert(reader)
        return reader.card

    def delete_reader(self, card):
        """Remove and return the reader holding ``card``; KeyError if absent."""
        return self.readers.remove(card)

    def _reader(self, card):
        reader = self.readers.find(card)
        if reader is None:
            raise KeyError("Ma the khong co trong danh sach!")
        return reader

    def borrow(self, today, card, isbn, code):
        """Lend copy ``code`` of title ``isbn`` to reader ``card``; returns the loan."""
        if not is_date(today):
            raise ValueError("Ngay khong hop le!")
        reader = self._reader(card)
        if reader.penalty(today) > PENALTY_LIMIT:
            raise ValueError("Ban khong duoc phep muon sach!")
        title = self.catalogue.find_by_isbn(isbn)
        if title is None:
            raise KeyError("Khong co ma dau sach phu hop!")
        copy = title.find_copy(code)
        if copy is None or not copy.available:
            raise ValueError("Muon that bai!")
        loan = Loan(code, today)
        reader.add_loan(loan)
        copy.status = LENT
        return loan

    def give_back(self, today, card, index):
        """Close loan number ``index`` of reader ``card``.

        Returns the copy put back on the shelf, or None when no title holds it.
        """
        if not is_date(today):
            raise ValueError("Ngay khong hop le!")
        reader = self._reader(card)
        if not 0 <= index < len(reader.loans):
            raise IndexError(f"no loan number {index}")
        loan = reader.loans[index]
        if loan.status is not LoanStatus.BORROWED:
            raise ValueError("Tra that bai!")
        loan.returned = today
        loan.status = LoanStatus.RETURNED
        copy = self.catalogue.find_copy(loan.code)
        if copy is not None:
            copy.status = AVAILABLE
        return copy

    # Menus

    def run(self):
        """Drive the menus until Esc on the main menu or the input runs out."""
        submenus = {
            1: (self.screen.menu_manage, (
                self._add_reader_action,
                self._delete_reader_action,
                self._edit_reader_action,
                self._readers_by_name_action,
                self._readers_by_card_action,
                self._overdue_action,
            )),
            2: (self.screen.menu_reader, (
                self._borrow_action,
                self._return_action,
                self._lookup_action,
            )),
            3: (self.screen.menu_books, (
                self._add_title_action,
                self._genre_action,
                self._search_action,
                self._favourites_action,
            )),
        }
        try:
            selected = 1
            self.screen.menu_main(MENU_X, MENU_Y, selected)
            while True:
                key = self.screen.read_key()
                if key == ESCAPE:
                    return
                if key == ENTER:
                    self.screen.clear()
                    self._submenu(*submenus[selected])
                    selected = 1
                else:
                    selected = _move(selected, key, len(submenus))
                self.screen.menu_main(MENU_X, MENU_Y, selected)
        except EOFError:
            return

    def _submenu(self, draw, actions):
        selected = 1
        draw(MENU_X, MENU_Y, selected)
        while True:
            key = self.screen.read_key()
            if key == ESCAPE:
                self.screen.clear()
                return
            if key == ENTER:
                self.screen.clear()
                actions[selected - 1]()
                self.screen.read_key()
                self.screen.clear()
            else:
                selected = _move(selected, key, len(actions))
            draw(MENU_X, MENU_Y, selected)

    # Screen helpers

    def _notice(self, text):
        self.screen.write(NOTICE_X, NOTICE_Y, text)

    def _ask(self, x, y, prompt):
        self.screen.write(x, y, prompt)
        return self.screen.read_line(x + len(prompt), y)

    def _ask_card(self, y):
        text = self._ask(MENU_X, y, "Nhap ma the: ").strip()
        try:
            return int(text)
        except ValueError:
            return None

    def _confirm(self, prompt):
        answer = self._ask(MENU_X, NOTICE_Y - 1, prompt).strip()
        return answer.startswith("y")

    def _find_by_typed_card(self):
        """Ask for a card as digits; returns the reader or None after a notice."""
        self.screen.write(MENU_X, MENU_Y + 1, "Nhap ma: ")
        text = self.screen.read_line(MENU_X + 9, MENU_Y + 1)
        if not is_number(text):
            self._notice("Ma khong hop le!")
            return None
        reader = self.readers.find(parse_number(text))
        if reader is None:
            self._notice("Ma khong co trong danh sach")
        return reader

    def _reader_by_prompt(self, y):
        card = self._ask_card(y)
        reader = None if card is None else self.readers.find(card)
        if reader is None:
            self._notice("Ma the khong co trong danh sach!")
        return reader

    # Reader management

    def _add_reader_action(self):
        self.screen.write(MENU_X, MENU_Y, "Them")
        try:
            reader = read_reader(self.screen)
        except InvalidInput:
            self._notice("Them that bai!")
            return
        self.add_reader(reader)
        show_reader(self.screen, reader)
        self._notice("Them thanh cong!")

    def _delete_reader_action(self):
        self.screen.write(MENU_X, MENU_Y, "Xoa")
        reader = self._find_by_typed_card()
        if reader is None:
            return
        show_reader(self.screen, reader)
        if self._confirm("Ban co muon xoa khong(y/n)?"):
            self.delete_reader(reader.card)
            self._notice("Xoa thanh cong!")
        else:
            self._notice("Xoa that bai!")

    def _edit_reader_action(self):
        self.screen.write(MENU_X, MENU_Y, "Chinh thong tin")
        reader = self._find_by_typed_card()
        if reader is None:
            return
        show_reader(self.screen, reader)
        try:
            edited = read_reader(self.screen)
        except InvalidInput:
            self._notice("Cap nhat that bai!")
            return
        if self._confirm("Ban co muon cap nhat khong(y/n)?"):
            reader.surname = edited.surname
            reader.name = edited.name
            reader.gender = edited.gender
            reader.status = edited.status
            self._notice("Cap nhat thanh cong!")
        else:
            self._notice("Cap nhat that bai!")

    def _list_readers(self, readers, heading_x):
        self.screen.write(heading_x, MENU_Y, "Danh sach")
        x = MENU_X - 10
        self.screen.box(x - 3, MENU_Y - 1, 85)
        show_readers(self.screen, readers, x, MENU_Y + 2)

    def _readers_by_name_action(self):
        self._list_readers(self.readers.by_name(), MENU_X + 30)

    def _readers_by_card_action(self):
        self._list_readers(self.readers.by_card(), MENU_X + 20)

    def _overdue_action(self):
        today = self._ask(MENU_X, MENU_Y, "Nhap ngay: ").strip()
        show_overdue(self.screen, self.readers.overdue(today), MENU_X, MENU_Y)

    # Lending desk

    def _borrow_action(self):
        today = self._ask(MENU_X, MENU_Y, "Nhap ngay: ").strip()
        if not is_date(today):
            self._notice("Ngay khong hop le!")
            return
        reader = self._reader_by_prompt(MENU_Y + 1)
        if reader is None:
            return
        penalty = show_loans(self.screen, reader, MENU_X - 5, MENU_Y, today)
        if penalty > PENALTY_LIMIT:
            self._notice("Ban khong duoc phep muon sach!")
            return
        self.screen.read_key()
        self.screen.clear()
        isbn = self._ask(MENU_X, MENU_Y, "Nhap ma dau sach: ").strip()
        title = self.catalogue.find_by_isbn(isbn)
        if title is None:
            self._notice("Khong co ma dau sach phu hop!")
            return
        rows = show_copies(self.screen, title, MENU_X + 5, MENU_Y)
        code = self._ask(MENU_X, MENU_Y + 2 * rows + 5, "Nhap ma sach: ").strip()
        try:
            self.borrow(today, reader.card, isbn, code)
        except (KeyError, ValueError):
            message = "Muon that bai!"
        else:
            message = "Muon thanh cong!"
        self.screen.write(MENU_X, MENU_Y + 2 * rows + 7, message)

    def _return_action(self):
        today = self._ask(MENU_X, MENU_Y, "Nhap ngay: ").strip()
        if not is_date(today):
            self._notice("Ngay khong hop le!")
            return
        reader = self._reader_by_prompt(MENU_Y + 1)
        if reader is None:
            return
        count = len(reader.loans)
        selected = 1
        show_loans(self.screen, reader, MENU_X - 5, MENU_Y, today, selected - 1)
        while True:
            key = self.screen.read_key()
            if key == ESCAPE:
                return
            if key == ENTER and count:
                try:
                    copy = self.give_back(today, reader.card, selected - 1)
                except ValueError:
                    return
                if copy is not None:
                    self.screen.write(NOTICE_X, NOTICE_Y + 5, "Tra thanh cong!")
                    return
            elif count:
                selected = _move(selected, key, count)
            show_loans(self.screen, reader, MENU_X - 5, MENU_Y, today, selected - 1)

    def _lookup_action(self):
        reader = self._reader_by_prompt(MENU_Y)
        if reader is not None:
            show_loans(self.screen, reader, MENU_X - 5, MENU_Y, LOOKUP_DATE)

    # Catalogue

    def _add_title_action(self):
        try:
            title = read_title(self.screen)
        except InvalidInput:
            return
        try:
            self.catalogue.add(title)
        except OverflowError as exc:
            self._notice(str(exc))

    def _genre_action(self):
        genre = self._ask(MENU_X, MENU_Y, "Ten the loai tim kiem: ")
        if is_name(genre):
            show_titles_by_genre(
                self.screen, self.catalogue, normalize(genre), MENU_X, MENU_Y
            )

    def _search_action(self):
        name = self._ask(MENU_X, MENU_Y, "Ten tim kiem: ")
        if is_name(name):
            browse_titles(self.screen, self.catalogue, normalize(name), MENU_X, MENU_Y)

    def _favourites_action(self):
        titles = favourite_titles(self.readers, self.catalogue)
        show_favourites(self.screen, titles, MENU_X, MENU_Y)


def main(argv=None):
    """Load the data files and start the desk on the terminal."""
    parser = argparse.ArgumentParser(
        prog="librarydesk", description="Library desk for readers, loans and books."
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("."),
        help="directory holding the reader, loan and title files",
    )
    args = parser.parse_args(argv)

    readers = load_readers(args.data_dir / READERS_FILE)
    load_loans(readers, args.data_dir / LOANS_FILE)
    catalogue = load_catalogue(args.data_dir / TITLES_FILE)

    import blessed

    terminal = blessed.Terminal()
    screen = Screen(terminal=terminal)
    screen.clear()
    LibraryApp(readers, catalogue, screen).run()
    return 0