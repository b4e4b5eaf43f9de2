import io
import random
from types import SimpleNamespace

import pytest

from librarydesk.app import LibraryApp
from librarydesk.books import AVAILABLE, LENT, BookTitle, Catalogue, Copy
from librarydesk.readers import Loan, LoanStatus, Reader, ReaderTree
from librarydesk.screen import DOWN, ENTER, ESCAPE, UP, Screen


def make_app(keys=(), lines=(), loans=()):
    tree = ReaderTree()
    reader = Reader(5, "Tran", "Binh", "Nam", "1", list(loans))
    tree.insert(reader)
    title = BookTitle(
        "B1", "Dune", 300, "Herbert", "Ace", "Fiction",
        [Copy("B101"), Copy("B102", LENT)],
    )
    catalogue = Catalogue([title])
    screen = Screen(keys=list(keys), lines=list(lines), out=io.StringIO())
    app = LibraryApp(tree, catalogue, screen, rng=random.Random(1))
    return SimpleNamespace(
        app=app, tree=tree, reader=reader, title=title, catalogue=catalogue, screen=screen
    )


def test_add_reader_assigns_unused_card():
    lib = make_app()
    newcomer = Reader(0, "Le", "Chi", "Nu", "1")
    card = lib.app.add_reader(newcomer)
    assert 0 <= card < 1000
    assert card != 5
    assert lib.tree.find(card) is newcomer
    assert newcomer.card == card
    assert len(lib.tree) == 2


def test_delete_reader_removes_and_unknown_raises():
    lib = make_app()
    assert lib.app.delete_reader(5) is lib.reader
    assert 5 not in lib.tree
    with pytest.raises(KeyError):
        lib.app.delete_reader(5)


def test_borrow_lends_available_copy():
    lib = make_app()
    loan = lib.app.borrow("01/10/2023", 5, "B1", "B101")
    assert loan.code == "B101"
    assert loan.borrowed == "01/10/2023"
    assert loan.status is LoanStatus.BORROWED
    assert lib.reader.loans == [loan]
    assert lib.title.find_copy("B101").status == LENT


def test_borrow_rejects_bad_date():
    lib = make_app()
    with pytest.raises(ValueError, match="Ngay khong hop le!"):
        lib.app.borrow("99/99/2023", 5, "B1", "B101")
    assert lib.reader.loans == []


def test_borrow_unknown_card_and_isbn():
    lib = make_app()
    with pytest.raises(KeyError):
        lib.app.borrow("01/10/2023", 6, "B1", "B101")
    with pytest.raises(KeyError):
        lib.app.borrow("01/10/2023", 5, "ZZ", "B101")


def test_borrow_rejects_lent_or_missing_copy():
    lib = make_app()
    with pytest.raises(ValueError, match="Muon that bai!"):
        lib.app.borrow("01/10/2023", 5, "B1", "B102")
    with pytest.raises(ValueError, match="Muon that bai!"):
        lib.app.borrow("01/10/2023", 5, "B1", "B199")
    assert lib.reader.loans == []


def test_borrow_refused_over_penalty_limit():
    lib = make_app(loans=[Loan("B102", "01/09/2023")])
    with pytest.raises(ValueError, match="Ban khong duoc phep muon sach!"):
        lib.app.borrow("20/10/2023", 5, "B1", "B101")
    assert lib.title.find_copy("B101").status == AVAILABLE


def test_give_back_closes_loan_and_shelves_copy():
    lib = make_app()
    lib.app.borrow("01/10/2023", 5, "B1", "B101")
    copy = lib.app.give_back("05/10/2023", 5, 0)
    assert copy is lib.title.find_copy("B101")
    assert copy.status == AVAILABLE
    loan = lib.reader.loans[0]
    assert loan.status is LoanStatus.RETURNED
    assert loan.returned == "05/10/2023"
    with pytest.raises(ValueError):
        lib.app.give_back("06/10/2023", 5, 0)


def test_give_back_bad_index_and_unshelved_copy():
    lib = make_app(loans=[Loan("X9", "01/10/2023")])
    with pytest.raises(IndexError):
        lib.app.give_back("05/10/2023", 5, 1)
    assert lib.app.give_back("05/10/2023", 5, 0) is None
    assert lib.reader.loans[0].status is LoanStatus.RETURNED


def test_run_escape_leaves_main_menu_drawn():
    lib = make_app(keys=[ESCAPE])
    lib.app.run()
    text = str(lib.screen)
    assert "Quan li" in text
    assert "Dau sach" in text


def test_run_stops_when_keys_run_out():
    lib = make_app(keys=[DOWN, UP])
    lib.app.run()
    assert [r.card for r in lib.tree.by_card()] == [5]
    assert "Doc gia" in str(lib.screen)


def test_run_adds_reader_through_menus():
    lib = make_app(
        keys=[ENTER, ENTER, "x", "x", ESCAPE, ESCAPE],
        lines=["Nguyen", "An", "Nam", "1"],
    )
    lib.app.run()
    assert len(lib.tree) == 2
    added = [r for r in lib.tree if r.card != 5]
    assert added[0].name == "An"
    assert added[0].surname == "Nguyen"


def test_run_add_reader_bad_gender_reports_failure():
    lib = make_app(keys=[ENTER, ENTER], lines=["Nguyen", "An", "Other"])
    lib.app.run()
    assert len(lib.tree) == 1
    assert "Them that bai!" in str(lib.screen)


@pytest.mark.parametrize("answer, kept", [("n", True), ("y", False)])
def test_run_delete_reader_asks_for_confirmation(answer, kept):
    lib = make_app(
        keys=[ENTER, DOWN, ENTER, "x", "x", ESCAPE, ESCAPE],
        lines=["5", answer],
    )
    lib.app.run()
    assert (5 in lib.tree) is kept


def test_run_borrow_through_menus():
    lib = make_app(
        keys=[DOWN, ENTER, ENTER, "x", "x", ESCAPE, ESCAPE],
        lines=["01/10/2023", "5", "B1", "B101"],
    )
    lib.app.run()
    assert [loan.code for loan in lib.reader.loans] == ["B101"]
    assert lib.title.find_copy("B101").status == LENT


def test_run_borrow_bad_date_message():
    lib = make_app(keys=[DOWN, ENTER, ENTER], lines=["99/99/2023"])
    lib.app.run()
    assert "Ngay khong hop le!" in str(lib.screen)
    assert lib.reader.loans == []


def test_run_return_through_menus():
    lib = make_app(
        keys=[DOWN, ENTER, DOWN, ENTER, ENTER, "x", ESCAPE, ESCAPE],
        lines=["05/10/2023", "5"],
        loans=[Loan("B102", "01/10/2023")],
    )
    lib.app.run()
    loan = lib.reader.loans[0]
    assert loan.status is LoanStatus.RETURNED
    assert loan.returned == "05/10/2023"
    assert lib.title.find_copy("B102").status == AVAILABLE


def test_run_blacklist_lists_overdue_reader():
    lib = make_app(
        keys=[ENTER, UP, ENTER],
        lines=["20/10/2023"],
        loans=[Loan("B102", "01/10/2023")],
    )
    lib.app.run()
    text = str(lib.screen)
    assert "Danh sach muon qua han" in text
    assert "Tran" in text


def test_run_favourites_lists_titles():
    lib = make_app(keys=[DOWN, DOWN, ENTER, UP, ENTER])
    lib.app.run()
    text = str(lib.screen)
    assert "Top 10 dau sach duoc yeu thich" in text
    assert "Dune" in text