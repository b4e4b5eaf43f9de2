"""Input forms and table views drawn on a Screen."""

from .books import BookTitle
from .readers import Reader
from .screen import ERROR, ESCAPE, HIGHLIGHT, LEFT, NORMAL, TITLE
from .validation import is_code, is_name, is_number, parse_number

FORM_X = 30
FORM_Y = 2

READER_COLUMNS = (15, 20, 20, 15, 15)
TITLE_COLUMNS = (15, 30, 20, 20, 20)
COPY_COLUMNS = (15, 20, 20)
LOAN_COLUMNS = (15, 20, 20, 15)
LOAN_BOXES = (15, 20, 20, 20)

READER_HEADER = ("Ma the", "Ho", "Ten", "Phai", "Trang thai")
TITLE_HEADER = ("ISBN", "Ten sach", "Tac gia", "Nha xuat ban", "The loai")
COPY_HEADER = ("Ma", "Trang thai", "Vi tri")
LOAN_HEADER = ("Ma", "Ngay muon", "Ngay tra", "Trang thai")


class InvalidInput(ValueError):
    """A form field was rejected; the message is the one shown on screen."""


def _fail(screen, x, y, message):
    screen.write(x, y, message, ERROR)
    raise InvalidInput(message)


def _row(screen, x, y, texts, widths, colour=NORMAL, boxes=None):
    """Write a padded table row at ``(x, y)`` and box each column."""
    screen.write(x, y, "".join(str(t).ljust(w) for t, w in zip(texts, widths)), colour)
    left = x - 3
    for width in boxes or widths:
        screen.box(left, y - 1, width)
        left += width


def _reader_cells(reader):
    return (reader.card, reader.surname, reader.name, reader.gender, reader.status)


def _title_cells(title):
    return (title.isbn, title.name, title.author, title.publisher, title.genre)


def _copy_cells(copy):
    return (copy.code, copy.status, copy.location)


def read_reader(screen):
    """Ask for a reader's details; the card number is left at 0 for the caller."""
    screen.clear()
    for k in range(5):
        screen.box(FORM_X - 3, FORM_Y + 2 * k, 40)
    screen.write(FORM_X + 5, FORM_Y + 1, "Nhap thong tin", TITLE)
    for row, label in enumerate(("Ho: ", "Ten: ", "Phai: ", "Trang thai: "), start=1):
        screen.write(FORM_X, FORM_Y + 1 + 2 * row, label, TITLE)
    error_x, error_y = FORM_X + 7, FORM_Y + 12

    surname = screen.read_line(FORM_X + 4, FORM_Y + 3)
    if not is_name(surname):
        _fail(screen, error_x, error_y, "Ho khong hop le!")
    name = screen.read_line(FORM_X + 5, FORM_Y + 5)
    if not is_name(name):
        _fail(screen, error_x, error_y, "Ten khong hop le!")
    gender = screen.read_line(FORM_X + 6, FORM_Y + 7)
    if gender not in ("Nam", "Nu"):
        _fail(screen, error_x, error_y, "Phai khong hop le!")
    status = screen.read_line(FORM_X + 12, FORM_Y + 9)
    if status not in ("0", "1"):
        _fail(screen, error_x, error_y, "Trang thai khong hop le!")
    return Reader(0, surname, name, gender, status)


def read_title(screen):
    """Ask for a new title, how many copies it has, and where each copy is kept."""
    for k in range(1, 8):
        screen.box(FORM_X - 3, FORM_Y + 2 * k, 40)
    labels = (
        "ISBN: ",
        "Ten sach: ",
        "So trang: ",
        "Tac gia: ",
        "Nha xuat ban: ",
        "The loai: ",
        "Nhap so luong cuon: ",
    )
    for row, label in enumerate(labels, start=1):
        screen.write(FORM_X, FORM_Y + 1 + 2 * row, label, TITLE)
    error_x, error_y = FORM_X + 7, FORM_Y + 21

    def ask(row, column, valid, message):
        text = screen.read_line(FORM_X + column, FORM_Y + 1 + 2 * row)
        if not valid(text):
            _fail(screen, error_x, error_y, message)
        return text

    isbn = ask(1, 7, is_code, "ISBN khong hop le!")
    name = ask(2, 10, is_name, "Ten sach khong hop le!")
    pages = parse_number(ask(3, 10, is_number, "So trang khong hop le!"))
    author = ask(4, 10, is_name, "Ten tac gia khong hop le!")
    publisher = ask(5, 14, is_name, "Nha xuat ban khong hop le!")
    genre = ask(6, 10, is_name, "The loai khong hop le!")
    count_text = ask(7, 20, lambda s: bool(s) and is_number(s), "So luong cuon khong hop le!")

    title = BookTitle(isbn, name, pages, author, publisher, genre)
    table_x = FORM_X + 50
    _row(
        screen, table_x, FORM_Y + 5, ("Ma sach", "Trang thai", "Vi tri"),
        COPY_COLUMNS, TITLE, boxes=(15, 20, 15),
    )
    copies = title.add_copies(parse_number(count_text))
    for i, copy in enumerate(copies):
        _row(
            screen, table_x, FORM_Y + 7 + 2 * i, (copy.code, copy.status),
            COPY_COLUMNS[:2], boxes=(15, 20, 15),
        )
    for i, copy in enumerate(copies):
        copy.location = screen.read_line(FORM_X + 85, FORM_Y + 7 + 2 * i)
    return title


def show_reader(screen, reader):
    """Show one reader's card and wait for a key."""
    screen.clear()
    for k in range(6):
        screen.box(FORM_X - 3, FORM_Y + 2 * k, 40)
    screen.write(FORM_X + 8, FORM_Y + 1, "Thong tin ban doc".ljust(15), TITLE)
    fields = (
        ("Ma: ", reader.card),
        ("Ho: ", reader.surname),
        ("Ten: ", reader.name),
        ("Phai: ", reader.gender),
        ("Tinh trang: ", reader.status),
    )
    for row, (label, value) in enumerate(fields, start=1):
        screen.write(FORM_X, FORM_Y + 1 + 2 * row, label.ljust(15) + str(value), TITLE)
    screen.read_key()


def show_copies(screen, title, x, y):
    """Table of a title's copies; returns how many were listed."""
    y += 2
    _row(screen, x, y, COPY_HEADER, COPY_COLUMNS, TITLE)
    for copy in title.copies:
        y += 2
        _row(screen, x, y, _copy_cells(copy), COPY_COLUMNS)
    return len(title.copies)


def show_loans(screen, reader, x, y, today, highlight=None):
    """Table of a reader's loans, row ``highlight`` marked; returns the penalty."""
    _row(screen, x, y + 2, LOAN_HEADER, LOAN_COLUMNS, TITLE, boxes=LOAN_BOXES)
    for j, loan in enumerate(reader.loans):
        colour = HIGHLIGHT if j == highlight else NORMAL
        cells = (loan.code, loan.borrowed, loan.returned, loan.status.value)
        _row(screen, x, y + 4 + 2 * j, cells, LOAN_COLUMNS, colour, boxes=LOAN_BOXES)
    return reader.penalty(today)


def show_readers(screen, readers, x, y):
    """Header at row ``y`` and one row per reader below; returns the row count."""
    _row(screen, x, y, READER_HEADER, READER_COLUMNS, TITLE)
    count = 0
    for count, reader in enumerate(readers, start=1):
        _row(screen, x, y + 2 * count, _reader_cells(reader), READER_COLUMNS)
    return count


def _title_table(screen, heading, x, y):
    screen.write(x + 30, y, heading, TITLE)
    screen.box(x - 3, y - 1, 105)
    _row(screen, x, y + 2, TITLE_HEADER, TITLE_COLUMNS, TITLE)
    return y + 2


def show_titles_by_genre(screen, catalogue, genre, x, y):
    """List the titles whose genre contains ``genre``; returns how many."""
    y = _title_table(screen, "Danh sach dau sach the loai: " + genre, x, y + 2)
    titles = catalogue.by_genre(genre)
    for title in titles:
        y += 2
        _row(screen, x, y, _title_cells(title), TITLE_COLUMNS)
    return len(titles)


def _title_page(screen, title, name, x, y):
    screen.clear()
    y = _title_table(screen, "Danh sach dau sach: " + name, x, y + 2)
    y += 2
    _row(screen, x, y, _title_cells(title), TITLE_COLUMNS)
    y += 3
    _row(screen, x + 15, y, ("Ma sach", "Trang thai", "Vi tri"), COPY_COLUMNS, TITLE)
    for copy in title.copies:
        y += 2
        _row(screen, x + 15, y, _copy_cells(copy), COPY_COLUMNS)
    screen.write(x, y + 6, "sang phai: chuyen tiep, sang trai: quay lai, esc: thoat")


def browse_titles(screen, catalogue, name, x, y):
    """Page through titles matching ``name``; left restarts, Esc stops.

    Returns the number of pages shown.
    """
    matches = catalogue.search_by_name(name)
    shown = 0
    position = 0
    while position < len(matches):
        _title_page(screen, matches[position], name, x, y)
        shown += 1
        key = screen.read_key()
        if key == ESCAPE:
            break
        position = 0 if key == LEFT else position + 1
    return shown


def show_favourites(screen, titles, x, y):
    """List the most borrowed titles; returns how many."""
    screen.clear()
    y = _title_table(screen, "Top 10 dau sach duoc yeu thich", x, y + 2)
    titles = list(titles)
    for title in titles:
        y += 2
        _row(screen, x, y, _title_cells(title), TITLE_COLUMNS)
    return len(titles)


def show_overdue(screen, rows, x, y):
    """List ``(reader, days)`` pairs of overdue readers; returns how many."""
    y += 2
    screen.write(x + 30, y, "Danh sach muon qua han", TITLE)
    x -= 10
    screen.box(x - 3, y - 1, 100)
    y += 2
    widths = READER_COLUMNS + (15,)
    _row(screen, x, y, READER_HEADER + ("Ngay qua han",), widths, TITLE)
    count = 0
    for count, (reader, days) in enumerate(rows, start=1):
        y += 2
        _row(screen, x, y, _reader_cells(reader) + (days,), widths)
    return count