# librarydesk

A keyboard-driven terminal application for a small library front desk. It
keeps a catalogue of book titles and their copies and a register of readers
with their loans, and lets a librarian lend and take back copies. The screen
texts are in Vietnamese.

## Installing

```
pip install .
```

## Running

```
librarydesk
librarydesk --data-dir path/to/data
```

At start-up the desk reads three plain-text files from the data directory
(the current directory unless `--data-dir` is given). A file that is missing
is treated as empty.

- `DauSach.txt`: book titles and their copies
- `DocGia.txt`: readers
- `MuonTra.txt`: loans for each reader

Use the up and down arrow keys to move through a menu, Enter to choose an
item, and Esc to go back or quit. After an action, any key returns to the
menu.

### Menus

- **Quan li** (manage): add a reader (a free card number below 1000 is
  chosen at random), delete or edit a reader after a y/n confirmation, list
  readers by first name then surname or by card number, and list overdue
  readers for a given date, longest overdue first.
- **Doc gia** (reader): borrow a copy, return a copy (pick the loan with the
  arrow keys), and look up a reader's loans. The look-up scores penalties
  against the fixed date 20/10/2023.
- **Dau sach** (titles): add a title with its copies, list titles by genre,
  page through titles whose name matches (right or any key: next, left: back
  to the first match, Esc: stop), and show the ten most-borrowed titles.

A reader may not borrow while their penalty score is above 3. Each loan that
is still out and more than 7 days old adds 5, and each lost copy adds 1.
Dates are written `dd/mm/yyyy`. When counting days, every month counts as
30 days and the year is ignored.

## Data files

All three files mix whitespace-separated words with whole lines.

`DauSach.txt`, per title: the ISBN, then on its own lines the title name,
the page count, the author, the publisher and the genre, then the number of
copies followed by a `code status location` triple for each copy (status
`0` is on the shelf, `1` is lent out).

`DocGia.txt`, per reader: the card number, then the surname and the first
name on their own lines, then the gender (`Nam` or `Nu`) and the status.

`MuonTra.txt`, per reader: the card number and the number of loans, then for
each loan the copy code, the borrowing date and the status (`0` borrowed,
`1` returned, `2` lost); a returned loan is followed by its return date.
Loans for a card that is not in `DocGia.txt` raise `ValueError`.

## Using it from Python

```python
from librarydesk.books import load_catalogue
from librarydesk.readers import load_readers, load_loans, favourite_titles

catalogue = load_catalogue("DauSach.txt")
readers = load_readers("DocGia.txt")
load_loans(readers, "MuonTra.txt")

for title in favourite_titles(readers, catalogue, 10):
    print(title.isbn, title.name)

for reader, days in readers.overdue("20/10/2023"):
    print(reader.card, reader.surname, reader.name, days)
```

- `librarydesk.validation` holds the field checks (`is_name`, `is_number`,
  `is_code`, `is_date`), `normalize`, and `days_between`.
- `librarydesk.books` has `Copy`, `BookTitle`, the name-ordered `Catalogue`
  (at most 200 titles) and `load_catalogue`.
- `librarydesk.readers` has `Loan`, `LoanStatus`, `Reader`, the card-keyed
  `ReaderTree`, `load_readers`, `load_loans` and `favourite_titles`.
- `librarydesk.screen.Screen` draws text, boxes and menus. Given `lines`
  and `keys` it takes scripted input in place of the keyboard, and
  `screen[x, y]` gives the character and colour held in a cell.
- `librarydesk.app.LibraryApp` offers the desk operations (`borrow`,
  `give_back`, `add_reader`, `delete_reader`) without a terminal. Its `run`
  method starts the interactive menus.

## What it does not do

Changes made at the desk are held in memory only. Nothing is written back to
the data files, so new readers, new titles, loans and returns are lost when
the program exits.

## Tests

```
pip install .[test]
pytest
```