"""Book titles, their physical copies, and the title catalogue."""

from dataclasses import dataclass, field
from pathlib import Path

from .validation import normalize, number_text

MAX_TITLES = 200
AVAILABLE = "0"
LENT = "1"


class _Tokens:
    """Reads a text file as a mix of whitespace-separated words and whole lines."""

    def __init__(self, text):
        self._text = text
        self._pos = 0

    def word(self):
        text, end = self._text, len(self._text)
        while self._pos < end and text[self._pos].isspace():
            self._pos += 1
        if self._pos >= end:
            return None
        start = self._pos
        while self._pos < end and not text[self._pos].isspace():
            self._pos += 1
        return text[start:self._pos]

    def require_word(self):
        word = self.word()
        if word is None:
            raise ValueError("unexpected end of data")
        return word

    def require_number(self):
        word = self.require_word()
        try:
            return int(word)
        except ValueError:
            raise ValueError(f"expected a number, found {word!r}") from None

    def skip(self):
        if self._pos < len(self._text):
            self._pos += 1

    def line(self):
        end = self._text.find("\n", self._pos)
        if end == -1:
            end = len(self._text)
            result = self._text[self._pos:end]
            self._pos = end
        else:
            result = self._text[self._pos:end]
            self._pos = end + 1
        return result


@dataclass
class Copy:
    """One physical copy of a title."""

    code: str
    status: str = AVAILABLE
    location: str = ""

    @property
    def available(self):
        return self.status == AVAILABLE


@dataclass
class BookTitle:
    """A book title and its copies."""

    isbn: str
    name: str
    pages: int
    author: str
    publisher: str
    genre: str
    copies: list = field(default_factory=list)

    def add_copies(self, count):
        """Append ``count`` available copies, coded ISBN plus a running number."""
        start = len(self.copies)
        added = [Copy(self.isbn + number_text(n)) for n in range(start, start + count)]
        self.copies.extend(added)
        return added

    def find_copy(self, code):
        return next((copy for copy in self.copies if copy.code == code), None)


class Catalogue:
    """Titles kept in order of their names."""

    def __init__(self, titles=None):
        self._titles = list(titles or ())
        if len(self._titles) > MAX_TITLES:
            raise OverflowError(f"a catalogue holds at most {MAX_TITLES} titles")

    def __iter__(self):
        return iter(self._titles)

    def __len__(self):
        return len(self._titles)

    def add(self, title):
        """Insert ``title`` before the first title whose name sorts after it."""
        if len(self._titles) >= MAX_TITLES:
            raise OverflowError(f"a catalogue holds at most {MAX_TITLES} titles")
        position = next(
            (i for i, other in enumerate(self._titles) if other.name > title.name),
            len(self._titles),
        )
        self._titles.insert(position, title)

    def find_by_isbn(self, isbn):
        return next((title for title in self._titles if title.isbn == isbn), None)

    def find_copy(self, code):
        """The copy with ``code`` in any title, or None."""
        for title in self._titles:
            copy = title.find_copy(code)
            if copy is not None:
                return copy
        return None

    def search_by_name(self, name):
        query = normalize(name)
        return [title for title in self._titles if query in normalize(title.name)]

    def by_genre(self, genre):
        query = normalize(genre)
        return [title for title in self._titles if query in normalize(title.genre)]


def load_catalogue(path):
    """Read titles and copies from ``path``; a missing file gives an empty catalogue."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return Catalogue()
    tokens = _Tokens(text)
    titles = []
    while (isbn := tokens.word()) is not None:
        tokens.skip()
        name = tokens.line()
        pages = tokens.require_number()
        tokens.skip()
        author = tokens.line()
        publisher = tokens.line()
        genre = tokens.line()
        count = tokens.require_number()
        copies = [
            Copy(tokens.require_word(), tokens.require_word(), tokens.require_word())
            for _ in range(count)
        ]
        titles.append(BookTitle(isbn, name, pages, author, publisher, genre, copies))
    return Catalogue(titles)