"""Readers, their loans, and the reader search tree."""

import enum
import random
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from .books import _Tokens
from .validation import days_between

OVERDUE_AFTER_DAYS = 7
OVERDUE_PENALTY = 5
LOST_PENALTY = 1
PENALTY_LIMIT = 3
CARD_RANGE = 1000


class LoanStatus(enum.Enum):
    BORROWED = "0"
    RETURNED = "1"
    LOST = "2"


@dataclass
class Loan:
    """One borrowing of a book copy."""

    code: str
    borrowed: str
    returned: str = ""
    status: LoanStatus = LoanStatus.BORROWED


@dataclass
class Reader:
    """A library card holder and the loans on the card."""

    card: int
    surname: str
    name: str
    gender: str
    status: str
    loans: list = field(default_factory=list)

    def add_loan(self, loan):
        self.loans.append(loan)

    def penalty(self, today):
        """Penalty points: 5 per loan overdue by more than 7 days, 1 per lost book."""
        total = 0
        for loan in self.loans:
            if (
                loan.status is LoanStatus.BORROWED
                and days_between(loan.borrowed, today) > OVERDUE_AFTER_DAYS
            ):
                total += OVERDUE_PENALTY
            if loan.status is LoanStatus.LOST:
                total += LOST_PENALTY
        return total

    def days_overdue(self, today):
        """Days since the last still-open loan was taken, or None without one."""
        days = None
        for loan in self.loans:
            if loan.status is LoanStatus.BORROWED:
                days = days_between(loan.borrowed, today)
        return days


@dataclass
class _Node:
    reader: Reader
    left: "_Node | None" = None
    right: "_Node | None" = None


class ReaderTree:
    """Binary search tree of readers keyed by card number."""

    def __init__(self):
        self._root = None
        self._size = 0

    def __len__(self):
        return self._size

    def __iter__(self):
        return self.by_card()

    def __contains__(self, card):
        return self.find(card) is not None

    def insert(self, reader):
        """Add ``reader``; a card already present is left alone and False returned."""
        if self._root is None:
            self._root = _Node(reader)
            self._size += 1
            return True
        node = self._root
        while True:
            if reader.card < node.reader.card:
                if node.left is None:
                    node.left = _Node(reader)
                    break
                node = node.left
            elif reader.card > node.reader.card:
                if node.right is None:
                    node.right = _Node(reader)
                    break
                node = node.right
            else:
                return False
        self._size += 1
        return True

    def find(self, card):
        node = self._root
        while node is not None:
            if card < node.reader.card:
                node = node.left
            elif card > node.reader.card:
                node = node.right
            else:
                return node.reader
        return None

    def remove(self, card):
        """Remove and return the reader with ``card``; KeyError if absent."""
        self._root, removed = self._remove(self._root, card)
        if removed is None:
            raise KeyError(card)
        self._size -= 1
        return removed

    @classmethod
    def _remove(cls, node, card):
        if node is None:
            return None, None
        if card < node.reader.card:
            node.left, removed = cls._remove(node.left, card)
            return node, removed
        if card > node.reader.card:
            node.right, removed = cls._remove(node.right, card)
            return node, removed
        removed = node.reader
        if node.left is None:
            return node.right, removed
        if node.right is None:
            return node.left, removed
        node.left, node.reader = cls._pop_rightmost(node.left)
        return node, removed

    @classmethod
    def _pop_rightmost(cls, node):
        if node.right is None:
            return node.left, node.reader
        node.right, reader = cls._pop_rightmost(node.right)
        return node, reader

    def by_card(self):
        """Readers in ascending card order."""
        yield from self._in_order(self._root)

    @classmethod
    def _in_order(cls, node):
        if node is not None:
            yield from cls._in_order(node.left)
            yield node.reader
            yield from cls._in_order(node.right)

    def by_name(self):
        """Readers sorted by first name, then surname."""
        return sorted(self.by_card(), key=lambda r: (r.name, r.surname))

    def breadth_first(self):
        """Readers level by level from the root."""
        if self._root is None:
            return
        queue = deque([self._root])
        while queue:
            node = queue.popleft()
            yield node.reader
            queue.extend(child for child in (node.left, node.right) if child is not None)

    def overdue(self, today):
        """(reader, days) pairs with an open loan at least one day old, longest first."""
        rows = []
        for reader in self.breadth_first():
            days = reader.days_overdue(today)
            if days is not None and days >= 1:
                rows.append((reader, days))
        return sorted(rows, key=lambda row: -row[1])

    def new_card(self, rng=None):
        """A random unused card number below 1000."""
        if self._size >= CARD_RANGE:
            raise RuntimeError("no free card numbers left")
        rng = rng or random.Random()
        while True:
            card = rng.randrange(CARD_RANGE)
            if self.find(card) is None:
                return card


def load_readers(path):
    """Read readers from ``path``; a missing file gives an empty tree."""
    tree = ReaderTree()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return tree
    tokens = _Tokens(text)
    while (word := tokens.word()) is not None:
        try:
            card = int(word)
        except ValueError:
            raise ValueError(f"expected a card number, found {word!r}") from None
        tokens.skip()
        surname = tokens.line()
        name = tokens.line()
        gender = tokens.require_word()
        status = tokens.require_word()
        tree.insert(Reader(card, surname, name, gender, status))
    return tree


def load_loans(tree, path):
    """Attach the loans listed in ``path`` to the readers in ``tree``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return
    tokens = _Tokens(text)
    while (word := tokens.word()) is not None:
        try:
            card = int(word)
        except ValueError:
            raise ValueError(f"expected a card number, found {word!r}") from None
        reader = tree.find(card)
        if reader is None:
            raise ValueError(f"loans for unknown card {card}")
        for _ in range(tokens.require_number()):
            code = tokens.require_word()
            borrowed = tokens.require_word()
            status = LoanStatus(tokens.require_word())
            returned = tokens.require_word() if status is LoanStatus.RETURNED else ""
            reader.add_loan(Loan(code, borrowed, returned, status))


def favourite_titles(tree, catalogue, limit=10):
    """The most borrowed titles, most borrowed first, at most ``limit`` of them."""
    history = "".join(
        " " + loan.code for reader in tree.breadth_first() for loan in reader.loans
    )
    counted = []
    for title in catalogue:
        count = 0
        if title.isbn:
            while (index := history.find(title.isbn)) != -1:
                count += 1
                history = history[:index] + history[index + len(title.isbn):]
        counted.append((title, count))
    ranked = sorted(counted, key=lambda pair: -pair[1])
    return [title for title, _ in ranked[:limit]]