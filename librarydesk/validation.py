"""Input checks and small text helpers shared by the library records."""

import string

_DIGITS = frozenset(string.digits)
_LETTERS = frozenset(string.ascii_letters)
_NAME_CHARS = _LETTERS | _DIGITS | {" "}
_CODE_CHARS = _LETTERS | _DIGITS


def _day_number(day):
    return parse_number(day[3:5]) * 30 + parse_number(day[0:2])


def days_between(day1, day2):
    """Days from ``day1`` to ``day2`` (dd/mm/yyyy), months counted as 30 days.

    The year part is ignored.
    """
    return _day_number(day2) - _day_number(day1)


def is_name(s):
    """True when ``s`` holds only ASCII letters, digits and spaces."""
    return all(ch in _NAME_CHARS for ch in s)


def is_number(s):
    """True when ``s`` holds only decimal digits."""
    return all(ch in _DIGITS for ch in s)


def is_code(s):
    """True when ``s`` holds only ASCII letters and digits."""
    return all(ch in _CODE_CHARS for ch in s)


def is_date(s):
    """True when ``s`` looks like a dd/mm/yyyy date."""
    if len(s) != 10 or any(ch not in _DIGITS and ch != "/" for ch in s):
        return False
    return not (
        s[0:2] > "31"
        or s[2] != "/"
        or s[3:5] > "12"
        or s[5] != "/"
        or s[6:] < "1"
    )


def _lower_initial(word):
    first = word[0]
    if first in string.ascii_uppercase:
        return first.lower() + word[1:]
    return word


def normalize(s):
    """Collapse runs of spaces, trim the ends and lower each word's first letter."""
    return " ".join(_lower_initial(word) for word in s.split(" ") if word)


def parse_number(s):
    """Digit-by-digit value of ``s``; the empty string gives 0."""
    value = 0
    for ch in s:
        value = value * 10 + ord(ch) - 48
    return value


def number_text(n):
    """Decimal text of a non-negative ``n``; zero gives the empty string."""
    if n < 0:
        raise ValueError(f"negative number: {n}")
    return str(n) if n else ""