"""
Date, Year and Digit-Run Matchers
==================================

Three matchers for the numeric material people put in passwords:

* **date** -- day, month and year packed together (``13071985``,
  ``7/4/76``, ``1999.12.31``), with or without a separator, year first
  or last, day and month in either order. Every calendar-valid reading of
  a token is emitted; the searcher keeps the cheapest.
* **year** -- a standalone ``19xx`` / ``20xx``.
* **digits** -- any run of three or more digits.

Attackers favour years close to the present, so the year component is
priced by its distance from :data:`REFERENCE_YEAR`, never below
:data:`MIN_YEAR_SPACE` candidates.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - Veras, R., Collins, C. & Thorpe, J. (2014). On the Semantic Patterns
      of Passwords and their Security Impact. NDSS.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterator, NamedTuple

from shared.math_utils import lg
from strata.core.models import Match, PatternKind

NUM_DAYS: int = 31
NUM_MONTHS: int = 12
DATE_MIN_YEAR: int = 1900
DATE_MAX_YEAR: int = 2099
MIN_YEAR_SPACE: int = 20
REFERENCE_YEAR: int = date.today().year

SEPARATOR_ENTROPY: float = 2.0

_DATE_NO_SEPARATOR = re.compile(r"[0-9]{4,8}")
_DATE_WITH_SEPARATOR = re.compile(r"([0-9]{1,4})([ /\\_.\-])([0-9]{1,2})\2([0-9]{1,4})")
_YEAR = re.compile(r"(?:19|20)[0-9]{2}")
_DIGITS = re.compile(r"[0-9]{3,}")


class _Reading(NamedTuple):
    day: int
    month: int
    year: int


# ===================================================================== #
#  Interpretation helpers
# ===================================================================== #


def expand_year(text: str) -> int:
    """Four-digit year for a two- or four-digit year field.

    Two-digit years above 50 map to the 1900s, the rest to the 2000s.
    """
    value = int(text)
    if len(text) == 2:
        return 1900 + value if value > 50 else 2000 + value
    return value


def year_space(year: int) -> int:
    """Number of candidate years an attacker tries before reaching *year*."""
    return max(abs(year - REFERENCE_YEAR), MIN_YEAR_SPACE)


def _readings(first: str, second: str, year_text: str) -> Iterator[_Reading]:
    """Valid (day, month, year) readings of two day/month fields and a year."""
    if len(year_text) not in (2, 4) or len(first) > 2 or len(second) > 2:
        return
    year = expand_year(year_text)
    if not DATE_MIN_YEAR <= year <= DATE_MAX_YEAR:
        return
    a, b = int(first), int(second)
    for day, month in ((a, b), (b, a)):
        if 1 <= day <= NUM_DAYS and 1 <= month <= NUM_MONTHS:
            yield _Reading(day, month, year)


def _split_readings(token: str) -> Iterator[_Reading]:
    """Readings of a separator-free digit token, year first or last."""
    length = len(token)
    for year_length in (2, 4):
        rest = length - year_length
        if not 2 <= rest <= 4:
            continue
        for year_first in (False, True):
            year_text = token[:year_length] if year_first else token[rest:]
            fields = token[year_length:] if year_first else token[:rest]
            for cut in range(1, len(fields)):
                yield from _readings(fields[:cut], fields[cut:], year_text)


def date_entropy(year: int, separator: str = "") -> float:
    """Entropy in bits of a full date."""
    entropy = lg(NUM_DAYS) + lg(NUM_MONTHS) + lg(year_space(year))
    if separator:
        entropy += SEPARATOR_ENTROPY
    return entropy


# ===================================================================== #
#  Matchers
# ===================================================================== #


def date_match(password: str) -> list[Match]:
    """Return every calendar-valid date reading of every digit window."""
    matches: list[Match] = []
    seen: set[tuple[int, int, int, int, int]] = set()

    def emit(start: int, end: int, separator: str, reading: _Reading) -> None:
        key = (start, end, reading.day, reading.month, reading.year)
        if key in seen:
            return
        seen.add(key)
        matches.append(
            Match(
                start=start,
                end=end,
                pattern=PatternKind.DATE,
                token=password[start : end + 1],
                entropy=date_entropy(reading.year, separator),
                separator=separator,
                day=reading.day,
                month=reading.month,
                year=reading.year,
            )
        )

    n = len(password)
    # Without separator: 4 to 8 digit windows.
    for i in range(n - 3):
        for j in range(i + 3, min(n, i + 8)):
            token = password[i : j + 1]
            if not _DATE_NO_SEPARATOR.fullmatch(token):
                continue
            for reading in _split_readings(token):
                emit(i, j, "", reading)

    # With separator: 6 ("1/1/91") to 10 ("1991-12-31") character windows.
    for i in range(n - 5):
        for j in range(i + 5, min(n, i + 10)):
            found = _DATE_WITH_SEPARATOR.fullmatch(password, i, j + 1)
            if found is None:
                continue
            first, separator, middle, last = found.groups()
            readings = list(_readings(first, middle, last))
            readings.extend(_readings(middle, last, first))
            for reading in readings:
                emit(i, j, separator, reading)
    return matches


def year_match(password: str) -> list[Match]:
    """Return every ``19xx`` / ``20xx`` substring of *password*."""
    matches: list[Match] = []
    for i in range(len(password) - 3):
        if not _YEAR.fullmatch(password, i, i + 4):
            continue
        year = int(password[i : i + 4])
        matches.append(
            Match(
                start=i,
                end=i + 3,
                pattern=PatternKind.YEAR,
                token=password[i : i + 4],
                entropy=lg(year_space(year)),
                year=year,
            )
        )
    return matches


def digits_match(password: str) -> list[Match]:
    """Return every maximal run of three or more digits."""
    return [
        Match(
            start=found.start(),
            end=found.end() - 1,
            pattern=PatternKind.DIGITS,
            token=found.group(0),
            entropy=len(found.group(0)) * lg(10),
        )
        for found in _DIGITS.finditer(password)
    ]
