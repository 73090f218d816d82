"""
Date Matcher Tests
===================

Tests for the date, year and digit-run matchers.
"""

from __future__ import annotations

import math

import pytest

from strata.analyzers.date import (
    MIN_YEAR_SPACE,
    REFERENCE_YEAR,
    date_entropy,
    date_match,
    digits_match,
    expand_year,
    year_match,
    year_space,
)
from strata.core.models import PatternKind


def _readings(matches, start, end):
    return {
        (m.day, m.month, m.year)
        for m in matches
        if (m.start, m.end) == (start, end)
    }


class TestYearHelpers:
    """Tests for expand_year and year_space."""

    @pytest.mark.parametrize(
        "text, year",
        [("87", 1987), ("51", 1951), ("50", 2050), ("05", 2005), ("2013", 2013)],
    )
    def test_expand_year(self, text, year):
        """Two-digit years above 50 belong to the 1900s."""
        assert expand_year(text) == year

    def test_year_space_floor(self):
        """Years near the reference year still cost the minimum space."""
        assert year_space(REFERENCE_YEAR) == MIN_YEAR_SPACE

    def test_year_space_distance(self):
        """Distant years cost their distance from the reference year."""
        assert year_space(REFERENCE_YEAR - 100) == 100


class TestDateMatch:
    """Tests for date_match."""

    def test_compact_date(self):
        """'13071985' reads as 13 July 1985."""
        matches = date_match("13071985")
        assert _readings(matches, 0, 7) == {(13, 7, 1985)}
        [match] = [m for m in matches if (m.start, m.end) == (0, 7)]
        assert match.pattern is PatternKind.DATE
        assert match.separator == ""
        assert match.entropy == pytest.approx(date_entropy(1985))

    def test_separated_date_both_orders(self):
        """Ambiguous day and month produce both readings."""
        matches = date_match("7/4/76")
        assert _readings(matches, 0, 5) == {(7, 4, 1976), (4, 7, 1976)}
        assert all(m.separator == "/" for m in matches)
        assert matches[0].entropy == pytest.approx(
            math.log2(31) + math.log2(12) + math.log2(year_space(1976)) + 2.0
        )

    def test_year_first(self):
        """'1999.12.31' is read year first."""
        assert _readings(date_match("1999.12.31"), 0, 9) == {(31, 12, 1999)}

    def test_mixed_separators_rejected(self):
        """Both separators must be the same character."""
        assert date_match("1-2/99") == []

    def test_whitespace_other_than_space_is_not_a_separator(self):
        """Only a plain space separates date fields, not tabs or newlines."""
        assert _readings(date_match("7 4 76"), 0, 5) == {(7, 4, 1976), (4, 7, 1976)}
        assert date_match("7\t4\t76") == []
        assert date_match("7\n4\n76") == []

    def test_invalid_calendar_values(self):
        """Digits with no valid day, month and year are not a date."""
        assert date_match("00000000") == []

    def test_identical_readings_are_merged(self):
        """'1111' has one distinct reading."""
        matches = date_match("1111")
        assert len(matches) == 1
        assert (matches[0].day, matches[0].month, matches[0].year) == (1, 1, 2011)


class TestYearAndDigits:
    """Tests for year_match and digits_match."""

    def test_year_inside_text(self):
        """A 19xx year is found inside letters."""
        [match] = year_match("born1987x")
        assert (match.start, match.end) == (4, 7)
        assert match.pattern is PatternKind.YEAR
        assert match.year == 1987
        assert match.entropy == pytest.approx(math.log2(year_space(1987)))

    def test_non_years(self):
        """Four digits outside 19xx and 20xx are not years."""
        assert year_match("18991") == []

    def test_digit_runs(self):
        """Runs of three or more digits are priced per digit."""
        [match] = digits_match("ab12345cd67")
        assert match.token == "12345"
        assert (match.start, match.end) == (2, 6)
        assert match.entropy == pytest.approx(5 * math.log2(10))
