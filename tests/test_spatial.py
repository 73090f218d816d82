"""
Spatial Matcher Tests
======================

Tests for the keyboard adjacency graphs and the keyboard-path matcher.
"""

from __future__ import annotations

import math

import pytest

from strata.analyzers.keyboard import DVORAK, KEYPAD, MAC_KEYPAD, QWERTY
from strata.analyzers.spatial import spatial_entropy, spatial_match


def _on(graph_name, matches):
    return [m for m in matches if m.graph == graph_name]


class TestKeyboardGraphs:
    """Tests for the layouts built from the key drawings."""

    def test_qwerty_statistics(self):
        """Every character of the 47 keys is a starting position."""
        assert QWERTY.starting_positions == 94
        assert QWERTY.average_degree == pytest.approx(4.595744680851064)

    def test_keypad_statistics(self):
        """The numeric pad has 15 single-character keys."""
        assert KEYPAD.starting_positions == 15
        assert KEYPAD.average_degree == pytest.approx(5.066666666666666)

    def test_shift_characters(self):
        """The second character of a key is its shifted form."""
        assert "A" in QWERTY.shifted_chars
        assert "!" in QWERTY.shifted_chars
        assert "a" not in QWERTY.shifted_chars

    def test_neighbours_include_both_characters(self):
        """Neighbours are whole keys, shifted character included."""
        assert "qQ" in QWERTY.adjacency["a"]
        assert QWERTY.keys["Q"] == "qQ"

    def test_layouts_have_distinct_names(self):
        """Matches record which layout they were found on."""
        names = {graph.name for graph in (QWERTY, DVORAK, KEYPAD, MAC_KEYPAD)}
        assert names == {"qwerty", "dvorak", "keypad", "mac_keypad"}


class TestSpatialMatch:
    """Tests for spatial_match."""

    def test_straight_row(self):
        """'qwerty' is a single straight path on qwerty."""
        [match] = _on("qwerty", spatial_match("qwerty"))
        assert (match.start, match.end) == (0, 5)
        assert match.turns == 1
        assert match.shifted_count == 0

    def test_turns_are_counted(self):
        """Changing direction adds a turn."""
        [match] = _on("qwerty", spatial_match("zxcvfr"))
        assert match.token == "zxcvfr"
        assert match.turns == 2

    def test_repeated_key_continues_path(self):
        """Pressing the same key again keeps the chain alive."""
        [match] = _on("qwerty", spatial_match("qqwe"))
        assert (match.start, match.end) == (0, 3)
        assert match.turns == 1

    def test_shifted_path(self):
        """An all-shifted path costs one extra bit."""
        [match] = _on("qwerty", spatial_match("QWERTY"))
        assert match.shifted_count == 6
        assert match.entropy == pytest.approx(spatial_entropy(QWERTY, 6, 1) + 1.0)

    def test_keypad_paths(self):
        """Digits along a pad row match both numeric pads."""
        graphs = {m.graph for m in spatial_match("789")}
        assert {"keypad", "mac_keypad"} <= graphs

    def test_repeats_alone_are_not_spatial(self):
        """A path with no movement has no turns and is not reported."""
        assert spatial_match("aaa") == []

    def test_short_paths_are_ignored(self):
        """Two adjacent keys are not enough."""
        assert _on("qwerty", spatial_match("qw")) == []


class TestSpatialEntropy:
    """Tests for spatial_entropy."""

    def test_three_key_straight_path(self):
        """Length 3 with one turn sums two single-turn terms."""
        s, d = QWERTY.starting_positions, QWERTY.average_degree
        assert spatial_entropy(QWERTY, 3, 1) == pytest.approx(math.log2(2 * s * d))

    def test_more_turns_cost_more(self):
        """Entropy grows with the number of turns."""
        assert spatial_entropy(QWERTY, 6, 3) > spatial_entropy(QWERTY, 6, 1)

    def test_partially_shifted(self):
        """Some shifted keys add the bits to place them."""
        plain = spatial_entropy(QWERTY, 6, 1)
        assert spatial_entropy(QWERTY, 6, 1, 1) == pytest.approx(plain + math.log2(1 + 6))
