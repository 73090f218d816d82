"""
Scorer Tests
=============

Tests for the 0-4 score, crack-time estimates and their display.
"""

from __future__ import annotations

import math

import pytest

from strata.analyzers.scorer import (
    ATTACKER_PROFILES,
    crack_time_metrics,
    display_time,
    legacy_crack_time,
    score,
)


class TestScore:
    """Tests for score."""

    def test_zero_entropy(self):
        """Zero bits is the weakest score."""
        assert score(0.0) == 0

    def test_threshold_is_inclusive(self):
        """Reaching a threshold exactly moves up a score."""
        assert score(math.log2(2e6)) == 1
        assert score(math.log2(2e6) - 1e-9) == 0

    @pytest.mark.parametrize(
        "guesses, expected",
        [(2e8, 2), (2e10, 3), (2e12, 4)],
    )
    def test_upper_thresholds(self, guesses, expected):
        """Each threshold opens the next score."""
        assert score(math.log2(guesses)) == expected

    def test_huge_entropy_saturates(self):
        """Anything beyond the last threshold is a 4."""
        assert score(1000.0) == 4
        assert score(math.inf) == 4

    def test_monotonic(self):
        """More entropy never lowers the score."""
        scores = [score(bits / 2) for bits in range(200)]
        assert scores == sorted(scores)

    def test_nan_rejected(self):
        """NaN is not a valid entropy."""
        with pytest.raises(ValueError):
            score(math.nan)


class TestCrackTimes:
    """Tests for crack_time_metrics and legacy_crack_time."""

    def test_profiles(self):
        """Every profile divides 2^H guesses by its rate."""
        metrics = crack_time_metrics(10.0)
        assert set(metrics) == set(ATTACKER_PROFILES)
        assert metrics["online_no_throttling_10_per_second"] == pytest.approx(102.4)
        assert metrics["offline_fast_hashing_1e10_per_second"] == pytest.approx(1024 / 1e10)

    def test_overflow_saturates(self):
        """Times too large for a float become infinity."""
        metrics = crack_time_metrics(2000.0)
        assert all(math.isinf(seconds) for seconds in metrics.values())
        assert math.isinf(legacy_crack_time(2000.0))

    def test_legacy_model(self):
        """The single-scenario model costs 5e-5 seconds per guess."""
        assert legacy_crack_time(0.0) == pytest.approx(5e-5)
        assert legacy_crack_time(10.0) == pytest.approx(1024 * 5e-5)


class TestDisplayTime:
    """Tests for display_time."""

    @pytest.mark.parametrize(
        "seconds, text",
        [
            (0, "instant"),
            (59, "instant"),
            (90, "3 minutes"),
            (3600, "2 hours"),
            (2 * 86400, "3 days"),
            (math.inf, "centuries"),
        ],
    )
    def test_buckets(self, seconds, text):
        """Times fall into coarse human-readable buckets."""
        assert display_time(seconds) == text
