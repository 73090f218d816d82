"""
Strength Scorer
================

Turns a total entropy into a 0-4 strength score and into crack-time
estimates for a small set of attacker profiles.

An entropy of *H* bits stands for ``2^H`` guesses. The score compares
that guess count with :data:`SCORE_GUESS_THRESHOLDS`; the thresholds are
the points where a single attacker model (100 machines, 10 ms per guess,
half the space searched on average) needs 10^2, 10^4, 10^6 and 10^8
seconds, which is the calibration :func:`legacy_crack_time` reproduces.

All comparisons happen in log space so very large entropies never
overflow; crack times that do not fit a float saturate to infinity.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
"""

from __future__ import annotations

import bisect
import math

from shared.math_utils import lg

# Guess counts separating scores 0|1, 1|2, 2|3 and 3|4.
SCORE_GUESS_THRESHOLDS: tuple[float, ...] = (2e6, 2e8, 2e10, 2e12)
_THRESHOLD_BITS: tuple[float, ...] = tuple(lg(t) for t in SCORE_GUESS_THRESHOLDS)

# Attacker profile -> guesses per second.
ATTACKER_PROFILES: dict[str, float] = {
    "online_throttling_100_per_hour": 100 / 3600,
    "online_no_throttling_10_per_second": 10.0,
    "offline_slow_hashing_1e4_per_second": 1e4,
    "offline_fast_hashing_1e10_per_second": 1e10,
}

# Legacy model: 10 ms per guess spread over 100 attackers, half the space.
SINGLE_GUESS_SECONDS: float = 0.010
NUM_ATTACKERS: int = 100
SECONDS_PER_GUESS: float = 0.5 * SINGLE_GUESS_SECONDS / NUM_ATTACKERS

_MINUTE = 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24
_MONTH = _DAY * 31
_YEAR = _MONTH * 12
_CENTURY = _YEAR * 100


def _check(entropy: float) -> None:
    if math.isnan(entropy):
        raise ValueError("entropy must be a number, got NaN")


def _guesses_times(entropy: float, factor: float) -> float:
    """``2^entropy * factor``, saturating to infinity on overflow."""
    try:
        return math.pow(2.0, entropy) * factor
    except OverflowError:
        return math.inf


def score(entropy: float) -> int:
    """Map an entropy in bits to a strength score from 0 to 4.

    Raises:
        ValueError: If *entropy* is NaN.
    """
    _check(entropy)
    return bisect.bisect_right(_THRESHOLD_BITS, entropy)


def crack_time_metrics(entropy: float) -> dict[str, float]:
    """Seconds each attacker profile needs to exhaust ``2^entropy`` guesses."""
    _check(entropy)
    return {
        profile: _guesses_times(entropy, 1.0 / rate)
        for profile, rate in ATTACKER_PROFILES.items()
    }


def legacy_crack_time(entropy: float) -> float:
    """Single-scenario crack time in seconds (``0.5 * 2^H * 1e-4``)."""
    _check(entropy)
    return _guesses_times(entropy, SECONDS_PER_GUESS)


def display_time(seconds: float) -> str:
    """Format a crack time as a coarse human-readable bucket."""
    if seconds < _MINUTE:
        return "instant"
    if seconds < _HOUR:
        return f"{1 + math.ceil(seconds / _MINUTE)} minutes"
    if seconds < _DAY:
        return f"{1 + math.ceil(seconds / _HOUR)} hours"
    if seconds < _MONTH:
        return f"{1 + math.ceil(seconds / _DAY)} days"
    if seconds < _YEAR:
        return f"{1 + math.ceil(seconds / _MONTH)} months"
    if seconds < _CENTURY:
        return f"{1 + math.ceil(seconds / _YEAR)} years"
    return "centuries"
