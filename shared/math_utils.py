"""
Strata Mathematical Utilities
==============================

Small combinatorics helpers shared by the Strata pattern matchers, the
minimum-entropy searcher and the scorer. Everything here works in bits
(base-2 logarithms) and on exact integers where possible so that entropy
values are reproducible across platforms.

References (master list):
    [1] Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    [2] Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
        Estimation. USENIX Security Symposium.
"""

from __future__ import annotations

import math
import string


# ---------------------------------------------------------------------------
#  Character-class alphabet sizes used by the brute-force model
# ---------------------------------------------------------------------------
LOWER_CARDINALITY: int = 26
UPPER_CARDINALITY: int = 26
DIGIT_CARDINALITY: int = 10
SYMBOL_CARDINALITY: int = 33
UNICODE_CARDINALITY: int = 100

_ASCII_LOWER = frozenset(string.ascii_lowercase)
_ASCII_UPPER = frozenset(string.ascii_uppercase)
_ASCII_DIGITS = frozenset(string.digits)

# lower, upper, digits, symbols, non-ASCII
CLASS_CARDINALITIES: tuple[int, ...] = (
    LOWER_CARDINALITY,
    UPPER_CARDINALITY,
    DIGIT_CARDINALITY,
    SYMBOL_CARDINALITY,
    UNICODE_CARDINALITY,
)


# ========================== Logarithms & Binomials ==========================


def lg(value: float) -> float:
    """Base-2 logarithm, the unit every Strata entropy is expressed in."""
    return math.log2(value)


def n_ck(n: int, k: int) -> int:
    """Binomial coefficient C(n, k), zero when *k* is out of range."""
    if k < 0 or k > n:
        return 0
    return math.comb(n, k)


def variation_entropy(changed: int, unchanged: int) -> float:
    """Bits needed to pick which positions carry a variation.

    Counts the arrangements of *changed* marked characters among
    ``changed + unchanged`` positions that are no more complex than the
    observed one, i.e. ``sum_{i=0..min(changed, unchanged)} C(changed+unchanged, i)``.
    Used for capitalisation, l33t substitutions and shifted keys.

    Args:
        changed:   Number of characters carrying the variation.
        unchanged: Number of characters that could have but do not.

    Returns:
        ``log2`` of the arrangement count (0.0 when there is a single one).
    """
    total = changed + unchanged
    possibilities = sum(
        n_ck(total, i) for i in range(min(changed, unchanged) + 1)
    )
    return lg(possibilities) if possibilities > 0 else 0.0


# ========================== Brute-force model ===============================


def character_class(char: str) -> int:
    """Index into :data:`CLASS_CARDINALITIES` of the class *char* belongs to."""
    if char in _ASCII_LOWER:
        return 0
    if char in _ASCII_UPPER:
        return 1
    if char in _ASCII_DIGITS:
        return 2
    if ord(char) <= 0x7F:
        return 3
    return 4


def bruteforce_cardinality(text: str) -> int:
    """Size of the union of character classes observed in *text*.

    Classes: lowercase ASCII (26), uppercase ASCII (26), digits (10),
    printable ASCII symbols (33) and anything outside ASCII (100). Each
    class counts once no matter how many of its characters appear.

    Args:
        text: Any string; an empty string has cardinality 0.

    Returns:
        The summed alphabet size of the classes present.
    """
    present = {character_class(char) for char in text}
    return sum(CLASS_CARDINALITIES[index] for index in present)


def bruteforce_entropy(text: str) -> float:
    """Entropy of guessing *text* character by character from its classes."""
    cardinality = bruteforce_cardinality(text)
    if not text or cardinality <= 1:
        return 0.0
    return len(text) * lg(cardinality)
