"""
Sequence Pattern Matcher
=========================

Finds runs of three or more characters from one alphabet (lowercase
letters, uppercase letters or digits) whose code points advance by a
constant step of at most five in either direction: ``abcd``, ``7531``,
``ZYX``, ``acegi``.

Sequences are cheap to guess. Starting from an obvious character (``a``,
``z``, ``0``, ``1``, ``9``) costs a single bit; otherwise the starting
character is chosen from the whole alphabet. Descending runs, larger
steps and longer runs each add a little.
"""

from __future__ import annotations

from typing import Optional

from shared.math_utils import lg
from strata.core.models import Match, PatternKind

MIN_SEQUENCE_LENGTH: int = 3
MAX_SEQUENCE_STEP: int = 5

_OBVIOUS_STARTS = frozenset("aAzZ019")

# name -> (first, last, alphabet size)
SEQUENCES: dict[str, tuple[str, str, int]] = {
    "lower": ("a", "z", 26),
    "upper": ("A", "Z", 26),
    "digits": ("0", "9", 10),
}


def _alphabet(char: str) -> Optional[str]:
    for name, (first, last, _size) in SEQUENCES.items():
        if first <= char <= last:
            return name
    return None


def sequence_match(password: str) -> list[Match]:
    """Return the constant-step runs of *password*.

    Consecutive runs may share their boundary character, e.g. ``abcba``
    yields both ``abc`` and ``cba``.
    """
    matches: list[Match] = []
    n = len(password)
    i = 0
    while i < n - 1:
        name = _alphabet(password[i])
        delta = ord(password[i + 1]) - ord(password[i])
        if name is None or _alphabet(password[i + 1]) != name or not (
            1 <= abs(delta) <= MAX_SEQUENCE_STEP
        ):
            i += 1
            continue

        j = i + 1
        while (
            j + 1 < n
            and _alphabet(password[j + 1]) == name
            and ord(password[j + 1]) - ord(password[j]) == delta
        ):
            j += 1

        if j - i + 1 >= MIN_SEQUENCE_LENGTH:
            token = password[i : j + 1]
            matches.append(
                Match(
                    start=i,
                    end=j,
                    pattern=PatternKind.SEQUENCE,
                    token=token,
                    entropy=sequence_entropy(token, name, delta),
                    sequence_name=name,
                    sequence_space=SEQUENCES[name][2],
                    ascending=delta > 0,
                    step=delta,
                )
            )
            i = j
        else:
            i += 1
    return matches


def sequence_entropy(token: str, name: str, step: int) -> float:
    """Entropy in bits of a sequence *token* from alphabet *name*."""
    if token[0] in _OBVIOUS_STARTS:
        entropy = 1.0
    elif name == "digits":
        entropy = lg(10)
    elif name == "lower":
        entropy = lg(26)
    else:
        entropy = lg(26) + 1.0

    if step < 0:
        entropy += 1.0
    entropy += lg(abs(step))
    return entropy + lg(len(token))
