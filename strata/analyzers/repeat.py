"""
Repeat Pattern Matcher
=======================

Finds substrings made of a shorter unit repeated back to back (``aaaa``,
``abcabc``, ``hello!hello!``). The unit is priced recursively: its
entropy is the minimum-entropy decomposition of the unit itself, and the
repetition adds ``log2(count)`` bits.

Two scans are compared at each position, a greedy one that prefers the
longest repeated region and a lazy one that prefers the shortest unit;
the longer region wins and its unit is reduced to the shortest string
that still tiles it (a greedy unit ``abab`` over ``abababab`` becomes ``ab``).

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
"""

from __future__ import annotations

import re
from typing import Callable

from shared.math_utils import lg
from strata.core.models import Match, PatternKind

_GREEDY = re.compile(r"(.+)\1+", re.DOTALL)
_LAZY = re.compile(r"(.+?)\1+", re.DOTALL)


def repeat_match(password: str, base_entropy: Callable[[str], float]) -> list[Match]:
    """Return the repeated regions of *password*.

    Args:
        password:     Text to scan.
        base_entropy: Prices a repeated unit, normally by running the full
                      matcher and searcher on it.

    Returns:
        Non-overlapping repeat matches, left to right.
    """
    matches: list[Match] = []
    last_index = 0
    while last_index < len(password):
        greedy = _GREEDY.search(password, last_index)
        if greedy is None:
            break
        lazy = _LAZY.search(password, last_index)
        if lazy is None:
            break

        if len(greedy.group(0)) > len(lazy.group(0)):
            region = greedy
            anchored = _LAZY.fullmatch(region.group(0))
            base_token = anchored.group(1) if anchored else region.group(1)
        else:
            region = lazy
            base_token = lazy.group(1)

        token = region.group(0)
        count = len(token) // len(base_token)
        unit_entropy = base_entropy(base_token)
        matches.append(
            Match(
                start=region.start(),
                end=region.end() - 1,
                pattern=PatternKind.REPEAT,
                token=token,
                entropy=unit_entropy + lg(count),
                base_token=base_token,
                base_entropy=unit_entropy,
                repeat_count=count,
            )
        )
        last_index = region.end()
    return matches
