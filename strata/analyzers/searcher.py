"""
Minimum-Entropy Searcher
=========================

Chooses, among all candidate matches, the non-overlapping cover of the
password with the smallest total entropy. Characters left uncovered are
grouped into maximal brute-force spans, each priced with the cardinality
of its own characters, ``len(span) * log2(C(span))``.

Dynamic programme over prefix lengths ``i`` with two states::

    match[i] = min( min(match[s], gap[s]) + m.entropy   for m ending at i-1 )
    gap[i]   = min( match[j] + bruteforce(password[j:i]) for j < i )

with ``match[0] = 0`` and ``gap[0] = inf``. A gap always starts right
after a match (or at the beginning), so two brute-force spans never sit
side by side and the programme prices exactly the sequence it returns.
When every span is a single character the gap state reduces to
``best[k-1] + bruteforce(password[k])``.

A candidate only displaces the incumbent when strictly cheaper. Ties keep
brute force first, then the longest gap, then the match seen first, which
makes the result deterministic.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - Bellman, R. (1957). Dynamic Programming. Princeton University Press.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from shared.math_utils import (
    CLASS_CARDINALITIES,
    bruteforce_cardinality,
    bruteforce_entropy,
    character_class,
    lg,
)
from strata.core.models import Match, PatternKind, SearchResult


def find_minimum_entropy(password: str, matches: Iterable[Match]) -> SearchResult:
    """Return the minimum-entropy decomposition of *password*.

    Args:
        password: The password being decomposed.
        matches:  Candidate matches, in emission order. Their order breaks
                  ties between equally cheap covers.

    Returns:
        A :class:`SearchResult` covering every character exactly once,
        whose entropy is the smallest over all covers.

    Raises:
        ValueError: If a match reaches outside *password*.
    """
    if not password:
        return SearchResult(password=password, entropy=0.0, match_sequence=[])

    n = len(password)
    ordered = sorted(matches, key=lambda m: (m.start, m.end))
    ending_at: list[list[Match]] = [[] for _ in range(n)]
    for match in ordered:
        if match.end >= n:
            raise ValueError(
                f"match {match.token!r} at [{match.start}, {match.end}] "
                f"lies outside a password of length {n}"
            )
        ending_at[match.end].append(match)

    match_cost = [math.inf] * (n + 1)
    gap_cost = [math.inf] * (n + 1)
    match_cost[0] = 0.0
    match_back: list[Optional[tuple[Match, bool]]] = [None] * (n + 1)
    gap_back = [0] * (n + 1)

    # prefix lengths a gap may start from, ascending
    gap_starts = [0]
    # last position of each character class seen so far
    last_seen = [-1] * len(CLASS_CARDINALITIES)

    for i in range(1, n + 1):
        last_seen[character_class(password[i - 1])] = i - 1

        for j in gap_starts:
            cardinality = sum(
                size for size, seen in zip(CLASS_CARDINALITIES, last_seen) if seen >= j
            )
            candidate = match_cost[j] + (i - j) * lg(cardinality)
            if candidate < gap_cost[i]:
                gap_cost[i] = candidate
                gap_back[i] = j

        for match in ending_at[i - 1]:
            s = match.start
            from_gap = gap_cost[s] <= match_cost[s]
            candidate = (gap_cost[s] if from_gap else match_cost[s]) + match.entropy
            if candidate < match_cost[i]:
                match_cost[i] = candidate
                match_back[i] = (match, from_gap)

        if match_cost[i] < math.inf:
            gap_starts.append(i)

    sequence: list[Match] = []
    i = n
    in_gap = gap_cost[n] <= match_cost[n]
    while i > 0:
        if in_gap:
            j = gap_back[i]
            sequence.append(_bruteforce_match(password, j, i - 1))
            i, in_gap = j, False
        else:
            match, in_gap = match_back[i]  # type: ignore[misc]
            sequence.append(match)
            i = match.start
    sequence.reverse()

    return SearchResult(
        password=password,
        entropy=math.fsum(match.entropy for match in sequence),
        match_sequence=sequence,
    )


def _bruteforce_match(password: str, start: int, end: int) -> Match:
    token = password[start : end + 1]
    return Match(
        start=start,
        end=end,
        pattern=PatternKind.BRUTEFORCE,
        token=token,
        entropy=bruteforce_entropy(token),
        cardinality=bruteforce_cardinality(token),
    )
