"""
Spatial Pattern Matcher
========================

Finds runs of characters that trace a connected path over a keyboard
layout, such as ``qwerty``, ``zxcvbn``, ``1qaz`` or ``7896``. A step of the
path either presses the same key again or moves to a neighbouring key,
with or without shift.

The guess estimate grows geometrically with path length and
combinatorially with the number of direction changes (turns)::

    guesses = sum_{i=2..L} sum_{j=1..min(t, i-1)} C(i-1, j-1) * s * d^j

where *L* is the token length, *t* the number of turns, *s* the number of
starting keys and *d* the average number of neighbours of the layout.
Shifted keys add the bits needed to place them within the token.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
"""

from __future__ import annotations

from typing import Iterable, Optional

from shared.math_utils import lg, n_ck, variation_entropy
from strata.analyzers.keyboard import GRAPHS
from strata.core.models import KeyboardGraph, Match, PatternKind

MIN_SPATIAL_LENGTH: int = 3


def spatial_match(
    password: str, graphs: Iterable[KeyboardGraph] = GRAPHS
) -> list[Match]:
    """Return every keyboard path of length three or more in *password*."""
    matches: list[Match] = []
    for graph in graphs:
        matches.extend(_spatial_match_graph(password, graph))
    return matches


def _step_direction(graph: KeyboardGraph, prev: str, cur: str) -> Optional[int]:
    """Direction index of the key producing *cur* as seen from *prev*.

    Returns ``-1`` for a repeat of the same key and ``None`` when the two
    characters are not on touching keys.
    """
    key = graph.keys.get(prev)
    if key is None:
        return None
    if cur in key:
        return -1
    for direction, neighbour in enumerate(graph.adjacency[prev]):
        if neighbour is not None and cur in neighbour:
            return direction
    return None


def _spatial_match_graph(password: str, graph: KeyboardGraph) -> list[Match]:
    matches: list[Match] = []
    n = len(password)
    i = 0
    while i < n - 1:
        j = i + 1
        last_direction: Optional[int] = None
        turns = 0
        while j < n:
            direction = _step_direction(graph, password[j - 1], password[j])
            if direction is None:
                break
            # Every path starts with a turn; repeats keep the heading.
            if direction >= 0 and direction != last_direction:
                turns += 1
                last_direction = direction
            j += 1

        if j - i >= MIN_SPATIAL_LENGTH and turns > 0:
            token = password[i:j]
            shifted_count = sum(1 for char in token if char in graph.shifted_chars)
            matches.append(
                Match(
                    start=i,
                    end=j - 1,
                    pattern=PatternKind.SPATIAL,
                    token=token,
                    entropy=spatial_entropy(graph, len(token), turns, shifted_count),
                    graph=graph.name,
                    turns=turns,
                    shifted_count=shifted_count,
                )
            )
        i = j
    return matches


def spatial_entropy(
    graph: KeyboardGraph, length: int, turns: int, shifted_count: int = 0
) -> float:
    """Entropy in bits of a keyboard path.

    Args:
        graph:         Layout the path was found on.
        length:        Number of characters in the path.
        turns:         Direction changes along the path (at least one).
        shifted_count: Characters typed with shift.
    """
    s = graph.starting_positions
    d = graph.average_degree
    possibilities = 0.0
    for i in range(2, length + 1):
        for j in range(1, min(turns, i - 1) + 1):
            possibilities += n_ck(i - 1, j - 1) * s * d ** j
    entropy = lg(possibilities)

    if shifted_count:
        unshifted = length - shifted_count
        if unshifted == 0:
            entropy += 1.0
        else:
            entropy += variation_entropy(shifted_count, unshifted)
    return entropy
