"""
Keyboard Adjacency Graphs
==========================

Static adjacency data for the keyboard layouts the spatial matcher walks:
``qwerty`` and ``dvorak`` (slanted rows, six neighbours per key) and the
``keypad`` / ``mac_keypad`` numeric pads (aligned grid, eight neighbours).

The graphs are derived from the layout drawings below. Every key is a
token of one or two characters (unshifted first, then shifted). A key's
neighbours are listed in a fixed clockwise order starting from the key to
its left, with ``None`` where the layout has no key, so that the index of a
neighbour doubles as a direction for turn counting.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
"""

from __future__ import annotations

from typing import Callable, Optional

from strata.core.models import KeyboardGraph


# ===================================================================== #
#  Layout drawings
# ===================================================================== #

# Each slanted row is indented one column further than the previous one.
_QWERTY = r"""
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) -_ =+
    qQ wW eE rR tT yY uU iI oO pP [{ ]} \|
     aA sS dD fF gG hH jJ kK lL ;: '"
      zZ xX cC vV bB nN mM ,< .> /?
"""

_DVORAK = r"""
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) [{ ]}
    '" ,< .> pP yY fF gG cC rR lL /? =+ \|
     aA oO eE uU iI dD hH tT nN sS -_
      ;: qQ jJ kK xX bB mM wW vV zZ
"""

_KEYPAD = r"""
  / * -
7 8 9 +
4 5 6
1 2 3
  0 .
"""

_MAC_KEYPAD = r"""
  = / *
7 8 9 -
4 5 6 +
1 2 3
  0 .
"""

Coord = tuple[int, int]


def _slanted_neighbours(x: int, y: int) -> list[Coord]:
    """Left, up-left, up-right, right, down-right, down-left on a slanted board."""
    return [(x - 1, y), (x, y - 1), (x + 1, y - 1), (x + 1, y), (x, y + 1), (x - 1, y + 1)]


def _aligned_neighbours(x: int, y: int) -> list[Coord]:
    """The eight surrounding cells of a grid, clockwise from the left."""
    return [
        (x - 1, y), (x - 1, y - 1), (x, y - 1), (x + 1, y - 1),
        (x + 1, y), (x + 1, y + 1), (x, y + 1), (x - 1, y + 1),
    ]


# ===================================================================== #
#  Graph construction
# ===================================================================== #


def build_keyboard_graph(name: str, layout: str, *, slanted: bool) -> KeyboardGraph:
    """Build a :class:`KeyboardGraph` from a layout drawing.

    Args:
        name:    Name given to the graph.
        layout:  Rows of whitespace-separated key tokens. All tokens must
                 have the same width; on slanted layouts row *y* is
                 indented by ``y - 1`` extra columns.
        slanted: Whether rows are offset (typewriter keyboards) or aligned
                 (numeric keypads).

    Returns:
        The immutable adjacency graph.

    Raises:
        ValueError: If the drawing is not a regular grid of keys.
    """
    tokens = layout.split()
    token_size = len(tokens[0])
    if any(len(token) != token_size for token in tokens):
        raise ValueError(f"key tokens of layout {name!r} differ in width")
    x_unit = token_size + 1
    neighbours: Callable[[int, int], list[Coord]] = (
        _slanted_neighbours if slanted else _aligned_neighbours
    )

    positions: dict[Coord, str] = {}
    for y, line in enumerate(layout.split("\n")):
        slant = y - 1 if slanted else 0
        column = 0
        for token in line.split():
            column = line.index(token, column)
            x, remainder = divmod(column - slant, x_unit)
            if remainder:
                raise ValueError(
                    f"unexpected offset for key {token!r} in layout {name!r}"
                )
            positions[(x, y)] = token
            column += len(token)

    adjacency: dict[str, tuple[Optional[str], ...]] = {}
    keys: dict[str, str] = {}
    shifted: set[str] = set()
    for (x, y), token in positions.items():
        around = tuple(positions.get(coord) for coord in neighbours(x, y))
        for index, char in enumerate(token):
            adjacency[char] = around
            keys[char] = token
            if index == 1:
                shifted.add(char)

    degree_total = sum(
        sum(1 for neighbour in around if neighbour is not None)
        for around in adjacency.values()
    )
    return KeyboardGraph(
        name=name,
        adjacency=adjacency,
        keys=keys,
        average_degree=degree_total / len(adjacency),
        starting_positions=len(adjacency),
        shifted_chars=frozenset(shifted),
    )


QWERTY: KeyboardGraph = build_keyboard_graph("qwerty", _QWERTY, slanted=True)
DVORAK: KeyboardGraph = build_keyboard_graph("dvorak", _DVORAK, slanted=True)
KEYPAD: KeyboardGraph = build_keyboard_graph("keypad", _KEYPAD, slanted=False)
MAC_KEYPAD: KeyboardGraph = build_keyboard_graph("mac_keypad", _MAC_KEYPAD, slanted=False)

GRAPHS: tuple[KeyboardGraph, ...] = (QWERTY, DVORAK, KEYPAD, MAC_KEYPAD)
