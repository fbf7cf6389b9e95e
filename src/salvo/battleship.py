"""
battleship.py

Contains the board-level data structures for Salvo, including:
 - CellState / Orientation enums
 - Ship, an immutable placed ship
 - Board, the 10x10 grid owned by one player in one game
 - random_fleet(), which lays out a legal fleet at random

Coordinates are always (x, y) with x the column and y the row. The grid is a
numpy array indexed ``grid[y, x]``; nothing outside this module touches it.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

import numpy as np

from .config import BOARD_SIZE, FLEET_COMPOSITION
from .coord_utils import format_coord

Coord = tuple[int, int]


class CellState(enum.IntEnum):
    """State of a single board cell."""

    EMPTY = 0
    SHIP = 1
    HIT = 2
    MISS = 3


class Orientation(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


# Allowed cell transitions; HIT and MISS are terminal.
_TRANSITIONS: dict[CellState, frozenset[CellState]] = {
    CellState.EMPTY: frozenset({CellState.SHIP, CellState.MISS}),
    CellState.SHIP: frozenset({CellState.HIT}),
    CellState.HIT: frozenset(),
    CellState.MISS: frozenset(),
}

# Glyphs used by Board.rows()
_GLYPHS = {
    CellState.EMPTY: ".",
    CellState.SHIP: "S",
    CellState.HIT: "X",
    CellState.MISS: "o",
}


def in_bounds(x: int, y: int, size: int = BOARD_SIZE) -> bool:
    return 0 <= x < size and 0 <= y < size


@dataclass(frozen=True)
class Ship:
    """A ship anchored at (x, y) and extended along its orientation."""

    x: int
    y: int
    orientation: Orientation
    length: int
    class_tag: str

    def __post_init__(self) -> None:
        # accept plain "horizontal" / "vertical" strings
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    def cells(self) -> Iterator[Coord]:
        """Yield every (x, y) cell this ship occupies, starting at its origin."""
        for step in range(self.length):
            if self.orientation is Orientation.HORIZONTAL:
                yield self.x + step, self.y
            else:
                yield self.x, self.y + step

    def occupies(self, x: int, y: int) -> bool:
        return (x, y) in set(self.cells())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Ship":
        """Build a ship from ``{position: {x, y}, direction, length, type}``.

        ``direction`` true means vertical, false horizontal.
        """
        position = data["position"]
        orientation = Orientation.VERTICAL if data["direction"] else Orientation.HORIZONTAL
        return cls(
            x=int(position["x"]),
            y=int(position["y"]),
            orientation=orientation,
            length=int(data["length"]),
            class_tag=str(data["type"]),
        )


class Board:
    """
    A single player's board.

    We store:
      - self.grid: int8 numpy array of CellState values, indexed [row, col]
        i.e. ``grid[y, x]``.

    The grid only ever changes through place_fleet() (empty -> ship) and the
    combat helpers via mark_hit() / mark_miss(). Any other transition is a
    programming error and trips an assertion.
    """

    def __init__(self, size: int = BOARD_SIZE):
        """Initialise an empty *size*x*size* board."""
        self.size = size
        self.grid = np.zeros((size, size), dtype=np.int8)

    def state_at(self, x: int, y: int) -> CellState:
        assert in_bounds(x, y, self.size), f"cell ({x}, {y}) outside the board"
        return CellState(int(self.grid[y, x]))

    def _transition(self, x: int, y: int, new: CellState) -> None:
        current = self.state_at(x, y)
        assert new in _TRANSITIONS[current], f"illegal transition {current.name} -> {new.name} at ({x}, {y})"
        self.grid[y, x] = int(new)

    def place_fleet(self, fleet: list[Ship]) -> None:
        """Write every ship cell onto the board. The fleet must already be validated."""
        for ship in fleet:
            for x, y in ship.cells():
                self._transition(x, y, CellState.SHIP)

    def mark_hit(self, x: int, y: int) -> None:
        self._transition(x, y, CellState.HIT)

    def mark_miss(self, x: int, y: int) -> None:
        self._transition(x, y, CellState.MISS)

    def is_attacked(self, x: int, y: int) -> bool:
        """Return True if (*x*, *y*) has already been hit or missed."""
        return self.state_at(x, y) in (CellState.HIT, CellState.MISS)

    def untouched_cells(self) -> list[Coord]:
        """Every (x, y) whose state is still EMPTY or SHIP, in row-major order."""
        rows, cols = np.nonzero(self.grid <= int(CellState.SHIP))
        return [(int(x), int(y)) for y, x in zip(rows, cols)]

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.grid == int(state)))

    def rows(self, *, reveal: bool = False) -> list[str]:
        """Render the board as text rows; ships are shown only if *reveal*."""
        lines = ["  " + " ".join(format_coord(x, 0)[0] for x in range(self.size))]
        for y in range(self.size):
            glyphs = []
            for x in range(self.size):
                state = self.state_at(x, y)
                if state is CellState.SHIP and not reveal:
                    state = CellState.EMPTY
                glyphs.append(_GLYPHS[state])
            lines.append(f"{y + 1:2} " + " ".join(glyphs))
        return lines


def required_fleet() -> list[tuple[str, int]]:
    """Expand FLEET_COMPOSITION into one (class tag, length) pair per ship."""
    return [(tag, length) for tag, length, count in FLEET_COMPOSITION for _ in range(count)]


def random_fleet(rng: random.Random, composition: list[tuple[str, int]] | None = None) -> list[Ship]:
    """Randomly position a fleet of *composition* without overlaps or leaving the board."""
    if composition is None:
        composition = required_fleet()
    occupied: set[Coord] = set()
    fleet: list[Ship] = []
    for class_tag, length in composition:
        placed = False
        while not placed:
            orientation = rng.choice([Orientation.HORIZONTAL, Orientation.VERTICAL])
            x = rng.randint(0, BOARD_SIZE - 1)
            y = rng.randint(0, BOARD_SIZE - 1)
            ship = Ship(x, y, orientation, length, class_tag)
            cells = list(ship.cells())
            if all(in_bounds(cx, cy) for cx, cy in cells) and occupied.isdisjoint(cells):
                occupied.update(cells)
                fleet.append(ship)
                placed = True
    return fleet
