"""Attack resolution against a defender's board.

The functions here mutate the defender's Board and nothing else. Turn and
phase bookkeeping belong to the caller; so does rejecting an attack on a cell
that was already hit or missed.
"""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Iterable

from .battleship import Board, CellState, Coord, Ship, in_bounds
from .errors import NoTargetsError

_NEIGHBOURS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)]


class AttackResult(str, enum.Enum):
    MISS = "miss"
    SHOT = "shot"
    KILLED = "killed"


@dataclass(frozen=True)
class AttackOutcome:
    """Result of one attack. Transient: reported, never stored."""

    x: int
    y: int
    attacker_id: str
    result: AttackResult


def find_ship_at(fleet: Iterable[Ship], x: int, y: int) -> Ship | None:
    for ship in fleet:
        if ship.occupies(x, y):
            return ship
    return None


def is_ship_killed(board: Board, ship: Ship) -> bool:
    return all(board.state_at(x, y) is CellState.HIT for x, y in ship.cells())


def mark_around_killed_ship(board: Board, ship: Ship) -> list[Coord]:
    """Turn every still-empty 8-neighbour of *ship* into a miss.

    Returns the cells that were marked, in the order they were marked.
    """
    marked: list[Coord] = []
    for sx, sy in ship.cells():
        for dx, dy in _NEIGHBOURS:
            x, y = sx + dx, sy + dy
            if in_bounds(x, y, board.size) and board.state_at(x, y) is CellState.EMPTY:
                board.mark_miss(x, y)
                marked.append((x, y))
    return marked


def resolve_attack(board: Board, fleet: list[Ship], x: int, y: int, attacker_id: str) -> AttackOutcome:
    """Apply one attack at (*x*, *y*) and report miss / shot / killed."""
    assert in_bounds(x, y, board.size), f"attack at ({x}, {y}) outside the board"
    state = board.state_at(x, y)
    assert state in (CellState.EMPTY, CellState.SHIP), f"cell ({x}, {y}) attacked twice"

    if state is CellState.EMPTY:
        board.mark_miss(x, y)
        return AttackOutcome(x, y, attacker_id, AttackResult.MISS)

    board.mark_hit(x, y)
    ship = find_ship_at(fleet, x, y)
    assert ship is not None, f"ship cell ({x}, {y}) has no owning ship"
    if not is_ship_killed(board, ship):
        return AttackOutcome(x, y, attacker_id, AttackResult.SHOT)

    mark_around_killed_ship(board, ship)
    return AttackOutcome(x, y, attacker_id, AttackResult.KILLED)


def all_ships_sunk(fleet: Iterable[Ship], board: Board) -> bool:
    """Return True iff every cell of every ship in *fleet* is a hit."""
    return all(is_ship_killed(board, ship) for ship in fleet)


def choose_random_target(board: Board, rng: random.Random) -> Coord:
    """Pick uniformly among the cells of *board* that have not been attacked yet."""
    candidates = board.untouched_cells()
    if not candidates:
        raise NoTargetsError("No valid targets")
    return rng.choice(candidates)
