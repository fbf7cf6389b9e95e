"""Fleet composition and placement rules."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

from .battleship import Coord, Ship, in_bounds, required_fleet

logger = logging.getLogger(__name__)


def validate_fleet(fleet: Iterable[Ship], composition: list[tuple[str, int]] | None = None) -> bool:
    """Return True if *fleet* is a legal, complete fleet.

    A legal fleet matches the required ``(class_tag, length)`` multiset exactly
    (order does not matter), keeps every cell inside the board and never puts
    two ships on the same cell. The check is pure: nothing is placed.
    """
    ships = list(fleet)
    if composition is None:
        composition = required_fleet()

    if Counter((s.class_tag, s.length) for s in ships) != Counter(composition):
        logger.debug("Fleet rejected: composition mismatch")
        return False

    visited: set[Coord] = set()
    for ship in ships:
        for x, y in ship.cells():
            if not in_bounds(x, y):
                logger.debug("Fleet rejected: %s leaves the board at (%d, %d)", ship.class_tag, x, y)
                return False
            if (x, y) in visited:
                logger.debug("Fleet rejected: overlap at (%d, %d)", x, y)
                return False
            visited.add((x, y))
    return True
