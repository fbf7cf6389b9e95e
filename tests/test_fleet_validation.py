"""Fleet composition and placement rules."""

from __future__ import annotations

import copy

from conftest import classic_fleet, H, V
from salvo.battleship import Ship
from salvo.fleet import validate_fleet


def test_classic_fleet_is_valid() -> None:
    assert validate_fleet(classic_fleet())


def test_order_does_not_matter() -> None:
    assert validate_fleet(list(reversed(classic_fleet())))


def test_validation_is_pure() -> None:
    fleet = classic_fleet()
    before = copy.deepcopy(fleet)
    assert validate_fleet(fleet) == validate_fleet(fleet)
    assert fleet == before


def test_missing_ship_rejected() -> None:
    assert not validate_fleet(classic_fleet()[:-1])


def test_extra_ship_rejected() -> None:
    assert not validate_fleet(classic_fleet() + [Ship(9, 9, H, 1, "small")])


def test_wrong_class_for_length_rejected() -> None:
    fleet = classic_fleet()
    fleet[-1] = Ship(9, 6, H, 1, "medium")
    assert not validate_fleet(fleet)


def test_ship_leaving_board_rejected() -> None:
    fleet = classic_fleet()
    fleet[-1] = Ship(9, 9, V, 1, "small")  # still inside
    assert validate_fleet(fleet)
    fleet[1] = Ship(8, 0, H, 3, "large")  # x 8..10
    assert not validate_fleet(fleet)


def test_negative_origin_rejected() -> None:
    fleet = classic_fleet()
    fleet[-1] = Ship(-1, 6, H, 1, "small")
    assert not validate_fleet(fleet)


def test_overlap_rejected() -> None:
    fleet = classic_fleet()
    fleet[-1] = Ship(2, 0, H, 1, "small")  # sits on the huge ship
    assert not validate_fleet(fleet)


def test_crossing_ships_rejected() -> None:
    fleet = classic_fleet()
    fleet[1] = Ship(1, 8, V, 2, "large")  # wrong length for tag
    assert not validate_fleet(fleet)
    fleet[1] = Ship(1, 0, V, 3, "large")  # crosses the huge ship at (1, 0)
    assert not validate_fleet(fleet)


def test_custom_composition() -> None:
    fleet = [Ship(0, 0, H, 4, "huge")]
    assert validate_fleet(fleet, composition=[("huge", 4)])
    assert not validate_fleet(fleet)
