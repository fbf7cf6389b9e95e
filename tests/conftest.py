import random
import sys
from pathlib import Path

import pytest
import logging

# Ensure local `src` directory is importable before project is installed.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from salvo.battleship import Ship, Orientation
from salvo.commands import CreateRoom, JoinRoom, Register, SubmitFleet
from salvo.directory import SessionDirectory
from salvo.events import GameCreated
from salvo.security import PasswordHasher
from salvo.session import GameSession

# Suppress INFO & DEBUG logs from the engine during tests
logging.basicConfig(level=logging.WARNING)

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def classic_fleet() -> list[Ship]:
    """A legal ten-ship fleet laid out along the even rows.

    Row 0: huge (0-3,0), large (5-7,0)
    Row 2: large (0-2,2), medium (4-5,2), medium (7-8,2)
    Row 4: medium (0-1,4), small (3,4), small (5,4), small (7,4)
    Row 6: small (9,6)
    """
    return [
        Ship(0, 0, H, 4, "huge"),
        Ship(5, 0, H, 3, "large"),
        Ship(0, 2, H, 3, "large"),
        Ship(4, 2, H, 2, "medium"),
        Ship(7, 2, H, 2, "medium"),
        Ship(0, 4, H, 2, "medium"),
        Ship(3, 4, H, 1, "small"),
        Ship(5, 4, H, 1, "small"),
        Ship(7, 4, H, 1, "small"),
        Ship(9, 6, H, 1, "small"),
    ]


def fleet_cells(fleet: list[Ship]) -> list[tuple[int, int]]:
    return [cell for ship in fleet for cell in ship.cells()]


@pytest.fixture
def hasher() -> PasswordHasher:
    """Cheap scrypt parameters so registration stays fast in tests."""
    return PasswordHasher(n=2**4, r=8, p=1)


@pytest.fixture
def directory(hasher) -> SessionDirectory:
    return SessionDirectory(hasher)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def session(directory, rng) -> GameSession:
    return GameSession(directory, rng=rng)


@pytest.fixture
def paired(session):
    """Factory: register alice/bob, form a room, return (game_id, alice_seat, bob_seat).

    Alice creates the room, so she holds the first turn once fleets are in.
    """

    def _factory(submit_fleets: bool = False):
        session.handle(Register("alice", "pw-a"), "conn-a")
        session.handle(Register("bob", "pw-b"), "conn-b")
        out = session.handle(CreateRoom(), "conn-a")
        room_id = out[-1].event.rooms[0].room_id
        out = session.handle(JoinRoom(room_id), "conn-b")
        created = {o.recipients[0]: o.event for o in out if isinstance(o.event, GameCreated)}
        game_id = created["conn-a"].game_id
        alice, bob = created["conn-a"].player_id, created["conn-b"].player_id
        if submit_fleets:
            session.handle(SubmitFleet(game_id, alice, tuple(classic_fleet())), "conn-a")
            session.handle(SubmitFleet(game_id, bob, tuple(classic_fleet())), "conn-b")
        return game_id, alice, bob

    return _factory
