"""Per-game records: the two seats, their boards and the game phase."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .battleship import Board, Ship
from .errors import NotFoundError
from .turns import TurnCoordinator

if TYPE_CHECKING:
    from .directory import Player


class Phase(enum.IntEnum):
    """Game lifecycle. Values only ever increase."""

    AWAITING_FLEETS = 0
    IN_PROGRESS = 1
    FINISHED = 2


@dataclass
class GamePlayer:
    """One seat in a game.

    ``player_id`` is a per-game pseudonym; opponents only ever see this, never
    the global player id.
    """

    player: "Player"
    player_id: str
    fleet: list[Ship] = field(default_factory=list)
    board: Board = field(default_factory=Board)

    @property
    def has_fleet(self) -> bool:
        return bool(self.fleet)


@dataclass
class Game:
    game_id: str
    players: list[GamePlayer]
    turns: TurnCoordinator = field(default_factory=TurnCoordinator)
    phase: Phase = Phase.AWAITING_FLEETS
    winner_index: int | None = None
    # Serialises every fleet submission and attack against this game.
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self) -> None:
        assert len(self.players) == 2, "a game has exactly two players"

    def seat_of(self, player_id: str) -> int:
        """Return the seat index (0 or 1) for the in-game *player_id*."""
        for index, seat in enumerate(self.players):
            if seat.player_id == player_id:
                return index
        raise NotFoundError(f"Player {player_id} not found in game {self.game_id}")

    @property
    def current(self) -> GamePlayer:
        return self.players[self.turns.index]

    @property
    def opponent(self) -> GamePlayer:
        return self.players[self.turns.other]

    def advance_phase(self, phase: Phase) -> None:
        assert phase > self.phase, f"phase cannot move {self.phase.name} -> {phase.name}"
        self.phase = phase
