"""Outbound event model emitted by GameSession.

The goal is to hand the transport layer strongly-typed, already computed
values it can translate into whatever wire format it speaks, without parsing
free-text strings or reaching back into engine state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Dict, Union

from .battleship import Ship
from .combat import AttackResult


class Category(Enum):
    """High-level event categories."""

    LOBBY = auto()  # registration, rooms, standings
    GAME = auto()  # per-game lifecycle (created, start, attack, turn, finish)
    SYSTEM = auto()  # rejected commands


class _Payload:
    category: ClassVar[Category]
    type: ClassVar[str]

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True, slots=True)
class Registered(_Payload):
    category = Category.LOBBY
    type = "reg"

    name: str
    player_id: str


@dataclass(frozen=True, slots=True)
class AuthFailed(_Payload):
    category = Category.LOBBY
    type = "reg_failed"

    name: str
    message: str


@dataclass(frozen=True, slots=True)
class RoomSummary:
    room_id: str
    player_names: tuple[str, ...]
    player_ids: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RoomList(_Payload):
    category = Category.LOBBY
    type = "update_room"

    rooms: tuple[RoomSummary, ...]


@dataclass(frozen=True, slots=True)
class GameCreated(_Payload):
    category = Category.GAME
    type = "create_game"

    game_id: str
    player_id: str


@dataclass(frozen=True, slots=True)
class GameStarted(_Payload):
    category = Category.GAME
    type = "start_game"

    fleet: tuple[Ship, ...]
    first_player_id: str


@dataclass(frozen=True, slots=True)
class AttackResolved(_Payload):
    category = Category.GAME
    type = "attack"

    x: int
    y: int
    attacker_id: str
    result: AttackResult


@dataclass(frozen=True, slots=True)
class TurnChanged(_Payload):
    category = Category.GAME
    type = "turn"

    player_id: str


@dataclass(frozen=True, slots=True)
class GameFinished(_Payload):
    category = Category.GAME
    type = "finish"

    winner_id: str


@dataclass(frozen=True, slots=True)
class Standing:
    name: str
    wins: int


@dataclass(frozen=True, slots=True)
class Leaderboard(_Payload):
    """Standings sorted by wins, highest first."""

    category = Category.LOBBY
    type = "update_winners"

    standings: tuple[Standing, ...]


@dataclass(frozen=True, slots=True)
class CommandRejected(_Payload):
    category = Category.SYSTEM
    type = "error"

    code: str
    message: str


OutboundEvent = Union[
    Registered,
    AuthFailed,
    RoomList,
    GameCreated,
    GameStarted,
    AttackResolved,
    TurnChanged,
    GameFinished,
    Leaderboard,
    CommandRejected,
]


@dataclass(frozen=True, slots=True)
class Outbound:
    """One event plus the connection ids it must be delivered to."""

    recipients: tuple[str, ...]
    event: OutboundEvent
