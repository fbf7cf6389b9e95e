from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from .battleship import Ship


class CommandParseError(Exception):
    """Raised when a message cannot be mapped onto a known command."""


@dataclass(frozen=True)
class Register:
    name: str
    password: str


@dataclass(frozen=True)
class CreateRoom:
    pass


@dataclass(frozen=True)
class JoinRoom:
    room_id: str


@dataclass(frozen=True)
class SubmitFleet:
    game_id: str
    player_id: str
    fleet: Tuple[Ship, ...]


@dataclass(frozen=True)
class Attack:
    """An attack; with no coordinates the target is picked at random."""

    game_id: str
    player_id: str
    x: Optional[int] = None
    y: Optional[int] = None

    @property
    def is_random(self) -> bool:
        return self.x is None and self.y is None


Command = Union[Register, CreateRoom, JoinRoom, SubmitFleet, Attack]


def _field(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError):
        raise CommandParseError(f"Missing field: {key}") from None


def parse_command(message: Mapping[str, Any]) -> Command:
    """Map a decoded ``{"type": ..., "data": {...}}`` message onto a command."""
    if not isinstance(message, Mapping):
        raise CommandParseError("Message must be an object")
    kind = message.get("type")
    data = message.get("data") or {}
    if kind == "reg":
        return Register(name=str(_field(data, "name")), password=str(_field(data, "password")))
    elif kind == "create_room":
        return CreateRoom()
    elif kind == "add_user_to_room":
        return JoinRoom(room_id=str(_field(data, "indexRoom")))
    elif kind == "add_ships":
        raw_ships = _field(data, "ships")
        try:
            fleet = tuple(Ship.from_dict(s) for s in raw_ships)
        except (KeyError, TypeError, ValueError) as e:
            raise CommandParseError(f"Malformed ship: {e}") from None
        return SubmitFleet(
            game_id=str(_field(data, "gameId")),
            player_id=str(_field(data, "indexPlayer")),
            fleet=fleet,
        )
    elif kind in ("attack", "randomAttack"):
        game_id = str(_field(data, "gameId"))
        player_id = str(_field(data, "indexPlayer"))
        if kind == "randomAttack":
            return Attack(game_id=game_id, player_id=player_id)
        x, y = data.get("x"), data.get("y")
        try:
            return Attack(
                game_id=game_id,
                player_id=player_id,
                x=None if x is None else int(x),
                y=None if y is None else int(y),
            )
        except (TypeError, ValueError):
            raise CommandParseError("Coordinates must be integers") from None
    else:
        raise CommandParseError(f"Unknown command: {kind}")
