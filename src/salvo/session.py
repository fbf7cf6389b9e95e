"""Command handling for the Salvo engine.

GameSession is the single entry point the transport layer talks to. It takes
one already-decoded command plus the id of the connection it arrived on, and
returns the outbound events the transport must deliver:

Commands
--------
Register{name, password}          Log in, creating the player on first sight.
CreateRoom{}                      Open a lobby room holding the caller.
JoinRoom{room_id}                 Fill a room; a full room becomes a game.
SubmitFleet{game_id, player_id}   Place (or, before the start, replace) a fleet.
Attack{game_id, player_id, x?, y?}
                                  Fire at a cell, or at a random untouched
                                  cell when no coordinates are given.

Events
------
Registered / AuthFailed           To the caller only.
RoomList, Leaderboard             To every bound connection.
GameCreated                       One per seat, each with its own pseudonym.
GameStarted, TurnChanged,
AttackResolved, GameFinished      To both seats of the game.
CommandRejected                   To the caller only; nothing else changed.

Game commands name a seat pseudonym; the connection they arrive on must be
bound to the player holding that seat.

The session never performs I/O. Per-game state changes run under that game's
lock, so different games can be driven from different threads.
"""

from __future__ import annotations

import logging
import random

from typing_extensions import assert_never

from .battleship import Board, in_bounds
from .combat import AttackResult, all_ships_sunk, choose_random_target, resolve_attack
from .commands import Attack, Command, CreateRoom, JoinRoom, Register, SubmitFleet
from .coord_utils import format_coord
from .directory import LeaderboardEntry, Player, SessionDirectory
from .errors import AuthError, GameOverError, IllegalMoveError, SalvoError, ValidationError
from .events import (
    AttackResolved,
    AuthFailed,
    CommandRejected,
    GameCreated,
    GameFinished,
    GameStarted,
    Leaderboard,
    Outbound,
    Registered,
    RoomList,
    RoomSummary,
    Standing,
    TurnChanged,
)
from .fleet import validate_fleet
from .game import Game, Phase

logger = logging.getLogger(__name__)


class GameSession:
    """Turns commands into state changes and outbound events."""

    def __init__(self, directory: SessionDirectory | None = None, *, rng: random.Random | None = None):
        """Create a session over *directory*.

        Args:
            directory: Player/room/game registry. A fresh one is created if
                omitted.
            rng: Random source for coordinate-less attacks. Tests pass a
                seeded ``random.Random`` for repeatable targeting.
        """
        self.directory = directory if directory is not None else SessionDirectory()
        self.rng = rng if rng is not None else random.Random()

    # -------------------- public entry --------------------
    def handle(self, command: Command, origin: str) -> list[Outbound]:
        """Apply *command* sent from connection *origin*; return events to deliver."""
        try:
            if isinstance(command, Register):
                return self._register(command, origin)
            elif isinstance(command, CreateRoom):
                return self._create_room(origin)
            elif isinstance(command, JoinRoom):
                return self._join_room(command, origin)
            elif isinstance(command, SubmitFleet):
                return self._submit_fleet(command, origin)
            elif isinstance(command, Attack):
                return self._attack(command, origin)
            else:
                assert_never(command)
        except AuthError as e:
            logger.warning("Login failed for %r from %s", getattr(command, "name", ""), origin)
            return [Outbound((origin,), AuthFailed(getattr(command, "name", ""), str(e)))]
        except SalvoError as e:
            logger.warning("Rejected %s from %s: %s", type(command).__name__, origin, e)
            return [Outbound((origin,), CommandRejected(e.code, str(e)))]

    def disconnect(self, origin: str) -> None:
        """Forget the player binding of a closed connection."""
        self.directory.release_connection(origin)

    # -------------------- lobby --------------------
    def _register(self, cmd: Register, origin: str) -> list[Outbound]:
        player = self.directory.register_or_login(cmd.name, cmd.password)
        self.directory.bind_connection(origin, player)
        return [
            Outbound((origin,), Registered(player.name, player.id)),
            self._room_list(),
            self._leaderboard(self.directory.leaderboard()),
        ]

    def _create_room(self, origin: str) -> list[Outbound]:
        player = self.directory.player_for_connection(origin)
        self.directory.create_room(player)
        return [self._room_list()]

    def _join_room(self, cmd: JoinRoom, origin: str) -> list[Outbound]:
        player = self.directory.player_for_connection(origin)
        room = self.directory.join_room(cmd.room_id, player)
        out: list[Outbound] = []
        if room.linked_game_id is not None:
            game = self.directory.lookup_game(room.linked_game_id)
            for seat in game.players:
                conn = self.directory.connection_for(seat.player.id)
                if conn is not None:
                    out.append(Outbound((conn,), GameCreated(game.game_id, seat.player_id)))
            logger.info(
                "Game %s created: %s vs %s",
                game.game_id,
                game.players[0].player.name,
                game.players[1].player.name,
            )
        out.append(self._room_list())
        return out

    # -------------------- game --------------------
    def _submit_fleet(self, cmd: SubmitFleet, origin: str) -> list[Outbound]:
        caller = self.directory.player_for_connection(origin)
        game = self.directory.lookup_game(cmd.game_id)
        with game.lock:
            if game.phase is Phase.FINISHED:
                raise GameOverError("Game is already finished")
            seat = game.players[self._own_seat(game, cmd.player_id, caller)]
            if game.phase is not Phase.AWAITING_FLEETS:
                raise IllegalMoveError("Fleet already placed")
            fleet = list(cmd.fleet)
            if not validate_fleet(fleet):
                raise ValidationError("Invalid ships configuration")

            # build the replacement board first so the seat never holds half a fleet
            board = Board()
            board.place_fleet(fleet)
            seat.fleet, seat.board = fleet, board
            logger.debug("Fleet placed for %s in game %s", cmd.player_id, game.game_id)

            if not all(p.has_fleet for p in game.players):
                return []

            game.advance_phase(Phase.IN_PROGRESS)
            first = game.current.player_id
            logger.info("Game %s started; %s moves first", game.game_id, first)
            out: list[Outbound] = []
            for p in game.players:
                conn = self.directory.connection_for(p.player.id)
                if conn is not None:
                    out.append(Outbound((conn,), GameStarted(tuple(p.fleet), first)))
            out.append(Outbound(self._recipients(game), TurnChanged(first)))
            return out

    def _attack(self, cmd: Attack, origin: str) -> list[Outbound]:
        caller = self.directory.player_for_connection(origin)
        game = self.directory.lookup_game(cmd.game_id)
        with game.lock:
            if game.phase is Phase.FINISHED:
                raise GameOverError("Game is already finished")
            index = self._own_seat(game, cmd.player_id, caller)
            if game.phase is not Phase.IN_PROGRESS:
                raise IllegalMoveError("Game has not started")
            if not game.turns.is_turn_of(index):
                raise IllegalMoveError("Not your turn")

            attacker = game.players[index]
            defender = game.players[1 - index]
            if cmd.is_random:
                x, y = choose_random_target(defender.board, self.rng)
            elif cmd.x is None or cmd.y is None:
                raise IllegalMoveError("Both coordinates are required")
            else:
                x, y = cmd.x, cmd.y
                if not in_bounds(x, y):
                    raise IllegalMoveError(f"Cell ({x}, {y}) is outside the board")
                if defender.board.is_attacked(x, y):
                    raise IllegalMoveError(f"Cell {format_coord(x, y)} was already attacked")

            outcome = resolve_attack(defender.board, defender.fleet, x, y, attacker.player_id)
            logger.debug(
                "Game %s: %s fired at %s -> %s",
                game.game_id,
                attacker.player_id,
                format_coord(x, y),
                outcome.result.value,
            )
            recipients = self._recipients(game)
            out = [Outbound(recipients, AttackResolved(x, y, attacker.player_id, outcome.result))]

            if outcome.result is AttackResult.KILLED and all_ships_sunk(defender.fleet, defender.board):
                game.advance_phase(Phase.FINISHED)
                game.winner_index = index
                logger.info("Game %s finished; winner %s (%s)", game.game_id, attacker.player_id, attacker.player.name)
                out.append(Outbound(recipients, GameFinished(attacker.player_id)))
                out.append(self._leaderboard(self.directory.record_win(attacker.player.id)))
                return out

            game.turns.advance(outcome.result)
            out.append(Outbound(recipients, TurnChanged(game.current.player_id)))
            return out

    # -------------------- helpers --------------------
    @staticmethod
    def _own_seat(game: Game, seat_id: str, caller: Player) -> int:
        """Seat index of *seat_id*, which must belong to the calling player."""
        index = game.seat_of(seat_id)
        if game.players[index].player.id != caller.id:
            raise IllegalMoveError("Seat belongs to another player")
        return index

    def _recipients(self, game: Game) -> tuple[str, ...]:
        conns = (self.directory.connection_for(p.player.id) for p in game.players)
        return tuple(c for c in conns if c is not None)

    def _room_list(self) -> Outbound:
        rooms = tuple(
            RoomSummary(
                room_id=room.room_id,
                player_names=tuple(p.name for p in room.players),
                player_ids=tuple(p.id for p in room.players),
            )
            for room in self.directory.list_open_rooms()
        )
        return Outbound(tuple(self.directory.connections()), RoomList(rooms))

    def _leaderboard(self, entries: list[LeaderboardEntry]) -> Outbound:
        standings = tuple(Standing(e.name, e.wins) for e in entries)
        return Outbound(tuple(self.directory.connections()), Leaderboard(standings))
