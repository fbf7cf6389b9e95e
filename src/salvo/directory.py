"""Registry of players, open rooms, live games and transport connections.

All maps live behind one lock and are only reachable through the methods
below. Callers get records back, never the maps themselves.
"""

from __future__ import annotations

import itertools
import logging
import secrets
import threading
from dataclasses import dataclass, field

from .errors import AuthError, CapacityError, NotFoundError, StateError
from .game import Game, GamePlayer
from .security import PasswordHasher

logger = logging.getLogger(__name__)

ROOM_CAPACITY = 2
# random bytes per in-game seat pseudonym
SEAT_ID_BYTES = 8


@dataclass
class Player:
    id: str
    name: str
    password_hash: str = field(repr=False)
    win_count: int = 0


@dataclass
class Room:
    room_id: str
    players: list[Player]
    linked_game_id: str | None = None

    @property
    def is_open(self) -> bool:
        return len(self.players) == 1


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    wins: int


class SessionDirectory:
    """Owns every player, room and game for the lifetime of the process."""

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._lock = threading.Lock()
        self._hasher = hasher or PasswordHasher()
        self._players: dict[str, Player] = {}  # by name
        self._players_by_id: dict[str, Player] = {}
        self._rooms: dict[str, Room] = {}
        self._games: dict[str, Game] = {}
        self._conn_to_player: dict[str, str] = {}
        self._player_to_conn: dict[str, str] = {}
        self._player_ids = itertools.count(100000)
        self._room_ids = itertools.count(100000)
        self._game_ids = itertools.count(100000)

    # -------------------- players --------------------
    def register_or_login(self, name: str, password: str) -> Player:
        """Create *name* on first sight; afterwards require the same password."""
        with self._lock:
            player = self._players.get(name)
        if player is None:
            # scrypt runs outside the lock
            password_hash = self._hasher.hash(password)
            with self._lock:
                player = self._players.get(name)
                if player is None:
                    player = Player(id=f"P{next(self._player_ids)}", name=name, password_hash=password_hash)
                    self._players[name] = player
                    self._players_by_id[player.id] = player
                    logger.info("Registered new player %s (%s)", name, player.id)
                    return player
        # Known name, possibly registered by a concurrent caller. The stored
        # hash never changes, so verification needs no lock.
        if not self._hasher.verify(password, player.password_hash):
            raise AuthError("Invalid password")
        logger.info("Player %s logged in", name)
        return player

    def lookup_player(self, player_id: str) -> Player:
        with self._lock:
            try:
                return self._players_by_id[player_id]
            except KeyError:
                raise NotFoundError(f"Player {player_id} not found") from None

    # -------------------- connections --------------------
    def bind_connection(self, conn_id: str, player: Player) -> None:
        """Attach transport connection *conn_id* to *player*, replacing older bindings."""
        with self._lock:
            old_player = self._conn_to_player.pop(conn_id, None)
            if old_player is not None:
                self._player_to_conn.pop(old_player, None)
            old_conn = self._player_to_conn.pop(player.id, None)
            if old_conn is not None:
                self._conn_to_player.pop(old_conn, None)
            self._conn_to_player[conn_id] = player.id
            self._player_to_conn[player.id] = conn_id

    def release_connection(self, conn_id: str) -> None:
        with self._lock:
            player_id = self._conn_to_player.pop(conn_id, None)
            if player_id is not None:
                self._player_to_conn.pop(player_id, None)
                logger.info("Connection %s released (player %s)", conn_id, player_id)

    def player_for_connection(self, conn_id: str) -> Player:
        with self._lock:
            player_id = self._conn_to_player.get(conn_id)
            if player_id is None:
                raise NotFoundError("Player not found")
            return self._players_by_id[player_id]

    def connection_for(self, player_id: str) -> str | None:
        with self._lock:
            return self._player_to_conn.get(player_id)

    def connections(self) -> list[str]:
        with self._lock:
            return list(self._conn_to_player)

    # -------------------- rooms --------------------
    def create_room(self, player: Player) -> Room:
        """Open a room holding only *player*. One open room per player."""
        with self._lock:
            if self._open_room_of(player.id) is not None:
                raise StateError("Player already has an open room")
            room = Room(room_id=f"R{next(self._room_ids)}", players=[player])
            self._rooms[room.room_id] = room
        logger.info("Room %s created by %s", room.room_id, player.name)
        return room

    def join_room(self, room_id: str, player: Player) -> Room:
        """Add *player* to *room_id*; a full room is promoted to a game and removed."""
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise NotFoundError("Room not found")
            if len(room.players) >= ROOM_CAPACITY:
                raise CapacityError("Room is full")
            if any(p.id == player.id for p in room.players):
                raise StateError("Cannot join your own room")
            room.players.append(player)
            if len(room.players) == ROOM_CAPACITY:
                game = self._promote(room)
                # the joiner's own open room (if any) leaves the lobby too
                own = self._open_room_of(player.id)
                if own is not None:
                    del self._rooms[own.room_id]
                logger.info("Room %s promoted to game %s", room.room_id, game.game_id)
            return room

    def list_open_rooms(self) -> list[Room]:
        with self._lock:
            return [room for room in self._rooms.values() if room.is_open]

    def _open_room_of(self, player_id: str) -> Room | None:
        for room in self._rooms.values():
            if room.is_open and room.players[0].id == player_id:
                return room
        return None

    def _promote(self, room: Room) -> Game:
        seats = [GamePlayer(player=p, player_id=f"S{secrets.token_hex(SEAT_ID_BYTES)}") for p in room.players]
        game = Game(game_id=f"G{next(self._game_ids)}", players=seats)
        self._games[game.game_id] = game
        room.linked_game_id = game.game_id
        del self._rooms[room.room_id]
        return game

    # -------------------- games --------------------
    def lookup_game(self, game_id: str) -> Game:
        with self._lock:
            try:
                return self._games[game_id]
            except KeyError:
                raise NotFoundError("Game not found") from None

    # -------------------- standings --------------------
    def record_win(self, player_id: str) -> list[LeaderboardEntry]:
        """Credit *player_id* with one win and return the refreshed standings."""
        with self._lock:
            player = self._players_by_id.get(player_id)
            if player is None:
                raise NotFoundError(f"Player {player_id} not found")
            player.win_count += 1
            logger.info("%s now has %d win(s)", player.name, player.win_count)
            return self._leaderboard()

    def leaderboard(self) -> list[LeaderboardEntry]:
        with self._lock:
            return self._leaderboard()

    def _leaderboard(self) -> list[LeaderboardEntry]:
        entries = [LeaderboardEntry(p.name, p.win_count) for p in self._players.values()]
        return sorted(entries, key=lambda e: e.wins, reverse=True)
