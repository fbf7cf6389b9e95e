"""Self-play driver for the Salvo engine.

Two bots register, form a room, submit random fleets and fire random shots at
each other until one fleet is gone. Everything goes through
``GameSession.handle`` and an ``EventRouter``, exactly as a transport would
drive the engine.
"""

from __future__ import annotations

import argparse
import logging
import os
import random
from collections import defaultdict

from . import config as _cfg
from .battleship import random_fleet
from .commands import Attack, CreateRoom, JoinRoom, Register, SubmitFleet
from .events import GameCreated, GameFinished, Leaderboard, OutboundEvent, RoomList, TurnChanged
from .router import EventRouter
from .session import GameSession

logger = logging.getLogger(__name__)

# Safety valve; a game can never take more shots than there are cells.
MAX_SHOTS = 2 * _cfg.BOARD_SIZE * _cfg.BOARD_SIZE


class Inboxes:
    """Per-connection event log, standing in for real sockets."""

    def __init__(self) -> None:
        self.events: dict[str, list[OutboundEvent]] = defaultdict(list)

    def deliver(self, recipient: str, event: OutboundEvent) -> None:
        self.events[recipient].append(event)

    def latest(self, recipient: str, kind: type) -> OutboundEvent | None:
        for ev in reversed(self.events[recipient]):
            if isinstance(ev, kind):
                return ev
        return None


def play_game(session: GameSession, inboxes: Inboxes, host: str, guest: str, rng: random.Random) -> str:
    """Run one full game between connections *host* and *guest*; return the winner's name."""
    router = EventRouter(inboxes.deliver)
    router(session.handle(CreateRoom(), host))
    rooms = inboxes.latest(guest, RoomList)
    assert isinstance(rooms, RoomList)
    host_name = session.directory.player_for_connection(host).name
    room_id = next(r.room_id for r in rooms.rooms if r.player_names == (host_name,))
    router(session.handle(JoinRoom(room_id), guest))

    seats: dict[str, str] = {}
    game_id = ""
    for conn in (host, guest):
        created = inboxes.latest(conn, GameCreated)
        assert isinstance(created, GameCreated)
        game_id, seats[conn] = created.game_id, created.player_id
    for conn in (host, guest):
        router(session.handle(SubmitFleet(game_id, seats[conn], tuple(random_fleet(rng))), conn))

    for shot in range(MAX_SHOTS + 1):
        finished = inboxes.latest(host, GameFinished)
        if isinstance(finished, GameFinished) and finished.winner_id in seats.values():
            winner_conn = next(c for c, pid in seats.items() if pid == finished.winner_id)
            logger.info("Game %s over after %d shots", game_id, shot)
            return session.directory.player_for_connection(winner_conn).name
        turn = inboxes.latest(host, TurnChanged)
        assert isinstance(turn, TurnChanged)
        shooter = next(c for c, pid in seats.items() if pid == turn.player_id)
        router(session.handle(Attack(game_id, turn.player_id), shooter))
    raise RuntimeError(f"game {game_id} did not finish within {MAX_SHOTS} shots")


def main(argv: list[str] | None = None) -> None:  # pragma: no cover – side-effect entrypoint
    parser = argparse.ArgumentParser(description="Salvo self-play simulation")
    parser.add_argument("--games", type=int, default=_cfg.SIM_GAMES, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=_cfg.SEED, help="Seed for fleets and targeting.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity.")
    parser.add_argument(
        "-q",
        "--quiet",
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        help="Suppress all output but errors.",
    )
    args = parser.parse_args(argv)

    if args.debug:
        os.environ["SALVO_DEBUG"] = "1"

    if args.silent:
        level = logging.ERROR
    elif args.debug or _cfg.DEBUG:
        level = logging.DEBUG
    elif args.verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    rng = random.Random(args.seed)
    session = GameSession(rng=rng)
    inboxes = Inboxes()
    router = EventRouter(inboxes.deliver)
    router(session.handle(Register("alpha", "alpha-pw"), "bot-1"))
    router(session.handle(Register("bravo", "bravo-pw"), "bot-2"))

    for n in range(args.games):
        host, guest = ("bot-1", "bot-2") if n % 2 == 0 else ("bot-2", "bot-1")
        winner = play_game(session, inboxes, host, guest, rng)
        if not args.silent:
            print(f"Game {n + 1}: {winner} wins")

    board = inboxes.latest("bot-1", Leaderboard)
    if isinstance(board, Leaderboard) and not args.silent:
        print("Leaderboard:")
        for standing in board.standings:
            print(f"  {standing.name:<10} {standing.wins}")


if __name__ == "__main__":  # pragma: no cover
    main()
