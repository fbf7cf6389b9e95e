import random

from salvo.commands import Register
from salvo.router import EventRouter
from salvo.simulate import Inboxes, play_game


def test_self_play_runs_to_completion(session):
    inboxes = Inboxes()
    router = EventRouter(inboxes.deliver)
    router(session.handle(Register("alpha", "a"), "bot-1"))
    router(session.handle(Register("bravo", "b"), "bot-2"))

    rng = random.Random(3)
    winners = [play_game(session, inboxes, "bot-1", "bot-2", rng), play_game(session, inboxes, "bot-2", "bot-1", rng)]

    assert set(winners) <= {"alpha", "bravo"}
    standings = session.directory.leaderboard()
    assert sum(entry.wins for entry in standings) == 2
    assert standings[0].wins >= standings[1].wins
