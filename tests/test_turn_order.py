from salvo.combat import AttackResult
from salvo.turns import TurnCoordinator


def test_first_turn_is_seat_zero():
    turns = TurnCoordinator()
    assert turns.index == 0
    assert turns.is_turn_of(0)
    assert not turns.is_turn_of(1)


def test_miss_passes_turn():
    turns = TurnCoordinator()
    assert turns.advance(AttackResult.MISS) is True
    assert turns.index == 1
    assert turns.advance(AttackResult.MISS) is True
    assert turns.index == 0


def test_hits_keep_turn():
    turns = TurnCoordinator(first=1)
    assert turns.advance(AttackResult.SHOT) is False
    assert turns.advance(AttackResult.KILLED) is False
    assert turns.index == 1
    assert turns.other == 0
