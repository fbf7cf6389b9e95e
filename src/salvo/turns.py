"""Turn ownership for a two-player game."""

from __future__ import annotations

from .combat import AttackResult


class TurnCoordinator:
    """Tracks whose turn it is.

    A hit (shot or killed) keeps the turn with the attacker; a miss passes it
    to the other player.
    """

    def __init__(self, first: int = 0) -> None:
        assert first in (0, 1)
        self.index = first

    @property
    def other(self) -> int:
        return 1 - self.index

    def is_turn_of(self, index: int) -> bool:
        return index == self.index

    def advance(self, result: AttackResult) -> bool:
        """Apply the switch/continue rule; return True if the turn changed hands."""
        if result is AttackResult.MISS:
            self.index = 1 - self.index
            return True
        return False
