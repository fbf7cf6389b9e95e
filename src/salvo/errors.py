"""Domain error taxonomy.

Every error here is recoverable at the command level: the command that raised
it is rejected, session state is left untouched, and the originating caller
receives a single error event. Broken internal invariants are not modelled
here; they surface as ``AssertionError``.
"""

from __future__ import annotations


class SalvoError(Exception):
    """Base for all domain errors raised by the engine."""

    code = "error"


class AuthError(SalvoError):
    """Raised when a known player name is presented with the wrong password."""

    code = "auth_failed"


class NotFoundError(SalvoError):
    """Raised for an unknown room, game, player or connection reference."""

    code = "not_found"


class StateError(SalvoError):
    """Raised when a lobby operation conflicts with the player's current state."""

    code = "invalid_state"


class CapacityError(SalvoError):
    """Raised when joining a room that already holds two players."""

    code = "room_full"


class ValidationError(SalvoError):
    """Raised when a submitted fleet breaks the composition or placement rules."""

    code = "invalid_fleet"


class IllegalMoveError(SalvoError):
    """Raised for out-of-turn, out-of-bounds or repeated attacks."""

    code = "illegal_move"


class GameOverError(SalvoError):
    """Raised for any command against a finished game."""

    code = "game_over"


class NoTargetsError(SalvoError):
    """Raised when a random attack finds no untouched cell."""

    code = "no_targets"
