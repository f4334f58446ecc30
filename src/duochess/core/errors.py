"""Exceptions raised by the chess core."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for all duochess errors."""


class InvariantViolation(ChessError):
    """The game state is corrupt (missing king, malformed board).

    Always a sign of an earlier bug; callers must let it propagate.
    """


class IllegalMoveError(ChessError, ValueError):
    """The executor was handed a move that does not fit the board."""


class PromotionError(ChessError, ValueError):
    """Invalid promotion choice, or no promotion awaiting a choice."""


class PromotionPendingError(ChessError):
    """A pawn is waiting on the last rank for its promotion piece."""
