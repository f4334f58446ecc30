"""Core enumerations and flags for the chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class CastleSide(IntEnum):
    """Which rook the king castles with."""

    KINGSIDE = 0
    QUEENSIDE = 1


class CastlingRights(IntFlag):
    """Bitmask for castling availability.

    Bits are only ever cleared during play; a lost right is never restored
    (except by undoing the move that cleared it).
    """

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, side: CastleSide) -> CastlingRights:
        """The single right for *color* castling on *side*."""
        kingside = side == CastleSide.KINGSIDE
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def for_color(cls, color: Color) -> CastlingRights:
        """Both rights of *color*."""
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
