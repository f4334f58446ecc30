"""Move candidate and history value objects."""

from __future__ import annotations

from dataclasses import dataclass

from duochess.core.enums import CastleSide, Color, PieceType
from duochess.core.piece import Piece
from duochess.core.types import Square, square_name

PROMOTION_CHOICES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable move candidate produced by the move generator.

    ``promotion`` only says that a promotion piece must be chosen; the
    choice itself is passed separately to the executor.
    """

    from_sq: Square
    to_sq: Square
    capture: bool = False
    promotion: bool = False
    en_passant_created: Square | None = None
    en_passant_capture: bool = False
    castling: CastleSide | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    @property
    def is_double_step(self) -> bool:
        return self.en_passant_created is not None


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single executed move in the game history."""

    move: Move
    piece: Piece
    captured: Piece | None = None
    promotion: PieceType | None = None

    @property
    def from_sq(self) -> Square:
        return self.move.from_sq

    @property
    def to_sq(self) -> Square:
        return self.move.to_sq

    @property
    def color(self) -> Color:
        return self.piece.color

    def __str__(self) -> str:
        base = str(self.move)
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """A pawn has reached the last rank and waits for its new piece type.

    Returned by :meth:`Position.make_move` in place of a :class:`MoveRecord`;
    resume with :meth:`Position.complete_promotion`.
    """

    move: Move
    color: Color

    @property
    def square(self) -> Square:
        return self.move.to_sq

    @property
    def choices(self) -> tuple[PieceType, ...]:
        return PROMOTION_CHOICES
