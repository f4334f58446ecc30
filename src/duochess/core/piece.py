"""Piece value object: a color tagged with a piece type."""

from __future__ import annotations

from dataclasses import dataclass

from duochess.core.enums import Color, PieceType

# Board letter of each type, uppercase for white
_TYPE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in _TYPE_LETTERS.items()}

# Unicode glyphs indexed pawn..king
_WHITE_GLYPHS = "♙♘♗♖♕♔"
_BLACK_GLYPHS = "♟♞♝♜♛♚"


@dataclass(frozen=True, slots=True)
class Piece:
    """A single chess piece. Board cells hold ``Piece | None``."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        letter = _TYPE_LETTERS[self.piece_type]
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """``'N'`` → white knight, ``'n'`` → black knight."""
        ptype = _LETTER_TYPES.get(char.upper()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, ptype)

    @property
    def symbol(self) -> str:
        glyphs = _WHITE_GLYPHS if self.color == Color.WHITE else _BLACK_GLYPHS
        return glyphs[self.piece_type - PieceType.PAWN]

    def promoted(self, piece_type: PieceType) -> Piece:
        """Same-colored piece of *piece_type*, for pawn promotion."""
        return Piece(self.color, piece_type)


def side_of(piece: Piece) -> Color:
    return piece.color


def type_of(piece: Piece) -> PieceType:
    return piece.piece_type
