"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from duochess.core.enums import Color, PieceType
from duochess.core.errors import InvariantViolation
from duochess.core.piece import Piece, side_of, type_of
from duochess.core.types import ALL_SQUARES, BOARD_SIZE, Square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_EMPTY_CHAR = "."


class Board:
    """Mutable 8x8 matrix of cells, each empty or holding a :class:`Piece`."""

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._grid[sq[0]][sq[1]]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._grid[sq[0]][sq[1]] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._grid[sq[0]][sq[1]] is None

    @property
    def rows(self) -> tuple[tuple[Piece | None, ...], ...]:
        """Read-only snapshot of the grid, row 0 first."""
        return tuple(tuple(row) for row in self._grid)

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied cell."""
        for sq in ALL_SQUARES:
            piece = self._grid[sq.row][sq.col]
            if piece is not None:
                yield sq, piece

    def pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.occupied() if side_of(piece) == color]

    def king_square(self, color: Color) -> Square:
        """Return the king square for *color*.

        Raises :class:`InvariantViolation` if the king is missing: no legal
        game state exists without one.
        """
        for sq, piece in self.occupied():
            if side_of(piece) == color and type_of(piece) == PieceType.KING:
                return sq
        raise InvariantViolation(f"No {color.name} king on board")

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [row.copy() for row in self._grid]
        return b

    def clear(self) -> None:
        self._grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b._grid[0][col] = Piece(Color.BLACK, pt)
            b._grid[1][col] = Piece(Color.BLACK, PieceType.PAWN)
            b._grid[6][col] = Piece(Color.WHITE, PieceType.PAWN)
            b._grid[7][col] = Piece(Color.WHITE, pt)
        return b

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> Board:
        """Build a board from eight 8-character rows, row 0 (rank 8) first.

        Uses ``KQRBNP`` for white, ``kqrbnp`` for black and ``.`` for empty::

            Board.from_rows([
                "....k...",
                "........",
                ...
                "....K...",
            ])
        """
        if len(rows) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in rows):
            raise InvariantViolation(
                f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got rows {list(rows)!r}"
            )
        b = cls()
        for r, row in enumerate(rows):
            for c, char in enumerate(row):
                if char != _EMPTY_CHAR:
                    b._grid[r][c] = Piece.from_char(char)
        return b

    def to_rows(self) -> list[str]:
        """Inverse of :meth:`from_rows`."""
        return [
            "".join(str(p) if p else _EMPTY_CHAR for p in row) for row in self._grid
        ]

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        lines: list[str] = []
        for r, row in enumerate(self._grid):
            cells = " ".join(p.symbol if p else _EMPTY_CHAR for p in row)
            lines.append(f"{BOARD_SIZE - r} {cells}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
