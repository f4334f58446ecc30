"""Pseudo-legal move generation, legality filtering and attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from duochess.core.enums import CastleSide, CastlingRights, Color, PieceType
from duochess.core.move import PROMOTION_CHOICES, Move
from duochess.core.types import Square, is_on_board

if TYPE_CHECKING:
    from duochess.core.piece import Piece
    from duochess.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_SLIDER_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}

# Color -> (forward row step, start row, last row)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (-1, 6, 0),
    Color.BLACK: (1, 1, 7),
}

# Back-rank row of each color's king and rooks
_HOME_ROW: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}
_KING_HOME_COL = 4

# CastleSide -> (rook column, columns that must be empty, king path incl. target)
_CASTLE_GEOMETRY: dict[CastleSide, tuple[int, tuple[int, ...], tuple[int, ...]]] = {
    CastleSide.KINGSIDE: (7, (5, 6), (5, 6)),
    CastleSide.QUEENSIDE: (0, (1, 2, 3), (3, 2)),
}


class MoveGenerator:
    """Generates moves and answers attack queries for a :class:`Position`.

    Never mutates the position it was given; legality is tested on a
    disposable :meth:`Position.copy`.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square) -> list[Move]:
        """Strictly legal moves for the piece on *sq*.

        Empty when *sq* is empty, holds a piece of the side not to move, or a
        promotion is still awaiting its piece choice.
        """
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        if self._pos.pending_promotion is not None:
            return []

        moving_color = piece.color
        legal: list[Move] = []
        for move in self.moves_from(sq):
            trial = self._pos.copy()
            # The promotion piece cannot change whether our own king is safe
            trial.make_move(move, PROMOTION_CHOICES[0] if move.promotion else None)
            if not MoveGenerator(trial).is_in_check(moving_color):
                legal.append(move)
        return legal

    def all_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        moves: list[Move] = []
        for sq in self._board.pieces(self._pos.side_to_move):
            moves.extend(self.legal_moves(sq))
        return moves

    def moves_from(self, sq: Square, *, attacks_only: bool = False) -> list[Move]:
        """Pseudo-legal moves for the piece on *sq* (may leave own king in check).

        With *attacks_only* the result is the set of squares the piece
        attacks: kings skip castling, pawns give both forward diagonals
        whether occupied or not and no pushes or en passant. Attack detection
        uses this mode so it never recurses into castling checks.
        """
        piece = self._board[sq]
        if piece is None:
            return []

        moves: list[Move] = []
        pt = piece.piece_type
        if pt == PieceType.PAWN:
            if attacks_only:
                self._gen_pawn_attacks(sq, piece, moves)
            else:
                self._gen_pawn(sq, piece, moves)
        elif pt == PieceType.KNIGHT:
            self._gen_steps(sq, piece, KNIGHT_OFFSETS, moves)
        elif pt == PieceType.KING:
            self._gen_steps(sq, piece, KING_OFFSETS, moves)
            if not attacks_only:
                self._gen_castling(sq, piece, moves)
        else:
            self._gen_sliding(sq, piece, _SLIDER_DIRS[pt], moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def king_square_of(self, color: Color) -> Square:
        """Square of *color*'s king; raises ``InvariantViolation`` if absent."""
        return self._board.king_square(color)

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self.king_square_of(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        for from_sq in self._board.pieces(by_color):
            for move in self.moves_from(from_sq, attacks_only=True):
                if move.to_sq == sq:
                    return True
        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        step, start_row, last_row = _PAWN_GEOMETRY[piece.color]
        row, col = sq
        fwd = row + step
        if not is_on_board(fwd, col):
            return

        one_step = Square(fwd, col)
        if board.is_empty(one_step):
            moves.append(Move(sq, one_step, promotion=fwd == last_row))
            if row == start_row:
                two_step = Square(row + 2 * step, col)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, en_passant_created=one_step))

        for dc in (-1, 1):
            if not is_on_board(fwd, col + dc):
                continue
            cap_sq = Square(fwd, col + dc)
            target = board[cap_sq]
            if target is not None:
                if target.color != piece.color:
                    moves.append(
                        Move(sq, cap_sq, capture=True, promotion=fwd == last_row)
                    )
            elif cap_sq == self._pos.en_passant:
                # The double-stepped pawn stands beside us on the target file
                victim = board[Square(row, col + dc)]
                if (
                    victim is not None
                    and victim.color != piece.color
                    and victim.piece_type == PieceType.PAWN
                ):
                    moves.append(
                        Move(sq, cap_sq, capture=True, en_passant_capture=True)
                    )

    def _gen_pawn_attacks(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        step = _PAWN_GEOMETRY[piece.color][0]
        fwd = sq.row + step
        for dc in (-1, 1):
            if is_on_board(fwd, sq.col + dc):
                target_sq = Square(fwd, sq.col + dc)
                target = self._board[target_sq]
                if target is None or target.color != piece.color:
                    moves.append(Move(sq, target_sq, capture=target is not None))

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        offsets: tuple[tuple[int, int], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for dr, dc in offsets:
            r, c = sq.row + dr, sq.col + dc
            if not is_on_board(r, c):
                continue
            to_sq = Square(r, c)
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != piece.color:
                moves.append(Move(sq, to_sq, capture=True))

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        directions: tuple[tuple[int, int], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for dr, dc in directions:
            r, c = sq.row + dr, sq.col + dc
            while is_on_board(r, c):
                to_sq = Square(r, c)
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                else:
                    if target.color != piece.color:
                        moves.append(Move(sq, to_sq, capture=True))
                    break
                r += dr
                c += dc

    def _gen_castling(self, king_sq: Square, piece: Piece, moves: list[Move]) -> None:
        color = piece.color
        home_row = _HOME_ROW[color]
        if king_sq != Square(home_row, _KING_HOME_COL):
            return
        if not self._pos.castling & CastlingRights.for_color(color):
            return
        if self.is_in_check(color):
            return

        board = self._board
        opponent = color.opposite
        for side, (rook_col, between, king_path) in _CASTLE_GEOMETRY.items():
            if not self._pos.castling & CastlingRights.for_side(color, side):
                continue
            rook = board[Square(home_row, rook_col)]
            if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
                continue
            if any(not board.is_empty(Square(home_row, c)) for c in between):
                continue
            # Castling through an attacked square is illegal even if the
            # king's final square is safe
            if any(
                self.is_square_attacked(Square(home_row, c), opponent)
                for c in king_path
            ):
                continue
            moves.append(Move(king_sq, Square(home_row, king_path[-1]), castling=side))
