"""Position: complete game state (board + metadata) and the move executor."""

from __future__ import annotations

from dataclasses import dataclass

from duochess.core.board import Board
from duochess.core.enums import CastleSide, CastlingRights, Color, PieceType
from duochess.core.errors import (
    IllegalMoveError,
    InvariantViolation,
    PromotionError,
    PromotionPendingError,
)
from duochess.core.move import PROMOTION_CHOICES, Move, MoveRecord, PendingPromotion
from duochess.core.piece import Piece
from duochess.core.types import Square

# CastleSide -> (rook home column, rook column after castling)
_ROOK_SLIDES: dict[CastleSide, tuple[int, int]] = {
    CastleSide.KINGSIDE: (7, 5),
    CastleSide.QUEENSIDE: (0, 3),
}


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    castling: CastlingRights
    en_passant: Square | None
    captured_piece: Piece | None
    capture_sq: Square | None


@dataclass(slots=True)
class _Suspended:
    """A move halted before steps that depend on the promotion choice."""

    pending: PendingPromotion
    piece: Piece
    state: _PositionState


class Position:
    """Full game state: board + side to move + castling + en passant,
    plus the captured-piece lists and the move history.

    This is the single mutable root of a game. :meth:`make_move`,
    :meth:`complete_promotion` and :meth:`unmake_move` are the only methods
    that change it after setup.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "history",
        "captured",
        "_suspended",
        "_undo_stack",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.history: list[MoveRecord] = []
        self.captured: dict[Color, list[Piece]] = {Color.WHITE: [], Color.BLACK: []}
        self._suspended: _Suspended | None = None
        self._undo_stack: list[_PositionState] = []

    @classmethod
    def initial(cls) -> Position:
        """A fresh game: standard board, white to move, all rights."""
        return cls()

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(
        self, move: Move, promotion: PieceType | None = None
    ) -> MoveRecord | PendingPromotion:
        """Apply *move*.

        A promoting move without a *promotion* choice stops half-way: the
        pawn stands on the last rank, the side to move is unchanged and a
        :class:`PendingPromotion` is returned. Call
        :meth:`complete_promotion` to finish it.
        """
        if self._suspended is not None:
            raise PromotionPendingError(
                f"Promotion on {self._suspended.pending.square} is still pending"
            )

        piece = self.board[move.from_sq]
        if piece is None:
            raise IllegalMoveError(f"No piece on {move.from_sq}")
        if promotion is not None:
            if not move.promotion:
                raise PromotionError(f"{move} is not a promoting move")
            _check_promotion_choice(promotion)

        # En passant: the captured pawn sits beside the origin, not on to_sq
        capture_sq = move.to_sq
        if move.en_passant_capture:
            capture_sq = Square(move.from_sq.row, move.to_sq.col)
        captured = self.board[capture_sq]
        if captured is not None and captured.color == piece.color:
            raise IllegalMoveError(f"{move} would capture a friendly piece")

        if move.en_passant_capture:
            self.board[capture_sq] = None

        if move.castling is not None:
            self._slide_rook(move.from_sq.row, move.castling)

        if captured is not None:
            self.captured[captured.color].append(captured)

        self.board[move.to_sq] = piece
        self.board[move.from_sq] = None

        state = _PositionState(
            castling=self.castling,
            en_passant=self.en_passant,
            captured_piece=captured,
            capture_sq=capture_sq if captured is not None else None,
        )

        if move.promotion and promotion is None:
            pending = PendingPromotion(move, piece.color)
            self._suspended = _Suspended(pending, piece, state)
            return pending

        return self._finish_move(move, piece, state, promotion)

    def complete_promotion(self, piece_type: PieceType) -> MoveRecord:
        """Finish a suspended promotion with the chosen *piece_type*."""
        suspended = self._suspended
        if suspended is None:
            raise PromotionError("No promotion is pending")
        _check_promotion_choice(piece_type)
        self._suspended = None
        return self._finish_move(
            suspended.pending.move, suspended.piece, suspended.state, piece_type
        )

    def unmake_move(self) -> MoveRecord | None:
        """Undo the last completed move. Returns its record, or ``None``."""
        if self._suspended is not None:
            raise PromotionPendingError("Cannot undo while a promotion is pending")
        if not self.history:
            return None

        record = self.history.pop()
        state = self._undo_stack.pop()
        move = record.move

        self.side_to_move = self.side_to_move.opposite

        # Put the piece back (as a pawn if it promoted)
        self.board[move.from_sq] = record.piece
        self.board[move.to_sq] = None
        if state.captured_piece is not None and state.capture_sq is not None:
            self.board[state.capture_sq] = state.captured_piece
            self.captured[state.captured_piece.color].pop()

        if move.castling is not None:
            self._slide_rook(move.from_sq.row, move.castling, undo=True)

        self.castling = state.castling
        self.en_passant = state.en_passant
        return record

    def _finish_move(
        self,
        move: Move,
        piece: Piece,
        state: _PositionState,
        promotion: PieceType | None,
    ) -> MoveRecord:
        if promotion is not None:
            self.board[move.to_sq] = piece.promoted(promotion)

        self._update_castling(move, piece)

        # Valid for exactly one reply
        self.en_passant = move.en_passant_created

        record = MoveRecord(
            move=move,
            piece=piece,
            captured=state.captured_piece,
            promotion=promotion,
        )
        self.history.append(record)
        self._undo_stack.append(state)
        self.side_to_move = self.side_to_move.opposite
        return record

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_CORNERS: dict[Square, CastlingRights] = {
        Square(7, 0): CastlingRights.WHITE_QUEENSIDE,
        Square(7, 7): CastlingRights.WHITE_KINGSIDE,
        Square(0, 0): CastlingRights.BLACK_QUEENSIDE,
        Square(0, 7): CastlingRights.BLACK_KINGSIDE,
    }

    def _update_castling(self, move: Move, piece: Piece) -> None:
        if piece.piece_type == PieceType.KING:
            self.castling &= ~CastlingRights.for_color(piece.color)

        # A rook leaving its corner, or anything captured on a corner
        for sq in (move.from_sq, move.to_sq):
            if sq in self._ROOK_CORNERS:
                self.castling &= ~self._ROOK_CORNERS[sq]

    def _slide_rook(self, row: int, side: CastleSide, *, undo: bool = False) -> None:
        home_col, castled_col = _ROOK_SLIDES[side]
        src, dst = Square(row, home_col), Square(row, castled_col)
        if undo:
            src, dst = dst, src
        rook = self.board[src]
        if rook is None or rook.piece_type != PieceType.ROOK:
            raise InvariantViolation(f"Castling rook missing on {src}")
        self.board[dst] = rook
        self.board[src] = None

    # ── Utilities ────────────────────────────────────────────────────────

    @property
    def pending_promotion(self) -> PendingPromotion | None:
        """The promotion awaiting a piece choice, if any."""
        return self._suspended.pending if self._suspended is not None else None

    @property
    def last_move(self) -> MoveRecord | None:
        return self.history[-1] if self.history else None

    def copy(self) -> Position:
        """Fully independent copy: board, rights, en passant, captures,
        history and any suspended promotion.
        """
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
        )
        pos.history = self.history.copy()
        pos.captured = {color: pieces.copy() for color, pieces in self.captured.items()}
        pos._undo_stack = self._undo_stack.copy()
        pos._suspended = self._suspended
        return pos


def _check_promotion_choice(piece_type: PieceType) -> None:
    if piece_type not in PROMOTION_CHOICES:
        raise PromotionError(f"Cannot promote to {piece_type.name.lower()}")
