"""High-level chess rules: checkmate, stalemate, dead positions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from duochess.core.enums import Color, GameResult, PieceType
from duochess.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from duochess.core.position import Position

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.all_legal_moves()) == 0

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.all_legal_moves()) == 0

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        others = [
            (sq, piece)
            for sq, piece in position.board.occupied()
            if piece.piece_type != PieceType.KING
        ]

        # K vs K
        if not others:
            return True

        # K+minor vs K
        if len(others) == 1:
            return others[0][1].piece_type in _MINOR_PIECES

        # K+B vs K+B with same-colour bishops
        if len(others) == 2:
            (sq_a, a), (sq_b, b) = others
            if (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
            ):
                return (sq_a.row + sq_a.col) % 2 == (sq_b.row + sq_b.col) % 2

        return False

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        gen = MoveGenerator(position)
        legal_moves = gen.all_legal_moves()

        if not legal_moves:
            if gen.is_in_check(position.side_to_move):
                return (
                    GameResult.BLACK_WINS
                    if position.side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW  # stalemate

        if Rules.is_insufficient_material(position):
            return GameResult.DRAW

        return GameResult.IN_PROGRESS
