"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from duochess.core import MoveGenerator, Position, parse_square

    pos = Position.initial()
    gen = MoveGenerator(pos)
    for move in gen.legal_moves(parse_square("g1")):
        print(move)
"""

from duochess.core.board import Board
from duochess.core.enums import CastleSide, CastlingRights, Color, GameResult, PieceType
from duochess.core.errors import (
    ChessError,
    IllegalMoveError,
    InvariantViolation,
    PromotionError,
    PromotionPendingError,
)
from duochess.core.move import PROMOTION_CHOICES, Move, MoveRecord, PendingPromotion
from duochess.core.move_generator import MoveGenerator
from duochess.core.piece import Piece, side_of, type_of
from duochess.core.position import Position
from duochess.core.rules import Rules
from duochess.core.types import (
    Square,
    is_on_board,
    parse_square,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastleSide",
    "CastlingRights",
    "Color",
    "GameResult",
    "PieceType",
    # Errors
    "ChessError",
    "IllegalMoveError",
    "InvariantViolation",
    "PromotionError",
    "PromotionPendingError",
    # Types / helpers
    "Square",
    "is_on_board",
    "parse_square",
    "side_of",
    "square_name",
    "type_of",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "PROMOTION_CHOICES",
    "PendingPromotion",
    "Piece",
    "Position",
    "Rules",
]
