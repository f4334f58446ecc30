"""GameController drives the select / move / promote turn cycle.

Coordinates: Position, MoveGenerator, Rules.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from duochess.core.board import Board
from duochess.core.enums import Color, GameResult, PieceType
from duochess.core.errors import (
    InvariantViolation,
    PromotionError,
    PromotionPendingError,
)
from duochess.core.move import Move, MoveRecord, PendingPromotion
from duochess.core.move_generator import MoveGenerator
from duochess.core.piece import Piece
from duochess.core.position import Position
from duochess.core.rules import Rules
from duochess.core.types import Square
from duochess.game.interfaces import GamePhase, IGameController
from duochess.game.settings import GameSettings

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

SelectionCallback = Callable[[Square | None, list[Move]], None]  # square, moves
MoveCallback = Callable[[MoveRecord, Position], None]
PromotionCallback = Callable[[PendingPromotion], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_selection_changed: list[SelectionCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)
    on_promotion_required: list[PromotionCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Owns the game :class:`Position` and walks it through each turn.

    The position is only ever changed through :meth:`apply_move`,
    :meth:`choose_promotion` and :meth:`undo_move`; everything else is a
    read accessor.
    """

    __slots__ = (
        "_position",
        "_settings",
        "_phase",
        "_selected",
        "_legal_moves",
        "_result",
        "events",
    )

    def __init__(self, settings: GameSettings | None = None) -> None:
        self._position = Position.initial()
        self._settings = settings or GameSettings()
        self._phase = GamePhase.IDLE
        self._selected: Square | None = None
        self._legal_moves: list[Move] = []
        self._result = GameResult.IN_PROGRESS
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def board(self) -> Board:
        return self._position.board

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def selected(self) -> Square | None:
        return self._selected

    @property
    def selected_moves(self) -> list[Move]:
        return list(self._legal_moves)

    @property
    def legal_targets(self) -> list[Square]:
        """Destinations of the selected piece, for move highlighting."""
        return [m.to_sq for m in self._legal_moves]

    @property
    def history(self) -> list[MoveRecord]:
        return list(self._position.history)

    @property
    def last_move(self) -> MoveRecord | None:
        return self._position.last_move

    @property
    def pending_promotion(self) -> PendingPromotion | None:
        return self._position.pending_promotion

    @property
    def check_square(self) -> Square | None:
        """King square of the side to move when it stands in check."""
        color = self._position.side_to_move
        if self.is_in_check(color):
            return self.king_square_of(color)
        return None

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    def captured(self, color: Color) -> list[Piece]:
        """Pieces of *color* taken off the board, in capture order."""
        return list(self._position.captured[color])

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(
        self,
        settings: GameSettings | None = None,
        position: Position | None = None,
    ) -> None:
        if settings is not None:
            self._settings = settings
        self._position = position if position is not None else Position.initial()
        self._clear_selection()
        self._result = GameResult.IN_PROGRESS
        _LOGGER.info("New game (%s)", self._settings.mode.name.lower())
        self._set_phase(GamePhase.IDLE)
        self._check_game_over()

    def legal_moves(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq* (empty for any invalid selection)."""
        try:
            return MoveGenerator(self._position).legal_moves(sq)
        except InvariantViolation:
            _LOGGER.error("Corrupt position while generating moves from %s", sq)
            raise

    def select(self, sq: Square) -> list[Move]:
        if self._phase in (GamePhase.AWAITING_PROMOTION, GamePhase.GAME_OVER):
            return []

        piece = self._position.board[sq]
        if piece is None or piece.color != self._position.side_to_move:
            _LOGGER.debug("Invalid selection %s", sq)
            self.deselect()
            return []

        moves = self.legal_moves(sq)
        self._selected = sq
        self._legal_moves = moves
        _LOGGER.debug("Selected %s with %d legal moves", sq, len(moves))
        self._emit_selection()
        self._set_phase(GamePhase.SELECTED)
        return list(moves)

    def deselect(self) -> None:
        self._clear_selection()
        if self._phase == GamePhase.SELECTED:
            self._set_phase(GamePhase.IDLE)

    def click_square(self, sq: Square) -> GamePhase:
        if self._phase in (GamePhase.AWAITING_PROMOTION, GamePhase.GAME_OVER):
            return self._phase

        if self._selected is not None and sq in self.legal_targets:
            self.apply_move(self._selected, sq)
            return self._phase

        piece = self._position.board[sq]
        if piece is not None and piece.color == self._position.side_to_move:
            self.select(sq)
        else:
            self.deselect()
        return self._phase

    def apply_move(
        self,
        from_sq: Square,
        to_sq: Square,
        candidate: Move | None = None,
        promotion: PieceType | None = None,
    ) -> MoveRecord | PendingPromotion | None:
        if self._phase == GamePhase.AWAITING_PROMOTION:
            raise PromotionPendingError("Choose a promotion piece first")
        if self._phase == GamePhase.GAME_OVER:
            return None

        move = self._find_legal_move(from_sq, to_sq, candidate)
        if move is None:
            _LOGGER.debug("Rejected illegal destination %s -> %s", from_sq, to_sq)
            return None

        outcome = self._position.make_move(move, promotion)
        self._clear_selection()

        if isinstance(outcome, PendingPromotion):
            _LOGGER.debug("Awaiting promotion choice on %s", outcome.square)
            self._set_phase(GamePhase.AWAITING_PROMOTION)
            for cb in self.events.on_promotion_required:
                cb(outcome)
            return outcome

        self._after_move(outcome)
        return outcome

    def choose_promotion(self, piece_type: PieceType) -> MoveRecord:
        if self._phase != GamePhase.AWAITING_PROMOTION:
            raise PromotionError("No promotion is pending")
        try:
            record = self._position.complete_promotion(piece_type)
        except PromotionError:
            _LOGGER.warning("Rejected promotion choice %s", piece_type.name.lower())
            raise
        self._after_move(record)
        return record

    def undo_move(self) -> bool:
        if self._phase in (GamePhase.AWAITING_PROMOTION, GamePhase.GAME_OVER):
            return False

        record = self._position.unmake_move()
        if record is None:
            return False

        _LOGGER.info("Undid %s", record)
        self._clear_selection()
        self._set_phase(GamePhase.IDLE)
        return True

    def is_in_check(self, color: Color) -> bool:
        return MoveGenerator(self._position).is_in_check(color)

    def king_square_of(self, color: Color) -> Square:
        return MoveGenerator(self._position).king_square_of(color)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _find_legal_move(
        self, from_sq: Square, to_sq: Square, candidate: Move | None
    ) -> Move | None:
        if self._selected == from_sq and self._legal_moves:
            legal = self._legal_moves
        else:
            legal = self.legal_moves(from_sq)

        if candidate is not None:
            if candidate.to_sq == to_sq and candidate in legal:
                return candidate
            return None
        for move in legal:
            if move.to_sq == to_sq:
                return move
        return None

    def _after_move(self, record: MoveRecord) -> None:
        _LOGGER.info("%s played %s", record.color, record)
        self._set_phase(GamePhase.IDLE)
        for cb in self.events.on_move:
            cb(record, self._position)
        self._check_game_over()

    def _check_game_over(self) -> None:
        result = Rules.game_result(self._position)
        if result == GameResult.IN_PROGRESS:
            return
        self._result = result
        _LOGGER.info("Game over: %s", result.name.lower())
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _clear_selection(self) -> None:
        """Drop the selection, notifying listeners only if one existed."""
        had_selection = self._selected is not None
        self._selected = None
        self._legal_moves = []
        if had_selection:
            self._emit_selection()

    def _emit_selection(self) -> None:
        for cb in self.events.on_selection_changed:
            cb(self._selected, list(self._legal_moves))

    def _set_phase(self, phase: GamePhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)
