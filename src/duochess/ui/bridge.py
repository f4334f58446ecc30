"""Qt bridge exposing the game controller to a presentation layer."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from duochess.core.enums import GameResult, PieceType
from duochess.core.errors import PromotionError
from duochess.core.move import Move, MoveRecord, PendingPromotion
from duochess.core.position import Position
from duochess.core.types import Square, is_on_board
from duochess.game.controller import GameController
from duochess.game.interfaces import GamePhase
from duochess.game.settings import GameSettings


class GameBridge(QObject):
    """Forwards board clicks to a :class:`GameController` and re-emits its
    events as Qt signals.

    Signals:
        selection_changed(object, object): selected square (or None) and the
            highlighted destination squares.
        move_made(object): the completed :class:`MoveRecord`.
        last_move_changed(object, object): from/to squares to highlight, or
            ``(None, None)`` after undo back to the start.
        promotion_requested(object): the :class:`PendingPromotion`.
        check_changed(object): king square in check, or None.
        phase_changed(int): new :class:`GamePhase`.
        game_over(int): final :class:`GameResult`.
        error(str): a rejected request (e.g. bad promotion piece).
    """

    selection_changed = pyqtSignal(object, object)
    move_made = pyqtSignal(object)
    last_move_changed = pyqtSignal(object, object)
    promotion_requested = pyqtSignal(object)
    check_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(int)
    game_over = pyqtSignal(int)
    error = pyqtSignal(str)

    def __init__(
        self,
        controller: GameController | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller if controller is not None else GameController()
        events = self._controller.events
        events.on_selection_changed.append(self._on_selection_changed)
        events.on_move.append(self._on_move)
        events.on_promotion_required.append(self._on_promotion_required)
        events.on_phase_changed.append(self._on_phase_changed)
        events.on_game_over.append(self._on_game_over)

    @property
    def controller(self) -> GameController:
        return self._controller

    # ── Slots ────────────────────────────────────────────────────────────

    @pyqtSlot()
    def new_game(self, settings: GameSettings | None = None) -> None:
        self._controller.new_game(settings)
        self.last_move_changed.emit(None, None)
        self.check_changed.emit(self._controller.check_square)

    @pyqtSlot(int, int)
    def click_square(self, row: int, col: int) -> None:
        """Handle a click on the board cell at (*row*, *col*)."""
        if not is_on_board(row, col):
            self._controller.deselect()
            return
        self._controller.click_square(Square(row, col))

    @pyqtSlot(int)
    def choose_promotion(self, piece_type: int) -> None:
        try:
            self._controller.choose_promotion(PieceType(piece_type))
        except (PromotionError, ValueError) as exc:
            self.error.emit(str(exc))

    @pyqtSlot()
    def undo(self) -> None:
        if not self._controller.undo_move():
            return
        self._emit_last_move(self._controller.last_move)
        self.check_changed.emit(self._controller.check_square)

    # ── Controller callbacks ─────────────────────────────────────────────

    def _on_selection_changed(self, square: Square | None, moves: list[Move]) -> None:
        targets: list[Square] = []
        if self._controller.settings.show_legal_moves:
            targets = [m.to_sq for m in moves]
        self.selection_changed.emit(square, targets)

    def _on_move(self, record: MoveRecord, _position: Position) -> None:
        self.move_made.emit(record)
        self._emit_last_move(record)
        self.check_changed.emit(self._controller.check_square)

    def _on_promotion_required(self, pending: PendingPromotion) -> None:
        self.promotion_requested.emit(pending)

    def _on_phase_changed(self, phase: GamePhase) -> None:
        self.phase_changed.emit(int(phase))

    def _on_game_over(self, result: GameResult) -> None:
        self.game_over.emit(int(result))

    def _emit_last_move(self, record: MoveRecord | None) -> None:
        if not self._controller.settings.highlight_last_move:
            return
        if record is None:
            self.last_move_changed.emit(None, None)
        else:
            self.last_move_changed.emit(record.from_sq, record.to_sq)
