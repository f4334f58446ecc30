"""Abstract interfaces for the game layer.

Follows Dependency Inversion: the presentation bridge depends on
:class:`IGameController`, not on the concrete controller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from duochess.core.enums import Color, PieceType

if TYPE_CHECKING:
    from duochess.core.move import Move, MoveRecord, PendingPromotion
    from duochess.core.position import Position
    from duochess.core.types import Square
    from duochess.game.settings import GameSettings


# ── Turn FSM states ──────────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states of a turn.

    IDLE → SELECTED → IDLE (deselect / move done) or AWAITING_PROMOTION;
    AWAITING_PROMOTION → IDLE once a piece type is chosen.
    """

    IDLE = auto()
    SELECTED = auto()
    AWAITING_PROMOTION = auto()
    GAME_OVER = auto()


class GameMode(IntEnum):
    """Who plays black. Only the flag is stored; there is no engine."""

    TWO_PLAYER = auto()
    VERSUS_COMPUTER = auto()


class ViewMode(IntEnum):
    """Layout hint for the presentation layer."""

    DESKTOP = auto()
    MOBILE = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IGameController(ABC):
    """Interface for the turn orchestrator."""

    @abstractmethod
    def new_game(
        self,
        settings: GameSettings | None = None,
        position: Position | None = None,
    ) -> None:
        """Set up a new game, from *position* if given."""

    @abstractmethod
    def select(self, sq: Square) -> list[Move]:
        """Select the piece on *sq*; returns its legal moves (empty = deselected)."""

    @abstractmethod
    def deselect(self) -> None:
        """Drop the current selection without side effects."""

    @abstractmethod
    def click_square(self, sq: Square) -> GamePhase:
        """Handle a click on *sq* and return the resulting phase."""

    @abstractmethod
    def apply_move(
        self,
        from_sq: Square,
        to_sq: Square,
        candidate: Move | None = None,
        promotion: PieceType | None = None,
    ) -> MoveRecord | PendingPromotion | None:
        """Play a move. ``None`` means the destination was not legal."""

    @abstractmethod
    def choose_promotion(self, piece_type: PieceType) -> MoveRecord:
        """Resolve a pending promotion."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo the last move. Returns True on success."""

    @abstractmethod
    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked?"""

    @abstractmethod
    def king_square_of(self, color: Color) -> Square:
        """Square of *color*'s king."""
