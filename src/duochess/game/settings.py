"""User-configurable game settings."""

from __future__ import annotations

from dataclasses import dataclass

from duochess.game.interfaces import GameMode, ViewMode


@dataclass
class GameSettings:
    """All user-configurable settings."""

    # Game
    mode: GameMode = GameMode.TWO_PLAYER

    # Board
    view: ViewMode = ViewMode.DESKTOP
    show_legal_moves: bool = True
    highlight_last_move: bool = True
