"""Game management layer: the turn state machine and its settings.

Quick start::

    from duochess.core import parse_square
    from duochess.game import GameController

    ctrl = GameController()
    ctrl.new_game()
    ctrl.click_square(parse_square("e2"))
    ctrl.click_square(parse_square("e4"))
"""

from duochess.game.controller import GameController, GameEvents
from duochess.game.interfaces import GameMode, GamePhase, IGameController, ViewMode
from duochess.game.settings import GameSettings

__all__ = [
    # Interfaces
    "GameMode",
    "GamePhase",
    "IGameController",
    "ViewMode",
    # Concrete
    "GameController",
    "GameEvents",
    "GameSettings",
]
