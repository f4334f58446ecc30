"""Tests for the GameController turn state machine."""

import inspect

import pytest

from duochess.core.board import Board
from duochess.core.enums import Color, GameResult, PieceType
from duochess.core.errors import PromotionError, PromotionPendingError
from duochess.core.move import MoveRecord, PendingPromotion
from duochess.core.piece import Piece
from duochess.core.position import Position
from duochess.core.types import A1, A7, A8, E2, E4, E5, E8, Square, parse_square
from duochess.game.controller import GameController
from duochess.game.interfaces import (
    GameMode,
    GamePhase,
    IGameController,
    ViewMode,
)
from duochess.game.settings import GameSettings

PROMO_ROWS = [
    ".r..k...",
    "P.......",
    "........",
    "........",
    "........",
    "........",
    "........",
    "K.......",
]


def _new_controller(rows: list[str] | None = None) -> GameController:
    ctrl = GameController()
    position = Position(Board.from_rows(rows)) if rows is not None else None
    ctrl.new_game(position=position)
    return ctrl


def _click(ctrl: GameController, *names: str) -> None:
    for name in names:
        ctrl.click_square(parse_square(name))


class TestNewGame:
    def test_phase_idle(self) -> None:
        ctrl = _new_controller()
        assert ctrl.phase == GamePhase.IDLE
        assert ctrl.side_to_move == Color.WHITE
        assert ctrl.result == GameResult.IN_PROGRESS
        assert ctrl.history == []

    def test_settings_stored(self) -> None:
        ctrl = GameController()
        settings = GameSettings(mode=GameMode.VERSUS_COMPUTER, view=ViewMode.MOBILE)
        ctrl.new_game(settings)
        assert ctrl.settings.mode == GameMode.VERSUS_COMPUTER
        assert ctrl.settings.view == ViewMode.MOBILE

    def test_new_game_resets(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "e4")
        ctrl.new_game()
        assert ctrl.history == []
        assert ctrl.side_to_move == Color.WHITE

    def test_stalemate_start_is_game_over(self) -> None:
        ctrl = GameController()
        rows = [".......k", "........", ".....KQ."] + ["........"] * 5
        ctrl.new_game(position=Position(Board.from_rows(rows), Color.BLACK))
        assert ctrl.phase == GamePhase.GAME_OVER
        assert ctrl.result == GameResult.DRAW


class TestSelection:
    def test_select_own_piece(self) -> None:
        ctrl = _new_controller()
        moves = ctrl.select(E2)
        assert len(moves) == 2
        assert ctrl.phase == GamePhase.SELECTED
        assert ctrl.selected == E2
        assert set(ctrl.legal_targets) == {parse_square("e3"), E4}

    def test_select_empty_square(self) -> None:
        ctrl = _new_controller()
        assert ctrl.select(E4) == []
        assert ctrl.phase == GamePhase.IDLE
        assert ctrl.selected is None

    def test_select_opponent_piece(self) -> None:
        ctrl = _new_controller()
        assert ctrl.select(E8) == []
        assert ctrl.phase == GamePhase.IDLE

    def test_deselect_has_no_side_effects(self) -> None:
        ctrl = _new_controller()
        rows = ctrl.board.to_rows()
        ctrl.select(E2)
        ctrl.deselect()
        assert ctrl.phase == GamePhase.IDLE
        assert ctrl.legal_targets == []
        assert ctrl.board.to_rows() == rows
        assert ctrl.side_to_move == Color.WHITE

    def test_click_switches_selection(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "g1")
        assert ctrl.selected == parse_square("g1")
        assert ctrl.phase == GamePhase.SELECTED


class TestMoves:
    def test_click_to_move(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "e4")
        assert ctrl.board[E4] == Piece(Color.WHITE, PieceType.PAWN)
        assert ctrl.board[E2] is None
        assert ctrl.side_to_move == Color.BLACK
        assert ctrl.phase == GamePhase.IDLE
        last = ctrl.last_move
        assert last is not None
        assert (last.from_sq, last.to_sq) == (E2, E4)

    def test_click_invalid_target_deselects(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "e5")
        assert ctrl.phase == GamePhase.IDLE
        assert ctrl.board[E2] is not None

    def test_apply_illegal_destination_keeps_selection(self) -> None:
        ctrl = _new_controller()
        ctrl.select(E2)
        assert ctrl.apply_move(E2, E5) is None
        assert ctrl.phase == GamePhase.SELECTED
        assert ctrl.selected == E2
        assert ctrl.history == []

    def test_apply_with_candidate(self) -> None:
        ctrl = _new_controller()
        (double,) = [m for m in ctrl.legal_moves(E2) if m.to_sq == E4]
        record = ctrl.apply_move(E2, E4, double)
        assert isinstance(record, MoveRecord)
        assert ctrl.position.en_passant == parse_square("e3")

    def test_apply_with_mismatched_candidate(self) -> None:
        ctrl = _new_controller()
        (double,) = [m for m in ctrl.legal_moves(E2) if m.to_sq == E4]
        assert ctrl.apply_move(E2, parse_square("e3"), double) is None

    def test_opponent_cannot_move_out_of_turn(self) -> None:
        ctrl = _new_controller()
        assert ctrl.apply_move(parse_square("e7"), E5) is None
        assert ctrl.side_to_move == Color.WHITE

    def test_captured_lists(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "e4", "d7", "d5", "e4", "d5")
        assert ctrl.captured(Color.BLACK) == [Piece(Color.BLACK, PieceType.PAWN)]
        assert ctrl.captured(Color.WHITE) == []

    def test_undo(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "e2", "e4")
        assert ctrl.undo_move()
        assert ctrl.side_to_move == Color.WHITE
        assert ctrl.history == []
        assert ctrl.board[E2] is not None

    def test_undo_empty(self) -> None:
        assert not _new_controller().undo_move()


class TestPromotion:
    def test_two_phase_promotion(self) -> None:
        ctrl = _new_controller(PROMO_ROWS)
        requested: list[PendingPromotion] = []
        ctrl.events.on_promotion_required.append(requested.append)

        _click(ctrl, "a7", "a8")
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION
        assert len(requested) == 1
        assert requested[0].square == A8
        assert ctrl.pending_promotion == requested[0]
        assert ctrl.side_to_move == Color.WHITE

        record = ctrl.choose_promotion(PieceType.ROOK)
        assert record.promotion == PieceType.ROOK
        assert ctrl.board[A8] == Piece(Color.WHITE, PieceType.ROOK)
        assert ctrl.phase == GamePhase.IDLE
        assert ctrl.side_to_move == Color.BLACK

    def test_clicks_ignored_while_pending(self) -> None:
        ctrl = _new_controller(PROMO_ROWS)
        _click(ctrl, "a7", "a8")
        assert ctrl.click_square(A1) == GamePhase.AWAITING_PROMOTION
        assert ctrl.select(A1) == []
        assert not ctrl.undo_move()
        with pytest.raises(PromotionPendingError):
            ctrl.apply_move(A1, Square(7, 1))

    def test_invalid_choice_keeps_waiting(self) -> None:
        ctrl = _new_controller(PROMO_ROWS)
        _click(ctrl, "a7", "a8")
        with pytest.raises(PromotionError):
            ctrl.choose_promotion(PieceType.KING)
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION

    def test_choose_without_pending(self) -> None:
        with pytest.raises(PromotionError):
            _new_controller().choose_promotion(PieceType.QUEEN)

    def test_promotion_in_one_call(self) -> None:
        ctrl = _new_controller(PROMO_ROWS)
        record = ctrl.apply_move(A7, A8, promotion=PieceType.QUEEN)
        assert isinstance(record, MoveRecord)
        assert ctrl.board[A8] == Piece(Color.WHITE, PieceType.QUEEN)


class TestEvents:
    def test_move_event_fires(self) -> None:
        ctrl = _new_controller()
        played: list[str] = []
        ctrl.events.on_move.append(lambda record, pos: played.append(str(record)))
        _click(ctrl, "e2", "e4")
        assert played == ["e2e4"]

    def test_phase_events(self) -> None:
        ctrl = _new_controller()
        phases: list[GamePhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        _click(ctrl, "e2", "e4")
        assert phases == [GamePhase.SELECTED, GamePhase.IDLE]

    def test_selection_events(self) -> None:
        ctrl = _new_controller()
        seen: list[tuple[Square | None, int]] = []
        ctrl.events.on_selection_changed.append(
            lambda sq, moves: seen.append((sq, len(moves)))
        )
        _click(ctrl, "g1", "a5")
        assert seen == [(parse_square("g1"), 2), (None, 0)]

    def test_new_game_clears_selection(self) -> None:
        ctrl = _new_controller()
        ctrl.select(E2)
        seen: list[tuple[Square | None, int]] = []
        ctrl.events.on_selection_changed.append(
            lambda sq, moves: seen.append((sq, len(moves)))
        )
        ctrl.new_game()
        assert seen == [(None, 0)]
        assert ctrl.selected is None

    def test_unselected_apply_emits_no_selection(self) -> None:
        ctrl = _new_controller()
        seen: list[Square | None] = []
        ctrl.events.on_selection_changed.append(lambda sq, moves: seen.append(sq))
        assert isinstance(ctrl.apply_move(E2, E4), MoveRecord)
        assert ctrl.undo_move()
        ctrl.new_game()
        assert seen == []


class TestInterface:
    def test_new_game_accepts_position(self) -> None:
        params = inspect.signature(IGameController.new_game).parameters
        assert list(params) == ["self", "settings", "position"]
        assert issubclass(GameController, IGameController)


# ── Full-game traces ─────────────────────────────────────────────────────────

SCHOLARS_MATE = [
    ("e2", "e4"),
    ("e7", "e5"),
    ("f1", "c4"),
    ("b8", "c6"),
    ("d1", "h5"),
    ("g8", "f6"),
    ("h5", "f7"),
]


# Board occupancy after each ply
SCHOLARS_MATE_ROWS = [
    [
        "rnbqkbnr",
        "pppppppp",
        "........",
        "........",
        "....P...",
        "........",
        "PPPP.PPP",
        "RNBQKBNR",
    ],
    [
        "rnbqkbnr",
        "pppp.ppp",
        "........",
        "....p...",
        "....P...",
        "........",
        "PPPP.PPP",
        "RNBQKBNR",
    ],
    [
        "rnbqkbnr",
        "pppp.ppp",
        "........",
        "....p...",
        "..B.P...",
        "........",
        "PPPP.PPP",
        "RNBQK.NR",
    ],
    [
        "r.bqkbnr",
        "pppp.ppp",
        "..n.....",
        "....p...",
        "..B.P...",
        "........",
        "PPPP.PPP",
        "RNBQK.NR",
    ],
    [
        "r.bqkbnr",
        "pppp.ppp",
        "..n.....",
        "....p..Q",
        "..B.P...",
        "........",
        "PPPP.PPP",
        "RNB.K.NR",
    ],
    [
        "r.bqkb.r",
        "pppp.ppp",
        "..n..n..",
        "....p..Q",
        "..B.P...",
        "........",
        "PPPP.PPP",
        "RNB.K.NR",
    ],
    [
        "r.bqkb.r",
        "pppp.Qpp",
        "..n..n..",
        "....p...",
        "..B.P...",
        "........",
        "PPPP.PPP",
        "RNB.K.NR",
    ],
]


class TestScholarsMate:
    def test_trace(self) -> None:
        ctrl = _new_controller()
        snapshots: list[list[str]] = []
        checks: list[Square | None] = []
        for from_name, to_name in SCHOLARS_MATE:
            _click(ctrl, from_name, to_name)
            snapshots.append(ctrl.board.to_rows())
            checks.append(ctrl.check_square)

        assert snapshots == SCHOLARS_MATE_ROWS
        assert checks == [None] * 6 + [E8]
        assert ctrl.is_in_check(Color.BLACK)
        assert ctrl.king_square_of(Color.BLACK) == E8
        assert ctrl.captured(Color.BLACK) == [Piece(Color.BLACK, PieceType.PAWN)]
        assert len(ctrl.history) == 7
        assert ctrl.phase == GamePhase.GAME_OVER
        assert ctrl.result == GameResult.WHITE_WINS

    def test_no_moves_after_game_over(self) -> None:
        ctrl = _new_controller()
        results: list[GameResult] = []
        ctrl.events.on_game_over.append(results.append)
        for from_name, to_name in SCHOLARS_MATE:
            _click(ctrl, from_name, to_name)

        assert results == [GameResult.WHITE_WINS]
        assert ctrl.click_square(parse_square("a7")) == GamePhase.GAME_OVER
        assert ctrl.apply_move(parse_square("a7"), parse_square("a6")) is None
        assert not ctrl.undo_move()


class TestFoolsMate:
    def test_black_wins(self) -> None:
        ctrl = _new_controller()
        _click(ctrl, "f2", "f3", "e7", "e5", "g2", "g4", "d8", "h4")
        assert ctrl.check_square == parse_square("e1")
        assert ctrl.result == GameResult.BLACK_WINS
        assert ctrl.phase == GamePhase.GAME_OVER
