"""Tests for GameSession."""

import pytest

from gambit.core.enums import CastlingRights, Color, GameEndReason, GameResult, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import (
    A3, A4, A5, A6, A7, B1, C3, D5, D6, D7, D8, E2, E4, E5, E7, F2, F3, F6, G1, G2,
    G4, G7, G8, H2, H3, H4, H5, H6, H8,
    Coordinate,
)
from gambit.engine.search import Difficulty
from gambit.game.interfaces import GamePhase
from gambit.game.player import ComputerPlayer, HumanPlayer
from gambit.game.session import GameSession

_FOOLS_MATE = (Move(F2, F3), Move(E7, E5), Move(G2, G4), Move(D8, H4))


def _make_hh_session() -> GameSession:
    """Helper: human vs human game."""
    session = GameSession(HumanPlayer(Color.WHITE, "W"), HumanPlayer(Color.BLACK, "B"))
    session.start()
    return session


def _play(session: GameSession, *moves: Move) -> None:
    for move in moves:
        assert session.attempt_move(move), f"{move} should be accepted"


def _state(session: GameSession) -> tuple[object, ...]:
    pos = session.position
    return (pos.board.copy(), pos.turn, pos.castling, pos.last_move)


class TestNewGame:
    def test_phase_awaiting(self) -> None:
        session = _make_hh_session()
        assert session.phase == GamePhase.AWAITING_MOVE

    def test_white_to_move(self) -> None:
        session = _make_hh_session()
        assert session.turn == Color.WHITE
        assert session.current_player.color == Color.WHITE
        assert not session.is_check
        assert session.result == GameResult.IN_PROGRESS

    def test_default_players_are_human(self) -> None:
        session = GameSession()
        assert session.player(Color.WHITE).is_human
        assert session.player(Color.BLACK).is_human
        assert session.phase == GamePhase.NOT_STARTED


class TestAttemptMove:
    def test_legal_move_applies(self) -> None:
        session = _make_hh_session()
        assert session.attempt_move(Move(E2, E4))
        assert session.turn == Color.BLACK
        assert session.position.last_move == Move(E2, E4)
        assert session.history[-1].description == "e4"

    def test_illegal_move_leaves_state_untouched(self) -> None:
        session = _make_hh_session()
        before = _state(session)
        assert not session.attempt_move(Move(E2, E5))
        assert _state(session) == before
        assert session.history == ()

    def test_move_event_fires(self) -> None:
        session = _make_hh_session()
        seen: list[tuple[Move, str]] = []
        session.events.on_move.append(lambda m, san, _s: seen.append((m, san)))
        session.attempt_move(Move(G1, F3))
        assert seen == [(Move(G1, F3), "Nf3")]

    def test_snapshot_taken_before_move(self) -> None:
        session = _make_hh_session()
        session.attempt_move(Move(E2, E4))
        snapshot = session.history[0].snapshot
        assert snapshot.turn == Color.WHITE
        assert snapshot.board[E2] == Piece(Color.WHITE, PieceType.PAWN)
        assert snapshot.last_move is None


class TestGameOver:
    def test_fools_mate(self) -> None:
        session = _make_hh_session()
        results: list[tuple[GameResult, GameEndReason]] = []
        session.events.on_game_over.append(lambda r, why: results.append((r, why)))

        _play(session, *_FOOLS_MATE)

        assert session.is_check
        assert session.is_game_over
        assert session.result == GameResult.BLACK_WINS
        assert session.end_reason == GameEndReason.CHECKMATE
        assert session.phase == GamePhase.GAME_OVER
        assert session.history[-1].description == "Qh4#"
        assert results == [(GameResult.BLACK_WINS, GameEndReason.CHECKMATE)]

    def test_moves_refused_after_game_over(self) -> None:
        session = _make_hh_session()
        _play(session, *_FOOLS_MATE)
        assert not session.attempt_move(Move(E2, E4))
        assert session.select_square(E2) == []

    def test_undo_reopens_game(self) -> None:
        session = _make_hh_session()
        _play(session, *_FOOLS_MATE)
        assert session.undo()
        assert not session.is_game_over
        assert session.phase == GamePhase.AWAITING_MOVE

    def test_threefold_repetition(self) -> None:
        session = _make_hh_session()
        shuffle = (Move(G1, F3), Move(G8, F6), Move(F3, G1), Move(F6, G8))
        _play(session, *shuffle, *shuffle)
        assert session.result == GameResult.DRAW
        assert session.end_reason == GameEndReason.THREEFOLD_REPETITION


class TestSelectSquare:
    def test_select_own_piece_highlights_destinations(self) -> None:
        session = _make_hh_session()
        targets = session.select_square(G1)
        assert sorted(targets) == sorted([F3, H3])
        assert session.selected == G1

    def test_click_destination_commits(self) -> None:
        session = _make_hh_session()
        session.select_square(E2)
        assert session.select_square(E4) == []
        assert session.turn == Color.BLACK
        assert session.selected is None

    def test_reselect_other_piece(self) -> None:
        session = _make_hh_session()
        session.select_square(E2)
        targets = session.select_square(B1)
        assert session.selected == B1
        assert C3 in targets

    def test_click_elsewhere_clears(self) -> None:
        session = _make_hh_session()
        session.select_square(E2)
        assert session.select_square(D5) == []
        assert session.selected is None
        assert session.turn == Color.WHITE

    def test_enemy_piece_not_selectable(self) -> None:
        session = _make_hh_session()
        assert session.select_square(E7) == []
        assert session.selected is None


class TestPromotionPrompt:
    def _advance_to_promotion(self, session: GameSession) -> None:
        # h-pawn marches up and takes on g7; black shuffles its a-pawn.
        _play(
            session,
            Move(H2, H4), Move(A7, A6),
            Move(H4, H5), Move(A6, A5),
            Move(H5, H6), Move(A5, A4),
            Move(H6, G7), Move(A4, A3),
        )

    def test_chosen_piece_is_used(self) -> None:
        session = _make_hh_session()
        session.promotion_chooser = lambda _color: PieceType.KNIGHT
        self._advance_to_promotion(session)

        assert H8 in session.select_square(G7)
        session.select_square(H8)

        assert session.position.board[H8] == Piece(Color.WHITE, PieceType.KNIGHT)
        assert session.history[-1].description == "gxh8=N"

    def test_cancel_leaves_state_untouched(self) -> None:
        session = _make_hh_session()
        session.promotion_chooser = lambda _color: None
        self._advance_to_promotion(session)
        before = _state(session)

        session.select_square(G7)
        session.select_square(H8)

        assert _state(session) == before
        assert session.turn == Color.WHITE
        assert session.selected is None


class TestUndoRedo:
    def test_undo_then_redo_restores_state(self) -> None:
        session = _make_hh_session()
        _play(session, Move(E2, E4), Move(E7, E5), Move(G1, F3))
        before = _state(session)

        assert session.undo()
        assert session.turn == Color.WHITE
        assert session.redo()
        assert _state(session) == before
        assert [e.description for e in session.history] == ["e4", "e5", "Nf3"]

    def test_en_passant_undo(self) -> None:
        session = _make_hh_session()
        _play(session, Move(E2, E4), Move(A7, A6), Move(E4, E5), Move(D7, D5))
        assert session.attempt_move(Move(E5, D6))
        assert session.position.board[D5] is None
        assert session.history[-1].description == "exd6"

        assert session.undo()
        board = session.position.board
        assert board[D5] == Piece(Color.BLACK, PieceType.PAWN)
        assert board[E5] == Piece(Color.WHITE, PieceType.PAWN)
        assert board[D6] is None
        assert session.position.last_move == Move(D7, D5)
        # Still capturable after undo since last_move came back too.
        assert session.attempt_move(Move(E5, D6))

    def test_new_move_clears_redo(self) -> None:
        session = _make_hh_session()
        _play(session, Move(E2, E4), Move(E7, E5))
        session.undo()
        assert session.can_redo
        session.attempt_move(Move(D7, D5))
        assert not session.can_redo
        assert not session.redo()

    def test_undo_on_empty_history(self) -> None:
        session = _make_hh_session()
        assert not session.undo()

    def test_castling_rights_survive_undo_redo(self) -> None:
        session = _make_hh_session()
        _play(session, Move(G1, F3), Move(G8, F6), Move(F3, G1))
        rights = session.position.castling
        session.undo()
        session.redo()
        assert session.position.castling == rights == CastlingRights.ALL

    def test_reset(self) -> None:
        session = _make_hh_session()
        _play(session, Move(E2, E4))
        session.reset()
        assert session.history == ()
        assert session.turn == Color.WHITE
        assert not session.can_redo


class TestComputerPlay:
    def test_prompts_computer_after_human_move(self) -> None:
        requested: list[Color] = []
        black = ComputerPlayer(
            Color.BLACK, Difficulty.EASY, on_request_move=lambda p: requested.append(p.turn)
        )
        session = GameSession(HumanPlayer(Color.WHITE), black)
        session.start()
        session.attempt_move(Move(E2, E4))
        assert session.phase == GamePhase.THINKING
        assert requested == [Color.BLACK]

    def test_play_computer_move(self) -> None:
        session = GameSession(HumanPlayer(Color.WHITE), ComputerPlayer(Color.BLACK, Difficulty.HARD))
        session.start()
        session.attempt_move(Move(E2, E4))
        move = session.play_computer_move()
        assert move is not None
        assert session.turn == Color.WHITE
        assert session.phase == GamePhase.AWAITING_MOVE

    def test_play_computer_move_on_human_turn(self) -> None:
        session = _make_hh_session()
        assert session.play_computer_move() is None

    def test_human_clicks_ignored_on_computer_turn(self) -> None:
        session = GameSession(ComputerPlayer(Color.WHITE), HumanPlayer(Color.BLACK))
        assert session.select_square(E7) == []

    def test_undo_returns_to_human_turn(self) -> None:
        session = GameSession(HumanPlayer(Color.WHITE), ComputerPlayer(Color.BLACK, Difficulty.EASY))
        session.start()
        session.attempt_move(Move(E2, E4))
        session.play_computer_move()
        assert len(session.history) == 2

        assert session.undo()
        assert session.history == ()
        assert session.turn == Color.WHITE

        assert session.redo()
        assert len(session.history) == 2
        assert session.turn == Color.WHITE


class TestDisplayHelpers:
    def test_move_list_pairs_moves(self) -> None:
        session = _make_hh_session()
        _play(session, Move(E2, E4), Move(E7, E5), Move(G1, F3))
        assert session.move_list() == [(1, "e4", "e5"), (2, "Nf3", None)]

    def test_suggestion_to_move(self) -> None:
        session = _make_hh_session()
        assert session.suggestion_to_move("Nf3") == Move(G1, F3)
        assert session.suggestion_to_move("Qh5") is None
        assert session.suggestion_to_move("") is None

    @pytest.mark.parametrize("sq", [E2, G1])
    def test_legal_destinations(self, sq: Coordinate) -> None:
        session = _make_hh_session()
        assert session.legal_destinations(sq)
