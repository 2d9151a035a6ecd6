"""Tests for Rules: legality, check, checkmate, stalemate, draw detection."""

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, GameEndReason, GameResult, PieceType
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator, is_king_in_check, is_square_attacked
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.snapshot import BoardSnapshot, MoveWithSnapshot
from gambit.core.types import (
    A1, A2, A5, A6, A7, A8, C1, D1, D2, D3, D5, D6, D7, D8, E1, E2, E4, E5, E6,
    E7, E8, F1, F2, F3, F6, G1, G2, G4, G8, H1, H2, H3, H4, all_squares,
)


def _pos(
    placement: str,
    turn: Color = Color.WHITE,
    castling: CastlingRights = CastlingRights.NONE,
) -> Position:
    return Position(Board.from_placement(placement), turn, castling)


def _play(pos: Position, *moves: Move) -> Position:
    for move in moves:
        assert Rules.is_legal_move(pos, move), f"{move} should be legal"
        pos = pos.apply_move(move)
    return pos


def _history(pos: Position, *moves: Move) -> tuple[Position, list[MoveWithSnapshot]]:
    history: list[MoveWithSnapshot] = []
    for move in moves:
        snapshot = BoardSnapshot.capture(pos, Rules.is_in_check(pos))
        history.append(MoveWithSnapshot(move, str(move), snapshot))
        pos = pos.apply_move(move)
    return pos, history


class TestInitialMoves:
    def test_exactly_twenty_legal_moves(self) -> None:
        pos = Position.initial()
        accepted = {
            Move(a, b)
            for a in all_squares()
            for b in all_squares()
            if Rules.is_legal_move(pos, Move(a, b))
        }
        assert len(accepted) == 20
        assert set(MoveGenerator(pos).generate_legal_moves()) == accepted

    def test_black_cannot_move_first(self) -> None:
        assert not Rules.is_legal_move(Position.initial(), Move(E7, E5))

    def test_null_move_rejected(self) -> None:
        assert not Rules.is_legal_move(Position.initial(), Move(E2, E2))

    def test_out_of_bounds_rejected(self) -> None:
        from gambit.core.types import Coordinate

        assert not Rules.is_legal_move(Position.initial(), Move(E2, Coordinate(8, 4)))

    def test_own_piece_capture_rejected(self) -> None:
        assert not Rules.is_legal_move(Position.initial(), Move(D1, D2))


class TestSelfCheckFilter:
    def test_pinned_bishop_cannot_leave_file(self) -> None:
        pos = _pos("4r2k/8/8/8/8/8/4B3/4K3")
        assert not Rules.is_legal_move(pos, Move(E2, D3))

    def test_king_cannot_step_into_attack(self) -> None:
        pos = _pos("3r3k/8/8/8/8/8/8/4K3")
        assert not Rules.is_legal_move(pos, Move(E1, D1))
        assert Rules.is_legal_move(pos, Move(E1, F1))

    def test_no_legal_move_leaves_own_king_in_check(self) -> None:
        positions = [
            Position.initial(),
            _pos("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R",
                 castling=CastlingRights.ALL),
            _pos("4r2k/8/8/8/8/8/4B3/4K3"),
        ]
        for pos in positions:
            for move in MoveGenerator(pos).generate_legal_moves():
                after = pos.apply_move(move)
                assert not is_king_in_check(after.board, pos.turn)


class TestAttacks:
    def test_pawn_attacks_diagonals_only(self) -> None:
        board = Board.from_placement("4k3/8/8/8/4P3/8/8/4K3")
        assert is_square_attacked(board, D5, Color.WHITE)
        assert not is_square_attacked(board, E5, Color.WHITE)

    def test_black_pawn_attacks_downwards(self) -> None:
        board = Board.from_placement("4k3/8/8/3p4/8/8/8/4K3")
        assert is_square_attacked(board, E4, Color.BLACK)
        assert not is_square_attacked(board, E6, Color.BLACK)

    def test_slider_blocked(self) -> None:
        board = Board.from_placement("4k3/8/8/8/8/8/4P3/4R1K1")
        assert not is_square_attacked(board, E4, Color.WHITE)


class TestEnPassant:
    def test_capture_right_after_double_push(self) -> None:
        pos = _play(
            Position.initial(),
            Move(E2, E4), Move(A7, A6), Move(E4, E5), Move(D7, D5),
        )
        assert Rules.is_legal_move(pos, Move(E5, D6))
        after = pos.apply_move(Move(E5, D6))
        assert after.board[D5] is None
        assert after.board[D6] == Piece(Color.WHITE, PieceType.PAWN)

    def test_expires_after_one_ply(self) -> None:
        pos = _play(
            Position.initial(),
            Move(E2, E4), Move(A7, A6), Move(E4, E5), Move(D7, D5),
            Move(H2, H3), Move(A6, A5),
        )
        assert not Rules.is_legal_move(pos, Move(E5, D6))

    def test_single_steps_do_not_qualify(self) -> None:
        pos = _play(
            Position.initial(),
            Move(E2, E4), Move(D7, D6), Move(E4, E5), Move(D6, D5),
        )
        assert not Rules.is_legal_move(pos, Move(E5, D6))


class TestCastling:
    def test_both_sides_legal(self) -> None:
        pos = _pos("r3k2r/8/8/8/8/8/8/R3K2R", castling=CastlingRights.ALL)
        assert Rules.is_legal_move(pos, Move(E1, G1))
        assert Rules.is_legal_move(pos, Move(E1, C1))

    def test_rook_slides_next_to_king(self) -> None:
        pos = _pos("r3k2r/8/8/8/8/8/8/R3K2R", castling=CastlingRights.ALL)
        after = pos.apply_move(Move(E1, G1))
        assert after.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert after.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert after.board[H1] is None
        assert not after.castling & CastlingRights.WHITE_BOTH

    def test_blocked(self) -> None:
        pos = _pos("r3k2r/8/8/8/8/8/8/R3KB1R", castling=CastlingRights.ALL)
        assert not Rules.is_legal_move(pos, Move(E1, G1))

    def test_through_attacked_square(self) -> None:
        pos = _pos("4kr2/8/8/8/8/8/8/R3K2R", castling=CastlingRights.WHITE_BOTH)
        assert not Rules.is_legal_move(pos, Move(E1, G1))
        assert Rules.is_legal_move(pos, Move(E1, C1))

    def test_out_of_check(self) -> None:
        pos = _pos("4r2k/8/8/8/8/8/8/R3K2R", castling=CastlingRights.WHITE_BOTH)
        assert not Rules.is_legal_move(pos, Move(E1, G1))
        assert not Rules.is_legal_move(pos, Move(E1, C1))

    def test_right_lost_after_rook_returns(self) -> None:
        pos = _play(
            _pos("r3k2r/p7/8/8/8/8/8/R3K2R", castling=CastlingRights.ALL),
            Move(H1, G1), Move(A7, A6), Move(G1, H1), Move(A6, A5),
        )
        assert not pos.castling & CastlingRights.WHITE_KINGSIDE
        assert not Rules.is_legal_move(pos, Move(E1, G1))
        assert Rules.is_legal_move(pos, Move(E1, C1))

    def test_right_lost_after_king_returns(self) -> None:
        pos = _play(
            _pos("r3k2r/p7/8/8/8/8/8/R3K2R", castling=CastlingRights.ALL),
            Move(E1, F1), Move(A7, A6), Move(F1, E1), Move(A6, A5),
        )
        assert not pos.castling & CastlingRights.WHITE_BOTH

    def test_captured_rook_revokes_right(self) -> None:
        pos = _pos("r3k2r/8/8/8/8/8/8/R3K2R", castling=CastlingRights.ALL)
        after = pos.apply_move(Move(A1, A8))
        assert not after.castling & CastlingRights.BLACK_QUEENSIDE
        assert not after.castling & CastlingRights.WHITE_QUEENSIDE
        assert after.castling & CastlingRights.BLACK_KINGSIDE

    def test_missing_rook_blocks_castling(self) -> None:
        pos = _pos("4k3/8/8/8/8/8/8/4K3", castling=CastlingRights.WHITE_BOTH)
        assert not Rules.is_legal_move(pos, Move(E1, G1))


class TestPromotion:
    def test_requires_promotion_piece(self) -> None:
        pos = _pos("8/4P3/8/8/8/8/8/k3K3")
        assert not Rules.is_legal_move(pos, Move(E7, E8))
        assert Rules.is_legal_move(pos, Move(E7, E8, PieceType.QUEEN))
        assert Rules.is_legal_move(pos, Move(E7, E8, PieceType.KNIGHT))

    def test_rejects_king_or_pawn(self) -> None:
        pos = _pos("8/4P3/8/8/8/8/8/k3K3")
        assert not Rules.is_legal_move(pos, Move(E7, E8, PieceType.KING))
        assert not Rules.is_legal_move(pos, Move(E7, E8, PieceType.PAWN))

    def test_promotion_only_on_last_rank(self) -> None:
        pos = _pos("8/4P3/8/8/8/8/8/k3K3")
        assert not Rules.is_legal_move(pos, Move(E1, E2, PieceType.QUEEN))

    def test_applies_chosen_piece(self) -> None:
        pos = _pos("8/4P3/8/8/8/8/8/k3K3")
        after = pos.apply_move(Move(E7, E8, PieceType.ROOK))
        assert after.board[E8] == Piece(Color.WHITE, PieceType.ROOK)
        assert after.board[E7] is None

    def test_generator_offers_four_choices(self) -> None:
        pos = _pos("8/4P3/8/8/8/8/8/k3K3")
        promos = [m for m in MoveGenerator(pos).generate_legal_moves() if m.from_sq == E7]
        assert {m.promotion for m in promos} == {
            PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT,
        }


class TestCheckmate:
    def test_fools_mate(self) -> None:
        pos = _play(
            Position.initial(),
            Move(F2, F3), Move(E7, E5), Move(G2, G4), Move(D8, H4),
        )
        assert Rules.is_in_check(pos)
        assert Rules.is_checkmate(pos)
        assert MoveGenerator(pos).generate_legal_moves() == []
        assert Rules.game_status(pos) == (GameResult.BLACK_WINS, GameEndReason.CHECKMATE)

    def test_back_rank_mate(self) -> None:
        pos = _pos("R5k1/5ppp/8/8/8/8/8/6K1", turn=Color.BLACK)
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.WHITE_WINS

    def test_not_checkmate_when_king_can_escape(self) -> None:
        pos = _pos("4k3/8/8/8/8/8/8/r3K3")
        assert Rules.is_in_check(pos)
        assert not Rules.is_checkmate(pos)


class TestStalemate:
    def test_king_trapped(self) -> None:
        pos = _pos("7k/8/5KQ1/8/8/8/8/8", turn=Color.BLACK)
        assert Rules.is_stalemate(pos)
        assert Rules.game_status(pos) == (GameResult.DRAW, GameEndReason.STALEMATE)

    def test_not_stalemate_when_has_moves(self) -> None:
        pos = _pos("7k/8/5K2/8/8/8/8/8", turn=Color.BLACK)
        assert not Rules.is_stalemate(pos)


class TestInsufficientMaterial:
    def test_k_vs_k(self) -> None:
        assert Rules.is_insufficient_material(Board.from_placement("8/8/4k3/8/8/4K3/8/8"))

    def test_k_bishop_vs_k(self) -> None:
        board = Board.from_placement("8/8/4k3/8/8/4K3/3B4/8")
        assert Rules.is_insufficient_material(board)
        pos = Position(board)
        assert Rules.game_status(pos) == (
            GameResult.DRAW,
            GameEndReason.INSUFFICIENT_MATERIAL,
        )

    def test_k_knight_vs_k(self) -> None:
        assert Rules.is_insufficient_material(Board.from_placement("8/8/4k3/8/8/4K3/3n4/8"))

    def test_k_bishop_vs_k_knight_is_sufficient(self) -> None:
        board = Board.from_placement("8/8/4k3/5n2/8/4K3/3B4/8")
        assert not Rules.is_insufficient_material(board)

    def test_k_rook_vs_k_sufficient(self) -> None:
        assert not Rules.is_insufficient_material(Board.from_placement("8/8/4k3/8/8/4K3/3R4/8"))


class TestRepetition:
    _SHUFFLE = (Move(G1, F3), Move(G8, F6), Move(F3, G1), Move(F6, G8))

    def test_threefold_by_knight_shuffle(self) -> None:
        pos, history = _history(Position.initial(), *self._SHUFFLE, *self._SHUFFLE)
        assert Rules.repetition_count(pos, history) == 3
        assert Rules.is_threefold_repetition(pos, history)
        assert Rules.game_status(pos, history) == (
            GameResult.DRAW,
            GameEndReason.THREEFOLD_REPETITION,
        )

    def test_twofold_is_not_a_draw(self) -> None:
        pos, history = _history(Position.initial(), *self._SHUFFLE)
        assert Rules.repetition_count(pos, history) == 2
        assert not Rules.is_threefold_repetition(pos, history)


class TestFiftyMoveRule:
    def test_clock_counts_quiet_moves(self) -> None:
        _, history = _history(Position.initial(), Move(G1, F3), Move(G8, F6))
        assert Rules.halfmove_clock(history) == 2

    def test_pawn_move_resets_clock(self) -> None:
        _, history = _history(
            Position.initial(), Move(G1, F3), Move(G8, F6), Move(E2, E4)
        )
        assert Rules.halfmove_clock(history) == 0

    def test_capture_resets_clock(self) -> None:
        start = _pos("4k3/8/8/8/8/8/r7/R3K3")
        _, history = _history(start, Move(A1, A2))
        assert Rules.halfmove_clock(history) == 0
        _, history = _history(start, Move(A1, A2), Move(E8, D8), Move(A2, A5))
        assert Rules.halfmove_clock(history) == 2

    def test_triggers_at_one_hundred_halfmoves(self) -> None:
        snapshot = BoardSnapshot.capture(Position.initial(), False)
        entry = MoveWithSnapshot(Move(G1, F3), "Nf3", snapshot)
        assert not Rules.is_fifty_move_rule([entry] * 99)
        assert Rules.is_fifty_move_rule([entry] * 100)
