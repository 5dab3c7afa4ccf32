"""Tests for canonical legal move enumeration."""

import chess

from legal_moves import (
    apply_move,
    find_legal_move,
    first_legal_move,
    generate_legal_moves,
    legal_moves_in_order,
    pass_turn,
)
from notation import strip_decorations


class TestGenerateLegalMoves:
    def test_starting_position_count(self) -> None:
        assert len(generate_legal_moves(chess.Board())) == 20

    def test_canonical_order_from_start(self) -> None:
        moves = generate_legal_moves(chess.Board())
        # b1 knight, g1 knight, then pawns from a2 upward
        assert moves[:6] == ["Na3", "Nc3", "Nf3", "Nh3", "a3", "a4"]

    def test_deterministic(self) -> None:
        board = chess.Board()
        board.push_san("e4")
        assert generate_legal_moves(board) == generate_legal_moves(board)

    def test_board_untouched(self) -> None:
        board = chess.Board()
        board.push_san("e4")
        fen = board.fen()
        generate_legal_moves(board)
        assert board.fen() == fen
        assert len(board.move_stack) == 1

    def test_promotion_queen_first(self) -> None:
        board = chess.Board("8/P7/8/8/8/8/8/k1K5 w - - 0 1")
        promotions = [strip_decorations(m) for m in generate_legal_moves(board) if m.startswith("a8")]
        assert promotions == ["a8=Q", "a8=R", "a8=B", "a8=N"]

    def test_checkmate_has_no_moves(self) -> None:
        board = chess.Board()
        for san in ["f3", "e5", "g4", "Qh4#"]:
            board.push_san(san)
        assert generate_legal_moves(board) == []

    def test_order_matches_sorted_squares(self) -> None:
        ordered = legal_moves_in_order(chess.Board())
        keys = [(m.from_square, m.to_square) for m in ordered]
        assert keys == sorted(keys)


class TestFindLegalMove:
    def test_legal_pawn_push(self) -> None:
        assert find_legal_move(chess.Board(), "e4") == chess.Move.from_uci("e2e4")

    def test_wrong_side_is_none(self) -> None:
        assert find_legal_move(chess.Board(), "e5") is None

    def test_blocked_king_is_none(self) -> None:
        assert find_legal_move(chess.Board(), "Ke2") is None

    def test_garbage_is_none(self) -> None:
        assert find_legal_move(chess.Board(), "zz") is None

    def test_check_marker_ignored(self) -> None:
        board = chess.Board()
        board.push_san("e4")
        board.push_san("e5")
        assert find_legal_move(board, "Qh5+") == chess.Move.from_uci("d1h5")


class TestFirstLegalMove:
    def test_white_start(self) -> None:
        move, san = first_legal_move(chess.Board())
        assert san == "Na3"
        assert move == chess.Move.from_uci("b1a3")

    def test_black_after_e4(self) -> None:
        board = chess.Board()
        board.push_san("e4")
        _, san = first_legal_move(board)
        assert san == "a5"

    def test_none_when_mated(self) -> None:
        board = chess.Board()
        for san in ["f3", "e5", "g4", "Qh4#"]:
            board.push_san(san)
        assert first_legal_move(board) is None


class TestBoardUpdates:
    def test_apply_move(self) -> None:
        board = chess.Board()
        apply_move(board, chess.Move.from_uci("e2e4"))
        assert board.turn == chess.BLACK

    def test_pass_turn_keeps_position(self) -> None:
        board = chess.Board()
        placement = board.board_fen()
        pass_turn(board)
        assert board.turn == chess.BLACK
        assert board.board_fen() == placement
