"""
Legal move enumeration over a python-chess board.

Moves are always listed in one canonical order (origin square a1..h8, then
destination square, then promotion piece queen first) so that repairs picked
from the list are reproducible.
"""

import chess


def _canonical_key(move: chess.Move) -> tuple[int, int, int]:
    return (move.from_square, move.to_square, -(move.promotion or 0))


def legal_moves_in_order(board: chess.Board) -> list[chess.Move]:
    """Return the legal moves of the position in canonical order."""
    return sorted(board.legal_moves, key=_canonical_key)


def generate_legal_moves(board: chess.Board) -> list[str]:
    """
    Enumerate every legal move from the current position as SAN.
    Works on a throwaway copy; the caller's board is never touched.
    """
    probe = board.copy(stack=False)
    return [probe.san(move) for move in legal_moves_in_order(probe)]


def find_legal_move(board: chess.Board, notation: str) -> chess.Move | None:
    """Resolve a SAN token against the position. Returns None when it is not a legal move."""
    try:
        move = board.parse_san(notation)
    except ValueError:
        # InvalidMoveError, IllegalMoveError and AmbiguousMoveError all derive from ValueError
        return None
    return move if board.is_legal(move) else None


def first_legal_move(board: chess.Board) -> tuple[chess.Move, str] | None:
    """The first legal move in canonical order with its SAN, or None if the side to move has none."""
    probe = board.copy(stack=False)
    candidates = legal_moves_in_order(probe)
    if not candidates:
        return None
    return candidates[0], probe.san(candidates[0])


def apply_move(board: chess.Board, move: chess.Move) -> None:
    board.push(move)


def pass_turn(board: chess.Board) -> None:
    """Hand the move to the other side without changing the position."""
    board.push(chess.Move.null())
