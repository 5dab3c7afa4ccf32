"""
Move validation and repair against an evolving board.

Every ply is normalized, checked for shape, then tested for legality on a
python-chess board owned by the current call. Illegal plies are repaired with
the first legal move in canonical order rather than rejected; problems are
recorded on the move itself and never raised.
"""

import logging

import chess

import notation
from legal_moves import apply_move, find_legal_move, first_legal_move, pass_turn
from schema import MovePair, MoveStatus, ValidatedMove, ValidationResult

logger = logging.getLogger(__name__)

NO_MOVES_MESSAGE = "No moves provided"
EMPTY_MOVE_MESSAGE = "Empty or whitespace move"
INVALID_PROMOTION_MESSAGE = "Invalid promotion piece"
NO_LEGAL_MOVES_MESSAGE = "No legal moves available"
CONSECUTIVE_CHECKS_MESSAGE = "Consecutive checks detected"


def _no_moves_result() -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        moves=[
            ValidatedMove(
                move_number=0,
                notation="",
                normalized_notation="",
                status=MoveStatus.ERROR,
                message=NO_MOVES_MESSAGE,
            )
        ],
    )


def _mark_error(move: ValidatedMove, message: str) -> bool:
    move.status = MoveStatus.ERROR
    move.message = message
    logger.debug("Move %s '%s': %s", move.move_number, move.notation, message)
    return False


def _check_ply(board: chess.Board, move: ValidatedMove) -> bool:
    """
    Validate one ply in place and advance the board when the ply (or its
    replacement) is playable. Returns True if the board was advanced.
    """
    normalized = notation.normalize(move.notation)
    move.normalized_notation = normalized
    move.status = MoveStatus.VALID
    move.message = ""

    if not normalized:
        return _mark_error(move, EMPTY_MOVE_MESSAGE)
    if notation.has_invalid_promotion(normalized):
        return _mark_error(move, INVALID_PROMOTION_MESSAGE)
    if not notation.is_valid_syntax(normalized):
        return _mark_error(move, f"Invalid move syntax '{normalized}'")

    legal = find_legal_move(board, normalized)
    if legal is not None:
        apply_move(board, legal)
        return True

    candidate = first_legal_move(board)
    if candidate is None:
        return _mark_error(move, NO_LEGAL_MOVES_MESSAGE)

    substitute, san = candidate
    move.normalized_notation = san
    move.status = MoveStatus.WARNING
    move.message = f"replaced with engine suggestion: {san}"
    logger.warning("Move %s '%s' is illegal here, replaced with %s", move.move_number, normalized, san)
    apply_move(board, substitute)
    return True


def _announces_check(move: ValidatedMove) -> bool:
    return notation.gives_check(notation.normalize(move.notation))


def _flag_consecutive_checks(sequence: list[ValidatedMove]) -> None:
    for previous, current in zip(sequence, sequence[1:]):
        if not (_announces_check(previous) and _announces_check(current)):
            continue
        for move in (previous, current):
            if move.is_error or CONSECUTIVE_CHECKS_MESSAGE in move.message:
                continue
            move.status = MoveStatus.WARNING
            move.add_message(CONSECUTIVE_CHECKS_MESSAGE)


def _all_playable(moves: list[ValidatedMove]) -> bool:
    return not any(move.is_error for move in moves)


# ── Single Sequence ──────────────────────────────────────────────────────────

def validate_moves(tokens: list[str] | None, first_move_number: int = 1) -> ValidationResult:
    """
    Validate a list of move tokens as consecutive plies from the starting position.

    A malformed or unplayable ply leaves the board where it was, so the next
    token is tested for the same side to move.
    """
    if not tokens:
        logger.warning("Validation requested with no moves")
        return _no_moves_result()

    board = chess.Board()
    moves: list[ValidatedMove] = []
    for index, token in enumerate(tokens):
        move = ValidatedMove(
            move_number=first_move_number + index,
            notation=token or "",
            normalized_notation="",
        )
        _check_ply(board, move)
        moves.append(move)

    _flag_consecutive_checks(moves)
    return ValidationResult(is_valid=_all_playable(moves), moves=moves)


# ── Game Context ─────────────────────────────────────────────────────────────

def _skip_ply(board: chess.Board, move: ValidatedMove | None, move_number: int) -> None:
    """
    Hand the turn over for a missing or unplayable ply. A side in check cannot
    pass, so the board answers the check with the first legal move instead;
    a mated side keeps the move and every later ply finds no legal move.
    """
    if not board.is_check():
        pass_turn(board)
        return

    candidate = first_legal_move(board)
    if candidate is None:
        return
    reply, san = candidate
    logger.warning("Move %s: no readable reply to check, board continues with %s", move_number, san)
    if move is not None:
        move.add_message(f"board continued with {san} to answer check")
    apply_move(board, reply)


def _by_move_number(moves: list[ValidatedMove]) -> dict[int, ValidatedMove]:
    indexed: dict[int, ValidatedMove] = {}
    for move in moves:
        if move.move_number > 0:
            indexed.setdefault(move.move_number, move)
    return indexed


def validate_moves_in_game_context(white: ValidationResult, black: ValidationResult) -> None:
    """
    Re-walk both colours together on one shared board (white ply, then black
    ply, per move number) and rewrite every move's status in place.

    A missing or unplayable ply passes the turn so the colours stay aligned,
    unless that side is in check.
    """
    white_moves = _by_move_number(white.moves)
    black_moves = _by_move_number(black.moves)
    numbers = set(white_moves) | set(black_moves)
    if not numbers:
        return

    board = chess.Board()
    sequence: list[ValidatedMove] = []
    for move_number in range(1, max(numbers) + 1):
        for side in (white_moves, black_moves):
            move = side.get(move_number)
            if move is None:
                _skip_ply(board, None, move_number)
                continue
            if not _check_ply(board, move):
                _skip_ply(board, move, move_number)
            sequence.append(move)

    _flag_consecutive_checks(sequence)
    white.is_valid = bool(white.moves) and _all_playable(white.moves)
    black.is_valid = bool(black.moves) and _all_playable(black.moves)


# ── Move Pairs ───────────────────────────────────────────────────────────────

def build_move_pairs(white: ValidationResult, black: ValidationResult) -> list[MovePair]:
    """Zip per-colour results into move pairs keyed by move number."""
    white_moves = _by_move_number(white.moves)
    black_moves = _by_move_number(black.moves)
    return [
        MovePair(
            move_number=number,
            white_move=white_moves.get(number),
            black_move=black_moves.get(number),
        )
        for number in sorted(set(white_moves) | set(black_moves))
    ]


def validate_move_pairs(pairs: list[MovePair]) -> ValidationResult:
    """
    Validate a whole game held as move pairs. The pairs' moves are updated in
    place; the returned result lists every ply in game order.
    """
    ordered = sorted(pairs, key=lambda pair: pair.move_number)
    if not ordered:
        return _no_moves_result()

    for pair in ordered:
        for move in pair.sides():
            move.move_number = pair.move_number

    white = ValidationResult(is_valid=True, moves=[p.white_move for p in ordered if p.white_move])
    black = ValidationResult(is_valid=True, moves=[p.black_move for p in ordered if p.black_move])
    validate_moves_in_game_context(white, black)

    plies = [move for pair in ordered for move in pair.sides()]
    return ValidationResult(is_valid=_all_playable(plies), moves=plies)
