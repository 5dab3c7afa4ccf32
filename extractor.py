"""
Turns OCR output or PGN text into ordered, move-number-keyed move pairs.

Accepted shapes:
    "12. Nf3 Nc6"   numbered pair
    "12... Nc6"     black-only continuation
    ["e4", "e5"]    bare OCR tokens without numbers, paired from move 1
"""

import logging
import re
from collections.abc import Sequence

import notation
from errors import PgnStructureError
from schema import ChessMove, MovePair, ValidatedMove

logger = logging.getLogger(__name__)

_HEADER_LINE_RE = re.compile(r'^\s*(?:\[\s*\w+\s+"(?:[^"\\]|\\.)*"\s*\]\s*)+$')
_EMBEDDED_HEADER_RE = re.compile(r'\[\s*\w+\s+"(?:[^"\\]|\\.)*"\s*\]')
_COMMENT_RE = re.compile(r"\{[^}]*\}")
_LINE_COMMENT_RE = re.compile(r";[^\n]*")
_VARIATION_RE = re.compile(r"\([^()]*\)")
_RESULT_RE = re.compile(r"(?<!\S)(?:1-0|0-1|1/2-1/2|\*)(?!\S)")
_NAG_RE = re.compile(r"(?<!\S)\$\d+(?!\S)")
_MOVE_NUMBER_RE = re.compile(r"(?<![\w.])(\d+)\s*(\.{3}|…|\.)")
_NUMBER_TOKEN_RE = re.compile(r"(\d+)(\.\.\.|\.)")

WHITE = "white"
BLACK = "black"


# ── Text Cleanup ─────────────────────────────────────────────────────────────

def split_headers(text: str) -> tuple[list[str], str]:
    """Separate the leading tag-pair section from the move body."""
    lines = text.splitlines()
    headers: list[str] = []
    index = 0
    while index < len(lines) and (not lines[index].strip() or _HEADER_LINE_RE.match(lines[index])):
        if lines[index].strip():
            headers.append(lines[index].strip())
        index += 1
    return headers, "\n".join(lines[index:])


def _strip_variations(body: str) -> str:
    previous = None
    while previous != body:
        previous = body
        body = _VARIATION_RE.sub(" ", body)
    return body


def clean_movetext(body: str) -> str:
    """Remove comments, variations, NAGs and result tokens from a move body."""
    if _EMBEDDED_HEADER_RE.search(body):
        raise PgnStructureError("Header tag found inside the move text")
    body = _COMMENT_RE.sub(" ", body)
    body = _LINE_COMMENT_RE.sub(" ", body)
    body = _strip_variations(body)
    body = _NAG_RE.sub(" ", body)
    body = _RESULT_RE.sub(" ", body)
    return _MOVE_NUMBER_RE.sub(
        lambda m: f" {m.group(1)}{'...' if m.group(2) != '.' else '.'} ", body
    )


def scan_move_numbers(text: str) -> list[int]:
    """All "<n>." move numbers that appear in raw text, in order of appearance."""
    if not text:
        return []
    _, body = split_headers(text)
    return [int(m.group(1)) for m in _MOVE_NUMBER_RE.finditer(body) if int(m.group(1)) > 0]


# ── Pair Building ────────────────────────────────────────────────────────────

def _make_move(move_number: int, token: str) -> ValidatedMove:
    return ValidatedMove(
        move_number=move_number,
        notation=token,
        normalized_notation=notation.normalize(token),
    )


def _to_pairs(slots: dict[int, dict[str, str]]) -> list[MovePair]:
    pairs = []
    for number in sorted(slots):
        white = slots[number].get(WHITE)
        black = slots[number].get(BLACK)
        if not white and not black:
            continue
        pairs.append(
            MovePair(
                move_number=number,
                white_move=_make_move(number, white) if white else None,
                black_move=_make_move(number, black) if black else None,
            )
        )
    return pairs


def _pair_numbered_tokens(tokens: list[str]) -> dict[int, dict[str, str]]:
    slots: dict[int, dict[str, str]] = {}
    current: int | None = None
    side: str | None = None
    duplicate = False

    for token in tokens:
        number_match = _NUMBER_TOKEN_RE.fullmatch(token)
        if number_match:
            number = int(number_match.group(1))
            if number < 1:
                current, side = None, None
                continue
            current = number
            if number_match.group(2) == "...":
                side = BLACK
                duplicate = BLACK in slots.get(number, {})
            else:
                side = WHITE
                duplicate = number in slots
            continue

        if current is None:
            logger.debug("Ignoring token '%s' before the first move number", token)
            continue
        if side is None:
            # both plies of the previous number consumed; the token starts the next move
            current += 1
            side = WHITE
            duplicate = current in slots

        if not duplicate:
            slots.setdefault(current, {}).setdefault(side, token)
        side = BLACK if side == WHITE else None

    return slots


def _pair_sequential_tokens(tokens: list[str]) -> dict[int, dict[str, str]]:
    slots: dict[int, dict[str, str]] = {}
    for index, token in enumerate(tokens):
        slots.setdefault(index // 2 + 1, {})[WHITE if index % 2 == 0 else BLACK] = token
    return slots


def extract_move_pairs(source: str | Sequence[str] | None) -> list[MovePair]:
    """
    Extract ordered move pairs from PGN text or a raw OCR token list.

    The first occurrence of a move number wins and pairs with both sides empty
    are dropped. Re-extracting rendered output yields the same pairs.

    Raises PgnStructureError when a non-empty move body holds nothing extractable.
    """
    if source is None:
        return []

    from_tokens = not isinstance(source, str)
    if from_tokens:
        text = " ".join(token for token in source if token and token.strip())
    else:
        text = source

    _, body = split_headers(text)
    tokens = clean_movetext(body).split()
    if not tokens:
        return []

    if any(_NUMBER_TOKEN_RE.fullmatch(token) for token in tokens):
        pairs = _to_pairs(_pair_numbered_tokens(tokens))
    elif from_tokens:
        pairs = _to_pairs(_pair_sequential_tokens(tokens))
    else:
        pairs = []

    if not pairs:
        raise PgnStructureError(f"No move data found in move text: {body.strip()[:60]!r}")
    return pairs


def pairs_from_rows(rows: Sequence[ChessMove | dict], language: str = "English") -> list[MovePair]:
    """Build move pairs from structured OCR rows ({move_number, white, black})."""
    slots: dict[int, dict[str, str]] = {}
    for row in rows:
        if isinstance(row, ChessMove):
            row = row.model_dump()
        number = row.get("move_number")
        if not isinstance(number, int) or number < 1 or number in slots:
            continue
        cells = {}
        for side in (WHITE, BLACK):
            token = notation.clean_ocr_token(row.get(side))
            if token and language == "Greek":
                token = notation.translate_greek(token)
            if token:
                cells[side] = token
        slots[number] = cells
    return _to_pairs(slots)


def flatten_moves(pairs: Sequence[MovePair]) -> list[str]:
    """Plies in game order using their normalized notation."""
    plies: list[str] = []
    for pair in sorted(pairs, key=lambda p: p.move_number):
        plies.extend(move.normalized_notation for move in pair.sides())
    return plies
