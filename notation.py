"""
Notation helpers for handwritten scoresheet moves.

Canonicalizes OCR tokens before they reach the board: castling written with
zeros or lowercase letters, stray OCR glyphs, and Greek piece/file letters.
Also exposes the structural predicates the validator relies on.
"""

import re

_CASTLING_RE = re.compile(r"^[0Oo]-[0Oo](?P<long>-[0Oo])?(?P<suffix>[+#])?$")
_SAN_RE = re.compile(r"^([KQRBN]?[a-h]?[1-8]?x?[a-h][1-8](=[QRBN])?[+#]?|O-O(-O)?[+#]?)$")
_PROMOTION_RE = re.compile(r"=[QRBN][+#]?$")
# characters with a meaning of their own in PGN movetext
_PGN_RESERVED_RE = re.compile(r'[;{}()\[\]$"%<>*`\s]')
_MOVE_NUMBER_PREFIX_RE = re.compile(r"^\d+(?:\.+|…)")
_RESULT_RE = re.compile(r"^(?:1-0|0-1|1/2-1/2|½-½)$")

VALID_PROMOTIONS = ("Q", "R", "B", "N")

GREEK_TO_ENGLISH = {
    "Π": "R",  # Πύργος
    "Α": "B",  # Αξιωματικός
    "Β": "Q",  # Βασίλισσα
    "Ι": "N",  # Ίππος
    "Ρ": "K",  # Ρήγας
    "α": "a",
    "β": "b",
    "γ": "c",
    "δ": "d",
    "ε": "e",
    "ζ": "f",
    "η": "g",
    "θ": "h",
}


def normalize(token: str | None) -> str:
    """
    Canonicalize a single move token.

    Any mixture of 0/O/o castling glyphs becomes O-O or O-O-O with a trailing
    check or mate marker preserved. Everything else is only trimmed.
    """
    if token is None:
        return ""
    move = token.strip()
    match = _CASTLING_RE.match(move)
    if match:
        base = "O-O-O" if match.group("long") else "O-O"
        return base + (match.group("suffix") or "")
    return move


def clean_ocr_token(token: str | None) -> str | None:
    """
    Strip OCR glitches and anything PGN movetext would read as syntax: comment,
    variation, NAG and tag characters, whitespace, a leading "12." move number.
    Empty cells and cells holding only a result token become None.
    """
    if token is None:
        return None
    cleaned = _PGN_RESERVED_RE.sub("", token)
    cleaned = _MOVE_NUMBER_PREFIX_RE.sub("", cleaned)
    if _RESULT_RE.match(cleaned):
        return None
    return cleaned or None


def translate_greek(token: str) -> str:
    """Translate Greek piece and file letters to English SAN."""
    return "".join(GREEK_TO_ENGLISH.get(ch, ch) for ch in token)


def is_castling(move: str) -> bool:
    return move.rstrip("+#") in ("O-O", "O-O-O")


def is_valid_syntax(move: str) -> bool:
    """True if the token has the structural shape of a SAN move."""
    return bool(_SAN_RE.match(move))


def has_invalid_promotion(move: str) -> bool:
    """True for promotion-shaped tokens whose promoted piece letter is not Q, R, B or N."""
    return "=" in move and not _PROMOTION_RE.search(move)


def gives_check(move: str) -> bool:
    return move.endswith("+")


def strip_decorations(move: str) -> str:
    """Drop check/mate markers and annotation glyphs for loose comparisons."""
    return move.rstrip("+#!?")
