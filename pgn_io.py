"""PGN rendering and parsing for validated scoresheet games."""

import logging
import re
from collections.abc import Sequence
from datetime import date, datetime

import config
from extractor import extract_move_pairs, split_headers
from schema import GameMetadata, MovePair, ParsedPgn

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r'^\s*\[(\w+)\s+"((?:[^"\\]|\\.)*)"\]\s*$', re.MULTILINE)
_UNESCAPE_RE = re.compile(r"\\(.)")
RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")
UNKNOWN_PLAYER = "?"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _unescape(value: str) -> str:
    return _UNESCAPE_RE.sub(r"\1", value)


def _player(name: str | None) -> str:
    return name.strip() if name and name.strip() else UNKNOWN_PLAYER


def _format_date(game_date: date | None) -> str:
    return game_date.strftime("%Y.%m.%d") if game_date else config.DEFAULT_PGN_DATE


def _result_token(result: str | None) -> str:
    token = (result or "").strip()
    if not token:
        return "*"
    if token not in RESULT_TOKENS:
        logger.warning("Unknown result token '%s', writing '*'", token)
        return "*"
    return token


def render_movetext(moves: Sequence[MovePair], result: str | None = "*") -> str:
    """Movetext as "<n>. <white> <black> " per pair followed by the result token."""
    parts: list[str] = []
    for pair in sorted(moves, key=lambda p: p.move_number):
        # an emptied cell is written as a missing side
        white, black = pair.white_san, pair.black_san
        if white:
            parts.append(f"{pair.move_number}. {white} ")
            if black:
                parts.append(f"{black} ")
        elif black:
            parts.append(f"{pair.move_number}... {black} ")
    return "".join(parts) + _result_token(result)


def render_pgn(
    moves: Sequence[MovePair],
    metadata: GameMetadata | None = None,
    result: str | None = "*",
) -> str:
    """
    Render a game as canonical PGN text.

    Tag order is Date, Round (only when set), White, Black, Result, then a
    blank line and the movetext. Metadata never changes the moves.
    """
    metadata = metadata or GameMetadata()
    token = _result_token(result)

    lines = [f'[Date "{_format_date(metadata.game_date)}"]']
    if metadata.round and metadata.round.strip():
        lines.append(f'[Round "{_escape(metadata.round.strip())}"]')
    lines.append(f'[White "{_escape(_player(metadata.white_player))}"]')
    lines.append(f'[Black "{_escape(_player(metadata.black_player))}"]')
    lines.append(f'[Result "{token}"]')
    lines.append("")
    lines.append(render_movetext(moves, token))
    return "\n".join(lines) + "\n"


def parse_headers(text: str) -> dict[str, str]:
    """Tag pairs found in the text; the first occurrence of a tag wins."""
    headers: dict[str, str] = {}
    for name, value in _HEADER_RE.findall(text or ""):
        headers.setdefault(name, _unescape(value))
    return headers


def _parse_date(value: str | None) -> date | None:
    if not value or "?" in value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y.%m.%d").date()
    except ValueError:
        logger.debug("Unparseable PGN date '%s'", value)
        return None


def _optional(value: str | None) -> str | None:
    if value is None or value.strip() in ("", "?"):
        return None
    return value.strip()


def _trailing_result(text: str) -> str:
    _, body = split_headers(text)
    tokens = body.split()
    if tokens and tokens[-1] in RESULT_TOKENS:
        return tokens[-1]
    return "*"


def parse_pgn(text: str) -> ParsedPgn:
    """
    Parse PGN text back into metadata, move pairs and result.

    Raises PgnStructureError when the move body cannot be read.
    """
    text = text or ""
    headers = parse_headers(text)
    metadata = GameMetadata(
        white_player=_optional(headers.get("White")),
        black_player=_optional(headers.get("Black")),
        game_date=_parse_date(headers.get("Date")),
        round=(headers.get("Round") or "").strip() or None,
    )
    result = headers.get("Result", "").strip()
    if result not in RESULT_TOKENS:
        result = _trailing_result(text)
    return ParsedPgn(
        metadata=metadata,
        moves=extract_move_pairs(text),
        result=result,
        headers=headers,
    )
