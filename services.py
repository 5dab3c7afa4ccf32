import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from langchain_core.messages import HumanMessage, SystemMessage
from langsmith import traceable
from pydantic import ValidationError

import config
import extractor
import merger
import notation
import pgn_io
import prompts
import utils
import validator
from errors import ExtractionError
from schema import (
    ChessMove,
    GameMetadata,
    GameStatistics,
    MergeResult,
    MovePair,
    MoveStatus,
    OcrOutput,
    OcrStatus,
    PageInfo,
    ProcessingResult,
    Scoresheet,
    ValidationResult,
)

logger = logging.getLogger(__name__)

OPENINGS = {
    "e4 e5": "Open Game",
    "d4 d5": "Closed Game",
    "e4 c5": "Sicilian Defense",
    "d4 Nf6": "Indian Defense",
    "e4 e6": "French Defense",
    "e4 d5": "Scandinavian Defense",
}


# ── Extraction Service ────────────────────────────────────────────────────────

def classify_ocr_rows(rows: Sequence[ChessMove | dict] | None) -> OcrOutput:
    """Tag raw OCR rows as empty, malformed or well formed."""
    if not rows:
        return OcrOutput(status=OcrStatus.EMPTY)

    parsed: list[ChessMove] = []
    for row in rows:
        try:
            move = row if isinstance(row, ChessMove) else ChessMove.model_validate(row)
        except ValidationError as e:
            return OcrOutput(status=OcrStatus.MALFORMED, error=f"Unreadable OCR row {row!r}: {e.errors()[0]['msg']}")
        if move.move_number < 1:
            return OcrOutput(status=OcrStatus.MALFORMED, error=f"Invalid move number {move.move_number}")
        parsed.append(move)

    if not any((m.white or "").strip() or (m.black or "").strip() for m in parsed):
        return OcrOutput(status=OcrStatus.EMPTY, rows=parsed)
    return OcrOutput(status=OcrStatus.WELL_FORMED, rows=parsed)


@traceable
def extract_moves(image_path: str, language: str = config.SCORESHEET_LANGUAGE) -> OcrOutput:
    """
    Send the scoresheet image to the LLM once and extract all moves.
    Returns the rows tagged by OcrStatus; raises ExtractionError if the call fails.
    """
    utils.check_image_path(image_path)
    image_b64 = utils.encode_image(image_path)
    media_type = utils.get_image_media_type(image_path)

    # Configure LLM for structured output
    llm = utils.create_llm().with_structured_output(Scoresheet).with_config({"run_name": "extract_moves"})

    messages = [
        SystemMessage(content=prompts.system_prompt(language)),
        HumanMessage(
            content=[
                {"type": "text", "text": prompts.USER_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media_type};base64,{image_b64}"},
                },
            ]
        ),
    ]

    try:
        result: Scoresheet = llm.invoke(messages)
    except Exception as e:
        logger.error("LLM extraction failed for %s: %s", image_path, e)
        raise ExtractionError(f"LLM extraction failed: {e}", image_path=image_path) from e

    ocr = classify_ocr_rows(result.moves if result else None)
    logger.info("Extracted %d rows from %s (%s)", len(ocr.rows), image_path, ocr.status.value)
    return ocr


def _page_pairs(ocr: OcrOutput, source: str, language: str) -> list[MovePair]:
    if ocr.status == OcrStatus.MALFORMED:
        raise ExtractionError(ocr.error or "Malformed OCR output", image_path=source)
    return extractor.pairs_from_rows(ocr.rows, language=language)


# ── Validation Service ────────────────────────────────────────────────────────

def _log_validation(label: str, result: ValidationResult) -> None:
    for move in result.moves:
        if move.status == MoveStatus.ERROR:
            logger.error("%s move validation error: Move %s '%s': %s", label, move.move_number, move.notation, move.message)
        elif move.status == MoveStatus.WARNING:
            logger.warning("%s move validation warning: Move %s '%s': %s", label, move.move_number, move.notation, move.message)


def process_columns(white_tokens: list[str], black_tokens: list[str]) -> tuple[list[MovePair], bool]:
    """
    Validate scoresheet columns read separately (one list per colour).
    Each column is checked on its own first, then both are re-walked together.
    """
    white = validator.validate_moves([notation.clean_ocr_token(t) or "" for t in white_tokens])
    black = validator.validate_moves([notation.clean_ocr_token(t) or "" for t in black_tokens])
    validator.validate_moves_in_game_context(white, black)
    _log_validation("White", white)
    _log_validation("Black", black)

    pairs = validator.build_move_pairs(white, black)
    return pairs, bool(pairs) and white.is_valid and black.is_valid


def validate_pairs(pairs: list[MovePair]) -> ValidationResult:
    result = validator.validate_move_pairs(pairs)
    _log_validation("Game", result)
    return result


def game_statistics(pairs: Sequence[MovePair]) -> GameStatistics:
    """Per-pair counts plus a coarse opening name from the first two plies."""
    total = len(pairs)
    valid = sum(
        1 for pair in pairs
        if all(move.status in (MoveStatus.VALID, MoveStatus.WARNING) for move in pair.sides())
    )
    plies = extractor.flatten_moves(pairs)
    if len(plies) >= 2:
        opening = OPENINGS.get(" ".join(plies[:2]), "Custom Opening")
    else:
        opening = "Unknown Opening"
    return GameStatistics(total_moves=total, valid_moves=valid, invalid_moves=total - valid, opening=opening)


def _page_info(page_number: int, pairs: Sequence[MovePair], source: str | None) -> PageInfo:
    page_range = merger.compute_range(pairs)
    return PageInfo(
        page_number=page_number,
        start_move_number=page_range.start_move_number,
        end_move_number=page_range.end_move_number,
        source=source,
    )


def _finish(
    pairs: list[MovePair],
    metadata: GameMetadata | None,
    result: str,
    merge: MergeResult | None = None,
    pages: list[PageInfo] | None = None,
) -> ProcessingResult:
    validation = validate_pairs(pairs)
    is_valid = validation.is_valid and (merge is None or merge.is_valid)
    return ProcessingResult(
        pgn=pgn_io.render_pgn(pairs, metadata, result),
        moves=pairs,
        is_valid=is_valid,
        statistics=game_statistics(pairs),
        merge=merge,
        pages=pages or [],
    )


# ── Pipelines ─────────────────────────────────────────────────────────────────

def process_scoresheet(
    image_path: str,
    metadata: GameMetadata | None = None,
    result: str = "*",
    language: str = config.SCORESHEET_LANGUAGE,
) -> ProcessingResult:
    """Single page: OCR, validate against the board, render PGN."""
    pairs = _page_pairs(extract_moves(image_path, language), image_path, language)
    return _finish(pairs, metadata, result, pages=[_page_info(1, pairs, image_path)])


def merge_page_moves(
    page_a: list[MovePair],
    page_b: list[MovePair],
    metadata: GameMetadata | None = None,
    result: str = "*",
    sources: tuple[str | None, str | None] = (None, None),
) -> ProcessingResult:
    """Order two pages by their first move, merge them and validate the whole game."""
    page1, page2, swapped = merger.order_pages(page_a, page_b)
    source1, source2 = (sources[1], sources[0]) if swapped else sources

    merge = merger.merge_pages(page1, page2, merger.compute_range(page1), merger.compute_range(page2))
    pages = [_page_info(1, page1, source1), _page_info(2, page2, source2)]
    return _finish(merge.merged_moves, metadata, result, merge=merge, pages=pages)


def process_dual_upload(
    page_a_path: str,
    page_b_path: str,
    metadata: GameMetadata | None = None,
    result: str = "*",
    language: str = config.SCORESHEET_LANGUAGE,
) -> ProcessingResult:
    """
    Two photographed pages of one game. Both pages are read concurrently;
    if either extraction fails nothing is merged and the error propagates.
    """
    paths = (page_a_path, page_b_path)
    with ThreadPoolExecutor(max_workers=config.OCR_MAX_WORKERS) as executor:
        futures = [executor.submit(extract_moves, path, language) for path in paths]
        try:
            outputs = [future.result() for future in futures]
        except Exception:
            for future in futures:
                future.cancel()
            raise

    page_a, page_b = (_page_pairs(ocr, path, language) for ocr, path in zip(outputs, paths))
    return merge_page_moves(page_a, page_b, metadata, result, sources=paths)


def add_continuation(
    existing_pgn: str,
    image_path: str,
    language: str = config.SCORESHEET_LANGUAGE,
) -> ProcessingResult:
    """Append a continuation page to a stored game, keeping its metadata and result."""
    parsed = pgn_io.parse_pgn(existing_pgn)
    page2 = _page_pairs(extract_moves(image_path, language), image_path, language)

    range1 = merger.compute_range(parsed.moves, raw_text=existing_pgn)
    range2 = merger.compute_range(page2)
    merge = merger.merge_pages(parsed.moves, page2, range1, range2)
    pages = [_page_info(1, parsed.moves, None), _page_info(2, page2, image_path)]
    return _finish(merge.merged_moves, parsed.metadata, parsed.result, merge=merge, pages=pages)
