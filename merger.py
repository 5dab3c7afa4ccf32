"""
Continuation merging for two-page scoresheets.

Page 1 is the authority: when both pages carry a move for the same number and
side, page 1's move is kept and the disagreement is reported as a warning.
Merged pairs are copies, so validating them leaves the input pages as they were.
"""

import logging
from collections.abc import Sequence

from extractor import scan_move_numbers
from schema import MergeResult, MovePair, PageRange

logger = logging.getLogger(__name__)

SAME_START_WARNING = (
    "Both uploaded pages start at the same move number ({start}). "
    "Page 1 was used as the primary ordering; please verify the merged game."
)
GAP_WARNING = (
    "Gap detected: page 1 ends at move {end} but page 2 starts at move {start} "
    "({size} move(s) missing)."
)
OVERLAP_WARNING = (
    "Overlap detected: page 2 starts at move {start} but page 1 ends at move {end} "
    "({size} overlapping move(s))."
)
CONFLICT_WARNING = "Move {number} {side} differs between pages. Kept page 1 move."


def compute_range(moves: Sequence[MovePair], raw_text: str | None = None) -> PageRange:
    """
    Move-number span covered by a page.

    Falls back to scanning raw text for "<n>." tokens when no pair carries a
    move; (0, 0) means no moves were found at all.
    """
    numbers = [pair.move_number for pair in moves if pair.white_move or pair.black_move]
    if not numbers and raw_text:
        numbers = scan_move_numbers(raw_text)
    if not numbers:
        return PageRange()
    return PageRange(start_move_number=min(numbers), end_move_number=max(numbers))


def _first_occurrences(pairs: Sequence[MovePair]) -> dict[int, MovePair]:
    indexed: dict[int, MovePair] = {}
    for pair in pairs:
        indexed.setdefault(pair.move_number, pair)
    return indexed


def _same_move(first: str, second: str) -> bool:
    return first.casefold() == second.casefold()


def merge_pages(
    page1: Sequence[MovePair],
    page2: Sequence[MovePair],
    range1: PageRange,
    range2: PageRange,
) -> MergeResult:
    """Combine two page extractions into one ascending, duplicate-free sequence."""
    result = MergeResult()
    both_present = not range1.is_empty and not range2.is_empty
    same_start = both_present and range1.start_move_number == range2.start_move_number

    if same_start:
        logger.warning("Both pages start at move %s", range1.start_move_number)
        result.warnings.append(SAME_START_WARNING.format(start=range1.start_move_number))

    if both_present and range2.start_move_number > range1.end_move_number + 1:
        result.has_gap = True
        result.gap_size = range2.start_move_number - range1.end_move_number - 1
        logger.warning("Gap of %s move(s) between pages", result.gap_size)
        result.warnings.append(
            GAP_WARNING.format(
                end=range1.end_move_number, start=range2.start_move_number, size=result.gap_size
            )
        )
    elif both_present and range2.start_move_number <= range1.end_move_number:
        result.has_overlap = True
        result.overlap_moves = range1.end_move_number - range2.start_move_number + 1
        logger.warning("Pages overlap by %s move(s)", result.overlap_moves)
        result.warnings.append(
            OVERLAP_WARNING.format(
                start=range2.start_move_number, end=range1.end_move_number, size=result.overlap_moves
            )
        )

    merged = {
        number: pair.model_copy(deep=True) for number, pair in _first_occurrences(page1).items()
    }
    for number, incoming in sorted(_first_occurrences(page2).items()):
        existing = merged.get(number)
        if existing is None:
            merged[number] = incoming.model_copy(deep=True)
            continue

        for side in ("white", "black"):
            field = f"{side}_move"
            kept = getattr(existing, field)
            offered = getattr(incoming, field)
            if offered is None:
                continue
            if kept is None:
                setattr(existing, field, offered.model_copy())
            elif not _same_move(kept.normalized_notation, offered.normalized_notation):
                result.warnings.append(CONFLICT_WARNING.format(number=number, side=side))

    result.merged_moves = [merged[number] for number in sorted(merged)]
    result.is_valid = not result.warnings and not same_start
    return result


def order_pages(
    page_a: Sequence[MovePair], page_b: Sequence[MovePair]
) -> tuple[list[MovePair], list[MovePair], bool]:
    """
    Put the page with the earlier start move first. Returns (page1, page2, swapped);
    equal starts keep the upload order.
    """
    range_a = compute_range(page_a)
    range_b = compute_range(page_b)
    swap = (
        not range_a.is_empty
        and not range_b.is_empty
        and range_b.start_move_number < range_a.start_move_number
    ) or (range_a.is_empty and not range_b.is_empty)
    if swap:
        logger.info(
            "Reordering pages: page starting at %s goes before page starting at %s",
            range_b.start_move_number,
            range_a.start_move_number,
        )
        return list(page_b), list(page_a), True
    return list(page_a), list(page_b), False
