"""
Chess Scoresheet OCR → PGN Pipeline
====================================
Reads one or two photographed scoresheet pages, validates every move against
the board (repairing illegal plies with a legal substitute), merges
continuation pages, and writes a PGN file.

Usage:
    python main.py --image scoresheet.jpg
    python main.py --image page1.jpg --continuation page2.jpg
    python main.py --pgn game.pgn --continuation page2.jpg
    python main.py --image scoresheet.jpg --white "Magnus" --black "Hikaru" --date 2024.05.01
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import config
import services
import utils
from errors import ScoresheetError
from schema import GameMetadata, MoveStatus, ProcessingResult

logger = logging.getLogger(__name__)


# ── Report ───────────────────────────────────────────────────────────────────

def print_report(result: ProcessingResult) -> None:
    """Print a human-readable validation report to stdout."""
    total = 0
    flagged: list[str] = []

    for pair in result.moves:
        for color, move in (("white", pair.white_move), ("black", pair.black_move)):
            if move is None:
                continue
            total += 1
            if move.status == MoveStatus.VALID:
                print(f"  ✓ {pair.move_number}. {color}: {move.normalized_notation}")
                continue
            marker = "!" if move.status == MoveStatus.WARNING else "✗"
            desc = f"  {marker} {pair.move_number}. {color}: {move.notation}  ← {move.message}"
            flagged.append(desc)
            print(desc)

    stats = result.statistics
    print(f"\n── Summary ──")
    print(f"  Plies extracted:       {total}")
    print(f"  Move pairs:            {stats.total_moves}")
    print(f"  Playable pairs:        {stats.valid_moves}")
    print(f"  Pairs with errors:     {stats.invalid_moves}")
    print(f"  Opening:               {stats.opening}")

    for page in result.pages:
        print(f"  Page {page.page_number}: moves {page.start_move_number}–{page.end_move_number}")

    if flagged:
        print(f"\n── Flagged Moves ──")
        for line in flagged:
            print(line)

    if result.merge and result.merge.warnings:
        print(f"\n── Merge Warnings ──")
        for warning in result.merge.warnings:
            print(f"  • {warning}")


# ── CLI Entry Point ──────────────────────────────────────────────────────────

def _parse_date(value: str | None):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y.%m.%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Date must be YYYY.MM.DD, got {value!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Chess Scoresheet OCR → PGN",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python main.py --image scoresheet.jpg
  python main.py --image page1.jpg --continuation page2.jpg
  python main.py --pgn game.pgn --continuation page2.jpg --output game_full.pgn
        """,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", "-i", help="Path to the (first) scoresheet image")
    source.add_argument("--pgn", "-p", help="Existing PGN game to continue")
    parser.add_argument("--continuation", "-c", default=None, help="Path to the continuation page image")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output PGN file path (default: output/<image_stem>.pgn)",
    )
    parser.add_argument("--white", "-w", default=None, help="White player name")
    parser.add_argument("--black", "-b", default=None, help="Black player name")
    parser.add_argument("--date", "-d", type=_parse_date, default=None, help="Game date (YYYY.MM.DD)")
    parser.add_argument("--round", "-r", default=None, help="Round")
    parser.add_argument("--result", default="*", choices=["1-0", "0-1", "1/2-1/2", "*"], help="Game result")
    parser.add_argument("--language", "-l", default=config.SCORESHEET_LANGUAGE, choices=["English", "Greek"])
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def run(args: argparse.Namespace) -> ProcessingResult:
    metadata = GameMetadata(
        white_player=args.white,
        black_player=args.black,
        game_date=args.date,
        round=args.round,
    )

    if args.pgn:
        if not args.continuation:
            raise ValueError("--pgn requires --continuation")
        utils.check_image_path(args.continuation)
        existing = Path(args.pgn).read_text(encoding="utf-8")
        logger.info("Continuing %s with %s", args.pgn, args.continuation)
        return services.add_continuation(existing, args.continuation, language=args.language)

    utils.check_image_path(args.image)
    if args.continuation:
        utils.check_image_path(args.continuation)
        logger.info("Reading two pages: %s, %s", args.image, args.continuation)
        return services.process_dual_upload(
            args.image, args.continuation, metadata, args.result, language=args.language
        )

    logger.info("Reading %s", args.image)
    return services.process_scoresheet(args.image, metadata, args.result, language=args.language)


def main():
    args = _build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else config.LOG_LEVEL,
        format="%(levelname)s %(message)s",
    )

    stem = Path(args.image or args.pgn).stem
    output_path = Path(args.output) if args.output else config.OUTPUT_DIR / f"{stem}.pgn"

    print("=" * 60)
    print("  Chess Scoresheet OCR → PGN")
    print("=" * 60)

    try:
        result = run(args)
    except (ScoresheetError, ValueError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)

    print_report(result)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.pgn, encoding="utf-8")

    status = "valid" if result.is_valid else "needs review"
    print(f"\n[✓] PGN saved to: {output_path} ({status})")
    print("-" * 60)
    print(result.pgn)
    print("-" * 60)


if __name__ == "__main__":
    main()
