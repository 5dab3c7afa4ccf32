"""Tests for merging continuation pages."""

from extractor import extract_move_pairs
from merger import compute_range, merge_pages, order_pages
from schema import MoveStatus, PageRange
from validator import validate_move_pairs


def _signature(pairs):
    return [(p.move_number, p.white_san, p.black_san) for p in pairs]


def _ranges(page1, page2):
    return compute_range(page1), compute_range(page2)


class TestComputeRange:
    def test_range_of_pairs(self) -> None:
        r = compute_range(extract_move_pairs("31... Nf6 32. Re1 Be7 33. d4"))
        assert (r.start_move_number, r.end_move_number) == (31, 33)

    def test_empty_is_zero(self) -> None:
        r = compute_range([])
        assert r.is_empty
        assert (r.start_move_number, r.end_move_number) == (0, 0)

    def test_raw_text_fallback(self) -> None:
        r = compute_range([], raw_text="12. e4 e5 13. Nf3")
        assert (r.start_move_number, r.end_move_number) == (12, 13)


class TestMergePages:
    def test_contiguous_pages(self, make_pairs) -> None:
        page1 = make_pairs({1: ("e4", "e5"), 2: ("Nf3", "Nc6")})
        page2 = make_pairs({3: ("Bb5", "a6"), 4: ("Ba4", "Nf6")})
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert result.is_valid
        assert result.warnings == []
        assert not result.has_gap and not result.has_overlap
        assert [p.move_number for p in result.merged_moves] == [1, 2, 3, 4]

    def test_gap(self) -> None:
        result = merge_pages([], [], PageRange(start_move_number=1, end_move_number=4), PageRange(start_move_number=6, end_move_number=10))
        assert result.has_gap
        assert result.gap_size == 1
        assert not result.has_overlap
        assert not result.is_valid
        assert result.warnings[0].startswith("Gap detected")

    def test_overlap_with_conflict(self) -> None:
        page1 = extract_move_pairs("1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6")
        page2 = extract_move_pairs("3. Bb5 a6 4. Bc4 Nf6 5. O-O Be7 6. Re1 b5")
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert result.has_overlap
        assert result.overlap_moves == 2
        assert not result.has_gap
        assert not result.is_valid
        assert _signature(result.merged_moves) == [
            (1, "e4", "e5"),
            (2, "Nf3", "Nc6"),
            (3, "Bb5", "a6"),
            (4, "Ba4", "Nf6"),
            (5, "O-O", "Be7"),
            (6, "Re1", "b5"),
        ]
        assert result.warnings[0].startswith("Overlap detected")
        assert "Move 4 white differs between pages. Kept page 1 move." in result.warnings

    def test_conflicts_reported_in_order(self, make_pairs) -> None:
        page1 = make_pairs({3: ("Bb5", "a6"), 4: ("Ba4", "Nf6")})
        page2 = make_pairs({3: ("Bb5", "d6"), 4: ("Bc4", "Nf6")})
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert result.warnings[-2:] == [
            "Move 3 black differs between pages. Kept page 1 move.",
            "Move 4 white differs between pages. Kept page 1 move.",
        ]

    def test_case_insensitive_agreement(self, make_pairs) -> None:
        page1 = make_pairs({1: ("e4", "e5"), 2: ("Nf3", "Nc6")})
        page2 = make_pairs({2: ("NF3", "nc6"), 3: ("Bb5", None)})
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert len(result.warnings) == 1
        assert result.merged_moves[1].white_san == "Nf3"

    def test_fills_empty_side(self, make_pairs) -> None:
        page1 = make_pairs({3: ("Bb5", "a6"), 4: ("Ba4", None)})
        page2 = make_pairs({4: (None, "Nf6"), 5: ("O-O", "Be7")})
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert _signature(result.merged_moves)[1] == (4, "Ba4", "Nf6")
        # input pages are left alone
        assert page1[1].black_move is None

    def test_same_start(self, make_pairs) -> None:
        page1 = make_pairs({1: ("e4", "e5"), 5: ("d4", "d5")})
        page2 = make_pairs({1: ("e4", "e5"), 5: ("d4", "d5")})
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        assert not result.is_valid
        assert "same move number (1)" in result.warnings[0]
        assert result.has_overlap

    def test_empty_page_has_no_gap_or_overlap(self, make_pairs) -> None:
        page1 = make_pairs({1: ("e4", "e5")})
        result = merge_pages(page1, [], *_ranges(page1, []))
        assert not result.has_gap and not result.has_overlap
        assert result.is_valid
        assert _signature(result.merged_moves) == [(1, "e4", "e5")]

    def test_validating_merge_leaves_pages_alone(self) -> None:
        page1 = extract_move_pairs("1. e4 e5 2. Nf3")
        page2 = extract_move_pairs("2... Ke6 3. Bb5 a6")
        result = merge_pages(page1, page2, *_ranges(page1, page2))
        validate_move_pairs(result.merged_moves)

        # Ke6 is illegal here; the merged copy is repaired, the page is not
        assert result.merged_moves[1].black_move.status == MoveStatus.WARNING
        assert page2[0].black_move.status == MoveStatus.VALID
        assert page2[0].black_san == "Ke6"
        assert all(move.message == "" for pair in page1 + page2 for move in pair.sides())

    def test_deterministic(self) -> None:
        page1 = extract_move_pairs("1. e4 e5 2. Nf3 Nc6 3. Bb5 a6")
        page2 = extract_move_pairs("3. Bc4 a6 4. d3 Nf6")
        first = merge_pages(page1, page2, *_ranges(page1, page2))
        second = merge_pages(page1, page2, *_ranges(page1, page2))
        assert first.model_dump() == second.model_dump()


class TestOrderPages:
    def test_later_page_uploaded_first(self, make_pairs) -> None:
        late = make_pairs({50: ("Kf1", "Kf8")})
        early = make_pairs({1: ("e4", "e5")})
        page1, page2, swapped = order_pages(late, early)
        assert swapped
        assert page1[0].move_number == 1
        assert page2[0].move_number == 50

    def test_upload_order_kept(self, make_pairs) -> None:
        first = make_pairs({1: ("e4", "e5")})
        second = make_pairs({2: ("Nf3", "Nc6")})
        _, _, swapped = order_pages(first, second)
        assert not swapped

    def test_equal_start_keeps_order(self, make_pairs) -> None:
        a = make_pairs({1: ("e4", "e5")})
        b = make_pairs({1: ("d4", "d5")})
        page1, _, swapped = order_pages(a, b)
        assert not swapped
        assert page1[0].white_san == "e4"
