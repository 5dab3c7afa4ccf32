"""Tests for OCR accuracy metrics."""

import pytest

from evaluation import (
    evaluate_moves,
    exact_match_score,
    levenshtein_distance,
    longest_common_subsequence,
    normalized_score,
    positional_accuracy,
)
from extractor import extract_move_pairs

GROUND_TRUTH = "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. O-O *"


class TestMetrics:
    def test_levenshtein(self) -> None:
        assert levenshtein_distance(["a", "b", "c"], ["a", "c"]) == 1
        assert levenshtein_distance([], ["a", "b"]) == 2
        assert levenshtein_distance(["e4", "e5"], ["e4", "e5"]) == 0

    def test_lcs(self) -> None:
        assert longest_common_subsequence(["a", "b", "c", "d"], ["a", "c", "d"]) == 3
        assert longest_common_subsequence(["a"], ["b"]) == 0

    def test_exact_match_over_longer_list(self) -> None:
        assert exact_match_score(["a", "b", "c"], ["a", "c"]) == pytest.approx(1 / 3)
        assert exact_match_score(["a"], ["a", "b"]) == pytest.approx(0.5)

    def test_positional_over_ground_truth(self) -> None:
        assert positional_accuracy(["a", "b", "c"], ["a", "c"]) == pytest.approx(1 / 3)
        assert positional_accuracy(["a", "b"], ["a", "b", "c"]) == pytest.approx(1.0)

    def test_empty_lists(self) -> None:
        assert exact_match_score([], []) == 1.0
        assert positional_accuracy([], ["e4"]) == 0.0

    def test_perfect_score(self) -> None:
        moves = ["e4", "e5", "Nf3"]
        assert normalized_score(moves, moves, 1.0, 0, 1.0, 3) == pytest.approx(1.0)

    def test_score_drops_with_errors(self) -> None:
        truth = ["e4", "e5", "Nf3", "Nc6"]
        guess = ["e4", "e6", "Nf3"]
        exact = exact_match_score(truth, guess)
        positional = positional_accuracy(truth, guess)
        distance = levenshtein_distance(truth, guess)
        lcs = longest_common_subsequence(truth, guess)
        assert normalized_score(truth, guess, exact, distance, positional, lcs) < 1.0


class TestEvaluateMoves:
    def test_perfect_extraction(self) -> None:
        result = evaluate_moves(GROUND_TRUTH, extract_move_pairs(GROUND_TRUTH))
        assert result.exact_match_score == pytest.approx(1.0)
        assert result.levenshtein_distance == 0
        assert result.longest_common_subsequence == 7
        assert result.normalized_score == pytest.approx(1.0)

    def test_normalization_recovers_castling(self) -> None:
        extracted = extract_move_pairs("1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. 0-0")
        result = evaluate_moves(GROUND_TRUTH, extracted)
        assert result.extracted_moves[-1] == "0-0"
        assert result.normalized_moves[-1] == "O-O"
        assert result.exact_match_score == pytest.approx(6 / 7)
        assert result.normalized_exact_match_score == pytest.approx(1.0)
        assert result.normalized_moves_score == pytest.approx(1.0)
        assert result.normalized_score < result.normalized_moves_score

    def test_ground_truth_moves_listed(self) -> None:
        result = evaluate_moves(GROUND_TRUTH, [])
        assert result.ground_truth_moves == ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "O-O"]
        assert result.extracted_moves == []
        assert result.positional_accuracy == 0.0
