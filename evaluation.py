"""
Accuracy scoring of OCR output against a ground-truth PGN.

All metrics compare flat ply lists. The normalized score weights them
0.4 exact match, 0.3 positional, 0.2 Levenshtein, 0.1 LCS (1 = perfect).
"""

from collections.abc import Sequence

from extractor import extract_move_pairs, flatten_moves
from schema import EvaluationResult, MovePair

EXACT_MATCH_WEIGHT = 0.4
POSITIONAL_WEIGHT = 0.3
LEVENSHTEIN_WEIGHT = 0.2
LCS_WEIGHT = 0.1


def exact_match_score(ground_truth: Sequence[str], extracted: Sequence[str]) -> float:
    """Share of aligned slots (over the longer list) holding the same move."""
    if not ground_truth:
        return 1.0 if not extracted else 0.0
    longest = max(len(ground_truth), len(extracted))
    matches = sum(
        1
        for i in range(longest)
        if i < len(ground_truth) and i < len(extracted) and ground_truth[i] == extracted[i]
    )
    return matches / longest


def levenshtein_distance(ground_truth: Sequence[str], extracted: Sequence[str]) -> int:
    previous = list(range(len(extracted) + 1))
    for i, truth in enumerate(ground_truth, start=1):
        current = [i] + [0] * len(extracted)
        for j, move in enumerate(extracted, start=1):
            if truth == move:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        previous = current
    return previous[-1]


def positional_accuracy(ground_truth: Sequence[str], extracted: Sequence[str]) -> float:
    """Share of ground-truth moves reproduced at the same index."""
    if not ground_truth:
        return 1.0 if not extracted else 0.0
    correct = sum(1 for truth, move in zip(ground_truth, extracted) if truth == move)
    return correct / len(ground_truth)


def longest_common_subsequence(ground_truth: Sequence[str], extracted: Sequence[str]) -> int:
    previous = [0] * (len(extracted) + 1)
    for truth in ground_truth:
        current = [0] * (len(extracted) + 1)
        for j, move in enumerate(extracted, start=1):
            if truth == move:
                current[j] = previous[j - 1] + 1
            else:
                current[j] = max(previous[j], current[j - 1])
        previous = current
    return previous[-1]


def normalized_score(
    ground_truth: Sequence[str],
    extracted: Sequence[str],
    exact: float,
    distance: int,
    positional: float,
    lcs: int,
) -> float:
    max_distance = max(len(ground_truth), len(extracted))
    levenshtein_component = distance / max_distance if max_distance > 0 else 0.0
    max_lcs = min(len(ground_truth), len(extracted))
    lcs_component = 1.0 - lcs / max_lcs if max_lcs > 0 else 1.0

    raw = (
        EXACT_MATCH_WEIGHT * (1.0 - exact)
        + POSITIONAL_WEIGHT * (1.0 - positional)
        + LEVENSHTEIN_WEIGHT * levenshtein_component
        + LCS_WEIGHT * lcs_component
    )
    return 1.0 - raw


def _score(ground_truth: list[str], moves: list[str]) -> tuple[float, int, float, int, float]:
    exact = exact_match_score(ground_truth, moves)
    distance = levenshtein_distance(ground_truth, moves)
    positional = positional_accuracy(ground_truth, moves)
    lcs = longest_common_subsequence(ground_truth, moves)
    return exact, distance, positional, lcs, normalized_score(ground_truth, moves, exact, distance, positional, lcs)


def evaluate_moves(ground_truth_pgn: str, extracted: Sequence[MovePair]) -> EvaluationResult:
    """Score extracted pairs against a ground-truth PGN, on raw and on normalized notation."""
    ground_truth = flatten_moves(extract_move_pairs(ground_truth_pgn))
    ordered = sorted(extracted, key=lambda p: p.move_number)
    raw_moves = [move.notation for pair in ordered for move in pair.sides()]
    normalized_moves = flatten_moves(ordered)

    exact, distance, positional, lcs, score = _score(ground_truth, raw_moves)
    n_exact, n_distance, n_positional, n_lcs, n_score = _score(ground_truth, normalized_moves)

    return EvaluationResult(
        ground_truth_moves=ground_truth,
        extracted_moves=raw_moves,
        normalized_moves=normalized_moves,
        exact_match_score=exact,
        levenshtein_distance=distance,
        positional_accuracy=positional,
        longest_common_subsequence=lcs,
        normalized_score=score,
        normalized_exact_match_score=n_exact,
        normalized_levenshtein_distance=n_distance,
        normalized_positional_accuracy=n_positional,
        normalized_longest_common_subsequence=n_lcs,
        normalized_moves_score=n_score,
    )
