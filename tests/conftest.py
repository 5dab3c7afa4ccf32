"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from schema import MovePair, ValidatedMove

PairSpec = dict[int, tuple[str | None, str | None]]


@pytest.fixture(autouse=True)
def _no_tracing(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep LangSmith from trying to ship traces while tests run."""
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")
    monkeypatch.setenv("LANGSMITH_TRACING", "false")
    yield


def _move(number: int, san: str | None) -> ValidatedMove | None:
    if san is None:
        return None
    return ValidatedMove(move_number=number, notation=san, normalized_notation=san)


@pytest.fixture
def make_pairs() -> Callable[[PairSpec], list[MovePair]]:
    """Build move pairs from {move_number: (white, black)}."""

    def build(moves: PairSpec) -> list[MovePair]:
        return [
            MovePair(move_number=number, white_move=_move(number, white), black_move=_move(number, black))
            for number, (white, black) in moves.items()
        ]

    return build
