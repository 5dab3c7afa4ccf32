from datetime import date
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

# --- LLM Structured Output Models ---

class ChessMove(BaseModel):
    move_number: int = Field(..., description="The move number as written on the scoresheet (e.g., 1, 2, ... or 31, 32, ... on a continuation page)")
    white: str | None = Field(None, description="White's move in SAN (Standard Algebraic Notation), or null if empty.")
    black: str | None = Field(None, description="Black's move in SAN, or null if empty.")

class Scoresheet(BaseModel):
    moves: list[ChessMove] = Field(..., description="List of all chess moves found on the scoresheet.")


# --- OCR Boundary ---

class OcrStatus(str, Enum):
    EMPTY = "empty"
    MALFORMED = "malformed"
    WELL_FORMED = "well_formed"

class OcrOutput(BaseModel):
    status: OcrStatus
    rows: List[ChessMove] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return self.status == OcrStatus.WELL_FORMED


# --- Core Domain Models ---

class MoveStatus(str, Enum):
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"

class ValidatedMove(BaseModel):
    move_number: int = 0
    notation: str
    normalized_notation: str
    status: MoveStatus = MoveStatus.VALID
    message: str = ""

    @property
    def is_error(self) -> bool:
        return self.status == MoveStatus.ERROR

    def add_message(self, text: str) -> None:
        self.message = f"{self.message}; {text}" if self.message else text

class MovePair(BaseModel):
    move_number: int = Field(..., ge=1)
    white_move: Optional[ValidatedMove] = None
    black_move: Optional[ValidatedMove] = None

    @model_validator(mode="after")
    def _require_one_side(self) -> "MovePair":
        if self.white_move is None and self.black_move is None:
            raise ValueError(f"Move {self.move_number} has neither a white nor a black move")
        return self

    @property
    def white_san(self) -> Optional[str]:
        return self.white_move.normalized_notation if self.white_move else None

    @property
    def black_san(self) -> Optional[str]:
        return self.black_move.normalized_notation if self.black_move else None

    def sides(self) -> list[ValidatedMove]:
        return [m for m in (self.white_move, self.black_move) if m is not None]

class ValidationResult(BaseModel):
    is_valid: bool
    moves: List[ValidatedMove] = Field(default_factory=list)

class PageRange(BaseModel):
    start_move_number: int = 0
    end_move_number: int = 0

    @property
    def is_empty(self) -> bool:
        return self.start_move_number == 0 and self.end_move_number == 0

class MergeResult(BaseModel):
    merged_moves: List[MovePair] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    has_gap: bool = False
    gap_size: Optional[int] = None
    has_overlap: bool = False
    overlap_moves: Optional[int] = None
    is_valid: bool = True

class PageInfo(BaseModel):
    page_number: int
    start_move_number: int
    end_move_number: int
    source: Optional[str] = None


# --- PGN Models ---

class GameMetadata(BaseModel):
    white_player: Optional[str] = None
    black_player: Optional[str] = None
    game_date: Optional[date] = None
    round: Optional[str] = None

class ParsedPgn(BaseModel):
    metadata: GameMetadata = Field(default_factory=GameMetadata)
    moves: List[MovePair] = Field(default_factory=list)
    result: str = "*"
    headers: Dict[str, str] = Field(default_factory=dict)


# --- Reporting Models ---

class GameStatistics(BaseModel):
    total_moves: int = 0
    valid_moves: int = 0
    invalid_moves: int = 0
    opening: str = "Unknown Opening"

class EvaluationResult(BaseModel):
    ground_truth_moves: List[str] = Field(default_factory=list)
    extracted_moves: List[str] = Field(default_factory=list)
    normalized_moves: List[str] = Field(default_factory=list)
    exact_match_score: float = 0.0
    levenshtein_distance: int = 0
    positional_accuracy: float = 0.0
    longest_common_subsequence: int = 0
    normalized_score: float = 0.0
    normalized_exact_match_score: float = 0.0
    normalized_levenshtein_distance: int = 0
    normalized_positional_accuracy: float = 0.0
    normalized_longest_common_subsequence: int = 0
    normalized_moves_score: float = 0.0

class ProcessingResult(BaseModel):
    pgn: str
    moves: List[MovePair] = Field(default_factory=list)
    is_valid: bool
    statistics: GameStatistics = Field(default_factory=GameStatistics)
    merge: Optional[MergeResult] = None
    pages: List[PageInfo] = Field(default_factory=list)
