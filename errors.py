class ScoresheetError(Exception):
    """Base class for failures the pipeline reports to its caller."""


class PgnStructureError(ScoresheetError, ValueError):
    """Raised when text has a move body but no move data can be extracted from it."""


class ExtractionError(ScoresheetError):
    """Raised when the OCR collaborator fails or returns unusable output."""

    def __init__(self, message: str, image_path: str | None = None):
        super().__init__(message)
        self.image_path = image_path
