"""Exception hierarchy for bodytrack."""

from __future__ import annotations

from typing import Optional


class BodyTrackError(Exception):
    """Base exception for bodytrack errors."""

    pass


class ImportFormatError(BodyTrackError):
    """Raised when an import file cannot be interpreted at all."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidEntryError(BodyTrackError):
    """Raised when a weight entry is out of range or does not exist."""

    pass


class MissingDataError(BodyTrackError):
    """Raised when required data is missing."""

    pass


class InvalidEvaluationError(BodyTrackError):
    """Raised when a nutrition evaluation draft cannot be committed."""

    def __init__(self, problems: list[str]):
        super().__init__("Invalid evaluation: " + "; ".join(problems))
        self.problems = problems
