"""
Error taxonomy for the roster store and its adapters.

Every failure surfaced to a caller is a RollbookError subclass carrying a
stable ``kind`` string and a user-facing ``message``.
"""

from typing import Any, Iterable, Optional


class RollbookError(Exception):
    """Base class for all Rollbook errors."""

    kind = "rollbook_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateEntityError(RollbookError):
    """Raised when an entity with the same identity is already stored."""

    kind = "duplicate_entity"

    def __init__(self, entity: str, identity: Any, message: Optional[str] = None):
        self.entity = entity
        self.identity = identity
        super().__init__(message or f"{entity} {_describe(identity)} already exists.")


class EntityNotFoundError(RollbookError):
    """Raised when an entity cannot be found by its identity."""

    kind = "entity_not_found"

    def __init__(self, entity: str, identity: Any, message: Optional[str] = None):
        self.entity = entity
        self.identity = identity
        super().__init__(message or f"{entity} {_describe(identity)} not found.")


class SameGroupError(RollbookError):
    """Raised when moving a student into the group they are already in."""

    kind = "same_group"

    def __init__(self, nusnetid: str, group_id: str):
        self.nusnetid = nusnetid
        self.group_id = group_id
        super().__init__("Cannot move student to the same group they are already in.")


class InvalidRangeError(RollbookError):
    """Raised when a bounded integer key falls outside its domain."""

    kind = "invalid_range"

    def __init__(self, field: str, value: Any, low: int, high: int):
        self.field = field
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"{field} must be between {low} and {high} (got {value}).")


class InvalidStatusError(RollbookError):
    """Raised when a status string is not one of the allowed values."""

    kind = "invalid_status"

    def __init__(self, value: Any, allowed: Iterable[str]):
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(f"Invalid status: use {'/'.join(self.allowed)}.")


class OverlappingConsultationError(RollbookError):
    """Raised when a consultation would overlap one already scheduled."""

    kind = "overlapping_consultation"

    def __init__(self, candidate: Any, existing: Any):
        self.candidate = candidate
        self.existing = existing
        super().__init__(f"Consultation {candidate} overlaps with existing consultation {existing}.")


class EmptyGroupError(RollbookError):
    """Raised when a group-wide operation targets a group with no members."""

    kind = "empty_group"

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"No students in group {group_id}.")


class BatchRejectedError(RollbookError):
    """Raised when an all-students operation would change nobody."""

    kind = "batch_rejected"


class ParseError(RollbookError):
    """Raised when command text does not match the expected format."""

    kind = "parse_error"


class DataLoadingError(RollbookError):
    """Raised when the data file cannot be read or decoded."""

    kind = "data_loading"


class ConfigurationError(RollbookError):
    """Raised when configuration is invalid."""

    kind = "configuration"


def _describe(identity: Any) -> str:
    if isinstance(identity, tuple):
        return "(" + ", ".join(str(part) for part in identity) + ")"
    return str(identity)
