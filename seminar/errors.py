"""Exception taxonomy for the seminar engine.

Every error raised by a service is caller-recoverable: the repository is
left in its prior state and the caller may retry with different input.
"""

from __future__ import annotations

from datetime import date


class SeminarError(Exception):
    """Base exception for engine operations."""

    pass


class ValidationError(SeminarError):
    """Malformed or missing required input."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class NotFoundError(SeminarError):
    """Referenced entity does not exist in the repository."""

    def __init__(self, entity_type: str, entity_id: str | None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} {entity_id} not found")


class ConflictError(SeminarError):
    """An assignment would violate a uniqueness invariant."""

    def __init__(
        self,
        message: str,
        *,
        participant_id: str | None = None,
        date: date | None = None,
        session_id: str | None = None,
        board_id: str | None = None,
        occupant_id: str | None = None,
    ):
        self.message = message
        self.participant_id = participant_id
        self.date = date
        self.session_id = session_id
        self.board_id = board_id
        self.occupant_id = occupant_id
        super().__init__(message)
