# File: campcheck/core/exceptions.py
from typing import Any, Optional


class AttendanceError(Exception):
    """Base class for errors raised by the attendance services"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(AttendanceError):
    """Referenced event, participant or activity does not exist"""

    status_code = 404


class InvalidEvent(AttendanceError):
    """Participant and activity belong to different events"""

    status_code = 422


class Conflict(AttendanceError):
    """Roster and ledger disagree, or a uniqueness rule was broken"""

    status_code = 409


class TransientIO(AttendanceError):
    """Underlying store unavailable; the caller may retry"""

    status_code = 503
