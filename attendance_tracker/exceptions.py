"""Check-in and issuance failures, each tagged with the status surfaced to callers."""
from enum import Enum
from typing import Optional


class CheckInStatus(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    CheckInStatus.OK: 200,
    CheckInStatus.NOT_FOUND: 404,
    CheckInStatus.FORBIDDEN: 403,
    CheckInStatus.CONFLICT: 409,
    CheckInStatus.INTERNAL_ERROR: 500,
}


class AttendanceError(Exception):
    """Base for every failure the attendance core reports to its caller."""

    status: CheckInStatus = CheckInStatus.INTERNAL_ERROR
    default_message = "Attendance request failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SessionNotFound(AttendanceError):
    status = CheckInStatus.NOT_FOUND
    default_message = "Invalid or unknown session token."


class SessionExpired(AttendanceError):
    status = CheckInStatus.FORBIDDEN
    default_message = "Session has expired."


class NotEligible(AttendanceError):
    status = CheckInStatus.NOT_FOUND
    default_message = "No attendance record found for this session."


class AlreadyCheckedIn(AttendanceError):
    status = CheckInStatus.CONFLICT
    default_message = "You have already checked in."


class ConcurrentConflict(AttendanceError):
    status = CheckInStatus.CONFLICT
    default_message = "Attendance was already recorded by a concurrent request."


class StorageFailure(AttendanceError):
    status = CheckInStatus.INTERNAL_ERROR
    default_message = "Could not update attendance record. Try again."

    def __init__(self, message: Optional[str] = None, *, token: Optional[str] = None):
        super().__init__(message)
        # Set when issuance created the session but fan-out failed.
        self.token = token
