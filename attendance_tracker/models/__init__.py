"""Beanie document models and Pydantic schemas."""
from attendance_tracker.models.session import Session, ClassSession, TokenResponse, SessionOut, FanOutResult
from attendance_tracker.models.student import Student, StudentCreate, StudentOut, SectionAssign, SectionGroup
from attendance_tracker.models.attendance import (
    AttendanceRecord,
    AttendanceEntry,
    AttendanceEntryOut,
    CheckInRecord,
    CheckInRequest,
    CheckInResponse,
    SessionCheckIn,
)

__all__ = [
    "Session",
    "ClassSession",
    "TokenResponse",
    "SessionOut",
    "FanOutResult",
    "Student",
    "StudentCreate",
    "StudentOut",
    "SectionAssign",
    "SectionGroup",
    "AttendanceRecord",
    "AttendanceEntry",
    "AttendanceEntryOut",
    "CheckInRecord",
    "CheckInRequest",
    "CheckInResponse",
    "SessionCheckIn",
]
