"""Storage contracts the attendance core is written against.

Every mutating method must map onto one atomic single-document operation in
the backing store. Nothing here may be implemented as a read followed by a
dependent write.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Protocol, Sequence

from attendance_tracker.models.attendance import AttendanceRecord
from attendance_tracker.models.session import Session
from attendance_tracker.models.student import StudentOut


class SessionRegistry(Protocol):
    async def create(self, *, section: str, name: str, created_by: str, ttl: timedelta) -> Session:
        """Persist a new active session with a fresh random token."""
        raise NotImplementedError

    async def find_by_token(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    async def list_all(self) -> Sequence[Session]:
        raise NotImplementedError


class AttendanceLedger(Protocol):
    async def insert_pending(self, *, student_id: str, session_token: str, session_name: str) -> bool:
        """Insert a pending entry unless one exists; True only if this call created it."""
        raise NotImplementedError

    async def get(self, *, student_id: str, session_token: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def mark_present(self, *, student_id: str, session_token: str, join_time: datetime) -> int:
        """Flip a pending entry to present; returns the modified count (0 or 1)."""
        raise NotImplementedError

    async def list_for_session(self, session_token: str, *, present_only: bool = False) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


class StudentDirectory(Protocol):
    async def ids_in_section(self, section: str) -> Sequence[str]:
        raise NotImplementedError

    async def get(self, student_id: str) -> Optional[StudentOut]:
        raise NotImplementedError

    async def find_by_email(self, email: str) -> Optional[StudentOut]:
        raise NotImplementedError

    async def list_all(self) -> Sequence[StudentOut]:
        raise NotImplementedError

    async def create(self, *, full_name: str, email: str, section: str) -> Optional[StudentOut]:
        """None when the email is already registered."""
        raise NotImplementedError

    async def assign_section(self, student_id: str, section: str) -> Optional[StudentOut]:
        raise NotImplementedError
