"""In-memory stores with the same per-document atomicity as the MongoDB ones.

Each mutating method yields to the event loop first (standing in for the
network hop) and then checks and mutates without awaiting, so under asyncio
the check-and-mutate is indivisible the way a single Mongo update is.
"""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timedelta
from typing import Optional

from attendance_tracker.clock import utcnow
from attendance_tracker.exceptions import StorageFailure
from attendance_tracker.models.attendance import AttendanceRecord
from attendance_tracker.models.session import Session
from attendance_tracker.models.student import StudentOut


class InMemorySessionRegistry:
    def __init__(self):
        self.by_token: dict[str, Session] = {}

    async def create(self, *, section: str, name: str, created_by: str, ttl: timedelta) -> Session:
        await asyncio.sleep(0)
        now = utcnow()
        session = Session(
            id=uuid.uuid4().hex,
            token=str(uuid.uuid4()),
            name=name,
            section=section,
            created_by=created_by,
            created_at=now,
            expires_at=now + ttl,
            active=True,
        )
        self.by_token[session.token] = session
        return session

    async def find_by_token(self, token: str) -> Optional[Session]:
        await asyncio.sleep(0)
        return self.by_token.get(token)

    async def list_all(self):
        await asyncio.sleep(0)
        return sorted(self.by_token.values(), key=lambda s: s.created_at, reverse=True)


class InMemoryAttendanceLedger:
    def __init__(self):
        self.entries: dict[tuple[str, str], AttendanceRecord] = {}

    async def insert_pending(self, *, student_id: str, session_token: str, session_name: str) -> bool:
        await asyncio.sleep(0)
        key = (student_id, session_token)
        if key in self.entries:
            return False
        self.entries[key] = AttendanceRecord(
            student_id=student_id,
            session_token=session_token,
            session_name=session_name,
        )
        return True

    async def get(self, *, student_id: str, session_token: str) -> Optional[AttendanceRecord]:
        await asyncio.sleep(0)
        record = self.entries.get((student_id, session_token))
        return record.model_copy() if record else None

    async def mark_present(self, *, student_id: str, session_token: str, join_time: datetime) -> int:
        await asyncio.sleep(0)
        key = (student_id, session_token)
        record = self.entries.get(key)
        if record is None or record.present:
            return 0
        self.entries[key] = record.model_copy(update={"present": True, "join_time": join_time})
        return 1

    async def list_for_session(self, session_token: str, *, present_only: bool = False):
        await asyncio.sleep(0)
        return [
            r.model_copy()
            for (_, token), r in self.entries.items()
            if token == session_token and (r.present or not present_only)
        ]

    async def list_for_student(self, student_id: str):
        await asyncio.sleep(0)
        return [r.model_copy() for (sid, _), r in self.entries.items() if sid == student_id]

    def records_for(self, session_token: str) -> list[AttendanceRecord]:
        return [r for (_, token), r in self.entries.items() if token == session_token]


class FlakyAttendanceLedger(InMemoryAttendanceLedger):
    """Fails every pending insert after the first `fail_after` until healed."""

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after
        self.failing = True
        self._inserts = 0

    async def insert_pending(self, *, student_id: str, session_token: str, session_name: str) -> bool:
        if self.failing and self._inserts >= self.fail_after:
            raise StorageFailure("Could not create attendance record.", token=session_token)
        self._inserts += 1
        return await super().insert_pending(
            student_id=student_id, session_token=session_token, session_name=session_name
        )


class InMemoryStudentDirectory:
    def __init__(self):
        self.students: dict[str, StudentOut] = {}

    def add(self, *, full_name: str, section: str, email: Optional[str] = None) -> StudentOut:
        student = StudentOut(
            id=uuid.uuid4().hex[:24],
            full_name=full_name,
            email=email or f"{full_name.lower()}@example.com",
            section=section,
        )
        self.students[student.id] = student
        return student

    def in_section(self, section: str) -> list[StudentOut]:
        return [s for s in self.students.values() if s.section == section]

    async def ids_in_section(self, section: str):
        await asyncio.sleep(0)
        return [s.id for s in self.in_section(section)]

    async def get(self, student_id: str) -> Optional[StudentOut]:
        await asyncio.sleep(0)
        return self.students.get(student_id)

    async def find_by_email(self, email: str) -> Optional[StudentOut]:
        await asyncio.sleep(0)
        return next((s for s in self.students.values() if s.email == email), None)

    async def list_all(self):
        await asyncio.sleep(0)
        return sorted(self.students.values(), key=lambda s: s.full_name)

    async def create(self, *, full_name: str, email: str, section: str) -> Optional[StudentOut]:
        await asyncio.sleep(0)
        if any(s.email == email for s in self.students.values()):
            return None
        return self.add(full_name=full_name, section=section, email=email)

    async def assign_section(self, student_id: str, section: str) -> Optional[StudentOut]:
        await asyncio.sleep(0)
        student = self.students.get(student_id)
        if student is None:
            return None
        self.students[student_id] = student.model_copy(update={"section": section})
        return self.students[student_id]
