"""Attendance ledger: one entry per (student, session token)."""
from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, IndexModel

from attendance_tracker.clock import utcnow
from attendance_tracker.exceptions import CheckInStatus


class AttendanceRecord(BaseModel):
    """Pending until the student checks in; present exactly once after that."""

    student_id: str
    session_token: str
    session_name: str
    present: bool = False
    join_time: Optional[datetime] = None


class AttendanceEntry(Document):
    student_id: str
    session_token: str
    session_name: str
    present: bool = False
    join_time: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "attendance_entries"
        indexes = [
            IndexModel(
                [("student_id", ASCENDING), ("session_token", ASCENDING)],
                unique=True,
                name="student_session_unique",
            ),
            IndexModel([("session_token", ASCENDING), ("present", ASCENDING)]),
        ]

    def to_record(self) -> AttendanceRecord:
        return AttendanceRecord(
            student_id=self.student_id,
            session_token=self.session_token,
            session_name=self.session_name,
            present=self.present,
            join_time=self.join_time,
        )


class CheckInRequest(BaseModel):
    token: str


class CheckInResponse(BaseModel):
    message: str
    status: CheckInStatus


class CheckInRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    check_in_time: Optional[datetime] = None


class SessionCheckIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_token: str
    session_name: str
    user_id: str
    check_in_time: Optional[datetime] = None


class AttendanceEntryOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    session_name: str
    present: bool
    join_time: Optional[datetime] = None

    @classmethod
    def from_record(cls, r: AttendanceRecord) -> "AttendanceEntryOut":
        return cls(session_id=r.session_token, session_name=r.session_name, present=r.present, join_time=r.join_time)
