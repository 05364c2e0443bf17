"""MongoDB-backed stores (Beanie documents, raw collection calls for the atomic writes)."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional, Sequence

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from attendance_tracker.clock import utcnow
from attendance_tracker.exceptions import StorageFailure
from attendance_tracker.models.attendance import AttendanceEntry, AttendanceRecord
from attendance_tracker.models.session import ClassSession, Session
from attendance_tracker.models.student import Student, StudentOut

logger = logging.getLogger(__name__)


def _object_id(value: str) -> Optional[PydanticObjectId]:
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoSessionRegistry:
    async def create(self, *, section: str, name: str, created_by: str, ttl: timedelta) -> Session:
        now = utcnow()
        doc = ClassSession(
            token=str(uuid.uuid4()),
            name=name,
            section=section,
            created_by=created_by,
            created_at=now,
            expires_at=now + ttl,
            active=True,
        )
        try:
            await doc.insert()
        except PyMongoError as e:
            logger.error(f"Failed to persist session for section {section}: {e}")
            raise StorageFailure("Could not create session.") from e
        return doc.to_session()

    async def find_by_token(self, token: str) -> Optional[Session]:
        try:
            doc = await ClassSession.find_one(ClassSession.token == token)
        except PyMongoError as e:
            raise StorageFailure("Could not load session.") from e
        return doc.to_session() if doc else None

    async def list_all(self) -> Sequence[Session]:
        try:
            docs = await ClassSession.find_all().sort([("created_at", DESCENDING)]).to_list()
        except PyMongoError as e:
            raise StorageFailure("Could not list sessions.") from e
        return [d.to_session() for d in docs]


class MongoAttendanceLedger:
    async def insert_pending(self, *, student_id: str, session_token: str, session_name: str) -> bool:
        # Upsert against the unique (student_id, session_token) index: the
        # existence check and the insert are one server-side operation.
        collection = AttendanceEntry.get_motor_collection()
        try:
            result = await collection.update_one(
                {"student_id": student_id, "session_token": session_token},
                {
                    "$setOnInsert": {
                        "session_name": session_name,
                        "present": False,
                        "join_time": None,
                        "created_at": utcnow(),
                    }
                },
                upsert=True,
            )
        except DuplicateKeyError:
            # Two upserts raced on an empty slot; the other one inserted.
            return False
        except PyMongoError as e:
            logger.error(f"Pending insert failed for student {student_id}, session {session_token}: {e}")
            raise StorageFailure("Could not create attendance record.", token=session_token) from e
        return result.upserted_id is not None

    async def get(self, *, student_id: str, session_token: str) -> Optional[AttendanceRecord]:
        try:
            doc = await AttendanceEntry.find_one(
                AttendanceEntry.student_id == student_id,
                AttendanceEntry.session_token == session_token,
            )
        except PyMongoError as e:
            raise StorageFailure("Could not load attendance record.") from e
        return doc.to_record() if doc else None

    async def mark_present(self, *, student_id: str, session_token: str, join_time: datetime) -> int:
        collection = AttendanceEntry.get_motor_collection()
        try:
            result = await collection.update_one(
                {"student_id": student_id, "session_token": session_token, "present": False},
                {"$set": {"present": True, "join_time": join_time}},
            )
        except PyMongoError as e:
            logger.error(f"Check-in write failed for student {student_id}, session {session_token}: {e}")
            raise StorageFailure() from e
        return result.modified_count

    async def list_for_session(self, session_token: str, *, present_only: bool = False) -> Sequence[AttendanceRecord]:
        query = {"session_token": session_token}
        if present_only:
            query["present"] = True
        try:
            docs = await AttendanceEntry.find(query).sort("join_time").to_list()
        except PyMongoError as e:
            raise StorageFailure("Could not list attendance records.") from e
        return [d.to_record() for d in docs]

    async def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        try:
            docs = await AttendanceEntry.find(AttendanceEntry.student_id == student_id).sort("created_at").to_list()
        except PyMongoError as e:
            raise StorageFailure("Could not list attendance records.") from e
        return [d.to_record() for d in docs]


class MongoStudentDirectory:
    async def ids_in_section(self, section: str) -> Sequence[str]:
        try:
            students = await Student.find(Student.section == section).to_list()
        except PyMongoError as e:
            raise StorageFailure("Could not load students for section.") from e
        return [str(s.id) for s in students]

    async def get(self, student_id: str) -> Optional[StudentOut]:
        oid = _object_id(student_id)
        if oid is None:
            return None
        try:
            student = await Student.get(oid)
        except PyMongoError as e:
            raise StorageFailure("Could not load student.") from e
        return student.to_out() if student else None

    async def find_by_email(self, email: str) -> Optional[StudentOut]:
        try:
            student = await Student.find_one(Student.email == email)
        except PyMongoError as e:
            raise StorageFailure("Could not load student.") from e
        return student.to_out() if student else None

    async def list_all(self) -> Sequence[StudentOut]:
        try:
            students = await Student.find_all().sort("full_name").to_list()
        except PyMongoError as e:
            raise StorageFailure("Could not list students.") from e
        return [s.to_out() for s in students]

    async def create(self, *, full_name: str, email: str, section: str) -> Optional[StudentOut]:
        student = Student(full_name=full_name, email=email, section=section)
        try:
            await student.insert()
        except DuplicateKeyError:
            # Unique email index; another request registered it first.
            return None
        except PyMongoError as e:
            logger.error(f"Failed to create student {email}: {e}")
            raise StorageFailure("Could not create student.") from e
        return student.to_out()

    async def assign_section(self, student_id: str, section: str) -> Optional[StudentOut]:
        oid = _object_id(student_id)
        if oid is None:
            return None
        try:
            student = await Student.get(oid)
            if not student:
                return None
            # $set only the section; attendance entries are untouched by a move.
            await student.set({Student.section: section, Student.updated_at: utcnow()})
        except PyMongoError as e:
            raise StorageFailure("Could not update student section.") from e
        return student.to_out()
