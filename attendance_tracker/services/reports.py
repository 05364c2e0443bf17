"""Read-only projections over sessions, the ledger and the student directory."""
import io
from typing import Literal

import pandas as pd

from attendance_tracker.exceptions import SessionNotFound
from attendance_tracker.models.attendance import AttendanceEntryOut, CheckInRecord, SessionCheckIn
from attendance_tracker.models.session import SessionOut
from attendance_tracker.models.student import SectionGroup
from attendance_tracker.stores.base import AttendanceLedger, SessionRegistry, StudentDirectory

ReportFormat = Literal["csv", "excel"]


class AttendanceReports:
    def __init__(self, sessions: SessionRegistry, ledger: AttendanceLedger, directory: StudentDirectory):
        self._sessions = sessions
        self._ledger = ledger
        self._directory = directory

    async def list_sessions(self) -> list[SessionOut]:
        return [SessionOut.from_session(s) for s in await self._sessions.list_all()]

    async def check_in_records(self, token: str) -> list[CheckInRecord]:
        """Students who actually checked in to the session."""
        records = await self._ledger.list_for_session(token, present_only=True)
        return [CheckInRecord(user_id=r.student_id, check_in_time=r.join_time) for r in records]

    async def all_check_ins(self) -> list[SessionCheckIn]:
        results = []
        for session in await self._sessions.list_all():
            for record in await self._ledger.list_for_session(session.token, present_only=True):
                results.append(
                    SessionCheckIn(
                        session_token=session.token,
                        session_name=session.name,
                        user_id=record.student_id,
                        check_in_time=record.join_time,
                    )
                )
        return results

    async def student_history(self, student_id: str) -> list[AttendanceEntryOut]:
        return [AttendanceEntryOut.from_record(r) for r in await self._ledger.list_for_student(student_id)]

    async def students_by_section(self) -> list[SectionGroup]:
        grouped: dict[str, list] = {}
        for student in await self._directory.list_all():
            grouped.setdefault(student.section, []).append(student)
        return [SectionGroup(section=section, students=grouped[section]) for section in sorted(grouped)]

    async def session_roster(self, token: str) -> pd.DataFrame:
        """Everyone the session was issued to, present or not."""
        session = await self._sessions.find_by_token(token)
        if session is None:
            raise SessionNotFound()

        rows = []
        for record in await self._ledger.list_for_session(token):
            student = await self._directory.get(record.student_id)
            rows.append(
                {
                    "Session": session.name,
                    "Section": session.section,
                    "Student ID": record.student_id,
                    "Student Name": student.full_name if student else "Unknown",
                    "Present": record.present,
                    "Join Time": record.join_time,
                }
            )
        columns = ["Session", "Section", "Student ID", "Student Name", "Present", "Join Time"]
        return pd.DataFrame(rows, columns=columns)

    async def export_roster(self, token: str, format: ReportFormat = "csv") -> bytes:
        df = await self.session_roster(token)
        if format == "csv":
            stream = io.StringIO()
            df.to_csv(stream, index=False)
            return stream.getvalue().encode("utf-8")
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        return output.getvalue()
