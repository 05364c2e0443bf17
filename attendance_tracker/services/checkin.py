"""Student check-in: PENDING -> PRESENT, at most once per (student, token)."""
import logging
from datetime import datetime
from typing import Callable

from attendance_tracker.clock import utcnow
from attendance_tracker.exceptions import (
    AlreadyCheckedIn,
    CheckInStatus,
    ConcurrentConflict,
    NotEligible,
    SessionExpired,
    SessionNotFound,
)
from attendance_tracker.models.attendance import CheckInResponse
from attendance_tracker.stores.base import AttendanceLedger, SessionRegistry

logger = logging.getLogger(__name__)


class CheckInService:
    def __init__(
        self,
        sessions: SessionRegistry,
        ledger: AttendanceLedger,
        *,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._sessions = sessions
        self._ledger = ledger
        self._clock = clock

    async def check_in(self, token: str, student_id: str) -> CheckInResponse:
        session = await self._sessions.find_by_token(token)
        if session is None:
            raise SessionNotFound()

        now = self._clock()
        if not session.is_open(now):
            raise SessionExpired()

        # Advisory only: picks the right message for the common cases. The
        # conditional write below is what prevents double recording.
        record = await self._ledger.get(student_id=student_id, session_token=token)
        if record is None:
            raise NotEligible()
        if record.present:
            raise AlreadyCheckedIn()

        modified = await self._ledger.mark_present(student_id=student_id, session_token=token, join_time=now)
        if modified == 0:
            logger.warning(f"Lost check-in race for student {student_id}, session {token}")
            raise ConcurrentConflict()

        logger.info(f"Student {student_id} checked in to session {token}")
        return CheckInResponse(
            message=f"Attendance recorded successfully for {session.name}",
            status=CheckInStatus.OK,
        )
