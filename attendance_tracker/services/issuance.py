"""Token issuance: create a session, then fan pending entries out to its section."""
import logging
from datetime import timedelta
from typing import Optional

from attendance_tracker.exceptions import SessionNotFound, StorageFailure
from attendance_tracker.models.session import FanOutResult, TokenResponse
from attendance_tracker.services.ledger import fan_out_pending
from attendance_tracker.stores.base import AttendanceLedger, SessionRegistry, StudentDirectory

logger = logging.getLogger(__name__)

DEFAULT_TTL_MINUTES = 5


class TokenIssuer:
    def __init__(
        self,
        sessions: SessionRegistry,
        ledger: AttendanceLedger,
        directory: StudentDirectory,
        *,
        default_ttl_minutes: int = DEFAULT_TTL_MINUTES,
    ):
        self._sessions = sessions
        self._ledger = ledger
        self._directory = directory
        self._default_ttl_minutes = int(default_ttl_minutes)

    async def issue_token(
        self,
        admin_id: str,
        section: str,
        session_name: str,
        ttl_minutes: Optional[int] = None,
    ) -> TokenResponse:
        ttl_minutes = self._default_ttl_minutes if ttl_minutes is None else int(ttl_minutes)
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be positive")

        session = await self._sessions.create(
            section=section,
            name=session_name,
            created_by=admin_id,
            ttl=timedelta(minutes=ttl_minutes),
        )
        logger.info(f"Session {session.token} '{session_name}' issued for section {section} by {admin_id}")

        try:
            await fan_out_pending(
                self._ledger,
                self._directory,
                section=section,
                session_token=session.token,
                session_name=session.name,
            )
        except StorageFailure as e:
            # The session stays valid; fan-out can be re-run for the same token.
            logger.error(f"Fan-out failed for session {session.token}; retry with the same token: {e}")
            raise StorageFailure(
                f"Session created but attendance records could not be prepared. Retry fan-out for {session.token}.",
                token=session.token,
            ) from e

        return TokenResponse(token=session.token, ttl_minutes=ttl_minutes)

    async def retry_fan_out(self, token: str) -> FanOutResult:
        """Re-run fan-out for an existing session (manual recovery after a partial failure)."""
        session = await self._sessions.find_by_token(token)
        if session is None:
            raise SessionNotFound()
        created = await fan_out_pending(
            self._ledger,
            self._directory,
            section=session.section,
            session_token=session.token,
            session_name=session.name,
        )
        return FanOutResult(token=session.token, created=created)
