"""Fan-out of pending attendance entries to a section."""
import logging

from attendance_tracker.stores.base import AttendanceLedger, StudentDirectory

logger = logging.getLogger(__name__)


async def fan_out_pending(
    ledger: AttendanceLedger,
    directory: StudentDirectory,
    *,
    section: str,
    session_token: str,
    session_name: str,
) -> int:
    """
    Give every student currently in `section` a pending entry for the session.

    Each student is one insert-if-absent, so a retry after a partial failure,
    or two fan-outs racing on the same token, only fill the gaps. Returns the
    number of entries this call created.
    """
    student_ids = await directory.ids_in_section(section)
    created = 0
    for student_id in student_ids:
        if await ledger.insert_pending(
            student_id=student_id,
            session_token=session_token,
            session_name=session_name,
        ):
            created += 1
    logger.info(
        f"Fan-out for session {session_token}: {created} created, "
        f"{len(student_ids) - created} already present (section {section})"
    )
    return created
