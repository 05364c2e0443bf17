"""Student check-in."""
from fastapi import APIRouter

from attendance_tracker.api.deps import CheckIns, StudentOnly
from attendance_tracker.models.attendance import CheckInRequest, CheckInResponse

router = APIRouter()


@router.post("/check-in", response_model=CheckInResponse)
async def check_in(data: CheckInRequest, student: StudentOnly, check_ins: CheckIns):
    # Failures are AttendanceError subclasses, rendered by the app-level handler.
    return await check_ins.check_in(data.token.strip(), student.user_id)
