"""Admin: issue check-in tokens and review who attended."""
from typing import List, Literal

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from attendance_tracker.api.deps import AdminOnly, Issuer, Reports
from attendance_tracker.models.attendance import CheckInRecord, SessionCheckIn
from attendance_tracker.models.session import FanOutResult, SessionOut, TokenResponse

router = APIRouter()


@router.post("/generate-token", response_model=TokenResponse)
async def generate_token(
    admin: AdminOnly,
    issuer: Issuer,
    section: str = Query(..., min_length=1),
    session_name: str = Query(..., alias="sessionName", min_length=1),
):
    """Open a check-in window for a section and prepare a pending record for each of its students."""
    section = section.strip()
    session_name = session_name.strip()
    if not section or not session_name:
        raise HTTPException(status_code=400, detail="section and sessionName must not be blank")
    return await issuer.issue_token(admin.user_id, section, session_name)


@router.get("/sessions", response_model=List[SessionOut])
async def list_sessions(admin: AdminOnly, reports: Reports):
    return await reports.list_sessions()


@router.post("/sessions/{token}/fan-out", response_model=FanOutResult)
async def retry_fan_out(token: str, admin: AdminOnly, issuer: Issuer):
    """Fill in pending records a failed issuance left out. Safe to repeat."""
    return await issuer.retry_fan_out(token)


@router.get("/attendance", response_model=List[SessionCheckIn])
async def list_all_check_ins(admin: AdminOnly, reports: Reports):
    return await reports.all_check_ins()


@router.get("/attendance/{token}", response_model=List[CheckInRecord])
async def list_session_check_ins(token: str, admin: AdminOnly, reports: Reports):
    return await reports.check_in_records(token)


@router.get("/attendance/{token}/report")
async def download_session_report(
    token: str,
    admin: AdminOnly,
    reports: Reports,
    format: Literal["csv", "excel"] = Query("csv"),
):
    """Download the session roster with each student's check-in state."""
    content = await reports.export_roster(token, format)
    if format == "csv":
        return StreamingResponse(
            iter([content]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{token}.csv"},
        )
    return StreamingResponse(
        iter([content]),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=attendance_{token}.xlsx"},
    )
