"""Student directory: sections, section assignment, own attendance history."""
from typing import List

from fastapi import APIRouter, HTTPException

from attendance_tracker.api.deps import AdminOnly, Directory, Reports, StudentOnly
from attendance_tracker.config import settings
from attendance_tracker.models.attendance import AttendanceEntryOut
from attendance_tracker.models.student import SectionAssign, SectionGroup, StudentCreate, StudentOut

router = APIRouter()


@router.get("/sections", response_model=List[SectionGroup])
async def list_students_by_section(admin: AdminOnly, reports: Reports):
    return await reports.students_by_section()


@router.post("/", response_model=StudentOut, status_code=201)
async def create_student(data: StudentCreate, admin: AdminOnly, directory: Directory):
    existing = await directory.find_by_email(data.email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already in use.")
    section = (data.section or "").strip() or settings.default_section
    student = await directory.create(full_name=data.full_name, email=data.email, section=section)
    if student is None:
        raise HTTPException(status_code=400, detail="Email already in use.")
    return student


@router.put("/assign/{student_id}", response_model=StudentOut)
async def assign_section(student_id: str, data: SectionAssign, admin: AdminOnly, directory: Directory):
    """Move a student to another section. Sessions already issued are not affected."""
    new_section = data.new_section.strip()
    if not new_section:
        raise HTTPException(status_code=400, detail="newSection must not be blank")
    student = await directory.assign_section(student_id, new_section)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.get("/me/attendance", response_model=List[AttendanceEntryOut])
async def my_attendance(student: StudentOnly, reports: Reports):
    return await reports.student_history(student.user_id)
