"""Seed a default student if not present."""
import logging

from attendance_tracker.config import settings
from attendance_tracker.stores.base import StudentDirectory

logger = logging.getLogger(__name__)

DEFAULT_STUDENT_EMAIL = "riyamehta@gmail.com"
DEFAULT_STUDENT_NAME = "Riya Mehta"


async def seed_default_student(directory: StudentDirectory) -> None:
    existing = await directory.find_by_email(DEFAULT_STUDENT_EMAIL)
    if existing:
        return
    student = await directory.create(
        full_name=DEFAULT_STUDENT_NAME,
        email=DEFAULT_STUDENT_EMAIL,
        section=settings.default_section,
    )
    if student is None:
        return
    logger.info(f"Inserted default student {student.email} ({student.id}) into section {student.section}")
