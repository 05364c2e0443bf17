"""Student identity and profile; attendance lives in the ledger, keyed by student id."""
from datetime import datetime

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from attendance_tracker.clock import utcnow


class Student(Document):
    full_name: str
    email: Indexed(EmailStr, unique=True)
    section: Indexed(str)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "students"
        use_state_management = True

    def to_out(self) -> "StudentOut":
        return StudentOut(id=str(self.id), full_name=self.full_name, email=self.email, section=self.section)


class StudentCreate(BaseModel):
    full_name: str
    email: EmailStr
    section: str | None = None


class StudentOut(BaseModel):
    id: str
    full_name: str
    email: str
    section: str


class SectionAssign(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    new_section: str


class SectionGroup(BaseModel):
    section: str
    students: list[StudentOut]
