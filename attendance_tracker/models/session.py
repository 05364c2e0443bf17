"""Time-boxed check-in sessions issued by admins for one section."""
from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from attendance_tracker.clock import utcnow


class Session(BaseModel):
    """A check-in window; the token is what students present."""

    id: Optional[str] = None
    token: str
    name: str
    section: str
    created_by: str
    created_at: datetime
    expires_at: datetime
    active: bool = True  # stored, never toggled; expiry is time based

    def is_open(self, now: datetime) -> bool:
        return self.active and now <= self.expires_at


class ClassSession(Document):
    token: Indexed(str, unique=True)
    name: str
    section: Indexed(str)
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    active: bool = True

    class Settings:
        name = "sessions"

    def to_session(self) -> Session:
        return Session(
            id=str(self.id),
            token=self.token,
            name=self.name,
            section=self.section,
            created_by=self.created_by,
            created_at=self.created_at,
            expires_at=self.expires_at,
            active=self.active,
        )


class TokenResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    ttl_minutes: int


class SessionOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: Optional[str] = None
    session_token: str
    session_name: str
    section: str
    created_by: str
    created_at: datetime
    expires_at: datetime
    active: bool

    @classmethod
    def from_session(cls, s: Session) -> "SessionOut":
        return cls(
            session_id=s.id,
            session_token=s.token,
            session_name=s.name,
            section=s.section,
            created_by=s.created_by,
            created_at=s.created_at,
            expires_at=s.expires_at,
            active=s.active,
        )


class FanOutResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    created: int
