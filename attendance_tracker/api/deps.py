"""Shared dependencies: bearer identity, role checks and service wiring."""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from attendance_tracker.clock import utcnow
from attendance_tracker.config import settings
from attendance_tracker.services import AttendanceReports, CheckInService, TokenIssuer
from attendance_tracker.stores import MongoAttendanceLedger, MongoSessionRegistry, MongoStudentDirectory
from attendance_tracker.stores.base import AttendanceLedger, SessionRegistry, StudentDirectory

security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: Role


def create_access_token(subject: str, role: str, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes or settings.jwt_access_token_expire_minutes
    expire = utcnow() + timedelta(minutes=minutes)
    to_encode = {"sub": subject, "role": role, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Identity:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User must be logged in to check attendance.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = jwt.decode(credentials.credentials, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise HTTPException(status_code=403, detail="Unknown role")
    return Identity(user_id=user_id, role=role)


def require_roles(*allowed: Role):
    async def checker(identity: Annotated[Identity, Depends(get_current_identity)]) -> Identity:
        if identity.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return identity

    return checker


def get_session_registry() -> SessionRegistry:
    return MongoSessionRegistry()


def get_attendance_ledger() -> AttendanceLedger:
    return MongoAttendanceLedger()


def get_student_directory() -> StudentDirectory:
    return MongoStudentDirectory()


def get_token_issuer(
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
    ledger: Annotated[AttendanceLedger, Depends(get_attendance_ledger)],
    directory: Annotated[StudentDirectory, Depends(get_student_directory)],
) -> TokenIssuer:
    return TokenIssuer(sessions, ledger, directory, default_ttl_minutes=settings.session_ttl_minutes)


def get_check_in_service(
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
    ledger: Annotated[AttendanceLedger, Depends(get_attendance_ledger)],
) -> CheckInService:
    return CheckInService(sessions, ledger)


def get_reports(
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
    ledger: Annotated[AttendanceLedger, Depends(get_attendance_ledger)],
    directory: Annotated[StudentDirectory, Depends(get_student_directory)],
) -> AttendanceReports:
    return AttendanceReports(sessions, ledger, directory)


# Type aliases for route injection
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
AdminOnly = Annotated[Identity, Depends(require_roles(Role.ADMIN))]
StudentOnly = Annotated[Identity, Depends(require_roles(Role.STUDENT))]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]
CheckIns = Annotated[CheckInService, Depends(get_check_in_service)]
Reports = Annotated[AttendanceReports, Depends(get_reports)]
Directory = Annotated[StudentDirectory, Depends(get_student_directory)]
