"""Storage contracts and their MongoDB implementations."""
from attendance_tracker.stores.base import AttendanceLedger, SessionRegistry, StudentDirectory
from attendance_tracker.stores.mongo import MongoAttendanceLedger, MongoSessionRegistry, MongoStudentDirectory

__all__ = [
    "AttendanceLedger",
    "SessionRegistry",
    "StudentDirectory",
    "MongoAttendanceLedger",
    "MongoSessionRegistry",
    "MongoStudentDirectory",
]
