"""MongoDB connection and Beanie document registration."""
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from attendance_tracker.config import settings
from attendance_tracker.models import AttendanceEntry, ClassSession, Student


_client = None


async def db_startup():
    """Connect to MongoDB and initialize Beanie ODM (creates the ledger's unique index)."""
    global _client
    _client = AsyncIOMotorClient(settings.mongodb_url)
    await init_beanie(
        database=_client[settings.mongodb_db_name],
        document_models=[
            Student,
            ClassSession,
            AttendanceEntry,
        ],
    )


async def db_shutdown():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        _client = None
