import os

# Settings are read at import time; keep the dev secret check out of the way.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from tests.fakes import InMemoryAttendanceLedger, InMemorySessionRegistry, InMemoryStudentDirectory


@pytest.fixture
def registry():
    return InMemorySessionRegistry()


@pytest.fixture
def ledger():
    return InMemoryAttendanceLedger()


@pytest.fixture
def directory():
    d = InMemoryStudentDirectory()
    for name in ("Asha", "Ben", "Chen"):
        d.add(full_name=name, section="A")
    d.add(full_name="Dara", section="B")
    return d
