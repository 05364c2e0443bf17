"""Naive-UTC timestamps, matching what MongoDB hands back by default."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
