"""
models/types.py — Column types shared by the table definitions.

UTCDateTime stores timezone-aware UTC timestamps. PostgreSQL keeps the
offset; SQLite drops it, so naive values read back are tagged as UTC.
Every created_at / updated_at / joined_at column uses it, which keeps
serialised timestamps identical between the write and later reads.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: datetime | None, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
