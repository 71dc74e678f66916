"""
Portable column types.

PostgreSQL stores list columns as TEXT[] and archive snapshots as JSONB; other
dialects (SQLite in the test suite) fall back to plain JSON.
"""

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

TextList = JSON().with_variant(ARRAY(Text()), "postgresql")
JsonDocument = JSON().with_variant(JSONB(), "postgresql")
