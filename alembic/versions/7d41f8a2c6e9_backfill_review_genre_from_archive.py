"""backfill reviews.genre from archived snapshots

Revision ID: 7d41f8a2c6e9
Revises: 3b9e0c7a1d52
Create Date: 2026-10-12 09:31:47.208114

Reviews materialized before the genre column existed have no genre text.
Copy it from the snapshot sharing the review's id, leaving rows that already
have a genre untouched. Data only: downgrade is a no-op.
"""
from typing import Sequence

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '7d41f8a2c6e9'
down_revision: str | Sequence[str] | None = '3b9e0c7a1d52'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        UPDATE reviews
        SET genre = ar.review_json ->> 'genre'
        FROM archived_reviews ar
        WHERE reviews.id = ar.id
          AND ar.review_json ? 'genre'
          AND (reviews.genre IS NULL OR reviews.genre = '')
    """)


def downgrade() -> None:
    """Downgrade schema."""
    pass
