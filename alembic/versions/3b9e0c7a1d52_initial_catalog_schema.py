"""initial catalog schema

Revision ID: 3b9e0c7a1d52
Revises:
Create Date: 2026-10-12 09:14:03.512377

Creates the catalog tables. For a database that already holds the tables
created by hand, run `alembic stamp 3b9e0c7a1d52` instead of upgrading.
"""
from typing import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3b9e0c7a1d52'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'games',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('game_name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_games_game_name', 'games', ['game_name'], unique=False)

    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'uq_categories_name_lower', 'categories', [sa.text('lower(name)')], unique=True
    )

    op.create_table(
        'genres',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name='fk_genres_category_id', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_genres_category_id', 'genres', ['category_id'], unique=False)
    op.create_index('uq_genres_name_lower', 'genres', [sa.text('lower(name)')], unique=True)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('game_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('positive_points', postgresql.ARRAY(sa.Text()), server_default='{}', nullable=False),
        sa.Column('negative_points', postgresql.ARRAY(sa.Text()), server_default='{}', nullable=False),
        sa.Column('tags', postgresql.ARRAY(sa.Text()), server_default='{}', nullable=False),
        sa.Column('genre', sa.Text(), nullable=True),
        sa.Column('genre_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['game_id'], ['games.id'], name='fk_reviews_game_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['genre_id'], ['genres.id'], name='fk_reviews_genre_id', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reviews_game_id', 'reviews', ['game_id'], unique=False)
    op.create_index('ix_reviews_genre_id', 'reviews', ['genre_id'], unique=False)

    op.create_table(
        'archived_reviews',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('review_json', postgresql.JSONB(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_archived_reviews_created_at', 'archived_reviews', ['created_at'], unique=False)

    op.create_table(
        'wip_reviews',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('game_name', sa.String(length=255), nullable=False),
        sa.Column('remarks', sa.Text(), server_default='', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('wip_reviews')
    op.drop_index('ix_archived_reviews_created_at', table_name='archived_reviews')
    op.drop_table('archived_reviews')
    op.drop_index('ix_reviews_genre_id', table_name='reviews')
    op.drop_index('ix_reviews_game_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_index('uq_genres_name_lower', table_name='genres')
    op.drop_index('ix_genres_category_id', table_name='genres')
    op.drop_table('genres')
    op.drop_index('uq_categories_name_lower', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_games_game_name', table_name='games')
    op.drop_table('games')
