"""
SQLModel table models.

For modifications:
1. Edit the appropriate model file in app/models/
2. Create an Alembic migration to reflect the changes
3. Use Alembic to manage all schema changes going forward
"""

from app.models.archived_review import ArchivedReviews
from app.models.category import Categories
from app.models.game import Games
from app.models.genre import Genres
from app.models.review import Reviews
from app.models.wip_review import WipReviews

__all__ = [
    # Catalog entities
    "Games",
    "Reviews",
    "ArchivedReviews",
    # Classification
    "Categories",
    "Genres",
    # Scratch pad
    "WipReviews",
]
