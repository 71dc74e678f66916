"""
Domain error taxonomy.

Services raise these; the HTTP layer maps each category to a status code
(see the exception handlers registered in app/main.py):

- ValidationError -> 400 (caller must correct the input, retrying will not help)
- NotFoundError   -> 404
- ConflictError   -> 409
- StorageError    -> 500 (may be transient; the enclosing transaction was rolled back)
"""


class CatalogError(Exception):
    """Base class for errors surfaced by the catalog services."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """A required field is missing, empty, or of the wrong shape."""

    status_code = 400


class NotFoundError(CatalogError):
    """A referenced archive/review/category/genre/WIP id does not exist."""

    status_code = 404


class ConflictError(CatalogError):
    """A uniqueness violation the service chooses to surface."""

    status_code = 409


class StorageError(CatalogError):
    """Underlying database failure not otherwise classified."""

    status_code = 500
