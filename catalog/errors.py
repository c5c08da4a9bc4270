"""
Error taxonomy shared by the data access layer and the API.

The store never leaks driver error codes: duplicate keys, missing
documents and malformed ids are translated into the types below and
classified by ``ErrorKind``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of catalog failures."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class CatalogError(Exception):
    """Base class for catalog errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, entity: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.field = field


class InvalidInputError(CatalogError):
    """Input failed validation before reaching the store."""
    kind = ErrorKind.VALIDATION


class NotFoundError(CatalogError):
    """Referenced document does not exist."""
    kind = ErrorKind.NOT_FOUND


class ConflictError(CatalogError):
    """A unique constraint was violated."""
    kind = ErrorKind.CONFLICT
