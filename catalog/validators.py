"""
Input validation and normalization for author and book payloads.

Every check runs before the store is touched and raises
``InvalidInputError`` carrying the message returned to the client.
"""

import re
from typing import Any, Dict

from .errors import InvalidInputError
from .models import AuthorCreate, AuthorUpdate, BookCreate, BookUpdate

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_TITLE_LENGTH = 3
MIN_PAGES = 1

AUTHOR_REQUIRED_FIELDS = ("name", "email")
BOOK_REQUIRED_FIELDS = ("title", "author_id")
OPTIONAL_TEXT_FIELDS = ("bio", "nationality", "description", "isbn", "genre")

MSG_AUTHOR_REQUIRED = "Nombre y correo son obligatorios"
MSG_INVALID_EMAIL = "Email inválido"
MSG_BOOK_REQUIRED = "Título y autor son obligatorios"
MSG_SHORT_TITLE = "El título debe tener al menos 3 caracteres"
MSG_INVALID_PAGES = "El número de páginas debe ser mayor a 0"


def is_valid_email(email: str) -> bool:
    """Check an email address against the catalog's format rule."""
    return bool(EMAIL_PATTERN.match(email))


def _normalize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Turn blank optional text fields into nulls."""
    for field in OPTIONAL_TEXT_FIELDS:
        if field in data and data[field] == "":
            data[field] = None
    return data


def validate_author_create(payload: AuthorCreate) -> Dict[str, Any]:
    """
    Validate a new author.

    Only the presence of name and email is checked here; the email
    format rule applies to updates.

    Returns:
        Normalized field mapping ready for the store
    """
    data = _normalize(payload.changes())
    if not data.get("name") or not data.get("email"):
        raise InvalidInputError(MSG_AUTHOR_REQUIRED, entity="author")
    return data


def validate_author_update(payload: AuthorUpdate) -> Dict[str, Any]:
    """Validate a partial author update and return the changed fields."""
    data = _normalize(payload.changes())

    for field in AUTHOR_REQUIRED_FIELDS:
        if field in data and not data[field]:
            raise InvalidInputError(MSG_AUTHOR_REQUIRED, entity="author", field=field)

    if "email" in data and not is_valid_email(data["email"]):
        raise InvalidInputError(MSG_INVALID_EMAIL, entity="author", field="email")

    return data


def _check_book_fields(data: Dict[str, Any]) -> None:
    if "title" in data and len(data["title"]) < MIN_TITLE_LENGTH:
        raise InvalidInputError(MSG_SHORT_TITLE, entity="book", field="title")

    if data.get("pages") is not None and data["pages"] < MIN_PAGES:
        raise InvalidInputError(MSG_INVALID_PAGES, entity="book", field="pages")


def validate_book_create(payload: BookCreate) -> Dict[str, Any]:
    """Validate a new book and return its normalized fields."""
    data = _normalize(payload.changes())
    if not data.get("title") or not data.get("author_id"):
        raise InvalidInputError(MSG_BOOK_REQUIRED, entity="book")
    _check_book_fields(data)
    return data


def validate_book_update(payload: BookUpdate) -> Dict[str, Any]:
    """Validate a partial book update and return the changed fields."""
    data = _normalize(payload.changes())

    if "title" in data and data["title"] is None:
        raise InvalidInputError(MSG_SHORT_TITLE, entity="book", field="title")
    if "author_id" in data and not data["author_id"]:
        raise InvalidInputError(MSG_BOOK_REQUIRED, entity="book", field="author_id")

    _check_book_fields(data)
    return data
