"""
Pydantic models for author and book payloads.
Create payloads carry every field as optional so that presence checks
produce catalog messages; update payloads are explicit partial-update
structs where an absent field is left untouched and an explicit null
clears it.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CatalogPayload(BaseModel):
    """Base payload accepting camelCase keys on the wire."""

    class Config:
        """Pydantic configuration."""
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True
        extra = "ignore"

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the client actually sent, keyed by storage name."""
        return self.model_dump(exclude_unset=True)


class AuthorCreate(CatalogPayload):
    """Body of ``POST /authors``."""
    name: Optional[str] = Field(None, description="Author name")
    email: Optional[str] = Field(None, description="Unique contact email")
    bio: Optional[str] = Field(None, description="Short biography")
    nationality: Optional[str] = Field(None, description="Nationality")
    birth_year: Optional[int] = Field(None, description="Year of birth")

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "name": "Gabriel García Márquez",
                "email": "gabo@example.com",
                "bio": "Colombian novelist",
                "nationality": "Colombiana",
                "birthYear": 1927,
            }
        }


class AuthorUpdate(AuthorCreate):
    """Body of ``PUT /authors/{id}``."""


class BookCreate(CatalogPayload):
    """Body of ``POST /books``."""
    title: Optional[str] = Field(None, description="Book title")
    description: Optional[str] = Field(None, description="Book description")
    isbn: Optional[str] = Field(None, description="Unique ISBN")
    published_year: Optional[int] = Field(None, description="Year of publication")
    genre: Optional[str] = Field(None, description="Genre")
    pages: Optional[int] = Field(None, description="Page count")
    author_id: Optional[str] = Field(None, description="Owning author id")

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "title": "Cien años de soledad",
                "description": "La historia de la familia Buendía",
                "isbn": "978-0307474728",
                "publishedYear": 1967,
                "genre": "Realismo mágico",
                "pages": 471,
                "authorId": "6650f1c2a3b4c5d6e7f80912",
            }
        }


class BookUpdate(BookCreate):
    """Body of ``PUT /books/{id}``."""


class AuthorRecord(BaseModel):
    """Author as stored in the ``authors`` collection."""
    id: str
    name: str
    email: str
    bio: Optional[str] = None
    nationality: Optional[str] = None
    birth_year: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class BookRecord(BaseModel):
    """Book as stored in the ``books`` collection."""
    id: str
    title: str
    description: Optional[str] = None
    isbn: Optional[str] = None
    published_year: Optional[int] = None
    genre: Optional[str] = None
    pages: Optional[int] = None
    author_id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
