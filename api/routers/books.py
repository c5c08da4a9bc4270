"""
Book endpoints.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.database import APIDatabaseService
from api.dependencies import get_db_service
from api.models import BookSearchResponse, BookWithAuthorResponse, ErrorResponse, MessageResponse
from catalog.errors import ConflictError, InvalidInputError, NotFoundError
from catalog.models import BookCreate, BookUpdate
from catalog.search import BookSearchParams

logger = structlog.get_logger(__name__)

BOOK_NOT_FOUND = "Libro no encontrado"
AUTHOR_MISSING = "El autor especificado no existe"
ISBN_TAKEN = "El ISBN ya existe"

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def _not_found(error: NotFoundError) -> HTTPException:
    """404 naming whichever document was missing."""
    detail = AUTHOR_MISSING if error.entity == "author" else BOOK_NOT_FOUND
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.post(
    "",
    response_model=BookWithAuthorResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_book(
    payload: BookCreate,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    Create a book.

    - **title**: required, at least 3 characters
    - **authorId**: required, must reference an existing author
    - **pages**: optional, at least 1
    - **isbn**: optional, unique
    """
    try:
        return await db_service.create_book(payload)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise _not_found(e)
    except ConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ISBN_TAKEN)
    except Exception as e:
        logger.error("Failed to create book", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear libro"
        )


@router.get("/search", response_model=BookSearchResponse)
async def search_books(
    search: Optional[str] = Query(None, description="Title contains (case-insensitive)"),
    genre: Optional[str] = Query(None, description="Exact genre"),
    author_name: Optional[str] = Query(None, alias="authorName", description="Author name contains"),
    page: Optional[str] = Query(None, description="Page number (starts from 1)"),
    limit: Optional[str] = Query(None, description="Items per page (1-50)"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="title, publishedYear or createdAt"),
    order: Optional[str] = Query(None, description="asc or desc"),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    Search books with filtering, sorting, and pagination.

    Only supplied filters are applied. Out-of-range page and limit
    values are clamped rather than rejected.
    """
    try:
        params = BookSearchParams(
            search=search,
            genre=genre,
            author_name=author_name,
            page=page,
            limit=limit,
            sort_by=sort_by,
            order=order
        )
        return await db_service.search_books(params)
    except Exception as e:
        logger.error("Failed to search books", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error en la búsqueda de libros"
        )


@router.get("/{book_id}", response_model=BookWithAuthorResponse)
async def get_book(
    book_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Get a book with its author."""
    try:
        return await db_service.get_book(book_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to get book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener libro"
        )


@router.put(
    "/{book_id}",
    response_model=BookWithAuthorResponse,
    responses={409: {"model": ErrorResponse}},
)
async def update_book(
    book_id: str,
    payload: BookUpdate,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Update only the supplied book fields."""
    try:
        return await db_service.update_book(book_id, payload)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise _not_found(e)
    except ConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ISBN_TAKEN)
    except Exception as e:
        logger.error("Failed to update book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar libro"
        )


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Delete a book."""
    try:
        await db_service.delete_book(book_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to delete book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar libro"
        )
    return MessageResponse(message="Libro eliminado correctamente")
