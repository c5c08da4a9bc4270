"""
Author endpoints.
"""

from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from api.database import APIDatabaseService
from api.dependencies import get_db_service
from api.models import (
    AuthorBooksResponse, AuthorDetailResponse, AuthorListItem, AuthorResponse,
    AuthorStatsResponse, ErrorResponse, MessageResponse
)
from catalog.errors import ConflictError, InvalidInputError, NotFoundError
from catalog.models import AuthorCreate, AuthorUpdate

logger = structlog.get_logger(__name__)

AUTHOR_NOT_FOUND = "Autor no encontrado"

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=List[AuthorListItem])
async def list_authors(db_service: APIDatabaseService = Depends(get_db_service)):
    """List all authors, newest first, with their book counts."""
    try:
        return await db_service.list_authors()
    except Exception as e:
        logger.error("Failed to list authors", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener autores"
        )


@router.post(
    "",
    response_model=AuthorResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_author(
    payload: AuthorCreate,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    Create an author.

    - **name**: required
    - **email**: required, unique
    - **bio**, **nationality**, **birthYear**: optional
    """
    try:
        return await db_service.create_author(payload)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe un autor con ese correo"
        )
    except Exception as e:
        logger.error("Failed to create author", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear autor"
        )


@router.get("/{author_id}", response_model=AuthorDetailResponse)
async def get_author(
    author_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Get an author with their books and book count."""
    try:
        return await db_service.get_author(author_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to get author", author_id=author_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener autor"
        )


@router.put(
    "/{author_id}",
    response_model=AuthorDetailResponse,
    responses={409: {"model": ErrorResponse}},
)
async def update_author(
    author_id: str,
    payload: AuthorUpdate,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Update only the supplied author fields."""
    try:
        return await db_service.update_author(author_id, payload)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
    except ConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="El email ya está registrado"
        )
    except Exception as e:
        logger.error("Failed to update author", author_id=author_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar autor"
        )


@router.delete("/{author_id}", response_model=MessageResponse)
async def delete_author(
    author_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Delete an author together with their books."""
    try:
        await db_service.delete_author(author_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to delete author", author_id=author_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar autor"
        )
    return MessageResponse(message="Autor eliminado correctamente")


@router.get("/{author_id}/books", response_model=AuthorBooksResponse)
async def get_author_books(
    author_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """List an author's books, newest publication first."""
    try:
        return await db_service.get_author_books(author_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to get author books", author_id=author_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener libros del autor"
        )


@router.get("/{author_id}/stats", response_model=AuthorStatsResponse)
async def get_author_stats(
    author_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Statistics over an author's books."""
    try:
        return await db_service.get_author_stats(author_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to get author stats", author_id=author_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener estadísticas del autor"
        )
