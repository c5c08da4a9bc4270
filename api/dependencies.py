"""
Request dependencies shared by the routers.
"""

from fastapi import HTTPException, Request, status

from api.database import APIDatabaseService


def get_db_service(request: Request) -> APIDatabaseService:
    """Return the database service created at startup."""
    db_service = getattr(request.app.state, "db_service", None)
    if db_service is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Servicio de base de datos no disponible"
        )
    return db_service
