"""
Dependencies de FastAPI para inyeccion de BD y del servicio de leaderboard
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import Settings, get_settings
from app.database import get_database
from app.services.leaderboard_service import LeaderboardService


async def get_leaderboard_service(
    request: Request,
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> LeaderboardService:
    """
    Dependency que arma el LeaderboardService del request.

    El cache y el cliente del ledger viven en app.state (se crean en el
    lifespan) para que se compartan entre requests.
    """
    return LeaderboardService(
        db,
        discovery=getattr(request.app.state, "burn_discovery", None),
        cache=request.app.state.leaderboard_cache,
        settings=settings,
    )


async def require_admin_key(
    settings: Annotated[Settings, Depends(get_settings)],
    x_admin_key: Annotated[Optional[str], Header()] = None
) -> None:
    """
    Protege los endpoints de mantenimiento con el header X-Admin-Key.

    Si ADMIN_API_KEY no está configurada, no se exige nada (desarrollo).
    """
    if settings.admin_api_key and x_admin_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin key invalida",
        )


# Alias de tipos para que se vea mas limpio en los endpoints
Leaderboard = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
AdminKey = Depends(require_admin_key)
