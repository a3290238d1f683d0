"""
Controlador de leaderboards - Endpoints de clasificación por token

Los leaderboards se calculan a partir de los burns del ledger y se cachean
unos segundos. Si el ledger no responde se sirven desde la base de datos.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.dependencies import AdminKey, Leaderboard
from app.models.leaderboard import LeaderboardResponse
from app.services.leaderboard_service import (
    InvalidSessionIdError,
    LeaderboardServiceError,
    SessionNotFoundError,
)


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])
settings = get_settings()


class CacheInvalidationResponse(BaseModel):
    """Resultado de invalidar el caché."""
    token_id: Optional[str] = None
    removed: Optional[int] = None
    status: str = "ok"


@router.delete("/cache", response_model=CacheInvalidationResponse, dependencies=[AdminKey])
async def invalidate_all_leaderboards(service: Leaderboard):
    """
    Vaciar el caché de todos los leaderboards.
    """
    service.invalidate_all()
    return CacheInvalidationResponse()


@router.delete("/{token_id}/cache", response_model=CacheInvalidationResponse, dependencies=[AdminKey])
async def invalidate_leaderboard(token_id: str, service: Leaderboard):
    """
    Vaciar el caché de un token (todas las sesiones y límites).
    """
    removed = service.invalidate_cache(token_id)
    return CacheInvalidationResponse(token_id=token_id, removed=removed)


@router.get("/{token_id}", response_model=LeaderboardResponse)
async def get_leaderboard(
    token_id: str,
    service: Leaderboard,
    limit: int = Query(settings.leaderboard_default_limit, ge=1, le=settings.leaderboard_max_limit),
    session_id: Optional[str] = Query(None, alias="sessionId", description="Filter by session"),
    use_fast_path: bool = Query(True, alias="useFastPath", description="Read burns from the ledger")
):
    """
    Obtener el leaderboard de burns de un token.

    Sin sessionId se usa la sesión actual del creador (si hay una).
    El campo dataSource indica de dónde salieron los datos:
    blockchain, database o database_fallback.
    """
    try:
        return await service.get_leaderboard(
            token_id,
            limit=limit,
            session_id=session_id,
            use_fast_path=use_fast_path,
        )
    except InvalidSessionIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except LeaderboardServiceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
