"""
Controlador de debug - Prueba la detección de burns contra el ledger

Devuelve los burns crudos que encuentra el discovery, sin agregar ni cachear.
"""

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from app.core.dependencies import Leaderboard
from app.models.burn import BurnEvent
from app.services.burn_discovery import AllPathsExhaustedError
from app.services.ledger_client import LedgerNotConfiguredError


router = APIRouter(prefix="/debug", tags=["debug"])


class BurnDebugResponse(BaseModel):
    """Burns detectados para un mint y el camino que los encontró."""
    mint: str
    burns: list[BurnEvent]
    count: int
    path: str
    fast_path_error: str | None = None


@router.get("/burns/{mint}", response_model=BurnDebugResponse)
async def debug_burns(
    mint: str,
    service: Leaderboard,
    limit: int = Query(50, ge=1, le=1000)
):
    """
    Ejecutar la detección de burns para un mint.
    """
    try:
        result = await service.discover_burns(mint, max_events=limit)
    except LedgerNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except AllPathsExhaustedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return BurnDebugResponse(
        mint=mint,
        burns=result.events,
        count=len(result.events),
        path=result.path.value,
        fast_path_error=result.fast_path_error,
    )
