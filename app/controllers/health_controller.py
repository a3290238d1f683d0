"""
Controlador de salud - Endpoint de comprobación del servicio
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    database: str
    ledger: str


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Endpoint de verificación de estado.

    Comprueba que la base de datos esté conectada y que el acceso al
    ledger esté configurado (sin él, los leaderboards salen de la base).
    """
    db_status = "connected" if Database.db is not None else "disconnected"
    ledger_status = "configured" if getattr(request.app.state, "burn_discovery", None) else "not_configured"

    return HealthResponse(
        status="ok",
        database=db_status,
        ledger=ledger_status
    )
