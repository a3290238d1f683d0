"""
Entry point de la API
"""

import re
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import get_settings
from app.core.logging import get_logger
from app.database import Database, create_indexes
from app.services.burn_discovery import BurnDiscovery
from app.services.leaderboard_cache import LeaderboardCache
from app.services.ledger_client import LedgerClient, LedgerNotConfiguredError

from app.controllers.health_controller import router as health_router
from app.controllers.leaderboard_controller import router as leaderboard_router
from app.controllers.debug_controller import router as debug_router

settings = get_settings()
logger = get_logger(__name__)

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",")]
CORS_ORIGIN_REGEX = re.compile(r"https://.*\.vercel\.app") if settings.app_env == "production" else None


def is_allowed_origin(origin: str) -> bool:
    """Check if origin is allowed by explicit list or regex pattern."""
    if not origin:
        return False
    if origin in CORS_ORIGINS:
        return True
    if CORS_ORIGIN_REGEX and CORS_ORIGIN_REGEX.match(origin):
        return True
    return False


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Custom CORS middleware that handles OPTIONS preflight BEFORE routing.

    FastAPI's query parameter validation would otherwise reject OPTIONS
    requests with 400.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        # Handle preflight OPTIONS request IMMEDIATELY
        if request.method == "OPTIONS":
            if is_allowed_origin(origin):
                return Response(
                    status_code=200,
                    headers={
                        "Access-Control-Allow-Origin": origin,
                        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, PATCH",
                        "Access-Control-Allow-Headers": "Authorization, Content-Type, Accept, Origin, X-Requested-With, X-Admin-Key",
                        "Access-Control-Allow-Credentials": "true",
                        "Access-Control-Max-Age": "86400",  # Cache preflight for 24 hours
                    }
                )
            else:
                # Origin not allowed
                return Response(status_code=403, content="Origin not allowed")

        # For non-OPTIONS requests, proceed normally and add CORS headers to response
        response = await call_next(request)

        if is_allowed_origin(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"

        return response


def init_ledger(app: FastAPI, http_client: httpx.AsyncClient) -> None:
    """
    Crea el discovery de burns y lo guarda en app.state

    Sin API key de Helius la app arranca igual: los leaderboards se sirven
    desde la base de datos con dataSource=database_fallback.
    """
    try:
        client = LedgerClient.from_settings(settings, http_client=http_client)
    except LedgerNotConfiguredError as e:
        logger.warning("ledger_disabled", reason=str(e))
        app.state.burn_discovery = None
        return

    app.state.burn_discovery = BurnDiscovery.from_settings(client, settings)
    logger.info("ledger_enabled", network=settings.resolved_network)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    await create_indexes()  # idempotente, Mongo ignora los que ya existen
    async with httpx.AsyncClient(timeout=settings.ledger_request_timeout_seconds) as http_client:
        init_ledger(app, http_client)
        yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Burn Leaderboard API",
    description="Backend del leaderboard de burns de tokens por creador",
    version="1.0.0",
    lifespan=lifespan
)

# El caché vive lo mismo que el proceso, compartido entre requests
app.state.leaderboard_cache = LeaderboardCache(ttl_seconds=settings.leaderboard_cache_ttl_seconds)
app.state.burn_discovery = None

# Add custom CORS middleware (handles OPTIONS before routing)
app.add_middleware(CORSMiddleware)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(leaderboard_router)
app.include_router(debug_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Burn Leaderboard API",
        "version": "1.0.0",
        "docs": "/docs"  # Link a la documentación interactiva de Swagger
    }
