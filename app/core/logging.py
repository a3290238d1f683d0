"""
Logging estructurado con structlog

JSON en producción (LOG_FORMAT=json), legible en consola para desarrollo.
Todos los servicios usan get_logger(__name__) y loguean eventos con nombre
snake_case más pares clave/valor (mint=..., signature=..., path=...).
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

from app.core.config import get_settings


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Timestamp ISO 8601 en UTC si no viene uno"""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configura structlog (se ejecuta una vez al importar este módulo)

    Se puede llamar de nuevo (por ejemplo en tests) para cambiar el nivel.
    """
    level_value = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
    ]
    if fmt.strip().lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Logger con el nombre del módulo ligado como 'logger'"""
    if name:
        return structlog.get_logger(name).bind(logger=name)
    return structlog.get_logger()


# Configuración única al importar, con LOG_LEVEL / LOG_FORMAT de Settings
if not structlog.is_configured():
    _settings = get_settings()
    configure_logging(_settings.log_level, _settings.log_format)
