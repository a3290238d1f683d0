"""
Configuración de la app cargada desde variables de entorno (.env)

Todo lo que varía entre desarrollo/producción va aquí
"""

import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "burn_leaderboard"  # Nombre de la base de datos

    # App
    app_env: str = "development"  # o "production"
    debug: bool = False

    # CORS - de dónde pueden venir los requests
    cors_origins: str = "http://localhost:3000"  # URLs separadas por coma

    # Logging - "json" en producción, "console" para desarrollo local
    log_level: str = "INFO"
    log_format: str = "json"

    # Clave para los endpoints de invalidación de caché (header X-Admin-Key)
    # Si no se define, los endpoints quedan abiertos
    admin_api_key: Optional[str] = None

    # ==================== Solana / Helius ====================
    # La API key puede venir sola o dentro de SOLANA_RPC_URL (?api-key=...)
    helius_api_key: Optional[str] = None
    solana_rpc_url: Optional[str] = None
    solana_network: Optional[Literal["mainnet", "devnet"]] = None

    # Dirección "sumidero" usada por convención para quemar vía transfer
    burn_sink_address: str = "11111111111111111111111111111112"

    # Timeout de cada llamada remota (segundos)
    ledger_request_timeout_seconds: float = 30.0

    # Paginación de firmas (fast path y slow path)
    signature_page_size: int = 1000
    signature_page_delay_seconds: float = 0.2  # mínimo 150ms entre páginas
    signature_max_pages: Optional[int] = None  # None = sin límite

    # Fetch de transacciones, una por una (límite de llamadas por segundo)
    transaction_fetch_delay_seconds: float = 0.05  # mínimo 40ms entre llamadas
    transaction_chunk_size: int = 100
    slow_path_chunk_delay_seconds: float = 1.0
    slow_path_signature_limit: int = 1000

    # Máximo de burns a descubrir por token antes de agregar
    discovery_max_events: int = 1000

    # ==================== Leaderboard ====================
    leaderboard_cache_ttl_seconds: float = 30.0
    leaderboard_default_limit: int = 10
    leaderboard_max_limit: int = 100

    # "legacy": perfiles por wallet / "current": perfiles por userId vinculado
    leaderboard_aggregation_mode: Literal["legacy", "current"] = "legacy"

    # Agrega metadata publicitaria y perfil de usuario a cada entrada
    leaderboard_enrichment_enabled: bool = True

    # Montos <= 0 no suman al leaderboard
    exclude_non_positive_amounts: bool = True

    class Config:
        env_file = ".env"  # Lee desde el archivo .env
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignora campos extras del .env que no estén en el modelo

    @property
    def resolved_helius_api_key(self) -> Optional[str]:
        """API key explícita o extraída de SOLANA_RPC_URL"""
        if self.helius_api_key:
            return self.helius_api_key
        if self.solana_rpc_url:
            match = re.search(r"api-key=([^&?]+)", self.solana_rpc_url)
            if match:
                return match.group(1)
        return None

    @property
    def resolved_network(self) -> str:
        if self.solana_network:
            return self.solana_network
        if self.solana_rpc_url and "devnet" in self.solana_rpc_url:
            return "devnet"
        return "mainnet"

    @property
    def ledger_rpc_url(self) -> Optional[str]:
        """
        URL del endpoint JSON-RPC de Helius

        Se arma siempre con el host de Helius porque getSignaturesForAsset
        es un método DAS que los nodos RPC genéricos no exponen.
        """
        api_key = self.resolved_helius_api_key
        if not api_key:
            return None
        host = "mainnet.helius-rpc.com" if self.resolved_network == "mainnet" else "devnet.helius-rpc.com"
        return f"https://{host}/?api-key={api_key}"


@lru_cache()
def get_settings() -> Settings:
    """Retorna la instancia de configuración (cacheada para no releerla)"""
    return Settings()
