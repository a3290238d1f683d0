"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB.
Colecciones: creators, sessions, burns, users
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            if not settings.mongodb_uri:
                raise ValueError("MONGODB_URI not found in environment variables")

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )

            # Nombre de la base de datos
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("mongodb_connected", database=settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("mongodb_disconnected")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency para inyectar la DB"""
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes():
    """
    Crea los índices que usan las queries del leaderboard

    Llamar una vez al hacer deploy o en un script de inicialización
    """
    db = Database.get_db()

    # Índices para sessions
    await db.sessions.create_index([("creatorMint", 1), ("isActive", 1)])
    await db.sessions.create_index([("creatorMint", 1), ("startTime", -1)])

    # Índices para burns (agregación por wallet y enriquecimiento)
    await db.burns.create_index([("creatorMint", 1), ("sessionId", 1)])
    await db.burns.create_index([("wallet", 1), ("creatorMint", 1), ("ts", -1)])

    # Índices para users
    await db.users.create_index("wallet", unique=True)

    logger.info("mongodb_indexes_created")
