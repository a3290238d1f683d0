from .burn_repository import BurnRepository
from .creator_repository import CreatorRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository

__all__ = [
    "BurnRepository",
    "CreatorRepository",
    "SessionRepository",
    "UserRepository",
]
