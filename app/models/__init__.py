from .burn import AdvertisingMetadata, BurnEvent, TransactionSignature, WalletTotal
from .session import Session, SessionSummary, SessionWindow
from .leaderboard import DataSource, LeaderboardEntry, LeaderboardResponse
from .user import UserProfile

__all__ = [
    "AdvertisingMetadata",
    "BurnEvent",
    "TransactionSignature",
    "WalletTotal",
    "Session",
    "SessionSummary",
    "SessionWindow",
    "DataSource",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "UserProfile",
]
