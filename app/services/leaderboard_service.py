"""
LeaderboardService - Builds token burn leaderboards.

Burns are read from the ledger (through BurnDiscovery), filtered to the
session window, summed per wallet and ranked. When the ledger cannot be
read at all, the stored burn records are aggregated instead and the
response is labelled "database_fallback". The only errors a caller sees are
about the session id it supplied.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import Settings, get_settings
from app.core.logging import get_logger
from app.models.burn import BurnEvent, WalletTotal
from app.models.leaderboard import DataSource, LeaderboardEntry, LeaderboardResponse
from app.models.session import Session, SessionWindow
from app.repositories.burn_repository import BurnRepository
from app.repositories.creator_repository import CreatorRepository
from app.repositories.session_repository import SessionRepository
from app.repositories.user_repository import UserRepository
from app.services.burn_discovery import AllPathsExhaustedError, BurnDiscovery, DiscoveryResult
from app.services.leaderboard_cache import LeaderboardCache
from app.services.ledger_client import LedgerNotConfiguredError

logger = get_logger(__name__)

# Candidates kept before enrichment, as a multiple of the requested limit
OVERFETCH_FACTOR = 2


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class InvalidSessionIdError(LeaderboardServiceError):
    """Raised when the supplied sessionId is not a valid ObjectId."""
    pass


class SessionNotFoundError(LeaderboardServiceError):
    """Raised when the supplied sessionId does not exist."""
    pass


def aggregate_burns(
    events: Iterable[BurnEvent],
    exclude_non_positive: bool = True
) -> list[WalletTotal]:
    """
    Sum burn amounts per wallet and sort them for ranking.

    Order: total descending, then wallet ascending. The result does not
    depend on the order of `events`.
    """
    totals: dict[str, int] = {}
    for event in events:
        if exclude_non_positive and event.amount <= 0:
            continue
        totals[event.wallet] = totals.get(event.wallet, 0) + event.amount

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [WalletTotal(wallet=wallet, total_burned=total) for wallet, total in ordered]


def rank_entries(totals: Iterable[WalletTotal], limit: int) -> list[LeaderboardEntry]:
    """Assign rank 1..n by position and truncate to limit."""
    return [
        LeaderboardEntry(rank=idx + 1, wallet=t.wallet, total_burned=t.total_burned, user_id=t.user_id)
        for idx, t in enumerate(list(totals)[:limit])
    ]


class LeaderboardService:
    def __init__(
        self,
        db: Optional[AsyncIOMotorDatabase],
        discovery: Optional[BurnDiscovery],
        cache: LeaderboardCache,
        settings: Optional[Settings] = None,
        *,
        session_repo: Optional[SessionRepository] = None,
        creator_repo: Optional[CreatorRepository] = None,
        burn_repo: Optional[BurnRepository] = None,
        user_repo: Optional[UserRepository] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.settings = settings or get_settings()
        self.discovery = discovery
        self.cache = cache
        self.session_repo = session_repo or SessionRepository(db)
        self.creator_repo = creator_repo or CreatorRepository(db)
        self.burn_repo = burn_repo or BurnRepository(db)
        self.user_repo = user_repo or UserRepository(db)
        self._now = now

    # ============================================
    # PUBLIC API
    # ============================================

    async def get_leaderboard(
        self,
        token_id: str,
        limit: int = 10,
        session_id: Optional[str] = None,
        use_fast_path: bool = True
    ) -> LeaderboardResponse:
        """
        Get the ranked burn leaderboard for a token.

        - session_id given: only burns inside that session's window count.
        - session_id omitted: the creator's current session is used if there
          is one, otherwise the full history.
        - use_fast_path=False: read stored burn records, not the ledger.

        Raises InvalidSessionIdError / SessionNotFoundError for a bad
        session_id. Every other failure degrades the data source instead.
        """
        key = self.cache.make_key(token_id, session_id, limit, use_fast_path)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        session = await self._resolve_session(token_id, session_id)

        if not use_fast_path:
            response = await self._database_leaderboard(token_id, session, limit, "database")
        else:
            response = await self._blockchain_leaderboard(token_id, session, limit)

        self.cache.put(key, response)
        return response

    async def discover_burns(self, token_id: str, max_events: Optional[int] = None) -> DiscoveryResult:
        """Raw discovery result for a token (newest burns first)."""
        if self.discovery is None:
            raise LedgerNotConfiguredError("Ledger access is not configured")
        return await self.discovery.discover(
            token_id,
            max_events=max_events or self.settings.discovery_max_events,
        )

    async def get_total_burned(self, token_id: str) -> int:
        """Total amount burned for a token across its discovered history."""
        result = await self.discover_burns(token_id)
        return sum(event.amount for event in result.events if event.amount > 0)

    def invalidate_cache(self, token_id: str) -> int:
        return self.cache.invalidate(token_id)

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()

    # ============================================
    # SESSION RESOLUTION
    # ============================================

    async def _resolve_session(self, token_id: str, session_id: Optional[str]) -> Optional[Session]:
        if session_id is not None:
            if not ObjectId.is_valid(session_id):
                raise InvalidSessionIdError("Invalid sessionId format")
            session = await self.session_repo.find_session_by_id(session_id)
            if session is None:
                raise SessionNotFoundError("Session not found")
            return session

        pointer = await self.creator_repo.get_current_session_pointer(token_id)
        if pointer:
            session = await self.session_repo.find_session_by_id(pointer)
            if session is not None:
                return session
        return await self.session_repo.find_active_session(token_id)

    # ============================================
    # DATA SOURCES
    # ============================================

    async def _blockchain_leaderboard(
        self,
        token_id: str,
        session: Optional[Session],
        limit: int
    ) -> LeaderboardResponse:
        if self.discovery is None:
            logger.warning("ledger_not_configured", mint=token_id)
            return await self._database_leaderboard(token_id, session, limit, "database_fallback")

        try:
            result = await self.discovery.discover(token_id, max_events=self.settings.discovery_max_events)
        except AllPathsExhaustedError as e:
            logger.error("blockchain_leaderboard_failed", mint=token_id, error=str(e))
            return await self._database_leaderboard(token_id, session, limit, "database_fallback")

        events = result.events
        if session is not None:
            events = self._filter_to_window(events, session.window())

        totals = aggregate_burns(events, exclude_non_positive=self.settings.exclude_non_positive_amounts)
        # Burns without an attributable wallet cannot be ranked
        candidates = [t for t in totals[:limit * OVERFETCH_FACTOR] if t.wallet]

        logger.info(
            "blockchain_leaderboard_built",
            mint=token_id,
            path=result.path.value,
            burns=len(events),
            wallets=len(totals),
        )

        entries = rank_entries(candidates, limit)
        entries = await self._enrich(token_id, entries)

        return LeaderboardResponse(
            leaderboard=entries,
            session=session.summary() if session else None,
            token_id=token_id,
            data_source="blockchain",
        )

    async def _database_leaderboard(
        self,
        token_id: str,
        session: Optional[Session],
        limit: int,
        data_source: DataSource
    ) -> LeaderboardResponse:
        totals = await self.burn_repo.sum_burns_by_wallet(
            token_id,
            session_id=session.id if session else None,
            limit=limit,
        )
        entries = rank_entries(totals, limit)
        entries = await self._enrich(token_id, entries)

        return LeaderboardResponse(
            leaderboard=entries,
            session=session.summary() if session else None,
            token_id=token_id,
            data_source=data_source,
        )

    def _filter_to_window(self, events: list[BurnEvent], window: SessionWindow) -> list[BurnEvent]:
        now = self._now()
        return [event for event in events if window.contains(event.timestamp, now)]

    # ============================================
    # ENRICHMENT
    # ============================================

    async def _enrich(self, token_id: str, entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
        """Attach advertising metadata and profile info. Failures are not fatal."""
        if not self.settings.leaderboard_enrichment_enabled or not entries:
            return entries

        try:
            return [await self._enrich_entry(token_id, entry) for entry in entries]
        except Exception as e:
            logger.warning("leaderboard_enrichment_failed", mint=token_id, error=str(e))
            return entries

    async def _enrich_entry(self, token_id: str, entry: LeaderboardEntry) -> LeaderboardEntry:
        updates: dict = {}

        advertising = await self.burn_repo.find_advertising_metadata(entry.wallet, token_id)
        if advertising is not None:
            updates["advertising"] = advertising

        profile = None
        if self.settings.leaderboard_aggregation_mode == "current":
            user_id = entry.user_id or await self.burn_repo.find_linked_user_id(entry.wallet, token_id)
            if user_id:
                profile = await self.user_repo.find_user_profile(user_id)
        if profile is None:
            profile = await self.user_repo.find_user_profile_by_wallet(entry.wallet)

        if profile is not None and profile.is_public:
            updates.update({
                "user_id": profile.id,
                "username": profile.username,
                "display_name": profile.display_name,
                "profile_image_url": profile.profile_image_url,
            })

        return entry.model_copy(update=updates) if updates else entry
