"""
LeaderboardCache - Short-lived in-memory cache of leaderboard responses.

Shields the ledger API from clients that poll the leaderboard every few
seconds. One instance lives for the whole process (created in the app
lifespan) and is injected into LeaderboardService.

- Key: (token_id, session_id or "all", limit, use_fast_path)
- Expiry is lazy: checked on get(), there is no background sweep.
- Entries are only ever replaced whole, so concurrent get/put on the same
  event loop never see a half-written value. Concurrent misses may each
  recompute; the last write wins.
"""

import time
from typing import Callable, NamedTuple, Optional

from app.models.leaderboard import LeaderboardResponse

DEFAULT_TTL_SECONDS = 30.0


class CacheKey(NamedTuple):
    token_id: str
    session_id: str
    limit: int
    use_fast_path: bool


class _Entry(NamedTuple):
    value: LeaderboardResponse
    stored_at: float


class LeaderboardCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, _Entry] = {}

    @staticmethod
    def make_key(
        token_id: str,
        session_id: Optional[str],
        limit: int,
        use_fast_path: bool
    ) -> CacheKey:
        return CacheKey(token_id, session_id or "all", limit, use_fast_path)

    def get(self, key: CacheKey) -> Optional[LeaderboardResponse]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            # Expired entries behave exactly like a miss
            self._entries.pop(key, None)
            return None
        return entry.value

    def put(self, key: CacheKey, value: LeaderboardResponse) -> None:
        self._entries[key] = _Entry(value, self._clock())

    def invalidate(self, token_id: str) -> int:
        """Drop every entry for a token. Returns how many were removed."""
        stale = [key for key in list(self._entries) if key.token_id == token_id]
        for key in stale:
            self._entries.pop(key, None)
        return len(stale)

    def invalidate_all(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
