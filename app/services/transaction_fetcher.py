"""
TransactionFetcher - Paginated signature listing and paced transaction fetch.

Listing errors propagate (they make the whole discovery path unusable).
Per-transaction errors are logged and skipped so one bad signature never
aborts a batch.
"""

from typing import AsyncIterator, Callable, Iterable, Optional

from app.core.logging import get_logger
from app.models.burn import TransactionSignature
from app.services.ledger_client import LedgerClient, LedgerError
from app.services.rate_limiter import RateLimiter

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 1000


class TransactionFetcher:
    def __init__(
        self,
        client: LedgerClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_delay: float = 0.2,
        max_pages: Optional[int] = None,
        fetch_delay: float = 0.05,
        chunk_size: int = 100,
        limiter_factory: Callable[[float], RateLimiter] = RateLimiter
    ):
        self.client = client
        self.page_size = page_size
        self.page_delay = page_delay
        self.max_pages = max_pages
        self.fetch_delay = fetch_delay
        self.chunk_size = max(1, chunk_size)
        self._make_limiter = limiter_factory

    # ============================================
    # SIGNATURE LISTING
    # ============================================

    async def list_asset_signatures(self, token_id: str) -> list[TransactionSignature]:
        """
        All signatures the asset index holds for a token.

        Pages until a page comes back short or empty (or max_pages is hit).
        Raises RemoteApiUnavailableError if any page request fails.
        """
        limiter = self._make_limiter(self.page_delay)
        signatures: list[TransactionSignature] = []
        page = 1

        while True:
            await limiter.acquire()
            batch = await self.client.get_signatures_for_asset(token_id, page=page, limit=self.page_size)

            if not batch:
                logger.debug("signature_page_empty", mint=token_id, page=page)
                break

            signatures.extend(batch)
            logger.debug(
                "signature_page_fetched",
                mint=token_id,
                page=page,
                count=len(batch),
                total=len(signatures),
            )

            if len(batch) < self.page_size:
                break
            if self.max_pages is not None and page >= self.max_pages:
                logger.warning("signature_page_cap_reached", mint=token_id, pages=page)
                break
            page += 1

        return signatures

    async def list_address_signatures(
        self,
        address: str,
        max_signatures: int
    ) -> list[TransactionSignature]:
        """
        Brute-force scan of signatures touching an address, newest first.

        Follows `before` cursors until the ledger runs out, a short page
        comes back, or max_signatures were collected.
        """
        limiter = self._make_limiter(self.page_delay)
        signatures: list[TransactionSignature] = []
        seen: set[str] = set()
        before: Optional[str] = None

        while len(signatures) < max_signatures:
            page_limit = min(self.page_size, max_signatures - len(signatures))
            await limiter.acquire()
            batch = await self.client.get_signatures_for_address(address, limit=page_limit, before=before)

            for sig in batch:
                if sig.signature not in seen:
                    seen.add(sig.signature)
                    signatures.append(sig)

            if len(batch) < page_limit:
                break
            before = batch[-1].signature

        return signatures[:max_signatures]

    # ============================================
    # TRANSACTION FETCH
    # ============================================

    async def fetch_parsed(self, signature: str) -> Optional[dict]:
        """Fetch one parsed transaction; failures are logged and return None."""
        try:
            return await self.client.get_parsed_transaction(signature)
        except LedgerError as e:
            logger.warning("transaction_fetch_failed", signature=signature, error=str(e))
            return None

    async def iter_parsed(
        self,
        signatures: Iterable[TransactionSignature],
        chunk_delay: float = 0.0
    ) -> AsyncIterator[tuple[TransactionSignature, dict]]:
        """
        Yield (signature, parsed transaction) pairs one call at a time.

        Signatures the node cannot return (None or failed fetch) are skipped.
        The consumer can stop iterating at any point and no further calls
        are made.
        """
        limiter = self._make_limiter(self.fetch_delay)
        pending = list(signatures)

        for start in range(0, len(pending), self.chunk_size):
            if start > 0:
                await limiter.pause(chunk_delay)

            for sig in pending[start:start + self.chunk_size]:
                await limiter.acquire()
                parsed = await self.fetch_parsed(sig.signature)
                if parsed is None:
                    continue
                yield sig, parsed
