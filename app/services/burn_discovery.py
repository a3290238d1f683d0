"""
BurnDiscovery - Finds the burn events of a token, fast path first.

States:
- FAST_PATH: signatures from the Helius asset index, then classify.
- SLOW_PATH: signatures touching the mint address directly, then classify.
- EXHAUSTED: both paths failed; AllPathsExhaustedError is raised.
- DONE: events (possibly none) were determined.

The fast path escalates on any error and also when it finds zero burns,
because the asset index is eventually consistent and can miss recent
activity. Zero burns from the slow path is a confirmed empty result.
Escalation is the only retry: neither path is retried on its own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from app.core.config import Settings
from app.core.logging import get_logger
from app.models.burn import BurnEvent, TransactionSignature
from app.services.burn_classifier import BurnClassifier
from app.services.ledger_client import LedgerClient
from app.services.transaction_fetcher import TransactionFetcher

logger = get_logger(__name__)


class DiscoveryState(str, Enum):
    FAST_PATH = "fast_path"
    SLOW_PATH = "slow_path"
    EXHAUSTED = "exhausted"
    DONE = "done"


class AllPathsExhaustedError(Exception):
    """Raised when neither the fast nor the slow path could determine burns."""

    def __init__(self, token_id: str, fast_error: Optional[BaseException], slow_error: BaseException):
        self.token_id = token_id
        self.fast_error = fast_error
        self.slow_error = slow_error
        super().__init__(
            f"Could not determine burns for {token_id}: "
            f"fast path: {fast_error or 'no burns'}; slow path: {slow_error}"
        )


@dataclass
class DiscoveryResult:
    """Burn events (newest first) and the path that produced them."""

    events: list[BurnEvent]
    path: DiscoveryState
    fast_path_error: Optional[str] = None
    transitions: list[DiscoveryState] = field(default_factory=list)


class BurnDiscovery:
    def __init__(
        self,
        fetcher: TransactionFetcher,
        classifier: Optional[BurnClassifier] = None,
        slow_path_signature_limit: int = 1000,
        slow_path_chunk_delay: float = 1.0
    ):
        self.fetcher = fetcher
        self.classifier = classifier or BurnClassifier()
        self.slow_path_signature_limit = slow_path_signature_limit
        self.slow_path_chunk_delay = slow_path_chunk_delay

    @classmethod
    def from_settings(cls, client: LedgerClient, settings: Settings) -> "BurnDiscovery":
        fetcher = TransactionFetcher(
            client,
            page_size=settings.signature_page_size,
            page_delay=settings.signature_page_delay_seconds,
            max_pages=settings.signature_max_pages,
            fetch_delay=settings.transaction_fetch_delay_seconds,
            chunk_size=settings.transaction_chunk_size,
        )
        return cls(
            fetcher,
            classifier=BurnClassifier(settings.burn_sink_address),
            slow_path_signature_limit=settings.slow_path_signature_limit,
            slow_path_chunk_delay=settings.slow_path_chunk_delay_seconds,
        )

    async def discover(self, token_id: str, max_events: int = 1000) -> DiscoveryResult:
        """Run the fast path, escalating to the slow path when needed."""
        transitions = [DiscoveryState.FAST_PATH]
        fast_error: Optional[BaseException] = None

        try:
            events = await self._fast_path(token_id, max_events)
        except Exception as e:
            fast_error = e
            logger.warning("fast_path_failed", mint=token_id, error=str(e))
        else:
            if events:
                transitions.append(DiscoveryState.DONE)
                return DiscoveryResult(events, DiscoveryState.FAST_PATH, transitions=transitions)
            logger.info("fast_path_empty", mint=token_id)

        transitions.append(DiscoveryState.SLOW_PATH)
        try:
            events = await self._slow_path(token_id, max_events)
        except Exception as e:
            transitions.append(DiscoveryState.EXHAUSTED)
            logger.error("slow_path_failed", mint=token_id, error=str(e))
            raise AllPathsExhaustedError(token_id, fast_error, e) from e

        transitions.append(DiscoveryState.DONE)
        return DiscoveryResult(
            events,
            DiscoveryState.SLOW_PATH,
            fast_path_error=str(fast_error) if fast_error else None,
            transitions=transitions,
        )

    async def _fast_path(self, token_id: str, max_events: int) -> list[BurnEvent]:
        signatures = await self.fetcher.list_asset_signatures(token_id)
        logger.info("fast_path_signatures", mint=token_id, count=len(signatures))
        return await self._classify_all(token_id, signatures, max_events, chunk_delay=0.0)

    async def _slow_path(self, token_id: str, max_events: int) -> list[BurnEvent]:
        limit = min(max_events * 5, self.slow_path_signature_limit)
        signatures = await self.fetcher.list_address_signatures(token_id, max_signatures=limit)
        logger.info("slow_path_signatures", mint=token_id, count=len(signatures))
        return await self._classify_all(
            token_id,
            signatures,
            max_events,
            chunk_delay=self.slow_path_chunk_delay,
        )

    async def _classify_all(
        self,
        token_id: str,
        signatures: list[TransactionSignature],
        max_events: int,
        chunk_delay: float
    ) -> list[BurnEvent]:
        events: list[BurnEvent] = []
        seen: set[str] = set()

        if max_events <= 0:
            return events

        async for sig, parsed in self.fetcher.iter_parsed(signatures, chunk_delay=chunk_delay):
            if sig.signature in seen:
                continue
            seen.add(sig.signature)

            event = self.classifier.classify(parsed, token_id, signature=sig.signature)
            if event is None:
                continue

            logger.debug(
                "burn_found",
                mint=token_id,
                signature=sig.signature,
                wallet=event.wallet,
                amount=event.amount,
                kind=event.kind,
            )
            events.append(event)
            if len(events) >= max_events:
                break

        events.sort(key=lambda e: (-e.timestamp, e.signature))
        logger.info("burns_classified", mint=token_id, count=len(events))
        return events
