"""
LedgerClient - Async JSON-RPC client for the Helius / Solana ledger API.

Wraps the three calls the burn discovery needs:
- getSignaturesForAsset (Helius DAS, page-numbered, indexed by asset id)
- getSignaturesForAddress (standard RPC, cursor-paginated with `before`)
- getTransaction (jsonParsed)

Every remote failure (transport error, timeout, non-2xx status, JSON-RPC
error payload, malformed body) is raised as RemoteApiUnavailableError.
Callers decide whether that is fatal (listing) or swallowed (one transaction).
"""

from itertools import count
from typing import Any, Optional

import httpx

from app.core.config import Settings
from app.core.logging import get_logger
from app.models.burn import TransactionSignature

logger = get_logger(__name__)


class LedgerError(Exception):
    """Base exception for ledger access errors."""
    pass


class LedgerNotConfiguredError(LedgerError):
    """Raised when no Helius API key / RPC URL is configured."""
    pass


class RemoteApiUnavailableError(LedgerError):
    """Raised when the remote ledger API errors, times out or is unreachable."""
    pass


class ParseFailureError(LedgerError):
    """Raised when a transaction body cannot be interpreted."""
    pass


class LedgerClient:
    """
    JSON-RPC calls over a shared httpx.AsyncClient.

    The http client is owned by the caller (the app lifespan opens and
    closes it), so this class never closes it.
    """

    def __init__(
        self,
        rpc_url: str,
        http_client: httpx.AsyncClient,
        timeout: float = 30.0
    ):
        if not rpc_url:
            raise LedgerNotConfiguredError(
                "Helius API key is required. Set HELIUS_API_KEY or include "
                "api-key in SOLANA_RPC_URL."
            )
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._client = http_client
        self._ids = count(1)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient
    ) -> "LedgerClient":
        return cls(
            settings.ledger_rpc_url or "",
            http_client=http_client,
            timeout=settings.ledger_request_timeout_seconds,
        )

    async def _rpc(self, method: str, params: Any) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": f"burn-leaderboard-{method}-{next(self._ids)}",
            "method": method,
            "params": params,
        }
        try:
            response = await self._client.post(self.rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise RemoteApiUnavailableError(f"{method} timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise RemoteApiUnavailableError(
                f"{method} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteApiUnavailableError(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise RemoteApiUnavailableError(f"{method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RemoteApiUnavailableError(f"{method} returned an unexpected body")

        error = data.get("error")
        if error:
            raise RemoteApiUnavailableError(f"{method} RPC error: {error}")

        return data.get("result")

    async def get_signatures_for_asset(
        self,
        asset_id: str,
        page: int,
        limit: int = 1000
    ) -> list[TransactionSignature]:
        """One page of signatures from the Helius asset index (page is 1-based)."""
        result = await self._rpc(
            "getSignaturesForAsset",
            {"id": asset_id, "page": page, "limit": limit},
        )
        items = result.get("items") or [] if isinstance(result, dict) else []

        signatures = []
        for item in items:
            # DAS returns either {"signature": ...} objects or [signature, type] pairs
            if isinstance(item, dict) and item.get("signature"):
                signatures.append(TransactionSignature(
                    signature=item["signature"],
                    slot=item.get("slot"),
                    block_time=item.get("blockTime"),
                ))
            elif isinstance(item, (list, tuple)) and item:
                signatures.append(TransactionSignature(signature=str(item[0])))
        return signatures

    async def get_signatures_for_address(
        self,
        address: str,
        limit: int = 1000,
        before: Optional[str] = None
    ) -> list[TransactionSignature]:
        """Signatures touching an address, newest first, starting before `before`."""
        options: dict[str, Any] = {"limit": limit}
        if before:
            options["before"] = before

        result = await self._rpc("getSignaturesForAddress", [address, options])
        if not isinstance(result, list):
            return []

        return [
            TransactionSignature(
                signature=row["signature"],
                slot=row.get("slot"),
                block_time=row.get("blockTime"),
            )
            for row in result
            if isinstance(row, dict) and row.get("signature")
        ]

    async def get_parsed_transaction(self, signature: str) -> Optional[dict]:
        """Full jsonParsed transaction body, or None when the node has none."""
        result = await self._rpc(
            "getTransaction",
            [signature, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}],
        )
        if result is None:
            return None
        if not isinstance(result, dict):
            raise ParseFailureError(f"Transaction {signature} has an unexpected shape")
        return result
