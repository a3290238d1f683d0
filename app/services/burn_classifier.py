"""
Burn classifier - Decides whether a parsed transaction is a token burn.

A burn shows up on the ledger in more than one shape. Instructions are
checked in order and the first one that matches wins, so a transaction
contributes at most one BurnEvent per target mint.

Rules, per instruction:
1. SPL `burn` / `burnChecked` of the target mint.
2. `transfer` / `transferChecked` of the target mint into the burn sink.
3. `closeAccount` of a token account that held the target mint. This is a
   burn signal without an amount; it is recorded with amount 0.
"""

from typing import Any, Optional

from app.models.burn import BurnEvent

DEFAULT_BURN_SINK = "11111111111111111111111111111112"

BURN_TYPES = ("burn", "burnChecked")
TRANSFER_TYPES = ("transfer", "transferChecked")
CLOSE_TYPES = ("closeAccount",)


def _parse_amount(info: dict) -> int:
    """Raw base-unit amount; falls back to tokenAmount.amount. Bad data -> 0."""
    raw = info.get("amount")
    if raw in (None, ""):
        raw = (info.get("tokenAmount") or {}).get("amount")
    try:
        return int(raw)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return 0


def _instructions(tx: dict) -> Optional[list]:
    message = (tx.get("transaction") or {}).get("message") or {}
    instructions = message.get("instructions")
    return instructions if isinstance(instructions, list) else None


def _account_keys(tx: dict) -> list[str]:
    message = (tx.get("transaction") or {}).get("message") or {}
    keys = []
    for key in message.get("accountKeys") or []:
        if isinstance(key, str):
            keys.append(key)
        elif isinstance(key, dict):
            keys.append(str(key.get("pubkey") or ""))
    return keys


def _token_account_mints(tx: dict) -> dict[str, str]:
    """Token account address -> mint, from meta.preTokenBalances."""
    keys = _account_keys(tx)
    mints = {}
    for balance in (tx.get("meta") or {}).get("preTokenBalances") or []:
        index = balance.get("accountIndex")
        if isinstance(index, int) and 0 <= index < len(keys) and balance.get("mint"):
            mints[keys[index]] = balance["mint"]
    return mints


def _match_instruction(
    instruction: Any,
    tx: dict,
    target_mint: str,
    burn_sink: str
) -> Optional[tuple[str, str, int]]:
    """(kind, wallet, amount) if this instruction is a burn of target_mint."""
    if not isinstance(instruction, dict):
        return None
    parsed = instruction.get("parsed")
    if not isinstance(parsed, dict):
        return None

    ix_type = parsed.get("type")
    info = parsed.get("info") or {}

    if ix_type in BURN_TYPES and info.get("mint") == target_mint:
        wallet = info.get("authority") or info.get("multisigAuthority") or ""
        return "burn", wallet, _parse_amount(info)

    if (
        ix_type in TRANSFER_TYPES
        and info.get("destination") == burn_sink
        and info.get("mint") == target_mint
    ):
        wallet = info.get("authority") or info.get("source") or ""
        return "sink_transfer", wallet, _parse_amount(info)

    if ix_type in CLOSE_TYPES:
        account = info.get("account")
        if account and _token_account_mints(tx).get(account) == target_mint:
            wallet = info.get("owner") or info.get("destination") or ""
            return "close_account", wallet, 0

    return None


def classify(
    tx: Optional[dict],
    target_mint: str,
    signature: Optional[str] = None,
    burn_sink: str = DEFAULT_BURN_SINK
) -> Optional[BurnEvent]:
    """
    Classify one jsonParsed transaction body.

    Returns None for anything that is not a successful burn of target_mint,
    including bodies with missing meta or instructions. Never raises on
    malformed input.
    """
    if not isinstance(tx, dict):
        return None

    meta = tx.get("meta")
    if not isinstance(meta, dict) or meta.get("err") is not None:
        return None

    instructions = _instructions(tx)
    if not instructions:
        return None

    if signature is None:
        sigs = (tx.get("transaction") or {}).get("signatures") or []
        signature = sigs[0] if sigs else ""

    for instruction in instructions:
        match = _match_instruction(instruction, tx, target_mint, burn_sink)
        if match is None:
            continue
        kind, wallet, amount = match
        return BurnEvent(
            signature=signature,
            wallet=wallet,
            amount=amount,
            timestamp=int(tx.get("blockTime") or 0),
            mint=target_mint,
            kind=kind,
        )

    return None


class BurnClassifier:
    """classify() bound to a configured burn sink address."""

    def __init__(self, burn_sink: str = DEFAULT_BURN_SINK):
        self.burn_sink = burn_sink

    def classify(
        self,
        tx: Optional[dict],
        target_mint: str,
        signature: Optional[str] = None
    ) -> Optional[BurnEvent]:
        return classify(tx, target_mint, signature=signature, burn_sink=self.burn_sink)
