"""
Unit tests for BurnRepository
"""

import pytest
from datetime import datetime, timedelta, timezone
from bson import ObjectId

from app.repositories.burn_repository import BurnRepository

MINT = "MintM111111111111111111111111111111111111"
T0 = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def burn_doc(wallet, amount, minutes=0, session_id=None, **extra):
    doc = {
        "creatorMint": MINT,
        "wallet": wallet,
        "amount": amount,
        "ts": T0 + timedelta(minutes=minutes),
        "sessionId": session_id,
    }
    doc.update(extra)
    return doc


class TestBurnRepository:
    """Test suite for BurnRepository aggregation and lookups."""

    @pytest.mark.asyncio
    async def test_sum_burns_by_wallet(self, test_db):
        """Totals per wallet, highest first."""
        await test_db["burns"].insert_many([
            burn_doc("W1", 60),
            burn_doc("W2", 50, minutes=1),
            burn_doc("W1", 40, minutes=2),
            {**burn_doc("W9", 999), "creatorMint": "OtherMint"},
        ])
        repo = BurnRepository(test_db)

        totals = await repo.sum_burns_by_wallet(MINT)

        assert [(t.wallet, t.total_burned) for t in totals] == [("W1", 100), ("W2", 50)]

    @pytest.mark.asyncio
    async def test_sum_burns_tie_break_and_limit(self, test_db):
        """Equal totals order by wallet; limit truncates."""
        await test_db["burns"].insert_many([
            burn_doc("Wc", 10),
            burn_doc("Wa", 10),
            burn_doc("Wb", 10),
        ])
        repo = BurnRepository(test_db)

        totals = await repo.sum_burns_by_wallet(MINT, limit=2)

        assert [t.wallet for t in totals] == ["Wa", "Wb"]

    @pytest.mark.asyncio
    async def test_sum_burns_scoped_to_session(self, test_db):
        """Only burns tagged with the session count."""
        session_id = ObjectId()
        await test_db["burns"].insert_many([
            burn_doc("W1", 10, session_id=session_id),
            burn_doc("W2", 500, session_id=ObjectId()),
            burn_doc("W3", 700),
        ])
        repo = BurnRepository(test_db)

        totals = await repo.sum_burns_by_wallet(MINT, session_id=str(session_id))

        assert [(t.wallet, t.total_burned) for t in totals] == [("W1", 10)]

    @pytest.mark.asyncio
    async def test_sum_burns_carries_latest_user_id(self, test_db):
        """userId comes from the wallet's most recent burn."""
        old_user, new_user = ObjectId(), ObjectId()
        await test_db["burns"].insert_many([
            burn_doc("W1", 10, minutes=0, userId=old_user),
            burn_doc("W1", 10, minutes=5, userId=new_user),
        ])
        repo = BurnRepository(test_db)

        totals = await repo.sum_burns_by_wallet(MINT)

        assert totals[0].user_id == str(new_user)

    @pytest.mark.asyncio
    async def test_sum_burns_keeps_fractional_amounts(self, test_db):
        """UI-unit amounts are summed and returned without truncation."""
        await test_db["burns"].insert_many([
            burn_doc("W1", 10.25),
            burn_doc("W1", 2.25, minutes=1),
            burn_doc("W2", 0.75),
        ])
        repo = BurnRepository(test_db)

        totals = await repo.sum_burns_by_wallet(MINT)

        assert [(t.wallet, t.total_burned) for t in totals] == [("W1", 12.5), ("W2", 0.75)]

    @pytest.mark.asyncio
    async def test_sum_burns_empty(self, test_db):
        repo = BurnRepository(test_db)

        assert await repo.sum_burns_by_wallet(MINT) == []

    @pytest.mark.asyncio
    async def test_find_advertising_metadata_latest(self, test_db):
        """Most recent metadata wins."""
        await test_db["burns"].insert_many([
            burn_doc("W1", 10, minutes=0, advertisingMetadata={"message": "old"}),
            burn_doc("W1", 10, minutes=5, advertisingMetadata={"message": "new", "websiteUrl": "https://x.io"}),
            burn_doc("W1", 10, minutes=9),
        ])
        repo = BurnRepository(test_db)

        metadata = await repo.find_advertising_metadata("W1", MINT)

        assert metadata.message == "new"
        assert metadata.website_url == "https://x.io"

    @pytest.mark.asyncio
    async def test_find_advertising_metadata_missing(self, test_db):
        await test_db["burns"].insert_one(burn_doc("W1", 10))
        repo = BurnRepository(test_db)

        assert await repo.find_advertising_metadata("W1", MINT) is None

    @pytest.mark.asyncio
    async def test_find_linked_user_id(self, test_db):
        user_id = ObjectId()
        await test_db["burns"].insert_many([
            burn_doc("W1", 10, minutes=0, userId=user_id),
            burn_doc("W1", 10, minutes=5),
        ])
        repo = BurnRepository(test_db)

        assert await repo.find_linked_user_id("W1", MINT) == str(user_id)
        assert await repo.find_linked_user_id("W2", MINT) is None
