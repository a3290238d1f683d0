"""
BurnRepository - MongoDB access for burns collection.

Stored burn records are the legacy leaderboard source: they are written by
the burn routes when the frontend reports a burn, so they can lag behind or
disagree with the ledger. Used here for degraded-mode aggregation and for
leaderboard enrichment. Stored amounts are UI-unit floats and are summed
and returned as stored.
"""

from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.burn import AdvertisingMetadata, WalletTotal


class BurnRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["burns"]

    async def sum_burns_by_wallet(
        self,
        token_id: str,
        session_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> list[WalletTotal]:
        """
        Aggregate stored burns per wallet, sorted by total descending.

        Ties are broken by wallet ascending so the order is deterministic.
        """
        match: dict = {"creatorMint": token_id}
        if session_id:
            match["sessionId"] = ObjectId(session_id)

        pipeline: list[dict] = [
            {"$match": match},
            {"$sort": {"ts": -1}},
            {"$group": {
                "_id": "$wallet",
                "totalBurned": {"$sum": "$amount"},
                "userId": {"$first": "$userId"},
            }},
            {"$project": {"wallet": "$_id", "totalBurned": 1, "userId": 1, "_id": 0}},
            {"$sort": {"totalBurned": -1, "wallet": 1}},
        ]
        if limit:
            pipeline.append({"$limit": limit})

        rows = await self.collection.aggregate(pipeline).to_list(length=None)

        return [
            WalletTotal(
                wallet=row["wallet"],
                total_burned=row.get("totalBurned") or 0,
                user_id=str(row["userId"]) if row.get("userId") else None,
            )
            for row in rows
        ]

    async def find_advertising_metadata(
        self,
        wallet: str,
        token_id: str
    ) -> Optional[AdvertisingMetadata]:
        """Latest advertising metadata a wallet attached to a burn of this token."""
        doc = await self.collection.find_one(
            {
                "wallet": wallet,
                "creatorMint": token_id,
                "advertisingMetadata": {"$exists": True, "$ne": None},
            },
            sort=[("ts", -1)],
            projection={"advertisingMetadata": 1}
        )
        if not doc:
            return None
        return AdvertisingMetadata(**doc["advertisingMetadata"])

    async def find_linked_user_id(self, wallet: str, token_id: str) -> Optional[str]:
        """User ID linked to the wallet's most recent burn of this token."""
        doc = await self.collection.find_one(
            {
                "wallet": wallet,
                "creatorMint": token_id,
                "userId": {"$exists": True, "$ne": None},
            },
            sort=[("ts", -1)],
            projection={"userId": 1}
        )
        if not doc:
            return None
        return str(doc["userId"])
