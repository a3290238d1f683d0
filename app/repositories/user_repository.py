"""
UserRepository - MongoDB access for users collection.
"""

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.user import UserProfile

PROFILE_PROJECTION = {
    "wallet": 1,
    "username": 1,
    "displayName": 1,
    "profileImageUrl": 1,
    "isPublic": 1,
}


def _to_profile(doc: Optional[dict]) -> Optional[UserProfile]:
    if not doc:
        return None
    doc = dict(doc)
    doc["_id"] = str(doc["_id"])
    return UserProfile(**doc)


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def find_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get profile summary by user ID."""
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = await self.collection.find_one({"_id": object_id}, projection=PROFILE_PROJECTION)
        return _to_profile(doc)

    async def find_user_profile_by_wallet(self, wallet: str) -> Optional[UserProfile]:
        """Get profile summary by wallet address."""
        doc = await self.collection.find_one({"wallet": wallet}, projection=PROFILE_PROJECTION)
        return _to_profile(doc)
