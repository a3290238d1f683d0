"""
SessionRepository - MongoDB access for sessions collection.

Read-only from the leaderboard's point of view; sessions are started and
ended by the session routes.
"""

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.session import Session


def _to_session(doc: Optional[dict]) -> Optional[Session]:
    if not doc:
        return None
    doc = dict(doc)
    doc["_id"] = str(doc["_id"])
    return Session(**doc)


class SessionRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["sessions"]

    async def find_session_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by its ObjectId string. Invalid ids return None."""
        try:
            object_id = ObjectId(session_id)
        except (InvalidId, TypeError):
            return None
        doc = await self.collection.find_one({"_id": object_id})
        return _to_session(doc)

    async def find_active_session(self, token_id: str) -> Optional[Session]:
        """Get the active session for a creator mint, if any."""
        doc = await self.collection.find_one(
            {"creatorMint": token_id, "isActive": True},
            sort=[("startTime", -1)]
        )
        return _to_session(doc)
