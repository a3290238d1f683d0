"""
CreatorRepository - MongoDB access for creators collection.

Creators are keyed by their mint address (_id = mint).
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase


class CreatorRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["creators"]

    async def get_current_session_pointer(self, token_id: str) -> Optional[str]:
        """Return the creator's currentSessionId as a string, or None."""
        doc = await self.collection.find_one(
            {"_id": token_id},
            projection={"currentSessionId": 1}
        )
        if not doc or not doc.get("currentSessionId"):
            return None
        return str(doc["currentSessionId"])
