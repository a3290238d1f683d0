from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field


class Session(BaseModel):
    """Sesión de stream de un creador (colección sessions)"""

    id: str = Field(..., alias="_id")
    creator_mint: str = Field(..., alias="creatorMint")
    start_time: datetime = Field(..., alias="startTime")
    end_time: Optional[datetime] = Field(None, alias="endTime")
    is_active: bool = Field(False, alias="isActive")
    total_burns: float = Field(0, alias="totalBurns")  # suma de montos en unidades de UI
    participant_count: int = Field(0, alias="participantCount")

    class Config:
        populate_by_name = True

    def window(self) -> "SessionWindow":
        return SessionWindow(start_time=self.start_time, end_time=self.end_time)

    def summary(self) -> "SessionSummary":
        return SessionSummary(
            id=self.id,
            start_time=self.start_time,
            end_time=self.end_time,
            is_active=self.is_active,
            total_burns=self.total_burns,
            participant_count=self.participant_count,
        )


def _as_utc(value: datetime) -> datetime:
    # Mongo devuelve datetimes naive en UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionWindow(BaseModel):
    """Rango de tiempo de una sesión, usado sólo como filtro"""

    start_time: datetime
    end_time: Optional[datetime] = None

    def bounds(self, now: datetime) -> tuple[int, int]:
        """[inicio, fin] en unix seconds; una sesión abierta termina en 'now'"""
        start = int(_as_utc(self.start_time).timestamp())
        end = int(_as_utc(self.end_time or now).timestamp())
        return start, end

    def contains(self, timestamp: int, now: datetime) -> bool:
        start, end = self.bounds(now)
        return start <= timestamp <= end


class SessionSummary(BaseModel):
    """Resumen de sesión que viaja en la respuesta del leaderboard"""

    id: str
    start_time: datetime = Field(..., alias="startTime")
    end_time: Optional[datetime] = Field(None, alias="endTime")
    is_active: bool = Field(..., alias="isActive")
    total_burns: float = Field(0, alias="totalBurns")
    participant_count: int = Field(0, alias="participantCount")

    class Config:
        populate_by_name = True
