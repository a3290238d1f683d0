from typing import Literal, Optional, Union
from pydantic import BaseModel, Field

from .burn import AdvertisingMetadata
from .session import SessionSummary


DataSource = Literal["blockchain", "database", "database_fallback"]


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (resultado agregado)"""

    rank: int  # 1-based, por posición
    wallet: str
    total_burned: Union[int, float] = Field(..., alias="totalBurned")

    # Enriquecimiento opcional
    user_id: Optional[str] = Field(None, alias="userId")
    username: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")
    advertising: Optional[AdvertisingMetadata] = None

    class Config:
        populate_by_name = True


class LeaderboardResponse(BaseModel):
    """Leaderboard rankeado más la sesión aplicada y el origen de los datos"""

    leaderboard: list[LeaderboardEntry]
    session: Optional[SessionSummary] = None
    token_id: str = Field(..., alias="tokenId")
    data_source: DataSource = Field(..., alias="dataSource")

    class Config:
        populate_by_name = True
