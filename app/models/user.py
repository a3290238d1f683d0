from typing import Optional
from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Resumen del perfil de un usuario (colección users)"""

    id: str = Field(..., alias="_id")
    wallet: str
    username: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")
    is_public: bool = Field(True, alias="isPublic")

    class Config:
        populate_by_name = True
