from typing import Literal, Optional, Union
from pydantic import BaseModel, Field


BurnKind = Literal["burn", "sink_transfer", "close_account"]


class TransactionSignature(BaseModel):
    """Firma de una transacción confirmada y su posición (slot) en el ledger"""

    signature: str
    slot: Optional[int] = None
    block_time: Optional[int] = None

    class Config:
        frozen = True


class BurnEvent(BaseModel):
    """Un burn clasificado a partir de una transacción (derivado, no persistido)"""

    signature: str
    wallet: str
    amount: int  # unidades base del token, puede ser <= 0
    timestamp: int  # unix seconds (blockTime)
    mint: str
    kind: BurnKind = "burn"

    class Config:
        frozen = True


class AdvertisingMetadata(BaseModel):
    """Metadata publicitaria que un wallet adjunta a sus burns"""

    message: Optional[str] = None
    website_url: Optional[str] = Field(None, alias="websiteUrl")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    contact: Optional[str] = None

    class Config:
        populate_by_name = True


class WalletTotal(BaseModel):
    """Total agregado por wallet (salida del store de burns en la base)"""

    wallet: str
    # Ledger: int en unidades base. Base de datos: float en unidades de UI
    total_burned: Union[int, float] = Field(..., alias="totalBurned")
    user_id: Optional[str] = Field(None, alias="userId")

    class Config:
        populate_by_name = True
