# app/models/asset.py

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from typing import Optional
from datetime import datetime

from app.models.enums import AssetCategory
from app.utils.dates import utcnow

class Asset(SQLModel, table=True):
    """Inversiones y cripto en una sola tabla, separadas por `category`."""
    __tablename__ = "assets"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    category: AssetCategory = Field(index=True)
    type: str  # stock, etf, bond, crypto
    symbol: str
    name: str
    quantity: float
    avg_buy_price: float
    trading_currency: str = Field(default="USD")
    sector: Optional[str] = None
    geography: Optional[str] = None

    current_price: float = 0.0  # último precio conocido (cache)
    last_price_update: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    coin_id: Optional[str] = None  # id de CoinGecko
    fees: float = 0.0
    isin: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
