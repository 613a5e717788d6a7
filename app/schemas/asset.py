# app/schemas/asset.py

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import InvestmentType

class InvestmentCreate(BaseModel):
    type: InvestmentType = InvestmentType.stock
    symbol: str = Field(min_length=1)
    name: str
    quantity: float = Field(ge=0)
    avg_buy_price: float = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    sector: Optional[str] = None
    geography: Optional[str] = None
    isin: Optional[str] = None
    # Comisión fija o porcentaje sobre cantidad * precio
    fee_type: Literal["fixed", "percent"] = "fixed"
    fee_value: float = Field(default=0.0, ge=0)
    # Precio manual cuando no hay cotización en vivo
    current_price: Optional[float] = Field(default=None, ge=0)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        # Las tasas vienen con códigos ISO en mayúsculas
        return v.strip().upper()

    @field_validator("symbol")
    @classmethod
    def symbol_upper(cls, v: str) -> str:
        return v.strip().upper()

class InvestmentRead(BaseModel):
    id: UUID
    type: str
    symbol: str
    name: str
    quantity: float
    avg_buy_price: float
    currency: str
    sector: Optional[str] = None
    geography: Optional[str] = None
    isin: Optional[str] = None
    fees: float
    current_price: float
    cost_basis: float
    current_value: float
    gain: float
    gain_percent: float
    last_price_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CryptoCreate(BaseModel):
    symbol: str = Field(min_length=1)
    name: str
    quantity: float = Field(ge=0)
    avg_buy_price: float = Field(ge=0)
    coin_id: Optional[str] = None
    fees: float = Field(default=0.0, ge=0)
    current_price: Optional[float] = Field(default=None, ge=0)

class CryptoRead(BaseModel):
    id: UUID
    symbol: str
    name: str
    quantity: float
    avg_buy_price: float
    coin_id: Optional[str] = None
    fees: float
    current_price: float
    currency: str = "USD"
    cost_basis: float
    current_value: float
    gain: float
    gain_percent: float
    last_price_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PriceRefreshResult(BaseModel):
    updated: int
    failed: list[str] = []

class CoinSearchResult(BaseModel):
    id: str
    symbol: str
    name: str

class SymbolSearchResult(BaseModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    isin: Optional[str] = None
