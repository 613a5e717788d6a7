# app/schemas/liquidity_account.py

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Currency, LiquidityAccountType

class LiquidityAccountCreate(BaseModel):
    name: str
    type: LiquidityAccountType
    balance: float = Field(ge=0)
    currency: Currency = Currency.EUR

class LiquidityAccountRead(LiquidityAccountCreate):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
