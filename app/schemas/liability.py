# app/schemas/liability.py

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Currency, LiabilityType

class LiabilityCreate(BaseModel):
    name: str
    type: LiabilityType = LiabilityType.loan
    principal: Optional[float] = Field(default=None, ge=0)
    current_balance: float = Field(ge=0)
    interest_rate: float = 0.0
    monthly_payment: Optional[float] = Field(default=None, ge=0)
    currency: Currency = Currency.EUR

class LiabilityRead(LiabilityCreate):
    id: UUID
    principal: float
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
