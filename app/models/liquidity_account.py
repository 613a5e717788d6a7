# app/models/liquidity_account.py

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from typing import Optional
from datetime import datetime

from app.models.enums import Currency, LiquidityAccountType
from app.utils.dates import utcnow

class LiquidityAccount(SQLModel, table=True):
    __tablename__ = "liquidity_accounts"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    name: str
    type: LiquidityAccountType
    balance: float = 0.0
    currency: Currency = Field(default=Currency.EUR)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
