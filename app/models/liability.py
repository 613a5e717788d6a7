# app/models/liability.py

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from typing import Optional
from datetime import datetime

from app.models.enums import Currency, LiabilityType
from app.utils.dates import utcnow

class Liability(SQLModel, table=True):
    __tablename__ = "liabilities"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    name: str  # Ej: "Hipoteca", "Tarjeta Visa"
    type: LiabilityType = Field(default=LiabilityType.loan)
    principal: Optional[float] = None
    current_balance: float
    interest_rate: float  # En porcentaje anual
    monthly_payment: Optional[float] = None
    currency: Currency = Field(default=Currency.EUR)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
