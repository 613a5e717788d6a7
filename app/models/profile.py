# app/models/profile.py

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import datetime

from app.models.enums import Currency
from app.utils.dates import utcnow

class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    # Mismo id que el usuario (una fila por usuario)
    id: UUID = Field(foreign_key="user.id", primary_key=True)
    base_currency: Currency = Field(default=Currency.EUR)
    is_privacy_mode: bool = Field(default=False)
    finnhub_key: Optional[str] = None
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
