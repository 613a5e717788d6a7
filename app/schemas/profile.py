# app/schemas/profile.py

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from app.models.enums import Currency

class ProfileRead(BaseModel):
    id: UUID
    base_currency: Currency
    is_privacy_mode: bool
    has_finnhub_key: bool = False
    is_finnhub_key_env: bool = False
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ProfileUpdate(BaseModel):
    base_currency: Optional[Currency] = None
    is_privacy_mode: Optional[bool] = None
    finnhub_key: Optional[str] = None
