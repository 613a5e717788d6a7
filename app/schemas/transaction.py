import datetime as dt
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from app.models.enums import TransactionType

class TransactionCreate(BaseModel):
    type: TransactionType
    category: str = Field(min_length=1)
    amount: float = Field(gt=0)
    description: Optional[str] = None
    date: Optional[dt.date] = None

class TransactionRead(BaseModel):
    id: UUID
    type: TransactionType
    category: str
    amount: float
    description: Optional[str] = None
    date: dt.date
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
