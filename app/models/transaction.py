from uuid import UUID, uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
import datetime as dt
from datetime import datetime

from app.models.enums import TransactionType
from app.utils.dates import utcnow

class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    type: TransactionType
    category: str  # texto libre, ej. "Trading Fees"
    amount: float
    description: Optional[str] = None
    date: dt.date = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
