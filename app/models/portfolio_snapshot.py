# app/models/portfolio_snapshot.py

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from typing import Optional
from datetime import datetime

from app.utils.dates import utcnow

class PortfolioSnapshot(SQLModel, table=True):
    __tablename__ = "portfolio_snapshots"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    date: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
    net_worth: float
    total_assets: float
    total_liabilities: float
    liquidity: float
    investments: float
    crypto: float
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
