# app/schemas/summary.py

import datetime as dt
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from typing import List

from app.models.enums import Currency
from app.schemas.asset import CryptoRead, InvestmentRead
from app.schemas.liability import LiabilityRead
from app.schemas.liquidity_account import LiquidityAccountRead
from app.schemas.transaction import TransactionRead

class TotalsResponse(BaseModel):
    base_currency: Currency
    total_liquidity: float
    total_investments: float
    total_crypto: float
    total_assets: float
    total_liabilities: float
    net_worth: float
    accounts_balance: float
    rates_available: bool

class MonthlyCashFlow(BaseModel):
    month: str
    monthly_income: float
    monthly_expenses: float
    savings_rate: float

class CategoryExpense(BaseModel):
    category: str
    value: float
    percentage: float

class DailySpending(BaseModel):
    date: dt.date
    value: float

class ExpenseBreakdown(BaseModel):
    period: str
    total: float
    data: List[CategoryExpense]
    timeline: List[DailySpending]

class AllocationSlice(BaseModel):
    name: str
    value: float
    percentage: float

class ChartPoint(BaseModel):
    date: dt.datetime
    value: float

class SnapshotRead(BaseModel):
    id: UUID
    date: dt.datetime
    net_worth: float
    total_assets: float
    total_liabilities: float
    liquidity: float
    investments: float
    crypto: float
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)

class ExportSettings(BaseModel):
    base_currency: Currency
    is_privacy_mode: bool

class DataExport(BaseModel):
    """Copia de seguridad completa de los datos del usuario (sin credenciales)."""
    exported_at: dt.datetime
    settings: ExportSettings
    investments: List[InvestmentRead]
    crypto: List[CryptoRead]
    liabilities: List[LiabilityRead]
    liquidity_accounts: List[LiquidityAccountRead]
    transactions: List[TransactionRead]
    snapshots: List[SnapshotRead]
