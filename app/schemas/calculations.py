# app/schemas/calculations.py

from typing import List, Optional
from pydantic import BaseModel, Field

class CompoundInterestRequest(BaseModel):
    initial_principal: float = 10000
    monthly_contribution: float = 500
    interest_rate: float = 7
    years: int = Field(default=20, ge=0, le=100)

class CompoundInterestPoint(BaseModel):
    year: int
    balance: float
    contributed: float
    interest: float

class MonteCarloRequest(BaseModel):
    initial_portfolio: float = 10000
    monthly_contribution: float = 500
    expected_return: float = 8
    volatility: float = Field(default=15, ge=0)
    years: int = Field(default=20, ge=0, le=100)
    simulations: int = Field(default=500, le=10000)
    seed: Optional[int] = None

class MonteCarloPoint(BaseModel):
    year: int
    p10: float
    p50: float
    p90: float

class InflationRequest(BaseModel):
    current_amount: float = 10000
    inflation_rate: float = 3
    years: int = Field(default=20, ge=0, le=100)

class InflationPoint(BaseModel):
    year: int
    future_cost: float
    purchasing_power: float
    original_amount: float

class FireRequest(BaseModel):
    current_age: int = 30
    current_net_worth: float = 50000
    annual_income: float = 80000
    annual_expenses: float = 40000
    swr: float = 4.0
    nominal_return: float = 7.0
    inflation_rate: float = 3.0

class FirePoint(BaseModel):
    age: int
    net_worth: float
    fire_target: float
    lean_fire: float
    fat_fire: float

class FireResponse(BaseModel):
    fire_number: float
    lean_fire_number: float
    fat_fire_number: float
    annual_savings: float
    savings_rate: float
    real_return: float
    reach_fire_age: Optional[int] = None
    years_to_fire: Optional[int] = None
    data: List[FirePoint]
