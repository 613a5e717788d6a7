# app/api/calculations.py

import random
from fastapi import APIRouter, HTTPException
from typing import List

from app.schemas.calculations import (
    CompoundInterestPoint,
    CompoundInterestRequest,
    FireRequest,
    FireResponse,
    InflationPoint,
    InflationRequest,
    MonteCarloPoint,
    MonteCarloRequest,
)
from app.utils import calculators

router = APIRouter(prefix="/calculations", tags=["calculations"])


@router.post("/compound-interest", response_model=List[CompoundInterestPoint])
def compound_interest(data: CompoundInterestRequest):
    return calculators.compound_interest(
        data.initial_principal, data.monthly_contribution, data.interest_rate, data.years
    )


@router.post("/monte-carlo", response_model=List[MonteCarloPoint])
def monte_carlo(data: MonteCarloRequest):
    # Con semilla el resultado es reproducible
    rng = random.Random(data.seed) if data.seed is not None else None
    try:
        return calculators.monte_carlo(
            data.initial_portfolio,
            data.monthly_contribution,
            data.expected_return,
            data.volatility,
            data.years,
            simulations=data.simulations,
            rng=rng,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/inflation", response_model=List[InflationPoint])
def inflation(data: InflationRequest):
    return calculators.inflation_projection(data.current_amount, data.inflation_rate, data.years)


@router.post("/fire", response_model=FireResponse)
def fire(data: FireRequest):
    try:
        return calculators.fire_projection(
            data.current_age,
            data.current_net_worth,
            data.annual_income,
            data.annual_expenses,
            swr=data.swr,
            nominal_return=data.nominal_return,
            inflation_rate=data.inflation_rate,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
