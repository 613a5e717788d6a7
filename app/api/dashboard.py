# app/api/dashboard.py

import datetime as dt
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from uuid import UUID
from typing import Dict, List, Optional

from app.core.security import get_current_user
from app.database import get_session
from app.models.asset import Asset
from app.models.enums import AssetCategory
from app.models.liability import Liability
from app.models.liquidity_account import LiquidityAccount
from app.models.portfolio_snapshot import PortfolioSnapshot
from app.models.transaction import Transaction
from app.routes import fx
from app.schemas.liability import LiabilityRead
from app.schemas.liquidity_account import LiquidityAccountRead
from app.schemas.summary import (
    AllocationSlice,
    ChartPoint,
    DataExport,
    ExpenseBreakdown,
    ExportSettings,
    MonthlyCashFlow,
    SnapshotRead,
    TotalsResponse,
)
from app.schemas.transaction import TransactionRead
from app.utils import portfolio
from app.utils.asset_helpers import list_user_assets, to_crypto_read, to_investment_read
from app.utils.currency import make_converter
from app.utils.dates import utcnow
from app.utils.profile_helpers import get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _user_rows(session: Session, model, user_id: UUID):
    return session.exec(select(model).where(model.user_id == user_id)).all()


def _base_currency(session: Session, user_id: UUID) -> str:
    profile = get_or_create_profile(session, user_id)
    return getattr(profile.base_currency, "value", profile.base_currency)


def _totals(session: Session, user_id: UUID, base: str, rates: Optional[Dict[str, float]]) -> TotalsResponse:
    totals = portfolio.calculate_totals(
        transactions=_user_rows(session, Transaction, user_id),
        investments=list_user_assets(session, user_id, AssetCategory.investment),
        crypto=list_user_assets(session, user_id, AssetCategory.crypto),
        liabilities=_user_rows(session, Liability, user_id),
        liquidity_accounts=_user_rows(session, LiquidityAccount, user_id),
        convert=make_converter(base, rates),
    )
    return TotalsResponse(base_currency=base, rates_available=rates is not None, **totals)


async def _compute_totals(session: Session, user_id: UUID) -> TotalsResponse:
    # La base de datos se consulta fuera del event loop; solo las tasas son async
    base = await run_in_threadpool(_base_currency, session, user_id)
    rates = await fx.get_rates(base)
    return await run_in_threadpool(_totals, session, user_id, base, rates)


@router.get("/totals", response_model=TotalsResponse)
async def get_totals(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return await _compute_totals(session, user_id)


@router.get("/cash-flow", response_model=MonthlyCashFlow)
def get_cash_flow(
    month: Optional[str] = Query(None, description="Mes en formato YYYY-MM"),
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    if month:
        try:
            target = dt.datetime.strptime(month, "%Y-%m").date()
        except ValueError:
            raise HTTPException(status_code=400, detail="Formato de mes inválido. Usa YYYY-MM")
    else:
        target = dt.date.today().replace(day=1)

    return portfolio.monthly_cash_flow(_user_rows(session, Transaction, user_id), target)


@router.get("/expenses", response_model=ExpenseBreakdown)
def get_expenses(
    period: str = Query("30d"),
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        return portfolio.expenses_by_category(
            _user_rows(session, Transaction, user_id), period, dt.date.today()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _allocation(session: Session, user_id: UUID, group_by: str, base: str, rates) -> List[Dict]:
    investments = list_user_assets(session, user_id, AssetCategory.investment)
    return portfolio.allocation(investments, group_by, make_converter(base, rates))


@router.get("/allocation", response_model=List[AllocationSlice])
async def get_allocation(
    group_by: str = Query("type"),
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    if group_by not in portfolio.ALLOCATION_GROUPS:
        raise HTTPException(status_code=400, detail=f"Agrupación no soportada: {group_by}")

    base = await run_in_threadpool(_base_currency, session, user_id)
    rates = await fx.get_rates(base)
    return await run_in_threadpool(_allocation, session, user_id, group_by, base, rates)


@router.get("/crypto-allocation", response_model=List[AllocationSlice])
def get_crypto_allocation(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return portfolio.crypto_allocation(list_user_assets(session, user_id, AssetCategory.crypto))


@router.get("/snapshots", response_model=List[ChartPoint])
def list_snapshots(
    time_range: str = Query("ALL", alias="range"),
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        return portfolio.snapshots_by_range(
            _user_rows(session, PortfolioSnapshot, user_id), time_range, utcnow()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _store_snapshot(session: Session, user_id: UUID, totals: TotalsResponse) -> PortfolioSnapshot:
    snapshot = PortfolioSnapshot(
        user_id=user_id,
        date=utcnow(),
        net_worth=totals.net_worth,
        total_assets=totals.total_assets,
        total_liabilities=totals.total_liabilities,
        liquidity=totals.total_liquidity,
        investments=totals.total_investments,
        crypto=totals.total_crypto,
    )
    session.add(snapshot)
    session.commit()
    session.refresh(snapshot)
    return snapshot


@router.post("/snapshots", response_model=SnapshotRead)
async def take_snapshot(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    totals = await _compute_totals(session, user_id)
    return await run_in_threadpool(_store_snapshot, session, user_id, totals)


@router.get("/export", response_model=DataExport)
def export_data(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    """Copia de seguridad en JSON de todo lo que el usuario tiene guardado."""
    profile = get_or_create_profile(session, user_id)
    snapshots = sorted(_user_rows(session, PortfolioSnapshot, user_id), key=lambda s: s.date)
    transactions = sorted(
        _user_rows(session, Transaction, user_id), key=lambda t: t.date, reverse=True
    )

    return DataExport(
        exported_at=utcnow(),
        # La key de Finnhub no se exporta
        settings=ExportSettings(
            base_currency=profile.base_currency,
            is_privacy_mode=profile.is_privacy_mode,
        ),
        investments=[to_investment_read(a) for a in list_user_assets(session, user_id, AssetCategory.investment)],
        crypto=[to_crypto_read(a) for a in list_user_assets(session, user_id, AssetCategory.crypto)],
        liabilities=[LiabilityRead.model_validate(l) for l in _user_rows(session, Liability, user_id)],
        liquidity_accounts=[
            LiquidityAccountRead.model_validate(a) for a in _user_rows(session, LiquidityAccount, user_id)
        ],
        transactions=[TransactionRead.model_validate(t) for t in transactions],
        snapshots=[SnapshotRead.model_validate(s) for s in snapshots],
    )


@router.delete("/data")
def wipe_data(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    """Elimina todos los datos financieros del usuario. La cuenta y el perfil se conservan."""
    try:
        for model in (Transaction, Asset, Liability, LiquidityAccount, PortfolioSnapshot):
            session.execute(delete(model).where(model.user_id == user_id))
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error al borrar los datos del usuario %s", user_id)
        raise HTTPException(status_code=500, detail="No fue posible borrar los datos")

    logger.info("Datos eliminados para el usuario %s", user_id)
    return {"message": "Datos eliminados correctamente"}
