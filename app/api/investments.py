import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session
from uuid import UUID
from typing import List, Optional

from app.core.security import get_current_user
from app.database import get_session
from app.models.asset import Asset
from app.models.enums import AssetCategory, InvestmentType
from app.models.profile import Profile
from app.schemas.asset import InvestmentCreate, InvestmentRead, PriceRefreshResult, SymbolSearchResult
from app.utils import market_data
from app.utils.asset_helpers import (
    calculate_fees,
    get_user_asset,
    list_user_assets,
    log_trading_fee,
    to_investment_read,
)
from app.utils.dates import utcnow
from app.utils.profile_helpers import get_finnhub_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investments", tags=["investments"])

# Tipos con cotización en vivo
QUOTED_TYPES = (InvestmentType.stock, InvestmentType.etf)


async def _resolve_price(data: InvestmentCreate, api_key: Optional[str]) -> Optional[float]:
    """Precio por unidad: manual > cotización en vivo > precio de compra (bonos)."""
    if data.current_price:
        return data.current_price
    if data.type in QUOTED_TYPES:
        return await market_data.get_stock_price(data.symbol, api_key)
    return data.avg_buy_price


def _user_finnhub_key(session: Session, user_id: UUID) -> Optional[str]:
    return get_finnhub_key(session.get(Profile, user_id))


def _store_investment(session: Session, user_id: UUID, data: InvestmentCreate, price: float) -> InvestmentRead:
    fees = calculate_fees(data.quantity, data.avg_buy_price, data.fee_type, data.fee_value)
    asset = Asset(
        user_id=user_id,
        category=AssetCategory.investment,
        type=data.type.value,
        symbol=data.symbol,
        name=data.name,
        quantity=data.quantity,
        avg_buy_price=data.avg_buy_price,
        trading_currency=data.currency,
        sector=data.sector,
        geography=data.geography,
        isin=data.isin,
        fees=fees,
        current_price=price,
        last_price_update=utcnow(),
    )
    session.add(asset)

    # La comisión también se registra como gasto
    log_trading_fee(session, user_id, asset.symbol, fees)

    session.commit()
    session.refresh(asset)
    return to_investment_read(asset)


@router.post("", response_model=InvestmentRead)
@router.post("/", response_model=InvestmentRead)
async def create_investment(
    data: InvestmentCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    api_key = await run_in_threadpool(_user_finnhub_key, session, user_id)
    price = await _resolve_price(data, api_key)
    if price is None:
        raise HTTPException(
            status_code=422,
            detail="Precio en vivo no disponible. Ingresa un precio manual (current_price).",
        )

    return await run_in_threadpool(_store_investment, session, user_id, data, price)


@router.get("", response_model=List[InvestmentRead])
@router.get("/", response_model=List[InvestmentRead])
def list_investments(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return [to_investment_read(a) for a in list_user_assets(session, user_id, AssetCategory.investment)]


@router.get("/search", response_model=Optional[SymbolSearchResult])
async def search_investment(
    query: str = Query(..., min_length=2),
    user_id: UUID = Depends(get_current_user),
):
    return await market_data.search_by_isin(query)


@router.put("/{investment_id}", response_model=InvestmentRead)
def update_investment(
    investment_id: UUID,
    data: InvestmentCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    asset = get_user_asset(session, user_id, investment_id, AssetCategory.investment)

    asset.type = data.type.value
    asset.symbol = data.symbol
    asset.name = data.name
    asset.quantity = data.quantity
    asset.avg_buy_price = data.avg_buy_price
    asset.trading_currency = data.currency
    asset.sector = data.sector
    asset.geography = data.geography
    asset.isin = data.isin
    asset.fees = calculate_fees(data.quantity, data.avg_buy_price, data.fee_type, data.fee_value)
    if data.current_price:
        asset.current_price = data.current_price
        asset.last_price_update = utcnow()
    asset.updated_at = utcnow()

    session.add(asset)
    session.commit()
    session.refresh(asset)
    return to_investment_read(asset)


@router.delete("/{investment_id}")
def delete_investment(
    investment_id: UUID,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    asset = get_user_asset(session, user_id, investment_id, AssetCategory.investment)
    session.delete(asset)
    session.commit()
    return {"message": "Inversión eliminada correctamente"}


def _quoted_holdings(session: Session, user_id: UUID) -> List[Asset]:
    quoted = {t.value for t in QUOTED_TYPES}
    return [a for a in list_user_assets(session, user_id, AssetCategory.investment) if a.type in quoted]


def _apply_prices(session: Session, targets: List[Asset], prices: list) -> PriceRefreshResult:
    updated = 0
    failed = []
    now = utcnow()
    for asset, price in zip(targets, prices):
        if isinstance(price, Exception) or not price:
            # Se conserva el último precio conocido
            failed.append(asset.symbol)
            continue
        asset.current_price = price
        asset.last_price_update = now
        asset.updated_at = now
        session.add(asset)
        updated += 1

    session.commit()
    return PriceRefreshResult(updated=updated, failed=failed)


@router.post("/refresh-prices", response_model=PriceRefreshResult)
async def refresh_investment_prices(
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    api_key = await run_in_threadpool(_user_finnhub_key, session, user_id)
    targets = await run_in_threadpool(_quoted_holdings, session, user_id)

    # Todas las cotizaciones en paralelo; se aplican al terminar
    prices = await asyncio.gather(
        *(market_data.get_stock_price(a.symbol, api_key) for a in targets),
        return_exceptions=True,
    )

    result = await run_in_threadpool(_apply_prices, session, targets, prices)
    if result.failed:
        logger.warning("No se pudo actualizar el precio de: %s", ", ".join(result.failed))
    return result
