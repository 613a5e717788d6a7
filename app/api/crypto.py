import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session
from uuid import UUID
from typing import Dict, List, Optional

from app.core.security import get_current_user
from app.database import get_session
from app.models.asset import Asset
from app.models.enums import AssetCategory
from app.schemas.asset import CoinSearchResult, CryptoCreate, CryptoRead, PriceRefreshResult
from app.utils import market_data
from app.utils.asset_helpers import get_user_asset, list_user_assets, log_trading_fee, to_crypto_read
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/crypto", tags=["crypto"])


def _store_crypto(
    session: Session, user_id: UUID, data: CryptoCreate, coin_id: str, price: Optional[float]
) -> CryptoRead:
    asset = Asset(
        user_id=user_id,
        category=AssetCategory.crypto,
        type="crypto",
        symbol=data.symbol.upper(),
        name=data.name,
        quantity=data.quantity,
        avg_buy_price=data.avg_buy_price,
        trading_currency="USD",
        coin_id=coin_id,
        fees=data.fees,
        current_price=price or 0.0,
        last_price_update=utcnow() if price else None,
    )
    session.add(asset)
    log_trading_fee(session, user_id, asset.symbol, data.fees)

    session.commit()
    session.refresh(asset)
    return to_crypto_read(asset)


@router.post("", response_model=CryptoRead)
@router.post("/", response_model=CryptoRead)
async def create_crypto(
    data: CryptoCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    coin_id = (data.coin_id or "").lower() or await market_data.resolve_coin_id(data.symbol)

    price = data.current_price
    if not price:
        price = await market_data.get_crypto_price(coin_id)

    return await run_in_threadpool(_store_crypto, session, user_id, data, coin_id, price)


@router.get("", response_model=List[CryptoRead])
@router.get("/", response_model=List[CryptoRead])
def list_crypto(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return [to_crypto_read(a) for a in list_user_assets(session, user_id, AssetCategory.crypto)]


@router.get("/search", response_model=List[CoinSearchResult])
async def search_coins(
    query: str = Query(..., min_length=1),
    user_id: UUID = Depends(get_current_user),
):
    return await market_data.search_coingecko(query)


@router.put("/{crypto_id}", response_model=CryptoRead)
def update_crypto(
    crypto_id: UUID,
    data: CryptoCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    asset = get_user_asset(session, user_id, crypto_id, AssetCategory.crypto)

    asset.symbol = data.symbol.upper()
    asset.name = data.name
    asset.quantity = data.quantity
    asset.avg_buy_price = data.avg_buy_price
    asset.fees = data.fees
    if data.coin_id:
        asset.coin_id = data.coin_id.lower()
    if data.current_price:
        asset.current_price = data.current_price
        asset.last_price_update = utcnow()
    asset.updated_at = utcnow()

    session.add(asset)
    session.commit()
    session.refresh(asset)
    return to_crypto_read(asset)


@router.delete("/{crypto_id}")
def delete_crypto(
    crypto_id: UUID,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    asset = get_user_asset(session, user_id, crypto_id, AssetCategory.crypto)
    session.delete(asset)
    session.commit()
    return {"message": "Cripto eliminada correctamente"}


def _holding_coin_id(holding: Asset) -> str:
    return (holding.coin_id or holding.symbol).lower()


def _apply_prices(session: Session, holdings: List[Asset], prices: Dict[str, float]) -> PriceRefreshResult:
    updated = 0
    failed = []
    now = utcnow()
    for holding in holdings:
        price = prices.get(_holding_coin_id(holding))
        if not price:
            failed.append(holding.symbol)
            continue
        holding.current_price = price
        holding.last_price_update = now
        holding.updated_at = now
        session.add(holding)
        updated += 1

    session.commit()
    return PriceRefreshResult(updated=updated, failed=failed)


@router.post("/refresh-prices", response_model=PriceRefreshResult)
async def refresh_crypto_prices(
    force: bool = Query(False),
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    holdings = await run_in_threadpool(list_user_assets, session, user_id, AssetCategory.crypto)

    try:
        prices = await market_data.fetch_all_crypto_prices(
            [_holding_coin_id(h) for h in holdings], force_refresh=force
        )
    except market_data.RateLimitError:
        raise HTTPException(status_code=429, detail="Límite de peticiones alcanzado. Espera un momento.")
    except market_data.MarketDataError as err:
        logger.warning("Fallo al actualizar precios cripto: %s", err)
        raise HTTPException(status_code=502, detail="No fue posible obtener los precios de cripto")

    return await run_in_threadpool(_apply_prices, session, holdings, prices)
