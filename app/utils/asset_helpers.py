import datetime as dt
from uuid import UUID
from typing import Optional
from fastapi import HTTPException
from sqlmodel import Session, select

from app.models.asset import Asset
from app.models.enums import AssetCategory, TransactionType
from app.models.transaction import Transaction
from app.schemas.asset import CryptoRead, InvestmentRead
from app.utils.portfolio import cost_basis, current_value, gain_loss

TRADING_FEES_CATEGORY = "Trading Fees"


def get_user_asset(session: Session, user_id: UUID, asset_id: UUID, category: AssetCategory) -> Asset:
    asset = session.exec(
        select(Asset).where(
            Asset.id == asset_id,
            Asset.user_id == user_id,
            Asset.category == category,
        )
    ).first()

    if not asset:
        raise HTTPException(status_code=404, detail="Activo no encontrado")
    return asset


def list_user_assets(session: Session, user_id: UUID, category: AssetCategory) -> list[Asset]:
    return list(session.exec(
        select(Asset)
        .where(Asset.user_id == user_id, Asset.category == category)
        .order_by(Asset.created_at)
    ).all())


def calculate_fees(quantity: float, price: float, fee_type: str, fee_value: float) -> float:
    # Porcentaje sobre el valor de la operación (cantidad * precio)
    if fee_type == "percent":
        return quantity * price * (fee_value / 100)
    return fee_value


def log_trading_fee(session: Session, user_id: UUID, symbol: str, fees: float) -> Optional[Transaction]:
    """Registra la comisión de compra como gasto en el flujo de caja."""
    if not fees or fees <= 0:
        return None

    fee_tx = Transaction(
        user_id=user_id,
        type=TransactionType.expense,
        category=TRADING_FEES_CATEGORY,
        amount=fees,
        description=f"Fee for buy order: {symbol}",
        date=dt.date.today(),
    )
    session.add(fee_tx)
    return fee_tx


def to_investment_read(asset: Asset) -> InvestmentRead:
    gain, percent = gain_loss(asset)
    return InvestmentRead(
        id=asset.id,
        type=asset.type,
        symbol=asset.symbol,
        name=asset.name,
        quantity=asset.quantity,
        avg_buy_price=asset.avg_buy_price,
        currency=asset.trading_currency,
        sector=asset.sector,
        geography=asset.geography,
        isin=asset.isin,
        fees=asset.fees or 0.0,
        current_price=asset.current_price or 0.0,
        cost_basis=cost_basis(asset),
        current_value=current_value(asset),
        gain=gain,
        gain_percent=percent,
        last_price_update=asset.last_price_update,
        created_at=asset.created_at,
        updated_at=asset.updated_at,
    )


def to_crypto_read(asset: Asset) -> CryptoRead:
    gain, percent = gain_loss(asset)
    return CryptoRead(
        id=asset.id,
        symbol=asset.symbol,
        name=asset.name,
        quantity=asset.quantity,
        avg_buy_price=asset.avg_buy_price,
        coin_id=asset.coin_id,
        fees=asset.fees or 0.0,
        current_price=asset.current_price or 0.0,
        cost_basis=cost_basis(asset),
        current_value=current_value(asset),
        gain=gain,
        gain_percent=percent,
        last_price_update=asset.last_price_update,
        created_at=asset.created_at,
        updated_at=asset.updated_at,
    )
