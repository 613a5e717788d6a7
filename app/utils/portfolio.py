"""
Agregaciones del dashboard: patrimonio neto, flujo de caja, asignación y evolución.

Funciones puras sobre filas ya cargadas (modelos SQLModel u objetos equivalentes).
La conversión de moneda se inyecta como `convert(valor, moneda_origen)`.
"""
import calendar
import datetime as dt
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.enums import AssetCategory, TransactionType
from app.utils.currency import Converter
from app.utils.dates import as_utc

CRYPTO_QUOTE_CURRENCY = "USD"
SNAPSHOT_RANGES = ("1M", "6M", "1Y", "ALL")
EXPENSE_PERIODS = ("30d", "3m", "ytd", "all")
ALLOCATION_GROUPS = ("geography", "sector", "type")


def _identity(value: float, currency: Optional[str] = None) -> float:
    return value


def sub_months(value: dt.datetime, months: int):
    """Resta meses ajustando el día al último del mes si hace falta."""
    month_index = value.month - 1 - months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


# --- Activos ---

def cost_basis(asset) -> float:
    """Costo total pagado, comisiones incluidas."""
    return asset.quantity * asset.avg_buy_price + (asset.fees or 0)


def current_value(asset) -> float:
    if asset.category == AssetCategory.investment and not asset.current_price:
        # Sin precio todavía: valoramos al costo
        return cost_basis(asset)
    return asset.quantity * (asset.current_price or 0)


def gain_loss(asset) -> tuple[float, float]:
    basis = cost_basis(asset)
    gain = current_value(asset) - basis
    percent = gain / basis * 100 if basis > 0 else 0.0
    return gain, percent


def asset_currency(asset) -> str:
    if asset.category == AssetCategory.crypto:
        return CRYPTO_QUOTE_CURRENCY
    return asset.trading_currency


# --- Totales ---

def cash_balance(transactions: Iterable) -> float:
    # Las transacciones no llevan moneda: se suman tal cual, ya en la moneda base del perfil.
    # Si el usuario cambia de moneda base los importes anteriores no se reconvierten.
    income = 0.0
    expenses = 0.0
    for tx in transactions:
        if tx.type == TransactionType.income:
            income += tx.amount
        elif tx.type == TransactionType.expense:
            expenses += tx.amount
    return income - expenses


def calculate_totals(
    transactions: Sequence,
    investments: Sequence,
    crypto: Sequence,
    liabilities: Sequence,
    liquidity_accounts: Sequence = (),
    convert: Optional[Converter] = None,
) -> Dict[str, float]:
    """Totales del patrimonio en la moneda base.

    La liquidez es ingresos - gastos de todas las transacciones (ya en moneda base).
    El saldo de las cuentas manuales se informa aparte y no entra en el patrimonio neto.
    """
    convert = convert or _identity

    total_liquidity = cash_balance(transactions)
    total_investments = sum(convert(current_value(i), asset_currency(i)) for i in investments)
    total_crypto = sum(convert(current_value(c), CRYPTO_QUOTE_CURRENCY) for c in crypto)
    total_assets = total_liquidity + total_investments + total_crypto
    total_liabilities = sum(convert(l.current_balance, l.currency) for l in liabilities)
    accounts_balance = sum(convert(a.balance, a.currency) for a in liquidity_accounts)

    return {
        "total_liquidity": total_liquidity,
        "total_investments": total_investments,
        "total_crypto": total_crypto,
        "total_assets": total_assets,
        "total_liabilities": total_liabilities,
        "net_worth": total_assets - total_liabilities,
        "accounts_balance": accounts_balance,
    }


# --- Flujo de caja ---

def monthly_cash_flow(transactions: Iterable, month: dt.date) -> Dict[str, float]:
    monthly_income = 0.0
    monthly_expenses = 0.0
    for tx in transactions:
        if tx.date.year != month.year or tx.date.month != month.month:
            continue
        if tx.type == TransactionType.income:
            monthly_income += tx.amount
        elif tx.type == TransactionType.expense:
            monthly_expenses += tx.amount

    savings_rate = (
        (monthly_income - monthly_expenses) / monthly_income * 100 if monthly_income > 0 else 0.0
    )
    return {
        "month": month.strftime("%Y-%m"),
        "monthly_income": monthly_income,
        "monthly_expenses": monthly_expenses,
        "savings_rate": savings_rate,
    }


def period_start(period: str, today: dt.date) -> Optional[dt.date]:
    if period == "30d":
        return today - dt.timedelta(days=30)
    if period == "3m":
        return sub_months(today, 3)
    if period == "ytd":
        return today.replace(month=1, day=1)
    if period == "all":
        return None
    raise ValueError(f"Periodo no soportado: {period}")


def expenses_by_category(transactions: Iterable, period: str, today: dt.date) -> Dict:
    start = period_start(period, today)
    by_category: Dict[str, float] = defaultdict(float)
    by_day: Dict[dt.date, float] = defaultdict(float)

    for tx in transactions:
        if tx.type != TransactionType.expense:
            continue
        if start is not None and tx.date < start:
            continue
        by_category[tx.category] += tx.amount
        by_day[tx.date] += tx.amount

    total = sum(by_category.values())
    data = [
        {
            "category": category,
            "value": value,
            "percentage": value / total * 100 if total > 0 else 0.0,
        }
        for category, value in by_category.items()
    ]
    data.sort(key=lambda x: x["value"], reverse=True)

    return {
        "period": period,
        "total": total,
        "data": data,
        "timeline": [{"date": d, "value": v} for d, v in sorted(by_day.items())],
    }


# --- Asignación ---

def _with_percentages(grouped: Dict[str, float]) -> List[Dict]:
    total = sum(grouped.values())
    data = [
        {"name": name, "value": value, "percentage": value / total * 100 if total > 0 else 0.0}
        for name, value in grouped.items()
    ]
    data.sort(key=lambda x: x["value"], reverse=True)
    return data


def allocation(investments: Iterable, group_by: str, convert: Optional[Converter] = None) -> List[Dict]:
    if group_by not in ALLOCATION_GROUPS:
        raise ValueError(f"Agrupación no soportada: {group_by}")
    convert = convert or _identity

    grouped: Dict[str, float] = defaultdict(float)
    for inv in investments:
        key = getattr(inv, group_by) or "Other"
        grouped[getattr(key, "value", key)] += convert(current_value(inv), asset_currency(inv))
    return _with_percentages(grouped)


def crypto_allocation(crypto: Iterable) -> List[Dict]:
    grouped: Dict[str, float] = defaultdict(float)
    for c in crypto:
        value = c.quantity * (c.current_price or 0)
        if value > 0:
            grouped[c.symbol.upper()] += value
    return _with_percentages(grouped)


# --- Snapshots ---

def range_cutoff(time_range: str, now: dt.datetime) -> dt.datetime:
    now = as_utc(now)
    if time_range == "1M":
        return sub_months(now, 1)
    if time_range == "6M":
        return sub_months(now, 6)
    if time_range == "1Y":
        return sub_months(now, 12)
    if time_range == "ALL":
        return dt.datetime.min.replace(tzinfo=dt.timezone.utc)
    raise ValueError(f"Rango no soportado: {time_range}")


def snapshots_by_range(snapshots: Iterable, time_range: str, now: dt.datetime) -> List[Dict]:
    cutoff = range_cutoff(time_range, now)
    points = [
        {"date": as_utc(s.date), "value": s.net_worth}
        for s in snapshots
        if as_utc(s.date) > cutoff
    ]
    points.sort(key=lambda p: p["date"])
    return points
