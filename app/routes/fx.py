# app/routes/fx.py
from fastapi import APIRouter, HTTPException, Query
from typing import Dict, Optional, Tuple
import time

from app.core.config import FX_CACHE_SECONDS
from app.models.enums import Currency
from app.utils.currency import convert_currency
from app.utils import market_data

router = APIRouter(prefix="/fx", tags=["fx"])

# Cache TTL en memoria (clave: base -> (timestamp, rates))
_CACHE: Dict[str, Tuple[float, Dict[str, float]]] = {}


async def get_rates(base: str, force_refresh: bool = False) -> Optional[Dict[str, float]]:
    """Tasas base -> destino. Si el proveedor falla se usa la última tabla conocida."""
    base = getattr(base, "value", base)
    now = time.time()
    cached = _CACHE.get(base)
    if cached and not force_refresh and now - cached[0] < FX_CACHE_SECONDS:
        return cached[1]

    rates = await market_data.fetch_exchange_rates(base)
    if rates:
        _CACHE[base] = (now, rates)
        return rates
    # Mantener el último valor conocido aunque esté vencido
    return cached[1] if cached else None


def clear_cache():
    _CACHE.clear()


@router.get("/rates")
async def get_exchange_rates(base: Currency = Query(Currency.EUR), refresh: bool = Query(False)):
    rates = await get_rates(base.value, force_refresh=refresh)
    if rates is None:
        raise HTTPException(status_code=502, detail="No fue posible obtener las tasas de cambio")
    return {"base": base.value, "rates": rates, "as_of": int(_CACHE[base.value][0])}


@router.get("/convert")
async def convert(
    value: float = Query(...),
    from_: str = Query(..., alias="from"),
    to: Currency = Query(...),
):
    if from_ == to.value:
        return {"value": value, "from": from_, "to": to.value, "converted": value, "source": "identity"}

    rates = await get_rates(to.value)
    converted = convert_currency(value, from_, to.value, rates)
    source = "rates" if rates and rates.get(from_) else "unconverted"
    return {"value": value, "from": from_, "to": to.value, "converted": converted, "source": source}
