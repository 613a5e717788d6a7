"""
Clientes de precios de mercado.

- CoinGecko: búsqueda y precios de cripto (con cache de lote de 5 minutos).
- Finnhub: cotización de acciones/ETF (requiere API key).
- Yahoo Finance: fallback de cotización probando sufijos de bolsa, y búsqueda por ISIN.
- Frankfurter: tasas de cambio.

Las búsquedas y precios individuales nunca lanzan: devuelven None o [].
El lote de cripto sí lanza para que quien llama conserve el último precio conocido.
"""
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from app.core.config import CRYPTO_CACHE_SECONDS, HTTP_TIMEOUT_SECONDS, YAHOO_PROXY_URL

logger = logging.getLogger(__name__)

COINGECKO_URL = "https://api.coingecko.com/api/v3"
FINNHUB_QUOTE_URL = "https://finnhub.io/api/v1/quote"
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
YAHOO_SEARCH_URL = "https://query1.finance.yahoo.com/v1/finance/search"
FRANKFURTER_URL = "https://api.frankfurter.app/latest"

# Bolsas europeas más comunes
EXCHANGE_SUFFIXES = ["", ".DE", ".MI", ".L", ".PA", ".AS"]


class MarketDataError(Exception):
    pass


class RateLimitError(MarketDataError):
    pass


async def _get_json(url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
        r = await client.get(url, params=params)
        if r.status_code == 429:
            raise RateLimitError(f"Rate limit reached (429) for {url}")
        r.raise_for_status()
        return r.json()


def _proxied(url: str, params: Optional[Dict[str, Any]] = None) -> Tuple[str, Optional[Dict[str, Any]]]:
    """Antepone el proxy configurado; el proxy recibe la URL completa codificada."""
    if not YAHOO_PROXY_URL:
        return url, params
    if params:
        url = str(httpx.URL(url, params=params))
    return YAHOO_PROXY_URL + quote(url, safe=""), None


# --- CoinGecko ---

async def search_coingecko(query: str) -> List[Dict[str, str]]:
    try:
        data = await _get_json(f"{COINGECKO_URL}/search", {"query": query})
        return [
            {"id": c["id"], "symbol": c["symbol"], "name": c["name"]}
            for c in data.get("coins", [])
        ]
    except Exception as err:
        logger.warning("CoinGecko search error for %s: %s", query, err)
        return []


async def resolve_coin_id(id_or_symbol: str) -> str:
    """Los ids cortos (<= 5) se tratan como símbolo y se buscan en CoinGecko."""
    coin_id = id_or_symbol.lower()
    if len(coin_id) <= 5:
        results = await search_coingecko(coin_id)
        match = next((c for c in results if c["symbol"].lower() == coin_id), None)
        if match:
            coin_id = match["id"]
    return coin_id


async def get_crypto_price(id_or_symbol: str) -> Optional[float]:
    try:
        coin_id = await resolve_coin_id(id_or_symbol)
        data = await _get_json(
            f"{COINGECKO_URL}/simple/price", {"ids": coin_id, "vs_currencies": "usd"}
        )
        price = (data.get(coin_id) or {}).get("usd")
        return float(price) if price else None
    except Exception as err:
        logger.warning("Error fetching crypto price for %s: %s", id_or_symbol, err)
        return None


class CryptoPriceCache:
    """Cache por id de moneda: {id: (timestamp, precio)} con TTL fijo."""

    def __init__(self, ttl_seconds: float = CRYPTO_CACHE_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[float, float]] = {}

    def get_fresh(self, coin_ids: Iterable[str]) -> Dict[str, float]:
        now = self.clock()
        fresh = {}
        for coin_id in coin_ids:
            entry = self._entries.get(coin_id)
            if entry and now - entry[0] < self.ttl_seconds:
                fresh[coin_id] = entry[1]
        return fresh

    def update(self, prices: Dict[str, float]) -> None:
        now = self.clock()
        for coin_id, price in prices.items():
            self._entries[coin_id] = (now, price)

    def clear(self) -> None:
        self._entries.clear()


crypto_cache = CryptoPriceCache()


async def fetch_all_crypto_prices(
    coin_ids: Iterable[str],
    force_refresh: bool = False,
    cache: Optional[CryptoPriceCache] = None,
) -> Dict[str, float]:
    """Precios USD por id de CoinGecko, solo para los ids pedidos.

    Los ids con entrada fresca salen de cache; el resto se pide en una sola llamada.
    Lanza RateLimitError / MarketDataError si la API falla.
    """
    cache = cache or crypto_cache
    unique_ids = sorted({c.lower() for c in coin_ids if c})
    if not unique_ids:
        return {}

    prices = {} if force_refresh else cache.get_fresh(unique_ids)
    missing = [c for c in unique_ids if c not in prices]
    if not missing:
        logger.debug("Using cached crypto prices for %s", unique_ids)
        return prices

    try:
        data = await _get_json(
            f"{COINGECKO_URL}/simple/price",
            {"ids": ",".join(missing), "vs_currencies": "usd"},
        )
    except RateLimitError:
        raise
    except Exception as err:
        raise MarketDataError(f"CoinGecko batch error: {err}") from err

    fetched = {}
    for coin_id in missing:
        price = (data.get(coin_id) or {}).get("usd")
        if price:
            fetched[coin_id] = float(price)

    cache.update(fetched)
    prices.update(fetched)
    return prices


# --- Acciones / ETF ---

async def _finnhub_quote(symbol: str, api_key: str) -> Optional[float]:
    data = await _get_json(FINNHUB_QUOTE_URL, {"symbol": symbol, "token": api_key})
    price = data.get("c") or 0
    return float(price) if price > 0 else None


async def _yahoo_chart_price(symbol: str) -> Optional[float]:
    url, params = _proxied(YAHOO_CHART_URL.format(symbol=symbol))
    data = await _get_json(url, params)
    result = ((data or {}).get("chart") or {}).get("result") or []
    if not result:
        return None
    price = (result[0].get("meta") or {}).get("regularMarketPrice")
    return float(price) if price else None


async def get_stock_price(symbol: str, api_key: Optional[str] = None) -> Optional[float]:
    """Finnhub si hay key; si falla, Yahoo probando sufijos de bolsa."""
    symbol = symbol.strip().upper()
    if api_key:
        try:
            price = await _finnhub_quote(symbol, api_key)
            if price:
                return price
        except Exception as err:
            logger.debug("Finnhub failed for %s, falling back to Yahoo: %s", symbol, err)

    for suffix in EXCHANGE_SUFFIXES:
        try_symbol = symbol if symbol.upper().endswith(suffix) else symbol + suffix
        try:
            price = await _yahoo_chart_price(try_symbol)
            if price:
                return price
        except Exception as err:
            logger.debug("Yahoo lookup failed for %s: %s", try_symbol, err)

    logger.warning("Failed to fetch price for %s after retries.", symbol)
    return None


async def search_by_isin(query: str) -> Optional[Dict[str, Optional[str]]]:
    """Busca un activo por ISIN o nombre (mejor coincidencia de Yahoo)."""
    try:
        url, params = _proxied(
            YAHOO_SEARCH_URL, {"q": query, "quotesCount": 1, "newsCount": 0}
        )
        data = await _get_json(url, params)
        quotes = data.get("quotes") or []
        if not quotes:
            return None
        best = quotes[0]
        return {
            "symbol": best.get("symbol"),
            "name": best.get("longname") or best.get("shortname"),
            "isin": best.get("isin"),
        }
    except Exception as err:
        logger.warning("Error searching for %s: %s", query, err)
        return None


# --- Tasas de cambio ---

async def fetch_exchange_rates(base_currency: str) -> Optional[Dict[str, float]]:
    try:
        data = await _get_json(FRANKFURTER_URL, {"from": base_currency})
        return data.get("rates") or None
    except Exception as err:
        logger.warning("Error fetching exchange rates for %s: %s", base_currency, err)
        return None
