import asyncio

import pytest

from app.routes import fx
from app.utils import market_data


class Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_search_coingecko_maps_results(market):
    market.add("/search", {"coins": [{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "rank": 1}]})

    results = asyncio.run(market_data.search_coingecko("bit"))

    assert results == [{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"}]


def test_search_coingecko_failure_returns_empty():
    assert asyncio.run(market_data.search_coingecko("bit")) == []


def test_resolve_coin_id_short_symbol_uses_exact_match(market):
    market.add("/search", {"coins": [
        {"id": "bitcoin-cash", "symbol": "bch", "name": "Bitcoin Cash"},
        {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"},
    ]})

    assert asyncio.run(market_data.resolve_coin_id("BTC")) == "bitcoin"


def test_resolve_coin_id_long_id_is_kept(market):
    assert asyncio.run(market_data.resolve_coin_id("Ethereum")) == "ethereum"
    assert market.calls == []


def test_get_crypto_price(market):
    market.add("/simple/price", {"ethereum": {"usd": 2500}})
    assert asyncio.run(market_data.get_crypto_price("ethereum")) == 2500.0


def test_get_crypto_price_failure_returns_none():
    assert asyncio.run(market_data.get_crypto_price("ethereum")) is None


def test_batch_prices_served_from_cache_within_ttl(market):
    market.add("/simple/price", lambda url, params: {c: {"usd": 10.0} for c in params["ids"].split(",")})
    clock = Clock()
    cache = market_data.CryptoPriceCache(ttl_seconds=300, clock=clock)

    first = asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin", "ethereum"], cache=cache))
    clock.now += 299
    second = asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"], cache=cache))

    assert first == {"bitcoin": 10.0, "ethereum": 10.0}
    # Solo los ids pedidos, sin llamada nueva
    assert second == {"bitcoin": 10.0}
    assert len(market.calls_to("/simple/price")) == 1


def test_batch_prices_fetch_only_missing_or_stale_ids(market):
    market.add("/simple/price", lambda url, params: {c: {"usd": 1.0} for c in params["ids"].split(",")})
    clock = Clock()
    cache = market_data.CryptoPriceCache(ttl_seconds=300, clock=clock)

    asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"], cache=cache))
    asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin", "solana"], cache=cache))
    clock.now += 301
    asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"], cache=cache))

    requested = [c[1]["ids"] for c in market.calls_to("/simple/price")]
    assert requested == ["bitcoin", "solana", "bitcoin"]


def test_batch_prices_force_refresh_bypasses_cache(market):
    market.add("/simple/price", {"bitcoin": {"usd": 5.0}})
    cache = market_data.CryptoPriceCache(ttl_seconds=300, clock=Clock())

    asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"], cache=cache))
    asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"], force_refresh=True, cache=cache))

    assert len(market.calls_to("/simple/price")) == 2


def test_batch_prices_rate_limit_propagates(market):
    market.add("/simple/price", market_data.RateLimitError("429"))

    with pytest.raises(market_data.RateLimitError):
        asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"]))


def test_batch_prices_other_errors_become_market_data_error(market):
    market.add("/simple/price", RuntimeError("boom"))

    with pytest.raises(market_data.MarketDataError):
        asyncio.run(market_data.fetch_all_crypto_prices(["bitcoin"]))


def test_batch_prices_empty_ids_skip_network(market):
    assert asyncio.run(market_data.fetch_all_crypto_prices([])) == {}
    assert market.calls == []


def test_stock_price_prefers_finnhub(market):
    market.add("finnhub.io", {"c": 187.5})

    assert asyncio.run(market_data.get_stock_price("AAPL", api_key="k")) == 187.5
    assert market.calls_to("yahoo") == []


def test_stock_price_falls_back_to_yahoo_suffixes(market):
    market.add("finnhub.io", {"c": 0})
    market.add("/chart/SAP.DE", {"chart": {"result": [{"meta": {"regularMarketPrice": 120.0}}]}})

    assert asyncio.run(market_data.get_stock_price("SAP", api_key="k")) == 120.0
    tried = [c[0].rsplit("/", 1)[-1] for c in market.calls_to("/chart/")]
    assert tried == ["SAP", "SAP.DE"]


def test_stock_price_does_not_duplicate_suffix(market):
    asyncio.run(market_data.get_stock_price("VWCE.DE"))

    tried = [c[0].rsplit("/", 1)[-1] for c in market.calls_to("/chart/")]
    assert "VWCE.DE.DE" not in tried
    assert tried[0] == "VWCE.DE"


def test_stock_price_all_fail_returns_none():
    assert asyncio.run(market_data.get_stock_price("NOPE")) is None


def test_search_by_isin(market):
    market.add("/finance/search", {"quotes": [
        {"symbol": "IWDA.AS", "longname": "iShares Core MSCI World", "isin": "IE00B4L5Y983"},
    ]})

    result = asyncio.run(market_data.search_by_isin("IE00B4L5Y983"))

    assert result == {"symbol": "IWDA.AS", "name": "iShares Core MSCI World", "isin": "IE00B4L5Y983"}


def test_search_by_isin_no_quotes(market):
    market.add("/finance/search", {"quotes": []})
    assert asyncio.run(market_data.search_by_isin("XX")) is None


def test_exchange_rates(market):
    market.add("frankfurter", {"base": "EUR", "rates": {"USD": 1.1}})
    assert asyncio.run(market_data.fetch_exchange_rates("EUR")) == {"USD": 1.1}


def test_exchange_rates_failure_returns_none():
    assert asyncio.run(market_data.fetch_exchange_rates("EUR")) is None


def test_fx_cache_keeps_last_known_rates(market):
    market.add("frankfurter", {"rates": {"USD": 1.1}})
    assert asyncio.run(fx.get_rates("EUR")) == {"USD": 1.1}

    market.routes.clear()
    # Proveedor caído: se sigue usando la última tabla
    assert asyncio.run(fx.get_rates("EUR", force_refresh=True)) == {"USD": 1.1}
