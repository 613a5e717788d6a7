import datetime as dt
from types import SimpleNamespace

import pytest

from app.models.enums import AssetCategory, TransactionType
from app.utils import portfolio
from app.utils.currency import make_converter
from app.utils.dates import as_utc, utcnow

UTC = dt.timezone.utc


def tx(type_, amount, date=dt.date(2024, 3, 10), category="General"):
    return SimpleNamespace(type=type_, amount=amount, date=date, category=category)


def investment(quantity, avg, price, currency="USD", fees=0.0, **extra):
    data = dict(
        category=AssetCategory.investment,
        type="stock",
        symbol="AAPL",
        quantity=quantity,
        avg_buy_price=avg,
        current_price=price,
        fees=fees,
        trading_currency=currency,
        sector=None,
        geography=None,
    )
    data.update(extra)
    return SimpleNamespace(**data)


def coin(symbol, quantity, price, avg=0.0):
    return SimpleNamespace(
        category=AssetCategory.crypto,
        symbol=symbol,
        quantity=quantity,
        avg_buy_price=avg,
        current_price=price,
        fees=0.0,
    )


def test_cost_basis_includes_fees():
    assert portfolio.cost_basis(investment(10, 100, 120, fees=5)) == 1005


def test_investment_without_price_is_valued_at_cost():
    assert portfolio.current_value(investment(10, 100, 0)) == 1000


def test_crypto_without_price_is_worth_zero():
    assert portfolio.current_value(coin("BTC", 1, 0, avg=30000)) == 0


def test_gain_loss_percentage():
    gain, percent = portfolio.gain_loss(investment(10, 100, 120))
    assert gain == 200
    assert percent == pytest.approx(20)


def test_calculate_totals_net_worth_identity():
    totals = portfolio.calculate_totals(
        transactions=[tx(TransactionType.income, 3000), tx(TransactionType.expense, 1000)],
        investments=[investment(10, 100, 150, currency="EUR")],
        crypto=[coin("BTC", 0.5, 40000)],
        liabilities=[SimpleNamespace(current_balance=5000, currency="EUR")],
        liquidity_accounts=[SimpleNamespace(balance=700, currency="EUR")],
    )

    assert totals["total_liquidity"] == 2000
    assert totals["total_investments"] == 1500
    assert totals["total_crypto"] == 20000
    assert totals["total_assets"] == 23500
    assert totals["total_liabilities"] == 5000
    assert totals["net_worth"] == totals["total_assets"] - totals["total_liabilities"]
    # Las cuentas manuales no entran en el patrimonio
    assert totals["accounts_balance"] == 700


def test_calculate_totals_converts_to_base_currency():
    convert = make_converter("EUR", {"USD": 2.0})
    totals = portfolio.calculate_totals(
        transactions=[],
        investments=[investment(1, 100, 100, currency="USD")],
        crypto=[coin("ETH", 1, 1000)],
        liabilities=[SimpleNamespace(current_balance=300, currency="USD")],
        convert=convert,
    )

    assert totals["total_investments"] == 50
    assert totals["total_crypto"] == 500
    assert totals["total_liabilities"] == 150
    assert totals["net_worth"] == 400


def test_transactions_are_not_converted_to_base_currency():
    convert = make_converter("EUR", {"USD": 2.0})
    totals = portfolio.calculate_totals(
        transactions=[tx(TransactionType.income, 1000), tx(TransactionType.expense, 200)],
        investments=[],
        crypto=[],
        liabilities=[],
        convert=convert,
    )

    assert totals["total_liquidity"] == 800
    assert totals["net_worth"] == 800


def test_monthly_cash_flow_filters_month():
    transactions = [
        tx(TransactionType.income, 2000, dt.date(2024, 3, 1)),
        tx(TransactionType.expense, 500, dt.date(2024, 3, 15)),
        tx(TransactionType.expense, 999, dt.date(2024, 2, 28)),
    ]

    flow = portfolio.monthly_cash_flow(transactions, dt.date(2024, 3, 1))

    assert flow == {
        "month": "2024-03",
        "monthly_income": 2000,
        "monthly_expenses": 500,
        "savings_rate": 75,
    }


def test_monthly_cash_flow_without_income_has_zero_rate():
    flow = portfolio.monthly_cash_flow([tx(TransactionType.expense, 50)], dt.date(2024, 3, 1))
    assert flow["savings_rate"] == 0


def test_expenses_by_category_sorted_with_timeline():
    today = dt.date(2024, 3, 31)
    transactions = [
        tx(TransactionType.expense, 100, dt.date(2024, 3, 20), "Food"),
        tx(TransactionType.expense, 300, dt.date(2024, 3, 21), "Rent"),
        tx(TransactionType.expense, 100, dt.date(2024, 3, 21), "Food"),
        tx(TransactionType.income, 5000, dt.date(2024, 3, 21), "Salary"),
        tx(TransactionType.expense, 1000, dt.date(2023, 1, 1), "Old"),
    ]

    result = portfolio.expenses_by_category(transactions, "30d", today)

    assert result["total"] == 500
    assert [d["category"] for d in result["data"]] == ["Rent", "Food"]
    assert result["data"][0]["percentage"] == pytest.approx(60)
    assert result["timeline"] == [
        {"date": dt.date(2024, 3, 20), "value": 100},
        {"date": dt.date(2024, 3, 21), "value": 400},
    ]


def test_period_start_rejects_unknown_period():
    with pytest.raises(ValueError):
        portfolio.period_start("5y", dt.date(2024, 1, 1))


def test_period_start_ytd_and_three_months():
    today = dt.date(2024, 5, 31)
    assert portfolio.period_start("ytd", today) == dt.date(2024, 1, 1)
    assert portfolio.period_start("3m", today) == dt.date(2024, 2, 29)
    assert portfolio.period_start("all", today) is None


def test_allocation_groups_missing_values_as_other():
    investments = [
        investment(1, 100, 300, currency="EUR", geography="US"),
        investment(1, 100, 100, currency="EUR", geography=None),
    ]

    slices = portfolio.allocation(investments, "geography")

    assert slices[0] == {"name": "US", "value": 300, "percentage": 75}
    assert slices[1]["name"] == "Other"


def test_allocation_rejects_unknown_grouping():
    with pytest.raises(ValueError):
        portfolio.allocation([], "color")


def test_crypto_allocation_skips_zero_value():
    slices = portfolio.crypto_allocation([coin("btc", 1, 100), coin("DOGE", 10, 0), coin("eth", 1, 300)])
    assert [s["name"] for s in slices] == ["ETH", "BTC"]


def test_snapshots_by_range_filters_and_sorts():
    now = dt.datetime(2024, 6, 15, tzinfo=UTC)
    snapshots = [
        SimpleNamespace(date=dt.datetime(2024, 6, 1, tzinfo=UTC), net_worth=3),
        SimpleNamespace(date=dt.datetime(2023, 1, 1, tzinfo=UTC), net_worth=1),
        SimpleNamespace(date=dt.datetime(2024, 5, 20, tzinfo=UTC), net_worth=2),
    ]

    assert portfolio.snapshots_by_range(snapshots, "1M", now) == [
        {"date": dt.datetime(2024, 5, 20, tzinfo=UTC), "value": 2},
        {"date": dt.datetime(2024, 6, 1, tzinfo=UTC), "value": 3},
    ]
    assert len(portfolio.snapshots_by_range(snapshots, "ALL", now)) == 3


def test_sub_months_clamps_day():
    assert portfolio.sub_months(dt.date(2024, 3, 31), 1) == dt.date(2024, 2, 29)
    assert portfolio.sub_months(dt.date(2024, 1, 15), 2) == dt.date(2023, 11, 15)


def test_snapshots_mix_naive_and_aware_dates():
    # SQLite devuelve las fechas sin tzinfo aunque se guarden en UTC
    snapshots = [
        SimpleNamespace(date=dt.datetime(2024, 6, 1), net_worth=3),
        SimpleNamespace(date=dt.datetime(1990, 1, 1, tzinfo=UTC), net_worth=1),
    ]

    points = portfolio.snapshots_by_range(snapshots, "ALL", dt.datetime(2024, 6, 15))

    assert [p["value"] for p in points] == [1, 3]
    assert all(p["date"].tzinfo is not None for p in points)


def test_range_cutoff_is_timezone_aware():
    now = utcnow()
    for time_range in portfolio.SNAPSHOT_RANGES:
        assert portfolio.range_cutoff(time_range, now).tzinfo is not None


def test_utcnow_is_timezone_aware():
    assert utcnow().tzinfo is not None
    assert as_utc(dt.datetime(2024, 1, 1)) == dt.datetime(2024, 1, 1, tzinfo=UTC)


def test_zero_quantity_investment_is_worth_zero():
    # Posición cerrada con precio conocido: no se valora por las comisiones
    holding = investment(0, 100, 120, fees=5)
    assert portfolio.current_value(holding) == 0


def test_investment_without_price_falls_back_to_cost_even_with_fees():
    assert portfolio.current_value(investment(2, 50, None, fees=3)) == 103
