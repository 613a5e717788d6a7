"""
Calculadoras de proyección financiera.

Todas son funciones puras: reciben números y devuelven una lista de puntos anuales
(año 0 incluido). No tocan la base de datos ni la red.
"""
import math
import random
from typing import Any, Dict, List, Optional, Protocol

MONTHS_PER_YEAR = 12
FIRE_MAX_YEARS = 60
DEFAULT_SIMULATIONS = 500
PERCENTILES = {"p10": 0.1, "p50": 0.5, "p90": 0.9}


class RandomSource(Protocol):
    def random(self) -> float: ...


def _num(value: Any) -> float:
    """Convierte a float; lo no numérico (o NaN) cuenta como 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _years(value: Any) -> int:
    return max(int(_num(value)), 0)


def compound_interest(principal, monthly_contribution, annual_rate, years) -> List[Dict[str, float]]:
    """Proyección con aportes mensuales y capitalización mensual.

    Por cada año se registra el estado actual y luego se simulan 12 meses:
    balance = (balance + aporte) * (1 + tasa/100/12).
    """
    balance = _num(principal)
    contributed = balance
    contribution = _num(monthly_contribution)
    monthly_rate = _num(annual_rate) / 100 / MONTHS_PER_YEAR

    result = []
    for year in range(_years(years) + 1):
        result.append({
            "year": year,
            "balance": balance,
            "contributed": contributed,
            "interest": balance - contributed,
        })
        for _ in range(MONTHS_PER_YEAR):
            balance = (balance + contribution) * (1 + monthly_rate)
            contributed += contribution
    return result


def box_muller(rng: RandomSource) -> float:
    """Muestra normal estándar a partir de dos uniformes en (0, 1]."""
    u = 0.0
    v = 0.0
    while u == 0.0:
        u = rng.random()
    while v == 0.0:
        v = rng.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def monte_carlo(
    initial_portfolio,
    monthly_contribution,
    expected_return,
    volatility,
    years,
    simulations: int = DEFAULT_SIMULATIONS,
    rng: Optional[RandomSource] = None,
) -> List[Dict[str, float]]:
    """Simulación de Monte Carlo con movimiento browniano geométrico.

    Cada camino evoluciona mes a mes con
    balance = balance * exp(drift + vol * Z) + aporte, y se guarda un valor por año.
    Devuelve los percentiles 10/50/90 por año (índice floor(S * p) del vector ordenado).

    `rng` permite inyectar un generador con semilla para obtener resultados reproducibles.
    """
    simulations = int(_num(simulations))
    if simulations < 1:
        raise ValueError("simulations debe ser al menos 1")
    rng = rng or random.Random()

    horizon = _years(years)
    contribution = _num(monthly_contribution)
    annual_mean = _num(expected_return) / 100
    annual_vol = _num(volatility) / 100
    time_step = 1 / MONTHS_PER_YEAR
    # Drift con corrección de volatilidad: (mu - sigma^2 / 2) * dt
    drift = (annual_mean - 0.5 * annual_vol ** 2) * time_step
    vol = annual_vol * math.sqrt(time_step)

    paths = []
    for _ in range(simulations):
        balance = _num(initial_portfolio)
        path = [balance]
        for month in range(1, horizon * MONTHS_PER_YEAR + 1):
            growth = math.exp(drift + vol * box_muller(rng))
            # El aporte entra al final del mes
            balance = balance * growth + contribution
            if month % MONTHS_PER_YEAR == 0:
                path.append(balance)
        paths.append(path)

    result = []
    for year in range(horizon + 1):
        values = sorted(path[year] for path in paths)
        point: Dict[str, float] = {"year": year}
        for name, p in PERCENTILES.items():
            point[name] = values[math.floor(len(values) * p)]
        result.append(point)
    return result


def future_cost(amount, inflation_rate, years) -> float:
    return _num(amount) * (1 + _num(inflation_rate) / 100) ** _num(years)


def purchasing_power(amount, inflation_rate, years) -> float:
    return _num(amount) / (1 + _num(inflation_rate) / 100) ** _num(years)


def inflation_projection(amount, inflation_rate, years) -> List[Dict[str, float]]:
    amount = _num(amount)
    return [
        {
            "year": year,
            "future_cost": future_cost(amount, inflation_rate, year),
            "purchasing_power": purchasing_power(amount, inflation_rate, year),
            "original_amount": amount,
        }
        for year in range(_years(years) + 1)
    ]


def fire_number(annual_expenses, swr) -> float:
    swr = _num(swr)
    if swr <= 0:
        raise ValueError("La tasa de retiro segura debe ser mayor a cero")
    return _num(annual_expenses) / (swr / 100)


def real_return(nominal_return, inflation_rate) -> float:
    """Retorno real en decimal a partir de porcentajes nominales."""
    return (1 + _num(nominal_return) / 100) / (1 + _num(inflation_rate) / 100) - 1


def fire_projection(
    current_age,
    current_net_worth,
    annual_income,
    annual_expenses,
    swr=4.0,
    nominal_return=7.0,
    inflation_rate=3.0,
    max_years: int = FIRE_MAX_YEARS,
) -> Dict[str, Any]:
    """Proyección FIRE en dinero de hoy (retorno real + ahorro anual constante)."""
    age0 = int(_num(current_age))
    income = _num(annual_income)
    expenses = _num(annual_expenses)
    savings = income - expenses
    savings_rate = savings / income * 100 if income > 0 else 0.0

    target = fire_number(expenses, swr)
    lean_target = fire_number(expenses * 0.8, swr)
    fat_target = fire_number(expenses * 1.5, swr)
    rate = real_return(nominal_return, inflation_rate)

    net_worth = _num(current_net_worth)
    reach_fire_age = None
    data = []
    for i in range(max_years + 1):
        age = age0 + i
        if net_worth >= target and reach_fire_age is None:
            reach_fire_age = age
        data.append({
            "age": age,
            "net_worth": net_worth,
            "fire_target": target,
            "lean_fire": lean_target,
            "fat_fire": fat_target,
        })
        net_worth = net_worth * (1 + rate) + savings

    return {
        "fire_number": target,
        "lean_fire_number": lean_target,
        "fat_fire_number": fat_target,
        "annual_savings": savings,
        "savings_rate": savings_rate,
        "real_return": rate,
        "reach_fire_age": reach_fire_age,
        "years_to_fire": reach_fire_age - age0 if reach_fire_age is not None else None,
        "data": data,
    }
