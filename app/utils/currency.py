import logging
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

Converter = Callable[[float, Optional[str]], float]


def convert_currency(
    value: float,
    source_currency: Optional[str],
    base_currency: str,
    rates: Optional[Mapping[str, float]],
) -> float:
    """Convierte `value` a la moneda base.

    Las tasas vienen como base -> destino (base EUR: {"USD": 1.08}), así que
    100 USD en EUR son 100 / 1.08. Sin tasa conocida se devuelve el valor tal cual.
    """
    source_currency = getattr(source_currency, "value", source_currency)
    base_currency = getattr(base_currency, "value", base_currency)
    if not source_currency or source_currency == base_currency:
        return value

    rate = (rates or {}).get(source_currency)
    if rate:
        return value / rate

    logger.debug("Sin tasa para %s -> %s, valor sin convertir", source_currency, base_currency)
    return value


def make_converter(base_currency: str, rates: Optional[Mapping[str, float]]) -> Converter:
    def convert(value: float, source_currency: Optional[str] = None) -> float:
        return convert_currency(value, source_currency, base_currency, rates)
    return convert
