import datetime as dt


def utcnow() -> dt.datetime:
    """Datetime aware en UTC (lo que guardamos en las columnas)."""
    return dt.datetime.now(dt.timezone.utc)


def as_utc(value: dt.datetime) -> dt.datetime:
    # Algunos motores (SQLite) devuelven la fecha sin tzinfo; se asume UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)
