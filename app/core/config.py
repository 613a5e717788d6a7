import os
from dotenv import load_dotenv

load_dotenv()  # Carga las variables de entorno


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# Base de datos
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./wealth_compass.db")
SQL_ECHO = _as_bool(os.getenv("SQL_ECHO"))

# Seguridad
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Lista blanca de correos autorizados (vacía = sin restricción)
ALLOWED_EMAILS = [email.lower() for email in _as_list(os.getenv("ALLOWED_EMAILS"))]

CORS_ORIGINS = _as_list(os.getenv("CORS_ORIGINS")) or ["http://localhost:5173", "http://localhost:3000"]

# Proveedores de precios
FINNHUB_API_KEY = os.getenv("FINNHUB_API_KEY") or None
YAHOO_PROXY_URL = os.getenv("YAHOO_PROXY_URL", "")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
CRYPTO_CACHE_SECONDS = int(os.getenv("CRYPTO_CACHE_SECONDS", str(5 * 60)))  # 5 minutos
FX_CACHE_SECONDS = int(os.getenv("FX_CACHE_SECONDS", str(60 * 60)))

DEFAULT_BASE_CURRENCY = os.getenv("DEFAULT_BASE_CURRENCY", "EUR")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
