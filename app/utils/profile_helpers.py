from uuid import UUID
from typing import Optional
from sqlmodel import Session

from app.core.config import DEFAULT_BASE_CURRENCY, FINNHUB_API_KEY
from app.models.enums import Currency
from app.models.profile import Profile


def get_or_create_profile(session: Session, user_id: UUID) -> Profile:
    """
    Devuelve el perfil del usuario; si no existe lo crea con los valores por defecto.
    Idempotente (seguro si se llama varias veces).
    """
    profile = session.get(Profile, user_id)
    if profile:
        return profile

    try:
        base_currency = Currency(DEFAULT_BASE_CURRENCY)
    except ValueError:
        base_currency = Currency.EUR

    profile = Profile(id=user_id, base_currency=base_currency)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def get_finnhub_key(profile: Optional[Profile]) -> Optional[str]:
    # La variable de entorno tiene prioridad sobre la key guardada en el perfil
    if FINNHUB_API_KEY:
        return FINNHUB_API_KEY
    if profile and profile.finnhub_key:
        return profile.finnhub_key
    return None
