# app/api/profile.py

from fastapi import APIRouter, Depends
from sqlmodel import Session
from uuid import UUID

from app.core.config import FINNHUB_API_KEY
from app.core.security import get_current_user
from app.database import get_session
from app.models.profile import Profile
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.utils.dates import utcnow
from app.utils.profile_helpers import get_or_create_profile

router = APIRouter(prefix="/profile", tags=["profile"])


def _to_read(profile: Profile) -> ProfileRead:
    # Nunca devolvemos la key en claro
    return ProfileRead(
        id=profile.id,
        base_currency=profile.base_currency,
        is_privacy_mode=profile.is_privacy_mode,
        has_finnhub_key=bool(FINNHUB_API_KEY or profile.finnhub_key),
        is_finnhub_key_env=bool(FINNHUB_API_KEY),
        updated_at=profile.updated_at,
    )


@router.get("", response_model=ProfileRead)
@router.get("/", response_model=ProfileRead)
def get_profile(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return _to_read(get_or_create_profile(session, user_id))


@router.put("", response_model=ProfileRead)
@router.put("/", response_model=ProfileRead)
def update_profile(
    data: ProfileUpdate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    profile = get_or_create_profile(session, user_id)

    updates = data.model_dump(exclude_unset=True)
    if updates.get("base_currency") is not None:
        profile.base_currency = updates["base_currency"]
    if updates.get("is_privacy_mode") is not None:
        profile.is_privacy_mode = updates["is_privacy_mode"]
    if "finnhub_key" in updates:
        profile.finnhub_key = (updates["finnhub_key"] or "").strip() or None

    profile.updated_at = utcnow()
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return _to_read(profile)
