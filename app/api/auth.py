import logging
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from app.models.user import User
from app.schemas.user import UserCreate, UserRead
from app.core.security import (
    ensure_email_allowed,
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user,
)
from app.database import get_session
from app.utils.profile_helpers import get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Registro
@router.post("/register", response_model=UserRead)
def register(user_create: UserCreate, session: Session = Depends(get_session)):
    email = user_create.email.lower()
    ensure_email_allowed(email)

    user_exists = session.exec(select(User).where(User.email == email)).first()
    if user_exists:
        raise HTTPException(status_code=400, detail="Email ya registrado")

    user = User(email=email, hashed_password=get_password_hash(user_create.password))
    session.add(user)
    session.commit()
    session.refresh(user)

    # Perfil con la configuración por defecto
    get_or_create_profile(session, user.id)
    logger.info("Usuario registrado: %s", user.id)
    return UserRead(id=user.id, email=user.email)

# Login
@router.post("/login")
def login(form_data: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    email = form_data.username.lower()
    ensure_email_allowed(email)

    user = session.exec(select(User).where(User.email == email)).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciales incorrectas")

    access_token = create_access_token(data={"sub": str(user.id)})
    return {"access_token": access_token, "token_type": "bearer"}

# Ruta protegida
@router.get("/me")
def read_users_me(user_id=Depends(get_current_user)):
    return {"user_id": user_id}
