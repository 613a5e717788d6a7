from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from uuid import UUID
from typing import List

from app.core.security import get_current_user
from app.database import get_session
from app.models.liability import Liability
from app.schemas.liability import LiabilityCreate, LiabilityRead
from app.utils.dates import utcnow

router = APIRouter(prefix="/liabilities", tags=["liabilities"])


def _get_user_liability(session: Session, user_id: UUID, liability_id: UUID) -> Liability:
    liability = session.exec(
        select(Liability).where(Liability.id == liability_id, Liability.user_id == user_id)
    ).first()
    if not liability:
        raise HTTPException(status_code=404, detail="Pasivo no encontrado")
    return liability


@router.post("", response_model=LiabilityRead)
@router.post("/", response_model=LiabilityRead)
def create_liability(
    data: LiabilityCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    values = data.model_dump()
    # Sin principal informado usamos el saldo actual
    if values["principal"] is None:
        values["principal"] = values["current_balance"]

    liability = Liability(**values, user_id=user_id)
    session.add(liability)
    session.commit()
    session.refresh(liability)
    return liability


@router.get("", response_model=List[LiabilityRead])
@router.get("/", response_model=List[LiabilityRead])
def list_liabilities(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return session.exec(
        select(Liability).where(Liability.user_id == user_id).order_by(Liability.created_at)
    ).all()


@router.put("/{liability_id}", response_model=LiabilityRead)
def update_liability(
    liability_id: UUID,
    data: LiabilityCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    liability = _get_user_liability(session, user_id, liability_id)

    liability.name = data.name
    liability.type = data.type
    liability.principal = data.principal if data.principal is not None else liability.principal
    liability.current_balance = data.current_balance
    liability.interest_rate = data.interest_rate
    liability.monthly_payment = data.monthly_payment
    liability.currency = data.currency
    liability.updated_at = utcnow()

    session.add(liability)
    session.commit()
    session.refresh(liability)
    return liability


@router.delete("/{liability_id}")
def delete_liability(
    liability_id: UUID,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    liability = _get_user_liability(session, user_id, liability_id)
    session.delete(liability)
    session.commit()
    return {"message": "Pasivo eliminado correctamente"}
