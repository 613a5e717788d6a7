from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from uuid import UUID
from typing import List

from app.core.security import get_current_user
from app.database import get_session
from app.models.liquidity_account import LiquidityAccount
from app.schemas.liquidity_account import LiquidityAccountCreate, LiquidityAccountRead
from app.utils.dates import utcnow

router = APIRouter(prefix="/liquidity-accounts", tags=["liquidity_accounts"])


def _get_user_account(session: Session, user_id: UUID, account_id: UUID) -> LiquidityAccount:
    account = session.exec(
        select(LiquidityAccount).where(
            LiquidityAccount.id == account_id,
            LiquidityAccount.user_id == user_id,
        )
    ).first()
    if not account:
        raise HTTPException(status_code=404, detail="Cuenta no encontrada")
    return account


@router.post("", response_model=LiquidityAccountRead)
@router.post("/", response_model=LiquidityAccountRead)
def create_liquidity_account(
    data: LiquidityAccountCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    existing = session.exec(
        select(LiquidityAccount).where(
            LiquidityAccount.user_id == user_id,
            LiquidityAccount.name == data.name,
        )
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Ya tienes una cuenta con este nombre.")

    account = LiquidityAccount(**data.model_dump(), user_id=user_id)
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@router.get("", response_model=List[LiquidityAccountRead])
@router.get("/", response_model=List[LiquidityAccountRead])
def list_liquidity_accounts(user_id: UUID = Depends(get_current_user), session: Session = Depends(get_session)):
    return session.exec(
        select(LiquidityAccount)
        .where(LiquidityAccount.user_id == user_id)
        .order_by(LiquidityAccount.created_at)
    ).all()


@router.put("/{account_id}", response_model=LiquidityAccountRead)
def update_liquidity_account(
    account_id: UUID,
    data: LiquidityAccountCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account = _get_user_account(session, user_id, account_id)

    account.name = data.name
    account.type = data.type
    account.balance = data.balance
    account.currency = data.currency
    account.updated_at = utcnow()

    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@router.delete("/{account_id}")
def delete_liquidity_account(
    account_id: UUID,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account = _get_user_account(session, user_id, account_id)
    session.delete(account)
    session.commit()
    return {"message": "Cuenta eliminada correctamente"}
