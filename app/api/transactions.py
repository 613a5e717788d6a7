import datetime as dt
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select
from uuid import UUID
from typing import List, Optional

from app.core.security import get_current_user
from app.database import get_session
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate, TransactionRead

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionRead)
@router.post("/", response_model=TransactionRead)
def create_transaction(
    transaction_data: TransactionCreate,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    data = transaction_data.model_dump()
    if data.get("date") is None:
        data["date"] = dt.date.today()

    transaction = Transaction(**data, user_id=user_id)
    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    return transaction


@router.get("", response_model=List[TransactionRead])
@router.get("/", response_model=List[TransactionRead])
def list_transactions(
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
    type: Optional[TransactionType] = Query(None),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
):
    query = select(Transaction).where(Transaction.user_id == user_id)
    if type:
        query = query.where(Transaction.type == type)
    if start_date:
        query = query.where(Transaction.date >= start_date)
    if end_date:
        query = query.where(Transaction.date <= end_date)

    # Más recientes primero
    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    return session.exec(query).all()


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: UUID,
    user_id: UUID = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    transaction = session.exec(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
    ).first()
    if not transaction:
        raise HTTPException(status_code=404, detail="Transacción no encontrada")

    session.delete(transaction)
    session.commit()
    return {"message": "Transacción eliminada correctamente"}
