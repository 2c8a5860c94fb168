"""
Transaction management routes.
"""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from splitledger.db.session import get_db
from splitledger.models.transaction import TransactionType
from splitledger.schemas.common import WarningResponse
from splitledger.schemas.transaction import (
    TransactionCreate, TransactionUpdate, TransactionResponse,
    TransactionWriteResponse, TransactionSplitResponse, SplitUpdate
)
from splitledger.api.dependencies import get_current_identity, get_event_publisher, parse_date_range
from splitledger.services import transaction_service
from splitledger.services.event_service import EventPublisher
from splitledger.services.transaction_service import TransactionFilters

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transactions"])


@router.get("/transactions", response_model=List[TransactionResponse])
async def list_transactions(
    group_id: Optional[int] = Query(None, alias="groupId"),
    type: Optional[TransactionType] = Query(None),
    category: Optional[str] = Query(None),
    paid_by: Optional[str] = Query(None, alias="paidBy"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None),
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """List transactions matching all given filters, newest first."""
    start, end = parse_date_range(start_date, end_date)
    filters = TransactionFilters(
        group_id=group_id,
        type=type,
        category=category,
        paid_by=paid_by,
        start_date=start,
        end_date=end,
        search=search
    )
    return transaction_service.list_transactions(filters, db)


@router.post("/transactions", response_model=TransactionWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Create a transaction; shared transactions are split across the group."""
    transaction, warnings = transaction_service.create_transaction(
        type=transaction_data.type,
        amount=transaction_data.amount,
        description=transaction_data.description,
        date=transaction_data.date,
        paid_by=transaction_data.paid_by,
        category=transaction_data.category,
        is_shared=transaction_data.is_shared,
        group_id=transaction_data.group_id,
        db=db
    )

    response = TransactionWriteResponse.model_validate(transaction)
    response.warnings = [WarningResponse(**w.to_dict()) for w in warnings]
    events.publish("transaction_created", response)
    return response


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get a transaction with its splits."""
    return transaction_service.get_transaction(transaction_id, db)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Update some fields of a transaction."""
    updates = transaction_data.model_dump(exclude_unset=True)
    transaction = transaction_service.update_transaction(transaction_id, updates, db)

    response = TransactionResponse.model_validate(transaction)
    events.publish("transaction_updated", response)
    return response


@router.delete("/transactions/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Delete a transaction."""
    transaction_service.delete_transaction(transaction_id, db)
    events.publish("transaction_deleted", {"id": transaction_id})
    return {"message": "Transaction deleted successfully"}


@router.patch("/splits/{split_id}", response_model=TransactionSplitResponse)
async def update_split(
    split_id: int,
    split_data: SplitUpdate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Mark a split paid or unpaid."""
    split = transaction_service.update_split(split_id, split_data.is_paid, db)

    response = TransactionSplitResponse.model_validate(split)
    events.publish("split_updated", response)
    return response
