"""
Statistics routes.
"""
import calendar
from datetime import datetime, time
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from splitledger.core.exceptions import ValidationError
from splitledger.core.utils import utcnow
from splitledger.db.session import get_db
from splitledger.schemas.stats import StatsResponse
from splitledger.api.dependencies import get_current_identity, parse_date_range
from splitledger.services import balance_service

router = APIRouter(prefix="/stats", tags=["stats"])


def month_bounds(year: int, month: int):
    """First and last instant of a calendar month."""
    if year < 1 or year > 9999:
        raise ValidationError("year must be between 1 and 9999", field="year")
    if month < 1 or month > 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1)
    end = datetime.combine(datetime(year, month, last_day).date(), time.max)
    return start, end


@router.get("/monthly", response_model=StatsResponse)
async def get_monthly_stats(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    paid_by: Optional[str] = Query(None, alias="paidBy"),
    user_id: Optional[str] = Query(None, alias="userId"),
    group_id: Optional[int] = Query(None, alias="groupId"),
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Income, expenses and net balance for a period.

    An explicit startDate/endDate range wins over year/month. With neither,
    the current calendar month is used.
    """
    start, end = parse_date_range(start_date, end_date)
    if start is None and end is None:
        now = utcnow()
        start, end = month_bounds(year or now.year, month or now.month)

    return balance_service.compute_stats(
        start_date=start,
        end_date=end,
        group_id=group_id,
        paid_by=paid_by or user_id,
        db=db
    )
