"""
Ledger export routes.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from splitledger.core.utils import utcnow
from splitledger.db.session import get_db
from splitledger.schemas.export import ExportFilters, ExportRequest
from splitledger.api.dependencies import get_current_identity, parse_date_range
from splitledger.services import export_service, transaction_service
from splitledger.services.transaction_service import TransactionFilters

router = APIRouter(prefix="/export", tags=["export"])


def _load_transactions(filters: ExportFilters, db: Session):
    start, end = parse_date_range(filters.start_date, filters.end_date)
    return transaction_service.list_transactions(TransactionFilters(
        group_id=filters.group_id,
        type=filters.type,
        category=filters.category,
        paid_by=filters.paid_by,
        start_date=start,
        end_date=end,
        search=filters.search
    ), db)


def _attachment(content: bytes, media_type: str, extension: str) -> Response:
    filename = f"expense-report-{utcnow().strftime('%Y%m%d')}.{extension}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/text")
async def export_text(
    export_data: ExportRequest,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Export matching transactions as a plain-text ledger report."""
    transactions = _load_transactions(export_data.filters, db)
    content = export_service.render_text_report(transactions, title=export_data.title)
    return _attachment(content, "text/plain; charset=utf-8", "txt")


@router.post("/csv")
async def export_csv(
    export_data: ExportRequest,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Export matching transactions as CSV."""
    transactions = _load_transactions(export_data.filters, db)
    content = export_service.render_csv(transactions)
    return _attachment(content, "text/csv; charset=utf-8", "csv")
