"""
Pydantic schemas for ledger exports.
"""
from pydantic import Field
from typing import Optional
from splitledger.models.transaction import TransactionType
from splitledger.schemas.common import APIModel


class ExportFilters(APIModel):
    """Transaction filters accepted by the export endpoints."""
    group_id: Optional[int] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    paid_by: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    search: Optional[str] = None


class ExportRequest(APIModel):
    """Schema for export request body."""
    filters: ExportFilters = Field(default_factory=ExportFilters)
    title: Optional[str] = None
