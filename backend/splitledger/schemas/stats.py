"""
Pydantic schemas for aggregated statistics.
"""
from splitledger.schemas.common import APIModel


class StatsResponse(APIModel):
    """Income/expense totals for a period (decimal strings)."""
    total_income: str
    total_expenses: str
    net_balance: str
