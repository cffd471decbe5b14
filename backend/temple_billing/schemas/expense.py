"""
Temple Billing - Expense schemas
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    """Record an expense"""
    expense_date: date = Field(..., description="date of the expense")
    purpose: str = Field(..., min_length=1, max_length=500, description="what the money was spent on")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="amount")
    added_by: Optional[str] = Field(None, max_length=50, description="defaults to the logged-in user")


class ExpenseResponse(BaseModel):
    id: int
    expense_date: date
    purpose: str
    amount: Decimal
    added_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseListResponse(BaseModel):
    expenses: list[ExpenseResponse]
    total: int
    total_amount: Decimal
