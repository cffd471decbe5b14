"""
Temple Billing - Collection (cash reconciliation) schemas
"""

import datetime as dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field


class WithdrawalCreate(BaseModel):
    """Cash handover request"""
    handover_amount: Optional[Union[int, float, str]] = Field(
        None, description="amount handed over; unparseable values count as 0"
    )
    date: Optional[dt.date] = Field(
        None, description="date being viewed (used only with WITHDRAWAL_DATE_POLICY=viewed)"
    )


class WithdrawalResponse(BaseModel):
    id: int
    username: str
    withdrawal_date: dt.date
    cash: Decimal
    online: Decimal
    donation: Decimal
    handover: Decimal
    remaining: Decimal
    created_at: dt.datetime

    class Config:
        from_attributes = True


class CollectionSummary(BaseModel):
    """Day totals for one user"""
    cash: Decimal = Decimal("0")
    online: Decimal = Decimal("0")
    donation: Decimal = Decimal("0")   # included in cash/online as well
    total: Decimal = Decimal("0")      # cash + online
    remaining: Decimal = Decimal("0")  # cash - withdrawn
    withdrawn: Decimal = Decimal("0")


class CollectionResponse(BaseModel):
    user: str
    today: dt.date
    date: dt.date
    summary: CollectionSummary
    withdrawals: list[WithdrawalResponse]
