"""
Temple Billing - Dashboard schemas
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel


class TopPooja(BaseModel):
    pooja_name: str
    count: int


class UserTotal(BaseModel):
    username: str
    total: Decimal


class TrendPoint(BaseModel):
    date: dt.date
    amount: Decimal


class DashboardResponse(BaseModel):
    """Collection statistics for a date range"""
    range: str
    start_date: dt.date
    end_date: dt.date
    total_collection: Decimal
    user_total: Decimal
    cash_total: Decimal
    online_total: Decimal
    donation_total: Decimal
    top_poojas: list[TopPooja]
    userwise: list[UserTotal]
    trends: list[TrendPoint]

    class Config:
        from_attributes = True
