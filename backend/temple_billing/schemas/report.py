"""
Temple Billing - Report schemas
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from temple_billing.schemas.billing import BillingResponse


class ReportOptions(BaseModel):
    """Values available for the report filters"""
    poojas: list[str]
    users: list[str]
    payment_modes: list[str]


class ReportResponse(BaseModel):
    date_from: date
    date_to: date
    bills: list[BillingResponse]
    total: int
    total_amount: Decimal
