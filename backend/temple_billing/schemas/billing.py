"""
Temple Billing - Billing schemas
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field


class BillingCreate(BaseModel):
    """
    Billing submission

    pooja_name "Donation" selects the donation variant, which uses
    donation_purpose/donation_amount instead of qty and the catalog price.
    qty and donation_amount are taken raw and validated by the billing service.
    """
    devotee_name: Optional[str] = Field(None, max_length=200, description="devotee name")
    pooja_name: str = Field(..., max_length=200, description="pooja name or 'Donation'")
    qty: Optional[Union[int, str]] = Field(None, description="quantity, positive integer")
    donation_purpose: Optional[str] = Field(None, max_length=200, description="donation purpose")
    donation_amount: Optional[Union[int, float, str]] = Field(None, description="donation amount")
    payment_mode: str = Field(default="Cash", max_length=30, description="Cash / Online / ...")
    reference_id: Optional[str] = Field(None, max_length=100, description="online payment reference")


class BillingResponse(BaseModel):
    """Issued receipt"""
    id: int
    receipt_no: str
    fiscal_year: str
    devotee_name: Optional[str] = None
    pooja_name: str
    qty: int
    price: Decimal
    total: Decimal
    bill_date: date
    bill_datetime: datetime
    username: str
    payment_mode: str
    reference_id: Optional[str] = None

    class Config:
        from_attributes = True


class BillingListResponse(BaseModel):
    bills: list[BillingResponse]
    total: int
