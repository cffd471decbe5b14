"""
Temple Billing - Pooja (item catalog) schemas
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class PoojaCreate(BaseModel):
    """Add a pooja"""
    name: str = Field(..., min_length=1, max_length=200, description="pooja name")
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="unit price")


class PoojaUpdate(BaseModel):
    """Change price or visibility"""
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    visible: Optional[bool] = None


class PoojaResponse(BaseModel):
    id: int
    name: str
    price: Decimal
    visible: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PoojaListResponse(BaseModel):
    poojas: list[PoojaResponse]
    total: int
