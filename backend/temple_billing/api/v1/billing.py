"""
Temple Billing - Billing API
Issue receipts and look them up
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core import clock
from temple_billing.core.database import get_db
from temple_billing.core.exceptions import NotFound
from temple_billing.api.deps import get_current_user, client_ip
from temple_billing.models.user import User
from temple_billing.models.billing import Billing
from temple_billing.models.enums import UserRole
from temple_billing.schemas.billing import (
    BillingCreate,
    BillingResponse,
    BillingListResponse,
)
from temple_billing.schemas.common import SuccessResponse
from temple_billing.services.billing import create_billing

router = APIRouter()


@router.post("", response_model=SuccessResponse[BillingResponse], status_code=status.HTTP_201_CREATED)
async def create_bill(
    request: Request,
    bill_data: BillingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Issue a receipt

    - regular pooja: catalog price x qty
    - "Donation": donation_purpose + donation_amount
    """
    bill = await create_billing(
        db,
        username=current_user.username,
        submission=bill_data,
        now=clock.now(),
        ip_address=client_ip(request),
    )

    await db.commit()
    await db.refresh(bill)

    return SuccessResponse(data=BillingResponse.model_validate(bill))


@router.get("", response_model=SuccessResponse[BillingListResponse])
async def list_bills(
    bill_date: Optional[date] = Query(None, alias="date"),
    username: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Bills of a day (default today), newest first

    Staff only see their own bills.
    """
    day = bill_date or clock.today()
    if current_user.role != UserRole.ADMIN:
        username = current_user.username

    filters = [Billing.bill_date == day]
    if username:
        filters.append(Billing.username == username)

    total = (await db.execute(select(func.count(Billing.id)).where(*filters))).scalar()
    result = await db.execute(select(Billing).where(*filters).order_by(Billing.id.desc()))
    bills = result.scalars().all()

    return SuccessResponse(
        data=BillingListResponse(
            bills=[BillingResponse.model_validate(b) for b in bills],
            total=total
        )
    )


@router.get("/{bill_id}", response_model=SuccessResponse[BillingResponse])
async def get_bill(
    bill_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Receipt detail (for reprint)"""
    bill = await db.get(Billing, bill_id)

    if not bill or (current_user.role != UserRole.ADMIN and bill.username != current_user.username):
        raise NotFound("BILL_NOT_FOUND", "Bill not found")

    return SuccessResponse(data=BillingResponse.model_validate(bill))
