"""
Temple Billing - Collections API
Daily cash reconciliation and cash handovers of the logged-in user
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core import clock
from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_user, client_ip
from temple_billing.models.user import User
from temple_billing.schemas.collection import (
    CollectionResponse,
    CollectionSummary,
    WithdrawalCreate,
    WithdrawalResponse,
)
from temple_billing.schemas.common import SuccessResponse
from temple_billing.services.ledger import daily_summary, record_withdrawal

router = APIRouter()


@router.get("", response_model=SuccessResponse[CollectionResponse])
async def get_collection(
    day: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Day summary of the logged-in user (default today)

    cash, online, donation, total, withdrawn, remaining and the day's handovers
    """
    today = clock.today()
    day = day or today
    summary = await daily_summary(db, current_user.username, day)

    return SuccessResponse(
        data=CollectionResponse(
            user=current_user.username,
            today=today,
            date=day,
            summary=CollectionSummary(**summary.as_dict()),
            withdrawals=[WithdrawalResponse.model_validate(w) for w in summary.withdrawals],
        )
    )


@router.post(
    "/withdrawals",
    response_model=SuccessResponse[WithdrawalResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_withdrawal(
    request: Request,
    withdrawal_data: WithdrawalCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Hand over cash

    Totals are recomputed on the server; remaining may go negative.
    """
    withdrawal = await record_withdrawal(
        db,
        username=current_user.username,
        handover_raw=withdrawal_data.handover_amount,
        today=clock.today(),
        viewed_date=withdrawal_data.date,
        now=clock.now(),
        ip_address=client_ip(request),
    )

    await db.commit()
    await db.refresh(withdrawal)

    return SuccessResponse(data=WithdrawalResponse.model_validate(withdrawal))
