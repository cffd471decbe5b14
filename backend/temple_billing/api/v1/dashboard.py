"""
Temple Billing - Dashboard API
Collection statistics over a date range
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core import clock
from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_user
from temple_billing.models.user import User
from temple_billing.schemas.dashboard import DashboardResponse
from temple_billing.schemas.common import SuccessResponse
from temple_billing.services.dashboard import collect_stats, resolve_range

router = APIRouter()


@router.get("", response_model=SuccessResponse[DashboardResponse])
async def get_dashboard(
    range_name: str = Query("today", alias="range", description="today / yesterday / week / month / custom"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Dashboard

    - total, own total, cash/online split, donations
    - top 5 poojas by quantity, totals per user
    - 7-day trend
    """
    today = clock.today()
    start_date, end_date = resolve_range(range_name, today, start, end)
    stats = await collect_stats(db, current_user.username, start_date, end_date, today)

    return SuccessResponse(
        data=DashboardResponse(
            range=range_name,
            start_date=stats.start_date,
            end_date=stats.end_date,
            total_collection=stats.total_collection,
            user_total=stats.user_total,
            cash_total=stats.cash_total,
            online_total=stats.online_total,
            donation_total=stats.donation_total,
            top_poojas=stats.top_poojas,
            userwise=stats.userwise,
            trends=stats.trends,
        )
    )
