"""
Temple Billing - Dashboard statistics
Collection totals over a date range
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.models.billing import Billing
from temple_billing.services.ledger import donation_filter, split_by_payment_mode

RANGE_PRESETS = ("today", "yesterday", "week", "month", "custom")
TREND_DAYS = 7
TOP_POOJA_LIMIT = 5


def resolve_range(
    range_name: Optional[str],
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> tuple[date, date]:
    """
    Date range of a dashboard preset (inclusive)

    week starts on Monday, month on the 1st, both ending today;
    custom uses start/end, each defaulting to today; anything else is today.
    """
    if range_name == "yesterday":
        day = today - timedelta(days=1)
        return day, day
    if range_name == "week":
        return today - timedelta(days=today.weekday()), today
    if range_name == "month":
        return today.replace(day=1), today
    if range_name == "custom":
        return start or today, end or today
    return today, today


@dataclass
class DashboardStats:
    start_date: date
    end_date: date
    total_collection: Decimal = Decimal("0")
    user_total: Decimal = Decimal("0")
    cash_total: Decimal = Decimal("0")
    online_total: Decimal = Decimal("0")
    donation_total: Decimal = Decimal("0")
    top_poojas: list[dict] = field(default_factory=list)
    userwise: list[dict] = field(default_factory=list)
    trends: list[dict] = field(default_factory=list)


def _in_range(start: date, end: date):
    if start == end:
        return Billing.bill_date == start
    return Billing.bill_date.between(start, end)


async def collect_stats(
    db: AsyncSession,
    username: str,
    start: date,
    end: date,
    today: date,
) -> DashboardStats:
    """Dashboard figures for [start, end]; trends always cover the last 7 days up to today"""
    in_range = _in_range(start, end)
    stats = DashboardStats(start_date=start, end_date=end)

    # top poojas by quantity, donations excluded
    qty_sum = func.sum(Billing.qty).label("count")
    result = await db.execute(
        select(Billing.pooja_name, qty_sum)
        .where(in_range, ~donation_filter())
        .group_by(Billing.pooja_name)
        .order_by(desc("count"))
        .limit(TOP_POOJA_LIMIT)
    )
    stats.top_poojas = [{"pooja_name": name, "count": int(count or 0)} for name, count in result.all()]

    stats.total_collection = Decimal(str((await db.execute(
        select(func.coalesce(func.sum(Billing.total), 0)).where(in_range)
    )).scalar() or 0))

    stats.user_total = Decimal(str((await db.execute(
        select(func.coalesce(func.sum(Billing.total), 0)).where(in_range, Billing.username == username)
    )).scalar() or 0))

    # cash / online
    result = await db.execute(
        select(Billing.payment_mode, func.sum(Billing.total))
        .where(in_range)
        .group_by(Billing.payment_mode)
    )
    stats.cash_total, stats.online_total = split_by_payment_mode(result.all())

    # per user
    user_sum = func.sum(Billing.total).label("total")
    result = await db.execute(
        select(Billing.username, user_sum)
        .where(in_range)
        .group_by(Billing.username)
        .order_by(desc("total"))
    )
    stats.userwise = [{"username": name, "total": Decimal(str(total or 0))} for name, total in result.all()]

    stats.donation_total = Decimal(str((await db.execute(
        select(func.coalesce(func.sum(Billing.total), 0)).where(in_range, donation_filter())
    )).scalar() or 0))

    # last 7 days
    result = await db.execute(
        select(Billing.bill_date, func.sum(Billing.total))
        .where(Billing.bill_date >= today - timedelta(days=TREND_DAYS - 1))
        .group_by(Billing.bill_date)
        .order_by(Billing.bill_date)
    )
    stats.trends = [{"date": day, "amount": Decimal(str(amount or 0))} for day, amount in result.all()]

    return stats
