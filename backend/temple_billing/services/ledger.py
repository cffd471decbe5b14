"""
Temple Billing - Cash reconciliation ledger
Per-user, per-day collection totals and partial cash handovers against them
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core import clock
from temple_billing.core.config import settings
from temple_billing.core.exceptions import ValidationFailed
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.billing import Billing
from temple_billing.models.enums import AuditAction
from temple_billing.models.user import User
from temple_billing.models.withdrawal import Withdrawal
from temple_billing.services.billing import CENTS, MAX_AMOUNT

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


# =============================================================================
# Default-handling rules
# =============================================================================

def is_online_mode(payment_mode: Optional[str]) -> bool:
    """Any mode containing "online" (any case) is online; everything else, unknown modes included, is cash"""
    return "online" in (payment_mode or "").lower()


def donation_filter():
    """SQL condition matching bills whose item name starts with "donation" (any case)"""
    return func.lower(Billing.pooja_name).like("donation%")


def coerce_handover_amount(raw: Union[int, float, str, Decimal, None], strict: Optional[bool] = None) -> Decimal:
    """
    Handover amount from user input

    Unparseable or missing input counts as 0, unless strict mode is on
    (STRICT_HANDOVER_AMOUNT), in which case it is rejected. Amounts
    beyond what a Numeric(12, 2) column holds are always rejected.
    """
    strict = settings.STRICT_HANDOVER_AMOUNT if strict is None else strict
    try:
        amount = Decimal(str(raw).strip()) if raw is not None else None
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        if strict:
            raise ValidationFailed("INVALID_HANDOVER_AMOUNT", "Handover amount is not a number")
        return ZERO
    if abs(amount) > MAX_AMOUNT:
        raise ValidationFailed("INVALID_HANDOVER_AMOUNT", "Handover amount too large", {"max": str(MAX_AMOUNT)})
    return amount.quantize(CENTS)


def resolve_withdrawal_date(
    today: date,
    viewed_date: Optional[date] = None,
    policy: Optional[str] = None,
) -> date:
    """Date a handover is recorded against: today, or the viewed date under the "viewed" policy"""
    policy = policy or settings.WITHDRAWAL_DATE_POLICY
    if policy == "viewed" and viewed_date is not None:
        return viewed_date
    return today


def split_by_payment_mode(rows: Iterable[tuple[Optional[str], Optional[Decimal]]]) -> tuple[Decimal, Decimal]:
    """
    Bucket per-mode totals into (cash, online)

    Args:
        rows: (payment_mode, amount) pairs
    """
    cash = ZERO
    online = ZERO
    for mode, amount in rows:
        amount = Decimal(str(amount)) if amount is not None else ZERO
        if is_online_mode(mode):
            online += amount
        else:
            cash += amount
    return cash, online


# =============================================================================
# Summary
# =============================================================================

@dataclass
class DailySummary:
    cash: Decimal = ZERO
    online: Decimal = ZERO
    donation: Decimal = ZERO
    withdrawn: Decimal = ZERO
    withdrawals: list[Withdrawal] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return self.cash + self.online

    @property
    def remaining(self) -> Decimal:
        # online collections settle outside the physical handover
        return self.cash - self.withdrawn

    def as_dict(self) -> dict:
        return {
            "cash": self.cash,
            "online": self.online,
            "donation": self.donation,
            "total": self.total,
            "remaining": self.remaining,
            "withdrawn": self.withdrawn,
        }


async def _mode_totals(db: AsyncSession, username: str, day: date) -> tuple[Decimal, Decimal]:
    result = await db.execute(
        select(Billing.payment_mode, func.sum(Billing.total))
        .where(Billing.username == username, Billing.bill_date == day)
        .group_by(Billing.payment_mode)
    )
    return split_by_payment_mode(result.all())


async def _donation_total(db: AsyncSession, username: str, day: date) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(Billing.total), 0))
        .where(
            Billing.username == username,
            Billing.bill_date == day,
            donation_filter(),
        )
    )
    return Decimal(str(result.scalar() or 0))


async def _withdrawn_total(db: AsyncSession, username: str, day: date) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(Withdrawal.handover), 0))
        .where(Withdrawal.username == username, Withdrawal.withdrawal_date == day)
    )
    return Decimal(str(result.scalar() or 0))


async def list_withdrawals(db: AsyncSession, username: str, day: date) -> list[Withdrawal]:
    """Handovers of a user/day, newest first"""
    result = await db.execute(
        select(Withdrawal)
        .where(Withdrawal.username == username, Withdrawal.withdrawal_date == day)
        .order_by(Withdrawal.created_at.desc(), Withdrawal.id.desc())
    )
    return list(result.scalars().all())


async def daily_summary(db: AsyncSession, username: str, day: date) -> DailySummary:
    """
    Collection summary of one user for one day

    cash/online are the day's billing totals split by payment mode; donation
    is the part of them billed as donations; withdrawn is what has already
    been handed over. Read only.
    """
    cash, online = await _mode_totals(db, username, day)
    return DailySummary(
        cash=cash,
        online=online,
        donation=await _donation_total(db, username, day),
        withdrawn=await _withdrawn_total(db, username, day),
        withdrawals=await list_withdrawals(db, username, day),
    )


# =============================================================================
# Handover
# =============================================================================

async def record_withdrawal(
    db: AsyncSession,
    username: str,
    handover_raw: Union[int, float, str, Decimal, None],
    today: date,
    viewed_date: Optional[date] = None,
    now: Optional[datetime] = None,
    ip_address: Optional[str] = None,
) -> Withdrawal:
    """
    Record a cash handover

    Totals are recomputed from the database, never taken from the client.
    remaining = cash - (earlier handovers + this handover); it is not clamped,
    so handing over more than the cash on hand leaves it negative.
    """
    handover = coerce_handover_amount(handover_raw)
    day = resolve_withdrawal_date(today, viewed_date)

    # serialise concurrent handovers of the same user
    await db.execute(select(User.id).where(User.username == username).with_for_update())

    cash, online = await _mode_totals(db, username, day)
    donation = await _donation_total(db, username, day)
    already = await _withdrawn_total(db, username, day)
    remaining = cash - (already + handover)
    if abs(remaining) > MAX_AMOUNT:
        raise ValidationFailed("INVALID_HANDOVER_AMOUNT", "Handover amount too large", {"max": str(MAX_AMOUNT)})

    withdrawal = Withdrawal(
        username=username,
        withdrawal_date=day,
        cash=cash,
        online=online,
        donation=donation,
        handover=handover,
        remaining=remaining,
        created_at=now or clock.now(),
    )
    db.add(withdrawal)
    await db.flush()

    db.add(AuditLog(
        username=username,
        action=AuditAction.WITHDRAWAL_CREATE,
        target_type="withdrawal",
        target_id=str(withdrawal.id),
        after_data={
            "date": day.isoformat(),
            "cash": str(cash),
            "already_withdrawn": str(already),
            "handover": str(handover),
            "remaining": str(remaining),
        },
        ip_address=ip_address,
    ))
    await db.flush()

    if remaining < 0:
        logger.warning(f"[Withdrawal] {username} handed over more than cash on hand for {day}: remaining={remaining}")
    logger.info(f"[Withdrawal] {username} {day} handover={handover} remaining={remaining}")
    return withdrawal
