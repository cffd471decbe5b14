"""
Temple Billing - Receipt sequencer
Issues the next receipt number of the current fiscal year
"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core import clock
from temple_billing.core.config import settings
from temple_billing.models.billing import Billing
from temple_billing.models.receipt_counter import ReceiptCounter
from temple_billing.services.fiscal import (
    fiscal_year_label,
    format_receipt_number,
    parse_serial,
    receipt_like_pattern,
)

logger = logging.getLogger(__name__)


async def last_issued_serial(
    db: AsyncSession,
    fiscal_year: str,
    order: Optional[str] = None,
) -> int:
    """
    Last serial already used in a fiscal year, 0 when there is none

    order="insertion": serial of the most recently inserted receipt
    (a non-numeric serial there restarts the sequence).
    order="serial": highest numeric serial among all receipts of the year.
    """
    order = order or settings.RECEIPT_SEED_ORDER
    pattern = receipt_like_pattern(fiscal_year)

    if order == "serial":
        result = await db.execute(
            select(Billing.receipt_no).where(Billing.receipt_no.like(pattern))
        )
        serials = [parse_serial(r, fiscal_year) for r in result.scalars().all()]
        return max((s for s in serials if s is not None), default=0)

    result = await db.execute(
        select(Billing.receipt_no)
        .where(Billing.receipt_no.like(pattern))
        .order_by(Billing.id.desc())
        .limit(1)
    )
    last = result.scalar_one_or_none()
    if last is None:
        return 0
    return parse_serial(last, fiscal_year) or 0


async def _lock_counter(db: AsyncSession, fiscal_year: str) -> Optional[ReceiptCounter]:
    result = await db.execute(
        select(ReceiptCounter)
        .where(ReceiptCounter.fiscal_year == fiscal_year)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _create_counter(db: AsyncSession, fiscal_year: str, seed: int, now: datetime) -> None:
    """Insert the fiscal year's counter row unless a concurrent request already did"""
    dialect = db.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    stmt = (
        insert(ReceiptCounter)
        .values(fiscal_year=fiscal_year, last_serial=seed, updated_at=now)
        .on_conflict_do_nothing(index_elements=["fiscal_year"])
    )
    await db.execute(stmt)


async def next_receipt_number(
    db: AsyncSession,
    today: date,
    now: Optional[datetime] = None,
) -> tuple[str, str]:
    """
    Reserve the next receipt number for the fiscal year containing `today`

    The counter row stays locked until the caller's transaction ends, so the
    billing insert that uses the number commits together with the increment.
    `now` stamps the counter row and defaults to the business clock.

    Returns:
        (receipt_no, fiscal_year)
    """
    fiscal_year = fiscal_year_label(today)
    now = now or clock.now()

    counter = await _lock_counter(db, fiscal_year)
    if counter is None:
        # first receipt of the year on this counter: continue from history
        seed = await last_issued_serial(db, fiscal_year)
        await _create_counter(db, fiscal_year, seed, now)
        counter = await _lock_counter(db, fiscal_year)
        logger.info(f"[Receipt] counter created for {fiscal_year}, seed={seed}")

    counter.last_serial += 1
    counter.updated_at = now
    await db.flush()

    return format_receipt_number(fiscal_year, counter.last_serial), fiscal_year
