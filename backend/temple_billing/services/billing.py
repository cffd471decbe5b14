"""
Temple Billing - Billing service
Validates a billing submission, computes its total and issues the receipt
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.exceptions import ValidationFailed
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.billing import Billing
from temple_billing.models.enums import AuditAction
from temple_billing.models.pooja import Pooja
from temple_billing.schemas.billing import BillingCreate
from temple_billing.services.receipts import next_receipt_number

logger = logging.getLogger(__name__)

DONATION_ITEM = "Donation"
DONATION_LABEL_PREFIX = "Donation – "
ONLINE_MODE = "online"

CENTS = Decimal("0.01")
# largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")
# billing.qty is a 32-bit Integer column
MAX_QUANTITY = 2_147_483_647


@dataclass(frozen=True)
class BillingLine:
    """Computed line of a bill"""
    pooja_name: str
    qty: int
    price: Decimal
    total: Decimal
    reference_id: Optional[str] = None


def is_donation(submission: BillingCreate) -> bool:
    return submission.pooja_name == DONATION_ITEM


def donation_label(purpose: str) -> str:
    return f"{DONATION_LABEL_PREFIX}{purpose}"


def parse_quantity(raw: Union[int, str, None]) -> int:
    """
    Quantity of a regular item

    Absent -> 1. Zero, negative, fractional, non-numeric or beyond
    MAX_QUANTITY -> INVALID_QUANTITY.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 1
    try:
        qty = int(str(raw).strip())
    except ValueError:
        raise ValidationFailed("INVALID_QUANTITY", "Invalid quantity")
    if qty <= 0:
        raise ValidationFailed("INVALID_QUANTITY", "Invalid quantity")
    if qty > MAX_QUANTITY:
        raise ValidationFailed("INVALID_QUANTITY", "Quantity too large", {"max": MAX_QUANTITY})
    return qty


def parse_donation_amount(raw: Union[int, float, str, None]) -> Decimal:
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationFailed("INVALID_DONATION_AMOUNT", "Invalid donation amount")
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailed("INVALID_DONATION_AMOUNT", "Invalid donation amount")
    if amount > MAX_AMOUNT:
        raise ValidationFailed("INVALID_DONATION_AMOUNT", "Donation amount too large", {"max": str(MAX_AMOUNT)})
    amount = amount.quantize(CENTS)
    if amount <= 0:
        raise ValidationFailed("INVALID_DONATION_AMOUNT", "Invalid donation amount")
    return amount


def payment_reference(payment_mode: str, reference_id: Optional[str]) -> Optional[str]:
    """The reference is only kept for online payments"""
    if (payment_mode or "").lower() == ONLINE_MODE:
        return reference_id
    return None


def compute_billing_line(
    submission: BillingCreate,
    catalog_price: Optional[Decimal] = None,
) -> BillingLine:
    """
    Compute the billed item, quantity, unit price and total

    Args:
        submission: billing form
        catalog_price: catalog price of submission.pooja_name (None when not in catalog);
            ignored for donations

    Raises:
        ValidationFailed: missing donation fields, bad quantity/amount, unknown item
    """
    reference = payment_reference(submission.payment_mode, submission.reference_id)

    if is_donation(submission):
        purpose = (submission.donation_purpose or "").strip()
        raw_amount = submission.donation_amount
        if not purpose or raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
            raise ValidationFailed("MISSING_DONATION_FIELDS", "Donation purpose or amount missing.")
        amount = parse_donation_amount(raw_amount)
        return BillingLine(
            pooja_name=donation_label(purpose),
            qty=1,
            price=amount,
            total=amount,
            reference_id=reference,
        )

    qty = parse_quantity(submission.qty)
    if catalog_price is None:
        raise ValidationFailed("INVALID_ITEM", "Invalid pooja selected.")
    price = Decimal(str(catalog_price))
    total = price * qty
    if total > MAX_AMOUNT:
        raise ValidationFailed("INVALID_QUANTITY", "Quantity too large", {"max_total": str(MAX_AMOUNT)})
    return BillingLine(
        pooja_name=submission.pooja_name,
        qty=qty,
        price=price,
        total=total.quantize(CENTS),
        reference_id=reference,
    )


async def lookup_price(db: AsyncSession, pooja_name: str) -> Optional[Decimal]:
    """Catalog price by exact name; hidden poojas can still be billed by name"""
    result = await db.execute(select(Pooja.price).where(Pooja.name == pooja_name))
    return result.scalar_one_or_none()


async def create_billing(
    db: AsyncSession,
    username: str,
    submission: BillingCreate,
    now: datetime,
    ip_address: Optional[str] = None,
) -> Billing:
    """
    Validate, number and store a bill

    Nothing is written when validation fails. The receipt counter increment
    and the billing row share the caller's transaction.
    """
    catalog_price = None
    if not is_donation(submission):
        catalog_price = await lookup_price(db, submission.pooja_name)
    line = compute_billing_line(submission, catalog_price)

    receipt_no, fiscal_year = await next_receipt_number(db, now.date(), now)

    bill = Billing(
        devotee_name=submission.devotee_name,
        pooja_name=line.pooja_name,
        qty=line.qty,
        price=line.price,
        total=line.total,
        receipt_no=receipt_no,
        fiscal_year=fiscal_year,
        bill_date=now.date(),
        bill_datetime=now,
        username=username,
        payment_mode=submission.payment_mode,
        reference_id=line.reference_id,
        withdrawn=False,
    )
    db.add(bill)
    await db.flush()

    db.add(AuditLog(
        username=username,
        action=AuditAction.BILLING_CREATE,
        target_type="billing",
        target_id=str(bill.id),
        after_data={
            "receipt_no": receipt_no,
            "pooja_name": line.pooja_name,
            "qty": line.qty,
            "total": str(line.total),
            "payment_mode": submission.payment_mode,
        },
        ip_address=ip_address,
    ))
    await db.flush()

    logger.info(f"[Billing] {receipt_no} issued by {username}: {line.pooja_name} x{line.qty} = {line.total}")
    return bill
