"""
Temple Billing - Transaction reports
Filtered billing listing and its Excel export
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.exceptions import ValidationFailed
from temple_billing.models.billing import Billing
from temple_billing.services.export import ExportColumn, build_workbook

logger = logging.getLogger(__name__)

REPORT_SHEET = "Temple Report"
REPORT_FILENAME = "temple-report.xlsx"

REPORT_COLUMNS = [
    ExportColumn("Receipt No", "receipt_no", 15),
    ExportColumn("Date & Time", "bill_datetime_formatted", 22),
    ExportColumn("Devotee", "devotee_name", 20),
    ExportColumn("Pooja", "pooja_name", 20),
    ExportColumn("Qty", "qty", 10),
    ExportColumn("Total ₹", "total", 12),
    ExportColumn("Payment Mode", "payment_mode", 15),
    ExportColumn("Reference ID", "reference_id", 25),
    ExportColumn("User", "username", 15),
]

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")


def parse_report_date(value: Optional[str], field_name: str = "date") -> date:
    """Accepts ISO (2025-04-01) or day-first (1/4/2025) dates"""
    text = (value or "").strip()
    if not text:
        raise ValidationFailed("MISSING_DATE_RANGE", 'Missing "from" and "to" dates.')
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationFailed("INVALID_DATE", f"Invalid {field_name}: {text}", {"field": field_name})


@dataclass(frozen=True)
class ReportFilter:
    date_from: date
    date_to: date
    pooja_name: Optional[str] = None
    username: Optional[str] = None
    payment_mode: Optional[str] = None

    @classmethod
    def parse(
        cls,
        date_from: Optional[str],
        date_to: Optional[str],
        pooja_name: Optional[str] = None,
        username: Optional[str] = None,
        payment_mode: Optional[str] = None,
    ) -> "ReportFilter":
        return cls(
            date_from=parse_report_date(date_from, "from"),
            date_to=parse_report_date(date_to, "to"),
            pooja_name=pooja_name or None,
            username=username or None,
            payment_mode=payment_mode or None,
        )


def _report_query(f: ReportFilter):
    query = select(Billing).where(Billing.bill_date.between(f.date_from, f.date_to))
    if f.pooja_name:
        query = query.where(Billing.pooja_name == f.pooja_name)
    if f.username:
        query = query.where(Billing.username == f.username)
    if f.payment_mode:
        query = query.where(func.lower(Billing.payment_mode) == f.payment_mode.lower())
    return query.order_by(Billing.id)


async def find_bills(db: AsyncSession, f: ReportFilter) -> list[Billing]:
    result = await db.execute(_report_query(f))
    return list(result.scalars().all())


async def filter_options(db: AsyncSession) -> dict[str, list[str]]:
    """Distinct pooja names, users and payment modes present in billing"""
    options = {}
    for key, column in (
        ("poojas", Billing.pooja_name),
        ("users", Billing.username),
        ("payment_modes", Billing.payment_mode),
    ):
        result = await db.execute(select(column).distinct().order_by(column))
        options[key] = [v for v in result.scalars().all() if v is not None]
    return options


def _format_datetime(bill: Billing) -> str:
    if bill.bill_datetime:
        return bill.bill_datetime.strftime("%d/%m/%Y %H:%M:%S")
    if bill.bill_date:
        return bill.bill_date.strftime("%d/%m/%Y 00:00:00")
    return "Invalid Date"


def report_workbook(bills: list[Billing]) -> bytes:
    rows = [
        {
            "receipt_no": b.receipt_no,
            "bill_datetime_formatted": _format_datetime(b),
            "devotee_name": b.devotee_name,
            "pooja_name": b.pooja_name,
            "qty": b.qty,
            "total": b.total,
            "payment_mode": b.payment_mode,
            "reference_id": b.reference_id or "",
            "username": b.username,
        }
        for b in bills
    ]
    logger.info(f"[Report] exporting {len(rows)} rows")
    return build_workbook(REPORT_SHEET, REPORT_COLUMNS, rows)
