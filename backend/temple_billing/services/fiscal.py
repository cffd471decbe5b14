"""
Temple Billing - Fiscal year and receipt number format
April-March fiscal years, receipts numbered SRI/<YY>-<YY>/<serial>
"""

import re
from datetime import date
from typing import Optional

from temple_billing.core.config import settings

FISCAL_YEAR_START_MONTH = 4  # April

_SERIAL_RE = re.compile(r"[0-9]+")


def fiscal_year_label(day: date) -> str:
    """
    Fiscal year label for a date

    April onwards belongs to "<YY>-<YY+1>", January-March to "<YY-1>-<YY>".
    Both halves are two digits and wrap at 100 (2099-04-01 -> "99-00").
    """
    start = day.year if day.month >= FISCAL_YEAR_START_MONTH else day.year - 1
    return f"{start % 100:02d}-{(start + 1) % 100:02d}"


def receipt_prefix(fiscal_year: str, prefix: Optional[str] = None) -> str:
    return f"{prefix or settings.RECEIPT_PREFIX}/{fiscal_year}/"


def receipt_like_pattern(fiscal_year: str, prefix: Optional[str] = None) -> str:
    """LIKE pattern matching every receipt of a fiscal year"""
    return receipt_prefix(fiscal_year, prefix) + "%"


def format_receipt_number(fiscal_year: str, serial: int, prefix: Optional[str] = None) -> str:
    # no zero padding: SRI/25-26/7
    return f"{receipt_prefix(fiscal_year, prefix)}{serial}"


def parse_serial(receipt_no: str, fiscal_year: str, prefix: Optional[str] = None) -> Optional[int]:
    """
    Serial of a receipt number in the given fiscal year

    Returns:
        the trailing integer, or None when the receipt belongs to another
        fiscal year or its trailing segment is not a plain integer
    """
    head = receipt_prefix(fiscal_year, prefix)
    if not receipt_no or not receipt_no.startswith(head):
        return None
    tail = receipt_no[len(head):]
    if not _SERIAL_RE.fullmatch(tail):
        return None
    return int(tail)
