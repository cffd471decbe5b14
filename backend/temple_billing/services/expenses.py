"""
Temple Billing - Expense register
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.models.audit_log import AuditLog
from temple_billing.models.enums import AuditAction
from temple_billing.models.expense import Expense
from temple_billing.schemas.expense import ExpenseCreate
from temple_billing.services.export import ExportColumn, build_workbook

logger = logging.getLogger(__name__)

EXPENSE_SHEET = "Expenses"
EXPENSE_FILENAME = "expenses.xlsx"

EXPENSE_COLUMNS = [
    ExportColumn("Date", "expense_date", 15),
    ExportColumn("Purpose", "purpose", 30),
    ExportColumn("Amount ₹", "amount", 15),
    ExportColumn("Added By", "added_by", 15),
]


async def add_expense(
    db: AsyncSession,
    data: ExpenseCreate,
    username: str,
    ip_address: Optional[str] = None,
) -> Expense:
    """Store an expense; added_by falls back to the acting user"""
    expense = Expense(
        expense_date=data.expense_date,
        purpose=data.purpose.strip(),
        amount=data.amount,
        added_by=(data.added_by or "").strip() or username,
    )
    db.add(expense)
    await db.flush()

    db.add(AuditLog(
        username=username,
        action=AuditAction.EXPENSE_CREATE,
        target_type="expense",
        target_id=str(expense.id),
        after_data={
            "expense_date": expense.expense_date.isoformat(),
            "purpose": expense.purpose,
            "amount": str(expense.amount),
        },
        ip_address=ip_address,
    ))
    await db.flush()
    logger.info(f"[Expense] {username} added {expense.amount} for {expense.purpose!r}")
    return expense


async def list_expenses(
    db: AsyncSession,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[Expense]:
    """Expenses newest first; the range applies only when both ends are given"""
    query = select(Expense)
    if date_from and date_to:
        query = query.where(Expense.expense_date.between(date_from, date_to))
    query = query.order_by(Expense.expense_date.desc(), Expense.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


def expense_total(expenses: list[Expense]) -> Decimal:
    return sum((Decimal(str(e.amount)) for e in expenses), Decimal("0"))


def expense_workbook(expenses: list[Expense]) -> bytes:
    rows = [
        {
            "expense_date": e.expense_date.strftime("%d/%m/%Y"),
            "purpose": e.purpose,
            "amount": e.amount,
            "added_by": e.added_by,
        }
        for e in expenses
    ]
    logger.info(f"[Expense] exporting {len(rows)} rows")
    return build_workbook(EXPENSE_SHEET, EXPENSE_COLUMNS, rows)
