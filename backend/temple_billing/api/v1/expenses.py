"""
Temple Billing - Expenses API
Temple expense register and Excel export
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_user, client_ip
from temple_billing.models.user import User
from temple_billing.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseListResponse,
)
from temple_billing.schemas.common import SuccessResponse
from temple_billing.services.export import XLSX_MEDIA_TYPE, attachment_headers
from temple_billing.services.expenses import (
    EXPENSE_FILENAME,
    add_expense,
    expense_total,
    expense_workbook,
    list_expenses,
)

router = APIRouter()


@router.post("", response_model=SuccessResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    request: Request,
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Record an expense"""
    expense = await add_expense(db, expense_data, current_user.username, client_ip(request))

    await db.commit()
    await db.refresh(expense)

    return SuccessResponse(data=ExpenseResponse.model_validate(expense))


@router.get("", response_model=SuccessResponse[ExpenseListResponse])
async def get_expenses(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Expenses newest first, optionally within [from, to]"""
    expenses = await list_expenses(db, date_from, date_to)

    return SuccessResponse(
        data=ExpenseListResponse(
            expenses=[ExpenseResponse.model_validate(e) for e in expenses],
            total=len(expenses),
            total_amount=expense_total(expenses),
        )
    )


@router.get("/export")
async def export_expenses(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Expense register as .xlsx"""
    expenses = await list_expenses(db, date_from, date_to)
    return Response(
        content=expense_workbook(expenses),
        media_type=XLSX_MEDIA_TYPE,
        headers=attachment_headers(EXPENSE_FILENAME),
    )
