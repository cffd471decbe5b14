"""
Temple Billing - Reports API
Filtered transaction listing and Excel export
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_user
from temple_billing.models.user import User
from temple_billing.schemas.billing import BillingResponse
from temple_billing.schemas.report import ReportOptions, ReportResponse
from temple_billing.schemas.common import SuccessResponse
from temple_billing.services.export import XLSX_MEDIA_TYPE, attachment_headers
from temple_billing.services.reports import (
    REPORT_FILENAME,
    ReportFilter,
    filter_options,
    find_bills,
    report_workbook,
)

router = APIRouter()


def report_filter(
    date_from: Optional[str] = Query(None, alias="from", description="D/M/YYYY or YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="to", description="D/M/YYYY or YYYY-MM-DD"),
    pooja_name: Optional[str] = Query(None, alias="pooja"),
    username: Optional[str] = Query(None, alias="user"),
    payment_mode: Optional[str] = Query(None, alias="payment_mode"),
) -> ReportFilter:
    return ReportFilter.parse(date_from, date_to, pooja_name, username, payment_mode)


@router.get("/options", response_model=SuccessResponse[ReportOptions])
async def get_report_options(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Values for the pooja / user / payment mode filters"""
    return SuccessResponse(data=ReportOptions(**await filter_options(db)))


@router.get("", response_model=SuccessResponse[ReportResponse])
async def get_report(
    filters: ReportFilter = Depends(report_filter),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Bills in [from, to] matching the filters"""
    bills = await find_bills(db, filters)

    return SuccessResponse(
        data=ReportResponse(
            date_from=filters.date_from,
            date_to=filters.date_to,
            bills=[BillingResponse.model_validate(b) for b in bills],
            total=len(bills),
            total_amount=sum((Decimal(str(b.total)) for b in bills), Decimal("0")),
        )
    )


@router.get("/export")
async def export_report(
    filters: ReportFilter = Depends(report_filter),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Same filters as the listing, as .xlsx"""
    bills = await find_bills(db, filters)
    return Response(
        content=report_workbook(bills),
        media_type=XLSX_MEDIA_TYPE,
        headers=attachment_headers(REPORT_FILENAME),
    )
