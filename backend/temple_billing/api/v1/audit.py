"""
Temple Billing - Audit log API
Change history (admin only)
"""

from typing import Optional
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_admin_user
from temple_billing.models.user import User
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.enums import AuditAction
from temple_billing.schemas.audit import (
    AuditLogResponse,
    AuditLogListResponse,
)
from temple_billing.schemas.common import SuccessResponse, ResponseMeta

router = APIRouter()


@router.get("", response_model=SuccessResponse[AuditLogListResponse])
async def list_audit_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    username: Optional[str] = Query(None),
    action: Optional[AuditAction] = Query(None),
    target_type: Optional[str] = Query(None),
    target_id: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Audit log (admin)

    - filter by period, user, action and target
    """
    filters = []
    if username:
        filters.append(AuditLog.username == username)
    if action:
        filters.append(AuditLog.action == action)
    if target_type:
        filters.append(AuditLog.target_type == target_type)
    if target_id:
        filters.append(AuditLog.target_id == target_id)
    if start_date:
        filters.append(AuditLog.created_at >= start_date)
    if end_date:
        filters.append(AuditLog.created_at <= end_date)
    if search:
        filters.append(AuditLog.description.ilike(f"%{search}%"))

    total = (await db.execute(select(func.count(AuditLog.id)).where(*filters))).scalar()

    offset = (page - 1) * page_size
    query = (
        select(AuditLog)
        .where(*filters)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    result = await db.execute(query)
    logs = result.scalars().all()

    return SuccessResponse(
        data=AuditLogListResponse(
            logs=[AuditLogResponse.model_validate(log) for log in logs],
            total=total,
        ),
        meta=ResponseMeta(
            total=total,
            page=page,
            page_size=page_size,
            has_next=offset + len(logs) < total,
        ),
    )
