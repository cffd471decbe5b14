"""
Temple Billing - Audit log schemas
"""

from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel

from temple_billing.models.enums import AuditAction


class AuditLogResponse(BaseModel):
    """Audit log entry"""
    id: int
    username: str
    action: AuditAction
    target_type: str
    target_id: Optional[str] = None
    before_data: Optional[dict[str, Any]] = None
    after_data: Optional[dict[str, Any]] = None
    description: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    logs: list[AuditLogResponse]
    total: int
