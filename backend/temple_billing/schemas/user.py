"""
Temple Billing - User schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from temple_billing.models.enums import UserRole


class UserCreate(BaseModel):
    """Create user"""
    username: str = Field(..., min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$", description="login id")
    password: str = Field(..., min_length=6, description="password")
    name: str = Field(..., min_length=1, max_length=100, description="display name")
    role: UserRole = Field(default=UserRole.STAFF, description="role")


class UserUpdate(BaseModel):
    """Update user"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, description="reset password")


class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
