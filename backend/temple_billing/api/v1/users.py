"""
Temple Billing - User management API
Admin only: create, update, deactivate counter staff
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.database import get_db
from temple_billing.core.security import get_password_hash
from temple_billing.api.deps import get_current_admin_user, client_ip
from temple_billing.models.user import User
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.enums import AuditAction, UserRole
from temple_billing.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
)
from temple_billing.schemas.common import SuccessResponse

router = APIRouter()


def _snapshot(user: User) -> dict:
    return {
        "name": user.name,
        "role": user.role.value,
        "is_active": user.is_active,
    }


@router.get("", response_model=SuccessResponse[UserListResponse])
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """List users (admin)"""
    query = select(User)
    count_query = select(func.count(User.id))

    if role is not None:
        query = query.where(User.role == role)
        count_query = count_query.where(User.role == role)

    if is_active is not None:
        query = query.where(User.is_active == is_active)
        count_query = count_query.where(User.is_active == is_active)

    if search:
        search_filter = User.username.ilike(f"%{search}%") | User.name.ilike(f"%{search}%")
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    total = (await db.execute(count_query)).scalar()

    offset = (page - 1) * page_size
    query = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    users = result.scalars().all()

    return SuccessResponse(
        data=UserListResponse(
            users=[UserResponse.model_validate(u) for u in users],
            total=total
        )
    )


@router.post("", response_model=SuccessResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    user_data: UserCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Create user (admin)"""
    result = await db.execute(select(User).where(User.username == user_data.username))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "USERNAME_EXISTS", "message": "Username already taken"}
        )

    new_user = User(
        username=user_data.username,
        password_hash=get_password_hash(user_data.password),
        name=user_data.name,
        role=user_data.role,
    )
    db.add(new_user)
    await db.flush()

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.USER_CREATE,
        target_type="user",
        target_id=str(new_user.id),
        after_data={"username": new_user.username, **_snapshot(new_user)},
        ip_address=client_ip(request),
    ))

    await db.commit()
    await db.refresh(new_user)

    return SuccessResponse(data=UserResponse.model_validate(new_user))


@router.get("/{user_id}", response_model=SuccessResponse[UserResponse])
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """User detail (admin)"""
    user = await db.get(User, user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "USER_NOT_FOUND", "message": "User not found"}
        )

    return SuccessResponse(data=UserResponse.model_validate(user))


@router.patch("/{user_id}", response_model=SuccessResponse[UserResponse])
async def update_user(
    request: Request,
    user_id: int,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Update user (admin)"""
    user = await db.get(User, user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "USER_NOT_FOUND", "message": "User not found"}
        )

    if user.id == current_user.id and user_data.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "CANNOT_DEACTIVATE_SELF", "message": "You cannot deactivate your own account"}
        )

    before_data = _snapshot(user)

    update_fields = user_data.model_dump(exclude_unset=True)
    password = update_fields.pop("password", None)
    for field, value in update_fields.items():
        setattr(user, field, value)
    if password:
        user.password_hash = get_password_hash(password)

    after_data = _snapshot(user)

    deactivated = "is_active" in update_fields and not user.is_active
    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.USER_DEACTIVATE if deactivated else AuditAction.USER_UPDATE,
        target_type="user",
        target_id=str(user.id),
        before_data=before_data,
        after_data={**after_data, "password_reset": bool(password)},
        ip_address=client_ip(request),
    ))

    await db.commit()
    await db.refresh(user)

    return SuccessResponse(data=UserResponse.model_validate(user))
