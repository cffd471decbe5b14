"""
Temple Billing - Auth API
Login, logout, current user, password change
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import redis.asyncio as redis

from temple_billing.core import clock
from temple_billing.core.database import get_db, get_redis
from temple_billing.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    new_session_id,
    open_session,
    close_session,
    session_ttl_seconds,
)
from temple_billing.api.deps import get_current_user, get_token_payload, client_ip
from temple_billing.models.user import User
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.enums import AuditAction
from temple_billing.schemas.auth import (
    LoginRequest,
    LoginResponse,
    TokenResponse,
    UserInfo,
    ChangePasswordRequest,
)
from temple_billing.schemas.common import SuccessResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=SuccessResponse[LoginResponse])
async def login(
    request: Request,
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    """
    Log in

    - username/password check
    - opens an idle-expiring session and returns a JWT bound to it
    """
    result = await db.execute(
        select(User).where(User.username == login_data.username)
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(login_data.password, user.password_hash):
        logger.warning(f"[Auth] failed login for {login_data.username!r} from {client_ip(request)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "INVALID_CREDENTIALS", "message": "Invalid username or password"}
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "USER_INACTIVE", "message": "Account is disabled"}
        )

    session_id = new_session_id()
    await open_session(redis_client, session_id, user.username)

    access_token = create_access_token(
        subject=user.username,
        role=user.role.value,
        session_id=session_id,
    )

    user.last_login_at = clock.now()

    db.add(AuditLog(
        username=user.username,
        action=AuditAction.USER_LOGIN,
        target_type="user",
        target_id=str(user.id),
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    ))

    await db.commit()
    await db.refresh(user)

    return SuccessResponse(
        data=LoginResponse(
            token=TokenResponse(
                access_token=access_token,
                token_type="bearer",
                expires_in=session_ttl_seconds(),
            ),
            user=UserInfo.model_validate(user)
        )
    )


@router.post("/logout", response_model=SuccessResponse[MessageResponse])
async def logout(
    request: Request,
    payload: dict = Depends(get_token_payload),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    """Log out; the token stops working immediately"""
    await close_session(redis_client, payload["sid"])

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.USER_LOGOUT,
        target_type="user",
        target_id=str(current_user.id),
        ip_address=client_ip(request),
    ))
    await db.commit()

    return SuccessResponse(data=MessageResponse(message="Logged out"))


@router.get("/me", response_model=SuccessResponse[UserInfo])
async def get_me(
    current_user: User = Depends(get_current_user)
):
    """Current user"""
    return SuccessResponse(data=UserInfo.model_validate(current_user))


@router.put("/password", response_model=SuccessResponse[MessageResponse])
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change own password"""
    if not verify_password(password_data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_PASSWORD", "message": "Current password is incorrect"}
        )

    current_user.password_hash = get_password_hash(password_data.new_password)
    await db.commit()

    return SuccessResponse(data=MessageResponse(message="Password changed"))
