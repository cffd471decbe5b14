"""
Temple Billing - Pooja master API
Catalog CRUD and visibility toggle (admin); visible list for the billing form
"""

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from temple_billing.core.database import get_db
from temple_billing.api.deps import get_current_user, get_current_admin_user, client_ip
from temple_billing.models.user import User
from temple_billing.models.pooja import Pooja
from temple_billing.models.audit_log import AuditLog
from temple_billing.models.enums import AuditAction
from temple_billing.schemas.pooja import (
    PoojaCreate,
    PoojaUpdate,
    PoojaResponse,
    PoojaListResponse,
)
from temple_billing.schemas.common import SuccessResponse, MessageResponse

router = APIRouter()


def _snapshot(pooja: Pooja) -> dict:
    return {"name": pooja.name, "price": str(pooja.price), "visible": pooja.visible}


async def _get_pooja_or_404(db: AsyncSession, pooja_id: int) -> Pooja:
    pooja = await db.get(Pooja, pooja_id)
    if not pooja:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "POOJA_NOT_FOUND", "message": "Pooja not found"}
        )
    return pooja


@router.get("", response_model=SuccessResponse[PoojaListResponse])
async def list_poojas(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """All poojas, hidden ones included (admin)"""
    result = await db.execute(select(Pooja).order_by(Pooja.id))
    poojas = result.scalars().all()

    return SuccessResponse(
        data=PoojaListResponse(
            poojas=[PoojaResponse.model_validate(p) for p in poojas],
            total=len(poojas)
        )
    )


@router.get("/visible", response_model=SuccessResponse[PoojaListResponse])
async def list_visible_poojas(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Poojas offered on the billing form, by name"""
    result = await db.execute(
        select(Pooja).where(Pooja.visible == True).order_by(Pooja.name)
    )
    poojas = result.scalars().all()

    return SuccessResponse(
        data=PoojaListResponse(
            poojas=[PoojaResponse.model_validate(p) for p in poojas],
            total=len(poojas)
        )
    )


@router.post("", response_model=SuccessResponse[PoojaResponse], status_code=status.HTTP_201_CREATED)
async def create_pooja(
    request: Request,
    pooja_data: PoojaCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a pooja (admin)"""
    name = pooja_data.name.strip()
    result = await db.execute(select(func.count(Pooja.id)).where(Pooja.name == name))
    if result.scalar():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "POOJA_EXISTS", "message": "A pooja with this name already exists"}
        )

    pooja = Pooja(name=name, price=pooja_data.price, visible=True)
    db.add(pooja)
    await db.flush()

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.POOJA_CREATE,
        target_type="pooja",
        target_id=str(pooja.id),
        after_data=_snapshot(pooja),
        ip_address=client_ip(request),
    ))

    await db.commit()
    await db.refresh(pooja)

    return SuccessResponse(data=PoojaResponse.model_validate(pooja))


@router.patch("/{pooja_id}", response_model=SuccessResponse[PoojaResponse])
async def update_pooja(
    request: Request,
    pooja_id: int,
    pooja_data: PoojaUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Change price and/or visibility (admin)"""
    pooja = await _get_pooja_or_404(db, pooja_id)
    before_data = _snapshot(pooja)

    update_fields = pooja_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_fields.items():
        setattr(pooja, field, value)

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.POOJA_UPDATE,
        target_type="pooja",
        target_id=str(pooja.id),
        before_data=before_data,
        after_data=_snapshot(pooja),
        ip_address=client_ip(request),
    ))

    await db.commit()
    await db.refresh(pooja)

    return SuccessResponse(data=PoojaResponse.model_validate(pooja))


@router.post("/{pooja_id}/toggle", response_model=SuccessResponse[PoojaResponse])
async def toggle_pooja(
    request: Request,
    pooja_id: int,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Show/hide a pooja on the billing form (admin)"""
    pooja = await _get_pooja_or_404(db, pooja_id)
    pooja.visible = not pooja.visible

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.POOJA_TOGGLE,
        target_type="pooja",
        target_id=str(pooja.id),
        before_data={"visible": not pooja.visible},
        after_data={"visible": pooja.visible},
        ip_address=client_ip(request),
    ))

    await db.commit()
    await db.refresh(pooja)

    return SuccessResponse(data=PoojaResponse.model_validate(pooja))


@router.delete("/{pooja_id}", response_model=SuccessResponse[MessageResponse])
async def delete_pooja(
    request: Request,
    pooja_id: int,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a pooja (admin)

    Bills keep the pooja name as text, so past bills are unaffected.
    """
    pooja = await _get_pooja_or_404(db, pooja_id)
    before_data = _snapshot(pooja)
    await db.delete(pooja)

    db.add(AuditLog(
        username=current_user.username,
        action=AuditAction.POOJA_DELETE,
        target_type="pooja",
        target_id=str(pooja_id),
        before_data=before_data,
        ip_address=client_ip(request),
    ))

    await db.commit()

    return SuccessResponse(data=MessageResponse(message=f"Deleted {before_data['name']}"))
