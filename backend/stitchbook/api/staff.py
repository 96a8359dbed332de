from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireAdmin, RequireAnyAuth
from stitchbook.core.database import get_db
from stitchbook.models import Staff, StaffRole
from stitchbook.schemas.staff import StaffCreate, StaffResponse, StaffUpdate
from stitchbook.services.auth_service import hash_password

router = APIRouter(prefix="/staff", tags=["staff"])


async def _get_staff(db: AsyncSession, staff_id: int) -> Staff:
    result = await db.execute(select(Staff).where(Staff.id == staff_id))
    s = result.scalar_one_or_none()
    if not s:
        raise HTTPException(status_code=404, detail="Сотрудник не найден")
    return s


@router.get("", response_model=list[StaffResponse])
async def list_staff(
    all_staff: bool = Query(False, alias="all", description="Только для админа: показать всех"),
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireAnyAuth),
):
    if all_staff and current.role == StaffRole.ROLE_ADMIN:
        result = await db.execute(select(Staff).order_by(Staff.id))
    else:
        result = await db.execute(
            select(Staff).where(Staff.is_active == True).order_by(Staff.id)
        )
    return [StaffResponse.from_staff(s) for s in result.scalars().all()]


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(
    staff_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAnyAuth),
):
    return StaffResponse.from_staff(await _get_staff(db, staff_id))


@router.post("", response_model=StaffResponse, status_code=201)
async def create_staff(
    data: StaffCreate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    if data.login:
        r = await db.execute(select(Staff.id).where(Staff.login == data.login.strip()))
        if r.scalar_one_or_none() is not None:
            raise HTTPException(status_code=400, detail="Логин уже занят")
    s = Staff(
        name=data.name,
        phone_number=data.phone_number,
        email=data.email,
        role=data.role,
        login=data.login.strip() if data.login else None,
        password_hash=hash_password(data.password) if data.password else None,
        is_active=True,
    )
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return StaffResponse.from_staff(s)


@router.patch("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: int,
    data: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    s = await _get_staff(db, staff_id)
    if data.name is not None:
        s.name = data.name
    if data.phone_number is not None:
        s.phone_number = data.phone_number
    if data.email is not None:
        s.email = data.email
    if data.role is not None:
        s.role = data.role
    if data.login is not None:
        s.login = data.login.strip() if data.login.strip() else None
    if data.password is not None and data.password.strip():
        s.password_hash = hash_password(data.password)
    if data.is_active is not None:
        s.is_active = data.is_active
    await db.flush()
    await db.refresh(s)
    return StaffResponse.from_staff(s)


@router.delete("/{staff_id}")
async def delete_staff(
    staff_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    s = await _get_staff(db, staff_id)
    await db.delete(s)
    return {"message": "Сотрудник удалён"}
