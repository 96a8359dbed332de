"""Закупки материалов: каждый сотрудник видит свои и их сумму."""
from decimal import Decimal

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireInventoryAccess
from stitchbook.core.database import get_db
from stitchbook.models import InventoryItem, Staff
from stitchbook.schemas.catalog import InventoryItemCreate, InventoryItemResponse, InventoryList
from stitchbook.services.earnings import round_money

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/me", response_model=InventoryList)
async def my_inventory(
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireInventoryAccess),
):
    r = await db.execute(
        select(InventoryItem).where(InventoryItem.staff_id == current.id).order_by(InventoryItem.date.desc())
    )
    items = list(r.scalars().all())
    total = sum((round_money(i.unit_cost * i.quantity) for i in items), Decimal("0"))
    return InventoryList(items=[InventoryItemResponse.model_validate(i) for i in items], total=total)


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
async def add_inventory_item(
    body: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireInventoryAccess),
):
    fields = body.model_dump(exclude_none=True)
    item = InventoryItem(staff_id=current.id, **fields)
    db.add(item)
    await db.flush()
    await db.refresh(item)
    return InventoryItemResponse.model_validate(item)
