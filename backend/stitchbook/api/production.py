"""Выработка сотрудников: каждый вносит свою, недельный итог по сотруднику."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireEntryAccess, RequireStatsAccess
from stitchbook.config import settings
from stitchbook.core.database import get_db
from stitchbook.models import ProductionEntry, Staff, StaffRole
from stitchbook.schemas.earnings import AggregationResult, OwnerTotal
from stitchbook.schemas.entry import ProductionEntryCreate, ProductionEntryResponse
from stitchbook.services import earnings, entry_service
from stitchbook.services.entry_service import EntryFilter, EntryKind
from stitchbook.services.windows import last_n_days, parse_window

router = APIRouter(prefix="/production", tags=["production"])


@router.get("/me", response_model=List[ProductionEntryResponse])
async def my_production(
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireEntryAccess),
):
    entries = await entry_service.list_entries(db, EntryKind.PRODUCTION, EntryFilter(owner_id=current.id))
    return [ProductionEntryResponse.model_validate(e) for e in entries]


@router.post("", response_model=ProductionEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_production(
    body: ProductionEntryCreate,
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireEntryAccess),
):
    entry = await entry_service.record_entry(
        db,
        EntryKind.PRODUCTION,
        owner_id=current.id,
        category=body.category,
        quantity=body.quantity,
        date=body.date,
    )
    return ProductionEntryResponse.model_validate(entry)


@router.get("/weekly-total/{staff_id}", response_model=OwnerTotal)
async def weekly_total(
    staff_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireStatsAccess),
):
    """Сумма и число записей сотрудника за последние 7 дней."""
    window = last_n_days(settings.weekly_window_days)
    return await earnings.owner_total(db, EntryKind.PRODUCTION, staff_id, window)


@router.get("/stats", response_model=AggregationResult)
async def production_stats(
    period: str = Query("week", description="week | all | range"),
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireStatsAccess),
):
    window = parse_window(period, date_from, date_to, days=settings.weekly_window_days)
    return await earnings.compute_earnings(db, EntryKind.PRODUCTION, window, owner_id=staff_id)


@router.delete("/{entry_id}")
async def delete_production(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireEntryAccess),
):
    """Свою запись может удалить сотрудник, любую — админ."""
    entry = await db.get(ProductionEntry, entry_id)
    if entry is not None and entry.staff_id != current.id and current.role != StaffRole.ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Можно удалять только свои записи")
    await entry_service.delete_entry(db, EntryKind.PRODUCTION, entry_id)
    return {"message": "Запись удалена"}
