"""Приём работы у работников, исправления и сдельная статистика."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireEntryAccess, RequireStatsAccess
from stitchbook.config import settings
from stitchbook.core.database import get_db
from stitchbook.core.errors import ValidationError
from stitchbook.models import Staff, StitchEntry, Worker
from stitchbook.schemas.earnings import AggregationResult, RevenueTotal
from stitchbook.schemas.entry import StitchEntryCreate, StitchEntryResponse, WorkerBrief
from stitchbook.services import earnings, entry_service
from stitchbook.services.entry_service import EntryFilter, EntryKind
from stitchbook.services.windows import all_time, last_n_days, parse_bound, parse_window

router = APIRouter(prefix="/stitch-entries", tags=["stitch-entries"])


def _entry_to_response(entry: StitchEntry, worker: Optional[Worker]) -> StitchEntryResponse:
    return StitchEntryResponse(
        id=entry.id,
        worker_id=entry.worker_id,
        worker=WorkerBrief(id=worker.id, name=worker.name, phone_number=worker.phone_number) if worker else None,
        category=entry.category,
        quantity=entry.quantity,
        date=entry.date,
        recorded_by_id=entry.recorded_by_id,
        created_at=entry.created_at,
    )


async def _with_workers(db: AsyncSession, entries: List[StitchEntry]) -> List[StitchEntryResponse]:
    workers = await entry_service.resolve_workers(db, {e.worker_id for e in entries})
    return [_entry_to_response(e, workers.get(e.worker_id)) for e in entries]


@router.get("", response_model=List[StitchEntryResponse])
async def list_stitch_entries(
    worker_id: Optional[int] = Query(None),
    date_from: Optional[str] = Query(None, description="Начало (ISO), включительно"),
    date_to: Optional[str] = Query(None, description="Конец (ISO), включительно"),
    order: str = Query("desc", description="desc | asc"),
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireEntryAccess),
):
    """Все записи, новые сверху (order=asc — старые сверху)."""
    if order not in {"desc", "asc"}:
        raise ValidationError("order: desc или asc", field="order")
    flt = EntryFilter(
        owner_id=worker_id,
        start=parse_bound(date_from, "date_from"),
        end=parse_bound(date_to, "date_to", end_of_day=True),
        newest_first=order == "desc",
    )
    entries = await entry_service.list_entries(db, EntryKind.STITCH, flt)
    return await _with_workers(db, entries)


@router.get("/worker/{worker_id}", response_model=List[StitchEntryResponse])
async def list_worker_entries(
    worker_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireEntryAccess),
):
    entries = await entry_service.list_entries(db, EntryKind.STITCH, EntryFilter(owner_id=worker_id))
    return await _with_workers(db, entries)


@router.post("", response_model=StitchEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_stitch_entry(
    body: StitchEntryCreate,
    db: AsyncSession = Depends(get_db),
    current: Staff = Depends(RequireEntryAccess),
):
    """Принять работу. Неизвестный работник — 404; категория без ставки допустима."""
    entry = await entry_service.record_entry(
        db,
        EntryKind.STITCH,
        owner_id=body.worker_id,
        category=body.category,
        quantity=body.quantity,
        date=body.date,
        recorded_by_id=body.recorded_by_id if body.recorded_by_id is not None else current.id,
    )
    return (await _with_workers(db, [entry]))[0]


@router.get("/weekly-stats", response_model=AggregationResult)
async def weekly_stats(
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireStatsAccess),
):
    """Заработок всех работников за последние 7 дней."""
    window = last_n_days(settings.weekly_window_days)
    return await earnings.compute_earnings(db, EntryKind.STITCH, window)


@router.get("/total-revenue", response_model=RevenueTotal)
async def total_revenue(
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireStatsAccess),
):
    """Выручка за всё время."""
    return await earnings.total_revenue(db, EntryKind.STITCH, all_time())


@router.get("/stats", response_model=AggregationResult)
async def stats(
    period: str = Query("week", description="week | all | range"),
    date_from: Optional[str] = Query(None, description="Для range: начало (YYYY-MM-DD или ISO)"),
    date_to: Optional[str] = Query(None, description="Для range: конец, включительно"),
    worker_id: Optional[int] = Query(None, description="Только один работник"),
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireStatsAccess),
):
    window = parse_window(period, date_from, date_to, days=settings.weekly_window_days)
    return await earnings.compute_earnings(db, EntryKind.STITCH, window, owner_id=worker_id)


@router.delete("/{entry_id}")
async def delete_stitch_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireEntryAccess),
):
    """Удалить ошибочную запись (исправление)."""
    await entry_service.delete_entry(db, EntryKind.STITCH, entry_id)
    return {"message": "Запись удалена"}
