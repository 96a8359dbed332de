"""
Журнал выработки: записи пошива (работник) и производства (сотрудник).
Записи не редактируются, только создаются и удаляются для исправлений.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.core.errors import NotFoundError, ValidationError
from stitchbook.core.logging_config import get_logger
from stitchbook.models import ProductionEntry, Staff, StitchEntry, Worker
from stitchbook.services.rate_service import normalize_category
from stitchbook.services.windows import as_utc_naive

logger = get_logger(__name__)

EntryModel = Union[StitchEntry, ProductionEntry]


class EntryKind(str, enum.Enum):
    STITCH = "stitch"
    PRODUCTION = "production"


# вид записи → (модель записи, модель владельца)
_MODELS: Dict[EntryKind, tuple] = {
    EntryKind.STITCH: (StitchEntry, Worker),
    EntryKind.PRODUCTION: (ProductionEntry, Staff),
}


def entry_model(kind: EntryKind) -> Type[EntryModel]:
    return _MODELS[kind][0]


def owner_model(kind: EntryKind):
    return _MODELS[kind][1]


@dataclass(frozen=True)
class EntryFilter:
    owner_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    start_inclusive: bool = True
    end_inclusive: bool = True
    newest_first: bool = True


async def resolve_owners(db: AsyncSession, kind: EntryKind, ids: Iterable[int]) -> dict:
    """id → работник/сотрудник; ненайденных id в ответе нет."""
    wanted = {i for i in ids if i is not None}
    if not wanted:
        return {}
    model = owner_model(kind)
    r = await db.execute(select(model).where(model.id.in_(wanted)))
    return {row.id: row for row in r.scalars().all()}


async def resolve_workers(db: AsyncSession, ids: Iterable[int]) -> Dict[int, Worker]:
    return await resolve_owners(db, EntryKind.STITCH, ids)


async def record_entry(
    db: AsyncSession,
    kind: EntryKind,
    owner_id: int,
    category: str,
    quantity: int,
    date: Optional[datetime] = None,
    recorded_by_id: Optional[int] = None,
) -> EntryModel:
    category = normalize_category(category)
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Количество должно быть целым числом", field="quantity")
    if quantity < 1:
        raise ValidationError("Количество должно быть не меньше 1", field="quantity")

    owners = await resolve_owners(db, kind, [owner_id])
    if owner_id not in owners:
        what = "Работник" if kind == EntryKind.STITCH else "Сотрудник"
        raise NotFoundError(f"{what} не найден", field="owner_id")

    model = entry_model(kind)
    fields = {
        "category": category,
        "quantity": quantity,
        "date": as_utc_naive(date) if date else datetime.utcnow(),
    }
    if kind == EntryKind.STITCH:
        entry = model(worker_id=owner_id, recorded_by_id=recorded_by_id, **fields)
    else:
        entry = model(staff_id=owner_id, **fields)
    db.add(entry)
    await db.flush()
    await db.refresh(entry)
    logger.info(
        "Запись %s #%s: владелец=%s категория=%s кол-во=%s",
        kind.value, entry.id, owner_id, category, quantity,
    )
    return entry


async def list_entries(db: AsyncSession, kind: EntryKind, flt: Optional[EntryFilter] = None) -> List[EntryModel]:
    flt = flt or EntryFilter()
    model = entry_model(kind)
    q = select(model)
    if flt.owner_id is not None:
        q = q.where(model.owner_id == flt.owner_id)
    if flt.start is not None:
        q = q.where(model.date >= flt.start if flt.start_inclusive else model.date > flt.start)
    if flt.end is not None:
        q = q.where(model.date <= flt.end if flt.end_inclusive else model.date < flt.end)
    if flt.newest_first:
        q = q.order_by(model.date.desc(), model.id.desc())
    else:
        q = q.order_by(model.date, model.id)
    r = await db.execute(q)
    return list(r.scalars().all())


async def delete_entry(db: AsyncSession, kind: EntryKind, entry_id: int) -> None:
    model = entry_model(kind)
    entry = await db.get(model, entry_id)
    if entry is None:
        raise NotFoundError("Запись не найдена", field="id")
    await db.delete(entry)
    await db.flush()
    logger.info("Запись %s #%s удалена", kind.value, entry_id)
