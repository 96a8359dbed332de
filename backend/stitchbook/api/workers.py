from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireWorkersAccess
from stitchbook.core.database import get_db
from stitchbook.core.logging_config import get_logger
from stitchbook.models import Staff, Worker, WorkerCategory
from stitchbook.schemas.worker import WorkerCreate, WorkerResponse, WorkerUpdate

logger = get_logger(__name__)
router = APIRouter(prefix="/workers", tags=["workers"])


async def _get_worker(db: AsyncSession, worker_id: int) -> Worker:
    worker = await db.get(Worker, worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="Работник не найден")
    return worker


async def _check_category(db: AsyncSession, category_id):
    if category_id is not None and await db.get(WorkerCategory, category_id) is None:
        raise HTTPException(status_code=404, detail="Группа работников не найдена")


@router.get("", response_model=List[WorkerResponse])
async def list_workers(
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    result = await db.execute(select(Worker).order_by(Worker.created_at.desc(), Worker.id.desc()))
    return [WorkerResponse.model_validate(w) for w in result.scalars().all()]


@router.get("/{worker_id}", response_model=WorkerResponse)
async def get_worker(
    worker_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    return WorkerResponse.model_validate(await _get_worker(db, worker_id))


@router.post("", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED)
async def create_worker(
    data: WorkerCreate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    await _check_category(db, data.category_id)
    worker = Worker(
        name=data.name.strip(),
        phone_number=data.phone_number.strip(),
        email=data.email,
        address=data.address,
        notes=data.notes,
        category_id=data.category_id,
        is_active=True,
    )
    db.add(worker)
    await db.flush()
    await db.refresh(worker, attribute_names=["category"])
    logger.info("Работник создан: #%s %s", worker.id, worker.name)
    return WorkerResponse.model_validate(worker)


@router.put("/{worker_id}", response_model=WorkerResponse)
async def update_worker(
    worker_id: int,
    data: WorkerUpdate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    worker = await _get_worker(db, worker_id)
    changes = data.model_dump(exclude_unset=True)
    if "category_id" in changes:
        await _check_category(db, changes["category_id"])
    for key, value in changes.items():
        setattr(worker, key, value)
    await db.flush()
    await db.refresh(worker, attribute_names=["category"])
    return WorkerResponse.model_validate(worker)


@router.delete("/{worker_id}")
async def delete_worker(
    worker_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    """Записи пошива работника остаются, но в статистику больше не попадают."""
    worker = await _get_worker(db, worker_id)
    await db.delete(worker)
    logger.info("Работник удалён: #%s", worker_id)
    return {"message": "Работник удалён"}
