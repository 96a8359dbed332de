from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireWorkersAccess
from stitchbook.core.database import get_db
from stitchbook.models import Staff, WorkerCategory
from stitchbook.schemas.worker import WorkerCategoryCreate, WorkerCategoryResponse, WorkerCategoryUpdate

router = APIRouter(prefix="/worker-categories", tags=["worker-categories"])


async def _name_taken(db: AsyncSession, name: str, exclude_id=None) -> bool:
    q = select(WorkerCategory.id).where(func.lower(WorkerCategory.name) == name.lower())
    if exclude_id is not None:
        q = q.where(WorkerCategory.id != exclude_id)
    return (await db.execute(q)).first() is not None


@router.get("", response_model=List[WorkerCategoryResponse])
async def list_categories(
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    r = await db.execute(select(WorkerCategory).order_by(WorkerCategory.created_at.desc(), WorkerCategory.id.desc()))
    return [WorkerCategoryResponse.model_validate(c) for c in r.scalars().all()]


@router.post("", response_model=WorkerCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: WorkerCategoryCreate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    name = data.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Название не может быть пустым")
    if await _name_taken(db, name):
        raise HTTPException(status_code=400, detail="Такая группа уже есть")
    cat = WorkerCategory(name=name, is_active=True)
    db.add(cat)
    await db.flush()
    await db.refresh(cat)
    return WorkerCategoryResponse.model_validate(cat)


@router.put("/{category_id}", response_model=WorkerCategoryResponse)
async def update_category(
    category_id: int,
    data: WorkerCategoryUpdate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    cat = await db.get(WorkerCategory, category_id)
    if not cat:
        raise HTTPException(status_code=404, detail="Группа не найдена")
    if data.name is not None:
        name = data.name.strip()
        if await _name_taken(db, name, exclude_id=category_id):
            raise HTTPException(status_code=400, detail="Такая группа уже есть")
        cat.name = name
    if data.is_active is not None:
        cat.is_active = data.is_active
    await db.flush()
    return WorkerCategoryResponse.model_validate(cat)


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireWorkersAccess),
):
    cat = await db.get(WorkerCategory, category_id)
    if not cat:
        raise HTTPException(status_code=404, detail="Группа не найдена")
    await db.delete(cat)
    return {"message": "Группа удалена"}
