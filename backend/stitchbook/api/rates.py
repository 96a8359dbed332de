"""Сдельные ставки: просмотр всеми, изменение только админом."""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireAdmin
from stitchbook.core.database import get_db
from stitchbook.models import Staff
from stitchbook.schemas.rate import RateResponse, RateUpsert
from stitchbook.services import rate_service

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=List[RateResponse])
async def list_rates(db: AsyncSession = Depends(get_db)):
    """Все ставки, по алфавиту категорий."""
    rows = await rate_service.list_rates(db)
    return [RateResponse.model_validate(row) for row in rows]


@router.get("/{category}", response_model=RateResponse)
async def get_rate(category: str, db: AsyncSession = Depends(get_db)):
    """Ставка категории; для неизвестной категории — 0."""
    amount = await rate_service.get_rate(db, category)
    return RateResponse(category=category, amount=amount)


@router.post("", response_model=RateResponse)
async def upsert_rate(
    body: RateUpsert,
    response: Response,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    """Создать ставку (201) или заменить сумму существующей (200)."""
    rate, created = await rate_service.upsert_rate(db, body.category, body.amount)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return RateResponse.model_validate(rate)


@router.delete("/{category}")
async def delete_rate(
    category: str,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    await rate_service.delete_rate(db, category)
    return {"ok": True}
