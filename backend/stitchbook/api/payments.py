"""Выплаты сотрудникам (только админ). Платёжный шлюз сюда не входит:
его идентификаторы просто сохраняются в записи выплаты."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireAdmin
from stitchbook.core.database import get_db
from stitchbook.core.logging_config import get_logger
from stitchbook.models import Payment, Staff
from stitchbook.schemas.earnings import OwnerTotal
from stitchbook.schemas.payment import PaymentCreate, PaymentResponse, PaymentSuggest, PaymentUpdate
from stitchbook.services import earnings
from stitchbook.services.entry_service import EntryKind
from stitchbook.services.windows import explicit_range

logger = get_logger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])


def _payment_to_response(p: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=p.id,
        staff_id=p.staff_id,
        staff_name=p.staff.name if p.staff else None,
        period_start=p.period_start,
        period_end=p.period_end,
        amount=p.amount,
        status=p.status.value,
        payment_method=p.payment_method.value if p.payment_method else None,
        gateway_order_id=p.gateway_order_id,
        gateway_payment_id=p.gateway_payment_id,
        created_at=p.created_at,
    )


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    r = await db.execute(select(Payment).order_by(Payment.created_at.desc(), Payment.id.desc()))
    return [_payment_to_response(p) for p in r.scalars().all()]


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    explicit_range(body.period_start, body.period_end)
    if await db.get(Staff, body.staff_id) is None:
        raise HTTPException(status_code=404, detail="Сотрудник не найден")
    p = Payment(
        staff_id=body.staff_id,
        period_start=body.period_start,
        period_end=body.period_end,
        amount=body.amount,
        status=body.status,
        payment_method=body.payment_method,
    )
    db.add(p)
    await db.flush()
    await db.refresh(p, attribute_names=["staff"])
    logger.info("Выплата #%s: сотрудник=%s сумма=%s", p.id, p.staff_id, p.amount)
    return _payment_to_response(p)


@router.post("/suggest", response_model=OwnerTotal)
async def suggest_payment(
    body: PaymentSuggest,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    """Сумма к выплате за период по выработке сотрудника и текущим ставкам."""
    window = explicit_range(body.period_start, body.period_end)
    return await earnings.owner_total(db, EntryKind.PRODUCTION, body.staff_id, window)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    body: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    p = await db.get(Payment, payment_id)
    if not p:
        raise HTTPException(status_code=404, detail="Выплата не найдена")
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(p, key, value)
    await db.flush()
    await db.refresh(p, attribute_names=["staff"])
    return _payment_to_response(p)
