from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from stitchbook.models import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    staff_id: int
    period_start: datetime
    period_end: datetime
    amount: Decimal = Field(..., ge=0)
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[PaymentMethod] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=0)
    status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None


class PaymentSuggest(BaseModel):
    """Сколько причитается сотруднику за период по его выработке."""
    staff_id: int
    period_start: datetime
    period_end: datetime


class PaymentResponse(BaseModel):
    id: int
    staff_id: int
    staff_name: Optional[str] = None
    period_start: datetime
    period_end: datetime
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
