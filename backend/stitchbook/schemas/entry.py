from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StitchEntryCreate(BaseModel):
    """Запись о пошиве от приёмщика."""
    worker_id: int
    category: str = Field(..., min_length=1, max_length=64)
    quantity: int = Field(..., ge=1)
    date: Optional[datetime] = None
    recorded_by_id: Optional[int] = None


class ProductionEntryCreate(BaseModel):
    """Выработка сотрудника за себя: владелец берётся из токена."""
    category: str = Field(..., min_length=1, max_length=64)
    quantity: int = Field(..., ge=1)
    date: Optional[datetime] = None


class WorkerBrief(BaseModel):
    id: int
    name: str
    phone_number: Optional[str] = None


class StitchEntryResponse(BaseModel):
    id: int
    worker_id: int
    worker: Optional[WorkerBrief] = None
    category: str
    quantity: int
    date: datetime
    recorded_by_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ProductionEntryResponse(BaseModel):
    id: int
    staff_id: int
    category: str
    quantity: int
    date: datetime

    class Config:
        from_attributes = True
