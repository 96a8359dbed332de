from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import BaseModel


class CategoryEarnings(BaseModel):
    """Итог по одной категории у одного работника."""
    quantity: int
    earnings: Decimal

    class Config:
        frozen = True


class WorkerEarnings(BaseModel):
    """Итог одного работника. categories собирается заново для каждого
    результата и наружу не разделяется; сам словарь не заморожен."""
    worker_id: int
    worker_name: str
    worker_phone: Optional[str] = None
    total_quantity: int
    total_earnings: Decimal
    entry_count: int
    categories: Dict[str, CategoryEarnings]

    class Config:
        frozen = True


class AggregationResult(BaseModel):
    """Заработок за период: по работникам, по категориям и общий итог.

    total_entries считает все записи окна, включая пропущенные
    (работник удалён); skipped_entries — сколько из них пропущено.
    Выручка и число работников считаются только по учтённым записям.
    """
    period: str
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    workers: Tuple[WorkerEarnings, ...]
    total_workers: int
    total_entries: int
    skipped_entries: int
    total_quantity: int
    total_revenue: Decimal

    class Config:
        frozen = True


class RevenueTotal(BaseModel):
    period: str
    total_revenue: Decimal
    total_entries: int


class OwnerTotal(BaseModel):
    owner_id: int
    period: str
    total: Decimal
    count: int
