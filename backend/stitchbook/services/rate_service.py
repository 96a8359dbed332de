"""Таблица сдельных ставок: категория → сумма за единицу."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import List, Mapping, Union

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.core.errors import NotFoundError, ValidationError
from stitchbook.core.logging_config import get_logger
from stitchbook.models import Rate

logger = get_logger(__name__)

ZERO = Decimal("0")
# столбец amount хранит два знака после запятой
RATE_QUANT = Decimal("0.01")
RATE_MAX = Decimal("1e10")


@dataclass(frozen=True)
class RateTable:
    """Снимок ставок на момент запроса. Неизвестная категория стоит 0."""

    rates: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def get_rate(self, category: str) -> Decimal:
        return self.rates.get(category, ZERO)

    def __contains__(self, category: str) -> bool:
        return category in self.rates


def normalize_category(category: str) -> str:
    value = (category or "").strip()
    if not value:
        raise ValidationError("Категория не может быть пустой", field="category")
    return value


def normalize_amount(amount: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(amount, bool):
        raise ValidationError("Ставка должна быть числом", field="amount")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Ставка должна быть числом", field="amount")
    if not value.is_finite():
        raise ValidationError("Ставка должна быть числом", field="amount")
    if value < 0:
        raise ValidationError("Ставка не может быть отрицательной", field="amount")
    if value >= RATE_MAX:
        raise ValidationError("Ставка слишком большая", field="amount")
    if value != value.quantize(RATE_QUANT):
        raise ValidationError("Ставка: не больше двух знаков после запятой", field="amount")
    return value.quantize(RATE_QUANT)


async def get_rate(db: AsyncSession, category: str) -> Decimal:
    r = await db.execute(select(Rate.amount).where(Rate.category == (category or "").strip()))
    amount = r.scalar_one_or_none()
    return amount if amount is not None else ZERO


async def list_rates(db: AsyncSession) -> List[Rate]:
    r = await db.execute(select(Rate).order_by(Rate.category))
    return list(r.scalars().all())


async def load_rate_table(db: AsyncSession) -> RateTable:
    r = await db.execute(select(Rate.category, Rate.amount))
    return RateTable({row.category: Decimal(row.amount) for row in r.all()})


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Upsert не поддерживается для {dialect}")


async def upsert_rate(db: AsyncSession, category: str, amount) -> tuple[Rate, bool]:
    """Создать или заменить ставку одним INSERT ... ON CONFLICT.

    Возвращает (ставка, создана_ли). Уникальный индекс по category не даёт
    двум конкурентным запросам создать две строки: побеждает последний.
    """
    category = normalize_category(category)
    value = normalize_amount(amount)

    existed = (await db.execute(select(Rate.id).where(Rate.category == category))).scalar_one_or_none()

    now = datetime.utcnow()
    insert = _insert_for(db)
    stmt = insert(Rate).values(category=category, amount=value, created_at=now, updated_at=now)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Rate.category],
        set_={"amount": stmt.excluded.amount, "updated_at": now},
    )
    await db.execute(stmt)

    r = await db.execute(
        select(Rate).where(Rate.category == category).execution_options(populate_existing=True)
    )
    rate = r.scalar_one()
    if existed is None:
        logger.info("Ставка создана: %s = %s", category, value)
    else:
        logger.info("Ставка обновлена: %s = %s", category, value)
    return rate, existed is None


async def delete_rate(db: AsyncSession, category: str) -> None:
    category = normalize_category(category)
    r = await db.execute(delete(Rate).where(Rate.category == category))
    if not r.rowcount:
        raise NotFoundError(f"Ставка для категории «{category}» не найдена", field="category")
    logger.info("Ставка удалена: %s", category)
