"""
Расчёт сдельного заработка.

aggregate() — чистая синхронная функция над уже загруженными записями и
снимком ставок; порядок записей на результат не влияет. compute_earnings()
загружает данные (снимок ставок, записи окна, владельцев) и вызывает её.
"""
import asyncio
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.config import settings
from stitchbook.core.errors import TransientStoreError, ValidationError
from stitchbook.core.logging_config import get_logger
from stitchbook.schemas.earnings import (
    AggregationResult,
    CategoryEarnings,
    OwnerTotal,
    RevenueTotal,
    WorkerEarnings,
)
from stitchbook.services.entry_service import EntryFilter, EntryKind, list_entries, resolve_owners
from stitchbook.services.rate_service import RateTable, load_rate_table
from stitchbook.services.windows import Window

logger = get_logger(__name__)

MONEY_QUANT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def line_earnings(quantity: int, rate: Decimal) -> Decimal:
    """Заработок за одну запись, округлённый до копейки/пайсы до суммирования."""
    return round_money(Decimal(quantity) * rate)


class _Acc:
    __slots__ = ("quantity", "earnings", "count", "categories")

    def __init__(self):
        self.quantity = 0
        self.earnings = Decimal("0")
        self.count = 0
        self.categories = defaultdict(lambda: [0, Decimal("0")])


def aggregate(
    entries: Iterable[Any],
    rates: RateTable,
    owners: Mapping[int, Any],
    label: str = "",
    window: Optional[Window] = None,
) -> AggregationResult:
    """Свести записи в заработок по работникам.

    Запись, чей владелец не найден в owners, пропускается (не ошибка).
    Категория без ставки даёт 0 к заработку, но количество учитывается.
    """
    accs: dict = {}
    total_entries = 0
    skipped = 0

    for entry in entries:
        total_entries += 1
        owner_id = entry.owner_id
        if owner_id not in owners:
            skipped += 1
            continue
        earnings = line_earnings(entry.quantity, rates.get_rate(entry.category))

        acc = accs.get(owner_id)
        if acc is None:
            acc = accs[owner_id] = _Acc()
        acc.quantity += entry.quantity
        acc.earnings += earnings
        acc.count += 1
        cat = acc.categories[entry.category]
        cat[0] += entry.quantity
        cat[1] += earnings

    if skipped:
        logger.warning("Пропущено записей без владельца: %s", skipped)

    workers = []
    for owner_id in sorted(accs):
        acc = accs[owner_id]
        owner = owners[owner_id]
        workers.append(
            WorkerEarnings(
                worker_id=owner_id,
                worker_name=getattr(owner, "name", str(owner_id)),
                worker_phone=getattr(owner, "phone_number", None),
                total_quantity=acc.quantity,
                total_earnings=acc.earnings,
                entry_count=acc.count,
                categories={
                    name: CategoryEarnings(quantity=q, earnings=e)
                    for name, (q, e) in sorted(acc.categories.items())
                },
            )
        )

    return AggregationResult(
        period=label or (window.label if window else ""),
        period_start=window.start if window else None,
        period_end=window.end if window else None,
        workers=tuple(workers),
        total_workers=len(workers),
        total_entries=total_entries,
        skipped_entries=skipped,
        total_quantity=sum(w.total_quantity for w in workers),
        total_revenue=sum((w.total_earnings for w in workers), Decimal("0")),
    )


async def _fetch(awaitable):
    return await asyncio.wait_for(awaitable, timeout=settings.store_timeout_seconds)


async def _load(db: AsyncSession, kind: EntryKind, window: Window, owner_id: Optional[int]):
    """Снимок ставок, записи окна и их владельцы; при сбое хранилища — TransientStoreError."""
    if window.start is not None and window.end is not None and window.start > window.end:
        raise ValidationError("Начало периода позже конца", field="date_from")
    try:
        rates = await _fetch(load_rate_table(db))
        entries = await _fetch(
            list_entries(db, kind, EntryFilter(owner_id=owner_id, start=window.start, end=window.end))
        )
        owners = await _fetch(resolve_owners(db, kind, {e.owner_id for e in entries}))
    except asyncio.TimeoutError as exc:
        logger.error("Таймаут чтения данных для расчёта (%s, %s)", kind.value, window.label)
        raise TransientStoreError("Хранилище не ответило вовремя, повторите запрос") from exc
    except (OperationalError, InterfaceError) as exc:
        logger.exception("Хранилище недоступно при расчёте (%s, %s)", kind.value, window.label)
        raise TransientStoreError("Хранилище недоступно, повторите запрос") from exc
    return rates, entries, owners


async def compute_earnings(
    db: AsyncSession,
    kind: EntryKind,
    window: Window,
    owner_id: Optional[int] = None,
) -> AggregationResult:
    rates, entries, owners = await _load(db, kind, window, owner_id)
    result = aggregate(entries, rates, owners, window=window)
    logger.info(
        "Заработок %s за %s: работников=%s записей=%s сумма=%s",
        kind.value, window.label, result.total_workers, result.total_entries, result.total_revenue,
    )
    return result


async def total_revenue(db: AsyncSession, kind: EntryKind, window: Window) -> RevenueTotal:
    """Общая выручка за окно: оцениваются все записи, даже без владельца."""
    rates, entries, _owners = await _load(db, kind, window, None)
    total = sum((line_earnings(e.quantity, rates.get_rate(e.category)) for e in entries), Decimal("0"))
    return RevenueTotal(period=window.label, total_revenue=total, total_entries=len(entries))


async def owner_total(db: AsyncSession, kind: EntryKind, owner_id: int, window: Window) -> OwnerTotal:
    """Сумма и число записей одного владельца за окно.

    count считает все записи владельца, в том числе пропущенные при расчёте:
    у удалённого владельца count > 0, а total = 0.
    """
    result = await compute_earnings(db, kind, window, owner_id=owner_id)
    return OwnerTotal(
        owner_id=owner_id,
        period=window.label,
        total=result.total_revenue,
        count=result.total_entries,
    )
