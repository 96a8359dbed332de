"""
Окна времени для выборки записей перед расчётом заработка.
Без ввода-вывода: только вычисление границ. None = без ограничения.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from stitchbook.core.errors import ValidationError


@dataclass(frozen=True)
class Window:
    start: Optional[datetime]
    end: Optional[datetime]
    label: str

    def contains(self, ts: datetime) -> bool:
        """Обе границы включительно."""
        if self.start is not None and ts < self.start:
            return False
        if self.end is not None and ts > self.end:
            return False
        return True


def _now() -> datetime:
    return datetime.utcnow()


def as_utc_naive(ts: datetime) -> datetime:
    """Время в БД хранится без зоны, в UTC."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def last_n_days(n: int, now: Optional[datetime] = None) -> Window:
    """Последние n суток до текущего момента; n=7 — «недельная» статистика."""
    if n < 0:
        raise ValidationError("Число дней не может быть отрицательным", field="days")
    end = now or _now()
    return Window(start=end - timedelta(days=n), end=end, label=f"last_{n}_days")


def all_time() -> Window:
    return Window(start=None, end=None, label="all_time")


def explicit_range(start: datetime, end: datetime) -> Window:
    if start > end:
        raise ValidationError("Начало периода позже конца", field="date_from")
    return Window(start=start, end=end, label="range")


def parse_bound(value: Optional[str], field: str, end_of_day: bool = False) -> Optional[datetime]:
    """Граница периода из строки запроса.

    Дата без времени означает начало дня, а для конца периода (end_of_day)
    весь день целиком. Время с зоной переводится в UTC.
    """
    if not value:
        return None
    try:
        day = date.fromisoformat(value)
    except ValueError:
        day = None
    if day is not None:
        return datetime.combine(day, time.max if end_of_day else time.min)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Неверная дата: {value}", field=field)
    return as_utc_naive(parsed)


def parse_window(
    period: str,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    now: Optional[datetime] = None,
    days: int = 7,
) -> Window:
    """Параметры запроса (period=week|all|range) → Window."""
    if period == "week":
        return last_n_days(days, now=now)
    if period == "all":
        return all_time()
    if period == "range":
        start = parse_bound(date_from, "date_from")
        end = parse_bound(date_to, "date_to", end_of_day=True)
        if start is None or end is None:
            raise ValidationError("Для period=range нужны date_from и date_to", field="date_from")
        return explicit_range(start, end)
    raise ValidationError(f"Неизвестный период: {period}", field="period")
