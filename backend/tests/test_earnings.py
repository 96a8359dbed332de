"""Расчёт сдельного заработка: чистая агрегация и загрузка данных."""
import asyncio
import itertools
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pydantic
import pytest
from sqlalchemy.exc import OperationalError

from conftest import run_in_session
from stitchbook.core.errors import TransientStoreError, ValidationError
from stitchbook.services import earnings
from stitchbook.services.earnings import aggregate, line_earnings
from stitchbook.services.entry_service import EntryKind
from stitchbook.services.rate_service import RateTable
from stitchbook.services.windows import Window, all_time, last_n_days

NOW = datetime(2026, 10, 19, 12, 0, 0)
RATES = RateTable({"shirt": Decimal("10"), "pant": Decimal("15")})
OWNERS = {
    1: SimpleNamespace(name="Ravi", phone_number="111"),
    2: SimpleNamespace(name="Lakshmi", phone_number="222"),
}


def entry(owner_id, category, quantity, days_ago=0):
    return SimpleNamespace(
        owner_id=owner_id,
        category=category,
        quantity=quantity,
        date=NOW - timedelta(days=days_ago),
    )


def test_weekly_scenario():
    entries = [
        entry(1, "shirt", 5, days_ago=3),
        entry(1, "pant", 2, days_ago=10),
        entry(2, "shirt", 3, days_ago=1),
    ]
    window = last_n_days(7, now=NOW)
    result = aggregate([e for e in entries if window.contains(e.date)], RATES, OWNERS, window=window)

    by_id = {w.worker_id: w for w in result.workers}
    assert by_id[1].total_quantity == 5
    assert by_id[1].total_earnings == Decimal("50")
    assert by_id[1].entry_count == 1
    assert by_id[2].total_quantity == 3
    assert by_id[2].total_earnings == Decimal("30")
    assert result.total_revenue == Decimal("80")
    assert result.total_workers == 2
    assert result.total_entries == 2
    assert result.period == "last_7_days"
    assert "pant" not in by_id[1].categories


def test_category_breakdown_accumulates():
    entries = [entry(1, "shirt", 2), entry(1, "shirt", 3), entry(1, "pant", 1)]
    result = aggregate(entries, RATES, OWNERS)
    w = result.workers[0]
    assert w.categories["shirt"].quantity == 5
    assert w.categories["shirt"].earnings == Decimal("50")
    assert w.categories["pant"].quantity == 1
    assert w.categories["pant"].earnings == Decimal("15")
    assert w.total_earnings == Decimal("65")
    assert w.entry_count == 3
    assert w.worker_name == "Ravi"
    assert w.worker_phone == "111"


def test_result_does_not_depend_on_entry_order():
    entries = [
        entry(1, "shirt", 5),
        entry(2, "pant", 2),
        entry(1, "kurta", 4),
        entry(2, "shirt", 1),
        entry(9, "shirt", 7),
    ]
    expected = aggregate(entries, RATES, OWNERS)
    for perm in itertools.permutations(entries):
        assert aggregate(list(perm), RATES, OWNERS) == expected


def test_unknown_category_earns_zero_but_counts_quantity():
    result = aggregate([entry(1, "blouse", 4), entry(1, "shirt", 1)], RATES, OWNERS)
    w = result.workers[0]
    assert w.categories["blouse"].earnings == Decimal("0")
    assert w.categories["blouse"].quantity == 4
    assert w.total_quantity == 5
    assert w.entry_count == 2
    assert w.total_earnings == Decimal("10")


def test_entries_of_missing_workers_are_skipped():
    entries = [entry(1, "shirt", 1), entry(42, "shirt", 100), entry(42, "pant", 3)]
    result = aggregate(entries, RATES, OWNERS)
    assert result.total_entries == 3
    assert result.skipped_entries == 2
    assert result.total_workers == 1
    assert result.total_revenue == Decimal("10")
    assert result.total_quantity == 1
    assert [w.worker_id for w in result.workers] == [1]


def test_total_revenue_equals_sum_of_worker_earnings():
    rates = RateTable({"shirt": Decimal("12.35"), "pant": Decimal("7.05"), "cap": Decimal("0.99")})
    entries = [entry(i % 2 + 1, cat, q) for i, (cat, q) in enumerate(
        [("shirt", 3), ("pant", 11), ("cap", 7), ("shirt", 1), ("pant", 2), ("cap", 13)]
    )]
    result = aggregate(entries, rates, OWNERS)
    assert result.total_revenue == sum((w.total_earnings for w in result.workers), Decimal("0"))
    for w in result.workers:
        assert w.total_earnings == sum((c.earnings for c in w.categories.values()), Decimal("0"))


def test_each_line_is_rounded_before_summing():
    assert line_earnings(3, Decimal("0.335")) == Decimal("1.01")
    rates = RateTable({"button": Decimal("0.335")})
    result = aggregate([entry(1, "button", 3), entry(1, "button", 3)], rates, OWNERS)
    assert result.total_revenue == Decimal("2.02")


def test_many_small_amounts_sum_exactly():
    rates = RateTable({"hem": Decimal("0.10")})
    result = aggregate([entry(1, "hem", 1) for _ in range(1000)], rates, OWNERS)
    assert result.total_revenue == Decimal("100.00")
    assert result.workers[0].entry_count == 1000


def test_empty_input():
    result = aggregate([], RATES, OWNERS, window=all_time())
    assert result.workers == ()
    assert result.total_workers == 0
    assert result.total_entries == 0
    assert result.total_revenue == Decimal("0")
    assert result.period == "all_time"
    assert result.period_start is None


def test_result_is_immutable():
    result = aggregate([entry(1, "shirt", 1)], RATES, OWNERS)
    assert isinstance(result.workers, tuple)
    with pytest.raises(pydantic.ValidationError):
        result.total_revenue = Decimal("1000")
    with pytest.raises(pydantic.ValidationError):
        result.workers[0].total_earnings = Decimal("1000")


def test_rate_table_snapshot():
    source = {"shirt": Decimal("10")}
    table = RateTable(source)
    source["shirt"] = Decimal("99")
    assert table.get_rate("shirt") == Decimal("10")
    assert table.get_rate("unknown") == Decimal("0")
    assert "shirt" in table
    with pytest.raises(TypeError):
        table.rates["pant"] = Decimal("1")


def test_reversed_window_is_rejected_before_loading(clean_db):
    start = NOW
    window = Window(start=start, end=start - timedelta(days=1), label="range")

    async def _call(db):
        return await earnings.compute_earnings(db, EntryKind.STITCH, window)

    with pytest.raises(ValidationError):
        run_in_session(_call)


def test_store_failure_becomes_transient_error(clean_db, monkeypatch):
    async def _broken(db):
        raise OperationalError("SELECT rates", {}, Exception("connection refused"))

    monkeypatch.setattr(earnings, "load_rate_table", _broken)

    async def _call(db):
        return await earnings.compute_earnings(db, EntryKind.STITCH, all_time())

    with pytest.raises(TransientStoreError):
        run_in_session(_call)


def test_store_timeout_becomes_transient_error(clean_db, monkeypatch):
    async def _slow(db):
        await asyncio.sleep(1)
        return RateTable()

    monkeypatch.setattr(earnings, "load_rate_table", _slow)
    monkeypatch.setattr(earnings.settings, "store_timeout_seconds", 0.01)

    async def _call(db):
        return await earnings.compute_earnings(db, EntryKind.STITCH, all_time())

    with pytest.raises(TransientStoreError):
        run_in_session(_call)
