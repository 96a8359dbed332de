"""Ставки: upsert, список, права и проверки."""
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from conftest import run_in_session
from stitchbook.core.errors import NotFoundError, ValidationError
from stitchbook.models import Rate
from stitchbook.services import rate_service


def test_upsert_creates_then_updates_in_place(client, admin_headers):
    r = client.post("/rates", json={"category": "shirt", "amount": 10}, headers=admin_headers)
    assert r.status_code == 201, r.text
    created = r.json()

    r = client.post("/rates", json={"category": "shirt", "amount": "12.50"}, headers=admin_headers)
    assert r.status_code == 200, r.text
    updated = r.json()
    assert updated["id"] == created["id"]
    assert Decimal(updated["amount"]) == Decimal("12.50")

    async def _count(db):
        return (await db.execute(select(func.count()).select_from(Rate).where(Rate.category == "shirt"))).scalar_one()

    assert run_in_session(_count) == 1


def test_list_rates_sorted_by_category(client, admin_headers):
    for category, amount in [("pant", 15), ("blouse", 20), ("kurta", 25)]:
        client.post("/rates", json={"category": category, "amount": amount}, headers=admin_headers)
    r = client.get("/rates")
    assert r.status_code == 200
    assert [x["category"] for x in r.json()] == ["blouse", "kurta", "pant"]


def test_get_unknown_rate_is_zero(client):
    r = client.get("/rates/lehenga")
    assert r.status_code == 200
    assert Decimal(r.json()["amount"]) == 0


def test_upsert_requires_admin(client, staff_headers):
    r = client.post("/rates", json={"category": "shirt", "amount": 10}, headers=staff_headers)
    assert r.status_code == 403
    r = client.post("/rates", json={"category": "shirt", "amount": 10})
    assert r.status_code == 401


@pytest.mark.parametrize("body", [
    {"category": "shirt", "amount": -1},
    {"category": "", "amount": 5},
    {"category": "shirt", "amount": "abc"},
])
def test_upsert_rejects_bad_body(client, admin_headers, body):
    r = client.post("/rates", json=body, headers=admin_headers)
    assert r.status_code == 422


def test_blank_category_is_validation_error(client, admin_headers):
    r = client.post("/rates", json={"category": "   ", "amount": 5}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["field"] == "category"


def test_service_validates_directly(clean_db):
    async def _negative(db):
        return await rate_service.upsert_rate(db, "shirt", Decimal("-0.01"))

    with pytest.raises(ValidationError):
        run_in_session(_negative)

    async def _not_a_number(db):
        return await rate_service.upsert_rate(db, "shirt", "ten")

    with pytest.raises(ValidationError):
        run_in_session(_not_a_number)


def test_service_get_rate_and_snapshot(clean_db):
    async def _go(db):
        await rate_service.upsert_rate(db, "shirt", 10)
        await rate_service.upsert_rate(db, "shirt", 11)
        table = await rate_service.load_rate_table(db)
        return await rate_service.get_rate(db, "shirt"), await rate_service.get_rate(db, "nope"), table

    amount, missing, table = run_in_session(_go)
    assert amount == Decimal("11")
    assert missing == Decimal("0")
    assert table.get_rate("shirt") == Decimal("11")


def test_delete_rate(client, admin_headers):
    client.post("/rates", json={"category": "pant", "amount": 15}, headers=admin_headers)
    r = client.delete("/rates/pant", headers=admin_headers)
    assert r.status_code == 200
    assert Decimal(client.get("/rates/pant").json()["amount"]) == 0
    r = client.delete("/rates/pant", headers=admin_headers)
    assert r.status_code == 404


def test_delete_missing_rate_service(clean_db):
    async def _go(db):
        await rate_service.delete_rate(db, "ghost")

    with pytest.raises(NotFoundError):
        run_in_session(_go)


def test_amount_with_more_than_two_decimals_is_rejected(client, admin_headers):
    r = client.post("/rates", json={"category": "button", "amount": "0.125"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["field"] == "amount"
    assert Decimal(client.get("/rates/button").json()["amount"]) == 0


def test_stored_amount_prices_exactly(client, admin_headers, staff_headers):
    r = client.post("/rates", json={"category": "button", "amount": "0.13"}, headers=admin_headers)
    assert r.status_code == 201
    assert Decimal(client.get("/rates/button").json()["amount"]) == Decimal("0.13")

    w = client.post("/workers", json={"name": "Ravi", "phone_number": "9876500001"}, headers=staff_headers).json()
    client.post("/stitch-entries", json={"worker_id": w["id"], "category": "button", "quantity": 1000}, headers=staff_headers)
    stats = client.get("/stitch-entries/weekly-stats", headers=staff_headers).json()
    assert Decimal(stats["total_revenue"]) == Decimal("130.00")


@pytest.mark.parametrize("amount, expected", [("12.5", Decimal("12.50")), ("12.500", Decimal("12.50")), (7, Decimal("7.00"))])
def test_normalize_amount_keeps_value(amount, expected):
    assert rate_service.normalize_amount(amount) == expected


@pytest.mark.parametrize("amount", ["0.125", "1e10", "NaN", True])
def test_normalize_amount_rejects(amount):
    with pytest.raises(ValidationError) as exc:
        rate_service.normalize_amount(amount)
    assert exc.value.field == "amount"
