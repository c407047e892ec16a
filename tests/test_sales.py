from datetime import date, timedelta

import pytest


def _sale(**overrides):
    sale = {
        "client_name": "Ana Souza",
        "client_email": "ana@example.com",
        "product_service": "Casa 101 - weekend",
        "amount": "850.00",
        "status": "paid",
        "sale_date": date.today().isoformat(),
    }
    sale.update(overrides)
    return sale


@pytest.mark.parametrize("amount", ["0", "-10", "0.00"])
def test_non_positive_amount_rejected_before_store(client, operator_headers, db, amount):
    writes = db.writes
    res = client.post("/admin/sales", json=_sale(amount=amount), headers=operator_headers)
    assert res.status_code == 422
    assert db.writes == writes
    assert db.rows("sales") == {}


def test_created_sale_listed_under_its_status(client, operator_headers):
    res = client.post("/admin/sales", json=_sale(status="pending"), headers=operator_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["created_by"] == "operator1"
    assert created["amount"] == 850.0

    pending = client.get("/admin/sales", params={"status": "pending"}, headers=operator_headers).json()
    assert [s["id"] for s in pending] == [created["id"]]
    paid = client.get("/admin/sales", params={"status": "paid"}, headers=operator_headers).json()
    assert paid == []


def test_defaults(client, admin_headers):
    res = client.post(
        "/admin/sales",
        json={"client_name": "Bo", "product_service": "Transfer", "amount": 120, "client_email": ""},
        headers=admin_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "pending"
    assert body["sale_date"] == date.today().isoformat()
    assert body["client_email"] is None


def test_invalid_email_rejected(client, admin_headers):
    res = client.post("/admin/sales", json=_sale(client_email="nope"), headers=admin_headers)
    assert res.status_code == 422


def test_filters_client_and_dates(client, operator_headers):
    today = date.today()
    old = (today - timedelta(days=40)).isoformat()
    client.post("/admin/sales", json=_sale(client_name="Ana Souza"), headers=operator_headers)
    client.post("/admin/sales", json=_sale(client_name="Bruno Lima", sale_date=old), headers=operator_headers)

    by_name = client.get("/admin/sales", params={"client": "souza"}, headers=operator_headers).json()
    assert [s["client_name"] for s in by_name] == ["Ana Souza"]

    recent = client.get(
        "/admin/sales",
        params={"date_start": (today - timedelta(days=7)).isoformat(), "date_end": today.isoformat()},
        headers=operator_headers,
    ).json()
    assert [s["client_name"] for s in recent] == ["Ana Souza"]

    everything = client.get("/admin/sales", headers=operator_headers).json()
    assert [s["sale_date"] for s in everything] == [today.isoformat(), old]


def test_stats(client, operator_headers):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    client.post("/admin/sales", json=_sale(amount="100.50"), headers=operator_headers)
    client.post("/admin/sales", json=_sale(amount="200", sale_date=yesterday), headers=operator_headers)
    client.post("/admin/sales", json=_sale(amount="50", product_service="Boat tour"), headers=operator_headers)
    client.post("/admin/sales", json=_sale(amount="999", status="cancelled"), headers=operator_headers)

    stats = client.get("/admin/sales/stats", headers=operator_headers).json()
    assert stats["total_period"] == 350.5
    assert stats["total_today"] == 150.5
    assert stats["top_products"][0] == {"product": "Casa 101 - weekend", "count": 2}
    assert stats["top_products"][1] == {"product": "Boat tour", "count": 1}


def test_update_and_delete(client, admin_headers):
    sale_id = client.post("/admin/sales", json=_sale(status="pending"), headers=admin_headers).json()["id"]

    res = client.put(f"/admin/sales/{sale_id}", json=_sale(status="paid", amount="900"), headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "paid"
    assert res.json()["amount"] == 900.0

    assert client.delete(f"/admin/sales/{sale_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/admin/sales/{sale_id}", headers=admin_headers).status_code == 404
    assert client.put(f"/admin/sales/{sale_id}", json=_sale(), headers=admin_headers).status_code == 404


def test_clients_cannot_use_pos(client, client_headers):
    assert client.get("/admin/sales", headers=client_headers).status_code == 403
    assert client.post("/admin/sales", json=_sale(), headers=client_headers).status_code == 403


def test_anonymous_gets_401(client):
    assert client.get("/admin/sales").status_code == 401
