import io
from decimal import Decimal

from openpyxl import load_workbook

from conftest import add_pooja


async def test_pooja_catalog_admin_only(client, staff_headers):
    response = await client.post("/api/v1/poojas", json={"name": "Archana", "price": "100"}, headers=staff_headers)

    assert response.status_code == 403


async def test_pooja_toggle_hides_from_billing_form(client, admin_headers):
    created = await client.post("/api/v1/poojas", json={"name": "Archana", "price": "100"}, headers=admin_headers)
    assert created.status_code == 201
    pooja_id = created.json()["data"]["id"]
    assert created.json()["data"]["visible"] is True

    toggled = await client.post(f"/api/v1/poojas/{pooja_id}/toggle", headers=admin_headers)
    assert toggled.json()["data"]["visible"] is False

    visible = await client.get("/api/v1/poojas/visible", headers=admin_headers)
    assert visible.json()["data"]["total"] == 0

    everything = await client.get("/api/v1/poojas", headers=admin_headers)
    assert everything.json()["data"]["total"] == 1


async def test_pooja_update_and_delete(client, admin_headers):
    created = await client.post("/api/v1/poojas", json={"name": "Homam", "price": "1000"}, headers=admin_headers)
    pooja_id = created.json()["data"]["id"]

    duplicate = await client.post("/api/v1/poojas", json={"name": "Homam", "price": "5"}, headers=admin_headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["error"]["code"] == "POOJA_EXISTS"

    updated = await client.patch(f"/api/v1/poojas/{pooja_id}", json={"price": "1200"}, headers=admin_headers)
    assert Decimal(updated.json()["data"]["price"]) == Decimal("1200")

    deleted = await client.delete(f"/api/v1/poojas/{pooja_id}", headers=admin_headers)
    assert deleted.status_code == 200

    missing = await client.delete(f"/api/v1/poojas/{pooja_id}", headers=admin_headers)
    assert missing.status_code == 404


async def test_billing_issues_sequential_receipts(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")

    first = await client.post(
        "/api/v1/billing",
        json={"devotee_name": "Suresh", "pooja_name": "Archana", "qty": 3},
        headers=staff_headers,
    )
    second = await client.post(
        "/api/v1/billing",
        json={"devotee_name": "Lakshmi", "pooja_name": "Donation", "donation_purpose": "Annadanam",
              "donation_amount": 500, "payment_mode": "Online", "reference_id": "UPI9"},
        headers=staff_headers,
    )

    assert first.status_code == 201
    bill = first.json()["data"]
    assert bill["receipt_no"] == "SRI/25-26/1"
    assert Decimal(bill["total"]) == Decimal("300")
    assert bill["username"] == "ravi"

    donation = second.json()["data"]
    assert donation["receipt_no"] == "SRI/25-26/2"
    assert donation["pooja_name"] == "Donation – Annadanam"
    assert donation["qty"] == 1
    assert donation["reference_id"] == "UPI9"

    listed = await client.get("/api/v1/billing", headers=staff_headers)
    assert listed.json()["data"]["total"] == 2

    fetched = await client.get(f"/api/v1/billing/{bill['id']}", headers=staff_headers)
    assert fetched.json()["data"]["receipt_no"] == "SRI/25-26/1"


async def test_invalid_bill_rejected_without_side_effects(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")

    bad_qty = await client.post("/api/v1/billing", json={"pooja_name": "Archana", "qty": "0"}, headers=staff_headers)
    unknown = await client.post("/api/v1/billing", json={"pooja_name": "Nothing"}, headers=staff_headers)
    no_purpose = await client.post(
        "/api/v1/billing", json={"pooja_name": "Donation", "donation_amount": "10"}, headers=staff_headers
    )

    assert bad_qty.status_code == 400
    assert bad_qty.json()["error"]["code"] == "INVALID_QUANTITY"
    assert unknown.json()["error"]["code"] == "INVALID_ITEM"
    assert no_purpose.json()["error"]["code"] == "MISSING_DONATION_FIELDS"

    ok = await client.post("/api/v1/billing", json={"pooja_name": "Archana"}, headers=staff_headers)
    assert ok.json()["data"]["receipt_no"] == "SRI/25-26/1"


async def test_oversized_amounts_rejected(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")

    donation = await client.post(
        "/api/v1/billing",
        json={"pooja_name": "Donation", "donation_purpose": "Annadanam", "donation_amount": "1e30"},
        headers=staff_headers,
    )
    qty = await client.post(
        "/api/v1/billing", json={"pooja_name": "Archana", "qty": "1" + "0" * 30}, headers=staff_headers
    )
    handover = await client.post(
        "/api/v1/collections/withdrawals", json={"handover_amount": "1e30"}, headers=staff_headers
    )

    assert donation.status_code == 400
    assert donation.json()["error"]["code"] == "INVALID_DONATION_AMOUNT"
    assert qty.status_code == 400
    assert qty.json()["error"]["code"] == "INVALID_QUANTITY"
    assert handover.status_code == 400
    assert handover.json()["error"]["code"] == "INVALID_HANDOVER_AMOUNT"


async def test_bill_lookup_not_found(client, staff_headers):
    response = await client.get("/api/v1/billing/9999", headers=staff_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "BILL_NOT_FOUND"


async def test_collection_and_withdrawal(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")
    for body in (
        {"pooja_name": "Archana", "qty": 2},
        {"pooja_name": "Archana", "qty": 1, "payment_mode": "Online"},
        {"pooja_name": "Donation", "donation_purpose": "Gosala", "donation_amount": "50"},
    ):
        response = await client.post("/api/v1/billing", json=body, headers=staff_headers)
        assert response.status_code == 201

    handover = await client.post(
        "/api/v1/collections/withdrawals", json={"handover_amount": "300"}, headers=staff_headers
    )
    assert handover.status_code == 201
    assert Decimal(handover.json()["data"]["remaining"]) == Decimal("-50")

    garbage = await client.post(
        "/api/v1/collections/withdrawals", json={"handover_amount": "abc"}, headers=staff_headers
    )
    assert Decimal(garbage.json()["data"]["handover"]) == Decimal("0")

    summary = await client.get("/api/v1/collections", headers=staff_headers)
    data = summary.json()["data"]
    assert data["user"] == "ravi"
    totals = {k: Decimal(v) for k, v in data["summary"].items()}
    assert totals == {
        "cash": Decimal("250"),
        "online": Decimal("100"),
        "donation": Decimal("50"),
        "total": Decimal("350"),
        "remaining": Decimal("-50"),
        "withdrawn": Decimal("300"),
    }
    assert len(data["withdrawals"]) == 2


async def test_dashboard(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")
    await client.post("/api/v1/billing", json={"pooja_name": "Archana", "qty": 2}, headers=staff_headers)

    response = await client.get("/api/v1/dashboard", params={"range": "week"}, headers=staff_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    # the fixed clock is a Sunday
    assert data["start_date"] == "2025-06-09"
    assert data["end_date"] == "2025-06-15"
    assert Decimal(data["total_collection"]) == Decimal("200")
    assert data["top_poojas"] == [{"pooja_name": "Archana", "count": 2}]


async def test_report_requires_range(client, staff_headers):
    response = await client.get("/api/v1/reports", headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_DATE_RANGE"


async def test_report_and_export(client, session_factory, staff_headers):
    await add_pooja(session_factory, "Archana", "100")
    await client.post("/api/v1/billing", json={"pooja_name": "Archana", "qty": 2}, headers=staff_headers)

    params = {"from": "15/6/2025", "to": "15/6/2025", "payment_mode": "cash"}
    report = await client.get("/api/v1/reports", params=params, headers=staff_headers)
    assert report.json()["data"]["total"] == 1
    assert Decimal(report.json()["data"]["total_amount"]) == Decimal("200")

    export = await client.get("/api/v1/reports/export", params=params, headers=staff_headers)
    assert export.status_code == 200
    assert export.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "temple-report.xlsx" in export.headers["content-disposition"]

    rows = list(load_workbook(io.BytesIO(export.content)).active.iter_rows(values_only=True))
    assert rows[0][0] == "Receipt No"
    assert rows[1][0] == "SRI/25-26/1"

    options = await client.get("/api/v1/reports/options", headers=staff_headers)
    assert options.json()["data"]["poojas"] == ["Archana"]


async def test_expenses(client, staff_headers):
    created = await client.post(
        "/api/v1/expenses",
        json={"expense_date": "2025-06-14", "purpose": "Flowers", "amount": "250"},
        headers=staff_headers,
    )
    assert created.status_code == 201
    assert created.json()["data"]["added_by"] == "ravi"

    listed = await client.get("/api/v1/expenses", headers=staff_headers)
    assert listed.json()["data"]["total"] == 1
    assert Decimal(listed.json()["data"]["total_amount"]) == Decimal("250")

    export = await client.get("/api/v1/expenses/export", headers=staff_headers)
    rows = list(load_workbook(io.BytesIO(export.content)).active.iter_rows(values_only=True))
    assert rows[0] == ("Date", "Purpose", "Amount ₹", "Added By")
    assert rows[1][0] == "14/06/2025"


async def test_request_validation_envelope(client, staff_headers):
    response = await client.post("/api/v1/billing", json={"qty": 1}, headers=staff_headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
