"""
Shift ledger tests: one open shift per user, terminal close, summaries.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from pos_api.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from pos_api.services import shifts as shift_service


class TestOpenShift:
    def test_open(self, client, cashier, cashier_headers):
        resp = client.post(
            "/api/shifts",
            json={"userId": cashier.id, "startingCash": "100.00"},
            headers=cashier_headers,
        )

        assert resp.status_code == 201, resp.text
        assert resp.json()["status"] == "open"
        assert resp.json()["startingCash"] == "100.00"
        assert resp.json()["endTime"] is None

    def test_second_open_is_conflict(self, client, cashier, cashier_headers, open_shift):
        resp = client.post(
            "/api/shifts",
            json={"userId": cashier.id, "startingCash": "50.00"},
            headers=cashier_headers,
        )

        assert resp.status_code == 409
        assert resp.json() == {"message": "User already has an open shift"}

    def test_negative_starting_cash_rejected(self, client, cashier, cashier_headers):
        resp = client.post(
            "/api/shifts",
            json={"userId": cashier.id, "startingCash": "-1.00"},
            headers=cashier_headers,
        )
        assert resp.status_code == 400

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            shift_service.open_shift(db, "no-such-user", Decimal("10.00"))

    def test_other_users_shift_does_not_block(self, db, admin, open_shift):
        shift = shift_service.open_shift(db, admin.id, Decimal("0.00"))
        assert shift.status == "open"

    def test_reopen_after_close(self, db, cashier, open_shift):
        shift_service.close_shift(db, open_shift.id, Decimal("100.00"))
        shift = shift_service.open_shift(db, cashier.id, Decimal("20.00"))
        assert shift.id != open_shift.id

    def test_open_conflict_raised_by_service(self, db, cashier, open_shift):
        with pytest.raises(ConflictError):
            shift_service.open_shift(db, cashier.id, Decimal("10.00"))


class TestCurrentShift:
    def test_current(self, client, cashier, cashier_headers, open_shift):
        resp = client.get(f"/api/shifts/current/{cashier.id}", headers=cashier_headers)
        assert resp.json()["id"] == open_shift.id

    def test_no_current_shift_is_null(self, client, cashier, cashier_headers):
        resp = client.get(f"/api/shifts/current/{cashier.id}", headers=cashier_headers)
        assert resp.status_code == 200
        assert resp.json() is None


class TestCloseShift:
    def test_close(self, client, cashier_headers, open_shift):
        resp = client.put(
            f"/api/shifts/{open_shift.id}/close",
            json={"endingCash": "660.00"},
            headers=cashier_headers,
        )

        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "closed"
        assert resp.json()["endingCash"] == "660.00"
        assert resp.json()["endTime"] is not None

    def test_close_twice(self, client, cashier_headers, open_shift):
        url = f"/api/shifts/{open_shift.id}/close"
        client.put(url, json={"endingCash": "100.00"}, headers=cashier_headers)

        resp = client.put(url, json={"endingCash": "90.00"}, headers=cashier_headers)

        assert resp.status_code == 400
        assert resp.json() == {"message": "Shift is already closed"}

    def test_close_twice_keeps_first_count(self, db, open_shift):
        shift_service.close_shift(db, open_shift.id, Decimal("100.00"))

        with pytest.raises(BusinessRuleError):
            shift_service.close_shift(db, open_shift.id, Decimal("1.00"))

        db.expire_all()
        assert shift_service.get_shift(db, open_shift.id).ending_cash == Decimal("100.00")

    def test_close_unknown(self, client, cashier_headers):
        resp = client.put("/api/shifts/missing/close", json={"endingCash": "1.00"}, headers=cashier_headers)
        assert resp.status_code == 404


@pytest.mark.scenario
class TestShiftSummary:
    def test_summary_after_cash_sale(self, client, cashier, cashier_headers, open_shift, coffee, checkout_body):
        body = checkout_body(open_shift, cashier, [(coffee, 2)], received="600.00")
        client.post("/api/transactions", json=body, headers=cashier_headers)

        resp = client.get(f"/api/shifts/{open_shift.id}/summary", headers=cashier_headers)

        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["totalSales"] == "560.00"
        assert data["totalTransactions"] == 1
        assert data["cashSales"] == "560.00"
        assert data["cardSales"] == "0.00"
        assert data["expectedCash"] == "660.00"
        assert data["shift"]["id"] == open_shift.id

    def test_summary_splits_methods(self, client, cashier, cashier_headers, open_shift, coffee, tea, checkout_body):
        client.post(
            "/api/transactions",
            json=checkout_body(open_shift, cashier, [(coffee, 1)], receipt_number="RCP-1-001"),
            headers=cashier_headers,
        )
        client.post(
            "/api/transactions",
            json=checkout_body(open_shift, cashier, [(tea, 1)], method="card", receipt_number="RCP-1-002"),
            headers=cashier_headers,
        )

        data = client.get(f"/api/shifts/{open_shift.id}/summary", headers=cashier_headers).json()

        assert data["cashSales"] == "280.00"
        assert data["cardSales"] == "89.60"
        assert data["totalSales"] == "369.60"
        assert data["totalTransactions"] == 2

    def test_empty_summary(self, client, cashier_headers, open_shift):
        data = client.get(f"/api/shifts/{open_shift.id}/summary", headers=cashier_headers).json()

        assert data["totalSales"] == "0.00"
        assert data["totalTransactions"] == 0
        assert data["expectedCash"] == "100.00"

    def test_summary_unknown_shift(self, client, cashier_headers):
        resp = client.get("/api/shifts/missing/summary", headers=cashier_headers)
        assert resp.status_code == 404

    def test_cash_discrepancy(self, db, open_shift):
        summary = shift_service.get_shift_summary(db, open_shift.id)
        assert shift_service.cash_discrepancy(summary, Decimal("95.50")) == Decimal("-4.50")


@pytest.mark.scenario
def test_drawer_scenario(client, cashier, cashier_headers, coffee, checkout_body):
    opened = client.post(
        "/api/shifts",
        json={"userId": cashier.id, "startingCash": "2000.00"},
        headers=cashier_headers,
    ).json()

    body = checkout_body(SimpleNamespace(id=opened["id"]), cashier, [(coffee, 2)], received="600.00")
    sale = client.post("/api/transactions", json=body, headers=cashier_headers).json()
    summary = client.get(f"/api/shifts/{opened['id']}/summary", headers=cashier_headers).json()

    assert (sale["subtotal"], sale["tax"], sale["total"], sale["changeAmount"]) == ("500.00", "60.00", "560.00", "40.00")
    assert summary["totalSales"] == "560.00"
    assert summary["cashSales"] == "560.00"
    assert summary["cardSales"] == "0.00"
    assert summary["expectedCash"] == "2560.00"
