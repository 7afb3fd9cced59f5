"""
Return processing tests.

Verifies:
- Requests exceeding what was sold are rejected and nothing is written
- Refunds are priced at the original sale price
- Stock comes back and the sale flips to refunded once fully returned
"""

from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from pos_api.models import Product, Return, ReturnItem, Transaction
from pos_api.services import returns as return_service


@pytest.fixture
def sale(client, cashier, cashier_headers, open_shift, coffee, tea, checkout_body):
    """Coffee x3 + tea x1 paid by card."""
    body = checkout_body(open_shift, cashier, [(coffee, 3), (tea, 1)], method="card")
    resp = client.post("/api/transactions", json=body, headers=cashier_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _return_body(sale, user, lines, refund_amount=None):
    return {
        "returnData": {
            "originalTransactionId": sale["id"],
            "userId": user.id,
            "reason": "Damaged packaging",
            "refundAmount": refund_amount,
            "refundMethod": "card",
        },
        "items": [
            {"productId": product.id, "quantity": quantity}
            for product, quantity in lines
        ],
    }


class TestRejectedReturns:
    def test_quantity_above_sold(self, client, db, cashier, cashier_headers, sale, coffee):
        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 5)]),
            headers=cashier_headers,
        )

        assert resp.status_code == 400
        assert coffee.id in resp.json()["message"]
        assert db.query(Return).count() == 0
        assert db.query(ReturnItem).count() == 0
        db.expire_all()
        assert db.get(Product, coffee.id).stock == 7

    def test_product_not_in_sale(self, client, db, cashier, cashier_headers, sale, category):
        other = Product(sku="MLK-001", name="Milk", price=Decimal("60.00"), stock=4, category_id=category.id)
        db.add(other)
        db.commit()

        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(other, 1)]),
            headers=cashier_headers,
        )

        assert resp.status_code == 400
        assert "not part of the original transaction" in resp.json()["message"]

    def test_refund_amount_mismatch(self, client, cashier, cashier_headers, sale, coffee):
        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 1)], refund_amount="300.00"),
            headers=cashier_headers,
        )

        assert resp.status_code == 400
        assert "250.00" in resp.json()["message"]

    def test_unknown_transaction(self, client, cashier, cashier_headers, sale, coffee):
        body = _return_body(sale, cashier, [(coffee, 1)])
        body["returnData"]["originalTransactionId"] = "missing"

        resp = client.post("/api/returns", json=body, headers=cashier_headers)

        assert resp.status_code == 404

    def test_empty_items(self, client, cashier, cashier_headers, sale):
        resp = client.post("/api/returns", json=_return_body(sale, cashier, []), headers=cashier_headers)
        assert resp.status_code == 400


@pytest.mark.scenario
class TestCommittedReturns:
    def test_partial_return(self, client, db, cashier, cashier_headers, sale, coffee):
        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 2)], refund_amount="500.00"),
            headers=cashier_headers,
        )

        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["refundAmount"] == "500.00"
        assert data["items"][0]["unitPrice"] == "250.00"
        assert data["originalTransaction"]["status"] == "completed"

        db.expire_all()
        assert db.get(Product, coffee.id).stock == 9
        assert db.get(Transaction, sale["id"]).status == "completed"

    def test_full_return_restores_stock_and_refunds(self, client, db, cashier, cashier_headers, sale, coffee, tea):
        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 3), (tea, 1)]),
            headers=cashier_headers,
        )

        assert resp.status_code == 201, resp.text
        assert resp.json()["refundAmount"] == "830.00"

        db.expire_all()
        assert db.get(Product, coffee.id).stock == 10
        assert db.get(Product, tea.id).stock == 5
        assert db.get(Transaction, sale["id"]).status == "refunded"

    def test_returns_accumulate_against_sale(self, client, db, cashier, cashier_headers, sale, coffee, tea):
        first = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 2)]),
            headers=cashier_headers,
        )
        over = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 2)]),
            headers=cashier_headers,
        )
        rest = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 1), (tea, 1)]),
            headers=cashier_headers,
        )

        assert first.status_code == 201
        assert over.status_code == 400
        assert "exceeds returnable quantity 1" in over.json()["message"]
        assert rest.status_code == 201

        db.expire_all()
        assert db.get(Transaction, sale["id"]).status == "refunded"

    def test_refunded_sale_cannot_be_returned_again(self, client, cashier, cashier_headers, sale, coffee, tea):
        client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(coffee, 3), (tea, 1)]),
            headers=cashier_headers,
        )

        resp = client.post(
            "/api/returns",
            json=_return_body(sale, cashier, [(tea, 1)]),
            headers=cashier_headers,
        )

        assert resp.status_code == 400
        assert "refunded" in resp.json()["message"]

    def test_list_returns(self, client, cashier, cashier_headers, sale, tea):
        client.post("/api/returns", json=_return_body(sale, cashier, [(tea, 1)]), headers=cashier_headers)

        resp = client.get("/api/returns", headers=cashier_headers)

        assert resp.status_code == 200
        assert len(resp.json()) == 1
        assert resp.json()[0]["originalTransactionId"] == sale["id"]


def test_full_return_after_floored_sale(client, db, cashier, cashier_headers, open_shift, tea, checkout_body):
    body = checkout_body(open_shift, cashier, [(tea, 5)], method="card")
    db.get(Product, tea.id).stock = 2
    db.commit()

    sold = client.post("/api/transactions", json=body, headers=cashier_headers).json()
    client.post("/api/returns", json=_return_body(sold, cashier, [(tea, 5)]), headers=cashier_headers)

    db.expire_all()
    # Floored at zero on sale, so the return brings back exactly what was returned
    assert db.get(Product, tea.id).stock == 5


def test_original_sale_is_loaded_for_update(db):
    query = return_service._locked_original(db, "txn-1")
    sql = str(query.statement.compile(dialect=postgresql.dialect()))

    assert "FOR UPDATE" in sql
    assert "transactions.id" in sql
