"""Integration tests for the POS HTTP endpoints."""

import uuid

import pytest
from services.pos_service.models import Order, ProductCategory
from tests.factories import (
    KARNATAKA_GSTIN,
    MAHARASHTRA_GSTIN,
    CustomerFactory,
    InventoryFactory,
    ProductFactory,
    ShopFactory,
)


async def _seed(db, quantity=10):
    shop = ShopFactory.create()
    product = ProductFactory.create(shop_id=shop.id)
    db.add_all(
        [
            shop,
            product,
            InventoryFactory.create(product_id=product.id, shop_id=shop.id, quantity=quantity),
        ]
    )
    await db.commit()
    return shop, product


def _headers(shop, cashier="cashier-1"):
    return {"X-Shop-ID": str(shop.id), "X-Cashier-ID": cashier}


def _order_body(product, quantity=2, **overrides):
    body = {
        "items": [{"product_id": str(product.id), "quantity": quantity}],
        "payment_method": "cash",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "pos"}


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_order(client, db_session):
    """POST /pos/orders: prices the cart and returns amounts in rupees."""
    shop, product = await _seed(db_session)
    customer = CustomerFactory.create(shop_id=shop.id)
    db_session.add(customer)
    await db_session.commit()

    response = await client.post(
        "/pos/orders",
        json=_order_body(product, customer_id=str(customer.id)),
        headers=_headers(shop),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["subtotal"] == "200.00"
    assert data["cgst_amount"] == "18.00"
    assert data["sgst_amount"] == "18.00"
    assert data["total_amount"] == "236.00"
    assert data["status"] == "pending"
    assert data["cashier_id"] == "cashier-1"
    assert data["items"][0]["product_name"] == product.name
    assert data["customer"]["loyalty_points"] == 2
    assert data["customer"]["tier"] == "bronze"
    assert data["customer"]["tier_multiplier"] == 1.0
    assert data["customer"]["spend_to_next_tier"] == "19764.00"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_order_insufficient_stock(client, db_session):
    shop, product = await _seed(db_session, quantity=3)

    response = await client.post(
        "/pos/orders", json=_order_body(product, quantity=5), headers=_headers(shop)
    )

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "insufficient_stock"
    assert data["available"] == 3
    assert data["requested"] == 5
    assert data["product_id"] == str(product.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_order_unknown_product(client, db_session):
    shop, _ = await _seed(db_session)
    missing = uuid.uuid4()

    response = await client.post(
        "/pos/orders",
        json={
            "items": [{"product_id": str(missing), "quantity": 1}],
            "payment_method": "upi",
        },
        headers=_headers(shop),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "product_not_found"
    assert str(missing) in response.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "body_overrides",
    [
        {"items": []},
        {"payment_method": "cheque"},
        {"discount_amount": "-1"},
    ],
)
async def test_create_order_malformed_body_is_400(client, db_session, body_overrides):
    shop, product = await _seed(db_session)

    response = await client.post(
        "/pos/orders",
        json=_order_body(product, **body_overrides),
        headers=_headers(shop),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_order_requires_shop_header(client, db_session):
    _, product = await _seed(db_session)

    response = await client.post("/pos/orders", json=_order_body(product))

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_lifecycle_over_http(client, db_session):
    shop, product = await _seed(db_session)
    headers = _headers(shop)
    created = (
        await client.post("/pos/orders", json=_order_body(product), headers=headers)
    ).json()

    fetched = await client.get(f"/pos/orders/{created['id']}", headers=headers)
    listed = await client.get("/pos/orders", params={"status": "pending"}, headers=headers)
    completed = await client.patch(
        f"/pos/orders/{created['id']}/status",
        json={"status": "completed"},
        headers=headers,
    )
    cancel = await client.patch(
        f"/pos/orders/{created['id']}/cancel", json={"reason": "late"}, headers=headers
    )

    assert fetched.status_code == 200
    assert fetched.json()["order_number"] == created["order_number"]
    assert listed.json()["total"] == 1
    assert completed.status_code == 200
    assert completed.json()["completed_at"] is not None
    assert cancel.status_code == 409
    assert cancel.json()["code"] == "cannot_cancel_completed"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_order_over_http(client, db_session):
    shop, product = await _seed(db_session)
    headers = _headers(shop)
    created = (
        await client.post("/pos/orders", json=_order_body(product), headers=headers)
    ).json()

    response = await client.patch(
        f"/pos/orders/{created['id']}/cancel",
        json={"reason": "wrong item"},
        headers=headers,
    )
    again = await client.patch(f"/pos/orders/{created['id']}/cancel", headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["notes"] == "Cancelled: wrong item"
    assert again.status_code == 409
    assert again.json()["code"] == "already_cancelled"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_from_another_shop_is_404(client, db_session):
    shop, product = await _seed(db_session)
    created = (
        await client.post("/pos/orders", json=_order_body(product), headers=_headers(shop))
    ).json()

    response = await client.get(
        f"/pos/orders/{created['id']}", headers={"X-Shop-ID": str(uuid.uuid4())}
    )

    assert response.status_code == 404
    assert response.json()["code"] == "order_not_found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_backward_status_change_is_409(client, db_session):
    shop, product = await _seed(db_session)
    headers = _headers(shop)
    created = (
        await client.post("/pos/orders", json=_order_body(product), headers=headers)
    ).json()
    await client.patch(
        f"/pos/orders/{created['id']}/status", json={"status": "processing"}, headers=headers
    )

    response = await client.patch(
        f"/pos/orders/{created['id']}/status", json={"status": "pending"}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["code"] == "invalid_status_transition"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_store_abort_is_503(client, db_session, monkeypatch):
    shop, product = await _seed(db_session)
    headers = _headers(shop)
    monkeypatch.setattr(
        Order,
        "generate_order_number",
        staticmethod(lambda prefix="ORD": f"{prefix}-20261019101500-BBBBB"),
    )

    first = await client.post("/pos/orders", json=_order_body(product), headers=headers)
    second = await client.post("/pos/orders", json=_order_body(product), headers=headers)
    listed = await client.get("/pos/orders", headers=headers)

    assert first.status_code == 201
    assert second.status_code == 503
    assert second.json()["code"] == "transaction_failure"
    assert second.json()["retryable"] is True
    assert listed.json()["total"] == 1


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_adjust_inventory_and_low_stock(client, db_session):
    shop, product = await _seed(db_session, quantity=12)
    headers = _headers(shop, cashier="owner-1")

    adjusted = await client.post(
        "/pos/inventory",
        json={"product_id": str(product.id), "delta_quantity": -4, "cost_price": "80.00"},
        headers=headers,
    )
    low_stock = await client.get("/pos/inventory/low-stock", headers=headers)

    assert adjusted.status_code == 200
    assert adjusted.json()["quantity"] == 8
    assert adjusted.json()["cost_price"] == "80.00"
    assert adjusted.json()["is_low_stock"] is True
    assert [row["product_id"] for row in low_stock.json()] == [str(product.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_adjust_inventory_below_zero_is_409(client, db_session):
    shop, product = await _seed(db_session, quantity=2)

    response = await client.post(
        "/pos/inventory",
        json={"product_id": str(product.id), "delta_quantity": -3},
        headers=_headers(shop),
    )

    assert response.status_code == 409
    assert response.json()["available"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inventory_list_includes_product_details(client, db_session):
    shop, product = await _seed(db_session, quantity=7)
    other = ProductFactory.create(
        shop_id=shop.id, name="Amul Butter 100g", category=ProductCategory.DAIRY
    )
    db_session.add(other)
    db_session.add(InventoryFactory.create(product_id=other.id, shop_id=shop.id, quantity=3))
    await db_session.commit()
    headers = _headers(shop)

    everything = await client.get("/pos/inventory", headers=headers)
    one = await client.get(
        "/pos/inventory", params={"product_id": str(other.id)}, headers=headers
    )
    paged = await client.get(
        "/pos/inventory", params={"page": 2, "page_size": 1}, headers=headers
    )
    elsewhere = await client.get("/pos/inventory", headers={"X-Shop-ID": str(uuid.uuid4())})

    assert everything.status_code == 200
    assert everything.json()["total"] == 2
    assert {row["product"]["name"] for row in everything.json()["items"]} == {
        product.name,
        "Amul Butter 100g",
    }
    row = one.json()["items"][0]
    assert one.json()["total"] == 1
    assert row["quantity"] == 3
    assert row["product"]["category"] == "dairy"
    assert row["product"]["selling_price"] == "100.00"
    assert row["product"]["barcode"] == other.barcode
    assert paged.json()["total"] == 2
    assert len(paged.json()["items"]) == 1
    assert elsewhere.json() == {"items": [], "total": 0, "page": 1, "page_size": 20}


# ---------------------------------------------------------------------------
# Tax preview
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tax_preview_intrastate(client):
    response = await client.post(
        "/pos/tax/calculate",
        json={
            "amount": "130.00",
            "gst_rate": 12,
            "source_state": "Maharashtra",
            "target_state": "maharashtra",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_intrastate"] is True
    assert [line["kind"] for line in data["tax_lines"]] == ["CGST", "SGST"]
    assert [line["amount"] for line in data["tax_lines"]] == ["7.80", "7.80"]
    assert data["total_tax"] == "15.60"
    assert data["total_amount"] == "145.60"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tax_preview_rejects_illegal_rate(client):
    response = await client.post(
        "/pos/tax/calculate",
        json={
            "amount": "100",
            "gst_rate": 15,
            "source_state": "Goa",
            "target_state": "Kerala",
        },
    )

    assert response.status_code == 400
    assert response.json()["field"] == "gst_rate"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tax_preview_routes_b2b_supply_by_gstin(client):
    response = await client.post(
        "/pos/tax/calculate",
        json={
            "amount": "1000.00",
            "gst_rate": 18,
            "seller_gstin": MAHARASHTRA_GSTIN,
            "buyer_gstin": KARNATAKA_GSTIN,
            "hsn_code": "1006",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_intrastate"] is False
    assert data["source_state"] == "Maharashtra"
    assert data["target_state"] == "Karnataka"
    assert [line["kind"] for line in data["tax_lines"]] == ["IGST"]
    assert data["total_tax"] == "180.00"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"hsn_code": "10A6"}, "hsn_code"),
        ({"seller_gstin": "27AAPFU0939F1ZX", "buyer_gstin": KARNATAKA_GSTIN}, "gstin"),
        ({"target_state": None}, "target_state"),
    ],
)
async def test_tax_preview_rejects_bad_routing_input(client, overrides, field):
    body = {
        "amount": "100",
        "gst_rate": 5,
        "source_state": "Goa",
        "target_state": "Kerala",
    }
    body.update(overrides)

    response = await client.post("/pos/tax/calculate", json=body)

    assert response.status_code == 400
    assert response.json()["field"] == field
