from decimal import Decimal
from urllib.parse import urlsplit, parse_qsl

from core.config import settings
from services.vnpay_service import sign
from tests.conftest import auth_headers


async def _add(client, headers, product, quantity=1):
    response = await client.post("/api/customer/cart/items", json={"product_id": product.id, "quantity": quantity},
                                 headers=headers)
    assert response.status_code == 201


async def test_checkout_cash(client, customer_headers, make_product):
    product = make_product("Olive oil", price="12.50", quantity=4)
    await _add(client, customer_headers, product, 2)

    response = await client.post("/api/customer/orders/checkout", json={
        "payment_method": "cash",
        "customer_name": "Test Customer",
        "customer_phone": "+201111111111",
    }, headers=customer_headers)

    assert response.status_code == 201
    order = response.json()
    assert order["pay_status"] == "paid"
    assert order["fulfillment_status"] == "confirmed"
    assert Decimal(order["total_amount"]) == Decimal("25.00")
    assert Decimal(order["amount_due"]) == Decimal("25.00")
    assert order["items"][0]["product_name"] == "Olive oil"
    assert order["payments"][0]["transaction_status"] == "success"
    assert order["bill"]["pay_status"] == "paid"

    cart = await client.get("/api/customer/cart", headers=customer_headers)
    assert cart.json()["items"] == []


async def test_checkout_empty_cart(client, customer_headers):
    response = await client.post("/api/customer/orders/checkout", json={}, headers=customer_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "empty_cart"
    assert body["message"] == body["detail"] == "Cart is empty"


async def test_checkout_insufficient_stock(client, customer_headers, make_product):
    product = make_product("Honey", quantity=1)
    await _add(client, customer_headers, product, 3)

    response = await client.post("/api/customer/orders/checkout", json={}, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "insufficient_stock"
    assert "Honey" in response.json()["detail"]


async def test_checkout_invalid_payment_method(client, customer_headers, make_product):
    await _add(client, customer_headers, make_product())

    response = await client.post("/api/customer/orders/checkout", json={"payment_method": "cheque"},
                                 headers=customer_headers)

    assert response.status_code == 422


async def test_preview_then_checkout_with_promotion(client, customer_headers, make_product, make_promotion):
    product = make_product(price="100.00", quantity=5)
    make_promotion(code="WELCOME", discount_type="fixed", discount_value="15.00")
    await _add(client, customer_headers, product, 1)

    preview = await client.post("/api/customer/orders/preview", json={"promo_code": "welcome", "payment_method": "card"},
                                headers=customer_headers)
    assert preview.status_code == 200
    assert Decimal(preview.json()["final_amount"]) == Decimal("85.00")
    assert preview.json()["instant_settlement"] is False

    checkout = await client.post("/api/customer/orders/checkout", json={"promo_code": "welcome", "payment_method": "card"},
                                 headers=customer_headers)
    order = checkout.json()
    assert order["pay_status"] == "pending"
    assert Decimal(order["discount_amount"]) == Decimal("15.00")
    assert Decimal(order["payments"][0]["amount"]) == Decimal("85.00")


async def test_pay_pending_order(client, customer_headers, make_product):
    await _add(client, customer_headers, make_product(price="30.00"), 1)
    order = (await client.post("/api/customer/orders/checkout", json={"payment_method": "card"},
                               headers=customer_headers)).json()

    too_much = await client.post(f"/api/customer/orders/{order['id']}/pay",
                                 json={"amount": "31.00", "payment_method": "cash"}, headers=customer_headers)
    assert too_much.status_code == 400
    assert too_much.json()["code"] == "payment_exceeds_total"


async def test_orders_are_private(client, customer_headers, other_customer, make_product):
    await _add(client, customer_headers, make_product(), 1)
    order = (await client.post("/api/customer/orders/checkout", json={"payment_method": "card"},
                               headers=customer_headers)).json()
    stranger = auth_headers(other_customer)

    assert (await client.get(f"/api/customer/orders/{order['id']}", headers=stranger)).status_code == 403
    assert (await client.post(f"/api/customer/orders/{order['id']}/cancel", headers=stranger)).status_code == 403
    assert (await client.get(f"/api/customer/orders/{order['id']}/invoice-pdf", headers=stranger)).status_code == 403
    assert (await client.get("/api/customer/orders", headers=stranger)).json() == []


async def test_customer_cancels_pending_order(client, customer_headers, make_product):
    product = make_product(quantity=5)
    await _add(client, customer_headers, product, 2)
    order = (await client.post("/api/customer/orders/checkout", json={"payment_method": "bank_transfer"},
                               headers=customer_headers)).json()

    response = await client.post(f"/api/customer/orders/{order['id']}/cancel", headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["pay_status"] == "canceled"
    assert response.json()["bill"]["pay_status"] == "cancelled"

    again = await client.post(f"/api/customer/orders/{order['id']}/cancel", headers=customer_headers)
    assert again.json()["code"] == "order_already_canceled"


async def test_invoice_pdf(client, customer_headers, make_product):
    await _add(client, customer_headers, make_product("Notebook", price="3.20"), 3)
    order = (await client.post("/api/customer/orders/checkout", json={}, headers=customer_headers)).json()

    response = await client.get(f"/api/customer/orders/{order['id']}/invoice-pdf", headers=customer_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


async def test_staff_order_flow(client, staff_headers, customer, make_product):
    product = make_product(price="8.00", quantity=10)

    tampered = await client.post("/api/order", json={
        "customer_id": customer.id,
        "items": [{"product_id": product.id, "quantity": 2, "price": "1.00"}],
    }, headers=staff_headers)
    assert tampered.status_code == 409
    assert tampered.json()["code"] == "price_mismatch"

    created = await client.post("/api/order", json={
        "customer_id": customer.id,
        "items": [{"product_id": product.id, "quantity": 2, "price": "8.00"}],
    }, headers=staff_headers)
    assert created.status_code == 201
    order = created.json()
    assert order["order_type"] == "offline"
    assert order["bill"] is None

    paid = await client.post(f"/api/order/{order['id']}/payments",
                             json={"amount": "16.00", "payment_method": "card"}, headers=staff_headers)
    assert paid.json()["pay_status"] == "paid"
    assert paid.json()["bill"]["pay_status"] == "paid"

    listing = await client.get("/api/order", params={"pay_status": "paid"}, headers=staff_headers)
    assert [o["id"] for o in listing.json()] == [order["id"]]

    canceled = await client.put(f"/api/order/{order['id']}/cancel", headers=staff_headers)
    assert canceled.json()["pay_status"] == "canceled"

    inventory = await client.get(f"/api/inventory/product/{product.id}", headers=staff_headers)
    assert inventory.json()["quantity"] == 10


async def test_staff_order_requires_lines(client, staff_headers, customer):
    response = await client.post("/api/order", json={"customer_id": customer.id, "items": []},
                                 headers=staff_headers)

    assert response.status_code == 422


async def test_vnpay_round_trip(client, customer_headers, make_product):
    await _add(client, customer_headers, make_product(price="20.00"), 1)
    order = (await client.post("/api/customer/orders/checkout", json={"payment_method": "card"},
                               headers=customer_headers)).json()

    created = await client.post("/api/customer/vnpay/create-payment", json={"order_id": order["id"]},
                                headers=customer_headers)
    assert created.json()["success"] is True
    sent = dict(parse_qsl(urlsplit(created.json()["payment_url"]).query))
    assert sent["vnp_Amount"] == "2000"

    params = {
        "vnp_TxnRef": str(order["id"]),
        "vnp_Amount": sent["vnp_Amount"],
        "vnp_ResponseCode": "00",
        "vnp_TransactionStatus": "00",
        "vnp_TransactionNo": "987654",
    }
    params["vnp_SecureHash"] = sign(params, settings.VNPAY_HASH_SECRET)

    callback = await client.get("/api/customer/vnpay/callback", params=params)
    assert callback.status_code == 302
    assert callback.headers["location"].startswith(f"{settings.FRONTEND_URL}/payment-result?success=true")

    refreshed = await client.get(f"/api/customer/orders/{order['id']}", headers=customer_headers)
    assert refreshed.json()["pay_status"] == "paid"

    again = await client.post("/api/customer/vnpay/create-payment", json={"order_id": order["id"]},
                              headers=customer_headers)
    assert again.status_code == 400
    assert again.json()["code"] == "order_not_payable"
