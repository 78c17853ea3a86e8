from decimal import Decimal


async def test_add_merge_and_total(client, customer_headers, make_product):
    product = make_product(price="4.25", quantity=10)

    first = await client.post("/api/customer/cart/items", json={"product_id": product.id, "quantity": 2},
                              headers=customer_headers)
    second = await client.post("/api/customer/cart/items", json={"product_id": product.id, "quantity": 1},
                               headers=customer_headers)

    assert first.status_code == 201
    assert second.json()["quantity"] == 3
    assert Decimal(second.json()["subtotal"]) == Decimal("12.75")

    cart = await client.get("/api/customer/cart", headers=customer_headers)
    assert len(cart.json()["items"]) == 1
    assert Decimal(cart.json()["total"]) == Decimal("12.75")

    total = await client.get("/api/customer/cart/total", headers=customer_headers)
    assert Decimal(total.json()["total"]) == Decimal("12.75")


async def test_update_and_remove_item(client, customer_headers, make_product):
    product = make_product(price="2.00")
    added = await client.post("/api/customer/cart/items", json={"product_id": product.id},
                              headers=customer_headers)
    item_id = added.json()["id"]

    updated = await client.put(f"/api/customer/cart/items/{item_id}", json={"quantity": 5},
                               headers=customer_headers)
    assert Decimal(updated.json()["subtotal"]) == Decimal("10.00")

    removed = await client.delete(f"/api/customer/cart/items/{item_id}", headers=customer_headers)
    assert removed.status_code == 204

    cart = await client.get("/api/customer/cart", headers=customer_headers)
    assert cart.json()["items"] == []


async def test_zero_quantity_is_rejected(client, customer_headers, make_product):
    product = make_product()

    response = await client.post("/api/customer/cart/items", json={"product_id": product.id, "quantity": 0},
                                 headers=customer_headers)

    assert response.status_code == 422


async def test_deleted_product_cannot_be_added(client, customer_headers, make_product):
    product = make_product(is_deleted=True)

    response = await client.post("/api/customer/cart/items", json={"product_id": product.id},
                                 headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "product_unavailable"


async def test_unknown_product_is_not_found(client, customer_headers):
    response = await client.post("/api/customer/cart/items", json={"product_id": 999},
                                 headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "product_not_found"


async def test_clear_cart(client, customer_headers, make_product):
    for _ in range(2):
        await client.post("/api/customer/cart/items", json={"product_id": make_product().id},
                          headers=customer_headers)

    response = await client.delete("/api/customer/cart", headers=customer_headers)

    assert response.status_code == 204
    cart = await client.get("/api/customer/cart", headers=customer_headers)
    assert cart.json()["items"] == []


async def test_catalog_hides_deleted_products(client, make_product):
    make_product("Visible", quantity=7)
    make_product("Hidden", is_deleted=True)

    response = await client.get("/api/customer/products")

    names = [p["name"] for p in response.json()]
    assert names == ["Visible"]
    assert response.json()[0]["available_quantity"] == 7


async def test_product_count_is_cached_and_invalidated(client, staff_headers, make_product):
    make_product()
    assert (await client.get("/api/customer/products/count")).json()["count"] == 1

    # Written behind the API's back: still served from cache
    make_product()
    assert (await client.get("/api/customer/products/count")).json()["count"] == 1

    created = await client.post("/api/products", json={"name": "Tea", "price": "3.00", "initial_quantity": 5},
                                headers=staff_headers)
    assert created.status_code == 201
    assert (await client.get("/api/customer/products/count")).json()["count"] == 3

    deleted = await client.delete(f"/api/products/{created.json()['id']}", headers=staff_headers)
    assert deleted.status_code == 204
    assert (await client.get("/api/customer/products/count")).json()["count"] == 2


async def test_inventory_adjustment_and_advisory_check(client, staff_headers, make_product):
    product = make_product("Rice", quantity=2)
    gone = make_product("Discontinued", is_deleted=True)

    check = await client.post("/api/inventory/customer/validate-cart-stock", json={"items": [
        {"product_id": product.id, "quantity": 5},
        {"product_id": gone.id, "quantity": 1},
    ]})
    body = check.json()
    assert body["is_valid"] is False
    assert body["out_of_stock"][0]["available_quantity"] == 2
    assert body["deleted"][0]["product_name"] == "Discontinued"

    adjusted = await client.patch(f"/api/inventory/product/{product.id}/quantity", json={"quantity": 9},
                                  headers=staff_headers)
    assert adjusted.json()["quantity"] == 9

    check = await client.post("/api/inventory/customer/validate-cart-stock", json={"items": [
        {"product_id": product.id, "quantity": 5},
    ]})
    assert check.json()["is_valid"] is True

    listing = await client.get("/api/inventory", headers=staff_headers)
    assert {row["product_name"] for row in listing.json()} == {"Rice", "Discontinued"}
