from models.cart_items import CartItem


async def test_cart_requires_auth(client):
    response = await client.get("/api/cart")

    assert response.status_code == 401


async def test_empty_cart(client, customer_headers):
    response = await client.get("/api/cart", headers=customer_headers)

    assert response.status_code == 200
    assert response.json() == []


async def test_add_to_cart(client, walkman, customer, customer_headers):
    response = await client.post("/api/cart", json={"productId": walkman.id, "quantity": 2},
                                 headers=customer_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["productId"] == walkman.id
    assert data["userId"] == customer.id
    assert data["quantity"] == 2


async def test_add_same_product_twice_merges(client, session, walkman, customer_headers):
    """Adding quantities 1 then 2 leaves one line with quantity 3."""
    await client.post("/api/cart", json={"productId": walkman.id, "quantity": 1}, headers=customer_headers)
    response = await client.post("/api/cart", json={"productId": walkman.id, "quantity": 2},
                                 headers=customer_headers)

    assert response.json()["quantity"] == 3

    cart = (await client.get("/api/cart", headers=customer_headers)).json()
    assert len(cart) == 1
    assert cart[0]["quantity"] == 3
    assert cart[0]["product"]["name"] == "Walkman"
    assert session.query(CartItem).count() == 1


async def test_add_defaults_to_quantity_one(client, walkman, customer_headers):
    response = await client.post("/api/cart", json={"productId": walkman.id}, headers=customer_headers)

    assert response.json()["quantity"] == 1


async def test_add_unknown_product(client, session, customer_headers):
    response = await client.post("/api/cart", json={"productId": 999, "quantity": 1}, headers=customer_headers)

    assert response.status_code == 404
    assert session.query(CartItem).count() == 0


async def test_add_non_numeric_quantity(client, walkman, customer_headers):
    response = await client.post("/api/cart", json={"productId": walkman.id, "quantity": "many"},
                                 headers=customer_headers)

    assert response.status_code == 400


async def test_add_huge_quantity(client, session, walkman, customer_headers):
    response = await client.post("/api/cart", json={"productId": walkman.id, "quantity": 10**20},
                                 headers=customer_headers)

    assert response.status_code == 400
    assert session.query(CartItem).count() == 0


async def test_merge_past_line_limit(client, session, walkman, customer_headers):
    """Two adds that together pass the per-line cap leave the first add intact."""
    await client.post("/api/cart", json={"productId": walkman.id, "quantity": 9_000}, headers=customer_headers)
    response = await client.post("/api/cart", json={"productId": walkman.id, "quantity": 2_000},
                                 headers=customer_headers)

    assert response.status_code == 400
    cart = (await client.get("/api/cart", headers=customer_headers)).json()
    assert cart[0]["quantity"] == 9_000


async def test_update_quantity(client, walkman, customer_headers):
    await client.post("/api/cart", json={"productId": walkman.id, "quantity": 5}, headers=customer_headers)

    response = await client.put(f"/api/cart/{walkman.id}", json={"quantity": 2}, headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["quantity"] == 2


async def test_update_to_zero_deletes_line(client, walkman, customer_headers):
    """Setting quantity 0 removes the line from subsequent reads."""
    await client.post("/api/cart", json={"productId": walkman.id, "quantity": 2}, headers=customer_headers)

    response = await client.put(f"/api/cart/{walkman.id}", json={"quantity": 0}, headers=customer_headers)

    assert response.status_code == 204
    cart = (await client.get("/api/cart", headers=customer_headers)).json()
    assert cart == []


async def test_update_negative_quantity(client, walkman, customer_headers):
    await client.post("/api/cart", json={"productId": walkman.id, "quantity": 2}, headers=customer_headers)

    response = await client.put(f"/api/cart/{walkman.id}", json={"quantity": -1}, headers=customer_headers)

    assert response.status_code == 400


async def test_update_missing_line(client, walkman, customer_headers):
    response = await client.put(f"/api/cart/{walkman.id}", json={"quantity": 3}, headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Cart item not found"


async def test_remove_line(client, walkman, customer_headers):
    await client.post("/api/cart", json={"productId": walkman.id}, headers=customer_headers)

    response = await client.delete(f"/api/cart/{walkman.id}", headers=customer_headers)
    assert response.status_code == 204

    response = await client.delete(f"/api/cart/{walkman.id}", headers=customer_headers)
    assert response.status_code == 404


async def test_clear_cart(client, walkman, cassette, customer_headers):
    await client.post("/api/cart", json={"productId": walkman.id}, headers=customer_headers)
    await client.post("/api/cart", json={"productId": cassette.id}, headers=customer_headers)

    response = await client.delete("/api/cart", headers=customer_headers)

    assert response.status_code == 204
    assert (await client.get("/api/cart", headers=customer_headers)).json() == []


async def test_carts_are_private(client, walkman, other_customer, customer_headers, headers_for):
    await client.post("/api/cart", json={"productId": walkman.id}, headers=customer_headers)

    response = await client.get("/api/cart", headers=headers_for(other_customer))

    assert response.json() == []
