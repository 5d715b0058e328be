"""Integration tests for the order endpoints via TestClient."""


def _checkout(client, market, headers, address_id=None):
    address_id = address_id or market.address_id
    return client.post(
        "/api/orders",
        json={"shipping_address_id": address_id, "billing_address_id": address_id},
        headers=headers,
    )


class TestPlaceOrderApi:
    def test_checkout(self, client, marketplace, fill_cart, auth_header):
        fill_cart(marketplace.customer.id, (marketplace.product_a, 1), (marketplace.product_b, 1))

        response = _checkout(client, marketplace, auth_header(marketplace.customer))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "PENDING"
        assert data["subtotal"] == 55.0
        assert data["tax"] == 4.4
        assert data["shipping"] == 0.0
        assert data["total"] == 59.4
        assert len(data["items"]) == 2

    def test_empty_cart(self, client, marketplace, auth_header):
        response = _checkout(client, marketplace, auth_header(marketplace.customer))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Cart is empty"}

    def test_invalid_address(self, client, marketplace, fill_cart, auth_header):
        fill_cart(marketplace.customer.id, (marketplace.product_a, 1))
        response = _checkout(client, marketplace, auth_header(marketplace.customer), address_id="nowhere")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid address"

    def test_courier_cannot_check_out(self, client, marketplace, auth_header):
        response = _checkout(client, marketplace, auth_header(marketplace.courier))
        assert response.status_code == 403


class TestOrderReadsApi:
    def test_list_and_detail(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        headers = auth_header(marketplace.customer)

        listing = client.get("/api/orders", headers=headers).json()["data"]
        assert [o["id"] for o in listing] == [order_id]

        detail = client.get(f"/api/orders/{order_id}", headers=headers).json()["data"]
        assert detail["status_history"][0]["notes"] == "Order placed"

    def test_unknown_status_filter(self, client, marketplace, auth_header):
        response = client.get("/api/orders?status=LOST", headers=auth_header(marketplace.customer))
        assert response.status_code == 400

    def test_admin_lists_all(self, client, marketplace, place_order, auth_header):
        place_order(marketplace)
        response = client.get("/api/orders/admin/all", headers=auth_header(marketplace.admin))
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1

    def test_customer_cannot_list_all(self, client, marketplace, auth_header):
        response = client.get("/api/orders/admin/all", headers=auth_header(marketplace.customer))
        assert response.status_code == 403
        assert response.json()["error"] == "Insufficient permissions"


class TestOrderStatusApi:
    def test_admin_updates_status(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "CONFIRMED"},
            headers=auth_header(marketplace.admin),
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "CONFIRMED"

    def test_illegal_transition_is_conflict(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "DELIVERED"},
            headers=auth_header(marketplace.admin),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "Cannot transition order from PENDING to DELIVERED"

    def test_merchant_updates_own_order(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = client.patch(
            f"/api/merchant/orders/{order_id}/status",
            json={"status": "PROCESSING"},
            headers=auth_header(marketplace.merchant),
        )
        assert response.status_code == 200

    def test_history_newest_first(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "CONFIRMED"},
            headers=auth_header(marketplace.admin),
        )

        response = client.get(f"/api/orders/{order_id}/status-history", headers=auth_header(marketplace.customer))
        assert [row["status"] for row in response.json()["data"]] == ["CONFIRMED", "PENDING"]

    def test_history_hidden_from_other_users(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = client.get(f"/api/orders/{order_id}/status-history", headers=auth_header(marketplace.merchant))
        assert response.status_code == 404
