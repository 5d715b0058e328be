"""Integration tests for the courier and dispatch endpoints via TestClient."""


def _assign(client, market, order_id, headers, courier_id=None):
    return client.post(
        "/api/delivery/assign",
        json={"order_id": order_id, "delivery_user_id": courier_id or market.courier.id, "delivery_fee": 3.5},
        headers=headers,
    )


class TestAssignApi:
    def test_merchant_assigns(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = _assign(client, marketplace, order_id, auth_header(marketplace.merchant))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "ASSIGNED"
        assert data["delivery_fee"] == 3.5

    def test_second_assignment_conflicts(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        headers = auth_header(marketplace.merchant)
        _assign(client, marketplace, order_id, headers)

        response = _assign(client, marketplace, order_id, headers)
        assert response.status_code == 409

    def test_courier_cannot_assign(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        response = _assign(client, marketplace, order_id, auth_header(marketplace.courier))
        assert response.status_code == 403

    def test_available_couriers(self, client, marketplace, auth_header):
        response = client.get("/api/delivery/available", headers=auth_header(marketplace.merchant))
        assert [p["id"] for p in response.json()["data"]] == [str(marketplace.courier.id)]


class TestCourierApi:
    def test_pickup_and_stats(self, client, marketplace, place_order, auth_header):
        order_id = place_order(marketplace)
        assignment_id = _assign(client, marketplace, order_id, auth_header(marketplace.merchant)).json()["data"]["id"]
        headers = auth_header(marketplace.courier)

        response = client.patch(
            f"/api/delivery/orders/{assignment_id}/status",
            json={"status": "IN_TRANSIT"},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "IN_TRANSIT"

        orders = client.get("/api/delivery/orders", headers=headers).json()["data"]
        assert orders[0]["order"]["status"] == "SHIPPED"

        stats = client.get("/api/delivery/stats", headers=headers).json()["data"]
        assert stats == {"total": 1, "in_transit": 1, "completed": 0, "pending": 0}

    def test_other_courier_forbidden(self, client, marketplace, place_order, auth_header, create_user):
        order_id = place_order(marketplace)
        assignment_id = _assign(client, marketplace, order_id, auth_header(marketplace.merchant)).json()["data"]["id"]
        other = create_user(role="DELIVERY")

        response = client.patch(
            f"/api/delivery/orders/{assignment_id}/status",
            json={"status": "IN_TRANSIT"},
            headers=auth_header(other),
        )
        assert response.status_code == 403

    def test_reassign_after_pickup_rejected(self, client, marketplace, place_order, auth_header, create_user):
        order_id = place_order(marketplace)
        merchant_headers = auth_header(marketplace.merchant)
        assignment_id = _assign(client, marketplace, order_id, merchant_headers).json()["data"]["id"]
        client.patch(
            f"/api/delivery/orders/{assignment_id}/status",
            json={"status": "IN_TRANSIT"},
            headers=auth_header(marketplace.courier),
        )
        backup = create_user(role="DELIVERY")

        response = client.patch(
            f"/api/delivery/assignments/{assignment_id}/reassign",
            json={"delivery_user_id": backup.id},
            headers=merchant_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot re-assign delivery after it has been picked up or completed"
