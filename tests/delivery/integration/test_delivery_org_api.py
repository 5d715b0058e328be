"""Integration tests for delivery organization endpoints via TestClient."""


def _create_org(client, headers, name="Fast Couriers"):
    return client.post("/api/delivery-org", json={"name": name}, headers=headers)


class TestOrganizationApi:
    def test_create_and_read(self, client, marketplace, auth_header):
        headers = auth_header(marketplace.courier)
        response = _create_org(client, headers)
        assert response.status_code == 201

        me = client.get("/api/delivery-org/me", headers=headers).json()["data"]
        assert me["is_owner"] is True
        assert me["organization"]["name"] == "Fast Couriers"

        listing = client.get("/api/delivery-org", headers=auth_header(marketplace.customer)).json()["data"]
        assert len(listing) == 1

    def test_second_organization_rejected(self, client, marketplace, auth_header):
        headers = auth_header(marketplace.courier)
        _create_org(client, headers)
        response = _create_org(client, headers, name="Again")
        assert response.status_code == 400
        assert response.json()["error"] == "User already owns an organization"


class TestHiringApi:
    def test_invite_and_accept(self, client, marketplace, auth_header, create_user):
        _create_org(client, auth_header(marketplace.courier))
        recruit = create_user(role="DELIVERY", email="recruit@urbanmart.test")

        response = client.post(
            "/api/delivery-org/members/invite",
            json={"email": "recruit@urbanmart.test"},
            headers=auth_header(marketplace.courier),
        )
        assert response.status_code == 201

        recruit_headers = auth_header(recruit)
        requests = client.get("/api/delivery-org/requests/hiring", headers=recruit_headers).json()["data"]
        assert requests[0]["type"] == "INVITATION"

        response = client.patch(
            f"/api/delivery-org/requests/hiring/{requests[0]['id']}",
            json={"status": "ACCEPTED"},
            headers=recruit_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Organization joined successfully"

    def test_duplicate_application(self, client, marketplace, auth_header, create_user):
        org_id = _create_org(client, auth_header(marketplace.courier)).json()["data"]["id"]
        applicant_headers = auth_header(create_user(role="DELIVERY"))

        client.post("/api/delivery-org/requests/apply", json={"organization_id": org_id}, headers=applicant_headers)
        response = client.post(
            "/api/delivery-org/requests/apply", json={"organization_id": org_id}, headers=applicant_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Application already sent"


class TestDeliveryRequestsApi:
    def test_request_accept_flow(self, client, marketplace, place_order, auth_header):
        owner_headers = auth_header(marketplace.courier)
        org_id = _create_org(client, owner_headers).json()["data"]["id"]
        order_id = place_order(marketplace)

        response = client.post(
            f"/api/merchant/orders/{order_id}/request-delivery",
            json={"organization_id": org_id},
            headers=auth_header(marketplace.merchant),
        )
        assert response.status_code == 201
        assignment_id = response.json()["data"]["id"]

        incoming = client.get("/api/delivery-org/requests/delivery", headers=owner_headers).json()["data"]
        assert [r["id"] for r in incoming] == [assignment_id]

        response = client.patch(
            f"/api/delivery-org/requests/delivery/{assignment_id}",
            json={"status": "ASSIGNED"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Request accepted"

        response = client.post(
            f"/api/delivery-org/assignments/{assignment_id}/assign",
            json={"member_id": marketplace.courier.id},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["delivery_user_id"] == str(marketplace.courier.id)

    def test_requests_need_ownership(self, client, marketplace, auth_header):
        response = client.get("/api/delivery-org/requests/delivery", headers=auth_header(marketplace.courier))
        assert response.status_code == 403
