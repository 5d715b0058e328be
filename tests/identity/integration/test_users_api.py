"""Integration tests for the profile and address book endpoints."""


class TestAddressBookApi:
    def test_add_list_remove(self, client, create_user, auth_header):
        headers = auth_header(create_user())
        response = client.post(
            "/api/users/me/addresses",
            json={"address1": "5 Elm Row", "city": "Shelbyville", "postal_code": "62565", "country": "US"},
            headers=headers,
        )
        assert response.status_code == 201
        address_id = response.json()["data"]["id"]

        listing = client.get("/api/users/me/addresses", headers=headers).json()["data"]
        assert listing[0]["is_default"] is True
        assert listing[0]["label"] == "Home"

        response = client.delete(f"/api/users/me/addresses/{address_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_remove_unknown_address(self, client, create_user, auth_header):
        response = client.delete("/api/users/me/addresses/missing", headers=auth_header(create_user()))
        assert response.status_code == 400
        assert response.json()["error"] == "Address not found"
