"""Application tests for registration, addresses and account administration."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from urbanmart.identity.account import ChangeUserRole, SetUserActive
from urbanmart.identity.addresses import AddAddress, RemoveAddress
from urbanmart.identity.registration import RegisterUser
from urbanmart.identity.user import User


def _register(email="cam@urbanmart.test", role="CUSTOMER"):
    return current_domain.process(
        RegisterUser(email=email, first_name="Cam", last_name="Customer", role=role),
        asynchronous=False,
    )


class TestRegisterUser:
    def test_persists_user(self):
        user_id = _register()
        user = current_domain.repository_for(User).get(user_id)
        assert user.email == "cam@urbanmart.test"

    def test_duplicate_email_rejected(self):
        _register()
        with pytest.raises(ValidationError) as exc:
            _register(email="CAM@urbanmart.test")
        assert "User already exists with this email" in exc.value.messages["email"]


class TestAddressCommands:
    def test_add_and_remove(self):
        user_id = _register()
        address_id = current_domain.process(
            AddAddress(user_id=user_id, address1="1 Main", city="Town", postal_code="00001", country="US"),
            asynchronous=False,
        )
        user = current_domain.repository_for(User).get(user_id)
        assert user.owns_address(address_id)

        current_domain.process(RemoveAddress(user_id=user_id, address_id=address_id), asynchronous=False)
        user = current_domain.repository_for(User).get(user_id)
        assert user.addresses == []

    def test_unknown_user(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                AddAddress(user_id="nobody", address1="1 Main", city="Town", postal_code="00001", country="US"),
                asynchronous=False,
            )


class TestAccountAdministration:
    def test_change_role(self):
        user_id = _register()
        current_domain.process(ChangeUserRole(user_id=user_id, role="MERCHANT"), asynchronous=False)
        assert current_domain.repository_for(User).get(user_id).role == "MERCHANT"

    def test_deactivate(self):
        user_id = _register()
        current_domain.process(SetUserActive(user_id=user_id, is_active=False), asynchronous=False)
        assert current_domain.repository_for(User).get(user_id).is_active is False

    def test_reactivate_active_user_rejected(self):
        user_id = _register()
        with pytest.raises(ValidationError):
            current_domain.process(SetUserActive(user_id=user_id, is_active=True), asynchronous=False)
