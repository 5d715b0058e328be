"""User address book: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from urbanmart.domain import urbanmart
from urbanmart.identity.user import User
from urbanmart.utils.lookup import get_or_raise


@urbanmart.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    label: String(max_length=50)
    address1: String(required=True, max_length=255)
    address2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    is_default: Boolean(default=False)


@urbanmart.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@urbanmart.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        user = get_or_raise(User, command.user_id, "User not found")

        kwargs = {
            "address1": command.address1,
            "city": command.city,
            "postal_code": command.postal_code,
            "country": command.country,
            "address2": command.address2,
            "state": command.state,
            "is_default": command.is_default,
        }
        if command.label:
            kwargs["label"] = command.label

        address = user.add_address(**kwargs)
        current_domain.repository_for(User).add(user)
        return str(address.id)

    @handle(RemoveAddress)
    def remove_address(self, command):
        user = get_or_raise(User, command.user_id, "User not found")
        user.remove_address(command.address_id)
        current_domain.repository_for(User).add(user)
