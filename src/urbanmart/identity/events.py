"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from urbanmart.domain import urbanmart


@urbanmart.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@urbanmart.event(part_of="User")
class AddressAdded:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String(required=True)
    country: String(required=True)


@urbanmart.event(part_of="User")
class AddressRemoved:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@urbanmart.event(part_of="User")
class UserRoleChanged:
    """An administrator moved a user to a different role."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)


@urbanmart.event(part_of="User")
class UserDeactivated:
    __version__ = 1

    user_id: Identifier(required=True)


@urbanmart.event(part_of="User")
class UserReactivated:
    __version__ = 1

    user_id: Identifier(required=True)


@urbanmart.event(part_of="User")
class JoinedDeliveryOrganization:
    """A delivery person became a member of a delivery organization."""

    __version__ = 1

    user_id: Identifier(required=True)
    organization_id: Identifier(required=True)
