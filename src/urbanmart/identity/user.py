"""User aggregate root with its Address entities.

Every actor on the marketplace is a User: customers, merchants, delivery
personnel and administrators are told apart by ``role``. Users are never
deleted; deactivation flips ``is_active`` and blocks authentication.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from urbanmart.domain import urbanmart


class UserRole(Enum):
    ADMIN = "ADMIN"
    MERCHANT = "MERCHANT"
    CUSTOMER = "CUSTOMER"
    DELIVERY = "DELIVERY"


@urbanmart.entity(part_of="User")
class Address:
    """A postal address in a user's address book.

    An address belongs to exactly one user; checkout only accepts addresses
    found in the ordering user's own list.
    """

    label: String(max_length=50, default="Home")
    address1: String(required=True, max_length=255)
    address2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    is_default: Boolean(default=False)

    def to_dict(self):
        return {
            "id": str(self.id),
            "label": self.label,
            "address1": self.address1,
            "address2": self.address2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "is_default": self.is_default,
        }


@urbanmart.aggregate
class User:
    """A person with an account on the marketplace."""

    email: String(required=True, max_length=254, unique=True)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    phone: String(max_length=20)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    is_active: Boolean(default=True)
    delivery_org_id: Identifier()
    addresses: HasMany(Address)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def at_most_one_default_address(self):
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) > 1:
            raise ValidationError({"addresses": ["Only one address can be marked as default"]})

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def has_role(self, *roles):
        return self.role in {r.value if isinstance(r, UserRole) else r for r in roles}

    @classmethod
    def register(cls, email, first_name, last_name, role=UserRole.CUSTOMER.value, phone=None):
        from urbanmart.identity.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def find_address(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def owns_address(self, address_id):
        return self.find_address(address_id) is not None

    def add_address(
        self,
        address1,
        city,
        postal_code,
        country,
        label="Home",
        address2=None,
        state=None,
        is_default=False,
    ):
        from urbanmart.identity.events import AddressAdded

        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                label=label,
                address1=address1,
                address2=address2,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country,
                is_default=is_default,
            )
            self.add_addresses(address)

        self.updated_at = datetime.now(UTC)
        self.raise_(AddressAdded(user_id=self.id, address_id=address.id, city=city, country=country))
        return address

    def remove_address(self, address_id):
        from urbanmart.identity.events import AddressRemoved

        address = self.find_address(address_id)
        if address is None:
            raise ValidationError({"addresses": ["Address not found"]})

        was_default = address.is_default
        with atomic_change(self):
            self.remove_addresses(address)
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.updated_at = datetime.now(UTC)
        self.raise_(AddressRemoved(user_id=self.id, address_id=address_id))

    # -------------------------------------------------------------------
    # Account administration
    # -------------------------------------------------------------------
    def change_role(self, role):
        from urbanmart.identity.events import UserRoleChanged

        previous = self.role
        if previous == role:
            return
        self.role = role
        if role != UserRole.DELIVERY.value:
            self.delivery_org_id = None
        self.updated_at = datetime.now(UTC)
        self.raise_(UserRoleChanged(user_id=self.id, previous_role=previous, new_role=role))

    def deactivate(self):
        from urbanmart.identity.events import UserDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["User is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(UserDeactivated(user_id=self.id))

    def reactivate(self):
        from urbanmart.identity.events import UserReactivated

        if self.is_active:
            raise ValidationError({"is_active": ["User is already active"]})
        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(UserReactivated(user_id=self.id))

    # -------------------------------------------------------------------
    # Delivery organization membership
    # -------------------------------------------------------------------
    def join_organization(self, organization_id):
        from urbanmart.identity.events import JoinedDeliveryOrganization

        if self.role != UserRole.DELIVERY.value:
            raise ValidationError({"role": ["Only delivery personnel can join an organization"]})
        self.delivery_org_id = organization_id
        self.updated_at = datetime.now(UTC)
        self.raise_(JoinedDeliveryOrganization(user_id=self.id, organization_id=organization_id))

    def to_dict(self):
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "role": self.role,
            "is_active": self.is_active,
            "delivery_org_id": str(self.delivery_org_id) if self.delivery_org_id else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
