"""DeliveryOrganization aggregate: a courier company owned by one delivery user."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String, Text

from urbanmart.domain import urbanmart


@urbanmart.aggregate
class DeliveryOrganization:
    name = String(required=True, max_length=200)
    description = Text()
    logo = String(max_length=500)
    owner_id = Identifier(required=True, unique=True)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, owner_id, name, description=None, logo=None):
        from urbanmart.delivery.events import DeliveryOrganizationCreated

        now = datetime.now(UTC)
        org = cls(
            owner_id=owner_id,
            name=name,
            description=description,
            logo=logo,
            created_at=now,
            updated_at=now,
        )
        org.raise_(DeliveryOrganizationCreated(organization_id=org.id, owner_id=owner_id, name=name))
        return org

    def is_owned_by(self, user_id):
        return str(self.owner_id) == str(user_id)

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "logo": self.logo,
            "owner_id": str(self.owner_id),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
