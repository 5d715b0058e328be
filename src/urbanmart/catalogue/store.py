"""MerchantStore aggregate (CQRS): one storefront per merchant."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String, Text

from urbanmart.domain import urbanmart


@urbanmart.aggregate
class MerchantStore:
    merchant_id = Identifier(required=True, unique=True)
    name = String(required=True, max_length=200)
    description = Text()
    is_active = Boolean(default=True)
    is_verified = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, merchant_id, name, description=None):
        from urbanmart.catalogue.events import StoreOpened

        now = datetime.now(UTC)
        store = cls(
            merchant_id=merchant_id,
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        store.raise_(StoreOpened(store_id=store.id, merchant_id=merchant_id, name=name))
        return store

    def update_details(self, name=None, description=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)

    def set_verified(self, is_verified):
        from urbanmart.catalogue.events import StoreVerificationChanged

        self.is_verified = is_verified
        self.updated_at = datetime.now(UTC)
        self.raise_(StoreVerificationChanged(store_id=self.id, is_verified=is_verified))

    def to_dict(self):
        return {
            "id": str(self.id),
            "merchant_id": str(self.merchant_id),
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
            "is_verified": self.is_verified,
        }
