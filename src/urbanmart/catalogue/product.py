"""Product aggregate (CQRS).

A product belongs to one merchant store. ``stock_quantity`` is the live
inventory count: checkout decrements it inside the same Unit of Work that
creates the order, and it never drops below zero.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from urbanmart.domain import urbanmart


@urbanmart.aggregate
class Product:
    store_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0)
    min_stock_level = Integer(default=5, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

    @classmethod
    def create(cls, store_id, merchant_id, name, price, stock_quantity=0, description=None, min_stock_level=5):
        from urbanmart.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            store_id=store_id,
            merchant_id=merchant_id,
            name=name,
            description=description,
            price=price,
            stock_quantity=stock_quantity,
            min_stock_level=min_stock_level,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                store_id=store_id,
                merchant_id=merchant_id,
                name=name,
                price=price,
            )
        )
        return product

    @property
    def is_low_stock(self):
        return self.stock_quantity <= self.min_stock_level

    def has_stock_for(self, quantity):
        return quantity <= self.stock_quantity

    def update_details(self, name=None, description=None, price=None, min_stock_level=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if min_stock_level is not None:
            self.min_stock_level = min_stock_level
        self.updated_at = datetime.now(UTC)

    def restock(self, quantity):
        from urbanmart.catalogue.events import StockAdjusted

        if quantity < 1:
            raise ValidationError({"quantity": ["Restock quantity must be at least 1"]})
        self.stock_quantity += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(StockAdjusted(product_id=self.id, delta=quantity, stock_quantity=self.stock_quantity))

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock, refusing to oversell."""
        from urbanmart.catalogue.events import StockAdjusted

        if quantity > self.stock_quantity:
            raise ValidationError({"stock_quantity": [f"Insufficient stock for {self.name}"]})
        self.stock_quantity -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(StockAdjusted(product_id=self.id, delta=-quantity, stock_quantity=self.stock_quantity))

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Product is already active"]})
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    def to_dict(self):
        return {
            "id": str(self.id),
            "store_id": str(self.store_id),
            "merchant_id": str(self.merchant_id),
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock_quantity": self.stock_quantity,
            "min_stock_level": self.min_stock_level,
            "is_active": self.is_active,
        }
