"""Merchant catalogue management: store upsert, store verification and product commands.

Every product command is scoped to the acting merchant: a product that does
not belong to the merchant's store is reported as not found.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from urbanmart.catalogue.product import Product
from urbanmart.catalogue.store import MerchantStore
from urbanmart.domain import logger, urbanmart
from urbanmart.utils.lookup import find_one, get_or_raise


@urbanmart.command(part_of="MerchantStore")
class OpenStore:
    """Create the merchant's store, or update it if it already exists."""

    merchant_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()


@urbanmart.command(part_of="MerchantStore")
class VerifyStore:
    """An administrator marks a store as verified, or withdraws the mark."""

    store_id = Identifier(required=True)
    is_verified = Boolean(required=True)


@urbanmart.command(part_of="Product")
class CreateProduct:
    merchant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    min_stock_level = Integer(default=5, min_value=0)


@urbanmart.command(part_of="Product")
class UpdateProduct:
    merchant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float(min_value=0.0)
    min_stock_level = Integer(min_value=0)
    restock_quantity = Integer(min_value=1)
    is_active = Boolean()


@urbanmart.command(part_of="Product")
class RestockProduct:
    merchant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@urbanmart.command(part_of="Product")
class DeactivateProduct:
    merchant_id = Identifier(required=True)
    product_id = Identifier(required=True)


def store_for_merchant(merchant_id):
    store = find_one(MerchantStore, merchant_id=str(merchant_id))
    if store is None:
        raise ObjectNotFoundError({"store": ["Store not found"]})
    return store


def _merchant_product(merchant_id, product_id):
    product = get_or_raise(Product, product_id, "Product not found")
    if str(product.merchant_id) != str(merchant_id):
        raise ObjectNotFoundError({"product": ["Product not found"]})
    return product


@urbanmart.command_handler(part_of=MerchantStore)
class MerchantStoreHandler:
    @handle(OpenStore)
    def open_store(self, command):
        repo = current_domain.repository_for(MerchantStore)
        store = find_one(MerchantStore, merchant_id=str(command.merchant_id))
        if store is None:
            store = MerchantStore.open(
                merchant_id=command.merchant_id,
                name=command.name,
                description=command.description,
            )
            logger.info("store_opened", store_id=str(store.id), merchant_id=str(command.merchant_id))
        else:
            store.update_details(name=command.name, description=command.description)
        repo.add(store)
        return str(store.id)

    @handle(VerifyStore)
    def verify_store(self, command):
        store = get_or_raise(MerchantStore, command.store_id, "Store not found")
        store.set_verified(command.is_verified)
        current_domain.repository_for(MerchantStore).add(store)
        logger.info("store_verification_changed", store_id=str(store.id), is_verified=store.is_verified)


@urbanmart.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        store = store_for_merchant(command.merchant_id)
        if not store.is_active:
            raise ValidationError({"store": ["Store is not active"]})

        product = Product.create(
            store_id=store.id,
            merchant_id=command.merchant_id,
            name=command.name,
            description=command.description,
            price=command.price,
            stock_quantity=command.stock_quantity,
            min_stock_level=command.min_stock_level,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = _merchant_product(command.merchant_id, command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            min_stock_level=command.min_stock_level,
        )
        if command.restock_quantity:
            product.restock(command.restock_quantity)
        if command.is_active is not None and command.is_active != product.is_active:
            if command.is_active:
                product.activate()
            else:
                product.deactivate()
        current_domain.repository_for(Product).add(product)

    @handle(RestockProduct)
    def restock_product(self, command):
        product = _merchant_product(command.merchant_id, command.product_id)
        product.restock(command.quantity)
        current_domain.repository_for(Product).add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        product = _merchant_product(command.merchant_id, command.product_id)
        product.deactivate()
        current_domain.repository_for(Product).add(product)
