"""UrbanMart marketplace domain.

A single bounded context holding users, merchant stores and products, carts,
orders, delivery assignments and delivery organizations. Keeping them in one
domain lets checkout and the delivery workflows commit every write they make
in one Unit of Work.
"""

import structlog
from protean.domain import Domain

urbanmart = Domain(name="urbanmart")

logger = structlog.get_logger(__name__)
