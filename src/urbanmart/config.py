"""Application settings read from the environment.

Protean's own settings (databases, brokers, processing mode) live in
``domain.toml``; this module holds the knobs the HTTP layer and the pricing
rules need.
"""

import os
from decimal import Decimal

JWT_SECRET = os.getenv("JWT_SECRET", "urbanmart-dev-secret")
JWT_ALGORITHM = "HS256"
# Seconds; seven days by default
JWT_EXPIRES_IN = int(os.getenv("JWT_EXPIRES_IN", str(7 * 24 * 60 * 60)))

TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "50"))
FLAT_SHIPPING_FEE = Decimal(os.getenv("FLAT_SHIPPING_FEE", "9.99"))

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]


def is_production() -> bool:
    return os.environ.get("PROTEAN_ENV") == "production"
