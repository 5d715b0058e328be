"""UrbanMart management CLI.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db                        # Drop all tables
    python src/manage.py seed                           # Load demo users, a store and products
    python src/manage.py issue-token --email a@b.com    # Print a bearer token for a user
"""

import argparse
import sys


def _domain():
    from urbanmart.domain import urbanmart

    urbanmart.init()
    return urbanmart


def setup_database():
    from urbanmart.utils.db import setup_db

    domain = _domain()
    print("Creating urbanmart database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from urbanmart.utils.db import drop_db

    domain = _domain()
    print("Dropping urbanmart database schema...")
    drop_db(domain)
    print("Done.")


_SEED_USERS = [
    ("admin@urbanmart.test", "Ada", "Admin", "ADMIN"),
    ("merchant@urbanmart.test", "Maya", "Merchant", "MERCHANT"),
    ("customer@urbanmart.test", "Cam", "Customer", "CUSTOMER"),
    ("courier@urbanmart.test", "Dev", "Courier", "DELIVERY"),
]

_SEED_PRODUCTS = [
    ("Cold Brew Concentrate", 30.0, 25),
    ("Ceramic Pour-Over Set", 25.0, 12),
    ("Oat Milk 1L", 3.5, 80),
]


def seed():
    from protean.utils.globals import current_domain

    from urbanmart.catalogue.management import CreateProduct, OpenStore
    from urbanmart.catalogue.product import Product
    from urbanmart.identity.addresses import AddAddress
    from urbanmart.identity.registration import RegisterUser
    from urbanmart.identity.user import User
    from urbanmart.utils.lookup import find_one

    domain = _domain()
    with domain.domain_context():
        ids = {}
        for email, first_name, last_name, role in _SEED_USERS:
            existing = find_one(User, email=email)
            if existing is not None:
                ids[role] = str(existing.id)
                continue
            ids[role] = current_domain.process(
                RegisterUser(email=email, first_name=first_name, last_name=last_name, role=role),
                asynchronous=False,
            )
            print(f"  {role.lower()}: {email}")

        customer = current_domain.repository_for(User).get(ids["CUSTOMER"])
        if not customer.addresses:
            current_domain.process(
                AddAddress(
                    user_id=ids["CUSTOMER"],
                    address1="12 Market Street",
                    city="Springfield",
                    state="IL",
                    postal_code="62701",
                    country="US",
                ),
                asynchronous=False,
            )
        current_domain.process(
            OpenStore(merchant_id=ids["MERCHANT"], name="Maya's Corner Shop", description="Coffee and kitchenware"),
            asynchronous=False,
        )
        if find_one(Product, merchant_id=ids["MERCHANT"]) is not None:
            print("Catalogue already seeded.")
            return
        for name, price, stock in _SEED_PRODUCTS:
            current_domain.process(
                CreateProduct(merchant_id=ids["MERCHANT"], name=name, price=price, stock_quantity=stock),
                asynchronous=False,
            )
    print("Done.")


def issue_token(email, expires_in=None):
    from urbanmart.api.auth import issue_token as _issue
    from urbanmart.identity.user import User
    from urbanmart.utils.lookup import find_one

    domain = _domain()
    with domain.domain_context():
        user = find_one(User, email=email.strip().lower())
        if user is None:
            print(f"No user with email {email}", file=sys.stderr)
            sys.exit(1)
        print(_issue(user, expires_in=expires_in))


def main():
    parser = argparse.ArgumentParser(description="UrbanMart management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load demo users, a store and products")

    token_parser = subparsers.add_parser("issue-token", help="Print a bearer token for a user")
    token_parser.add_argument("--email", required=True, help="Email of the user to sign in as")
    token_parser.add_argument("--expires-in", type=int, default=None, help="Lifetime in seconds")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed()
    elif args.command == "issue-token":
        issue_token(args.email, args.expires_in)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
