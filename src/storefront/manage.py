"""Storefront database management CLI.

Usage:
    python -m storefront.manage setup-db   # Create all tables
    python -m storefront.manage drop-db    # Drop all tables
    python -m storefront.manage seed       # Default categories and admin account
"""

import argparse
import sys


def _service():
    from storefront.domain import storefront
    from storefront.utils.db import DatabaseService

    print("Initializing storefront domain...")
    storefront.init()
    return DatabaseService(storefront)


def setup_database():
    service = _service()
    print("Creating database schema...")
    service.setup_schema()
    print("Done.")


def drop_database():
    service = _service()
    print("Dropping database schema...")
    service.drop_schema()
    print("Done.")


def seed_database():
    service = _service()
    service.connect()
    try:
        print("Seeding reference data...")
        created = service.seed()
        print(f"  {created['categories']} categories created.")
        print("  Admin account created." if created["admin"] else "  Admin account already present.")
    finally:
        service.close()
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Insert default categories and the admin account")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
