#!/usr/bin/env python3
"""
Maintenance commands: schema creation, lookup seeding, data fixes and account bootstrap.
"""

import asyncio
import sys
import argparse
import getpass
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from rentals_api.config import settings
from rentals_api.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from rentals_api.services.maintenance import MaintenanceService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MaintenanceManager:
    """Runs each command in its own session and closes the engine afterwards."""

    async def create_tables(self) -> None:
        await create_tables()

    async def drop_tables(self) -> None:
        logger.warning(f"Dropping every table of the {settings.environment} database")
        await drop_tables()

    async def seed_amenities(self) -> None:
        async with AsyncSessionLocal() as session:
            created = await MaintenanceService(session).seed_amenities()
        logger.info(f"Amenities seeded: {created} created")

    async def seed_classes(self, include_banners: bool = True) -> None:
        async with AsyncSessionLocal() as session:
            created = await MaintenanceService(session).seed_classes(include_banners=include_banners)
        logger.info(f"Property classes seeded: {created} created")

    async def remove_banner_classes(self) -> None:
        async with AsyncSessionLocal() as session:
            removed = await MaintenanceService(session).remove_banner_classes()
        logger.info(f"Banner classes removed: {removed}")

    async def move_amenity(self, name: str, category: str) -> None:
        async with AsyncSessionLocal() as session:
            await MaintenanceService(session).move_amenity(name, category)

    async def create_admin(self, name: str, email: str, password: str) -> None:
        async with AsyncSessionLocal() as session:
            user = await MaintenanceService(session).create_admin(name, email, password)
        logger.info(f"Administrator created: {user.email} (ID: {user.id})")

    async def clear_owners(self) -> None:
        async with AsyncSessionLocal() as session:
            await MaintenanceService(session).clear_owners()

    async def show_stats(self) -> None:
        async with AsyncSessionLocal() as session:
            counts = await MaintenanceService(session).table_counts()
        for table_name, count in counts.items():
            print(f"{table_name:<32} {count}")

    async def run(self, coro) -> None:
        try:
            await coro
        finally:
            await close_db_connection()


def main():
    """Main CLI interface for maintenance commands."""
    parser = argparse.ArgumentParser(description="Rentals API maintenance commands")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create every table")

    drop_parser = subparsers.add_parser("drop-tables", help="Drop every table (development only)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping the tables")

    subparsers.add_parser("seed-amenities", help="Insert the default amenities")

    classes_parser = subparsers.add_parser("seed-classes", help="Insert the default property classes")
    classes_parser.add_argument("--no-banners", action="store_true", help="Skip the banner classes")

    subparsers.add_parser("remove-banner-classes", help="Delete the banner classes and their links")

    move_parser = subparsers.add_parser("move-amenity", help="Move an amenity to another category")
    move_parser.add_argument("name", help="Amenity name")
    move_parser.add_argument("category", help="Target category")

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--name", required=True, help="Full name")
    admin_parser.add_argument("--email", required=True, help="Login email")
    admin_parser.add_argument("--password", help="Password (prompted when omitted)")

    clear_parser = subparsers.add_parser("clear-owners", help="Delete every owner account")
    clear_parser.add_argument("--confirm", action="store_true", help="Confirm deleting the owners")

    subparsers.add_parser("stats", help="Show the row count of every table")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = MaintenanceManager()

    try:
        if args.command == "create-tables":
            asyncio.run(manager.run(manager.create_tables()))

        elif args.command == "drop-tables":
            if not args.confirm:
                print("Dropping tables requires --confirm flag")
                return
            asyncio.run(manager.run(manager.drop_tables()))

        elif args.command == "seed-amenities":
            asyncio.run(manager.run(manager.seed_amenities()))

        elif args.command == "seed-classes":
            asyncio.run(manager.run(manager.seed_classes(include_banners=not args.no_banners)))

        elif args.command == "remove-banner-classes":
            asyncio.run(manager.run(manager.remove_banner_classes()))

        elif args.command == "move-amenity":
            asyncio.run(manager.run(manager.move_amenity(args.name, args.category)))

        elif args.command == "create-admin":
            password = args.password or getpass.getpass("Password: ")
            asyncio.run(manager.run(manager.create_admin(args.name, args.email, password)))

        elif args.command == "clear-owners":
            if not args.confirm:
                print("Deleting every owner requires --confirm flag")
                return
            asyncio.run(manager.run(manager.clear_owners()))

        elif args.command == "stats":
            asyncio.run(manager.run(manager.show_stats()))

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
