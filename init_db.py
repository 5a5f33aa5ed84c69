#!/usr/bin/env python3
"""
Development database management for LightBnB.
Checks connectivity, creates or drops the schema and loads sample rows.
"""

import asyncio
import sys
import argparse
import logging
from datetime import date
from pathlib import Path

# Add the project directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from lightbnb.config import get_settings
from lightbnb.database import Database
from lightbnb.services.query_service import QueryService
from lightbnb.utils.query_builder import build_insert

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {"name": "Eva Stanley", "email": "sebastianguerra@ymail.com", "password": "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."},
    {"name": "Louisa Meyer", "email": "jacksonrose@hotmail.com", "password": "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."},
    {"name": "Dominic Parks", "email": "victoriablackwell@outlook.com", "password": "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."},
]

SAMPLE_PROPERTIES = [
    {
        "title": "Speed lamp",
        "description": "description",
        "thumbnail_photo_url": "https://images.pexels.com/photos/2086676/pexels-photo-2086676.jpeg?auto=compress&cs=tinysrgb&h=350",
        "cover_photo_url": "https://images.pexels.com/photos/2086676/pexels-photo-2086676.jpeg",
        "cost_per_night": 93061,
        "street": "536 Namsub Highway",
        "city": "Sotboske",
        "province": "Quebec",
        "post_code": "28142",
        "country": "Canada",
        "parking_spaces": 6,
        "number_of_bathrooms": 4,
        "number_of_bedrooms": 8,
    },
    {
        "title": "Blank corner",
        "description": "description",
        "thumbnail_photo_url": "https://images.pexels.com/photos/2121121/pexels-photo-2121121.jpeg?auto=compress&cs=tinysrgb&h=350",
        "cover_photo_url": "https://images.pexels.com/photos/2121121/pexels-photo-2121121.jpeg",
        "cost_per_night": 85234,
        "street": "651 Nami Road",
        "city": "Bohbatev",
        "province": "Alberta",
        "post_code": "83680",
        "country": "Canada",
        "parking_spaces": 0,
        "number_of_bathrooms": 5,
        "number_of_bedrooms": 6,
    },
]


class DatabaseManager:
    """Manages schema creation and sample data for development databases."""

    def __init__(self, db: Database):
        self.db = db
        self.service = QueryService(db, default_limit=settings.default_result_limit)

    async def check(self) -> bool:
        """Check connectivity and report pool counters."""
        connected = await self.db.check_connection()
        if connected:
            logger.info(f"Pool status: {self.db.pool_status()}")
        return connected

    async def create(self) -> None:
        await self.db.create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await self.db.drop_tables()

    async def seed(self) -> None:
        """Seed the database with sample users, properties, reservations and reviews."""
        logger.info("Seeding database with sample data")

        if await self.service.get_user_with_email(SAMPLE_USERS[0]["email"]):
            logger.info("Sample users already exist, skipping seed")
            return

        users = [await self.service.add_user(user) for user in SAMPLE_USERS]
        owner, guest = users[0], users[1]

        properties = []
        for property_data in SAMPLE_PROPERTIES:
            created = await self.service.add_property({**property_data, "owner_id": owner.id})
            for property_obj in created:
                logger.info(f"Added property {property_obj.title} at ${property_obj.price_per_night}/night")
            properties.extend(created)

        for rating, property_obj in zip((4, 5), properties):
            reservation = build_insert(
                "reservations",
                ("start_date", "end_date", "property_id", "guest_id"),
                [date(2018, 9, 11), date(2018, 9, 26), property_obj.id, guest.id]
            )
            reservation_row = (await self.db.fetch(reservation.sql, reservation.params))[0]

            review = build_insert(
                "property_reviews",
                ("guest_id", "property_id", "reservation_id", "rating", "message"),
                [guest.id, property_obj.id, reservation_row["id"], rating, "message"]
            )
            await self.db.fetch(review.sql, review.params)

        logger.info(f"Database seeded: {len(users)} users, {len(properties)} properties")

    async def reset(self) -> None:
        """Reset the database by dropping, recreating and seeding all tables."""
        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")
        await self.drop()
        await self.create()
        await self.seed()
        logger.info("Database reset completed")


async def run(command: str) -> bool:
    async with Database(settings) as db:
        manager = DatabaseManager(db)
        if command == "check":
            return await manager.check()
        await getattr(manager, command)()
        return True


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="LightBnB development database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("check", help="Check database connectivity")
    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (not in production)")
    subparsers.add_parser("seed", help="Insert sample data")

    reset_parser = subparsers.add_parser("reset", help="Drop, create and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return

    try:
        ok = asyncio.run(run(args.command))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
