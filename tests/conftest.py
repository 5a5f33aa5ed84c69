"""
Test configuration and fixtures for the LightBnB data-access layer.
Provides a scripted in-memory executor, row factories and an optional PostgreSQL database.
"""

import pytest
import os
from datetime import date
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence

from lightbnb.config import Settings
from lightbnb.database import Database
from lightbnb.repositories.property import PropertyRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.user import UserRepository
from lightbnb.services.query_service import QueryService
from lightbnb.utils.query_builder import build_insert


# Integration tests run only when a PostgreSQL URL is provided
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


class FakeExecutor:
    """
    In-memory stand-in for Database.

    Records every ``(sql, params)`` pair and answers with queued row lists,
    or raises the queued error.
    """

    def __init__(self, *responses: List[Dict[str, Any]]):
        self.calls: List[tuple] = []
        self.responses: List[Any] = list(responses)

    def queue(self, response: Any) -> None:
        self.responses.append(response)

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((sql, list(params)))
        if not self.responses:
            return []
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_sql(self) -> str:
        return self.calls[-1][0]

    @property
    def last_params(self) -> list:
        return self.calls[-1][1]


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


# Repository fixtures
@pytest.fixture
def user_repository(executor: FakeExecutor) -> UserRepository:
    """Create a user repository over the fake executor."""
    return UserRepository(executor)


@pytest.fixture
def reservation_repository(executor: FakeExecutor) -> ReservationRepository:
    """Create a reservation repository over the fake executor."""
    return ReservationRepository(executor)


@pytest.fixture
def property_repository(executor: FakeExecutor) -> PropertyRepository:
    """Create a property repository over the fake executor."""
    return PropertyRepository(executor)


@pytest.fixture
def query_service(executor: FakeExecutor) -> QueryService:
    """Create a query service over the fake executor."""
    return QueryService(executor)


# Test data factories
class UserFactory:
    """Factory for user inputs and rows."""

    @staticmethod
    def create_user_data(
        name: str = "Test User",
        email: str = "test@example.com",
        password: str = "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."
    ) -> dict:
        """Create user data dictionary."""
        return {"name": name, "email": email, "password": password}

    @staticmethod
    def create_user_row(user_id: int = 1, **overrides) -> dict:
        """Create a row as the users table would return it."""
        return {"id": user_id, **UserFactory.create_user_data(**overrides)}


class PropertyFactory:
    """Factory for property inputs and rows."""

    @staticmethod
    def create_property_data(
        owner_id: int = 1,
        title: str = "Test Property",
        cost_per_night: int = 10000,
        city: str = "Vancouver",
        **overrides
    ) -> dict:
        """Create property data dictionary with all fourteen insert fields."""
        data = {
            "owner_id": owner_id,
            "title": title,
            "description": "A beautiful test property",
            "thumbnail_photo_url": "https://example.com/thumb.jpg",
            "cover_photo_url": "https://example.com/cover.jpg",
            "cost_per_night": cost_per_night,
            "street": "123 Test Street",
            "city": city,
            "province": "BC",
            "post_code": "V5K 0A1",
            "country": "Canada",
            "parking_spaces": 1,
            "number_of_bathrooms": 1,
            "number_of_bedrooms": 2,
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_property_row(property_id: int = 1, average_rating: Optional[float] = None, **overrides) -> dict:
        """Create a row as the properties table would return it."""
        row = {"id": property_id, **PropertyFactory.create_property_data(**overrides)}
        if average_rating is not None:
            row["average_rating"] = average_rating
        return row

    @staticmethod
    def create_reservation_row(
        property_id: int = 1,
        start_date: date = date(2018, 9, 11),
        end_date: date = date(2018, 9, 26),
        **overrides
    ) -> dict:
        """Create a property row joined with a reservation's dates."""
        row = PropertyFactory.create_property_row(property_id, **overrides)
        row.update({"start_date": start_date, "end_date": end_date})
        return row


# PostgreSQL fixtures
@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Connect to the test database with a freshly created schema."""
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL is not set")

    settings = Settings(database_url=TEST_DATABASE_URL, environment="testing", pool_size=5)
    db = await Database(settings).connect()
    await db.drop_tables()
    await db.create_tables()
    try:
        yield db
    finally:
        await db.drop_tables()
        await db.close()


@pytest.fixture
def live_service(database: Database) -> QueryService:
    """Create a query service over the test database."""
    return QueryService(database)


async def insert_reservation(db: Database, guest_id: int, property_id: int,
                             start_date: date, end_date: date) -> dict:
    """Insert a reservation row directly; the service has no insert for it."""
    query = build_insert(
        "reservations",
        ("guest_id", "property_id", "start_date", "end_date"),
        [guest_id, property_id, start_date, end_date]
    )
    return (await db.fetch(query.sql, query.params))[0]


async def insert_review(db: Database, guest_id: int, property_id: int,
                        reservation_id: int, rating: int) -> dict:
    """Insert a property review row directly."""
    query = build_insert(
        "property_reviews",
        ("guest_id", "property_id", "reservation_id", "rating"),
        [guest_id, property_id, reservation_id, rating]
    )
    return (await db.fetch(query.sql, query.params))[0]
