"""
Tests for repository classes over a scripted executor.
Tests SQL issued, parameter order, row conversion and empty-result handling.
"""

import pytest
from datetime import date
from pydantic import ValidationError

from lightbnb.repositories.property import PROPERTY_COLUMNS, PropertyRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.user import UserRepository
from lightbnb.schemas.property import PropertyRecord, PropertySearchOptions, PropertySearchResult
from lightbnb.schemas.reservation import ReservedProperty
from lightbnb.schemas.user import UserCreate, UserRecord
from lightbnb.utils.exceptions import ConstraintViolationError, ConnectionFailureError, NoRowsError
from tests.conftest import FakeExecutor, UserFactory, PropertyFactory


class TestUserRepository:
    """Test user lookup and creation."""

    @pytest.mark.asyncio
    async def test_get_by_email(self, user_repository: UserRepository, executor: FakeExecutor):
        executor.queue([UserFactory.create_user_row(3, email="a@example.com")])

        user = await user_repository.get_by_email("a@example.com")

        assert isinstance(user, UserRecord)
        assert user.id == 3
        assert user.email == "a@example.com"
        assert executor.last_sql == "SELECT * FROM users\nWHERE email = $1"
        assert executor.last_params == ["a@example.com"]

    @pytest.mark.asyncio
    async def test_get_by_email_not_found(self, user_repository: UserRepository, executor: FakeExecutor):
        user = await user_repository.get_by_email("nobody@example.com")
        assert user is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, user_repository: UserRepository, executor: FakeExecutor):
        executor.queue([UserFactory.create_user_row(5)])

        user = await user_repository.get_by_id(5)

        assert user.id == 5
        assert executor.last_sql == "SELECT * FROM users\nWHERE id = $1"
        assert executor.last_params == [5]

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, user_repository: UserRepository):
        assert await user_repository.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_lookup_error_propagates(self, user_repository: UserRepository, executor: FakeExecutor):
        executor.queue(ConnectionFailureError("connection refused"))

        with pytest.raises(ConnectionFailureError):
            await user_repository.get_by_email("a@example.com")

    @pytest.mark.asyncio
    async def test_create_user(self, user_repository: UserRepository, executor: FakeExecutor):
        data = UserFactory.create_user_data(name="A", email="a@example.com", password="x")
        executor.queue([{"id": 11, **data}])

        user = await user_repository.create_user(data)

        assert user.id == 11
        assert user.name == "A"
        assert executor.last_sql == (
            "INSERT INTO users (name, password, email)\n"
            "VALUES ($1, $2, $3)\n"
            "RETURNING *"
        )
        assert executor.last_params == ["A", "x", "a@example.com"]

    @pytest.mark.asyncio
    async def test_create_user_keeps_email_as_given(self, user_repository: UserRepository, executor: FakeExecutor):
        data = UserFactory.create_user_data(email="a@Example.COM")
        executor.queue([{"id": 12, **data}])

        user = await user_repository.create_user(data)

        assert executor.last_params[2] == "a@Example.COM"
        assert user.email == "a@Example.COM"

    @pytest.mark.asyncio
    async def test_create_user_accepts_schema(self, user_repository: UserRepository, executor: FakeExecutor):
        user_in = UserCreate(name="B", email="b@example.com", password="hash")
        executor.queue([{"id": 2, "name": "B", "email": "b@example.com", "password": "hash"}])

        user = await user_repository.create_user(user_in)

        assert user.email == "b@example.com"

    @pytest.mark.asyncio
    async def test_create_user_no_row_returned(self, user_repository: UserRepository, executor: FakeExecutor):
        with pytest.raises(NoRowsError):
            await user_repository.create_user(UserFactory.create_user_data())

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email(self, user_repository: UserRepository, executor: FakeExecutor):
        executor.queue(ConstraintViolationError("duplicate key value", constraint="users_email_key"))

        with pytest.raises(ConstraintViolationError) as exc_info:
            await user_repository.create_user(UserFactory.create_user_data())
        assert exc_info.value.constraint == "users_email_key"

    @pytest.mark.asyncio
    async def test_create_user_invalid_email(self, user_repository: UserRepository, executor: FakeExecutor):
        with pytest.raises(ValidationError):
            await user_repository.create_user(UserFactory.create_user_data(email="not-an-email"))
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_password_not_in_repr(self, user_repository: UserRepository, executor: FakeExecutor):
        executor.queue([UserFactory.create_user_row(1, password="secret-hash")])
        user = await user_repository.get_by_id(1)
        assert "secret-hash" not in repr(user)


class TestReservationRepository:
    """Test listing a guest's reservations."""

    @pytest.mark.asyncio
    async def test_get_guest_reservations(
        self,
        reservation_repository: ReservationRepository,
        executor: FakeExecutor
    ):
        executor.queue([
            PropertyFactory.create_reservation_row(1),
            PropertyFactory.create_reservation_row(2, start_date=date(2019, 1, 1), end_date=date(2019, 1, 5)),
        ])

        reservations = await reservation_repository.get_guest_reservations(7, limit=2)

        assert len(reservations) == 2
        assert all(isinstance(r, ReservedProperty) for r in reservations)
        assert reservations[1].start_date == date(2019, 1, 1)
        assert executor.last_params == [7, 2]
        assert "WHERE reservations.guest_id = $1" in executor.last_sql
        assert "GROUP BY properties.id, reservations.start_date, reservations.end_date" in executor.last_sql
        assert executor.last_sql.endswith("LIMIT $2")

    @pytest.mark.asyncio
    async def test_default_limit(self, reservation_repository: ReservationRepository, executor: FakeExecutor):
        await reservation_repository.get_guest_reservations(7)
        assert executor.last_params == [7, 10]

    @pytest.mark.asyncio
    async def test_no_reservations_returns_none(self, reservation_repository: ReservationRepository):
        assert await reservation_repository.get_guest_reservations(7) is None

    @pytest.mark.asyncio
    async def test_invalid_limit(self, reservation_repository: ReservationRepository, executor: FakeExecutor):
        with pytest.raises(ValueError):
            await reservation_repository.get_guest_reservations(7, limit=0)
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_reservation_rows_not_held_to_input_rules(
        self,
        reservation_repository: ReservationRepository,
        executor: FakeExecutor
    ):
        executor.queue([PropertyFactory.create_reservation_row(1, title="  ", description="x" * 6000)])

        reservations = await reservation_repository.get_guest_reservations(7)

        assert reservations[0].title == "  "
        assert len(reservations[0].description) == 6000


class TestPropertyRepository:
    """Test property search and creation."""

    @pytest.mark.asyncio
    async def test_search_returns_results(self, property_repository: PropertyRepository, executor: FakeExecutor):
        executor.queue([
            PropertyFactory.create_property_row(1, average_rating=4.5, cost_per_night=5000),
            PropertyFactory.create_property_row(2, average_rating=3.25, cost_per_night=9000),
        ])

        properties = await property_repository.search_properties(PropertySearchOptions(city="Van"), 10)

        assert [p.id for p in properties] == [1, 2]
        assert isinstance(properties[0], PropertySearchResult)
        assert properties[0].average_rating == 4.5
        assert executor.last_params == ["%Van%", 10]

    @pytest.mark.asyncio
    async def test_search_rows_not_held_to_input_rules(
        self,
        property_repository: PropertyRepository,
        executor: FakeExecutor
    ):
        executor.queue([PropertyFactory.create_property_row(
            1, average_rating=4, description="x" * 6000, title=" Loft ", cost_per_night=-100
        )])

        properties = await property_repository.search_properties(PropertySearchOptions())

        assert len(properties[0].description) == 6000
        assert properties[0].title == " Loft "
        assert properties[0].cost_per_night == -100

    @pytest.mark.asyncio
    async def test_search_empty_returns_list(self, property_repository: PropertyRepository):
        properties = await property_repository.search_properties(PropertySearchOptions())
        assert properties == []

    @pytest.mark.asyncio
    async def test_search_accepts_form_dict(self, property_repository: PropertyRepository, executor: FakeExecutor):
        await property_repository.search_properties({
            "city": "",
            "minimum_price_per_night": "50",
            "maximum_price_per_night": "",
            "minimum_rating": "",
        })

        assert "city LIKE" not in executor.last_sql
        assert executor.last_params == [5000, 10]

    @pytest.mark.asyncio
    async def test_search_rejects_inverted_price_range(self, property_repository: PropertyRepository):
        with pytest.raises(ValidationError):
            await property_repository.search_properties({
                "minimum_price_per_night": 200,
                "maximum_price_per_night": 100,
            })

    @pytest.mark.asyncio
    async def test_create_property(self, property_repository: PropertyRepository, executor: FakeExecutor):
        data = PropertyFactory.create_property_data(owner_id=3, title="Cabin")
        executor.queue([{"id": 20, **data}])

        created = await property_repository.create_property(data)

        assert len(created) == 1
        assert isinstance(created[0], PropertyRecord)
        assert created[0].id == 20
        assert created[0].title == "Cabin"

        placeholders = ", ".join(f"${n}" for n in range(1, 15))
        assert executor.last_sql == (
            f"INSERT INTO properties ({', '.join(PROPERTY_COLUMNS)})\n"
            f"VALUES ({placeholders})\n"
            f"RETURNING *"
        )
        assert executor.last_params == [data[column] for column in PROPERTY_COLUMNS]

    @pytest.mark.asyncio
    async def test_create_property_column_order(self, property_repository: PropertyRepository, executor: FakeExecutor):
        await property_repository.create_property(PropertyFactory.create_property_data())
        assert PROPERTY_COLUMNS[0] == "owner_id"
        assert PROPERTY_COLUMNS[5] == "cost_per_night"
        assert PROPERTY_COLUMNS[-1] == "number_of_bedrooms"
        assert len(executor.last_params) == 14

    @pytest.mark.asyncio
    async def test_create_property_unknown_owner(self, property_repository: PropertyRepository, executor: FakeExecutor):
        executor.queue(ConstraintViolationError("violates foreign key constraint"))

        with pytest.raises(ConstraintViolationError):
            await property_repository.create_property(PropertyFactory.create_property_data(owner_id=999))

    @pytest.mark.asyncio
    async def test_create_property_negative_cost(self, property_repository: PropertyRepository, executor: FakeExecutor):
        with pytest.raises(ValidationError):
            await property_repository.create_property(PropertyFactory.create_property_data(cost_per_night=-1))
        assert executor.calls == []
