"""
User repository for account lookup and creation.
"""

from lightbnb.database import QueryExecutor
from lightbnb.repositories.base import BaseRepository
from lightbnb.schemas.user import UserCreate, UserRecord
from lightbnb.utils.exceptions import DataAccessError, NoRowsError
from lightbnb.utils.query_builder import build_insert
from typing import Optional, Union, Dict, Any
import logging

logger = logging.getLogger(__name__)

USER_COLUMNS = ("name", "password", "email")


class UserRepository(BaseRepository[UserRecord]):
    """Repository for the ``users`` table."""

    def __init__(self, db: QueryExecutor):
        super().__init__(UserRecord, db)

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """
        Get user by email address (exact match).

        Args:
            email: Email address to search for

        Returns:
            User record if found, None otherwise
        """
        try:
            user = await self.fetch_one("SELECT * FROM users\nWHERE email = $1", [email])
        except DataAccessError as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

        if user:
            logger.debug(f"Retrieved user by email: {email}")
        else:
            logger.debug(f"User with email {email} not found")
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserRecord]:
        """
        Get user by primary key.

        Args:
            user_id: ID of the user

        Returns:
            User record if found, None otherwise
        """
        try:
            user = await self.fetch_one("SELECT * FROM users\nWHERE id = $1", [user_id])
        except DataAccessError as e:
            logger.error(f"Failed to get user by id {user_id}: {e}")
            raise

        if user is None:
            logger.debug(f"User with id {user_id} not found")
        return user

    async def create_user(self, user: Union[UserCreate, Dict[str, Any]]) -> UserRecord:
        """
        Insert a user and return the stored row.

        Args:
            user: name, password (already hashed) and email

        Returns:
            Created user record, including the generated id

        Raises:
            ConstraintViolationError: If the email is already registered
            NoRowsError: If the insert returned no row
        """
        if not isinstance(user, UserCreate):
            user = UserCreate.model_validate(user)

        query = build_insert("users", USER_COLUMNS, [user.name, user.password, user.email])
        try:
            created_user = await self.fetch_one(query.sql, query.params)
        except DataAccessError as e:
            logger.error(f"Failed to create user {user.email}: {e}")
            raise

        if created_user is None:
            raise NoRowsError("users insert", query.sql)

        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user
