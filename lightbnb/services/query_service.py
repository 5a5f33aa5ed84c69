"""
Query service exposing the LightBnB data operations to the web layer.
Wraps the user, reservation and property repositories over one shared executor.
"""

from lightbnb.database import QueryExecutor
from lightbnb.repositories.property import PropertyRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.user import UserRepository
from lightbnb.schemas.property import PropertyCreate, PropertyRecord, PropertySearchOptions, PropertySearchResult
from lightbnb.schemas.reservation import ReservedProperty
from lightbnb.schemas.user import UserCreate, UserRecord
from typing import Optional, List, Dict, Any, Union
import logging

logger = logging.getLogger(__name__)


class QueryService:
    """
    The six LightBnB data operations.

    Every operation issues one statement. Lookups that find nothing return
    None (or an empty list for search); failures raise a DataAccessError
    subclass instead of being folded into the empty result.
    """

    def __init__(self, db: QueryExecutor, default_limit: int = 10):
        self.db = db
        self.default_limit = default_limit
        self.user_repo = UserRepository(db)
        self.reservation_repo = ReservationRepository(db)
        self.property_repo = PropertyRepository(db)

    # Users

    async def get_user_with_email(self, email: str) -> Optional[UserRecord]:
        """Get a single user given their email, or None."""
        return await self.user_repo.get_by_email(email)

    async def get_user_with_id(self, user_id: int) -> Optional[UserRecord]:
        """Get a single user given their id, or None."""
        return await self.user_repo.get_by_id(user_id)

    async def add_user(self, user: Union[UserCreate, Dict[str, Any]]) -> UserRecord:
        """Add a new user and return it with its generated id."""
        return await self.user_repo.create_user(user)

    # Reservations

    async def get_all_reservations(
        self,
        guest_id: int,
        limit: Optional[int] = None
    ) -> Optional[List[ReservedProperty]]:
        """Get up to ``limit`` reserved properties for a guest, or None."""
        return await self.reservation_repo.get_guest_reservations(
            guest_id, limit if limit is not None else self.default_limit
        )

    # Properties

    async def get_all_properties(
        self,
        options: Optional[Union[PropertySearchOptions, Dict[str, Any]]] = None,
        limit: Optional[int] = None
    ) -> List[PropertySearchResult]:
        """Search properties, cheapest first. Never None."""
        return await self.property_repo.search_properties(
            options, limit if limit is not None else self.default_limit
        )

    async def add_property(self, property_data: Union[PropertyCreate, Dict[str, Any]]) -> List[PropertyRecord]:
        """Add a property and return the inserted rows."""
        return await self.property_repo.create_property(property_data)
