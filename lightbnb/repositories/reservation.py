"""
Reservation repository for listing a guest's booked properties.
"""

from lightbnb.database import QueryExecutor
from lightbnb.repositories.base import BaseRepository
from lightbnb.schemas.reservation import ReservedProperty
from lightbnb.utils.exceptions import DataAccessError
from lightbnb.utils.query_builder import validate_limit
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

GUEST_RESERVATIONS_SQL = """
SELECT properties.*, reservations.start_date, reservations.end_date
FROM properties
JOIN reservations ON reservations.property_id = properties.id
WHERE reservations.guest_id = $1
GROUP BY properties.id, reservations.start_date, reservations.end_date
LIMIT $2
""".strip()


class ReservationRepository(BaseRepository[ReservedProperty]):
    """Repository for reads over ``reservations`` joined to ``properties``."""

    def __init__(self, db: QueryExecutor):
        super().__init__(ReservedProperty, db)

    async def get_guest_reservations(self, guest_id: int, limit: int = 10) -> Optional[List[ReservedProperty]]:
        """
        Get the properties a guest has reserved, with each stay's dates.
        No ordering is guaranteed.

        Args:
            guest_id: ID of the guest user
            limit: Maximum number of rows to return

        Returns:
            List of reserved properties, or None when the guest has none
        """
        validate_limit(limit)
        try:
            reservations = await self.fetch_all(GUEST_RESERVATIONS_SQL, [guest_id, limit])
        except DataAccessError as e:
            logger.error(f"Failed to get reservations for guest {guest_id}: {e}")
            raise

        if not reservations:
            logger.debug(f"No reservations for guest {guest_id}")
            return None

        logger.debug(f"Retrieved {len(reservations)} reservations for guest {guest_id}")
        return reservations
