"""
Property repository for listing search and property creation.
Search filters are collected as predicates and compiled into one $n query.
"""

from lightbnb.database import QueryExecutor
from lightbnb.repositories.base import BaseRepository
from lightbnb.schemas.property import (
    PropertyCreate,
    PropertyRecord,
    PropertySearchOptions,
    PropertySearchResult,
)
from lightbnb.utils.exceptions import DataAccessError
from lightbnb.utils.query_builder import CompiledQuery, SearchQueryBuilder, build_insert
from typing import Optional, List, Dict, Any, Union
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)

PROPERTY_SEARCH_BASE_SQL = """
SELECT properties.*, AVG(property_reviews.rating) AS average_rating
FROM properties
JOIN property_reviews ON property_reviews.property_id = properties.id
"""

AVERAGE_RATING = "AVG(property_reviews.rating)"

# Insert order; parameter $n binds the n-th column
PROPERTY_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "street",
    "city",
    "province",
    "post_code",
    "country",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
)


def dollars_to_cents(amount: Decimal) -> int:
    return int(round(Decimal(amount) * 100))


class PropertyRepository(BaseRepository[PropertySearchResult]):
    """Repository for the ``properties`` table and its review aggregate."""

    def __init__(self, db: QueryExecutor):
        super().__init__(PropertySearchResult, db)

    def build_search_query(
        self,
        options: Optional[PropertySearchOptions] = None,
        limit: int = 10
    ) -> CompiledQuery:
        """
        Compile the property search statement for the given filters.

        Row filters go to WHERE in a fixed order (city, owner, minimum
        price, maximum price); the rating filter goes to HAVING. Results are
        ordered by nightly cost and capped by ``limit``, always the last
        parameter.

        Args:
            options: Search filters; None means no filtering
            limit: Maximum number of properties to return

        Returns:
            CompiledQuery with SQL text and positional parameters
        """
        options = options or PropertySearchOptions()
        builder = SearchQueryBuilder(
            PROPERTY_SEARCH_BASE_SQL,
            group_by="properties.id",
            order_by="cost_per_night"
        )

        if options.city:
            builder.where("city", "LIKE", f"%{options.city}%")
        if options.owner_id is not None:
            builder.where("owner_id", "=", options.owner_id)
        if options.minimum_price_per_night is not None:
            builder.where("cost_per_night", ">", dollars_to_cents(options.minimum_price_per_night))
        if options.maximum_price_per_night is not None:
            builder.where("cost_per_night", "<", dollars_to_cents(options.maximum_price_per_night))

        if options.minimum_rating is not None:
            builder.having(AVERAGE_RATING, ">", options.minimum_rating)

        return builder.limit(limit).build()

    async def search_properties(
        self,
        options: Optional[Union[PropertySearchOptions, Dict[str, Any]]] = None,
        limit: int = 10
    ) -> List[PropertySearchResult]:
        """
        Search properties with filtering and a row cap.

        Args:
            options: PropertySearchOptions instance or a plain mapping of filters
            limit: Maximum number of records to return

        Returns:
            List of matching properties with average rating; empty if none match
        """
        if options is not None and not isinstance(options, PropertySearchOptions):
            options = PropertySearchOptions.model_validate(options)

        query = self.build_search_query(options, limit)
        try:
            properties = await self.fetch_compiled(query)
        except DataAccessError as e:
            logger.error(f"Failed to search properties: {e}")
            raise

        logger.debug(f"Property search returned {len(properties)} results")
        return properties

    async def create_property(self, property_data: Union[PropertyCreate, Dict[str, Any]]) -> List[PropertyRecord]:
        """
        Insert a property.

        Args:
            property_data: The fourteen property fields; cost_per_night in cents

        Returns:
            The inserted rows as returned by the database

        Raises:
            ConstraintViolationError: If the owner does not exist or a check fails
        """
        if not isinstance(property_data, PropertyCreate):
            property_data = PropertyCreate.model_validate(property_data)

        query = build_insert(
            "properties",
            PROPERTY_COLUMNS,
            [getattr(property_data, column) for column in PROPERTY_COLUMNS]
        )
        try:
            rows = await self.db.fetch(query.sql, query.params)
        except DataAccessError as e:
            logger.error(f"Failed to create property {property_data.title!r}: {e}")
            raise

        created = [PropertyRecord.model_validate(row) for row in rows]
        for property_obj in created:
            logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
        return created
