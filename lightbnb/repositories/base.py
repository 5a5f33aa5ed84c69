"""
Base repository class running hand-written SQL through an injected executor.
Provides row fetching and record conversion shared by the specific repositories.
"""

from pydantic import BaseModel
from lightbnb.database import QueryExecutor
from lightbnb.utils.query_builder import CompiledQuery
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Sequence
import logging

logger = logging.getLogger(__name__)

RecordType = TypeVar("RecordType", bound=BaseModel)


class BaseRepository(Generic[RecordType]):
    """
    Base repository class providing common fetch helpers.
    Each public method issues exactly one statement.
    """

    def __init__(self, record_class: Type[RecordType], db: QueryExecutor):
        """
        Initialize repository with record class and query executor.

        Args:
            record_class: Pydantic model each row is converted to
            db: Executor for $n SQL, normally the shared Database
        """
        self.record_class = record_class
        self.db = db

    def to_record(self, row: Dict[str, Any]) -> RecordType:
        return self.record_class.model_validate(row)

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[RecordType]:
        """
        Run a statement and convert every row.

        Returns:
            List of records, empty when no rows matched
        """
        rows = await self.db.fetch(sql, list(params))
        logger.debug(f"Fetched {len(rows)} {self.record_class.__name__} rows")
        return [self.to_record(row) for row in rows]

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[RecordType]:
        """
        Run a statement expected to match at most one row.

        Returns:
            The first record, or None when no rows matched
        """
        records = await self.fetch_all(sql, params)
        return records[0] if records else None

    async def fetch_compiled(self, query: CompiledQuery) -> List[RecordType]:
        return await self.fetch_all(query.sql, query.params)
