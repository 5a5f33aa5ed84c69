"""
Positional SQL composition for hand-written PostgreSQL statements.
Folds structured predicates into SQL text and a matching ``$n`` parameter list.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)

# Operators a predicate may use; anything else is rejected at construction.
ALLOWED_OPERATORS = frozenset({"=", "<>", "<", "<=", ">", ">=", "LIKE", "ILIKE"})


@dataclass(frozen=True)
class Predicate:
    """One ``column operator value`` condition."""
    column: str
    operator: str
    value: Any

    def __post_init__(self):
        if self.operator not in ALLOWED_OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator!r}")


@dataclass
class CompiledQuery:
    """SQL text together with the values for its ``$n`` placeholders."""
    sql: str
    params: List[Any] = field(default_factory=list)


class ParameterList:
    """
    Ordered bound values.

    ``bind`` appends a value and returns its placeholder, so a placeholder is
    always the 1-based position of its value.
    """

    def __init__(self):
        self.values: List[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"

    def __len__(self) -> int:
        return len(self.values)


def render_predicates(predicates: Sequence[Predicate], params: ParameterList) -> str:
    """Render predicates joined with AND, binding values in order."""
    return " AND ".join(
        f"{predicate.column} {predicate.operator} {params.bind(predicate.value)}"
        for predicate in predicates
    )


def validate_limit(limit: Any) -> int:
    """Reject anything that is not a positive integer."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


class SearchQueryBuilder:
    """
    Builder for a filtered, grouped and paginated SELECT.

    Clauses are emitted in SQL order (WHERE, GROUP BY, HAVING, ORDER BY,
    LIMIT); WHERE and HAVING only when they have predicates.
    """

    def __init__(
        self,
        base_sql: str,
        group_by: Optional[str] = None,
        order_by: Optional[str] = None
    ):
        self.base_sql = base_sql.strip()
        self.group_by = group_by
        self.order_by = order_by
        self.where_predicates: List[Predicate] = []
        self.having_predicates: List[Predicate] = []
        self._limit: Optional[int] = None

    def where(self, column: str, operator: str, value: Any) -> "SearchQueryBuilder":
        self.where_predicates.append(Predicate(column, operator, value))
        return self

    def having(self, column: str, operator: str, value: Any) -> "SearchQueryBuilder":
        self.having_predicates.append(Predicate(column, operator, value))
        return self

    def limit(self, limit: int) -> "SearchQueryBuilder":
        self._limit = validate_limit(limit)
        return self

    def build(self) -> CompiledQuery:
        params = ParameterList()
        lines = [self.base_sql]

        if self.where_predicates:
            lines.append(f"WHERE {render_predicates(self.where_predicates, params)}")
        if self.group_by:
            lines.append(f"GROUP BY {self.group_by}")
        if self.having_predicates:
            lines.append(f"HAVING {render_predicates(self.having_predicates, params)}")
        if self.order_by:
            lines.append(f"ORDER BY {self.order_by}")
        if self._limit is not None:
            lines.append(f"LIMIT {params.bind(self._limit)}")

        compiled = CompiledQuery(sql="\n".join(lines), params=params.values)
        logger.debug(f"Built query with {len(params)} parameters")
        return compiled


def build_insert(table: str, columns: Sequence[str], values: Sequence[Any]) -> CompiledQuery:
    """Build ``INSERT ... VALUES ($1..$n) RETURNING *`` for a fixed column order."""
    if len(columns) != len(values):
        raise ValueError(f"{len(columns)} columns but {len(values)} values for {table}")

    params = ParameterList()
    placeholders = ", ".join(params.bind(value) for value in values)
    sql = (
        f"INSERT INTO {table} ({', '.join(columns)})\n"
        f"VALUES ({placeholders})\n"
        f"RETURNING *"
    )
    return CompiledQuery(sql=sql, params=params.values)
