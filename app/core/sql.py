"""
SQL building helpers for partial updates and filtered searches.

Both builders emit positional placeholders ($1, $2, ...) together with a
parallel list of values, so no caller-supplied value is ever interpolated
into the query text. Use to_text() to hand the result to a SQLAlchemy
Session.

Example:
    {"name": "bob", "numEmployees": 54} with {"numEmployees": "num_employees"}
    => ('"name"=$1, "num_employees"=$2', ["bob", 54])
"""

import enum
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, NamedTuple, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from app.core.exceptions import BadRequestError

DEFAULT_DIALECT = "postgresql"

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


class PartialUpdate(NamedTuple):
    """SET clause fragment plus the values bound to its placeholders."""
    set_cols: str
    values: List[Any]


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Mapping[str, str]
) -> PartialUpdate:
    """
    Build the SET clause of an UPDATE from the fields being changed.

    Args:
        data_to_update: Field -> new value, in the order they should be bound
        js_to_sql: Field -> column name for fields whose column differs

    Returns:
        PartialUpdate(set_cols, values); placeholder $n binds values[n - 1]

    Raises:
        BadRequestError: If data_to_update is empty
    """
    keys = list(data_to_update)
    if not keys:
        raise BadRequestError("No data")

    cols = [
        f'"{js_to_sql.get(key) or key}"=${idx}'
        for idx, key in enumerate(keys, start=1)
    ]

    return PartialUpdate(
        set_cols=", ".join(cols),
        values=[data_to_update[key] for key in keys],
    )


class FilterOp(str, enum.Enum):
    """How a supplied criterion narrows the result set."""
    CONTAINS = "contains"  # case-insensitive substring
    MIN = "min"
    MAX = "max"
    POSITIVE = "positive"  # flag: column > 0 when true


@dataclass(frozen=True)
class FilterField:
    key: str
    column: str
    op: FilterOp


@dataclass(frozen=True)
class FilteredSelect:
    """A fixed projection over one table plus the criteria it accepts."""
    table: str
    columns: Tuple[str, ...]
    fields: Tuple[FilterField, ...]

    @property
    def base_query(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table}"

    def build(
        self,
        criteria: Mapping[str, Any],
        dialect: str = DEFAULT_DIALECT
    ) -> Tuple[str, List[Any]]:
        where, values = build_where_clause(criteria, self.fields, dialect=dialect)
        if not where:
            return self.base_query, values
        return f"{self.base_query} WHERE {where}", values


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value only ever matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _like_operator(dialect: str) -> str:
    if dialect == "postgresql":
        return "ILIKE"
    # SQLite LIKE is already case-insensitive for ASCII, but has no default escape
    return "LIKE"


def _like_suffix(dialect: str) -> str:
    return "" if dialect == "postgresql" else " ESCAPE '\\'"


def _to_number(key: str, value: Any) -> Any:
    if isinstance(value, bool):
        raise BadRequestError(f"{key} must be a number")
    if isinstance(value, (int, float, Decimal)):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise BadRequestError(f"{key} must be a number")
    if not number.is_finite():
        raise BadRequestError(f"{key} must be a number")
    return float(number)


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def build_where_clause(
    criteria: Mapping[str, Any],
    fields: Sequence[FilterField],
    start: int = 1,
    dialect: str = DEFAULT_DIALECT
) -> Tuple[str, List[Any]]:
    """
    Combine the supplied criteria into a WHERE condition.

    Fields are visited in declaration order, so the output is deterministic.
    A criterion whose value is None is skipped; a POSITIVE flag is also
    skipped when false. Keys not declared in `fields` are ignored.

    Args:
        criteria: Criterion key -> value
        fields: Accepted criteria
        start: Number of the first placeholder
        dialect: SQLAlchemy dialect name the query will run on

    Returns:
        (condition, values); condition is "" when nothing was supplied
    """
    fragments: List[str] = []
    values: List[Any] = []

    for field in fields:
        value = criteria.get(field.key)
        if value is None:
            continue

        if field.op is FilterOp.POSITIVE:
            if _is_true(value):
                fragments.append(f"{field.column} > 0")
            continue

        position = start + len(values)
        if field.op is FilterOp.CONTAINS:
            fragments.append(
                f"{field.column} {_like_operator(dialect)} ${position}{_like_suffix(dialect)}"
            )
            values.append(f"%{escape_like(str(value))}%")
        elif field.op is FilterOp.MIN:
            fragments.append(f"{field.column} >= ${position}")
            values.append(_to_number(field.key, value))
        elif field.op is FilterOp.MAX:
            fragments.append(f"{field.column} <= ${position}")
            values.append(_to_number(field.key, value))

    return " AND ".join(fragments), values


COMPANY_SEARCH = FilteredSelect(
    table="companies",
    columns=("handle", "name", "description", "num_employees", "logo_url"),
    fields=(
        FilterField("name", "name", FilterOp.CONTAINS),
        FilterField("minEmployees", "num_employees", FilterOp.MIN),
        FilterField("maxEmployees", "num_employees", FilterOp.MAX),
    ),
)

JOB_SEARCH = FilteredSelect(
    table="jobs",
    columns=("id", "title", "salary", "equity", "company_handle"),
    fields=(
        FilterField("title", "title", FilterOp.CONTAINS),
        FilterField("minSalary", "salary", FilterOp.MIN),
        FilterField("hasEquity", "equity", FilterOp.POSITIVE),
    ),
)


def sql_for_filtered_companies(
    criteria: Mapping[str, Any],
    dialect: str = DEFAULT_DIALECT
) -> Tuple[str, List[Any]]:
    """Search companies by name, minEmployees and maxEmployees."""
    return COMPANY_SEARCH.build(criteria, dialect)


def sql_for_filtered_jobs(
    criteria: Mapping[str, Any],
    dialect: str = DEFAULT_DIALECT
) -> Tuple[str, List[Any]]:
    """Search jobs by title, minSalary and hasEquity."""
    return JOB_SEARCH.build(criteria, dialect)


def to_text(sql: str, values: Sequence[Any] = ()) -> TextClause:
    """
    Turn a $n-placeholder query into a SQLAlchemy text() clause.

    Placeholder $n becomes the bind parameter :pn holding values[n - 1], so
    the statement runs on any dialect SQLAlchemy supports.
    """
    statement = text(_PLACEHOLDER_RE.sub(lambda m: f":p{m.group(1)}", sql))
    if values:
        statement = statement.bindparams(
            **{f"p{idx}": value for idx, value in enumerate(values, start=1)}
        )
    return statement
