"""Split SQL scripts into individual statements."""

from pathlib import Path
from typing import List, Union

import sqlglot
from sqlglot.errors import SqlglotError

ATHENA_DIALECT = "athena"


class InvalidSqlError(ValueError):
    """The provided SQL text could not be parsed."""


def split_statements(sql: str, dialect: str = ATHENA_DIALECT) -> List[str]:
    """Parse ``sql`` and return each statement re-rendered in ``dialect``.

    Empty statements (stray semicolons, comment-only chunks) are dropped.
    """
    try:
        expressions = sqlglot.parse(sql, read=dialect)
    except SqlglotError as exc:
        raise InvalidSqlError(f"Invalid SQL: {exc}") from exc
    return [expression.sql(dialect=dialect) for expression in expressions if expression is not None]


def read_statements(path: Union[str, Path], dialect: str = ATHENA_DIALECT) -> List[str]:
    """Read a SQL file and split it into statements."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file does not exist: {path}")
    return split_statements(path.read_text(encoding="utf-8"), dialect=dialect)
