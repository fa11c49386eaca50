"""SQL building helpers shared by the PostgreSQL stores.

Table and column names cannot be bound as query parameters, so every
identifier interpolated into SQL goes through :func:`validate_identifier`.
Values are always passed as ``$n`` parameters.
"""

from __future__ import annotations

import re
from typing import Any

from knowledge_base.models.search import DATE_FILTER_FIELD, SearchFilters

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(name: str) -> str:
    """Return *name* unchanged, or raise ``ValueError`` if it is not a plain identifier."""
    if not _IDENTIFIER_RE.match(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return name


def build_metadata_where(
    filters: SearchFilters | None,
    start_index: int = 1,
    include_dates: bool = True,
) -> tuple[str, list[Any]]:
    """Translate *filters* into a ``WHERE`` body over the JSONB ``metadata`` column.

    Returns ``("", [])`` when nothing is constrained.  Placeholders are
    numbered from *start_index*.
    """
    if filters is None:
        return "", []

    conditions: list[str] = []
    params: list[Any] = []

    def _add(expression: str, value: Any) -> None:
        params.append(value)
        conditions.append(f"{expression} ${start_index + len(params) - 1}")

    for field, value in filters.equality_fields().items():
        _add(f"metadata->>'{field}' =", value)

    if include_dates:
        if filters.date_from:
            _add(f"metadata->>'{DATE_FILTER_FIELD}' >=", filters.date_from)
        if filters.date_to:
            _add(f"metadata->>'{DATE_FILTER_FIELD}' <=", filters.date_to)

    return " AND ".join(conditions), params


def parse_row_count(status: str) -> int:
    """Extract the row count from an asyncpg command status such as ``"DELETE 3"``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0
