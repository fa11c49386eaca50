"""PostgreSQL implementation of :class:`IMetaStore`.

Generic CRUD on one table.  Column names come from the keys of the data
passed in and are validated as identifiers before they reach SQL.  Most
tables use a ``BIGSERIAL id`` primary key; tables keyed by a natural key
(``sync_state.job_name``) are constructed with that column as
``primary_key`` and surface it as the entity id.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.providers.store.postgres.queries import validate_identifier

_SERIAL_KEY = "id"


class PostgresMetaStore(IMetaStore[T]):
    """Metadata store over a single PostgreSQL table."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        table: str,
        model: type[T],
        primary_key: str = _SERIAL_KEY,
    ) -> None:
        self._pool = pool
        self._table = validate_identifier(table)
        self._model = model
        self._primary_key = validate_identifier(primary_key)

    async def insert(self, data: dict[str, Any]) -> str:
        columns = _columns(data)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        sql = (
            f"INSERT INTO {self._table} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING {self._primary_key}"
        )
        row_id = await self._pool.fetchval(sql, *(data[c] for c in columns))
        return str(row_id)

    async def find_by_id(self, entity_id: str) -> T | None:
        key = self._coerce_id(entity_id)
        if key is None:
            return None
        row = await self._pool.fetchrow(
            f"SELECT * FROM {self._table} WHERE {self._primary_key} = $1", key
        )
        return self._to_model(row)

    async def find_one(self, filter: dict[str, Any]) -> T | None:
        columns = _columns(filter)
        where = " AND ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=1))
        sql = f"SELECT * FROM {self._table}"
        if where:
            sql += f" WHERE {where}"
        row = await self._pool.fetchrow(f"{sql} LIMIT 1", *(filter[c] for c in columns))
        return self._to_model(row)

    async def update(self, entity_id: str, data: dict[str, Any]) -> None:
        key = self._coerce_id(entity_id)
        if key is None:
            return
        columns = [c for c in _columns(data) if c != "updated_at"]
        assignments = [f"{c} = ${i}" for i, c in enumerate(columns, start=2)]
        assignments.append("updated_at = NOW()")
        await self._pool.execute(
            f"UPDATE {self._table} SET {', '.join(assignments)} "
            f"WHERE {self._primary_key} = $1",
            key,
            *(data[c] for c in columns),
        )

    async def delete(self, entity_id: str) -> None:
        key = self._coerce_id(entity_id)
        if key is None:
            return
        await self._pool.execute(
            f"DELETE FROM {self._table} WHERE {self._primary_key} = $1", key
        )

    async def upsert(self, filter: dict[str, Any], data: dict[str, Any]) -> None:
        conflict_columns = _columns(filter)
        merged = {**filter, **{k: v for k, v in data.items() if k != "updated_at"}}
        columns = _columns(merged)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        assignments = [
            f"{c} = EXCLUDED.{c}" for c in columns if c not in conflict_columns
        ]
        assignments.append("updated_at = NOW()")
        sql = (
            f"INSERT INTO {self._table} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT ({', '.join(conflict_columns)}) "
            f"DO UPDATE SET {', '.join(assignments)}"
        )
        await self._pool.execute(sql, *(merged[c] for c in columns))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _coerce_id(self, entity_id: str) -> int | str | None:
        if self._primary_key != _SERIAL_KEY:
            return entity_id
        try:
            return int(entity_id)
        except (TypeError, ValueError):
            return None

    def _to_model(self, row: asyncpg.Record | None) -> T | None:
        if row is None:
            return None
        data = dict(row)
        data["id"] = str(data[self._primary_key])
        return self._model.model_validate(data)


def _columns(data: dict[str, Any]) -> list[str]:
    return [validate_identifier(column) for column in data]
