"""DB-API 2.0 backed definition repository.

Purpose
-------
Read resolver definitions from a relational table through any DB-API
connection using ``?`` placeholders (``sqlite3`` and friends). The table layout
is owned by the application; only the name and definition columns are read.

System Role
-----------
Definitions may be stored as JSON text or as already-decoded mappings
(drivers with JSON column support). ``all()`` is memoised for the lifetime of
the repository and reused by ``get_many``.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Optional, Sequence

from ...domain.errors import InvalidDefinitionType, InvalidJsonDefinition, InvalidParsedDefinition, ResolverNotFound
from ...observability import log_debug


class DatabaseRepository:
    """Serve definitions stored in *table*.

    Parameters
    ----------
    connection:
        Open DB-API 2.0 connection.
    table / name_column / definition_column:
        Identifiers interpolated into SQL. They must come from trusted
        configuration, never from user input.
    conditions:
        Extra ``column = value`` filters applied to every query, e.g.
        ``{"is_active": 1}``.

    Examples
    --------
    >>> import sqlite3
    >>> conn = sqlite3.connect(":memory:")
    >>> _ = conn.execute("CREATE TABLE resolvers (name TEXT, definition TEXT, is_active INTEGER)")
    >>> _ = conn.execute("INSERT INTO resolvers VALUES ('prices', '{\\"sources\\": []}', 1)")
    >>> repo = DatabaseRepository(conn, conditions={"is_active": 1})
    >>> repo.get("prices")
    {'sources': []}
    >>> repo.has("stock")
    False
    """

    def __init__(
        self,
        connection: Any,
        table: str = "resolvers",
        name_column: str = "name",
        definition_column: str = "definition",
        conditions: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._connection = connection
        self._table = table
        self._name_column = name_column
        self._definition_column = definition_column
        self._conditions = dict(conditions or {})
        self._all: Optional[dict[str, Mapping[str, Any]]] = None

    def get(self, name: str) -> Mapping[str, Any]:
        rows = self._fetch(f"SELECT {self._name_column}, {self._definition_column}", {self._name_column: name})
        if not rows:
            raise ResolverNotFound.for_name(name)
        return self._parse(rows[0][1], name)

    def has(self, name: str) -> bool:
        rows = self._fetch("SELECT COUNT(*)", {self._name_column: name})
        return bool(rows) and rows[0][0] > 0

    def all(self) -> dict[str, Mapping[str, Any]]:
        if self._all is None:
            rows = self._fetch(f"SELECT {self._name_column}, {self._definition_column}", {})
            self._all = {row[0]: self._parse(row[1], row[0]) for row in rows}
            log_debug("definitions_queried", table=self._table, resolvers=len(self._all))
        return dict(self._all)

    def get_many(self, names: Iterable[str]) -> dict[str, Mapping[str, Any]]:
        wanted = list(dict.fromkeys(names))
        if not wanted:
            return {}
        if self._all is not None:
            return {name: self._all[name] for name in wanted if name in self._all}
        placeholders = ", ".join("?" for _ in wanted)
        rows = self._fetch(
            f"SELECT {self._name_column}, {self._definition_column}",
            {},
            suffix=f"{self._name_column} IN ({placeholders})",
            extra_params=wanted,
        )
        return {row[0]: self._parse(row[1], row[0]) for row in rows}

    def _fetch(
        self,
        select: str,
        filters: Mapping[str, Any],
        *,
        suffix: str = "",
        extra_params: Sequence[Any] = (),
    ) -> list[Sequence[Any]]:
        conditions = {**self._conditions, **filters}
        clauses = [f"{column} = ?" for column in conditions]
        if suffix:
            clauses.append(suffix)
        sql = f"{select} FROM {self._table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        params = [*conditions.values(), *extra_params]
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, params)
            return list(cursor.fetchall())
        finally:
            cursor.close()

    @staticmethod
    def _parse(raw: Any, name: str) -> Mapping[str, Any]:
        if isinstance(raw, Mapping):
            return raw
        if not isinstance(raw, (str, bytes)):
            raise InvalidDefinitionType.for_resolver(name)
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidJsonDefinition.for_resolver(name, str(exc)) from exc
        if not isinstance(parsed, Mapping):
            raise InvalidParsedDefinition.for_resolver(name)
        return parsed
