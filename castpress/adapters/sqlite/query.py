"""
Compile listing conditions into parameterized SQLite WHERE clauses.

Only column names from the caller's whitelist are ever interpolated into
SQL; every value travels as a bound parameter. Pattern conditions use
LIKE with backslash as the escape character, matching escape_like.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from castpress.components.listing.models import Condition, SortSpec

# Columns holding a JSON array of strings rather than a scalar.
JSON_ARRAY_COLUMNS = frozenset({"tags"})


def _check_column(column: str, columns: frozenset[str]) -> str:
    if column not in columns:
        raise ValueError(f"Column not allowed in query: {column}")
    return column


def _like_clause(column: str, table: str) -> str:
    if column in JSON_ARRAY_COLUMNS:
        return (
            f"EXISTS (SELECT 1 FROM json_each({table}.{column}) "
            "WHERE py_lower(json_each.value) LIKE ? ESCAPE '\\')"
        )
    return f"py_lower({table}.{column}) LIKE ? ESCAPE '\\'"


def _compile_condition(
    key: str,
    cond: Condition,
    table: str,
    columns: frozenset[str],
) -> tuple[str, list[Any]]:
    if cond.op == "eq":
        column = _check_column(key, columns)
        return f"{table}.{column} = ?", [cond.value]

    if cond.op == "contains":
        column = _check_column(key, columns)
        return _like_clause(column, table), [f"%{(cond.pattern or '').lower()}%"]

    if cond.op == "in_ci":
        column = _check_column(key, columns)
        values = [v.lower() for v in cond.value] if isinstance(cond.value, tuple) else []
        if not values:
            return "1=1", []
        placeholders = ", ".join("?" for _ in values)
        if column in JSON_ARRAY_COLUMNS:
            sql = (
                f"EXISTS (SELECT 1 FROM json_each({table}.{column}) "
                f"WHERE py_lower(json_each.value) IN ({placeholders}))"
            )
        else:
            sql = f"py_lower({table}.{column}) IN ({placeholders})"
        return sql, values

    if cond.op == "search":
        like = f"%{(cond.pattern or '').lower()}%"
        parts = [_like_clause(_check_column(f, columns), table) for f in cond.fields]
        if not parts:
            return "1=1", []
        return "(" + " OR ".join(parts) + ")", [like] * len(parts)

    raise ValueError(f"Unsupported condition op: {cond.op}")


def compile_where(
    filters: Mapping[str, Condition],
    table: str,
    columns: frozenset[str],
) -> tuple[str, list[Any]]:
    """Return (" WHERE ..." or "", params). An empty mapping matches everything."""
    clauses: list[str] = []
    params: list[Any] = []
    for key, cond in filters.items():
        sql, values = _compile_condition(key, cond, table, columns)
        clauses.append(sql)
        params.extend(values)

    if not clauses:
        return "", []
    return " WHERE " + " AND ".join(clauses), params


def compile_order(sort: SortSpec, table: str, columns: frozenset[str]) -> str:
    column = _check_column(sort.column, columns)
    direction = "ASC" if sort.direction == "asc" else "DESC"
    # id as tie-breaker keeps pagination stable across equal sort keys.
    return f" ORDER BY {table}.{column} {direction}, {table}.id ASC"
