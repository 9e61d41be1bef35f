from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from castpress.adapters.sqlite.base import (
    SQLiteRepoBase,
    format_dt,
    parse_dt,
)
from castpress.adapters.sqlite.query import compile_order, compile_where
from castpress.components.listing.models import ListQuery
from castpress.domain.entities import (
    CONTENT_STATUSES,
    Admin,
    Article,
    Category,
    ContentItem,
    Podcast,
)
from castpress.domain.errors import DuplicateValueError

T = TypeVar("T", bound=ContentItem)

_DATETIME_COLUMNS = frozenset({"scheduled_date", "publish_date", "created_at", "updated_at"})

_COMMON_COLUMNS = (
    "id",
    "title",
    "tags",
    "category",
    "status",
    "scheduled_date",
    "publish_date",
    "slug",
    "thumbnail_url",
    "created_at",
    "updated_at",
)


def _raise_if_duplicate(error: sqlite3.IntegrityError, table: str, column: str) -> None:
    if f"UNIQUE constraint failed: {table}.{column}" in str(error):
        raise DuplicateValueError(column) from error


class _SQLiteContentRepo(SQLiteRepoBase, Generic[T]):
    """Storage for one content table. Subclasses name the table and extra columns."""

    table: str = ""
    extra_columns: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        return _COMMON_COLUMNS + self.extra_columns

    @property
    def column_set(self) -> frozenset[str]:
        return frozenset(self.columns)

    # --- row mapping ---

    def _to_row(self, item: T) -> dict[str, Any]:
        row: dict[str, Any] = {
            "id": str(item.id),
            "title": item.title,
            "tags": json.dumps(item.tags),
            "category": item.category,
            "status": item.status,
            "scheduled_date": format_dt(item.scheduled_date),
            "publish_date": format_dt(item.publish_date),
            "slug": item.slug,
            "thumbnail_url": item.thumbnail_url,
            "created_at": format_dt(item.created_at),
            "updated_at": format_dt(item.updated_at),
        }
        for column in self.extra_columns:
            row[column] = getattr(item, column)
        return row

    def _map_row(self, row: dict[str, Any]) -> T:
        raise NotImplementedError

    def _common_fields(self, row: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": UUID(row["id"]),
            "title": row["title"],
            "tags": json.loads(row["tags"] or "[]"),
            "category": row["category"] or "",
            "status": row["status"],
            "scheduled_date": parse_dt(row["scheduled_date"]),
            "publish_date": parse_dt(row["publish_date"]),
            "slug": row["slug"],
            "thumbnail_url": row["thumbnail_url"],
            "created_at": parse_dt(row["created_at"]),
            "updated_at": parse_dt(row["updated_at"]),
        }

    # --- CRUD ---

    def save(self, item: T) -> T:
        row = self._to_row(item)
        cols = list(row.keys())
        placeholders = ", ".join("?" for _ in cols)
        updates = ", ".join(f"{c}=excluded.{c}" for c in cols if c not in ("id", "created_at"))
        conn = self._get_conn()
        try:
            conn.execute(
                f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES ({placeholders}) "
                f"ON CONFLICT(id) DO UPDATE SET {updates}",
                [row[c] for c in cols],
            )
            conn.commit()
            return item
        except sqlite3.IntegrityError as e:
            conn.rollback()
            _raise_if_duplicate(e, self.table, "slug")
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            self._close(conn)

    def update_fields(self, item_id: UUID, changes: dict[str, Any]) -> bool:
        """
        Write only the given columns of one row.

        Columns not named in changes keep whatever is stored, including
        anything the scheduler wrote since the caller read the row.
        Returns False when no row has item_id.
        """
        unknown = set(changes) - (self.column_set - {"id", "created_at"})
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if not changes:
            return self.get_by_id(item_id) is not None

        values: list[Any] = []
        for column, value in changes.items():
            if column == "tags":
                value = json.dumps(value)
            elif column in _DATETIME_COLUMNS:
                value = format_dt(value)
            values.append(value)
        assignments = ", ".join(f"{c} = ?" for c in changes)

        conn = self._get_conn()
        try:
            cur = conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                [*values, str(item_id)],
            )
            conn.commit()
            return cur.rowcount > 0
        except sqlite3.IntegrityError as e:
            conn.rollback()
            _raise_if_duplicate(e, self.table, "slug")
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            self._close(conn)

    def get_by_id(self, item_id: UUID) -> T | None:
        return self._get_one(f"SELECT * FROM {self.table} WHERE id = ?", (str(item_id),))

    def get_by_slug(self, slug: str) -> T | None:
        return self._get_one(f"SELECT * FROM {self.table} WHERE slug = ?", (slug,))

    def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT id FROM {self.table} WHERE slug = ? AND id != ?",
                (slug, str(exclude_id) if exclude_id else ""),
            ).fetchone()
            return row is not None
        finally:
            self._close(conn)

    def delete(self, item_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (str(item_id),))
            conn.commit()
            return cur.rowcount > 0
        finally:
            self._close(conn)

    # --- Listing ---

    def find(self, query: ListQuery) -> list[T]:
        where, params = compile_where(query.filters, self.table, self.column_set)
        order = compile_order(query.sort, self.table, self.column_set)
        sql = f"SELECT * FROM {self.table}{where}{order} LIMIT ? OFFSET ?"
        conn = self._get_conn()
        try:
            rows = conn.execute(
                sql, [*params, query.pagination.limit, query.pagination.skip]
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._close(conn)

    def count(self, query: ListQuery) -> int:
        where, params = compile_where(query.filters, self.table, self.column_set)
        conn = self._get_conn()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {self.table}{where}", params).fetchone()
            return int(row["cnt"]) if row else 0
        finally:
            self._close(conn)

    def count_by_status(self) -> dict[str, int]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT status, COUNT(*) AS cnt FROM {self.table} GROUP BY status"
            ).fetchall()
        finally:
            self._close(conn)
        counts = {status: 0 for status in CONTENT_STATUSES}
        for row in rows:
            counts[row["status"]] = int(row["cnt"])
        return counts

    # --- Scheduled publication ---

    def publish_due(self, now: datetime) -> int:
        """
        Promote every draft whose scheduled_date <= now in one statement.

        Only status, publish_date and updated_at are written, so concurrent
        edits to other columns of the same rows are not lost.
        """
        stamp = format_dt(now)
        conn = self._get_conn()
        try:
            cur = conn.execute(
                f"UPDATE {self.table} "
                "SET status = 'published', publish_date = ?, updated_at = ? "
                "WHERE status = 'draft' AND scheduled_date <= ?",
                (stamp, stamp, stamp),
            )
            conn.commit()
            return cur.rowcount
        except Exception:
            conn.rollback()
            raise
        finally:
            self._close(conn)

    def _get_one(self, sql: str, params: tuple[Any, ...]) -> T | None:
        conn = self._get_conn()
        try:
            row = conn.execute(sql, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._close(conn)


class SQLiteArticleRepo(_SQLiteContentRepo[Article]):
    table = "articles"
    extra_columns = ("content", "author")

    def _map_row(self, row: dict[str, Any]) -> Article:
        return Article(content=row["content"], author=row["author"], **self._common_fields(row))


class SQLitePodcastRepo(_SQLiteContentRepo[Podcast]):
    table = "podcasts"
    extra_columns = (
        "description",
        "audio_url",
        "video_url",
        "duration_seconds",
        "youtube",
        "spotify",
        "anghami",
        "apple_music",
    )

    def _map_row(self, row: dict[str, Any]) -> Podcast:
        return Podcast(
            description=row["description"] or "",
            audio_url=row["audio_url"],
            video_url=row["video_url"],
            duration_seconds=row["duration_seconds"],
            youtube=row["youtube"],
            spotify=row["spotify"],
            anghami=row["anghami"],
            apple_music=row["apple_music"],
            **self._common_fields(row),
        )


class SQLiteCategoryRepo(SQLiteRepoBase):
    def save(self, category: Category) -> Category:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO categories (id, name, slug, description, type, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    slug=excluded.slug,
                    description=excluded.description,
                    type=excluded.type,
                    updated_at=excluded.updated_at
            """,
                (
                    str(category.id),
                    category.name,
                    category.slug,
                    category.description,
                    category.type,
                    format_dt(category.created_at),
                    format_dt(category.updated_at),
                ),
            )
            conn.commit()
            return category
        except sqlite3.IntegrityError as e:
            conn.rollback()
            _raise_if_duplicate(e, "categories", "name")
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            self._close(conn)

    def get_by_id(self, category_id: UUID) -> Category | None:
        return self._get_one("SELECT * FROM categories WHERE id = ?", (str(category_id),))

    def get_by_name(self, name: str) -> Category | None:
        return self._get_one("SELECT * FROM categories WHERE name = ?", (name,))

    def list_by_type(self, category_type: str | None = None) -> list[Category]:
        conn = self._get_conn()
        try:
            if category_type:
                rows = conn.execute(
                    "SELECT * FROM categories WHERE type IN (?, 'both') ORDER BY name ASC",
                    (category_type,),
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM categories ORDER BY name ASC").fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._close(conn)

    def delete(self, category_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM categories WHERE id = ?", (str(category_id),))
            conn.commit()
            return cur.rowcount > 0
        finally:
            self._close(conn)

    def _get_one(self, sql: str, params: tuple[Any, ...]) -> Category | None:
        conn = self._get_conn()
        try:
            row = conn.execute(sql, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._close(conn)

    def _map_row(self, row: dict[str, Any]) -> Category:
        return Category(
            id=UUID(row["id"]),
            name=row["name"],
            slug=row["slug"],
            description=row["description"],
            type=row["type"],
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )


class SQLiteAdminRepo(SQLiteRepoBase):
    def save(self, admin: Admin) -> Admin:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO admins (id, username, password_hash, is_super_admin, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    username=excluded.username,
                    password_hash=excluded.password_hash,
                    is_super_admin=excluded.is_super_admin
            """,
                (
                    str(admin.id),
                    admin.username,
                    admin.password_hash,
                    int(admin.is_super_admin),
                    format_dt(admin.created_at),
                ),
            )
            conn.commit()
            return admin
        except sqlite3.IntegrityError as e:
            conn.rollback()
            _raise_if_duplicate(e, "admins", "username")
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            self._close(conn)

    def get_by_id(self, admin_id: UUID) -> Admin | None:
        return self._get_one("SELECT * FROM admins WHERE id = ?", (str(admin_id),))

    def get_by_username(self, username: str) -> Admin | None:
        return self._get_one("SELECT * FROM admins WHERE username = ?", (username,))

    def count(self) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM admins").fetchone()
            return int(row["cnt"]) if row else 0
        finally:
            self._close(conn)

    def delete(self, admin_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM admins WHERE id = ?", (str(admin_id),))
            conn.commit()
            return cur.rowcount > 0
        finally:
            self._close(conn)

    def _get_one(self, sql: str, params: tuple[Any, ...]) -> Admin | None:
        conn = self._get_conn()
        try:
            row = conn.execute(sql, params).fetchone()
            if not row:
                return None
            return Admin(
                id=UUID(row["id"]),
                username=row["username"],
                password_hash=row["password_hash"],
                is_super_admin=bool(row["is_super_admin"]),
                created_at=parse_dt(row["created_at"]),
            )
        finally:
            self._close(conn)
