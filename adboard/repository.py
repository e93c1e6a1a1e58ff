"""Storage of ads and users, in memory or in an SQLite database."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import replace
from datetime import datetime
from types import TracebackType

from adboard.models import Ad, AdFilter, User

TITLE_LIMIT = 100
TEXT_LIMIT = 500


class RepositoryError(Exception):
    """Base class for storage errors."""

    default_message = "repository error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotAuthorError(RepositoryError):
    """The user is not the author of the ad."""

    default_message = "not author"


class ValidationError(RepositoryError):
    """Title or text of an ad is empty or too long."""

    default_message = "validation error"


class NotCreatedError(RepositoryError):
    """The requested ad or user does not exist."""

    default_message = "not created"


class WasDeletedError(RepositoryError):
    """The object has already been deleted."""

    default_message = "has been already deleted"


def validate(title: str, text: str) -> bool:
    """Check that title and text are non-empty and shorter than their limits in bytes."""
    return (
        title != ""
        and len(title.encode("utf-8")) < TITLE_LIMIT
        and text != ""
        and len(text.encode("utf-8")) < TEXT_LIMIT
    )


class MemoryRepository:
    """Thread-safe in-memory storage; ids start at 0."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ads: dict[int, Ad] = {}
        self._users: dict[int, User] = {}
        self._next_ad_id = 0
        self._next_user_id = 0

    def _owned_ad(self, ad_id: int, user_id: int) -> Ad:
        ad = self._ads.get(ad_id)
        if ad is None:
            raise NotCreatedError()
        if ad.author_id != user_id:
            raise NotAuthorError()
        return ad

    def create(self, title: str, text: str, user_id: int) -> Ad:
        with self._lock:
            if not validate(title, text):
                raise ValidationError()
            now = datetime.now()
            ad = Ad(
                id=self._next_ad_id,
                title=title,
                text=text,
                author_id=user_id,
                date_created=now,
                date_updated=now,
            )
            self._ads[ad.id] = ad
            self._next_ad_id += 1
            return replace(ad)

    def update_published(self, ad_id: int, user_id: int, published: bool) -> Ad:
        with self._lock:
            ad = self._owned_ad(ad_id, user_id)
            ad.published = published
            ad.date_updated = datetime.now()
            return replace(ad)

    def update_text_and_title(self, ad_id: int, user_id: int, title: str, text: str) -> Ad:
        with self._lock:
            if not validate(title, text):
                raise ValidationError()
            ad = self._owned_ad(ad_id, user_id)
            ad.title = title
            ad.text = text
            ad.date_updated = datetime.now()
            return replace(ad)

    def get_list(self, ad_filter: AdFilter) -> list[Ad]:
        with self._lock:
            return [
                replace(ad)
                for _, ad in sorted(self._ads.items())
                if ad_filter.matches(ad)
            ]

    def get_by_id(self, ad_id: int) -> Ad:
        with self._lock:
            ad = self._ads.get(ad_id)
            if ad is None:
                raise NotCreatedError()
            return replace(ad)

    def delete_ad(self, ad_id: int, user_id: int) -> None:
        with self._lock:
            self._owned_ad(ad_id, user_id)
            del self._ads[ad_id]

    def create_user(self, name: str) -> User:
        with self._lock:
            user = User(id=self._next_user_id, name=name)
            self._users[user.id] = user
            self._next_user_id += 1
            return replace(user)

    def get_user(self, user_id: int) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotCreatedError()
            return replace(user)

    def delete_user(self, user_id: int) -> None:
        with self._lock:
            self._users.pop(user_id, None)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS adds (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    text TEXT NOT NULL,
    author_id INTEGER NOT NULL,
    published INTEGER NOT NULL DEFAULT 0,
    date_created TEXT NOT NULL,
    date_updated TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);
"""

_AD_COLUMNS = "id, title, text, author_id, published, date_created, date_updated"


def _row_to_ad(row: sqlite3.Row) -> Ad:
    return Ad(
        id=row["id"],
        title=row["title"],
        text=row["text"],
        author_id=row["author_id"],
        published=bool(row["published"]),
        date_created=datetime.fromisoformat(row["date_created"]),
        date_updated=datetime.fromisoformat(row["date_updated"]),
    )


class SqliteRepository:
    """Thread-safe storage in an SQLite database; the schema is created on open."""

    def __init__(self, path: str = ":memory:") -> None:
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._conn:
            self._conn.executescript(_SCHEMA)

    def __enter__(self) -> SqliteRepository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _fetch_ad(self, ad_id: int) -> Ad | None:
        row = self._conn.execute(
            f"SELECT {_AD_COLUMNS} FROM adds WHERE id = ?", (ad_id,)
        ).fetchone()
        return _row_to_ad(row) if row is not None else None

    def _check_author(self, ad_id: int, user_id: int) -> None:
        row = self._conn.execute(
            "SELECT author_id FROM adds WHERE id = ?", (ad_id,)
        ).fetchone()
        if row is None:
            raise NotCreatedError()
        if row["author_id"] != user_id:
            raise NotAuthorError()

    def create(self, title: str, text: str, user_id: int) -> Ad:
        with self._lock:
            if not validate(title, text):
                raise ValidationError()
            now = datetime.now().isoformat()
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        "INSERT INTO adds(title, text, author_id, published, date_created, date_updated)"
                        " VALUES(?, ?, ?, 0, ?, ?)",
                        (title, text, user_id, now, now),
                    )
            except sqlite3.Error as exc:
                raise RepositoryError(f"unable to create ad: {exc}") from exc
            ad = self._fetch_ad(cursor.lastrowid)
            if ad is None:
                raise RepositoryError("unable to create ad")
            return ad

    def update_published(self, ad_id: int, user_id: int, published: bool) -> Ad:
        with self._lock:
            self._check_author(ad_id, user_id)
            try:
                with self._conn:
                    self._conn.execute(
                        "UPDATE adds SET published = ?, date_updated = ? WHERE id = ?",
                        (int(published), datetime.now().isoformat(), ad_id),
                    )
            except sqlite3.Error as exc:
                raise RepositoryError(f"unable to update published ad: {exc}") from exc
            ad = self._fetch_ad(ad_id)
            if ad is None:
                raise NotCreatedError()
            return ad

    def update_text_and_title(self, ad_id: int, user_id: int, title: str, text: str) -> Ad:
        with self._lock:
            if not validate(title, text):
                raise ValidationError()
            self._check_author(ad_id, user_id)
            try:
                with self._conn:
                    self._conn.execute(
                        "UPDATE adds SET title = ?, text = ?, date_updated = ? WHERE id = ?",
                        (title, text, datetime.now().isoformat(), ad_id),
                    )
            except sqlite3.Error as exc:
                raise RepositoryError(f"unable to update ad: {exc}") from exc
            ad = self._fetch_ad(ad_id)
            if ad is None:
                raise NotCreatedError()
            return ad

    def get_list(self, ad_filter: AdFilter) -> list[Ad]:
        conditions: list[str] = []
        params: list[object] = []
        if ad_filter.pub:
            conditions.append("published = 1")
        if ad_filter.auth != -1:
            conditions.append("author_id = ?")
            params.append(ad_filter.auth)
        if ad_filter.title:
            conditions.append("title = ?")
            params.append(ad_filter.title)
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_AD_COLUMNS} FROM adds{where} ORDER BY id", params
            ).fetchall()
        return [_row_to_ad(row) for row in rows]

    def get_by_id(self, ad_id: int) -> Ad:
        with self._lock:
            ad = self._fetch_ad(ad_id)
        if ad is None:
            raise NotCreatedError()
        return ad

    def delete_ad(self, ad_id: int, user_id: int) -> None:
        with self._lock:
            self._check_author(ad_id, user_id)
            try:
                with self._conn:
                    self._conn.execute("DELETE FROM adds WHERE id = ?", (ad_id,))
            except sqlite3.Error as exc:
                raise RepositoryError(f"unable to delete ad: {exc}") from exc

    def create_user(self, name: str) -> User:
        with self._lock:
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        "INSERT INTO users(name) VALUES(?)", (name,)
                    )
            except sqlite3.Error as exc:
                raise RepositoryError(f"unable to create user: {exc}") from exc
            return User(id=cursor.lastrowid, name=name)

    def get_user(self, user_id: int) -> User:
        with self._lock:
            row = self._conn.execute(
                "SELECT id, name FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if row is None:
            raise NotCreatedError()
        return User(id=row["id"], name=row["name"])

    def delete_user(self, user_id: int) -> None:
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            except sqlite3.Error as exc:
                raise NotCreatedError() from exc