from __future__ import annotations

import asyncio
import os
import sqlite3
from dataclasses import dataclass, fields, replace
from threading import Lock
from typing import Callable, Dict, Generic, List, Optional, Protocol, Sequence, Type, TypeVar


@dataclass
class User:
    username: str
    email: str
    password_hash: str
    created_at: float
    id: int = 0


@dataclass
class Post:
    title: str
    body: str
    created_at: float
    id: int = 0


@dataclass
class Comment:
    body: str
    post_id: int
    created_at: float
    id: int = 0


@dataclass
class AccessToken:
    token: str
    user_id: int
    expires_at: float
    id: int = 0


E = TypeVar("E", User, Post, Comment, AccessToken)


class Table(Protocol[E]):
    async def first(self, predicate: Callable[[E], bool]) -> Optional[E]: ...
    async def all(self) -> List[E]: ...
    async def add(self, entity: E) -> E: ...
    async def update(self, entity: E) -> E: ...
    async def delete(self, entity: E) -> None: ...


class Store(Protocol):
    users: Table[User]
    posts: Table[Post]
    comments: Table[Comment]
    tokens: Table[AccessToken]


class MemoryTable(Generic[E]):
    """Dict-backed table. Entities are copied in and out so callers never
    mutate stored rows without calling ``update``."""

    def __init__(self) -> None:
        self._rows: Dict[int, E] = {}
        self._next_id = 1
        self._lock = Lock()

    async def first(self, predicate: Callable[[E], bool]) -> Optional[E]:
        with self._lock:
            rows = list(self._rows.values())
        for row in rows:
            if predicate(row):
                return replace(row)
        return None

    async def all(self) -> List[E]:
        with self._lock:
            return [replace(row) for row in self._rows.values()]

    async def add(self, entity: E) -> E:
        with self._lock:
            entity.id = self._next_id
            self._next_id += 1
            self._rows[entity.id] = replace(entity)
        return entity

    async def update(self, entity: E) -> E:
        with self._lock:
            if entity.id not in self._rows:
                raise KeyError(f"no row with id {entity.id}")
            self._rows[entity.id] = replace(entity)
        return entity

    async def delete(self, entity: E) -> None:
        with self._lock:
            self._rows.pop(entity.id, None)


class MemoryStore:
    def __init__(self) -> None:
        self.users: MemoryTable[User] = MemoryTable()
        self.posts: MemoryTable[Post] = MemoryTable()
        self.comments: MemoryTable[Comment] = MemoryTable()
        self.tokens: MemoryTable[AccessToken] = MemoryTable()


class SQLiteTable(Generic[E]):
    """One table of a SQLiteStore. Blocking sqlite3 calls run in a worker
    thread; predicates are evaluated in Python over the mapped rows."""

    def __init__(self, store: "SQLiteStore", name: str, entity_type: Type[E]) -> None:
        self._store = store
        self.name = name
        self.entity_type = entity_type
        self.columns: Sequence[str] = [f.name for f in fields(entity_type) if f.name != "id"]

    def _load(self) -> List[E]:
        cols = ", ".join(["id", *self.columns])
        with self._store._connect() as conn:
            rows = conn.execute(f"SELECT {cols} FROM {self.name} ORDER BY id").fetchall()
        return [self.entity_type(**dict(row)) for row in rows]

    def _values(self, entity: E) -> tuple:
        return tuple(getattr(entity, c) for c in self.columns)

    def _insert(self, entity: E) -> E:
        cols = ", ".join(self.columns)
        marks = ", ".join("?" for _ in self.columns)
        with self._store._connect() as conn:
            cur = conn.execute(
                f"INSERT INTO {self.name}({cols}) VALUES ({marks})", self._values(entity)
            )
            conn.commit()
            entity.id = int(cur.lastrowid)
        return entity

    def _update(self, entity: E) -> E:
        assignments = ", ".join(f"{c} = ?" for c in self.columns)
        with self._store._connect() as conn:
            cur = conn.execute(
                f"UPDATE {self.name} SET {assignments} WHERE id = ?",
                (*self._values(entity), entity.id),
            )
            conn.commit()
            if cur.rowcount == 0:
                raise KeyError(f"no row with id {entity.id}")
        return entity

    def _delete(self, entity_id: int) -> None:
        with self._store._connect() as conn:
            conn.execute(f"DELETE FROM {self.name} WHERE id = ?", (entity_id,))
            conn.commit()

    async def first(self, predicate: Callable[[E], bool]) -> Optional[E]:
        rows = await asyncio.to_thread(self._load)
        return next((row for row in rows if predicate(row)), None)

    async def all(self) -> List[E]:
        return await asyncio.to_thread(self._load)

    async def add(self, entity: E) -> E:
        return await asyncio.to_thread(self._insert, entity)

    async def update(self, entity: E) -> E:
        return await asyncio.to_thread(self._update, entity)

    async def delete(self, entity: E) -> None:
        await asyncio.to_thread(self._delete, entity.id)


class SQLiteStore:
    def __init__(self, path: str) -> None:
        self.path = path
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._init_db()
        self.users: SQLiteTable[User] = SQLiteTable(self, "users", User)
        self.posts: SQLiteTable[Post] = SQLiteTable(self, "posts", Post)
        self.comments: SQLiteTable[Comment] = SQLiteTable(self, "comments", Comment)
        self.tokens: SQLiteTable[AccessToken] = SQLiteTable(self, "tokens", AccessToken)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS posts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS comments (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    body TEXT NOT NULL,
                    post_id INTEGER NOT NULL,
                    created_at REAL NOT NULL,
                    FOREIGN KEY(post_id) REFERENCES posts(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tokens (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    token TEXT NOT NULL UNIQUE,
                    user_id INTEGER NOT NULL,
                    expires_at REAL NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_comments_post_id ON comments(post_id);")
            conn.commit()


def make_store(storage: str, sqlite_path: str) -> Store:
    if storage == "sqlite":
        return SQLiteStore(sqlite_path)
    return MemoryStore()
