"""Persistence: repository interface, in-memory and SQLite implementations."""

from seminar.storage.database import Database
from seminar.storage.migrations import ensure_schema
from seminar.storage.repository import InMemoryRepository, Repository
from seminar.storage.sqlite_repository import SqliteRepository

__all__ = [
    "Database",
    "InMemoryRepository",
    "Repository",
    "SqliteRepository",
    "ensure_schema",
]
