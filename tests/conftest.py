"""Shared test fixtures for the seminar engine.

Provides repositories (in-memory and SQLite), wired services, and a small
registered cast of presenters and evaluators.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from seminar.config.schema import SeminarConfig
from seminar.engine.awards import AwardService
from seminar.engine.boards import BoardService
from seminar.engine.evaluations import EvaluationService
from seminar.engine.models import Category
from seminar.engine.registry import register_evaluator, register_presenter
from seminar.engine.sessions import SessionService
from seminar.storage.database import Database
from seminar.storage.migrations import ensure_schema
from seminar.storage.repository import InMemoryRepository
from seminar.storage.sqlite_repository import SqliteRepository

# ---------------------------------------------------------------------------
# Core infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def test_config(tmp_path: Path) -> SeminarConfig:
    """Minimal config with temp database path."""
    return SeminarConfig(
        database={"path": str(tmp_path / "test.db")},
        output={"report_dir": str(tmp_path / "reports")},
    )


@pytest.fixture
def test_db(tmp_path: Path) -> Database:
    """Database with schema applied, using temp file."""
    db = Database(tmp_path / "test.db")
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture
def memory_db() -> Database:
    """In-memory database for fast storage tests."""
    db = Database(":memory:")
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def sqlite_repo(test_db) -> SqliteRepository:
    return SqliteRepository(test_db)


@pytest.fixture(params=["memory", "sqlite"])
def any_repo(request, tmp_path):
    """Each test using this runs once per repository backend."""
    if request.param == "memory":
        yield InMemoryRepository()
        return
    db = Database(tmp_path / "param.db")
    ensure_schema(db)
    yield SqliteRepository(db)
    db.close()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.fixture
def sessions(repo) -> SessionService:
    return SessionService(repo)


@pytest.fixture
def evaluations(repo) -> EvaluationService:
    return EvaluationService(repo)


@pytest.fixture
def boards(repo) -> BoardService:
    return BoardService(repo)


@pytest.fixture
def awards(repo, evaluations) -> AwardService:
    return AwardService(repo, evaluations)


# ---------------------------------------------------------------------------
# Registered cast
# ---------------------------------------------------------------------------

@pytest.fixture
def oral_presenters(repo) -> list[str]:
    """Three oral presenters, registration order Alice, Bob, Chen."""
    return [
        register_presenter(repo, name, Category.ORAL).presenter_id
        for name in ("Alice", "Bob", "Chen")
    ]


@pytest.fixture
def poster_presenters(repo) -> list[str]:
    """Two poster presenters, registration order Dana, Eli."""
    return [
        register_presenter(repo, name, Category.POSTER).presenter_id
        for name in ("Dana", "Eli")
    ]


@pytest.fixture
def evaluator_ids(repo) -> list[str]:
    """Three evaluators."""
    return [register_evaluator(repo, name).evaluator_id for name in ("Prof. X", "Dr. Y", "Dr. Z")]
