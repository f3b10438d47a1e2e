"""Numbered schema migrations for the seminar database.

Files live in ``seminar/migrations/`` as ``NNN_description.sql``. The
runner records every applied version in ``_schema_version``; a file is
applied once, in version order, and only if its version is above the
highest recorded one.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import NamedTuple

from seminar.storage.database import Database

logger = logging.getLogger(__name__)

MIGRATION_PATTERN = re.compile(r"^(\d{3})_.*\.sql$")
MIGRATION_DIR = Path(__file__).parent.parent / "migrations"


class Migration(NamedTuple):
    version: int
    name: str
    path: Path


def discover_migrations(migration_dir: Path = MIGRATION_DIR) -> list[Migration]:
    """Migration files in ``migration_dir`` sorted by version."""
    if not migration_dir.is_dir():
        logger.warning("Migration directory not found: %s", migration_dir)
        return []
    found = []
    for sql_file in migration_dir.glob("*.sql"):
        match = MIGRATION_PATTERN.match(sql_file.name)
        if match:
            found.append(Migration(int(match.group(1)), sql_file.name, sql_file))
    return sorted(found)


def pending_migrations(db: Database, migration_dir: Path = MIGRATION_DIR) -> list[Migration]:
    current = db.schema_version()
    return [m for m in discover_migrations(migration_dir) if m.version > current]


def apply_migrations(db: Database, migration_dir: Path = MIGRATION_DIR) -> int:
    """Apply pending migrations and return the resulting schema version.

    A failing script raises ``RuntimeError`` naming the file; versions
    applied before it stay recorded.
    """
    version = db.schema_version()
    pending = pending_migrations(db, migration_dir)
    if not pending:
        logger.debug("Schema current at v%d", version)
        return version

    for migration in pending:
        logger.info("Migrating v%d -> v%d (%s)", version, migration.version, migration.name)
        try:
            db.executescript(migration.path.read_text())
            db.execute(
                "INSERT INTO _schema_version (version, name) VALUES (?, ?)",
                (migration.version, migration.name),
            )
            db.conn.commit()
        except Exception as e:
            logger.error("Migration %s failed: %s", migration.name, e)
            raise RuntimeError(f"Migration {migration.name} failed: {e}") from e
        version = migration.version

    logger.info("Applied %d migration(s); schema at v%d", len(pending), version)
    return version


def ensure_schema(db: Database) -> int:
    """Bring ``db`` to the latest bundled schema. Returns the version."""
    return apply_migrations(db)
