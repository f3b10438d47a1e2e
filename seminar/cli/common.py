"""Shared CLI plumbing: repository opening and error reporting."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import click

from seminar.errors import SeminarError

DATE = click.DateTime(formats=["%Y-%m-%d"])
CATEGORY = click.Choice(["oral", "poster"], case_sensitive=False)


@contextmanager
def open_repository(ctx: click.Context) -> Generator[tuple, None, None]:
    """Yield ``(config, repo)`` backed by the configured SQLite database.

    Engine errors are reported on stderr and end the command with exit code 1.
    """
    from seminar.config.loader import load_config, resolve_path
    from seminar.storage.database import Database
    from seminar.storage.migrations import ensure_schema
    from seminar.storage.sqlite_repository import SqliteRepository

    config = load_config(ctx.obj.get("config_path"))
    with Database(resolve_path(config.database.path)) as db:
        ensure_schema(db)
        try:
            yield config, SqliteRepository(db)
        except SeminarError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None
