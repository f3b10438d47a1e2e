"""``seminar config``: inspect, check and scaffold seminar.yaml."""

from __future__ import annotations

import click


@click.group("config")
def config_group() -> None:
    """Inspect or create the seminar configuration."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective settings as YAML."""
    import yaml

    from seminar.config.loader import load_config

    config = load_config(ctx.obj.get("config_path"))
    click.echo(yaml.safe_dump(config.model_dump(), sort_keys=False), nl=False)


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Check seminar.yaml and report the database's migration state."""
    from pydantic import ValidationError as PydanticValidationError
    from yaml import YAMLError

    from seminar.config.loader import load_config, resolve_path
    from seminar.storage.database import Database
    from seminar.storage.migrations import pending_migrations

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (PydanticValidationError, YAMLError) as e:
        click.echo(f"Config validation failed: {e}", err=True)
        raise SystemExit(1) from None

    click.echo("Config is valid.")
    click.echo(f"  Version: {config.version}")
    click.echo(f"  Score range: {config.scoring.min_score}-{config.scoring.max_score}")
    click.echo(f"  Poster boards: {config.boards.count} ({config.boards.prefix}...)")

    db_path = resolve_path(config.database.path)
    if not db_path.exists():
        click.echo(f"  Database: {db_path} (not created, run `seminar init`)")
        return
    with Database(db_path) as db:
        pending = pending_migrations(db)
        click.echo(f"  Database: {db_path} (schema v{db.schema_version()})")
    if pending:
        names = ", ".join(m.name for m in pending)
        click.echo(f"  Pending migrations: {names}")


@config_group.command("init")
@click.argument("path", type=click.Path(dir_okay=False), default="seminar.yaml")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: str, force: bool) -> None:
    """Write a starter seminar.yaml with every default spelled out."""
    from pathlib import Path

    from seminar.config.loader import write_config
    from seminar.config.schema import SeminarConfig

    if Path(path).expanduser().exists() and not force:
        click.echo(f"Error: {path} already exists (use --force to overwrite)", err=True)
        raise SystemExit(1)
    written = write_config(SeminarConfig(), path)
    click.echo(f"Wrote {written}")
