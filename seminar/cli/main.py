"""``seminar`` command: global options and subcommand registration."""

from __future__ import annotations

import logging

import click

from seminar import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="seminar")
@click.option(
    "--config",
    type=click.Path(),
    default=None,
    envvar="SEMINAR_CONFIG",
    help="seminar.yaml to use instead of the default search path",
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine decisions at DEBUG")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Seminar -- session scheduling, rubric scoring and awards."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


from seminar.cli.award_cmd import award_group  # noqa: E402
from seminar.cli.board_cmd import board_group  # noqa: E402
from seminar.cli.config_cmd import config_group  # noqa: E402
from seminar.cli.evaluate_cmd import evaluate_group  # noqa: E402
from seminar.cli.people_cmd import evaluator_group, presenter_group, vote_group  # noqa: E402
from seminar.cli.report_cmd import report_group  # noqa: E402
from seminar.cli.session_cmd import session_group  # noqa: E402

for name, group in (
    ("awards", award_group),
    ("board", board_group),
    ("config", config_group),
    ("evaluate", evaluate_group),
    ("evaluator", evaluator_group),
    ("presenter", presenter_group),
    ("report", report_group),
    ("session", session_group),
    ("vote", vote_group),
):
    cli.add_command(group, name)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the database and report directory, or bring them up to date."""
    from seminar.config.loader import load_config, resolve_path
    from seminar.storage.database import Database
    from seminar.storage.migrations import ensure_schema, pending_migrations

    config = load_config(ctx.obj.get("config_path"))

    report_dir = resolve_path(config.output.report_dir)
    report_dir.mkdir(parents=True, exist_ok=True)
    db_path = resolve_path(config.database.path)
    fresh = not db_path.exists()

    with Database(db_path) as db:
        applied = len(pending_migrations(db))
        version = ensure_schema(db)
        counts = db.table_counts()

    click.echo(f"  Report directory: {report_dir}")
    click.echo(f"  Database: {db_path}{' (new)' if fresh else ''}")
    click.echo(f"  Schema version: {version} ({applied} migration(s) applied)")

    if any(counts.values()):
        click.echo("  Existing data:")
        for table, n in counts.items():
            click.echo(f"    {table}: {n}")
        return

    click.echo("\nSeminar initialized. Next steps:")
    click.echo("  1. seminar presenter add \"Name\" --category oral")
    click.echo("  2. seminar evaluator add \"Name\"")
    click.echo("  3. seminar session create 2026-03-14 \"Hall A\" --category oral")
