"""Session CLI commands: create, update, delete, list, assignment."""

from __future__ import annotations

from datetime import datetime

import click

from seminar.cli.common import CATEGORY, DATE, open_repository


def _service(config, repo):
    from seminar.engine.sessions import SessionService

    return SessionService(repo, config.sessions)


@click.group("session")
def session_group() -> None:
    """Schedule sessions and assign participants."""
    pass


@session_group.command("create")
@click.argument("day", type=DATE)
@click.argument("venue")
@click.option("--category", "-c", type=CATEGORY, required=True, help="oral or poster")
@click.pass_context
def session_create(ctx: click.Context, day: datetime, venue: str, category: str) -> None:
    """Create a session on DAY (YYYY-MM-DD) at VENUE."""
    from seminar.engine.models import Category

    with open_repository(ctx) as (config, repo):
        session = _service(config, repo).create_session(day.date(), venue, Category.parse(category))
        click.echo(session.session_id)


@session_group.command("update")
@click.argument("session_id")
@click.option("--date", "day", type=DATE, default=None, help="New date")
@click.option("--venue", default=None, help="New venue")
@click.option("--category", "-c", type=CATEGORY, default=None, help="New category")
@click.pass_context
def session_update(
    ctx: click.Context,
    session_id: str,
    day: datetime | None,
    venue: str | None,
    category: str | None,
) -> None:
    """Change a session's date, venue or category."""
    from seminar.engine.models import Category
    from seminar.errors import NotFoundError

    with open_repository(ctx) as (config, repo):
        service = _service(config, repo)
        session = service.get_session(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)
        if day is not None:
            session.date = day.date()
        if venue is not None:
            session.venue = venue
        if category is not None:
            session.category = Category.parse(category)
        service.update_session(session)
        click.echo(f"Updated {session_id}")


@session_group.command("delete")
@click.argument("session_id")
@click.pass_context
def session_delete(ctx: click.Context, session_id: str) -> None:
    """Delete a session and unlink its evaluators."""
    with open_repository(ctx) as (config, repo):
        _service(config, repo).delete_session(session_id)
        click.echo(f"Deleted {session_id}")


@session_group.command("list")
@click.option("--date", "day", type=DATE, default=None, help="Only sessions on this date")
@click.pass_context
def session_list(ctx: click.Context, day: datetime | None) -> None:
    """List sessions with participant counts."""
    with open_repository(ctx) as (config, repo):
        service = _service(config, repo)
        sessions = service.sessions_on(day.date()) if day else service.list_sessions()
        if not sessions:
            click.echo("No sessions scheduled.")
            return
        for s in sessions:
            click.echo(
                f"  {s.session_id}  {s.date.isoformat()}  {s.category.value:6s}  {s.venue}  "
                f"presenters={len(s.presenter_ids)} evaluators={len(s.evaluator_ids)}"
            )


@session_group.command("assign-presenter")
@click.argument("session_id")
@click.argument("presenter_id")
@click.pass_context
def session_assign_presenter(ctx: click.Context, session_id: str, presenter_id: str) -> None:
    """Book PRESENTER_ID into SESSION_ID."""
    with open_repository(ctx) as (config, repo):
        _service(config, repo).assign_presenter(session_id, presenter_id)
        click.echo(f"Assigned presenter {presenter_id} to {session_id}")


@session_group.command("assign-evaluator")
@click.argument("session_id")
@click.argument("evaluator_id")
@click.pass_context
def session_assign_evaluator(ctx: click.Context, session_id: str, evaluator_id: str) -> None:
    """Book EVALUATOR_ID into SESSION_ID."""
    with open_repository(ctx) as (config, repo):
        _service(config, repo).assign_evaluator(session_id, evaluator_id)
        click.echo(f"Assigned evaluator {evaluator_id} to {session_id}")


@session_group.command("remove-presenter")
@click.argument("session_id")
@click.argument("presenter_id")
@click.pass_context
def session_remove_presenter(ctx: click.Context, session_id: str, presenter_id: str) -> None:
    """Remove PRESENTER_ID from SESSION_ID (no-op if absent)."""
    with open_repository(ctx) as (config, repo):
        _service(config, repo).remove_presenter(session_id, presenter_id)
        click.echo(f"Removed presenter {presenter_id} from {session_id}")


@session_group.command("remove-evaluator")
@click.argument("session_id")
@click.argument("evaluator_id")
@click.pass_context
def session_remove_evaluator(ctx: click.Context, session_id: str, evaluator_id: str) -> None:
    """Remove EVALUATOR_ID from SESSION_ID (no-op if absent)."""
    with open_repository(ctx) as (config, repo):
        _service(config, repo).remove_evaluator(session_id, evaluator_id)
        click.echo(f"Removed evaluator {evaluator_id} from {session_id}")


@session_group.command("conflicts")
@click.argument("participant_id")
@click.argument("day", type=DATE)
@click.pass_context
def session_conflicts(ctx: click.Context, participant_id: str, day: datetime) -> None:
    """Show where PARTICIPANT_ID is already booked on DAY."""
    with open_repository(ctx) as (config, repo):
        clashes = _service(config, repo).find_conflicts(participant_id, day.date())
        if not clashes:
            click.echo(f"{participant_id} is free on {day.date().isoformat()}")
            return
        for s in clashes:
            role = "presenter" if participant_id in s.presenter_ids else "evaluator"
            click.echo(f"  {s.session_id}  {s.venue}  as {role}")
