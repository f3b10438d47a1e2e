"""Participant CLI commands: presenter, evaluator, vote."""

from __future__ import annotations

import click

from seminar.cli.common import CATEGORY, open_repository


@click.group("presenter")
def presenter_group() -> None:
    """Register and list presenters."""
    pass


@presenter_group.command("add")
@click.argument("name")
@click.option("--category", "-c", type=CATEGORY, required=True, help="oral or poster")
@click.option("--title", default="", help="Research title")
@click.option("--supervisor", default="", help="Supervisor name")
@click.pass_context
def presenter_add(ctx: click.Context, name: str, category: str, title: str, supervisor: str) -> None:
    """Register a presenter and print the allocated presenter id."""
    from seminar.engine.models import Category
    from seminar.engine.registry import register_presenter

    with open_repository(ctx) as (_, repo):
        presenter = register_presenter(
            repo, name, Category.parse(category),
            research_title=title, supervisor=supervisor,
        )
        click.echo(presenter.presenter_id)


@presenter_group.command("list")
@click.pass_context
def presenter_list(ctx: click.Context) -> None:
    """List presenters in registration order."""
    with open_repository(ctx) as (_, repo):
        presenters = repo.list_presenters()
        if not presenters:
            click.echo("No presenters registered.")
            return
        for p in presenters:
            category = p.category.value if p.category else "-"
            click.echo(f"  {p.presenter_id}  {category:6s}  {p.name}  (votes: {p.vote_count})")


@presenter_group.command("category")
@click.argument("presenter_id")
@click.argument("category", type=CATEGORY)
@click.pass_context
def presenter_category(ctx: click.Context, presenter_id: str, category: str) -> None:
    """Change an unscheduled presenter's category."""
    from seminar.engine.models import Category
    from seminar.engine.registry import change_presenter_category

    with open_repository(ctx) as (_, repo):
        presenter = change_presenter_category(repo, presenter_id, Category.parse(category))
        click.echo(f"{presenter.presenter_id} is now {presenter.category.value}")


@click.group("evaluator")
def evaluator_group() -> None:
    """Register and list evaluators."""
    pass


@evaluator_group.command("add")
@click.argument("name")
@click.pass_context
def evaluator_add(ctx: click.Context, name: str) -> None:
    """Register an evaluator and print the allocated evaluator id."""
    from seminar.engine.registry import register_evaluator

    with open_repository(ctx) as (_, repo):
        click.echo(register_evaluator(repo, name).evaluator_id)


@evaluator_group.command("list")
@click.pass_context
def evaluator_list(ctx: click.Context) -> None:
    """List evaluators with their assigned sessions."""
    with open_repository(ctx) as (_, repo):
        evaluators = repo.list_evaluators()
        if not evaluators:
            click.echo("No evaluators registered.")
            return
        for e in evaluators:
            sessions = ", ".join(e.assigned_session_ids) or "none"
            click.echo(f"  {e.evaluator_id}  {e.name}  sessions: {sessions}")


@click.group("vote")
def vote_group() -> None:
    """People's Choice voting."""
    pass


@vote_group.command("cast")
@click.argument("voter_id")
@click.argument("candidate_id")
@click.pass_context
def vote_cast(ctx: click.Context, voter_id: str, candidate_id: str) -> None:
    """Record VOTER_ID's vote for CANDIDATE_ID."""
    from seminar.engine.voting import cast_vote

    with open_repository(ctx) as (_, repo):
        count = cast_vote(repo, voter_id, candidate_id)
        click.echo(f"Vote recorded. {candidate_id} now has {count} vote(s).")


@vote_group.command("tally")
@click.pass_context
def vote_tally(ctx: click.Context) -> None:
    """Show current vote counts."""
    from seminar.engine.voting import tally_votes

    with open_repository(ctx) as (_, repo):
        tally = tally_votes(repo)
        if not tally:
            click.echo("No votes cast.")
        for presenter_id, count in tally.items():
            click.echo(f"  {presenter_id}  {count}")
