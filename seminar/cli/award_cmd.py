"""Award CLI commands: compute, list, clear, agenda."""

from __future__ import annotations

import click

from seminar.cli.common import open_repository


def _services(config, repo):
    from seminar.engine.awards import AwardService
    from seminar.engine.evaluations import EvaluationService

    return AwardService(repo, EvaluationService(repo, config.scoring))


@click.group("awards")
def award_group() -> None:
    """Compute and review ceremony awards."""
    pass


@award_group.command("compute")
@click.option("--with-votes", is_flag=True, help="Include People's Choice from recorded votes")
@click.option("--fresh", is_flag=True, help="Clear previously computed awards first")
@click.option("--title", default="RESEARCH SEMINAR", help="Agenda banner title")
@click.pass_context
def awards_compute(ctx: click.Context, with_votes: bool, fresh: bool, title: str) -> None:
    """Compute winners, persist them and print the ceremony agenda."""
    from seminar.engine.voting import tally_votes
    from seminar.output.agenda import format_agenda

    with open_repository(ctx) as (config, repo):
        service = _services(config, repo)
        if fresh:
            service.clear_awards()
        votes = tally_votes(repo) if with_votes else None
        agenda = service.generate_agenda(votes)
        click.echo(format_agenda(agenda, title=title), nl=False)


@award_group.command("list")
@click.pass_context
def awards_list(ctx: click.Context) -> None:
    """List persisted awards in the order they were computed."""
    with open_repository(ctx) as (config, repo):
        awards = _services(config, repo).list_awards()
        if not awards:
            click.echo("No awards computed.")
            return
        for a in awards:
            click.echo(f"  {a.award_type.display_name:28s}  {a.winner_id}  {a.score:.2f}")


@award_group.command("clear")
@click.pass_context
def awards_clear(ctx: click.Context) -> None:
    """Delete all persisted awards."""
    with open_repository(ctx) as (config, repo):
        _services(config, repo).clear_awards()
        click.echo("Awards cleared.")


@award_group.command("agenda")
@click.option("--title", default="RESEARCH SEMINAR", help="Agenda banner title")
@click.pass_context
def awards_agenda(ctx: click.Context, title: str) -> None:
    """Print the agenda from persisted awards without recomputing."""
    from seminar.engine.models import CeremonyAgenda
    from seminar.output.agenda import format_agenda

    with open_repository(ctx) as (config, repo):
        agenda = CeremonyAgenda()
        for award in _services(config, repo).list_awards():
            agenda.add_award(award)
        click.echo(format_agenda(agenda, title=title), nl=False)
