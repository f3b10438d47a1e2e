"""Report CLI commands: schedule, evaluations, summary."""

from __future__ import annotations

import click

from seminar.cli.common import open_repository

_OUTPUT = click.option(
    "--output", "-o", type=click.Path(dir_okay=False), default=None,
    help="Also write the report to this file",
)


def _emit(content: str, output: str | None) -> None:
    from seminar.output.reports import export_report

    click.echo(content, nl=False)
    if output:
        path = export_report(content, output)
        click.echo(f"Report saved to {path}", err=True)


@click.group("report")
def report_group() -> None:
    """Plain-text seminar reports."""
    pass


@report_group.command("schedule")
@_OUTPUT
@click.pass_context
def report_schedule(ctx: click.Context, output: str | None) -> None:
    """Sessions by date with their presenters and evaluators."""
    from seminar.output.reports import schedule_report

    with open_repository(ctx) as (_, repo):
        _emit(schedule_report(repo), output)


@report_group.command("evaluations")
@_OUTPUT
@click.pass_context
def report_evaluations(ctx: click.Context, output: str | None) -> None:
    """Every evaluation with per-criterion scores."""
    from seminar.output.reports import evaluation_report

    with open_repository(ctx) as (_, repo):
        _emit(evaluation_report(repo), output)


@report_group.command("summary")
@_OUTPUT
@click.pass_context
def report_summary(ctx: click.Context, output: str | None) -> None:
    """Headline counts and the overall average score."""
    from seminar.output.reports import summary_report

    with open_repository(ctx) as (_, repo):
        _emit(summary_report(repo), output)
