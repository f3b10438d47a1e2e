"""Evaluation CLI commands: submit, list, average."""

from __future__ import annotations

import click

from seminar.cli.common import open_repository


@click.group("evaluate")
def evaluate_group() -> None:
    """Submit and inspect rubric evaluations."""
    pass


@evaluate_group.command("submit")
@click.argument("evaluator_id")
@click.argument("presenter_id")
@click.option("--clarity", "problem_clarity", type=int, required=True, help="Problem clarity score")
@click.option("--methodology", type=int, required=True, help="Methodology score")
@click.option("--results", type=int, required=True, help="Results score")
@click.option("--presentation", type=int, required=True, help="Presentation score")
@click.option("--session", "session_id", default=None, help="Session the talk was given in")
@click.option("--comments", default="", help="Free-text feedback")
@click.pass_context
def evaluate_submit(
    ctx: click.Context,
    evaluator_id: str,
    presenter_id: str,
    problem_clarity: int,
    methodology: int,
    results: int,
    presentation: int,
    session_id: str | None,
    comments: str,
) -> None:
    """Score PRESENTER_ID on behalf of EVALUATOR_ID.

    Re-submitting for the same pair replaces the earlier scores.
    """
    from seminar.engine.evaluations import EvaluationService
    from seminar.engine.models import Evaluation
    from seminar.engine.rubric import RubricScores

    with open_repository(ctx) as (config, repo):
        evaluation = Evaluation(
            presenter_id=presenter_id,
            evaluator_id=evaluator_id,
            session_id=session_id,
            scores=RubricScores(problem_clarity, methodology, results, presentation),
            comments=comments,
        )
        stored = EvaluationService(repo, config.scoring).submit_evaluation(evaluation)
        click.echo(f"{stored.evaluation_id}  total {stored.scores.total()}")


@evaluate_group.command("list")
@click.option("--presenter", "presenter_id", default=None, help="Only this presenter")
@click.option("--evaluator", "evaluator_id", default=None, help="Only this evaluator")
@click.pass_context
def evaluate_list(ctx: click.Context, presenter_id: str | None, evaluator_id: str | None) -> None:
    """List submitted evaluations."""
    from seminar.engine.evaluations import EvaluationService

    with open_repository(ctx) as (config, repo):
        evaluations = EvaluationService(repo, config.scoring).list_evaluations()
        if presenter_id:
            evaluations = [e for e in evaluations if e.presenter_id == presenter_id]
        if evaluator_id:
            evaluations = [e for e in evaluations if e.evaluator_id == evaluator_id]
        if not evaluations:
            click.echo("No evaluations submitted.")
            return
        for e in evaluations:
            s = e.scores
            click.echo(
                f"  {e.evaluation_id}  {e.evaluator_id} -> {e.presenter_id}  "
                f"[{s.problem_clarity}/{s.methodology}/{s.results}/{s.presentation}] = {s.total()}"
            )


@evaluate_group.command("average")
@click.argument("presenter_id")
@click.pass_context
def evaluate_average(ctx: click.Context, presenter_id: str) -> None:
    """Average rubric total for PRESENTER_ID."""
    from seminar.engine.evaluations import EvaluationService

    with open_repository(ctx) as (config, repo):
        service = EvaluationService(repo, config.scoring)
        count = len(service.evaluations_for_presenter(presenter_id))
        average = service.calculate_average_score(presenter_id)
        click.echo(f"{presenter_id}: {average:.2f} ({count} evaluation(s))")
