"""Schedule, evaluation and summary reports.

Each builder reads the repository and returns plain text; ``export_report``
writes it to disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from seminar.config.defaults import RUBRIC_LABELS
from seminar.engine.models import Category

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)

RULE = "=" * 43
THIN_RULE = "-" * 43


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _header(title: str) -> list[str]:
    return [RULE, f"         {title}", RULE, ""]


def _names(repo: Repository) -> tuple[dict[str, str], dict[str, str]]:
    """Display names keyed by presenter id and evaluator id."""
    presenters = {p.presenter_id: p.name or p.presenter_id for p in repo.list_presenters()}
    evaluators = {e.evaluator_id: e.name or e.evaluator_id for e in repo.list_evaluators()}
    return presenters, evaluators


def _people(label: str, ids: list[str], names: dict[str, str]) -> list[str]:
    if not ids:
        return [f"  {label}: None assigned"]
    return [f"  {label}:"] + [f"    - {names.get(i, i)}" for i in ids]


# ---------------------------------------------------------------------------
# Report builders
# ---------------------------------------------------------------------------

def schedule_report(repo: Repository) -> str:
    """Every session with its presenters and evaluators, by date."""
    presenters, evaluators = _names(repo)
    lines = _header("SEMINAR SCHEDULE REPORT")

    sessions = sorted(repo.list_sessions(), key=lambda s: s.date)
    if not sessions:
        lines.append("No sessions scheduled.")
    for session in sessions:
        lines += [
            f"Session: {session.session_id}",
            f"  Date: {session.date.isoformat()}",
            f"  Venue: {session.venue}",
            f"  Type: {session.category.value}",
        ]
        lines += _people("Presenters", session.presenter_ids, presenters)
        lines += _people("Evaluators", session.evaluator_ids, evaluators)
        lines.append("")
    return "\n".join(lines) + "\n"


def evaluation_report(repo: Repository) -> str:
    """Every evaluation with its criterion scores and comments."""
    presenters, evaluators = _names(repo)
    lines = _header("EVALUATION REPORT")

    evaluations = repo.list_evaluations()
    if not evaluations:
        lines.append("No evaluations submitted.")
    for ev in evaluations:
        lines += [
            f"Evaluation: {ev.evaluation_id}",
            f"  Presenter: {presenters.get(ev.presenter_id, ev.presenter_id)}",
            f"  Evaluator: {evaluators.get(ev.evaluator_id, ev.evaluator_id)}",
            f"  Session: {ev.session_id or '-'}",
        ]
        if ev.scores is not None:
            lines.append("  Scores:")
            lines += [f"    {RUBRIC_LABELS[name]}: {score}" for name, score in ev.scores.criteria()]
            lines.append(f"    Total Score: {ev.scores.total()}")
        if ev.comments:
            lines.append(f"  Comments: {ev.comments}")
        lines.append("")
    return "\n".join(lines) + "\n"


def summary_report(repo: Repository) -> str:
    """Headline counts, mean rubric total and the oral/poster split."""
    presenters = repo.list_presenters()
    evaluations = repo.list_evaluations()
    scored = [e for e in evaluations if e.scores is not None]
    # Divides by every evaluation, scored or not.
    avg = sum(e.scores.total() for e in scored) / len(evaluations) if evaluations else 0.0

    by_category = {c: sum(1 for p in presenters if p.category is c) for c in Category}

    lines = _header("SEMINAR SUMMARY REPORT")
    lines += [
        "STATISTICS:",
        THIN_RULE,
        f"Total Presenters: {len(presenters)}",
        f"Total Sessions: {len(repo.list_sessions())}",
        f"Total Evaluations: {len(evaluations)}",
        f"Average Score: {avg:.2f}",
        "",
        "PRESENTATION BREAKDOWN:",
        THIN_RULE,
        f"Oral Presentations: {by_category[Category.ORAL]}",
        f"Poster Presentations: {by_category[Category.POSTER]}",
    ]
    return "\n".join(lines) + "\n"


def export_report(content: str, path: str | Path) -> Path:
    """Write report text to ``path``, creating parent directories."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    logger.info("Report written: %s", path)
    return path
