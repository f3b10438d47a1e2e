"""Rubric evaluation submission and per-presenter aggregation.

At most one evaluation exists per (evaluator, presenter) pair. A second
submission for the same pair replaces the first in place: same id, new
scores and comments.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seminar.config.defaults import RUBRIC_LABELS
from seminar.config.schema import ScoringConfig
from seminar.engine.ids import new_evaluation_id
from seminar.engine.locking import evaluation_key, pair_key
from seminar.engine.models import Evaluation
from seminar.engine.rubric import is_valid_score
from seminar.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


class EvaluationService:
    """Validate, store and aggregate rubric evaluations."""

    def __init__(self, repo: Repository, scoring: ScoringConfig | None = None):
        self.repo = repo
        self.scoring = scoring or ScoringConfig()

    def is_valid_score(self, score: int) -> bool:
        return is_valid_score(score, self.scoring.min_score, self.scoring.max_score)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_evaluation(self, evaluation: Evaluation) -> Evaluation:
        """Validate and upsert an evaluation.

        Parameters
        ----------
        evaluation : Evaluation
            Candidate record. ``evaluation_id`` may be blank; it is replaced
            by the existing record's id when the pair was already evaluated.

        Returns
        -------
        Evaluation
            The stored record.

        Raises
        ------
        ValidationError
            Missing ids or scores, or a criterion outside the score range.
        ConflictError
            A new pair was submitted with an ``evaluation_id`` that already
            belongs to another pair.
        """
        self._validate(evaluation)

        keys = [pair_key(evaluation.evaluator_id, evaluation.presenter_id)]
        if evaluation.evaluation_id:
            keys.append(evaluation_key(evaluation.evaluation_id))
        with self.repo.locks.hold(*keys):
            existing = self.get_by_evaluator_and_presenter(
                evaluation.evaluator_id, evaluation.presenter_id,
            )
            if existing is not None:
                evaluation.evaluation_id = existing.evaluation_id
                action = "Updated"
            else:
                if not evaluation.evaluation_id:
                    evaluation.evaluation_id = new_evaluation_id()
                else:
                    self._check_id_free(evaluation)
                action = "Recorded"
            self.repo.put_evaluation(evaluation)

        logger.info(
            "%s evaluation %s: evaluator %s -> presenter %s (total %d)",
            action, evaluation.evaluation_id, evaluation.evaluator_id,
            evaluation.presenter_id, evaluation.scores.total(),
        )
        return evaluation

    def _check_id_free(self, evaluation: Evaluation) -> None:
        taken = self.repo.get_evaluation(evaluation.evaluation_id)
        if taken is not None:
            logger.warning(
                "Evaluation id %s already belongs to evaluator %s -> presenter %s",
                taken.evaluation_id, taken.evaluator_id, taken.presenter_id,
            )
            raise ConflictError(
                f"Evaluation {taken.evaluation_id} already records evaluator "
                f"{taken.evaluator_id} for presenter {taken.presenter_id}",
                participant_id=evaluation.evaluator_id,
            )

    def _validate(self, evaluation: Evaluation | None) -> None:
        if evaluation is None:
            raise ValidationError("Evaluation is required", field="evaluation")
        if not evaluation.presenter_id:
            raise ValidationError("Presenter ID is required", field="presenter_id")
        if not evaluation.evaluator_id:
            raise ValidationError("Evaluator ID is required", field="evaluator_id")
        if evaluation.scores is None:
            raise ValidationError("Scores are required", field="scores")

        low, high = self.scoring.min_score, self.scoring.max_score
        for name, score in evaluation.scores.criteria():
            # bool is an int subclass; reject it explicitly
            if not isinstance(score, int) or isinstance(score, bool) or not self.is_valid_score(score):
                raise ValidationError(
                    f"{RUBRIC_LABELS[name]} score must be between {low} and {high}, got {score!r}",
                    field=name,
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_evaluation(self, evaluation_id: str) -> Evaluation | None:
        return self.repo.get_evaluation(evaluation_id)

    def list_evaluations(self) -> list[Evaluation]:
        return self.repo.list_evaluations()

    def get_by_evaluator_and_presenter(self, evaluator_id: str, presenter_id: str) -> Evaluation | None:
        for evaluation in self.repo.list_evaluations():
            if evaluation.evaluator_id == evaluator_id and evaluation.presenter_id == presenter_id:
                return evaluation
        return None

    def evaluations_for_presenter(self, presenter_id: str) -> list[Evaluation]:
        return [e for e in self.repo.list_evaluations() if e.presenter_id == presenter_id]

    def evaluations_by_evaluator(self, evaluator_id: str) -> list[Evaluation]:
        return [e for e in self.repo.list_evaluations() if e.evaluator_id == evaluator_id]

    def delete_evaluation(self, evaluation_id: str) -> None:
        if not self.repo.delete_evaluation(evaluation_id):
            raise NotFoundError("Evaluation", evaluation_id)
        logger.info("Deleted evaluation %s", evaluation_id)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def calculate_average_score(self, presenter_id: str) -> float:
        """Mean rubric total across the presenter's evaluations.

        Returns 0.0 when the presenter has not been evaluated yet.
        """
        evaluations = self.evaluations_for_presenter(presenter_id)
        if not evaluations:
            return 0.0
        return sum(e.scores.total() for e in evaluations) / len(evaluations)
