"""Rubric scores for a single evaluation.

Four criteria, each an integer on the committee's 1-10 scale:
  - problem_clarity: Is the research problem stated clearly?
  - methodology: Is the approach sound and well justified?
  - results: Are the findings credible and significant?
  - presentation: Delivery, slides/poster, handling of questions.

The value type does no bounds checking. Range validation belongs to the
caller (``EvaluationService.submit_evaluation``) so that out-of-range input
can be reported with the offending field name.
"""

from __future__ import annotations

from dataclasses import dataclass

from seminar.config.defaults import RUBRIC_CRITERIA, RUBRIC_WEIGHTS, SCORE_RANGE


def is_valid_score(score: int, low: int = SCORE_RANGE[0], high: int = SCORE_RANGE[1]) -> bool:
    """True when ``low <= score <= high``."""
    return low <= score <= high


@dataclass(frozen=True)
class RubricScores:
    """Criterion scores for one evaluation."""

    problem_clarity: int
    methodology: int
    results: int
    presentation: int

    def criteria(self) -> list[tuple[str, int]]:
        """(criterion, score) pairs in rubric order."""
        return [(name, getattr(self, name)) for name in RUBRIC_CRITERIA]

    def total(self) -> int:
        """Sum of the four criteria (4-40 for valid scores)."""
        return self.problem_clarity + self.methodology + self.results + self.presentation

    def weighted(self) -> float:
        """Weighted mean of the criteria. Equal weights, so ``total() / 4``."""
        return sum(score * RUBRIC_WEIGHTS[name] for name, score in self.criteria())

    def to_dict(self) -> dict[str, int]:
        return dict(self.criteria())
