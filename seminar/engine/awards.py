"""Closing-ceremony award computation.

Winners are picked with a strict ``>`` scan, so on an exact tie the first
candidate seen wins. Candidates are seen in repository insertion order
(presenters) or mapping insertion order (votes), which makes ties
deterministic.

Awards are derived state. ``generate_agenda`` appends what it computes to
the repository; call ``clear_awards`` first to recompute from scratch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING

from seminar.engine.evaluations import EvaluationService
from seminar.engine.models import Award, AwardType, Category, CeremonyAgenda

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)

CATEGORY_AWARDS = {
    Category.ORAL: AwardType.BEST_ORAL,
    Category.POSTER: AwardType.BEST_POSTER,
}


def pick_highest(candidates) -> tuple[str | None, float]:
    """First (id, score) pair with the strictly highest score.

    ``candidates`` is an iterable of (id, score). Returns (None, -1.0) when
    it is empty.
    """
    best_id = None
    best_score = -1.0
    for candidate_id, score in candidates:
        if score > best_score:
            best_id, best_score = candidate_id, score
    return best_id, best_score


class AwardService:
    """Rank presenters and assemble the ceremony agenda."""

    def __init__(self, repo: Repository, evaluations: EvaluationService):
        self.repo = repo
        self.evaluations = evaluations

    def compute_best_by_category(self, category: Category) -> Award | None:
        """Highest average rubric total among presenters of ``category``.

        Returns None if nobody in the category has been evaluated.
        """
        candidates = (
            (p.presenter_id, self.evaluations.calculate_average_score(p.presenter_id))
            for p in self.repo.list_presenters()
            if p.category is category and p.presenter_id is not None
        )
        winner, score = pick_highest(candidates)
        if winner is None or score <= 0:
            logger.debug("No %s award: no evaluated presenters", category.value)
            return None
        return Award(CATEGORY_AWARDS[category], winner, float(score))

    def compute_best_oral(self) -> Award | None:
        return self.compute_best_by_category(Category.ORAL)

    def compute_best_poster(self) -> Award | None:
        return self.compute_best_by_category(Category.POSTER)

    def compute_peoples_choice(self, votes: Mapping[str, int] | None) -> Award | None:
        """Presenter with the most votes. None if no positive tally."""
        if not votes:
            return None
        winner, count = pick_highest(votes.items())
        if winner is None or count <= 0:
            return None
        return Award(AwardType.PEOPLES_CHOICE, winner, float(count))

    def generate_agenda(
        self,
        votes: Mapping[str, int] | None = None,
        *,
        ceremony_date: datetime | None = None,
    ) -> CeremonyAgenda:
        """Compute every award and persist each one that has a winner.

        Order is Best Oral, Best Poster, then People's Choice. Without
        ``votes`` the People's Choice slot is omitted entirely.
        """
        agenda = CeremonyAgenda(ceremony_date=ceremony_date or datetime.now())
        computed = [self.compute_best_oral(), self.compute_best_poster()]
        if votes is not None:
            computed.append(self.compute_peoples_choice(votes))

        with self.repo.transaction():
            for award in computed:
                if award is None:
                    continue
                agenda.add_award(award)
                self.repo.append_award(award)

        logger.info(
            "Generated agenda with %d award(s): %s",
            len(agenda.awards),
            ", ".join(f"{a.award_type.value}={a.winner_id}" for a in agenda.awards) or "none",
        )
        return agenda

    def list_awards(self) -> list[Award]:
        return self.repo.list_awards()

    def clear_awards(self) -> None:
        self.repo.clear_awards()
        logger.info("Cleared persisted awards")
