"""People's Choice voting.

Each registered presenter may cast one vote for another presenter. The
tally feeds ``AwardService.compute_peoples_choice``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seminar.engine.locking import participant_key
from seminar.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


def cast_vote(repo: Repository, voter_id: str, candidate_id: str) -> int:
    """Record ``voter_id``'s vote for ``candidate_id``.

    Returns the candidate's new vote count.
    """
    if voter_id == candidate_id:
        raise ValidationError("Presenters cannot vote for themselves", field="candidate_id")

    with repo.locks.hold(participant_key(voter_id), participant_key(candidate_id)):
        voter = repo.get_presenter(voter_id)
        if voter is None:
            raise NotFoundError("Presenter", voter_id)
        candidate = repo.get_presenter(candidate_id)
        if candidate is None:
            raise NotFoundError("Presenter", candidate_id)
        if voter.has_voted:
            raise ConflictError(f"Presenter {voter_id} has already voted", participant_id=voter_id)

        candidate.vote_count += 1
        voter.has_voted = True
        with repo.transaction():
            repo.put_presenter(candidate)
            repo.put_presenter(voter)

    logger.info("Vote recorded for %s (now %d)", candidate_id, candidate.vote_count)
    return candidate.vote_count


def tally_votes(repo: Repository) -> dict[str, int]:
    """Presenter id -> vote count, in registration order, positive counts only."""
    return {
        p.presenter_id: p.vote_count
        for p in repo.list_presenters()
        if p.vote_count > 0
    }
