"""Participant registration.

Presenter and evaluator ids are allocated here, once, and are independent
of any login identity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seminar.engine.ids import new_evaluator_id, new_presenter_id
from seminar.engine.locking import participant_key
from seminar.engine.models import Category, Evaluator, Presenter
from seminar.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


def register_presenter(
    repo: Repository,
    name: str,
    category: Category | None,
    *,
    research_title: str = "",
    supervisor: str = "",
) -> Presenter:
    """Register a presenter and allocate its presenter id."""
    if not name or not name.strip():
        raise ValidationError("Presenter name is required", field="name")
    if category is None:
        raise ValidationError("Presentation category is required", field="category")

    presenter = Presenter(
        presenter_id=new_presenter_id(),
        name=name.strip(),
        category=category,
        research_title=research_title.strip(),
        supervisor=supervisor.strip(),
    )
    repo.put_presenter(presenter)
    logger.info("Registered presenter %s (%s, %s)", presenter.presenter_id, presenter.name, category.value)
    return presenter


def register_evaluator(repo: Repository, name: str) -> Evaluator:
    """Register an evaluator and allocate its evaluator id."""
    if not name or not name.strip():
        raise ValidationError("Evaluator name is required", field="name")
    evaluator = Evaluator(evaluator_id=new_evaluator_id(), name=name.strip())
    repo.put_evaluator(evaluator)
    logger.info("Registered evaluator %s (%s)", evaluator.evaluator_id, evaluator.name)
    return evaluator


def change_presenter_category(repo: Repository, presenter_id: str, category: Category) -> Presenter:
    """Change a presenter's category while they are not yet scheduled."""
    if category is None:
        raise ValidationError("Presentation category is required", field="category")

    with repo.locks.hold(participant_key(presenter_id)):
        presenter = repo.get_presenter(presenter_id)
        if presenter is None:
            raise NotFoundError("Presenter", presenter_id)
        if presenter.category is category:
            return presenter

        booked = [s.session_id for s in repo.list_sessions() if presenter_id in s.presenter_ids]
        if booked:
            raise ConflictError(
                f"Presenter {presenter_id} is scheduled in session {booked[0]}; "
                "category can no longer change",
                participant_id=presenter_id,
                session_id=booked[0],
            )
        presenter.category = category
        repo.put_presenter(presenter)

    logger.info("Presenter %s category changed to %s", presenter_id, category.value)
    return presenter
