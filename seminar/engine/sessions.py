"""Session scheduling and participant assignment.

Enforces the date-conflict rule: a participant id may be booked in at most
one session per calendar date. Presenter and evaluator ids share one
namespace, so an id already listed in either role on a date blocks any
further booking on that date. Sessions carry no time of day; the check is
by date only.

The session's evaluator list is the single source of truth for evaluator
bookings. ``Evaluator.assigned_session_ids`` is a derived index that this
module updates in the same transaction as every session mutation (see
``rebuild_evaluator_index`` to recompute it from scratch).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import TYPE_CHECKING, Generator

from seminar.config.schema import SessionsConfig
from seminar.engine.ids import new_session_id
from seminar.engine.locking import date_key, participant_key
from seminar.engine.models import Category, Session
from seminar.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conflict registry
# ---------------------------------------------------------------------------

def find_conflicts(
    sessions: list[Session],
    participant_id: str,
    day: date,
    exclude_session_id: str | None = None,
) -> list[Session]:
    """Sessions on ``day`` that already list ``participant_id`` in any role."""
    if not participant_id or day is None:
        return []
    return [
        s for s in sessions
        if s.date == day
        and s.session_id != exclude_session_id
        and s.lists_participant(participant_id)
    ]


def _validate_session_fields(day: date | None, venue: str | None, category: Category | None) -> None:
    if day is None:
        raise ValidationError("Session date is required", field="date")
    if venue is None or not venue.strip():
        raise ValidationError("Session venue is required", field="venue")
    if category is None:
        raise ValidationError("Session category is required", field="category")


def _require_id(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return value


class SessionService:
    """Create, update and delete sessions; assign participants to them."""

    def __init__(self, repo: Repository, settings: SessionsConfig | None = None):
        self.repo = repo
        self.settings = settings or SessionsConfig()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> Session | None:
        return self.repo.get_session(session_id)

    def list_sessions(self) -> list[Session]:
        return self.repo.list_sessions()

    def sessions_on(self, day: date) -> list[Session]:
        return [s for s in self.repo.list_sessions() if s.date == day]

    def sessions_for_participant(self, participant_id: str) -> list[Session]:
        return [s for s in self.repo.list_sessions() if s.lists_participant(participant_id)]

    def has_conflict(
        self,
        participant_id: str,
        day: date,
        *,
        exclude_session_id: str | None = None,
    ) -> bool:
        """True if any session on ``day`` already lists the participant."""
        return bool(self.find_conflicts(participant_id, day, exclude_session_id=exclude_session_id))

    def find_conflicts(
        self,
        participant_id: str,
        day: date,
        *,
        exclude_session_id: str | None = None,
    ) -> list[Session]:
        return find_conflicts(self.repo.list_sessions(), participant_id, day, exclude_session_id)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def create_session(self, day: date | None, venue: str | None, category: Category | None) -> Session:
        """Validate and persist a new, empty session."""
        _validate_session_fields(day, venue, category)
        session = Session(
            session_id=new_session_id(),
            date=day,
            venue=venue.strip(),
            category=category,
        )
        self.repo.put_session(session)
        logger.info(
            "Created session %s (%s, %s, %s)",
            session.session_id, day.isoformat(), session.venue, category.value,
        )
        return session

    def update_session(self, session: Session) -> Session:
        """Overwrite a stored session after re-validating it.

        Every listed presenter must be registered in the session's
        category, neither list may exceed its configured capacity, and no
        listed participant may already be booked elsewhere on the new date.
        """
        if session is None:
            raise ValidationError("Session is required", field="session")
        _validate_session_fields(session.date, session.venue, session.category)
        session.venue = session.venue.strip()

        presenter_keys = [participant_key(p) for p in session.presenter_ids]
        with self._locked_session(
            session.session_id, date_key(session.date), *presenter_keys,
        ) as stored:
            if stored is None:
                raise NotFoundError("Session", session.session_id)
            self._check_presenters_registered(session)
            self._check_list_capacity(session)
            self._check_participants_free(session)

            with self.repo.transaction():
                self.repo.put_session(session)
                self._sync_evaluator_index(
                    session.session_id,
                    before=stored.evaluator_ids,
                    after=session.evaluator_ids,
                )

        logger.info("Updated session %s", session.session_id)
        return session

    def delete_session(self, session_id: str) -> None:
        """Delete a session and unlink it from its evaluators."""
        with self._locked_session(session_id) as session:
            if session is None:
                raise NotFoundError("Session", session_id)
            with self.repo.transaction():
                for evaluator_id in session.evaluator_ids:
                    evaluator = self.repo.get_evaluator(evaluator_id)
                    if evaluator is not None:
                        evaluator.remove_assigned_session(session_id)
                        self.repo.put_evaluator(evaluator)
                self.repo.delete_session(session_id)

        logger.info(
            "Deleted session %s (%d evaluator link(s) removed)",
            session_id, len(session.evaluator_ids),
        )

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign_presenter(self, session_id: str, presenter_id: str) -> Session:
        """Book a presenter into a session."""
        _require_id(presenter_id, "presenter_id")

        with self._locked_session(session_id, participant_key(presenter_id)) as session:
            if session is None:
                raise NotFoundError("Session", session_id)
            presenter = self.repo.get_presenter(presenter_id)
            if presenter is None:
                raise NotFoundError("Presenter", presenter_id)
            if presenter.category is not session.category:
                raise ValidationError(
                    f"Presenter {presenter_id} is registered for "
                    f"{presenter.category.value if presenter.category else 'no category'}, "
                    f"session {session_id} is {session.category.value}",
                    field="category",
                )
            if presenter_id in session.presenter_ids:
                return session
            self._check_conflict(presenter_id, session, role="Presenter")
            self._check_capacity(
                session, len(session.presenter_ids),
                self.settings.max_presenters_per_session, role="presenter",
            )
            session.add_presenter(presenter_id)
            self.repo.put_session(session)

        logger.info("Assigned presenter %s to session %s", presenter_id, session_id)
        return session

    def assign_evaluator(self, session_id: str, evaluator_id: str) -> Session:
        """Book an evaluator into a session and index it on the evaluator."""
        _require_id(evaluator_id, "evaluator_id")

        with self._locked_session(session_id) as session:
            if session is None:
                raise NotFoundError("Session", session_id)
            if evaluator_id in session.evaluator_ids:
                return session
            self._check_conflict(evaluator_id, session, role="Evaluator")
            self._check_capacity(
                session, len(session.evaluator_ids),
                self.settings.max_evaluators_per_session, role="evaluator",
            )
            session.add_evaluator(evaluator_id)
            with self.repo.transaction():
                self.repo.put_session(session)
                self._sync_evaluator_index(session_id, before=[], after=[evaluator_id])

        logger.info("Assigned evaluator %s to session %s", evaluator_id, session_id)
        return session

    def remove_presenter(self, session_id: str, presenter_id: str) -> None:
        """Unbook a presenter. No-op if either side is absent."""
        with self._locked_session(session_id) as session:
            if session is None or presenter_id not in session.presenter_ids:
                return
            session.remove_presenter(presenter_id)
            self.repo.put_session(session)
        logger.info("Removed presenter %s from session %s", presenter_id, session_id)

    def remove_evaluator(self, session_id: str, evaluator_id: str) -> None:
        """Unbook an evaluator and drop the session from its index."""
        with self._locked_session(session_id) as session:
            if session is None:
                return
            was_listed = evaluator_id in session.evaluator_ids
            session.remove_evaluator(evaluator_id)
            with self.repo.transaction():
                self.repo.put_session(session)
                self._sync_evaluator_index(session_id, before=[evaluator_id], after=[])
        if was_listed:
            logger.info("Removed evaluator %s from session %s", evaluator_id, session_id)

    def rebuild_evaluator_index(self) -> int:
        """Recompute every evaluator's assigned sessions from the sessions.

        Returns the number of evaluator records that changed.
        """
        sessions = self.repo.list_sessions()
        changed = 0
        with self.repo.transaction():
            for evaluator in self.repo.list_evaluators():
                expected = [
                    s.session_id for s in sessions
                    if evaluator.evaluator_id in s.evaluator_ids
                ]
                if evaluator.assigned_session_ids != expected:
                    evaluator.assigned_session_ids = expected
                    self.repo.put_evaluator(evaluator)
                    changed += 1
        if changed:
            logger.warning("Rebuilt assigned sessions for %d evaluator(s)", changed)
        return changed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _locked_session(self, session_id: str, *keys: str) -> Generator[Session | None, None, None]:
        """Hold the session's date lock (plus ``keys``) and yield a fresh copy.

        The date is read before the lock is taken, so a concurrent reschedule
        can move the session in between; in that case the locks are released
        and taken again for the new date. Yields None for an unknown session.
        """
        while True:
            session = self.repo.get_session(session_id) if session_id else None
            if session is None:
                yield None
                return
            with self.repo.locks.hold(date_key(session.date), *keys):
                current = self.repo.get_session(session_id)
                if current is None or current.date == session.date:
                    yield current
                    return
            logger.debug("Session %s was rescheduled while waiting, retrying", session_id)

    def _check_conflict(self, participant_id: str, session: Session, role: str) -> None:
        clashes = self.find_conflicts(participant_id, session.date)
        if clashes:
            other = clashes[0]
            logger.warning(
                "Conflict: %s already booked in session %s on %s",
                participant_id, other.session_id, session.date.isoformat(),
            )
            raise ConflictError(
                f"{role} {participant_id} is already assigned to session "
                f"{other.session_id} on {session.date.isoformat()}",
                participant_id=participant_id,
                date=session.date,
                session_id=other.session_id,
            )

    def _check_capacity(self, session: Session, current: int, limit: int | None, role: str) -> None:
        if limit is not None and current >= limit:
            raise ConflictError(
                f"Session {session.session_id} already has {current} {role}(s) "
                f"(limit {limit})",
                session_id=session.session_id,
                date=session.date,
            )

    def _check_list_capacity(self, session: Session) -> None:
        for listed, limit, role in (
            (session.presenter_ids, self.settings.max_presenters_per_session, "presenter"),
            (session.evaluator_ids, self.settings.max_evaluators_per_session, "evaluator"),
        ):
            if limit is not None and len(listed) > limit:
                raise ConflictError(
                    f"Session {session.session_id} lists {len(listed)} {role}(s) "
                    f"(limit {limit})",
                    session_id=session.session_id,
                    date=session.date,
                )

    def _check_presenters_registered(self, session: Session) -> None:
        for presenter_id in session.presenter_ids:
            presenter = self.repo.get_presenter(presenter_id)
            if presenter is None:
                raise NotFoundError("Presenter", presenter_id)
            if presenter.category is not session.category:
                raise ValidationError(
                    f"Presenter {presenter_id} does not match session category "
                    f"{session.category.value}",
                    field="category",
                )

    def _check_participants_free(self, session: Session) -> None:
        for participant_id in [*session.presenter_ids, *session.evaluator_ids]:
            clashes = self.find_conflicts(
                participant_id, session.date, exclude_session_id=session.session_id,
            )
            if clashes:
                raise ConflictError(
                    f"Participant {participant_id} is already assigned to session "
                    f"{clashes[0].session_id} on {session.date.isoformat()}",
                    participant_id=participant_id,
                    date=session.date,
                    session_id=clashes[0].session_id,
                )

    def _sync_evaluator_index(self, session_id: str, before: list[str], after: list[str]) -> None:
        """Apply an evaluator-list change to the evaluators' indexes."""
        for evaluator_id in set(before) - set(after):
            evaluator = self.repo.get_evaluator(evaluator_id)
            if evaluator is not None:
                evaluator.remove_assigned_session(session_id)
                self.repo.put_evaluator(evaluator)
        for evaluator_id in after:
            if evaluator_id in before:
                continue
            evaluator = self.repo.get_evaluator(evaluator_id)
            if evaluator is not None:
                evaluator.add_assigned_session(session_id)
                self.repo.put_evaluator(evaluator)
