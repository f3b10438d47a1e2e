"""SQLite-backed repository.

Records map onto the tables from migration 001. Listing order is insertion
order (``rowid``); upserts use ``ON CONFLICT DO UPDATE`` so a replaced
record keeps its first position. The evaluations table also carries a
``UNIQUE (evaluator_id, presenter_id)`` constraint matching
``EvaluationService``'s one-record-per-pair upsert.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Generator

from seminar.engine.locking import KeyedLock
from seminar.engine.models import (
    Award,
    AwardType,
    Category,
    Evaluation,
    Evaluator,
    PosterBoard,
    Presenter,
    Session,
)
from seminar.engine.rubric import RubricScores
from seminar.storage.database import Database
from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------

def _category(value: str | None) -> Category | None:
    return Category(value) if value else None


def _presenter_from_row(row: sqlite3.Row) -> Presenter:
    return Presenter(
        presenter_id=row["presenter_id"],
        name=row["name"],
        category=_category(row["category"]),
        research_title=row["research_title"],
        supervisor=row["supervisor"],
        vote_count=row["vote_count"],
        has_voted=bool(row["has_voted"]),
    )


def _evaluation_from_row(row: sqlite3.Row) -> Evaluation:
    scores = None
    if row["problem_clarity"] is not None:
        scores = RubricScores(
            problem_clarity=row["problem_clarity"],
            methodology=row["methodology"],
            results=row["results"],
            presentation=row["presentation"],
        )
    return Evaluation(
        evaluation_id=row["evaluation_id"],
        presenter_id=row["presenter_id"],
        evaluator_id=row["evaluator_id"],
        session_id=row["session_id"],
        scores=scores,
        comments=row["comments"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SqliteRepository(Repository):
    """Repository over a :class:`Database`.

    Usage::

        with Database(path) as db:
            ensure_schema(db)
            repo = SqliteRepository(db)
            sessions = SessionService(repo)
    """

    def __init__(self, db: Database):
        self.db = db
        self.locks = KeyedLock()
        self._lock = threading.RLock()
        self._depth = 0

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock:
            try:
                cursor = self.db.execute(sql, params)
            except sqlite3.Error:
                if self._depth == 0:
                    self.db.conn.rollback()
                raise
            if self._depth == 0:
                self.db.conn.commit()
            return cursor

    def _fetchone(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        with self._lock:
            return self.db.fetchone(sql, params)

    def _fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self.db.fetchall(sql, params)

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Commit on success, roll back on any exception.

        Nested blocks join the outermost transaction.
        """
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    self.db.conn.rollback()
                    logger.debug("Rolled back SQLite transaction")
                raise
            else:
                if outermost:
                    self.db.conn.commit()
            finally:
                self._depth -= 1

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def _participants(self, session_id: str, role: str) -> list[str]:
        rows = self._fetchall(
            """SELECT participant_id FROM session_participants
            WHERE session_id = ? AND role = ? ORDER BY position""",
            (session_id, role),
        )
        return [r["participant_id"] for r in rows]

    def _session_from_row(self, row: sqlite3.Row) -> Session:
        return Session(
            session_id=row["session_id"],
            date=date.fromisoformat(row["date"]),
            venue=row["venue"],
            category=_category(row["category"]),
            presenter_ids=self._participants(row["session_id"], "presenter"),
            evaluator_ids=self._participants(row["session_id"], "evaluator"),
        )

    def get_session(self, session_id: str) -> Session | None:
        row = self._fetchone("SELECT * FROM sessions WHERE session_id = ?", (session_id,))
        return self._session_from_row(row) if row else None

    def put_session(self, session: Session) -> None:
        with self.transaction():
            self._write(
                """INSERT INTO sessions (session_id, date, venue, category)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                    date=excluded.date, venue=excluded.venue, category=excluded.category""",
                (
                    session.session_id,
                    session.date.isoformat(),
                    session.venue,
                    session.category.value,
                ),
            )
            self._write("DELETE FROM session_participants WHERE session_id = ?", (session.session_id,))
            for role, ids in (("presenter", session.presenter_ids), ("evaluator", session.evaluator_ids)):
                for position, participant_id in enumerate(ids):
                    self._write(
                        """INSERT INTO session_participants
                        (session_id, participant_id, role, position) VALUES (?, ?, ?, ?)""",
                        (session.session_id, participant_id, role, position),
                    )

    def delete_session(self, session_id: str) -> bool:
        cursor = self._write("DELETE FROM sessions WHERE session_id = ?", (session_id,))
        return cursor.rowcount > 0

    def list_sessions(self) -> list[Session]:
        rows = self._fetchall("SELECT * FROM sessions ORDER BY rowid")
        return [self._session_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Evaluations
    # ------------------------------------------------------------------

    def get_evaluation(self, evaluation_id: str) -> Evaluation | None:
        row = self._fetchone("SELECT * FROM evaluations WHERE evaluation_id = ?", (evaluation_id,))
        return _evaluation_from_row(row) if row else None

    def put_evaluation(self, evaluation: Evaluation) -> None:
        scores: dict[str, Any] = evaluation.scores.to_dict() if evaluation.scores else {}
        self._write(
            """INSERT INTO evaluations (
                evaluation_id, presenter_id, evaluator_id, session_id,
                problem_clarity, methodology, results, presentation,
                comments, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(evaluation_id) DO UPDATE SET
                presenter_id=excluded.presenter_id, evaluator_id=excluded.evaluator_id,
                session_id=excluded.session_id,
                problem_clarity=excluded.problem_clarity,
                methodology=excluded.methodology, results=excluded.results,
                presentation=excluded.presentation, comments=excluded.comments,
                created_at=excluded.created_at""",
            (
                evaluation.evaluation_id, evaluation.presenter_id,
                evaluation.evaluator_id, evaluation.session_id,
                scores.get("problem_clarity"), scores.get("methodology"),
                scores.get("results"), scores.get("presentation"),
                evaluation.comments or "", evaluation.created_at.isoformat(),
            ),
        )

    def delete_evaluation(self, evaluation_id: str) -> bool:
        cursor = self._write("DELETE FROM evaluations WHERE evaluation_id = ?", (evaluation_id,))
        return cursor.rowcount > 0

    def list_evaluations(self) -> list[Evaluation]:
        rows = self._fetchall("SELECT * FROM evaluations ORDER BY rowid")
        return [_evaluation_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def get_presenter(self, presenter_id: str) -> Presenter | None:
        row = self._fetchone("SELECT * FROM presenters WHERE presenter_id = ?", (presenter_id,))
        return _presenter_from_row(row) if row else None

    def put_presenter(self, presenter: Presenter) -> None:
        self._write(
            """INSERT INTO presenters (
                presenter_id, name, category, research_title, supervisor,
                vote_count, has_voted
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(presenter_id) DO UPDATE SET
                name=excluded.name, category=excluded.category,
                research_title=excluded.research_title, supervisor=excluded.supervisor,
                vote_count=excluded.vote_count, has_voted=excluded.has_voted""",
            (
                presenter.presenter_id, presenter.name,
                presenter.category.value if presenter.category else None,
                presenter.research_title, presenter.supervisor,
                presenter.vote_count, int(presenter.has_voted),
            ),
        )

    def list_presenters(self) -> list[Presenter]:
        rows = self._fetchall("SELECT * FROM presenters ORDER BY rowid")
        return [_presenter_from_row(r) for r in rows]

    def _evaluator_from_row(self, row: sqlite3.Row) -> Evaluator:
        assigned = self._fetchall(
            "SELECT session_id FROM evaluator_sessions WHERE evaluator_id = ? ORDER BY position",
            (row["evaluator_id"],),
        )
        return Evaluator(
            evaluator_id=row["evaluator_id"],
            name=row["name"],
            assigned_session_ids=[r["session_id"] for r in assigned],
        )

    def get_evaluator(self, evaluator_id: str) -> Evaluator | None:
        row = self._fetchone("SELECT * FROM evaluators WHERE evaluator_id = ?", (evaluator_id,))
        return self._evaluator_from_row(row) if row else None

    def put_evaluator(self, evaluator: Evaluator) -> None:
        with self.transaction():
            self._write(
                """INSERT INTO evaluators (evaluator_id, name) VALUES (?, ?)
                ON CONFLICT(evaluator_id) DO UPDATE SET name=excluded.name""",
                (evaluator.evaluator_id, evaluator.name),
            )
            self._write("DELETE FROM evaluator_sessions WHERE evaluator_id = ?", (evaluator.evaluator_id,))
            for position, session_id in enumerate(evaluator.assigned_session_ids):
                self._write(
                    """INSERT INTO evaluator_sessions (evaluator_id, session_id, position)
                    VALUES (?, ?, ?)""",
                    (evaluator.evaluator_id, session_id, position),
                )

    def list_evaluators(self) -> list[Evaluator]:
        rows = self._fetchall("SELECT * FROM evaluators ORDER BY rowid")
        return [self._evaluator_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Poster boards
    # ------------------------------------------------------------------

    def get_poster_board(self, board_id: str) -> PosterBoard | None:
        row = self._fetchone("SELECT * FROM poster_boards WHERE board_id = ?", (board_id,))
        if not row:
            return None
        return PosterBoard(row["board_id"], row["presenter_id"], row["session_id"])

    def put_poster_board(self, board: PosterBoard) -> None:
        self._write(
            """INSERT INTO poster_boards (board_id, presenter_id, session_id)
            VALUES (?, ?, ?)
            ON CONFLICT(board_id) DO UPDATE SET
                presenter_id=excluded.presenter_id, session_id=excluded.session_id""",
            (board.board_id, board.presenter_id, board.session_id),
        )

    def delete_poster_board(self, board_id: str) -> bool:
        cursor = self._write("DELETE FROM poster_boards WHERE board_id = ?", (board_id,))
        return cursor.rowcount > 0

    def list_poster_boards(self) -> list[PosterBoard]:
        rows = self._fetchall("SELECT * FROM poster_boards ORDER BY rowid")
        return [PosterBoard(r["board_id"], r["presenter_id"], r["session_id"]) for r in rows]

    # ------------------------------------------------------------------
    # Awards
    # ------------------------------------------------------------------

    def append_award(self, award: Award) -> None:
        self._write(
            "INSERT INTO awards (award_type, winner_id, score) VALUES (?, ?, ?)",
            (award.award_type.value, award.winner_id, award.score),
        )

    def list_awards(self) -> list[Award]:
        rows = self._fetchall("SELECT * FROM awards ORDER BY id")
        return [Award(AwardType(r["award_type"]), r["winner_id"], r["score"]) for r in rows]

    def clear_awards(self) -> None:
        self._write("DELETE FROM awards")
