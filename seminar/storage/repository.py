"""Repository interface shared by all services.

Every service receives the same repository instance in its constructor and
observes the others' writes immediately. Implementations must:

  - list records in insertion order (award tie-breaking depends on it),
  - return copies, so callers cannot mutate stored state without a ``put``,
  - make ``transaction()`` all-or-nothing,
  - expose a shared ``locks`` registry for per-key serialization.
"""

from __future__ import annotations

import copy
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator

from seminar.engine.locking import KeyedLock
from seminar.engine.models import (
    Award,
    Evaluation,
    Evaluator,
    PosterBoard,
    Presenter,
    Session,
)

logger = logging.getLogger(__name__)


class Repository(ABC):
    """Key-value style store over seminar records."""

    locks: KeyedLock

    # --- Sessions ---
    @abstractmethod
    def get_session(self, session_id: str) -> Session | None: ...

    @abstractmethod
    def put_session(self, session: Session) -> None: ...

    @abstractmethod
    def delete_session(self, session_id: str) -> bool: ...

    @abstractmethod
    def list_sessions(self) -> list[Session]: ...

    # --- Evaluations ---
    @abstractmethod
    def get_evaluation(self, evaluation_id: str) -> Evaluation | None: ...

    @abstractmethod
    def put_evaluation(self, evaluation: Evaluation) -> None: ...

    @abstractmethod
    def delete_evaluation(self, evaluation_id: str) -> bool: ...

    @abstractmethod
    def list_evaluations(self) -> list[Evaluation]: ...

    # --- Participants ---
    @abstractmethod
    def get_presenter(self, presenter_id: str) -> Presenter | None: ...

    @abstractmethod
    def put_presenter(self, presenter: Presenter) -> None: ...

    @abstractmethod
    def list_presenters(self) -> list[Presenter]: ...

    @abstractmethod
    def get_evaluator(self, evaluator_id: str) -> Evaluator | None: ...

    @abstractmethod
    def put_evaluator(self, evaluator: Evaluator) -> None: ...

    @abstractmethod
    def list_evaluators(self) -> list[Evaluator]: ...

    # --- Poster boards ---
    @abstractmethod
    def get_poster_board(self, board_id: str) -> PosterBoard | None: ...

    @abstractmethod
    def put_poster_board(self, board: PosterBoard) -> None: ...

    @abstractmethod
    def delete_poster_board(self, board_id: str) -> bool: ...

    @abstractmethod
    def list_poster_boards(self) -> list[PosterBoard]: ...

    # --- Awards ---
    @abstractmethod
    def append_award(self, award: Award) -> None: ...

    @abstractmethod
    def list_awards(self) -> list[Award]: ...

    @abstractmethod
    def clear_awards(self) -> None: ...

    # --- Atomicity ---
    @abstractmethod
    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """All writes inside the block commit together or not at all."""
        ...


class InMemoryRepository(Repository):
    """Dict-backed repository for tests and single-process use."""

    def __init__(self) -> None:
        self.locks = KeyedLock()
        self._lock = threading.RLock()
        self._depth = 0
        self._sessions: dict[str, Session] = {}
        self._evaluations: dict[str, Evaluation] = {}
        self._presenters: dict[str, Presenter] = {}
        self._evaluators: dict[str, Evaluator] = {}
        self._boards: dict[str, PosterBoard] = {}
        self._awards: list[Award] = []

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def _get(self, table: dict, key: str | None):
        with self._lock:
            record = table.get(key)
            return copy.deepcopy(record) if record is not None else None

    def _put(self, table: dict, key: str, record) -> None:
        with self._lock:
            table[key] = copy.deepcopy(record)

    def _delete(self, table: dict, key: str | None) -> bool:
        with self._lock:
            return table.pop(key, None) is not None

    def _list(self, table: dict) -> list:
        with self._lock:
            return [copy.deepcopy(r) for r in table.values()]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> Session | None:
        return self._get(self._sessions, session_id)

    def put_session(self, session: Session) -> None:
        self._put(self._sessions, session.session_id, session)

    def delete_session(self, session_id: str) -> bool:
        return self._delete(self._sessions, session_id)

    def list_sessions(self) -> list[Session]:
        return self._list(self._sessions)

    # ------------------------------------------------------------------
    # Evaluations
    # ------------------------------------------------------------------

    def get_evaluation(self, evaluation_id: str) -> Evaluation | None:
        return self._get(self._evaluations, evaluation_id)

    def put_evaluation(self, evaluation: Evaluation) -> None:
        self._put(self._evaluations, evaluation.evaluation_id, evaluation)

    def delete_evaluation(self, evaluation_id: str) -> bool:
        return self._delete(self._evaluations, evaluation_id)

    def list_evaluations(self) -> list[Evaluation]:
        return self._list(self._evaluations)

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def get_presenter(self, presenter_id: str) -> Presenter | None:
        return self._get(self._presenters, presenter_id)

    def put_presenter(self, presenter: Presenter) -> None:
        self._put(self._presenters, presenter.presenter_id, presenter)

    def list_presenters(self) -> list[Presenter]:
        return self._list(self._presenters)

    def get_evaluator(self, evaluator_id: str) -> Evaluator | None:
        return self._get(self._evaluators, evaluator_id)

    def put_evaluator(self, evaluator: Evaluator) -> None:
        self._put(self._evaluators, evaluator.evaluator_id, evaluator)

    def list_evaluators(self) -> list[Evaluator]:
        return self._list(self._evaluators)

    # ------------------------------------------------------------------
    # Poster boards
    # ------------------------------------------------------------------

    def get_poster_board(self, board_id: str) -> PosterBoard | None:
        return self._get(self._boards, board_id)

    def put_poster_board(self, board: PosterBoard) -> None:
        self._put(self._boards, board.board_id, board)

    def delete_poster_board(self, board_id: str) -> bool:
        return self._delete(self._boards, board_id)

    def list_poster_boards(self) -> list[PosterBoard]:
        return self._list(self._boards)

    # ------------------------------------------------------------------
    # Awards
    # ------------------------------------------------------------------

    def append_award(self, award: Award) -> None:
        with self._lock:
            self._awards.append(award)

    def list_awards(self) -> list[Award]:
        with self._lock:
            return list(self._awards)

    def clear_awards(self) -> None:
        with self._lock:
            self._awards.clear()

    # ------------------------------------------------------------------
    # Atomicity
    # ------------------------------------------------------------------

    def _snapshot(self) -> tuple:
        return copy.deepcopy((
            self._sessions,
            self._evaluations,
            self._presenters,
            self._evaluators,
            self._boards,
            self._awards,
        ))

    def _restore(self, snapshot: tuple) -> None:
        (
            self._sessions,
            self._evaluations,
            self._presenters,
            self._evaluators,
            self._boards,
            self._awards,
        ) = snapshot

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Snapshot on entry; restore the snapshot if the block raises.

        Nested blocks join the outermost transaction.
        """
        with self._lock:
            outermost = self._depth == 0
            snapshot = self._snapshot() if outermost else None
            self._depth += 1
            try:
                yield
            except BaseException:
                if outermost:
                    self._restore(snapshot)
                    logger.debug("Rolled back in-memory transaction")
                raise
            finally:
                self._depth -= 1
