"""Concurrent callers on one repository.

Each test releases all workers from a barrier at once so that the
check-then-act windows overlap.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from seminar.engine.boards import BoardService
from seminar.engine.evaluations import EvaluationService
from seminar.engine.locking import KeyedLock, date_key, participant_key
from seminar.engine.models import Category, Evaluation
from seminar.engine.registry import register_presenter
from seminar.engine.rubric import RubricScores
from seminar.engine.sessions import SessionService
from seminar.engine.voting import cast_vote
from seminar.errors import ConflictError

DAY = date(2026, 3, 14)
WORKERS = 8


def _race(fn, args_list):
    """Run fn(*args) for each args concurrently; return (results, errors)."""
    barrier = threading.Barrier(len(args_list))

    def run(args):
        barrier.wait()
        try:
            return fn(*args), None
        except ConflictError as e:
            return None, e

    with ThreadPoolExecutor(max_workers=len(args_list)) as pool:
        outcomes = list(pool.map(run, args_list))
    return [r for r, _ in outcomes if r is not None], [e for _, e in outcomes if e is not None]


class TestKeyedLock:
    def test_same_key_same_lock(self):
        locks = KeyedLock()
        assert locks._lock_for("a") is locks._lock_for("a")
        assert locks._lock_for("a") is not locks._lock_for("b")
        assert len(locks) == 2

    def test_hold_multiple_keys_with_duplicates(self):
        locks = KeyedLock()
        with locks.hold("date:2", "date:1", "date:2"):
            assert not locks._lock_for("date:1").acquire(blocking=False)
        assert locks._lock_for("date:1").acquire(blocking=False)

    def test_released_on_error(self):
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            with locks.hold("k"):
                raise RuntimeError("boom")
        assert locks._lock_for("k").acquire(blocking=False)


class TestConcurrentAssignment:
    def test_one_presenter_many_same_date_sessions(self, any_repo):
        service = SessionService(any_repo)
        pid = register_presenter(any_repo, "Alice", Category.ORAL).presenter_id
        session_ids = [
            service.create_session(DAY, f"Hall {i}", Category.ORAL).session_id
            for i in range(WORKERS)
        ]

        done, errors = _race(service.assign_presenter, [(sid, pid) for sid in session_ids])

        assert len(done) == 1
        assert len(errors) == WORKERS - 1
        assert len(service.find_conflicts(pid, DAY)) == 1

    def test_one_evaluator_many_same_date_sessions(self, any_repo):
        service = SessionService(any_repo)
        session_ids = [
            service.create_session(DAY, f"Hall {i}", Category.POSTER).session_id
            for i in range(WORKERS)
        ]

        done, _ = _race(service.assign_evaluator, [(sid, "V-busy") for sid in session_ids])

        assert len(done) == 1
        assert len(service.sessions_for_participant("V-busy")) == 1

    def test_many_presenters_one_session(self, repo):
        service = SessionService(repo)
        s = service.create_session(DAY, "Hall A", Category.ORAL)
        pids = [register_presenter(repo, f"P{i}", Category.ORAL).presenter_id for i in range(WORKERS)]

        done, errors = _race(service.assign_presenter, [(s.session_id, p) for p in pids])

        assert errors == []
        assert sorted(service.get_session(s.session_id).presenter_ids) == sorted(pids)

    def test_rescheduled_session_is_checked_under_new_date(self, repo):
        service = SessionService(repo)
        pid = register_presenter(repo, "Alice", Category.ORAL).presenter_id
        s = service.create_session(DAY, "Hall A", Category.ORAL)
        later = DAY + timedelta(days=1)
        old_date = repo.locks._lock_for(date_key(DAY))
        new_date = repo.locks._lock_for(date_key(later))
        old_date.acquire()
        new_date.acquire()

        worker = threading.Thread(target=service.assign_presenter, args=(s.session_id, pid))
        worker.start()
        moved = repo.get_session(s.session_id)
        moved.date = later
        repo.put_session(moved)
        old_date.release()

        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert repo.get_session(s.session_id).presenter_ids == []

        new_date.release()
        worker.join(timeout=5)
        assert not worker.is_alive()
        assert repo.get_session(s.session_id).presenter_ids == [pid]

    def test_assignment_waits_for_presenter_lock(self, repo):
        service = SessionService(repo)
        pid = register_presenter(repo, "Alice", Category.ORAL).presenter_id
        s = service.create_session(DAY, "Hall A", Category.ORAL)
        presenter_lock = repo.locks._lock_for(participant_key(pid))
        presenter_lock.acquire()

        worker = threading.Thread(target=service.assign_presenter, args=(s.session_id, pid))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()

        presenter_lock.release()
        worker.join(timeout=5)
        assert repo.get_session(s.session_id).presenter_ids == [pid]


class TestConcurrentBoards:
    def test_single_winner_per_board(self, any_repo):
        service = BoardService(any_repo)
        done, errors = _race(
            service.assign_board, [("B007", f"P-{i}", "S-1") for i in range(WORKERS)],
        )
        assert len(done) == 1
        assert all(e.occupant_id == done[0].presenter_id for e in errors)
        assert len(service.list_assignments()) == 1


class TestConcurrentEvaluations:
    def test_same_pair_collapses_to_one_record(self, any_repo):
        service = EvaluationService(any_repo)
        submissions = [
            (Evaluation(evaluator_id="V-1", presenter_id="P-1", scores=RubricScores(i, i, i, i)),)
            for i in range(1, WORKERS + 1)
        ]
        done, errors = _race(service.submit_evaluation, submissions)
        assert errors == []
        assert len({e.evaluation_id for e in done}) == 1
        assert len(service.list_evaluations()) == 1

    def test_shared_id_across_pairs_has_one_owner(self, any_repo):
        service = EvaluationService(any_repo)
        submissions = [
            (Evaluation(
                evaluation_id="E-shared",
                evaluator_id=f"V-{i}",
                presenter_id="P-1",
                scores=RubricScores(5, 5, 5, 5),
            ),)
            for i in range(WORKERS)
        ]
        done, errors = _race(service.submit_evaluation, submissions)
        assert len(done) == 1
        assert len(errors) == WORKERS - 1
        assert [e.evaluator_id for e in service.list_evaluations()] == [done[0].evaluator_id]


class TestConcurrentVoting:
    def test_each_voter_counted_once(self, repo):
        candidate = register_presenter(repo, "Star", Category.POSTER).presenter_id
        voters = [register_presenter(repo, f"V{i}", Category.ORAL).presenter_id for i in range(WORKERS)]
        # every voter tries twice
        done, errors = _race(
            lambda voter: cast_vote(repo, voter, candidate),
            [(v,) for v in voters * 2],
        )
        assert len(done) == WORKERS
        assert len(errors) == WORKERS
        assert repo.get_presenter(candidate).vote_count == WORKERS
