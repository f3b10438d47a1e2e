"""Property-based tests using Hypothesis.

Invariants that should hold for ANY valid input:
- Score validity is exactly the inclusive 1-10 range
- Rubric total is the sum; weighted is total / 4
- One evaluation per (evaluator, presenter), holding the latest scores
- A participant is booked at most once per date
- A board has at most one holder and leaves the free list while held
- Best-in-category is the highest average, first registered on ties
- Deleting a session unlinks it from every evaluator
- People's Choice is the first presenter seen with the most votes
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from seminar.engine.awards import AwardService
from seminar.engine.boards import BoardService
from seminar.engine.evaluations import EvaluationService
from seminar.engine.ids import new_evaluator_id
from seminar.engine.models import Category, Evaluation
from seminar.engine.registry import register_evaluator, register_presenter
from seminar.engine.rubric import RubricScores, is_valid_score
from seminar.engine.sessions import SessionService
from seminar.errors import ConflictError
from seminar.storage.repository import InMemoryRepository

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

valid_scores = st.integers(min_value=1, max_value=10)
rubrics = st.builds(RubricScores, valid_scores, valid_scores, valid_scores, valid_scores)
days = st.dates(min_value=date(2025, 1, 1), max_value=date(2030, 12, 31))
board_numbers = st.integers(min_value=1, max_value=100)

# Distinct ids in a fixed insertion order, each with a vote count.
vote_maps = st.dictionaries(
    st.text(alphabet="abcdefgh", min_size=1, max_size=4),
    st.integers(min_value=0, max_value=50),
    min_size=1,
    max_size=12,
)

no_fixture_check = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])


# ---------------------------------------------------------------------------
# Rubric
# ---------------------------------------------------------------------------

class TestRubricProperties:
    @given(score=st.integers(min_value=-1000, max_value=1000))
    def test_valid_score_is_inclusive_range(self, score):
        assert is_valid_score(score) == (1 <= score <= 10)

    @given(scores=rubrics)
    def test_total_is_sum(self, scores):
        a, b, c, d = (v for _, v in scores.criteria())
        assert scores.total() == a + b + c + d
        assert 4 <= scores.total() <= 40

    @given(scores=rubrics)
    def test_weighted_is_quarter_total(self, scores):
        assert abs(scores.weighted() - scores.total() / 4.0) < 1e-9


# ---------------------------------------------------------------------------
# Evaluations
# ---------------------------------------------------------------------------

class TestEvaluationProperties:
    @given(submissions=st.lists(rubrics, min_size=1, max_size=6))
    def test_upsert_keeps_one_record_with_latest_scores(self, submissions):
        repo = InMemoryRepository()
        service = EvaluationService(repo)
        ids = set()
        for scores in submissions:
            stored = service.submit_evaluation(
                Evaluation(evaluator_id="V-1", presenter_id="P-1", scores=scores)
            )
            ids.add(stored.evaluation_id)

        assert len(ids) == 1
        records = service.list_evaluations()
        assert len(records) == 1
        assert records[0].scores == submissions[-1]

    @given(totals=st.lists(rubrics, min_size=1, max_size=5))
    def test_average_is_mean_of_totals(self, totals):
        service = EvaluationService(InMemoryRepository())
        for i, scores in enumerate(totals):
            service.submit_evaluation(
                Evaluation(evaluator_id=f"V-{i}", presenter_id="P-1", scores=scores)
            )
        expected = sum(s.total() for s in totals) / len(totals)
        assert service.calculate_average_score("P-1") == pytest.approx(expected)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class TestSessionProperties:
    @given(day=days, as_evaluator=st.booleans())
    def test_one_booking_per_date(self, day, as_evaluator):
        repo = InMemoryRepository()
        service = SessionService(repo)
        pid = register_presenter(repo, "Alice", Category.ORAL).presenter_id
        a = service.create_session(day, "Hall A", Category.ORAL)
        b = service.create_session(day, "Hall B", Category.ORAL)
        c = service.create_session(day + timedelta(days=1), "Hall A", Category.ORAL)

        service.assign_presenter(a.session_id, pid)
        with pytest.raises(ConflictError):
            if as_evaluator:
                service.assign_evaluator(b.session_id, pid)
            else:
                service.assign_presenter(b.session_id, pid)
        service.assign_presenter(c.session_id, pid)

        assert len(service.find_conflicts(pid, day)) == 1
        assert len(service.find_conflicts(pid, day + timedelta(days=1))) == 1

    @given(n_sessions=st.integers(min_value=1, max_value=5), day=days)
    def test_delete_unlinks_evaluator(self, n_sessions, day):
        repo = InMemoryRepository()
        service = SessionService(repo)
        eid = register_evaluator(repo, "Dr. Y").evaluator_id
        created = [
            service.create_session(day + timedelta(days=i), "Hall A", Category.POSTER)
            for i in range(n_sessions)
        ]
        for s in created:
            service.assign_evaluator(s.session_id, eid)

        victim = created[0]
        service.delete_session(victim.session_id)
        assert service.get_session(victim.session_id) is None
        remaining = repo.get_evaluator(eid).assigned_session_ids
        assert victim.session_id not in remaining
        assert remaining == [s.session_id for s in created[1:]]


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------

class TestBoardProperties:
    @given(number=board_numbers)
    def test_board_held_once(self, number):
        service = BoardService(InMemoryRepository())
        board = f"B{number:03d}"
        assert board in service.get_available_boards()
        service.assign_board(board, "P-1", "S-1")
        assert board not in service.get_available_boards()
        with pytest.raises(ConflictError):
            service.assign_board(board, "P-2", "S-1")
        assert service.get_board(board).presenter_id == "P-1"

    @given(numbers=st.sets(board_numbers, max_size=20))
    def test_available_plus_assigned_is_whole_space(self, numbers):
        service = BoardService(InMemoryRepository())
        for n in numbers:
            service.assign_board(f"B{n:03d}", f"P-{n}", "S-1")
        free = service.get_available_boards()
        taken = {b.board_id for b in service.list_assignments()}
        assert len(free) + len(taken) == 100
        assert not taken & set(free)


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------

class TestAwardProperties:
    @given(totals=st.lists(rubrics, min_size=1, max_size=8))
    def test_best_oral_is_first_highest_average(self, totals):
        repo = InMemoryRepository()
        evaluations = EvaluationService(repo)
        awards = AwardService(repo, evaluations)
        ids = []
        for i, scores in enumerate(totals):
            pid = register_presenter(repo, f"Presenter {i}", Category.ORAL).presenter_id
            ids.append(pid)
            evaluations.submit_evaluation(
                Evaluation(evaluator_id="V-1", presenter_id=pid, scores=scores)
            )

        best = max(s.total() for s in totals)
        expected = ids[[s.total() for s in totals].index(best)]
        award = awards.compute_best_oral()
        assert award.winner_id == expected
        assert award.score == float(best)
        assert awards.compute_best_poster() is None

    @given(votes=vote_maps)
    def test_peoples_choice_first_seen_max(self, votes):
        awards = AwardService(InMemoryRepository(), EvaluationService(InMemoryRepository()))
        award = awards.compute_peoples_choice(votes)
        top = max(votes.values())
        if top <= 0:
            assert award is None
            return
        first = next(k for k, v in votes.items() if v == top)
        assert award.winner_id == first
        assert award.score == float(top)

    def test_peoples_choice_example(self):
        awards = AwardService(InMemoryRepository(), EvaluationService(InMemoryRepository()))
        award = awards.compute_peoples_choice({"P1": 5, "P2": 9, "P3": 9})
        assert (award.winner_id, award.score) == ("P2", 9.0)


# ---------------------------------------------------------------------------
# Both backends
# ---------------------------------------------------------------------------

class TestBackendProperties:
    @no_fixture_check
    @given(day=days)
    def test_conflict_rule_on_every_backend(self, any_repo, day):
        service = SessionService(any_repo)
        eid = new_evaluator_id()
        a = service.create_session(day, "Hall A", Category.ORAL)
        b = service.create_session(day, "Hall B", Category.ORAL)
        service.assign_evaluator(a.session_id, eid)
        with pytest.raises(ConflictError):
            service.assign_evaluator(b.session_id, eid)
