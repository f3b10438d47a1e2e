"""Assignment and scoring engine.

Public API:
  SessionService   : sessions, participant assignment, date conflicts
  EvaluationService: rubric evaluations (upsert) and per-presenter averages
  BoardService     : poster board allocation
  AwardService     : award winners and ceremony agenda
  RubricScores     : four-criterion score value type
"""

from seminar.engine.awards import AwardService
from seminar.engine.boards import BoardService
from seminar.engine.evaluations import EvaluationService
from seminar.engine.models import (
    Award,
    AwardType,
    Category,
    CeremonyAgenda,
    Evaluation,
    Evaluator,
    PosterBoard,
    Presenter,
    Session,
)
from seminar.engine.rubric import RubricScores, is_valid_score
from seminar.engine.sessions import SessionService

__all__ = [
    "Award",
    "AwardService",
    "AwardType",
    "BoardService",
    "Category",
    "CeremonyAgenda",
    "Evaluation",
    "EvaluationService",
    "Evaluator",
    "PosterBoard",
    "Presenter",
    "RubricScores",
    "Session",
    "SessionService",
    "is_valid_score",
]
