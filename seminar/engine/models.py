"""Domain records shared by every service.

Records are plain dataclasses. The repository hands out copies, so a
service must ``put_*`` a record back after mutating it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from seminar.engine.rubric import RubricScores

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Category(Enum):
    """Presentation format. Sessions and presenters each have exactly one."""
    ORAL = "Oral"
    POSTER = "Poster"

    @classmethod
    def parse(cls, value: "Category | str") -> "Category":
        """Accept a member, its value, or its name in any case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown category: {value!r}")


class AwardType(Enum):
    """Closing-ceremony award categories."""
    BEST_ORAL = "BestOral"
    BEST_POSTER = "BestPoster"
    PEOPLES_CHOICE = "PeoplesChoice"

    @property
    def display_name(self) -> str:
        return _AWARD_DISPLAY_NAMES[self]


_AWARD_DISPLAY_NAMES = {
    AwardType.BEST_ORAL: "Best Oral Presentation",
    AwardType.BEST_POSTER: "Best Poster Presentation",
    AwardType.PEOPLES_CHOICE: "People's Choice Award",
}


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

@dataclass
class Presenter:
    """A registered student presenter."""

    presenter_id: str
    name: str = ""
    category: Category | None = None
    research_title: str = ""
    supervisor: str = ""
    vote_count: int = 0
    has_voted: bool = False


@dataclass
class Evaluator:
    """A registered evaluator.

    ``assigned_session_ids`` is a derived index of the sessions whose
    evaluator list contains this evaluator. Only ``SessionService`` writes it.
    """

    evaluator_id: str
    name: str = ""
    assigned_session_ids: list[str] = field(default_factory=list)

    def add_assigned_session(self, session_id: str) -> None:
        if session_id not in self.assigned_session_ids:
            self.assigned_session_ids.append(session_id)

    def remove_assigned_session(self, session_id: str) -> None:
        if session_id in self.assigned_session_ids:
            self.assigned_session_ids.remove(session_id)


# ---------------------------------------------------------------------------
# Sessions, evaluations, boards
# ---------------------------------------------------------------------------

@dataclass
class Session:
    """A scheduled slot: one date, one venue, one category."""

    session_id: str
    date: date | None
    venue: str
    category: Category | None
    presenter_ids: list[str] = field(default_factory=list)
    evaluator_ids: list[str] = field(default_factory=list)

    def add_presenter(self, presenter_id: str) -> None:
        if presenter_id not in self.presenter_ids:
            self.presenter_ids.append(presenter_id)

    def remove_presenter(self, presenter_id: str) -> None:
        if presenter_id in self.presenter_ids:
            self.presenter_ids.remove(presenter_id)

    def add_evaluator(self, evaluator_id: str) -> None:
        if evaluator_id not in self.evaluator_ids:
            self.evaluator_ids.append(evaluator_id)

    def remove_evaluator(self, evaluator_id: str) -> None:
        if evaluator_id in self.evaluator_ids:
            self.evaluator_ids.remove(evaluator_id)

    def lists_participant(self, participant_id: str) -> bool:
        """True if the id appears as presenter or evaluator."""
        return participant_id in self.presenter_ids or participant_id in self.evaluator_ids


@dataclass
class Evaluation:
    """One evaluator's rubric scores for one presenter."""

    evaluation_id: str | None = None
    presenter_id: str | None = None
    evaluator_id: str | None = None
    session_id: str | None = None
    scores: RubricScores | None = None
    comments: str = ""
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class PosterBoard:
    """A poster board held by one presenter for one session."""

    board_id: str
    presenter_id: str
    session_id: str


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Award:
    """Derived award record. Recomputable at any time."""

    award_type: AwardType
    winner_id: str
    score: float


@dataclass
class CeremonyAgenda:
    """Ordered awards for the closing ceremony."""

    awards: list[Award] = field(default_factory=list)
    ceremony_date: datetime | None = None

    def add_award(self, award: Award | None) -> None:
        if award is not None:
            self.awards.append(award)

    def award_for(self, award_type: AwardType) -> Award | None:
        for award in self.awards:
            if award.award_type is award_type:
                return award
        return None
