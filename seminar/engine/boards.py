"""Poster board allocation.

Boards come from a fixed space (``B001``..``B100`` by default). A board
holds at most one presenter at a time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seminar.config.schema import BoardsConfig
from seminar.engine.ids import board_id
from seminar.engine.locking import board_key
from seminar.engine.models import PosterBoard
from seminar.errors import ConflictError, ValidationError

if TYPE_CHECKING:
    from seminar.storage.repository import Repository

logger = logging.getLogger(__name__)


class BoardService:
    """Assign and release poster boards."""

    def __init__(self, repo: Repository, settings: BoardsConfig | None = None):
        self.repo = repo
        self.settings = settings or BoardsConfig()

    def board_ids(self) -> list[str]:
        """Every board id in the configured space, ascending."""
        return [
            board_id(n, self.settings.prefix, self.settings.width)
            for n in range(1, self.settings.count + 1)
        ]

    def assign_board(self, board: str, presenter_id: str, session_id: str) -> PosterBoard:
        """Give ``board`` to a presenter for a session.

        Raises ConflictError naming the current occupant if the board is
        already taken.
        """
        for field, value in (("board_id", board), ("presenter_id", presenter_id), ("session_id", session_id)):
            if value is None or not str(value).strip():
                raise ValidationError(f"{field} is required", field=field)
        if board not in self.board_ids():
            raise ValidationError(f"Unknown board {board}", field="board_id")

        with self.repo.locks.hold(board_key(board)):
            existing = self.repo.get_poster_board(board)
            if existing is not None:
                logger.warning(
                    "Board %s already held by presenter %s", board, existing.presenter_id,
                )
                raise ConflictError(
                    f"Board {board} is already assigned to presenter {existing.presenter_id}",
                    board_id=board,
                    occupant_id=existing.presenter_id,
                    session_id=existing.session_id,
                )
            assignment = PosterBoard(board_id=board, presenter_id=presenter_id, session_id=session_id)
            self.repo.put_poster_board(assignment)

        logger.info("Assigned board %s to presenter %s (session %s)", board, presenter_id, session_id)
        return assignment

    def unassign_board(self, board: str) -> bool:
        """Release a board. Returns True if it was assigned."""
        with self.repo.locks.hold(board_key(board)):
            removed = self.repo.delete_poster_board(board)
        if removed:
            logger.info("Released board %s", board)
        return removed

    def is_board_assigned(self, board: str) -> bool:
        return self.repo.get_poster_board(board) is not None

    def get_board(self, board: str) -> PosterBoard | None:
        return self.repo.get_poster_board(board)

    def get_available_boards(self) -> list[str]:
        taken = {b.board_id for b in self.repo.list_poster_boards()}
        return [b for b in self.board_ids() if b not in taken]

    def list_assignments(self) -> list[PosterBoard]:
        return self.repo.list_poster_boards()

    def boards_for_session(self, session_id: str) -> list[PosterBoard]:
        return [b for b in self.repo.list_poster_boards() if b.session_id == session_id]
