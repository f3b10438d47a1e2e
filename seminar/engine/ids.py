"""Identifier allocation.

Participant, session and evaluation ids are prefixed UUID4 strings so they
are never reused. Board ids come from a fixed, enumerable space.
"""

from __future__ import annotations

import uuid


def _prefixed(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def new_presenter_id() -> str:
    return _prefixed("P")


def new_evaluator_id() -> str:
    return _prefixed("V")


def new_session_id() -> str:
    return _prefixed("S")


def new_evaluation_id() -> str:
    return _prefixed("E")


def board_id(number: int, prefix: str = "B", width: int = 3) -> str:
    """Format a board number, e.g. ``board_id(7) == "B007"``."""
    return f"{prefix}{number:0{width}d}"
