"""Pydantic models for seminar.yaml validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from seminar.config.defaults import (
    BOARD_DEFAULTS,
    DATABASE_PATH,
    REPORT_DIR,
    SCORE_RANGE,
    SESSION_DEFAULTS,
)


# ---------------------------------------------------------------------------
# Engine Configs
# ---------------------------------------------------------------------------

class ScoringConfig(BaseModel):
    min_score: int = SCORE_RANGE[0]
    max_score: int = SCORE_RANGE[1]

    @model_validator(mode="after")
    def range_is_ordered(self) -> "ScoringConfig":
        if self.min_score > self.max_score:
            raise ValueError(
                f"min_score ({self.min_score}) must not exceed max_score ({self.max_score})"
            )
        return self


class BoardsConfig(BaseModel):
    count: int = BOARD_DEFAULTS["count"]
    prefix: str = BOARD_DEFAULTS["prefix"]
    width: int = BOARD_DEFAULTS["width"]

    @field_validator("count", "width")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}")
        return v


class SessionsConfig(BaseModel):
    max_presenters_per_session: int | None = SESSION_DEFAULTS["max_presenters_per_session"]
    max_evaluators_per_session: int | None = SESSION_DEFAULTS["max_evaluators_per_session"]

    @field_validator("max_presenters_per_session", "max_evaluators_per_session")
    @classmethod
    def limit_is_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"session capacity must be >= 1, got {v}")
        return v


# ---------------------------------------------------------------------------
# Storage & Output
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    path: str = DATABASE_PATH


class OutputConfig(BaseModel):
    report_dir: str = REPORT_DIR


# ---------------------------------------------------------------------------
# Top-Level Config
# ---------------------------------------------------------------------------

class SeminarConfig(BaseModel):
    """Root configuration model for the seminar engine."""

    version: int = 1
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    boards: BoardsConfig = Field(default_factory=BoardsConfig)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Drop them so defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
