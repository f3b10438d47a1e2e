"""Configuration loading, validation, and defaults."""

from seminar.config.loader import load_config
from seminar.config.schema import SeminarConfig

__all__ = ["load_config", "SeminarConfig"]
