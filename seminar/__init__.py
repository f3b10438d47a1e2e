"""Seminar -- assignment and scoring engine for a research seminar."""

__version__ = "0.1.0"
