"""Default values for the seminar engine.

These mirror the rules the seminar committee publishes to presenters and
evaluators. Changing the score range or rubric weights changes how every
stored evaluation is interpreted.
"""

# ---------------------------------------------------------------------------
# Rubric
# ---------------------------------------------------------------------------
SCORE_RANGE = (1, 10)  # inclusive, per criterion

RUBRIC_CRITERIA = (
    "problem_clarity",
    "methodology",
    "results",
    "presentation",
)

# Must sum to 1.0
RUBRIC_WEIGHTS = {
    "problem_clarity": 0.25,
    "methodology": 0.25,
    "results": 0.25,
    "presentation": 0.25,
}

RUBRIC_LABELS = {
    "problem_clarity": "Problem Clarity",
    "methodology": "Methodology",
    "results": "Results",
    "presentation": "Presentation",
}

# ---------------------------------------------------------------------------
# Poster boards
# ---------------------------------------------------------------------------
BOARD_DEFAULTS = {
    "count": 100,   # B001..B100
    "prefix": "B",
    "width": 3,
}

# ---------------------------------------------------------------------------
# Sessions (None = unlimited)
# ---------------------------------------------------------------------------
SESSION_DEFAULTS = {
    "max_presenters_per_session": None,
    "max_evaluators_per_session": None,
}

# ---------------------------------------------------------------------------
# Storage & output
# ---------------------------------------------------------------------------
DATABASE_PATH = "~/.seminar/seminar.db"
REPORT_DIR = "~/.seminar/reports"
