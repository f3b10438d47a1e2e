"""Text rendering: ceremony agenda and seminar reports."""

from seminar.output.agenda import format_agenda
from seminar.output.reports import (
    evaluation_report,
    export_report,
    schedule_report,
    summary_report,
)

__all__ = [
    "evaluation_report",
    "export_report",
    "format_agenda",
    "schedule_report",
    "summary_report",
]
