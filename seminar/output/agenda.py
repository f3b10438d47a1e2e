"""Plain-text rendering of the award ceremony agenda."""

from __future__ import annotations

from seminar.engine.models import CeremonyAgenda

RULE = "=" * 43
THIN_RULE = "-" * 43
DATE_FORMAT = "%B %d, %Y at %H:%M"


def format_agenda(agenda: CeremonyAgenda, title: str = "RESEARCH SEMINAR") -> str:
    """Render the agenda as the numbered award sequence read at the ceremony."""
    lines = [
        RULE,
        f"    {title}",
        "         AWARD CEREMONY AGENDA",
        RULE,
        "",
    ]
    if agenda.ceremony_date is not None:
        lines += [f"Date: {agenda.ceremony_date.strftime(DATE_FORMAT)}", ""]

    lines += ["AWARD PRESENTATIONS:", THIN_RULE, ""]
    for order, award in enumerate(agenda.awards, start=1):
        lines += [
            f"{order}. {award.award_type.display_name}",
            f"   Winner ID: {award.winner_id}",
            f"   Score: {award.score:.2f}",
            "",
        ]
    if not agenda.awards:
        lines += ["   No awards have been determined yet.", ""]

    lines += [RULE, "    Congratulations to all winners!", RULE]
    return "\n".join(lines) + "\n"
