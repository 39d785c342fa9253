"""Planned-date alignment for contract suspensions.

A suspension freezes contractual time, so a planned date that falls after a
suspension is pushed back by the suspended duration before it is compared
with real calendar progress.
"""

from __future__ import annotations

from datetime import date, timedelta

from obra_control.core.models import Project


def suspended_days_before(when: date, project: Project) -> int:
    """Total inclusive length of suspensions that end on or before `when`.

    Suspensions with a missing end point or ending before they start are ignored.
    """
    days = 0
    for suspension in project.suspensions:
        if suspension.start is None or suspension.end is None:
            continue
        if suspension.end < suspension.start:
            continue
        if suspension.end <= when:
            days += (suspension.end - suspension.start).days + 1
    return days


def shift_date(when: date, project: Project) -> date:
    return when + timedelta(days=suspended_days_before(when, project))


__all__ = ["suspended_days_before", "shift_date"]
