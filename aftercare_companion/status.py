from __future__ import annotations

import math
from typing import Sequence

from .models import Milestone, MilestoneStatus, MilestoneView


DEFAULT_HORIZON_DAYS = 90
CURRENT_WINDOW_DAYS = 2


def resolve_status(milestone: Milestone, days_post_op: int) -> MilestoneStatus:
    offset = milestone.day_offset
    if offset < days_post_op:
        return MilestoneStatus.COMPLETE
    # Closed window [d, d + 2]; several milestones may be current together.
    if offset == days_post_op or days_post_op <= offset <= days_post_op + CURRENT_WINDOW_DAYS:
        return MilestoneStatus.CURRENT
    return MilestoneStatus.UPCOMING


def milestone_statuses(milestones: Sequence[Milestone], days_post_op: int) -> list[MilestoneView]:
    return [MilestoneView(milestone=m, status=resolve_status(m, days_post_op)) for m in milestones]


def current_milestones(milestones: Sequence[Milestone], days_post_op: int) -> list[Milestone]:
    return [m for m in milestones if resolve_status(m, days_post_op) == MilestoneStatus.CURRENT]


def next_milestone(milestones: Sequence[Milestone], days_post_op: int) -> Milestone | None:
    for m in milestones:
        if resolve_status(m, days_post_op) != MilestoneStatus.COMPLETE:
            return m
    return None


def progress_percent(days_post_op: int, horizon_days: int = DEFAULT_HORIZON_DAYS) -> int:
    """Share of the fixed recovery horizon elapsed, as a display percentage.

    The horizon does not depend on the selected procedure, so a 365-day
    timeline reads 100% from day 90 onwards. Rounds half up.
    """
    if horizon_days <= 0:
        raise ValueError(f"horizon_days must be > 0, got {horizon_days}")
    raw = min(days_post_op / horizon_days * 100, 100)
    return max(0, int(math.floor(raw + 0.5)))
