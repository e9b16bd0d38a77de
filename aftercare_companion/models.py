from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MilestoneStatus(str, Enum):
    COMPLETE = "complete"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class Milestone:
    day_offset: int
    title: str
    description: str
    # Static catalog label, never consulted by the resolver.
    baseline_status: MilestoneStatus = MilestoneStatus.UPCOMING


@dataclass(frozen=True)
class Procedure:
    procedure_id: str
    name: str
    milestones: tuple[Milestone, ...]

    def __post_init__(self) -> None:
        if not self.milestones:
            raise ValueError(f"Procedure '{self.procedure_id}' must have at least one milestone")
        previous = -1
        for milestone in self.milestones:
            if milestone.day_offset < 0:
                raise ValueError(
                    f"Procedure '{self.procedure_id}' has negative day_offset {milestone.day_offset}"
                )
            if milestone.day_offset <= previous:
                raise ValueError(
                    f"Procedure '{self.procedure_id}' milestones must have strictly increasing "
                    f"day_offset, got {milestone.day_offset} after {previous}"
                )
            previous = milestone.day_offset

    @property
    def final_day(self) -> int:
        return self.milestones[-1].day_offset


@dataclass(frozen=True)
class RecoveryState:
    selected_procedure_id: str
    days_post_op: int


@dataclass(frozen=True)
class MilestoneView:
    milestone: Milestone
    status: MilestoneStatus


@dataclass(frozen=True)
class RecoverySnapshot:
    procedure_id: str
    procedure_name: str
    days_post_op: int
    progress_percent: int
    milestones: list[MilestoneView] = field(default_factory=list)

    def current(self) -> list[MilestoneView]:
        return [v for v in self.milestones if v.status == MilestoneStatus.CURRENT]
