import pytest

from aftercare_companion.catalog import DEFAULT_CATALOG
from aftercare_companion.models import Milestone, MilestoneStatus
from aftercare_companion.status import (
    current_milestones,
    milestone_statuses,
    next_milestone,
    progress_percent,
    resolve_status,
)


def _by_day(procedure_id: str, days_post_op: int) -> dict[int, MilestoneStatus]:
    milestones = DEFAULT_CATALOG.lookup(procedure_id).milestones
    return {v.milestone.day_offset: v.status for v in milestone_statuses(milestones, days_post_op)}


def test_past_milestones_are_complete() -> None:
    m = Milestone(10, "Check", "desc")
    for d in range(11, 40):
        assert resolve_status(m, d) == MilestoneStatus.COMPLETE


def test_three_day_window_is_current() -> None:
    m = Milestone(10, "Check", "desc")
    assert resolve_status(m, 8) == MilestoneStatus.CURRENT
    assert resolve_status(m, 9) == MilestoneStatus.CURRENT
    assert resolve_status(m, 10) == MilestoneStatus.CURRENT
    assert resolve_status(m, 7) == MilestoneStatus.UPCOMING


def test_far_milestones_are_upcoming() -> None:
    m = Milestone(30, "Check", "desc")
    for d in range(1, 28):
        assert resolve_status(m, d) == MilestoneStatus.UPCOMING


def test_status_never_regresses_as_days_advance() -> None:
    rank = {MilestoneStatus.UPCOMING: 0, MilestoneStatus.CURRENT: 1, MilestoneStatus.COMPLETE: 2}
    for offset in (0, 1, 7, 90, 365):
        m = Milestone(offset, "Check", "desc")
        ranks = [rank[resolve_status(m, d)] for d in range(1, 366)]
        assert ranks == sorted(ranks)


def test_baseline_status_is_ignored() -> None:
    m = Milestone(3, "Check", "desc", baseline_status=MilestoneStatus.COMPLETE)
    assert resolve_status(m, 1) == MilestoneStatus.CURRENT


def test_rhinoplasty_day_5() -> None:
    statuses = _by_day("rhinoplasty", 5)
    assert statuses[1] == MilestoneStatus.COMPLETE
    assert statuses[3] == MilestoneStatus.COMPLETE
    assert statuses[7] == MilestoneStatus.CURRENT
    assert statuses[14] == MilestoneStatus.UPCOMING
    assert progress_percent(5) == 6


def test_rhinoplasty_day_7() -> None:
    statuses = _by_day("rhinoplasty", 7)
    assert statuses[7] == MilestoneStatus.CURRENT
    assert statuses[3] == MilestoneStatus.COMPLETE


def test_rhinoplasty_day_90() -> None:
    statuses = _by_day("rhinoplasty", 90)
    assert statuses[90] == MilestoneStatus.CURRENT
    assert statuses[365] == MilestoneStatus.UPCOMING
    assert progress_percent(90) == 100


def test_liposuction_day_1_has_two_current_milestones() -> None:
    statuses = _by_day("liposuction", 1)
    assert statuses[1] == MilestoneStatus.CURRENT
    assert statuses[3] == MilestoneStatus.CURRENT
    assert statuses[7] == MilestoneStatus.UPCOMING

    milestones = DEFAULT_CATALOG.lookup("liposuction").milestones
    assert [m.day_offset for m in current_milestones(milestones, 1)] == [1, 3]


def test_no_current_milestone_between_checkpoints() -> None:
    milestones = DEFAULT_CATALOG.lookup("rhinoplasty").milestones
    assert current_milestones(milestones, 20) == []
    nxt = next_milestone(milestones, 20)
    assert nxt is not None
    assert nxt.day_offset == 30


def test_next_milestone_none_after_final_day() -> None:
    milestones = DEFAULT_CATALOG.lookup("liposuction").milestones
    assert next_milestone(milestones, 181) is None


def test_progress_clamps_and_is_monotonic() -> None:
    values = [progress_percent(d) for d in range(1, 366)]
    assert values == sorted(values)
    assert progress_percent(1) == 1
    assert progress_percent(45) == 50
    assert progress_percent(89) == 99
    assert progress_percent(365) == 100
    assert all(v == 100 for v in values[89:])


def test_progress_custom_horizon() -> None:
    assert progress_percent(10, horizon_days=20) == 50
    assert progress_percent(1, horizon_days=8) == 13


def test_progress_rejects_non_positive_horizon() -> None:
    with pytest.raises(ValueError, match="horizon_days"):
        progress_percent(5, horizon_days=0)
