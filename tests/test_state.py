import pytest

from aftercare_companion.catalog import UnknownProcedure
from aftercare_companion.state import SelectionState
from aftercare_companion.validators import InvalidDayValue


def test_initial_selection() -> None:
    selection = SelectionState("rhinoplasty", days_post_op=5)
    state = selection.snapshot()
    assert state.selected_procedure_id == "rhinoplasty"
    assert state.days_post_op == 5


def test_unknown_procedure_rejected_on_create_and_set() -> None:
    with pytest.raises(UnknownProcedure):
        SelectionState("unknown")

    selection = SelectionState("rhinoplasty")
    with pytest.raises(UnknownProcedure):
        selection.set_procedure("unknown")
    assert selection.procedure_id == "rhinoplasty"


def test_days_are_clamped() -> None:
    selection = SelectionState("liposuction")
    assert selection.set_days_post_op(0) is True
    assert selection.days_post_op == 1
    assert selection.set_days_post_op(500) is True
    assert selection.days_post_op == 365
    assert selection.set_days_post_op(42) is False
    assert selection.days_post_op == 42


def test_milestones_follow_procedure_change() -> None:
    selection = SelectionState("rhinoplasty")
    assert selection.milestones[-1].day_offset == 365

    selection.set_procedure("liposuction")
    assert selection.milestones[-1].day_offset == 180
    assert selection.milestones[2].title == "Return to Light Activity"


def test_infinite_days_clamp_to_bounds() -> None:
    selection = SelectionState("rhinoplasty", days_post_op=float("inf"))
    assert selection.days_post_op == 365
    assert selection.set_days_post_op(float("-inf")) is True
    assert selection.days_post_op == 1


def test_nan_and_non_numeric_days_rejected() -> None:
    selection = SelectionState("rhinoplasty", days_post_op=10)
    for bad in (float("nan"), "5", True, None):
        with pytest.raises(InvalidDayValue):
            selection.set_days_post_op(bad)
    assert selection.days_post_op == 10


def test_clamp_flag_tracks_stored_value() -> None:
    selection = SelectionState("liposuction")
    assert selection.set_days_post_op(5.0) is False
    assert selection.days_post_op == 5
    assert selection.set_days_post_op(5.5) is True
    assert selection.days_post_op == 5
