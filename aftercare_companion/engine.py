from __future__ import annotations

from .catalog import DEFAULT_CATALOG, ProcedureCatalog
from .models import Milestone, MilestoneView, RecoverySnapshot, RecoveryState
from .status import DEFAULT_HORIZON_DAYS, milestone_statuses, progress_percent
from .validators import validate_days_post_op


class RecoveryEngine:
    """Query interface over the procedure catalog.

    Holds no selection of its own: every call takes the procedure id and
    day value from the caller and derives statuses afresh.
    """

    def __init__(
        self,
        catalog: ProcedureCatalog | None = None,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self._catalog = catalog or DEFAULT_CATALOG
        self._horizon_days = horizon_days

    @property
    def catalog(self) -> ProcedureCatalog:
        return self._catalog

    def get_procedure_list(self) -> list[tuple[str, str]]:
        return self._catalog.list_procedures()

    def get_milestones(self, procedure_id: str) -> tuple[Milestone, ...]:
        return self._catalog.lookup(procedure_id).milestones

    def get_milestone_status(self, procedure_id: str, days_post_op: int) -> list[MilestoneView]:
        milestones = self.get_milestones(procedure_id)
        return milestone_statuses(milestones, validate_days_post_op(days_post_op))

    def get_progress_percent(self, days_post_op: int) -> int:
        return progress_percent(validate_days_post_op(days_post_op), self._horizon_days)

    def snapshot(self, state: RecoveryState) -> RecoverySnapshot:
        procedure = self._catalog.lookup(state.selected_procedure_id)
        return RecoverySnapshot(
            procedure_id=procedure.procedure_id,
            procedure_name=procedure.name,
            days_post_op=state.days_post_op,
            progress_percent=self.get_progress_percent(state.days_post_op),
            milestones=self.get_milestone_status(procedure.procedure_id, state.days_post_op),
        )
