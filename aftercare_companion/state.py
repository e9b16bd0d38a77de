from __future__ import annotations

from .catalog import DEFAULT_CATALOG, ProcedureCatalog
from .models import Milestone, RecoveryState
from .validators import MIN_DAYS_POST_OP, clamp_days_post_op


class SelectionState:
    """Host-owned selection: which procedure is shown and for which day.

    Out-of-range day values are clamped into [1, 365] here, so the engine's
    precondition always holds for values read back from this object.
    """

    def __init__(
        self,
        procedure_id: str,
        days_post_op: int = MIN_DAYS_POST_OP,
        catalog: ProcedureCatalog | None = None,
    ) -> None:
        self._catalog = catalog or DEFAULT_CATALOG
        self._catalog.lookup(procedure_id)
        self._procedure_id = procedure_id
        self._days_post_op = clamp_days_post_op(days_post_op)

    @property
    def procedure_id(self) -> str:
        return self._procedure_id

    @property
    def days_post_op(self) -> int:
        return self._days_post_op

    @property
    def milestones(self) -> tuple[Milestone, ...]:
        return self._catalog.lookup(self._procedure_id).milestones

    def set_procedure(self, procedure_id: str) -> None:
        self._catalog.lookup(procedure_id)
        self._procedure_id = procedure_id

    def set_days_post_op(self, value: int) -> bool:
        """Store the clamped value; return True if clamping changed it.

        Non-numeric values, booleans and NaN raise InvalidDayValue and leave
        the stored day untouched.
        """
        clamped = clamp_days_post_op(value)
        self._days_post_op = clamped
        return clamped != value

    def snapshot(self) -> RecoveryState:
        return RecoveryState(selected_procedure_id=self._procedure_id, days_post_op=self._days_post_op)
