from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from .models import Milestone, MilestoneStatus, Procedure
from .validators import ValidationError, validate_procedure_id


class UnknownProcedure(ValueError):
    def __init__(self, procedure_id: str) -> None:
        super().__init__(f"Unknown procedure_id: {procedure_id}")
        self.procedure_id = procedure_id


class ProcedureCatalog:
    """Read-only registry of recovery timelines keyed by procedure id."""

    def __init__(self, procedures: Iterable[Procedure]) -> None:
        registry: dict[str, Procedure] = {}
        for procedure in procedures:
            if procedure.procedure_id in registry:
                raise ValueError(f"Duplicate procedure_id: {procedure.procedure_id}")
            registry[procedure.procedure_id] = procedure
        if not registry:
            raise ValueError("Procedure catalog must not be empty")
        self._procedures = registry

    def lookup(self, procedure_id: str) -> Procedure:
        procedure = self._procedures.get(procedure_id)
        if procedure is None:
            raise UnknownProcedure(procedure_id)
        return procedure

    def list_procedures(self) -> list[tuple[str, str]]:
        return [(p.procedure_id, p.name) for p in self._procedures.values()]

    def procedure_ids(self) -> list[str]:
        return list(self._procedures.keys())

    def __contains__(self, procedure_id: object) -> bool:
        return procedure_id in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)


def default_procedures() -> tuple[Procedure, ...]:
    return (
        Procedure(
            "rhinoplasty",
            "Rhinoplasty",
            (
                Milestone(1, "Surgery Day", "Rest with your head elevated and apply cold compresses around the eyes.", MilestoneStatus.COMPLETE),
                Milestone(3, "Peak Swelling", "Swelling and bruising peak; keep sleeping upright and avoid blowing your nose.", MilestoneStatus.COMPLETE),
                Milestone(7, "Cast/Splint Removal", "Your surgeon removes the external splint and any internal packing.", MilestoneStatus.CURRENT),
                Milestone(14, "Bruising Fades", "Most visible bruising resolves; light daily activity can resume."),
                Milestone(30, "Return to Exercise", "Gentle cardio is usually cleared; still avoid contact sports and glasses on the bridge."),
                Milestone(90, "Swelling Mostly Resolved", "Around 80% of swelling has settled and the new profile is visible."),
                Milestone(365, "Final Results", "Residual tip swelling has resolved and the final shape is established."),
            ),
        ),
        Procedure(
            "breast_augmentation",
            "Breast Augmentation",
            (
                Milestone(1, "Surgery Day", "Wear the surgical bra at all times and keep arm movement minimal.", MilestoneStatus.COMPLETE),
                Milestone(3, "First Follow-up", "Dressings are checked and pain typically starts to ease.", MilestoneStatus.COMPLETE),
                Milestone(7, "Return to Desk Work", "Light, non-strenuous work can resume; no lifting over 5 kg.", MilestoneStatus.CURRENT),
                Milestone(14, "Suture Check", "Incisions are reviewed and any external sutures are removed."),
                Milestone(42, "Resume Exercise", "Upper body workouts can be reintroduced gradually with approval."),
                Milestone(90, "Implants Settle", "Implants drop and soften into a more natural position."),
                Milestone(180, "Final Results", "Scars continue to fade and the final shape is established."),
            ),
        ),
        Procedure(
            "liposuction",
            "Liposuction",
            (
                Milestone(1, "Surgery Day", "Wear the compression garment continuously and expect fluid drainage.", MilestoneStatus.COMPLETE),
                Milestone(3, "Drainage Subsides", "Fluid drainage from incision sites slows; short walks help circulation.", MilestoneStatus.CURRENT),
                Milestone(7, "Return to Light Activity", "Light daily activity and desk work can usually resume."),
                Milestone(14, "Compression Check", "Swelling is reviewed and the garment fit may be adjusted."),
                Milestone(30, "Resume Exercise", "Most patients are cleared for normal exercise routines."),
                Milestone(90, "Contours Emerge", "The majority of swelling has resolved and new contours are visible."),
                Milestone(180, "Final Results", "Skin has retracted and the final contour is established."),
            ),
        ),
    )


def _load_json_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}") from exc


def _parse_milestone(raw: Any, path: Path) -> Milestone:
    if not isinstance(raw, dict):
        raise ValueError(f"Milestone entries must be objects in {path}")
    missing = [k for k in ("day_offset", "title", "description") if k not in raw]
    if missing:
        raise ValueError(f"Milestone missing required fields in {path}: {', '.join(missing)}")
    day_offset = raw["day_offset"]
    if isinstance(day_offset, bool) or not isinstance(day_offset, int):
        raise ValueError(f"Milestone field 'day_offset' must be an integer in {path}")
    baseline = raw.get("baseline_status", MilestoneStatus.UPCOMING.value)
    try:
        baseline_status = MilestoneStatus(str(baseline))
    except ValueError as exc:
        raise ValueError(f"Unknown baseline_status '{baseline}' in {path}") from exc
    return Milestone(
        day_offset=day_offset,
        title=str(raw["title"]),
        description=str(raw["description"]),
        baseline_status=baseline_status,
    )


def _parse_procedure(raw: dict[str, Any], path: Path) -> Procedure:
    required = ("procedure_id", "name", "milestones")
    missing = [k for k in required if k not in raw]
    if missing:
        raise ValueError(f"Procedure payload missing required fields in {path}: {', '.join(missing)}")

    milestones = raw["milestones"]
    if not isinstance(milestones, list):
        raise ValueError(f"Procedure field 'milestones' must be an array in {path}")

    try:
        procedure_id = validate_procedure_id(str(raw["procedure_id"]))
    except ValidationError as exc:
        raise ValueError(f"{exc} ({path})") from exc

    parsed = tuple(_parse_milestone(m, path) for m in milestones)
    try:
        return Procedure(procedure_id=procedure_id, name=str(raw["name"]), milestones=parsed)
    except ValueError as exc:
        raise ValueError(f"{exc} ({path})") from exc


def load_procedures(directory: Path) -> list[Procedure]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Catalog directory not found: {directory}")

    procedures: list[Procedure] = []
    for path in sorted(directory.glob("*.json")):
        raw = _load_json_file(path)
        if not isinstance(raw, dict):
            raise ValueError(f"Procedure file must contain a JSON object: {path}")
        procedures.append(_parse_procedure(raw, path))
    return procedures


def build_catalog(directory: Path | None = None) -> ProcedureCatalog:
    procedures = list(default_procedures())
    if directory is not None:
        procedures.extend(load_procedures(directory))
    return ProcedureCatalog(procedures)


DEFAULT_CATALOG = build_catalog()
