from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
import json
import random

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aftercare_companion.companion import CompanionSystem
from aftercare_companion.models import RecoverySnapshot
from aftercare_companion.status import progress_percent, resolve_status


def _timeline_errors(system: CompanionSystem, snap: RecoverySnapshot) -> list[str]:
    errors: list[str] = []
    expected = system.engine.get_milestones(snap.procedure_id)
    if [v.milestone for v in snap.milestones] != list(expected):
        errors.append(f"{snap.procedure_id}@{snap.days_post_op}: milestones from another procedure")
    for view in snap.milestones:
        if view.status != resolve_status(view.milestone, snap.days_post_op):
            errors.append(f"{snap.procedure_id}@{snap.days_post_op}: day {view.milestone.day_offset} is {view.status.value}")
    if snap.progress_percent != progress_percent(snap.days_post_op):
        errors.append(f"{snap.procedure_id}@{snap.days_post_op}: progress {snap.progress_percent}")
    return errors


def _run_shared_session_churn(
    sessions: int = 4,
    workers: int = 16,
    operations: int = 400,
    seed: int = 7,
) -> dict[str, object]:
    system = CompanionSystem(max_sessions=sessions)
    procedure_ids = [pid for pid, _ in system.engine.get_procedure_list()]
    session_ids = [system.start_session(procedure_ids[i % len(procedure_ids)]) for i in range(sessions)]

    def _task(i: int) -> list[str]:
        rng = random.Random(seed + i)
        sid = session_ids[i % sessions]
        if rng.random() < 0.5:
            system.select_procedure(sid, rng.choice(procedure_ids))
        else:
            requested = rng.randint(-30, 400)
            state, clamped = system.set_day(sid, requested)
            if not 1 <= state.days_post_op <= 365:
                return [f"{sid}: stored day {state.days_post_op} out of range"]
            if clamped != (requested < 1 or requested > 365):
                return [f"{sid}: clamp flag {clamped} for {requested}"]
        return _timeline_errors(system, system.timeline(sid))

    errors: list[str] = []
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(_task, i) for i in range(operations)]
        for fut in as_completed(futures):
            errors.extend(fut.result())

    return {
        "passed": not errors,
        "sessions": sessions,
        "operations": operations,
        "errors": errors[:20],
    }


def _run_day_sweep_per_session() -> dict[str, object]:
    system = CompanionSystem()
    errors: list[str] = []
    for procedure_id, _ in system.engine.get_procedure_list():
        sid = system.start_session(procedure_id)
        previous = -1
        for day in range(1, 366):
            system.set_day(sid, day)
            snap = system.timeline(sid)
            errors.extend(_timeline_errors(system, snap))
            if snap.progress_percent < previous:
                errors.append(f"{procedure_id}@{day}: progress went backwards")
            previous = snap.progress_percent
        system.delete_session(sid)
    return {"passed": not errors, "errors": errors[:20]}


def main() -> None:
    churn = _run_shared_session_churn()
    sweep = _run_day_sweep_per_session()

    payload = {
        "shared_session_churn": churn,
        "day_sweep": sweep,
        "passed": bool(churn["passed"] and sweep["passed"]),
    }
    out_path = ROOT / "reports" / "stress_sessions_report.json"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    if not payload["passed"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
