from __future__ import annotations

import argparse

from .catalog import UnknownProcedure
from .engine import RecoveryEngine
from .models import MilestoneStatus, RecoverySnapshot
from .state import SelectionState


_MARKERS = {
    MilestoneStatus.COMPLETE: "[x]",
    MilestoneStatus.CURRENT: "[>]",
    MilestoneStatus.UPCOMING: "[ ]",
}


def render_timeline(snapshot: RecoverySnapshot) -> str:
    lines = [f"{snapshot.procedure_name} - day {snapshot.days_post_op} ({snapshot.progress_percent}% of recovery)"]
    for view in snapshot.milestones:
        m = view.milestone
        lines.append(f"  {_MARKERS[view.status]} Day {m.day_offset:>3}  {m.title}: {m.description}")
    return "\n".join(lines)


def handle_command(selection: SelectionState, engine: RecoveryEngine, line: str) -> str:
    parts = line.split()
    if not parts:
        return render_timeline(engine.snapshot(selection.snapshot()))

    command = parts[0].lower()
    if command == "list":
        return "\n".join(f"  {pid}: {name}" for pid, name in engine.get_procedure_list())
    if command == "day" and len(parts) == 2:
        try:
            value = int(parts[1])
        except ValueError:
            return f"Not a number: {parts[1]}"
        clamped = selection.set_days_post_op(value)
        note = f"(clamped to {selection.days_post_op})\n" if clamped else ""
        return note + render_timeline(engine.snapshot(selection.snapshot()))
    if command == "procedure" and len(parts) == 2:
        try:
            selection.set_procedure(parts[1])
        except UnknownProcedure as exc:
            return str(exc)
        return render_timeline(engine.snapshot(selection.snapshot()))
    return "Commands: day N | procedure ID | list | exit"


def main() -> None:
    parser = argparse.ArgumentParser(description="Post-operative recovery timeline viewer")
    parser.add_argument("--procedure", default="rhinoplasty", help="Procedure ID")
    parser.add_argument("--day", type=int, default=1, help="Days since surgery")
    args = parser.parse_args()

    engine = RecoveryEngine()
    try:
        selection = SelectionState(args.procedure, catalog=engine.catalog)
    except UnknownProcedure as exc:
        parser.error(str(exc))
    selection.set_days_post_op(args.day)
    print(render_timeline(engine.snapshot(selection.snapshot())))
    print("Type 'exit' to quit.")

    while True:
        user_input = input("aftercare> ").strip()
        if user_input.lower() in {"exit", "quit"}:
            break
        print(handle_command(selection, engine, user_input))


if __name__ == "__main__":
    main()
