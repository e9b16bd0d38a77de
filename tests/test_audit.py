import json
from pathlib import Path

from aftercare_companion.audit import AuditLogger
from aftercare_companion.companion import CompanionSystem


def test_audit_log_records_events_without_selection_details(tmp_path: Path) -> None:
    audit_path = tmp_path / "audit.jsonl"
    system = CompanionSystem(audit_log_path=str(audit_path))

    session_id = system.start_session("breast_augmentation", days_post_op=12)
    system.select_procedure(session_id, "liposuction")
    system.set_day(session_id, 400)
    system.delete_session(session_id)

    raw = audit_path.read_text(encoding="utf-8")
    records = [json.loads(line) for line in raw.strip().splitlines()]
    assert [r["event_type"] for r in records] == [
        "session_start",
        "procedure_selected",
        "days_clamped",
        "session_deleted",
    ]
    for record in records:
        assert record["payload"] == {"session_id": session_id}

    assert "procedure_id" not in raw
    assert "days_post_op" not in raw
    assert "liposuction" not in raw
    assert "requested" not in raw


def test_no_audit_file_without_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    system = CompanionSystem()
    sid = system.start_session("rhinoplasty", days_post_op=500)
    system.set_day(sid, 0)

    assert list(tmp_path.iterdir()) == []


def test_audit_truncates_long_values(tmp_path: Path) -> None:
    logger = AuditLogger(tmp_path / "audit.jsonl")
    logger.write("note", {"text": "x" * 600})
    record = json.loads(logger.log_path.read_text(encoding="utf-8"))
    assert record["payload"]["text"].endswith("...[truncated]")
    assert len(record["payload"]["text"]) == 500 + len("...[truncated]")
