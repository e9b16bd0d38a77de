from pathlib import Path

from aftercare_companion.sweep import QualityThresholds, quality_gate, run_timeline_sweep, save_sweep_report


def test_sweep_over_default_catalog() -> None:
    metrics, rows = run_timeline_sweep()
    assert metrics.procedures == 3
    assert metrics.days_checked == 3 * 365
    assert len(rows) == metrics.days_checked
    assert metrics.status_regressions == 0
    assert metrics.progress_regressions == 0
    assert metrics.max_concurrent_current == 2
    assert metrics.days_without_current > 0


def test_sweep_rows_for_single_procedure() -> None:
    _, rows = run_timeline_sweep(procedure_ids=["liposuction"], first_day=1, last_day=3)
    assert [r.days_post_op for r in rows] == [1, 2, 3]
    assert rows[0].current == 2
    assert rows[0].complete == 0
    assert rows[2].complete == 1
    assert rows[2].current == 1


def test_sweep_report_persistence(tmp_path: Path) -> None:
    metrics, rows = run_timeline_sweep(procedure_ids=["rhinoplasty"], first_day=1, last_day=30)
    json_path, csv_path = save_sweep_report(metrics, rows, tmp_path)
    assert json_path.exists()
    assert csv_path.exists()
    assert len(csv_path.read_text(encoding="utf-8").strip().splitlines()) == 31


def test_quality_gate_pass_and_fail() -> None:
    metrics, _ = run_timeline_sweep()

    ok, failures = quality_gate(metrics, QualityThresholds())
    assert ok is True
    assert failures == []

    strict = QualityThresholds(
        max_status_regressions=-1,
        max_progress_regressions=-1,
        max_concurrent_current=1,
    )
    ok2, failures2 = quality_gate(metrics, strict)
    assert ok2 is False
    assert len(failures2) == 3
