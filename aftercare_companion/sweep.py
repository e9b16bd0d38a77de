from __future__ import annotations

import csv
from dataclasses import asdict, dataclass
import json
from pathlib import Path

from .engine import RecoveryEngine
from .models import MilestoneStatus
from .validators import MAX_DAYS_POST_OP, MIN_DAYS_POST_OP


_STATUS_RANK = {
    MilestoneStatus.UPCOMING: 0,
    MilestoneStatus.CURRENT: 1,
    MilestoneStatus.COMPLETE: 2,
}


@dataclass
class SweepMetrics:
    procedures: int
    days_checked: int
    status_regressions: int
    progress_regressions: int
    days_without_current: int
    max_concurrent_current: int


@dataclass
class SweepRow:
    procedure_id: str
    days_post_op: int
    complete: int
    current: int
    upcoming: int
    progress_percent: int


@dataclass(frozen=True)
class QualityThresholds:
    max_status_regressions: int = 0
    max_progress_regressions: int = 0
    max_concurrent_current: int = 3


def run_timeline_sweep(
    engine: RecoveryEngine | None = None,
    procedure_ids: list[str] | None = None,
    first_day: int = MIN_DAYS_POST_OP,
    last_day: int = MAX_DAYS_POST_OP,
) -> tuple[SweepMetrics, list[SweepRow]]:
    if first_day > last_day:
        raise ValueError("first_day must be <= last_day")

    engine = engine or RecoveryEngine()
    ids = procedure_ids if procedure_ids is not None else [pid for pid, _ in engine.get_procedure_list()]

    status_regressions = 0
    progress_regressions = 0
    days_without_current = 0
    max_concurrent = 0
    rows: list[SweepRow] = []

    for procedure_id in ids:
        previous_ranks: list[int] | None = None
        previous_progress = -1
        for day in range(first_day, last_day + 1):
            views = engine.get_milestone_status(procedure_id, day)
            progress = engine.get_progress_percent(day)
            ranks = [_STATUS_RANK[v.status] for v in views]

            if previous_ranks is not None:
                status_regressions += sum(1 for prev, cur in zip(previous_ranks, ranks) if cur < prev)
            if progress < previous_progress:
                progress_regressions += 1

            counts = {status: 0 for status in MilestoneStatus}
            for v in views:
                counts[v.status] += 1
            if counts[MilestoneStatus.CURRENT] == 0:
                days_without_current += 1
            max_concurrent = max(max_concurrent, counts[MilestoneStatus.CURRENT])

            rows.append(
                SweepRow(
                    procedure_id=procedure_id,
                    days_post_op=day,
                    complete=counts[MilestoneStatus.COMPLETE],
                    current=counts[MilestoneStatus.CURRENT],
                    upcoming=counts[MilestoneStatus.UPCOMING],
                    progress_percent=progress,
                )
            )
            previous_ranks = ranks
            previous_progress = progress

    metrics = SweepMetrics(
        procedures=len(ids),
        days_checked=len(rows),
        status_regressions=status_regressions,
        progress_regressions=progress_regressions,
        days_without_current=days_without_current,
        max_concurrent_current=max_concurrent,
    )
    return (metrics, rows)


def save_sweep_report(
    metrics: SweepMetrics,
    rows: list[SweepRow],
    output_dir: str | Path,
) -> tuple[Path, Path]:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "timeline_metrics.json"
    csv_path = out_dir / "timeline_days.csv"

    with json_path.open("w", encoding="utf-8") as f:
        json.dump(asdict(metrics), f, ensure_ascii=False, indent=2)

    with csv_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["procedure_id", "days_post_op", "complete", "current", "upcoming", "progress_percent"])
        for row in rows:
            writer.writerow(
                [row.procedure_id, row.days_post_op, row.complete, row.current, row.upcoming, row.progress_percent]
            )

    return (json_path, csv_path)


def quality_gate(metrics: SweepMetrics, thresholds: QualityThresholds) -> tuple[bool, list[str]]:
    failures: list[str] = []
    if metrics.status_regressions > thresholds.max_status_regressions:
        failures.append(
            f"status_regressions={metrics.status_regressions} > {thresholds.max_status_regressions}"
        )
    if metrics.progress_regressions > thresholds.max_progress_regressions:
        failures.append(
            f"progress_regressions={metrics.progress_regressions} > {thresholds.max_progress_regressions}"
        )
    if metrics.max_concurrent_current > thresholds.max_concurrent_current:
        failures.append(
            f"max_concurrent_current={metrics.max_concurrent_current} > {thresholds.max_concurrent_current}"
        )
    return (len(failures) == 0, failures)
