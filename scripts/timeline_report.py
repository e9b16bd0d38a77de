from __future__ import annotations

from dataclasses import asdict
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aftercare_companion.sweep import run_timeline_sweep, save_sweep_report


def main() -> None:
    metrics, rows = run_timeline_sweep()
    json_path, csv_path = save_sweep_report(metrics, rows, ROOT / "reports")
    print(
        json.dumps(
            {**asdict(metrics), "report_json": str(json_path), "report_csv": str(csv_path)},
            ensure_ascii=False,
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
