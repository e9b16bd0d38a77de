from __future__ import annotations

from dataclasses import asdict
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aftercare_companion.sweep import QualityThresholds, quality_gate, run_timeline_sweep


def main() -> None:
    metrics, _ = run_timeline_sweep()
    thresholds = QualityThresholds()
    passed, failures = quality_gate(metrics, thresholds)

    payload = {
        "metrics": asdict(metrics),
        "thresholds": asdict(thresholds),
        "passed": passed,
        "failures": failures,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    if not passed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
