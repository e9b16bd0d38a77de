from __future__ import annotations

from pathlib import Path
import subprocess
import sys


ROOT = Path(__file__).resolve().parents[1]

STEPS: tuple[tuple[str, list[str]], ...] = (
    ("syntax", [sys.executable, "-m", "compileall", "-q", "aftercare_companion", "tests", "scripts"]),
    ("tests", [sys.executable, "-m", "pytest", "-q"]),
    ("timeline gate", [sys.executable, "scripts/quality_gate.py"]),
    ("session churn", [sys.executable, "scripts/stress_sessions.py"]),
)


def main() -> None:
    for label, args in STEPS:
        print(f"[verify] {label}: {' '.join(args)}")
        if subprocess.run(args, cwd=ROOT, check=False).returncode != 0:
            raise SystemExit(f"[verify] {label} failed")
    print("[verify] all checks passed")


if __name__ == "__main__":
    main()
