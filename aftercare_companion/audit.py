from __future__ import annotations

from copy import deepcopy
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any


_MAX_VALUE_LENGTH = 500


def bound_payload(payload: dict[str, Any], max_length: int = _MAX_VALUE_LENGTH) -> dict[str, Any]:
    out = deepcopy(payload)
    for key, value in out.items():
        if isinstance(value, str) and len(value) > max_length:
            out[key] = value[:max_length] + "...[truncated]"
    return out


class AuditLogger:
    def __init__(self, log_path: str | Path = "reports/audit_log.jsonl") -> None:
        self._log_path = Path(log_path)
        self._log_path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, event_type: str, payload: dict[str, Any]) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "payload": bound_payload(payload),
        }
        with self._log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    @property
    def log_path(self) -> Path:
        return self._log_path
