from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import threading
from typing import Any
from uuid import uuid4

from .audit import AuditLogger
from .engine import RecoveryEngine
from .models import RecoverySnapshot, RecoveryState
from .state import SelectionState


@dataclass
class SessionRuntime:
    session_id: str
    created_at: str
    selection: SelectionState
    last_accessed_at: str = ""


class CompanionSystem:
    """In-memory selection sessions for a host UI talking to the engine.

    Selections live only in memory. The optional audit trail records event
    types against opaque session ids and never the procedure or day.
    """

    def __init__(
        self,
        engine: RecoveryEngine | None = None,
        audit_log_path: str | None = None,
        session_ttl_seconds: float = 1800.0,
        max_sessions: int = 100,
    ) -> None:
        self._engine = engine or RecoveryEngine()
        self._sessions: dict[str, SessionRuntime] = {}
        self._audit = AuditLogger(audit_log_path) if audit_log_path else None
        self._session_ttl_seconds = session_ttl_seconds
        self._max_sessions = max_sessions
        self._lock = threading.RLock()

    @property
    def engine(self) -> RecoveryEngine:
        return self._engine

    def start_session(self, procedure_id: str, days_post_op: int = 1) -> str:
        with self._lock:
            self._cleanup_expired()

            if len(self._sessions) >= self._max_sessions:
                raise ValueError(
                    f"Maximum session limit ({self._max_sessions}) reached. "
                    "Please close existing sessions first."
                )

            selection = SelectionState(procedure_id, catalog=self._engine.catalog)
            clamped = selection.set_days_post_op(days_post_op)
            now = datetime.now(timezone.utc).isoformat()
            runtime = SessionRuntime(
                session_id=str(uuid4()),
                created_at=now,
                selection=selection,
                last_accessed_at=now,
            )
            self._sessions[runtime.session_id] = runtime

        self._record("session_start", runtime.session_id)
        if clamped:
            self._record("days_clamped", runtime.session_id)
        return runtime.session_id

    def select_procedure(self, session_id: str, procedure_id: str) -> RecoveryState:
        with self._lock:
            runtime = self._runtime(session_id)
            runtime.selection.set_procedure(procedure_id)
            state = runtime.selection.snapshot()
        self._record("procedure_selected", session_id)
        return state

    def set_day(self, session_id: str, days_post_op: int) -> tuple[RecoveryState, bool]:
        with self._lock:
            runtime = self._runtime(session_id)
            clamped = runtime.selection.set_days_post_op(days_post_op)
            state = runtime.selection.snapshot()
        if clamped:
            self._record("days_clamped", session_id)
        return (state, clamped)

    def selection(self, session_id: str) -> RecoveryState:
        with self._lock:
            return self._runtime(session_id).selection.snapshot()

    def timeline(self, session_id: str) -> RecoverySnapshot:
        return self._engine.snapshot(self.selection(session_id))

    def list_sessions(self) -> list[dict[str, Any]]:
        self._cleanup_expired()
        items: list[dict[str, Any]] = []
        for runtime in list(self._sessions.values()):
            items.append(
                {
                    "session_id": runtime.session_id,
                    "procedure_id": runtime.selection.procedure_id,
                    "days_post_op": runtime.selection.days_post_op,
                    "created_at": runtime.created_at,
                }
            )
        items.sort(key=lambda x: x["created_at"], reverse=True)
        return items

    def delete_session(self, session_id: str) -> None:
        self._cleanup_expired()
        with self._lock:
            runtime = self._sessions.pop(session_id, None)
        if runtime is None:
            raise ValueError(f"Unknown session_id: {session_id}")
        self._record("session_deleted", session_id)

    def _runtime(self, session_id: str) -> SessionRuntime:
        self._cleanup_expired()
        runtime = self._sessions.get(session_id)
        if runtime is None:
            raise ValueError(f"Unknown session_id: {session_id}")
        runtime.last_accessed_at = datetime.now(timezone.utc).isoformat()
        return runtime

    def _record(self, event_type: str, session_id: str) -> None:
        if self._audit is not None:
            self._audit.write(event_type, {"session_id": session_id})

    def _cleanup_expired(self) -> int:
        with self._lock:
            now = datetime.now(timezone.utc)
            expired: list[str] = []
            for sid, runtime in self._sessions.items():
                accessed = datetime.fromisoformat(runtime.last_accessed_at)
                if (now - accessed).total_seconds() >= self._session_ttl_seconds:
                    expired.append(sid)

            for sid in expired:
                self._sessions.pop(sid)
                self._record("session_expired", sid)
            return len(expired)
