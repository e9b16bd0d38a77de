from __future__ import annotations

import os
from pathlib import Path

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from pydantic import BaseModel, Field

from .catalog import UnknownProcedure, build_catalog
from .companion import CompanionSystem
from .content import ContentLibrary
from .engine import RecoveryEngine
from .models import Milestone, MilestoneView, RecoverySnapshot
from .validators import MAX_DAYS_POST_OP, MIN_DAYS_POST_OP


def _catalog_dir() -> Path | None:
    raw = os.getenv("AFTERCARE_CATALOG_DIR", "")
    return Path(raw) if raw else None


app = FastAPI(title="Aftercare Companion", version="0.1.0")
engine = RecoveryEngine(build_catalog(_catalog_dir()))
system = CompanionSystem(
    engine=engine,
    audit_log_path=os.getenv("AFTERCARE_AUDIT_LOG") or None,
)
content = ContentLibrary(os.getenv("AFTERCARE_CONTENT_PATH") or None)


# Guards the host deployment; patients are not authenticated.
def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    required = os.getenv("AFTERCARE_API_KEY", "")
    if required and x_api_key != required:
        raise HTTPException(status_code=401, detail="Unauthorized")


def _milestone_to_dict(m: Milestone) -> dict[str, object]:
    return {
        "day_offset": m.day_offset,
        "title": m.title,
        "description": m.description,
        "baseline_status": m.baseline_status.value,
    }


def _view_to_dict(v: MilestoneView) -> dict[str, object]:
    return {**_milestone_to_dict(v.milestone), "status": v.status.value}


def _snapshot_to_dict(s: RecoverySnapshot) -> dict[str, object]:
    return {
        "procedure_id": s.procedure_id,
        "procedure_name": s.procedure_name,
        "days_post_op": s.days_post_op,
        "progress_percent": s.progress_percent,
        "milestones": [_view_to_dict(v) for v in s.milestones],
    }


class StartSessionRequest(BaseModel):
    procedure_id: str
    days_post_op: int = MIN_DAYS_POST_OP


class StartSessionResponse(BaseModel):
    session_id: str


class SelectProcedureRequest(BaseModel):
    procedure_id: str = Field(min_length=1, max_length=64)


class SetDayRequest(BaseModel):
    days_post_op: int


class SelectionResponse(BaseModel):
    procedure_id: str
    days_post_op: int
    clamped: bool = False


@app.get("/procedures")
def list_procedures(_: None = Depends(require_api_key)) -> dict[str, object]:
    return {"items": [{"id": pid, "name": name} for pid, name in engine.get_procedure_list()]}


@app.get("/procedures/{procedure_id}/milestones")
def get_milestones(procedure_id: str, _: None = Depends(require_api_key)) -> dict[str, object]:
    try:
        milestones = engine.get_milestones(procedure_id)
    except UnknownProcedure as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"procedure_id": procedure_id, "items": [_milestone_to_dict(m) for m in milestones]}


@app.get("/procedures/{procedure_id}/status")
def get_milestone_status(
    procedure_id: str,
    days_post_op: int = Query(ge=MIN_DAYS_POST_OP, le=MAX_DAYS_POST_OP),
    _: None = Depends(require_api_key),
) -> dict[str, object]:
    try:
        views = engine.get_milestone_status(procedure_id, days_post_op)
    except UnknownProcedure as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        "procedure_id": procedure_id,
        "days_post_op": days_post_op,
        "items": [_view_to_dict(v) for v in views],
    }


@app.get("/progress")
def get_progress(
    days_post_op: int = Query(ge=MIN_DAYS_POST_OP, le=MAX_DAYS_POST_OP),
    _: None = Depends(require_api_key),
) -> dict[str, object]:
    return {"days_post_op": days_post_op, "progress_percent": engine.get_progress_percent(days_post_op)}


@app.post("/sessions/start", response_model=StartSessionResponse)
def start_session(req: StartSessionRequest, _: None = Depends(require_api_key)) -> StartSessionResponse:
    try:
        session_id = system.start_session(req.procedure_id, days_post_op=req.days_post_op)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return StartSessionResponse(session_id=session_id)


@app.put("/sessions/{session_id}/procedure", response_model=SelectionResponse)
def select_procedure(
    session_id: str, req: SelectProcedureRequest, _: None = Depends(require_api_key)
) -> SelectionResponse:
    try:
        state = system.select_procedure(session_id, req.procedure_id)
    except UnknownProcedure as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return SelectionResponse(procedure_id=state.selected_procedure_id, days_post_op=state.days_post_op)


@app.put("/sessions/{session_id}/day", response_model=SelectionResponse)
def set_day(session_id: str, req: SetDayRequest, _: None = Depends(require_api_key)) -> SelectionResponse:
    try:
        state, clamped = system.set_day(session_id, req.days_post_op)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return SelectionResponse(
        procedure_id=state.selected_procedure_id,
        days_post_op=state.days_post_op,
        clamped=clamped,
    )


@app.get("/sessions/{session_id}/timeline")
def get_timeline(session_id: str, _: None = Depends(require_api_key)) -> dict[str, object]:
    try:
        snapshot = system.timeline(session_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _snapshot_to_dict(snapshot)


@app.get("/sessions")
def list_sessions(_: None = Depends(require_api_key)) -> dict[str, object]:
    return {"items": system.list_sessions()}


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str, _: None = Depends(require_api_key)) -> dict[str, object]:
    try:
        system.delete_session(session_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"session_id": session_id, "status": "deleted"}


@app.get("/content/topics")
def list_topics(_: None = Depends(require_api_key)) -> dict[str, object]:
    return {
        "items": [
            {"topic_id": t.topic_id, "title": t.title, "tags": list(t.tags), "content": t.content}
            for t in content.topics()
        ]
    }


@app.get("/content/warnings")
def list_warnings(_: None = Depends(require_api_key)) -> dict[str, object]:
    return {
        "items": [
            {"symptom_id": w.symptom_id, "label": w.label, "urgent": w.urgent}
            for w in content.warning_symptoms()
        ]
    }


@app.get("/content/checklist")
def list_checklist(_: None = Depends(require_api_key)) -> dict[str, object]:
    return {
        "items": [
            {"item_id": i.item_id, "label": i.label, "default_checked": i.default_checked}
            for i in content.wellness_checklist()
        ]
    }


@app.get("/content/search")
def search_content(
    q: str = Query(min_length=1, max_length=200),
    top_k: int = Query(default=3, ge=1, le=20),
    _: None = Depends(require_api_key),
) -> dict[str, object]:
    hits = content.search(q, top_k=top_k)
    return {
        "items": [
            {"topic_id": h.topic.topic_id, "title": h.topic.title, "score": h.score, "confidence": h.confidence}
            for h in hits
        ]
    }
