# smartstudy/routers/planner.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from smartstudy.models.db import get_db
from smartstudy.models.schemas import (
    ChatIn,
    ChatOut,
    GuidebookOut,
    MindMapIn,
    MindMapOut,
    RefineIn,
    StoredGuidebookOut,
)
from smartstudy.services.plan import (
    PlanResult,
    chat_with_mentor,
    generate_mind_map,
    generate_study_plan,
    parse_guidebook_sections,
    refine_study_plan,
    summarize_for_chat,
)
from smartstudy.services.prompts import MindMapOptions
from smartstudy.services.repository import GuidebookRepository, ProfileRepository, TaskRepository

router = APIRouter(prefix="/planner", tags=["planner"])


def _sections(markdown: str) -> list:
    return [asdict(s) for s in parse_guidebook_sections(markdown)]


def _plan_out(result: PlanResult) -> dict:
    return {
        "markdown": result.markdown,
        "is_error": result.is_error,
        "archetype": result.archetype.key,
        "wellbeing": asdict(result.stats),
        "workload_score": result.workload_score,
        "sections": [] if result.is_error else _sections(result.markdown),
    }


def _stored_plan(db: Session, explicit: str | None) -> str:
    if explicit and explicit.strip():
        return explicit
    row = GuidebookRepository(db).latest()
    return row.markdown if row else ""


def _persist(db: Session, result: PlanResult) -> None:
    # Failed generations are never stored; the previous guidebook stays current.
    if result.is_error:
        return
    GuidebookRepository(db).save(
        result.markdown, result.archetype.key, result.stats.current, result.stats.projected
    )


# ---------------------------------------------------------------------------
# Guidebook
# ---------------------------------------------------------------------------

@router.post("/guidebook", response_model=GuidebookOut)
def create_guidebook(db: Session = Depends(get_db)):
    tasks = TaskRepository(db).list()
    try:
        result = generate_study_plan(tasks, ProfileRepository(db).get())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _persist(db, result)
    return _plan_out(result)


@router.get("/guidebook", response_model=StoredGuidebookOut)
def latest_guidebook(db: Session = Depends(get_db)):
    row = GuidebookRepository(db).latest()
    if row is None:
        raise HTTPException(status_code=404, detail="no guidebook generated yet")
    return {
        "markdown": row.markdown,
        "archetype": row.archetype,
        "wellbeing_current": row.wellbeing_current,
        "wellbeing_projected": row.wellbeing_projected,
        "sections": _sections(row.markdown),
    }


@router.post("/guidebook/refine", response_model=GuidebookOut)
def refine_guidebook(payload: RefineIn, db: Session = Depends(get_db)):
    plan = _stored_plan(db, payload.plan)
    try:
        result = refine_study_plan(
            TaskRepository(db).list(), plan, payload.comment, ProfileRepository(db).get()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _persist(db, result)
    return _plan_out(result)


# ---------------------------------------------------------------------------
# Mind map & chat
# ---------------------------------------------------------------------------

@router.post("/mindmap", response_model=MindMapOut)
def mind_map(payload: MindMapIn | None = None, db: Session = Depends(get_db)):
    options = MindMapOptions(**payload.model_dump()) if payload else MindMapOptions()
    code = generate_mind_map(TaskRepository(db).list(), options)
    if not code:
        raise HTTPException(status_code=502, detail="LLM failed to produce a mind map")
    return {"mermaid": code}


@router.post("/chat", response_model=ChatOut)
def chat(payload: ChatIn, db: Session = Depends(get_db)):
    tasks = TaskRepository(db).list()
    try:
        reply = chat_with_mentor(
            payload.message,
            _stored_plan(db, payload.plan),
            ProfileRepository(db).get(),
            summarize_for_chat(tasks),
            [turn.model_dump() for turn in payload.history],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"reply": reply}
