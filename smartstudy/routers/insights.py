# smartstudy/routers/insights.py
from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smartstudy.models.db import get_db
from smartstudy.models.schemas import (
    ActionItemOut,
    ArchetypeOut,
    ProfileIn,
    ProfileOut,
    StatsOut,
    WellbeingOut,
    WellbeingPreviewIn,
)
from smartstudy.services.archetype import classify_archetype, workload_score
from smartstudy.services.repository import ProfileRepository, TaskRepository
from smartstudy.services.task_stats import daily_action_plan, summarize_tasks
from smartstudy.services.wellbeing import compute_wellbeing

router = APIRouter(tags=["insights"])


def _profile_out(profile) -> dict:
    return {
        "performance": profile.performance,
        "energy_level": profile.energy_level,
        "learning_style": profile.learning_style.value if profile.learning_style else None,
        "study_method": profile.study_method.value if profile.study_method else None,
    }


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@router.get("/profile", response_model=ProfileOut)
def get_profile(db: Session = Depends(get_db)):
    return _profile_out(ProfileRepository(db).get())


@router.put("/profile", response_model=ProfileOut)
def put_profile(payload: ProfileIn, db: Session = Depends(get_db)):
    return _profile_out(ProfileRepository(db).save(payload.model_dump()))


# ---------------------------------------------------------------------------
# Derived views (recomputed on every request, never stored)
# ---------------------------------------------------------------------------

@router.get("/insights/wellbeing", response_model=WellbeingOut)
def wellbeing(db: Session = Depends(get_db)):
    stats = compute_wellbeing(TaskRepository(db).list(), ProfileRepository(db).get())
    return asdict(stats)


@router.post("/insights/wellbeing/preview", response_model=WellbeingOut)
def wellbeing_preview(payload: WellbeingPreviewIn):
    """Stateless what-if: score an arbitrary task list and profile."""
    profile = payload.profile.model_dump() if payload.profile else None
    stats = compute_wellbeing([t.model_dump() for t in payload.tasks], profile)
    return asdict(stats)


@router.get("/insights/archetype", response_model=ArchetypeOut)
def archetype(db: Session = Depends(get_db)):
    tasks = TaskRepository(db).list()
    score = workload_score(tasks)
    found = classify_archetype(tasks, ProfileRepository(db).get(), score)
    return {**asdict(found), "workload_score": score}


@router.get("/insights/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db)):
    return asdict(summarize_tasks(TaskRepository(db).list()))


@router.get("/insights/action-plan", response_model=List[ActionItemOut])
def action_plan(db: Session = Depends(get_db)):
    return [
        {
            "task": item.task.to_dict(),
            "session_type": item.session.type,
            "recommended_duration": item.session.duration,
            "display_duration": item.display_duration,
            "focus_seconds": item.focus_seconds,
        }
        for item in daily_action_plan(TaskRepository(db).list())
    ]
