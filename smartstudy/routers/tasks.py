# smartstudy/routers/tasks.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from sqlalchemy.orm import Session

from smartstudy.models.db import get_db
from smartstudy.models.schemas import TaskIn, TaskOut, TaskPatch
from smartstudy.services.repository import TaskRepository
from smartstudy.services.task_stats import filter_tasks, sort_tasks

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _repo(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


@router.get("", response_model=List[TaskOut])
def list_tasks(
    search: str | None = Query(None, description="Substring of subject or description"),
    difficulty: str | None = Query(None),
    sort_by: str = Query("deadline_asc", description="deadline_asc | deadline_desc | difficulty_desc | difficulty_asc"),
    repo: TaskRepository = Depends(_repo),
):
    try:
        tasks = sort_tasks(filter_tasks(repo.list(), search, difficulty), sort_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [t.to_dict() for t in tasks]


@router.post("", response_model=TaskOut, status_code=201)
def create_task(payload: TaskIn, repo: TaskRepository = Depends(_repo)):
    return repo.add(payload.model_dump()).to_dict()


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, repo: TaskRepository = Depends(_repo)):
    try:
        return repo.get(task_id).to_dict()
    except LookupError:
        raise HTTPException(status_code=404, detail="task not found")


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, payload: TaskPatch, repo: TaskRepository = Depends(_repo)):
    try:
        return repo.update(task_id, payload.model_dump(exclude_unset=True)).to_dict()
    except LookupError:
        raise HTTPException(status_code=404, detail="task not found")


@router.post("/{task_id}/toggle", response_model=TaskOut)
def toggle_task(task_id: str, repo: TaskRepository = Depends(_repo)):
    try:
        return repo.toggle(task_id).to_dict()
    except LookupError:
        raise HTTPException(status_code=404, detail="task not found")


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: str, repo: TaskRepository = Depends(_repo)):
    try:
        repo.delete(task_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="task not found")
