"""
smartstudy/services/repository.py

Persistence at the application edge. Rows are normalized on the way in and on
the way out, so stored data can never violate the task invariants.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from smartstudy.models.domain import (
    StudentProfile,
    StudyTask,
    normalize_profile,
    normalize_task,
)
from smartstudy.models.entities import GuidebookRow, ProfileRow, TaskRow

log = logging.getLogger(__name__)

DEFAULT_PROFILE_KEY = "default"

_MUTABLE_TASK_FIELDS = (
    "subject",
    "description",
    "deadline",
    "estimated_hours",
    "difficulty",
    "priority",
    "icon",
    "is_completed",
    "custom_session_duration",
)


def _row_to_task(row: TaskRow) -> StudyTask:
    return normalize_task(row)


def _apply(row: TaskRow, task: StudyTask) -> None:
    row.subject = task.subject[:200]
    row.description = task.description
    row.deadline = task.deadline
    row.estimated_hours = task.estimated_hours
    row.difficulty = task.difficulty.value
    row.priority = task.priority.value
    row.icon = task.icon
    row.is_completed = task.is_completed
    row.custom_session_duration = task.custom_session_duration


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[StudyTask]:
        rows = self.db.scalars(select(TaskRow).order_by(TaskRow.created_at, TaskRow.id)).all()
        return [_row_to_task(r) for r in rows]

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(TaskRow)) or 0

    def get(self, task_id: str) -> StudyTask:
        row = self.db.get(TaskRow, task_id)
        if row is None:
            raise LookupError(f"task {task_id} not found")
        return _row_to_task(row)

    def add(self, raw: Any) -> StudyTask:
        task = normalize_task(raw)
        if self.db.get(TaskRow, task.id) is not None:
            raise ValueError(f"task {task.id} already exists")
        row = TaskRow(id=task.id)
        _apply(row, task)
        self.db.add(row)
        self.db.commit()
        log.info("[DB] task %s added (%s)", task.id, task.subject)
        return task

    def update(self, task_id: str, changes: Dict[str, Any]) -> StudyTask:
        row = self.db.get(TaskRow, task_id)
        if row is None:
            raise LookupError(f"task {task_id} not found")
        current = _row_to_task(row)
        merged = current.to_dict()
        merged.update({k: v for k, v in changes.items() if k in _MUTABLE_TASK_FIELDS})
        task = normalize_task(merged)
        _apply(row, task)
        self.db.commit()
        return task

    def toggle(self, task_id: str) -> StudyTask:
        current = self.get(task_id)
        return self.update(task_id, {"is_completed": not current.is_completed})

    def delete(self, task_id: str) -> None:
        result = self.db.execute(delete(TaskRow).where(TaskRow.id == task_id))
        if not result.rowcount:
            self.db.rollback()
            raise LookupError(f"task {task_id} not found")
        self.db.commit()
        log.info("[DB] task %s deleted", task_id)


class ProfileRepository:
    def __init__(self, db: Session, profile_key: str = DEFAULT_PROFILE_KEY):
        self.db = db
        self.profile_key = profile_key

    def get(self) -> StudentProfile:
        row = self.db.get(ProfileRow, self.profile_key)
        if row is None:
            return StudentProfile()
        return normalize_profile(row)

    def save(self, raw: Any) -> StudentProfile:
        profile = normalize_profile(raw)
        row = self.db.get(ProfileRow, self.profile_key)
        if row is None:
            row = ProfileRow(profile_key=self.profile_key)
            self.db.add(row)
        row.performance = profile.performance.value
        row.energy_level = profile.energy_level
        row.learning_style = profile.learning_style.value if profile.learning_style else None
        row.study_method = profile.study_method.value if profile.study_method else None
        self.db.commit()
        return profile


class GuidebookRepository:
    def __init__(self, db: Session, profile_key: str = DEFAULT_PROFILE_KEY):
        self.db = db
        self.profile_key = profile_key

    def latest(self) -> Optional[GuidebookRow]:
        return self.db.scalars(
            select(GuidebookRow)
            .where(GuidebookRow.profile_key == self.profile_key)
            .order_by(GuidebookRow.id.desc())
            .limit(1)
        ).first()

    def save(self, markdown: str, archetype_key: str, current: int, projected: int) -> GuidebookRow:
        row = GuidebookRow(
            profile_key=self.profile_key,
            markdown=markdown,
            archetype=archetype_key,
            wellbeing_current=current,
            wellbeing_projected=projected,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row
