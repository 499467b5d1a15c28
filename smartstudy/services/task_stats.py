"""
smartstudy/services/task_stats.py

Descriptive statistics, table filtering/sorting and the "today" action plan.
"""
from __future__ import annotations

import logging
import re
import statistics
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from smartstudy.models.domain import (
    DIFFICULTY_SCORE,
    HARD_LEVELS,
    PRIORITY_SCORE,
    Difficulty,
    StudyTask,
    normalize_task,
    parse_enum,
)
from smartstudy.services.archetype import workload_score

log = logging.getLogger(__name__)

DEFAULT_FOCUS_SECONDS = 25 * 60
HARD_FOCUS_SECONDS = 45 * 60
BREAK_SECONDS = 5 * 60

SORT_KEYS = ("deadline_asc", "deadline_desc", "difficulty_desc", "difficulty_asc")


@dataclass(frozen=True)
class WorkloadItem:
    subject: str
    hours: float
    difficulty_score: int


@dataclass(frozen=True)
class TaskSummary:
    count: int
    completed_count: int
    total_hours: float
    mean_hours: float
    median_hours: float
    stdev_hours: float
    average_difficulty: float
    hardest_subject: Optional[str]
    burnout_risk: str
    difficulty_distribution: Dict[str, int] = field(default_factory=dict)
    workload: List[WorkloadItem] = field(default_factory=list)


def burnout_risk(score: float) -> str:
    if score >= 7:
        return "High"
    if score >= 4:
        return "Medium"
    return "Low"


def summarize_tasks(tasks: Iterable[Any]) -> TaskSummary:
    clean = [normalize_task(t) for t in tasks]
    hours = [t.estimated_hours for t in clean]

    if clean:
        hardest = clean[0]
        for t in clean[1:]:
            if (DIFFICULTY_SCORE[t.difficulty], t.estimated_hours) > (
                DIFFICULTY_SCORE[hardest.difficulty],
                hardest.estimated_hours,
            ):
                hardest = t
        hardest_subject: Optional[str] = hardest.subject
    else:
        hardest_subject = None

    distribution = {}
    for level in Difficulty:
        n = sum(1 for t in clean if t.difficulty == level)
        if n:
            distribution[level.value] = n

    return TaskSummary(
        count=len(clean),
        completed_count=sum(1 for t in clean if t.is_completed),
        total_hours=sum(hours),
        mean_hours=statistics.fmean(hours) if hours else 0.0,
        median_hours=statistics.median(hours) if hours else 0.0,
        stdev_hours=statistics.pstdev(hours) if hours else 0.0,
        average_difficulty=(
            statistics.fmean(DIFFICULTY_SCORE[t.difficulty] for t in clean) if clean else 0.0
        ),
        hardest_subject=hardest_subject,
        burnout_risk=burnout_risk(workload_score(clean)),
        difficulty_distribution=distribution,
        workload=[
            WorkloadItem(t.subject, t.estimated_hours, DIFFICULTY_SCORE[t.difficulty])
            for t in clean
        ],
    )


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------

def filter_tasks(
    tasks: Iterable[StudyTask],
    search: Optional[str] = None,
    difficulty: Optional[Any] = None,
) -> List[StudyTask]:
    result = list(tasks)
    if search:
        term = search.lower()
        result = [
            t for t in result
            if term in t.subject.lower() or term in (t.description or "").lower()
        ]
    if difficulty:
        level = parse_enum(Difficulty, difficulty, None)
        if level is None:
            raise ValueError(f"unknown difficulty: {difficulty}")
        result = [t for t in result if t.difficulty == level]
    return result


def _deadline_key(t: StudyTask) -> date:
    return t.deadline or date.max


def sort_tasks(tasks: Iterable[StudyTask], sort_by: str = "deadline_asc") -> List[StudyTask]:
    result = list(tasks)
    if sort_by == "deadline_asc":
        result.sort(key=_deadline_key)
    elif sort_by == "deadline_desc":
        result.sort(key=_deadline_key, reverse=True)
    elif sort_by == "difficulty_desc":
        result.sort(key=lambda t: DIFFICULTY_SCORE[t.difficulty], reverse=True)
    elif sort_by == "difficulty_asc":
        result.sort(key=lambda t: DIFFICULTY_SCORE[t.difficulty])
    else:
        raise ValueError(f"unknown sort key: {sort_by} (expected one of {', '.join(SORT_KEYS)})")
    return result


# ---------------------------------------------------------------------------
# Daily action plan & focus sessions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionRecommendation:
    type: str
    duration: str


@dataclass(frozen=True)
class ActionItem:
    task: StudyTask
    session: SessionRecommendation
    display_duration: str
    focus_seconds: int


def recommend_session(hours: float, difficulty: Difficulty) -> SessionRecommendation:
    if difficulty in HARD_LEVELS:
        return SessionRecommendation("Deep Work", "45-60m")
    if hours < 1:
        return SessionRecommendation("Quick Win", "15-25m")
    return SessionRecommendation("Standard", "30-45m")


_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def parse_session_duration(text: Optional[str]) -> int:
    """'1.5h' -> 5400, '45m' -> 2700, '30' -> 1800 (minutes); else 25 minutes."""
    if not text:
        return DEFAULT_FOCUS_SECONDS
    value = text.strip().lower()
    match = _NUMBER.search(value)
    if not match:
        log.debug("unparseable session duration %r", text)
        return DEFAULT_FOCUS_SECONDS
    amount = float(match.group())
    if "h" in value:
        return int(amount * 3600)
    return int(amount * 60)


def focus_session_seconds(task: StudyTask) -> int:
    if task.custom_session_duration:
        return parse_session_duration(task.custom_session_duration)
    if task.difficulty in HARD_LEVELS:
        return HARD_FOCUS_SECONDS
    return DEFAULT_FOCUS_SECONDS


def daily_action_plan(tasks: Iterable[Any]) -> List[ActionItem]:
    """Open tasks: High priority first, then nearest deadline, then hardest."""
    pending = [t for t in (normalize_task(x) for x in tasks) if not t.is_completed]
    pending.sort(
        key=lambda t: (
            -PRIORITY_SCORE[t.priority],
            _deadline_key(t),
            -DIFFICULTY_SCORE[t.difficulty],
        )
    )
    items = []
    for t in pending:
        session = recommend_session(t.estimated_hours, t.difficulty)
        items.append(
            ActionItem(
                task=t,
                session=session,
                display_duration=t.custom_session_duration or session.duration,
                focus_seconds=focus_session_seconds(t),
            )
        )
    return items
