"""
smartstudy/models/domain.py

Value objects shared by the scoring engine, the classifier and the prompt
builders. Everything here is immutable; normalization builds new objects and
never mutates what it is given.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar
from uuid import uuid4

MIN_HOURS = 0.5
MAX_HOURS = 24.0
DEFAULT_HOURS = 2.0
DEFAULT_SUBJECT = "Untitled subject"
DEFAULT_ICON = "📚"
DEFAULT_ENERGY = 7


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    VERY_HARD = "Very Hard"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Performance(str, Enum):
    WEAK = "Weak"
    AVERAGE = "Average"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class LearningStyle(str, Enum):
    VISUAL = "Visual"
    AUDITORY = "Auditory"
    READ_WRITE = "Reading/Writing"
    KINESTHETIC = "Kinesthetic"
    MIXED = "Mixed"


class StudyMethod(str, Enum):
    POMODORO = "Pomodoro"
    TIME_BLOCKING = "Time Blocking"
    FLOWTIME = "Flowtime"
    SPACED_REPETITION = "Spaced Repetition"
    FEYNMAN = "Feynman"


# Display scores (tables, charts, sorting). The engine has its own weights.
DIFFICULTY_SCORE: Dict[Difficulty, int] = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
    Difficulty.VERY_HARD: 4,
}

PRIORITY_SCORE: Dict[Priority, int] = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}

HARD_LEVELS = frozenset({Difficulty.HARD, Difficulty.VERY_HARD})


def require_complete(table: Mapping[Any, Any], enum_cls: Type[Enum], name: str) -> None:
    """Fail at import time if a lookup table misses an enum member."""
    missing = [m for m in enum_cls if m not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for {', '.join(m.name for m in missing)}")


require_complete(DIFFICULTY_SCORE, Difficulty, "DIFFICULTY_SCORE")
require_complete(PRIORITY_SCORE, Priority, "PRIORITY_SCORE")


@dataclass(frozen=True)
class StudyTask:
    id: str
    subject: str
    deadline: Optional[date]
    estimated_hours: float
    difficulty: Difficulty = Difficulty.MEDIUM
    priority: Priority = Priority.MEDIUM
    description: str = ""
    icon: str = DEFAULT_ICON
    is_completed: bool = False
    custom_session_duration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "description": self.description,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "estimated_hours": self.estimated_hours,
            "difficulty": self.difficulty.value,
            "priority": self.priority.value,
            "icon": self.icon,
            "is_completed": self.is_completed,
            "custom_session_duration": self.custom_session_duration,
        }


@dataclass(frozen=True)
class StudentProfile:
    performance: Performance = Performance.GOOD
    energy_level: int = DEFAULT_ENERGY
    learning_style: Optional[LearningStyle] = None
    study_method: Optional[StudyMethod] = None


@dataclass(frozen=True)
class WellbeingFactors:
    workload: str
    pressure: str
    capacity: str


@dataclass(frozen=True)
class WellbeingStats:
    total_hours: float
    current: int
    projected: int
    factors: WellbeingFactors = field(default_factory=lambda: WellbeingFactors("Light", "Stable", "Ready"))


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

E = TypeVar("E", bound=Enum)


_SEPARATORS = re.compile(r"[\s_\-]+")


def _enum_key(raw: str) -> str:
    # "VeryHard", "very_hard" and "Very Hard" share one key.
    return _SEPARATORS.sub("", raw.lower())


def parse_enum(enum_cls: Type[E], raw: Any, default: E) -> E:
    """Lenient enum lookup by value or name, case-insensitive; unknown -> default."""
    if isinstance(raw, enum_cls):
        return raw
    if raw is None:
        return default
    key = _enum_key(str(raw))
    if not key:
        return default
    for member in enum_cls:
        if key in (_enum_key(member.value), _enum_key(member.name)):
            return member
    return default


def _parse_optional_enum(enum_cls: Type[E], raw: Any) -> Optional[E]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, enum_cls):
        return raw
    key = _enum_key(str(raw))
    for member in enum_cls:
        if key in (_enum_key(member.value), _enum_key(member.name)):
            return member
    return None


def _to_float(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_hours(value: Any) -> float:
    hours = _to_float(value)
    if hours is None:
        hours = DEFAULT_HOURS
    return max(MIN_HOURS, min(hours, MAX_HOURS))


def clamp_energy(value: Any) -> int:
    energy = _to_float(value)
    if energy is None:
        return DEFAULT_ENERGY
    if math.isinf(energy):
        return 10 if energy > 0 else 1
    return max(1, min(10, round_half_up(energy)))


def parse_deadline(raw: Any) -> Optional[date]:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _field(raw: Any, *names: str, default: Any = None) -> Any:
    """Read the first present field from a mapping or an attribute object."""
    for name in names:
        if isinstance(raw, Mapping):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    return default


def normalize_task(raw: Any) -> StudyTask:
    """
    Build a clean StudyTask from a StudyTask, a mapping (camelCase or
    snake_case keys) or any attribute object. Never raises on malformed
    field values; applying it twice yields the same task.
    """
    if isinstance(raw, StudyTask):
        return replace(
            raw,
            subject=raw.subject.strip() if isinstance(raw.subject, str) and raw.subject.strip() else DEFAULT_SUBJECT,
            estimated_hours=clamp_hours(raw.estimated_hours),
            difficulty=parse_enum(Difficulty, raw.difficulty, Difficulty.MEDIUM),
            priority=parse_enum(Priority, raw.priority, Priority.MEDIUM),
            deadline=parse_deadline(raw.deadline),
        )

    subject = _field(raw, "subject")
    subject = str(subject).strip() if subject is not None else ""
    task_id = _field(raw, "id")
    description = _field(raw, "description", default="") or ""
    custom = _field(raw, "custom_session_duration", "customSessionDuration")
    return StudyTask(
        id=str(task_id) if task_id not in (None, "") else uuid4().hex,
        subject=subject or DEFAULT_SUBJECT,
        description=str(description),
        deadline=parse_deadline(_field(raw, "deadline")),
        estimated_hours=clamp_hours(_field(raw, "estimated_hours", "estimatedHours")),
        difficulty=parse_enum(Difficulty, _field(raw, "difficulty"), Difficulty.MEDIUM),
        priority=parse_enum(Priority, _field(raw, "priority"), Priority.MEDIUM),
        icon=str(_field(raw, "icon", default=None) or DEFAULT_ICON),
        is_completed=bool(_field(raw, "is_completed", "isCompleted", default=False)),
        custom_session_duration=str(custom).strip() if custom and str(custom).strip() else None,
    )


def normalize_profile(raw: Any = None) -> StudentProfile:
    if raw is None:
        return StudentProfile()
    return StudentProfile(
        performance=parse_enum(Performance, _field(raw, "performance"), Performance.GOOD),
        energy_level=clamp_energy(_field(raw, "energy_level", "energyLevel")),
        learning_style=_parse_optional_enum(LearningStyle, _field(raw, "learning_style", "learningStyle")),
        study_method=_parse_optional_enum(StudyMethod, _field(raw, "study_method", "studyMethod")),
    )
