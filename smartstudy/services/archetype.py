"""
smartstudy/services/archetype.py

Rule-based student archetype classifier. The archetype only steers the tone
of generated coaching text; nothing numeric depends on it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from smartstudy.models.domain import (
    HARD_LEVELS,
    Performance,
    Priority,
    StudentProfile,
    StudyTask,
    normalize_profile,
    normalize_task,
)


@dataclass(frozen=True)
class Archetype:
    key: str
    name: str
    description: str
    schedule_style: str
    icon: str


BURNT_OUT = Archetype(
    key="burnt_out",
    name="The Burnt-out Warrior",
    description=(
        "You are capable, but you are carrying too much while your energy is at "
        "rock bottom. Burnout risk is very high."
    ),
    schedule_style=(
        "Recovery Mode: very short work sessions (25m) with long breaks (15m). "
        "Drop every task that is not urgent."
    ),
    icon="❤️‍🩹",
)

DEADLINE_FIGHTER = Archetype(
    key="deadline_fighter",
    name="The Deadline Fighter",
    description=(
        "You run on adrenaline. You have the energy, but urgent tasks are piling up."
    ),
    schedule_style=(
        "Sprint Mode: strict time-boxing, zero distractions. Eat the frog right away."
    ),
    icon="🔥",
)

PERFECTIONIST = Archetype(
    key="perfectionist",
    name="The Perfectionist",
    description=(
        "You do well, but you tend to pour too much time into a single task and "
        "run short on time for the rest."
    ),
    schedule_style="Optimization Mode: set a hard stop for every task. Apply the 80/20 rule.",
    icon="💎",
)

EXPLORER = Archetype(
    key="explorer",
    name="The Explorer",
    description=(
        "You are energetic and have room to spare. This is the time to go deep or "
        "study ahead."
    ),
    schedule_style="Deep Dive Mode: long deep-work sessions (90m) focused on extended study.",
    icon="🚀",
)

BALANCER = Archetype(
    key="balancer",
    name="The Balancer",
    description="You keep a steady pace. Not overwhelmed, not idle either.",
    schedule_style="Consistency Mode: standard Pomodoro (25/5). Keep it regular.",
    icon="⚖️",
)

ALL_ARCHETYPES = (BURNT_OUT, DEADLINE_FIGHTER, PERFECTIONIST, EXPLORER, BALANCER)


@dataclass(frozen=True)
class ClassifierInput:
    tasks: Sequence[StudyTask]
    profile: StudentProfile
    workload_score: float

    @property
    def high_priority_count(self) -> int:
        return sum(1 for t in self.tasks if t.priority == Priority.HIGH)

    @property
    def mean_hours(self) -> float:
        if not self.tasks:
            return 0.0
        return sum(t.estimated_hours for t in self.tasks) / len(self.tasks)


Rule = Tuple[Callable[[ClassifierInput], bool], Archetype]

# Order matters: the rules overlap and the first match wins.
ARCHETYPE_RULES: List[Rule] = [
    (lambda c: c.profile.energy_level <= 4 and c.workload_score >= 7, BURNT_OUT),
    (lambda c: c.high_priority_count >= 3 and c.profile.energy_level >= 6, DEADLINE_FIGHTER),
    (
        lambda c: c.profile.performance in (Performance.GOOD, Performance.EXCELLENT)
        and c.mean_hours > 3,
        PERFECTIONIST,
    ),
    (lambda c: c.profile.energy_level >= 8 and c.workload_score <= 5, EXPLORER),
]
DEFAULT_ARCHETYPE = BALANCER


def workload_score(tasks: Iterable[Any]) -> float:
    """Coarse 1-10 intensity: half a point per hour plus two per hard task."""
    clean = [normalize_task(t) for t in tasks]
    total_hours = sum(t.estimated_hours for t in clean)
    hard_count = sum(1 for t in clean if t.difficulty in HARD_LEVELS)
    return min(10.0, max(1.0, total_hours * 0.5 + hard_count * 2))


def classify_archetype(
    tasks: Iterable[Any],
    profile: Any = None,
    score: Optional[float] = None,
) -> Archetype:
    clean = [normalize_task(t) for t in tasks]
    ctx = ClassifierInput(
        tasks=clean,
        profile=normalize_profile(profile),
        workload_score=workload_score(clean) if score is None else float(score),
    )
    for predicate, archetype in ARCHETYPE_RULES:
        if predicate(ctx):
            return archetype
    return DEFAULT_ARCHETYPE
