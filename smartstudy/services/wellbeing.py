"""
smartstudy/services/wellbeing.py

Workload & wellbeing scoring engine.

Turns a task list and a student profile into a 0-100 wellbeing index before
("current") and after ("projected") the coaching optimization, plus three
display labels. The model is deliberately simple arithmetic:

    demand    = max(sum(hours * difficulty weight), 0.8 * sum(hours * urgency * priority))
    capacity  = 10 * (0.6 + energy / 12.5) * performance efficiency
    wellbeing = 100 - 35 * demand / capacity

The functions here are pure: no I/O, no globals, inputs are never mutated.
The only ambient value is the reference instant used for deadline proximity,
which callers can pin with ``now=``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Dict, Iterable, Optional

from smartstudy.models.domain import (
    Difficulty,
    Performance,
    Priority,
    StudyTask,
    WellbeingFactors,
    WellbeingStats,
    normalize_profile,
    normalize_task,
    require_complete,
    round_half_up,
)

DIFFICULTY_WEIGHT: Dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.4,
    Difficulty.HARD: 2.2,
    Difficulty.VERY_HARD: 3.0,
}

PRIORITY_MULTIPLIER: Dict[Priority, float] = {
    Priority.HIGH: 1.5,
    Priority.MEDIUM: 1.1,
    Priority.LOW: 1.0,
}

PERFORMANCE_EFFICIENCY: Dict[Performance, float] = {
    Performance.WEAK: 0.8,
    Performance.AVERAGE: 0.9,
    Performance.GOOD: 1.1,
    Performance.EXCELLENT: 1.25,
}

require_complete(DIFFICULTY_WEIGHT, Difficulty, "DIFFICULTY_WEIGHT")
require_complete(PRIORITY_MULTIPLIER, Priority, "PRIORITY_MULTIPLIER")
require_complete(PERFORMANCE_EFFICIENCY, Performance, "PERFORMANCE_EFFICIENCY")

# (max days left, multiplier), checked in order
URGENCY_THRESHOLDS = ((1, 2.5), (3, 1.8), (7, 1.2))
DEFAULT_URGENCY = 1.0

BASE_DAILY_CAPACITY = 10.0
URGENCY_LOAD_FACTOR = 0.8
STRESS_SLOPE = 35.0
CURRENT_MIN, CURRENT_MAX = 10.0, 98.0
PROJECTED_MAX = 99.0
OPTIMIZED_LOAD_FACTOR = 0.85
OPTIMIZED_CAPACITY_FACTOR = 1.15
MIN_IMPROVEMENT = 5.0
EPSILON = 1e-9

_SECONDS_PER_DAY = 86400.0


def _reference_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if now.tzinfo is not None:
        return now.astimezone(timezone.utc).replace(tzinfo=None)
    return now


def days_until_deadline(task: StudyTask, now: datetime) -> Optional[int]:
    """Whole days (rounded up) from ``now`` to midnight UTC of the deadline."""
    if task.deadline is None:
        return None
    due = datetime.combine(task.deadline, time.min)
    return math.ceil((due - now).total_seconds() / _SECONDS_PER_DAY)


def urgency_multiplier(diff_days: Optional[int]) -> float:
    if diff_days is None:
        return DEFAULT_URGENCY
    for max_days, multiplier in URGENCY_THRESHOLDS:
        if diff_days <= max_days:
            return multiplier
    return DEFAULT_URGENCY


def energy_capacity(energy_level: int) -> float:
    return 0.6 + energy_level / 12.5


@dataclass(frozen=True)
class WellbeingBreakdown:
    total_hours: float
    total_weighted_hours: float
    urgency_penalty: float
    energy_capacity: float
    efficiency: float
    total_capacity: float
    effective_load: float
    stress_ratio: float
    current_raw: float
    projected_raw: float

    @property
    def factors(self) -> WellbeingFactors:
        if self.stress_ratio > 1.3:
            workload = "Overloaded"
        elif self.stress_ratio > 0.8:
            workload = "Balanced"
        else:
            workload = "Light"
        pressure = (
            "Urgent (deadline-driven)"
            if self.urgency_penalty > self.total_weighted_hours * 1.4
            else "Stable"
        )
        capacity = "Low energy" if self.energy_capacity < 0.9 else "Ready"
        return WellbeingFactors(workload=workload, pressure=pressure, capacity=capacity)

    def to_stats(self) -> WellbeingStats:
        return WellbeingStats(
            total_hours=self.total_hours,
            current=round_half_up(self.current_raw),
            projected=round_half_up(self.projected_raw),
            factors=self.factors,
        )


def compute_wellbeing_breakdown(
    tasks: Iterable[Any],
    profile: Any = None,
    now: Optional[datetime] = None,
    *,
    min_improvement: float = MIN_IMPROVEMENT,
) -> WellbeingBreakdown:
    clean = [normalize_task(t) for t in tasks]
    prof = normalize_profile(profile)
    ref = _reference_now(now)

    total_hours = 0.0
    total_weighted_hours = 0.0
    urgency_penalty = 0.0
    for task in clean:
        hours = task.estimated_hours
        total_hours += hours
        total_weighted_hours += hours * DIFFICULTY_WEIGHT[task.difficulty]
        urgency = urgency_multiplier(days_until_deadline(task, ref))
        urgency_penalty += hours * urgency * PRIORITY_MULTIPLIER[task.priority]

    energy = energy_capacity(prof.energy_level)
    efficiency = PERFORMANCE_EFFICIENCY[prof.performance]
    total_capacity = BASE_DAILY_CAPACITY * energy * efficiency

    effective_load = max(total_weighted_hours, urgency_penalty * URGENCY_LOAD_FACTOR)
    if not clean:
        stress_ratio = 0.0
    else:
        stress_ratio = effective_load / max(total_capacity, EPSILON)

    current = 100.0 - stress_ratio * STRESS_SLOPE
    current = max(CURRENT_MIN, min(CURRENT_MAX, current))

    optimized_load = effective_load * OPTIMIZED_LOAD_FACTOR
    optimized_capacity = max(total_capacity * OPTIMIZED_CAPACITY_FACTOR, EPSILON)
    projected = 100.0 - (optimized_load / optimized_capacity) * STRESS_SLOPE
    improvement = max(projected - current, max(min_improvement, 0.0))
    projected = min(current + improvement, PROJECTED_MAX)

    return WellbeingBreakdown(
        total_hours=total_hours,
        total_weighted_hours=total_weighted_hours,
        urgency_penalty=urgency_penalty,
        energy_capacity=energy,
        efficiency=efficiency,
        total_capacity=total_capacity,
        effective_load=effective_load,
        stress_ratio=stress_ratio,
        current_raw=current,
        projected_raw=projected,
    )


def compute_wellbeing(
    tasks: Iterable[Any],
    profile: Any = None,
    now: Optional[datetime] = None,
) -> WellbeingStats:
    """Wellbeing snapshot for ``tasks`` under ``profile`` (see module docstring)."""
    return compute_wellbeing_breakdown(tasks, profile, now).to_stats()
