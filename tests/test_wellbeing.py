from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW, TODAY, make_task
from smartstudy.models.domain import StudentProfile, Performance, normalize_task
from smartstudy.services.wellbeing import (
    compute_wellbeing,
    compute_wellbeing_breakdown,
    days_until_deadline,
    urgency_multiplier,
)

PROFILES = [
    {"energy_level": e, "performance": p}
    for e in (1, 3, 5, 7, 10)
    for p in ("Weak", "Average", "Good", "Excellent")
]


def test_concrete_scenario():
    task = make_task(hours=5, difficulty="Hard", priority="High", due_in=1)
    profile = {"energy_level": 5, "performance": "Average"}

    b = compute_wellbeing_breakdown([task], profile, NOW)
    assert b.total_weighted_hours == pytest.approx(11.0)
    assert b.urgency_penalty == pytest.approx(18.75)
    assert b.energy_capacity == pytest.approx(1.0)
    assert b.total_capacity == pytest.approx(9.0)
    assert b.effective_load == pytest.approx(15.0)
    assert b.stress_ratio == pytest.approx(15 / 9)

    stats = compute_wellbeing([task], profile, NOW)
    assert stats.total_hours == 5
    assert stats.current == 42
    assert stats.projected == 57
    assert stats.factors.workload == "Overloaded"
    assert stats.factors.pressure == "Urgent (deadline-driven)"
    assert stats.factors.capacity == "Ready"


@pytest.mark.parametrize("profile", [None, *PROFILES])
def test_empty_task_list(profile):
    stats = compute_wellbeing([], profile, NOW)
    assert stats.total_hours == 0
    assert stats.current == 98
    assert stats.projected == 99
    assert stats.factors.workload == "Light"


def test_hours_are_clamped_before_scoring():
    huge = compute_wellbeing_breakdown([make_task(hours=100)], None, NOW)
    capped = compute_wellbeing_breakdown([make_task(hours=24)], None, NOW)
    assert huge == capped
    tiny = compute_wellbeing_breakdown([make_task(hours=0)], None, NOW)
    assert tiny.total_hours == 0.5


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("hours", [0.5, 3, 8, 24])
@pytest.mark.parametrize("due_in", [-2, 0, 1, 3, 6, 30])
def test_range_invariants(profile, hours, due_in):
    tasks = [
        make_task(hours=hours, difficulty="Very Hard", priority="High", due_in=due_in),
        make_task(subject="History", hours=2, difficulty="Easy", priority="Low", due_in=12),
    ]
    stats = compute_wellbeing(tasks, profile, NOW)
    assert 10 <= stats.current <= 98
    assert stats.projected <= 99
    assert stats.projected >= min(stats.current + 5, 99)


def test_monotonic_in_hours():
    other = make_task(subject="Biology", hours=3, difficulty="Medium", priority="Low", due_in=2)
    profile = {"energy_level": 6, "performance": "Good"}
    previous = None
    for hours in [0.5, 1, 2, 4, 6, 10, 16, 24]:
        b = compute_wellbeing_breakdown(
            [other, make_task(hours=hours, difficulty="Hard", priority="High", due_in=5)],
            profile, NOW,
        )
        if previous is not None:
            assert b.stress_ratio >= previous.stress_ratio
            assert b.current_raw <= previous.current_raw
        previous = b


@pytest.mark.parametrize("performance", list(Performance))
def test_monotonic_in_energy(performance):
    tasks = [make_task(hours=6, difficulty="Hard", due_in=2), make_task(hours=3, due_in=9)]
    previous = None
    for energy in range(1, 11):
        b = compute_wellbeing_breakdown(tasks, StudentProfile(performance, energy), NOW)
        if previous is not None:
            assert b.total_capacity >= previous.total_capacity
            assert b.current_raw >= previous.current_raw
        previous = b


def test_order_independent_and_inputs_untouched():
    tasks = [
        make_task(subject="A", hours=4, difficulty="Hard", due_in=1),
        make_task(subject="B", hours=2, difficulty="Easy", priority="High", due_in=6),
        make_task(subject="C", hours=7, difficulty="Very Hard", priority="Low", due_in=20),
    ]
    snapshot = [dict(t) for t in tasks]
    forward = compute_wellbeing(tasks, None, NOW)
    backward = compute_wellbeing(list(reversed(tasks)), None, NOW)
    assert forward == backward
    assert tasks == snapshot


@pytest.mark.parametrize(
    "due_in, expected",
    [(-3, 2.5), (0, 2.5), (1, 2.5), (2, 1.8), (3, 1.8), (4, 1.2), (7, 1.2), (8, 1.0)],
)
def test_urgency_thresholds(due_in, expected):
    task = normalize_task(make_task(due_in=due_in))
    assert urgency_multiplier(days_until_deadline(task, NOW)) == expected


def test_days_until_deadline_rounds_up_partial_days():
    task = normalize_task(make_task(due_in=1))
    # Deadline is midnight at the start of tomorrow; 15 hours away at 09:00.
    assert days_until_deadline(task, NOW) == 1
    assert days_until_deadline(task, datetime.combine(TODAY, datetime.min.time())) == 1
    assert days_until_deadline(task, NOW + timedelta(days=2)) == -1


def test_missing_deadline_has_no_urgency():
    assert urgency_multiplier(days_until_deadline(normalize_task({"subject": "x"}), NOW)) == 1.0


def test_aware_now_is_converted_to_utc():
    aware = NOW.replace(tzinfo=timezone.utc)
    tasks = [make_task(hours=5, difficulty="Hard", priority="High", due_in=1)]
    assert compute_wellbeing(tasks, None, aware) == compute_wellbeing(tasks, None, NOW)


def test_factor_labels():
    heavy = compute_wellbeing(
        [make_task(hours=10, priority="High", difficulty="Easy", due_in=0)],
        {"energy_level": 1, "performance": "Weak"},
        NOW,
    )
    assert heavy.factors.workload == "Overloaded"
    assert heavy.factors.pressure == "Urgent (deadline-driven)"
    assert heavy.factors.capacity == "Low energy"

    light = compute_wellbeing(
        [make_task(hours=1, difficulty="Easy", priority="Low", due_in=30)],
        {"energy_level": 10, "performance": "Excellent"},
        NOW,
    )
    assert light.factors.workload == "Light"
    assert light.factors.pressure == "Stable"
    assert light.factors.capacity == "Ready"


def test_min_improvement_is_configurable():
    tasks = [make_task(hours=1, difficulty="Easy", priority="Low", due_in=30)]
    strict = compute_wellbeing_breakdown(tasks, None, NOW, min_improvement=0)
    default = compute_wellbeing_breakdown(tasks, None, NOW)
    assert strict.projected_raw <= default.projected_raw
    assert default.projected_raw >= min(default.current_raw + 5, 99)


def test_very_hard_spelled_without_space_gets_top_weight():
    b = compute_wellbeing_breakdown([make_task(hours=5, difficulty="VeryHard", due_in=30)], None, NOW)
    assert b.total_weighted_hours == pytest.approx(15.0)
