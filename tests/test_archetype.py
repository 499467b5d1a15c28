import pytest

from conftest import make_task
from smartstudy.services.archetype import (
    ALL_ARCHETYPES,
    BALANCER,
    BURNT_OUT,
    DEADLINE_FIGHTER,
    EXPLORER,
    PERFECTIONIST,
    classify_archetype,
    workload_score,
)


def test_workload_score_is_clamped():
    assert workload_score([]) == 1.0
    assert workload_score([make_task(hours=1, difficulty="Easy")]) == 1.0
    assert workload_score([make_task(hours=4, difficulty="Hard")]) == 4.0
    assert workload_score([make_task(hours=24, difficulty="Very Hard")] * 2) == 10.0


def test_burnt_out_wins_over_every_other_rule():
    tasks = [make_task(hours=2, priority="High", difficulty="Hard") for _ in range(4)]
    profile = {"energy_level": 3, "performance": "Excellent"}
    assert workload_score(tasks) == 10.0
    assert classify_archetype(tasks, profile) is BURNT_OUT


def test_deadline_fighter_before_perfectionist():
    tasks = [make_task(hours=4, priority="High") for _ in range(3)]
    assert classify_archetype(tasks, {"energy_level": 8, "performance": "Good"}) is DEADLINE_FIGHTER


def test_deadline_fighter_needs_energy():
    tasks = [make_task(hours=1, priority="High") for _ in range(3)]
    assert classify_archetype(tasks, {"energy_level": 5, "performance": "Weak"}) is BALANCER


def test_perfectionist_before_explorer():
    tasks = [make_task(hours=4, difficulty="Easy")]
    assert classify_archetype(tasks, {"energy_level": 9, "performance": "Good"}) is PERFECTIONIST


def test_explorer():
    tasks = [make_task(hours=2, difficulty="Easy")]
    assert classify_archetype(tasks, {"energy_level": 9, "performance": "Average"}) is EXPLORER


@pytest.mark.parametrize(
    "tasks, profile",
    [
        ([], None),
        ([make_task(hours=2)], {"energy_level": 5, "performance": "Average"}),
        ([make_task(hours=6, difficulty="Hard")] * 2, {"energy_level": 5, "performance": "Weak"}),
    ],
)
def test_falls_back_to_balancer(tasks, profile):
    assert classify_archetype(tasks, profile) is BALANCER


def test_explicit_score_overrides_computed_one():
    tasks = [make_task(hours=1, difficulty="Easy")]
    profile = {"energy_level": 2, "performance": "Average"}
    assert classify_archetype(tasks, profile) is BALANCER
    assert classify_archetype(tasks, profile, score=9) is BURNT_OUT


def test_archetype_keys_are_unique():
    keys = [a.key for a in ALL_ARCHETYPES]
    assert len(keys) == len(set(keys)) == 5


def test_low_energy_with_high_score_is_burnt_out_despite_urgent_tasks():
    tasks = [make_task(hours=1, priority="High") for _ in range(4)]
    profile = {"energy_level": 3, "performance": "Good"}
    assert classify_archetype(tasks, profile, score=8) is BURNT_OUT


def test_half_point_energy_is_not_burnt_out():
    tasks = [make_task(hours=10, difficulty="Hard")]
    assert classify_archetype(tasks, {"energy_level": 4.5, "performance": "Weak"}, score=8) is BALANCER
    assert classify_archetype(tasks, {"energy_level": 4.4, "performance": "Weak"}, score=8) is BURNT_OUT
