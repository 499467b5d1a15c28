import math
from datetime import date, datetime

import pytest

from smartstudy.models.domain import (
    DEFAULT_SUBJECT,
    Difficulty,
    LearningStyle,
    Performance,
    Priority,
    StudentProfile,
    StudyMethod,
    clamp_energy,
    clamp_hours,
    normalize_profile,
    normalize_task,
    parse_enum,
)


@pytest.mark.parametrize(
    "raw, expected",
    [(100, 24.0), (0, 0.5), (-3, 0.5), (5, 5.0), (24, 24.0), (0.5, 0.5),
     (math.nan, 2.0), (None, 2.0), ("abc", 2.0), ("6", 6.0), (math.inf, 24.0)],
)
def test_clamp_hours(raw, expected):
    assert clamp_hours(raw) == expected


def test_normalize_task_defaults_missing_fields():
    task = normalize_task({"subject": "   ", "deadline": "2026-05-01T00:00:00.000Z"})
    assert task.subject == DEFAULT_SUBJECT
    assert task.difficulty is Difficulty.MEDIUM
    assert task.priority is Priority.MEDIUM
    assert task.estimated_hours == 2.0
    assert task.deadline == date(2026, 5, 1)
    assert task.id


def test_normalize_task_accepts_camel_case_and_lenient_enums():
    task = normalize_task({
        "id": "t1",
        "subject": "Physics",
        "estimatedHours": 100,
        "difficulty": "very_hard",
        "priority": "HIGH",
        "isCompleted": True,
        "customSessionDuration": " 45m ",
    })
    assert task.id == "t1"
    assert task.estimated_hours == 24.0
    assert task.difficulty is Difficulty.VERY_HARD
    assert task.priority is Priority.HIGH
    assert task.is_completed is True
    assert task.custom_session_duration == "45m"


def test_normalize_task_is_idempotent():
    once = normalize_task({"subject": "Chem", "estimated_hours": 0, "difficulty": "nope"})
    assert normalize_task(once) == once
    assert normalize_task(once.to_dict()) == once


def test_unparseable_deadline_becomes_none():
    assert normalize_task({"deadline": "someday"}).deadline is None
    assert normalize_task({"deadline": datetime(2026, 1, 2, 15, 0)}).deadline == date(2026, 1, 2)


def test_parse_enum_falls_back_to_default():
    assert parse_enum(Priority, "urgent!", Priority.MEDIUM) is Priority.MEDIUM
    assert parse_enum(Priority, 1, Priority.MEDIUM) is Priority.MEDIUM
    assert parse_enum(Difficulty, "Very Hard", Difficulty.EASY) is Difficulty.VERY_HARD


def test_normalize_profile():
    assert normalize_profile(None) == StudentProfile()
    prof = normalize_profile({
        "performance": "excellent",
        "energyLevel": 42,
        "learningStyle": "reading/writing",
        "study_method": "time_blocking",
    })
    assert prof.performance is Performance.EXCELLENT
    assert prof.energy_level == 10
    assert prof.learning_style is LearningStyle.READ_WRITE
    assert prof.study_method is StudyMethod.TIME_BLOCKING

    low = normalize_profile({"performance": "weak", "energy_level": -5, "learning_style": "telepathy"})
    assert low.energy_level == 1
    assert low.learning_style is None
    assert normalize_profile({"energy_level": math.nan}).energy_level == 7


@pytest.mark.parametrize("raw", ["VeryHard", "veryhard", "very_hard", "VERY-HARD", "Very Hard", " very  hard "])
def test_very_hard_spellings(raw):
    assert parse_enum(Difficulty, raw, Difficulty.EASY) is Difficulty.VERY_HARD
    assert normalize_task({"difficulty": raw}).difficulty is Difficulty.VERY_HARD


@pytest.mark.parametrize("raw, expected", [(4.5, 5), (5.5, 6), (6.5, 7), (4.49, 4), ("9.5", 10), (0.4, 1)])
def test_clamp_energy_rounds_half_up(raw, expected):
    assert clamp_energy(raw) == expected
