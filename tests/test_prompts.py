from conftest import NOW, make_task
from smartstudy.models.domain import normalize_profile, normalize_task
from smartstudy.services.archetype import EXPLORER
from smartstudy.services.prompts import (
    MindMapOptions,
    build_chat_prompt,
    build_guidebook_prompt,
    build_mind_map_prompt,
    build_refine_prompt,
    mind_map_payload,
    render_history,
)
from smartstudy.services.wellbeing import compute_wellbeing


def _tasks():
    return [
        normalize_task(make_task("Calculus", 5, "Hard", "High", due_in=1)),
        normalize_task(make_task("Philosophy", 1.5, "Easy", "Low", due_in=12)),
    ]


def test_guidebook_prompt_carries_scores_and_archetype():
    tasks = _tasks()
    profile = normalize_profile({"energy_level": 9, "performance": "Good",
                                 "learning_style": "Visual", "study_method": "Flowtime"})
    stats = compute_wellbeing(tasks, profile, NOW)
    prompt = build_guidebook_prompt(tasks, profile, stats, EXPLORER, 4.5)

    assert f"**{stats.current}/100**" in prompt
    assert f"**{stats.projected}/100**" in prompt
    assert "The Explorer" in prompt
    assert "Workload score: 4.5/10." in prompt
    assert "**Visual**" in prompt and "**Flowtime**" in prompt
    assert "6.5 hours in total" in prompt
    assert '"subject": "Calculus"' in prompt
    for header in ("### 👤 Learning Profile", "### 📊 Core Strategy", "### 📅 Personalized Roadmap",
                   "### 💡 Personal Advice", "### 🧘 Wellbeing & Co-creation"):
        assert header in prompt


def test_guidebook_prompt_defaults_style_and_method():
    tasks = _tasks()
    profile = normalize_profile(None)
    prompt = build_guidebook_prompt(tasks, profile, compute_wellbeing(tasks, profile, NOW), EXPLORER, 3)
    assert "**Mixed**" in prompt
    assert "**Pomodoro**" in prompt


def test_refine_prompt_truncates_plan():
    plan = "x" * 5000
    prompt = build_refine_prompt(EXPLORER, normalize_profile(None), plan, "less on Monday")
    assert "x" * 1500 + "..." in prompt
    assert "x" * 1501 not in prompt
    assert '"less on Monday"' in prompt


def test_mind_map_payload_respects_options():
    tasks = _tasks()
    assert mind_map_payload(tasks, MindMapOptions()) == [
        {"s": "Calculus", "d": "Hard"},
        {"s": "Philosophy", "d": "Easy"},
    ]
    full = mind_map_payload(tasks, MindMapOptions(show_difficulty=False, show_hours=True,
                                                  show_deadline=True))
    assert full[1] == {"s": "Philosophy", "h": "1.5h", "dl": tasks[1].deadline.isoformat()}
    assert "graph LR" in build_mind_map_prompt(tasks, MindMapOptions())


def test_render_history_keeps_last_turns():
    history = [{"role": "user" if i % 2 == 0 else "model", "content": f"m{i}"} for i in range(10)]
    text = render_history(history)
    lines = text.split("\n")
    assert len(lines) == 6
    assert lines[0] == "Student: m4"
    assert lines[-1] == "AI Mentor: m9"
    assert render_history([]) == ""


def test_chat_prompt():
    prompt = build_chat_prompt(
        "Why Calculus first?", "p" * 3000, normalize_profile({"energy_level": 4}),
        "2 tasks", [{"role": "user", "content": "hi"}],
    )
    assert "p" * 2000 + "... (truncated)" in prompt
    assert "p" * 2001 not in prompt
    assert "- Energy: 4/10" in prompt
    assert "Student: hi" in prompt
    assert prompt.endswith("MENTOR ANSWERS:")
