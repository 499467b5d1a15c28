"""
smartstudy/services/prompts.py

Prompt templates for the AI mentor. Builders are plain string formatting over
already-computed data; they never call the model themselves.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, List, Sequence

from smartstudy.models.domain import StudentProfile, StudyTask, WellbeingStats
from smartstudy.services.archetype import Archetype

DEFAULT_LEARNING_STYLE = "Mixed"
DEFAULT_STUDY_METHOD = "Pomodoro"

REFINE_PLAN_CHARS = 1500
CHAT_PLAN_CHARS = 2000
CHAT_HISTORY_TURNS = 6


@dataclass(frozen=True)
class MindMapOptions:
    show_difficulty: bool = True
    show_hours: bool = False
    show_deadline: bool = False


def _learning_style(profile: StudentProfile) -> str:
    return profile.learning_style.value if profile.learning_style else DEFAULT_LEARNING_STYLE


def _study_method(profile: StudentProfile) -> str:
    return profile.study_method.value if profile.study_method else DEFAULT_STUDY_METHOD


def _tasks_json(tasks: Sequence[StudyTask]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)


def build_guidebook_prompt(
    tasks: Sequence[StudyTask],
    profile: StudentProfile,
    stats: WellbeingStats,
    archetype: Archetype,
    score: float,
) -> str:
    style = _learning_style(profile)
    method = _study_method(profile)
    f = stats.factors
    return f"""
You are "SmartStudy AI Mentor", an educational psychologist and time-management coach
who writes highly personalized study plans.

USER DATA:
- Profile: performance {profile.performance.value}, energy {profile.energy_level}/10.
- Learning style (VARK): **{style}**.
- Preferred study method: **{method}**.
- Workload score: {score:.1f}/10.
- Stats: {len(tasks)} tasks, {stats.total_hours:g} hours in total.

WELLBEING ANALYSIS (objective data from the scoring model):
- CURRENT wellbeing (before the plan): **{stats.current}/100**.
- PROJECTED wellbeing (after the plan): **{stats.projected}/100**.
- Main factors: workload ({f.workload}), deadline pressure ({f.pressure}), personal energy ({f.capacity}).
=> Explain why the score goes up (e.g. less deadline pressure through prioritization, or an
"Overloaded" workload split into digestible parts).

STUDENT ARCHETYPE:
- Type: **{archetype.name}** {archetype.icon}
- Traits: {archetype.description}
- Schedule style: {archetype.schedule_style}

TASKS:
{_tasks_json(tasks)}

OUTPUT (Markdown):
Write a highly personalized plan that speaks directly to the "{archetype.name}" archetype.

*SPECIAL NOTES*:
- The user learns in a "{style}" way; suggest a matching approach.
- Apply the "{method}" method when designing the schedule.
- EMPHASIZE raising wellbeing from {stats.current} to {stats.projected}.

### 👤 Learning Profile
- **Archetype**: {archetype.name}
- **Learning style**: {style} (quick optimization tip: [short hint]).
- **Wellbeing impact**: from **{stats.current}** ➔ **{stats.projected}** / 100.
- **Driving factors**: {f.workload} | {f.pressure} | {f.capacity}. (One sentence on this state.)

### 📊 Core Strategy (based on {archetype.schedule_style} + {method})
- Explain how today is arranged.
- **Tactic**: how to use {method} for the specific tasks below.
- **Golden rule for today**: one single rule the user must remember.

### 📅 Personalized Roadmap (Visual Schedule)
*IMPORTANT: design the timeline in the "{archetype.schedule_style}" style and split blocks by "{method}".*

Present it as a list with icons. Example format:
**Day 1 - [Date]**:
- 08:00 - 08:25: [Icon] Task A (Block 1 - {method})
- 08:25 - 08:30: Short break
- ...

### 💡 Personal Advice
- Specifically for a "{profile.performance.value}" performance level.
- Specifically for energy {profile.energy_level}.
- **{style} corner**: a memory tip that suits this style.

### 🧘 Wellbeing & Co-creation
- One inspiring quote for "{archetype.name}".
""".strip()


def build_refine_prompt(
    archetype: Archetype,
    profile: StudentProfile,
    current_plan: str,
    comment: str,
) -> str:
    return f"""
CONTEXT: You are SmartStudy AI Mentor.
USER ARCHETYPE: {archetype.name} ({archetype.schedule_style}).
EXTENDED PROFILE: learns {_learning_style(profile)}, prefers {_study_method(profile)}.

CURRENT PLAN: {current_plan[:REFINE_PLAN_CHARS]}...
STUDENT FEEDBACK: "{comment}"

TASK: Adjust the guidebook.
IMPORTANT:
1. Keep the Markdown structure (Learning Profile, Core Strategy, Personalized Roadmap...).
2. Every change must fit the "{archetype.name}" archetype and the student's learning style.
3. Update the concrete schedule according to the feedback.
""".strip()


def mind_map_payload(tasks: Sequence[StudyTask], options: MindMapOptions) -> List[Dict[str, str]]:
    items = []
    for t in tasks:
        item = {"s": t.subject}
        if options.show_difficulty:
            item["d"] = t.difficulty.value
        if options.show_hours:
            item["h"] = f"{t.estimated_hours:g}h"
        if options.show_deadline:
            item["dl"] = t.deadline.isoformat() if t.deadline else ""
        items.append(item)
    return items


def build_mind_map_prompt(tasks: Sequence[StudyTask], options: MindMapOptions) -> str:
    data = json.dumps(mind_map_payload(tasks, options), ensure_ascii=False, indent=2)
    return f"""
You are a Visual Thinking & Mermaid.js expert.
DATA: {data}
REQUIREMENT: Create Mermaid.js code of type "graph LR".
Output ONLY the code block.
""".strip()


def render_history(history: Sequence[Dict[str, str]]) -> str:
    lines = []
    for turn in list(history)[-CHAT_HISTORY_TURNS:]:
        speaker = "Student" if turn.get("role") == "user" else "AI Mentor"
        lines.append(f"{speaker}: {turn.get('content', '')}")
    return "\n".join(lines)


def build_chat_prompt(
    message: str,
    plan: str,
    profile: StudentProfile,
    task_summary: str,
    history: Sequence[Dict[str, str]],
) -> str:
    return f"""
ROLE: You are SmartStudy AI Mentor. You have just written a study plan for this student.

CONTEXT (current plan):
{plan[:CHAT_PLAN_CHARS]}... (truncated)

CONTEXT (student profile):
- Energy: {profile.energy_level}/10
- Learning style: {_learning_style(profile)}
- Method: {_study_method(profile)}
- Tasks: {task_summary}

TASK: Answer the student's question about the plan you just wrote.
- Explain WHY you arranged things this way.
- Encourage the student.
- If the student wants changes, point them to the "Feedback & Adjust" feature at the bottom
  of the page; here you only explain and advise.
- Keep the answer short (under 100 words), friendly, with emoji.

CHAT HISTORY:
{render_history(history)}

STUDENT ASKS: "{message}"

MENTOR ANSWERS:
""".strip()
