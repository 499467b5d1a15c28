from __future__ import annotations

"""
smartstudy/services/plan.py

AI mentor orchestration:
- study guidebook generation (stats + archetype + prompt + LLM)
- feedback-driven refinement
- Mermaid mind map extraction
- mentor chat
- guidebook markdown sectioning for the front end
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from smartstudy.models.domain import (
    StudyTask,
    WellbeingStats,
    normalize_profile,
    normalize_task,
)
from smartstudy.services import llm
from smartstudy.services.archetype import Archetype, classify_archetype, workload_score
from smartstudy.services.prompts import (
    MindMapOptions,
    build_chat_prompt,
    build_guidebook_prompt,
    build_mind_map_prompt,
    build_refine_prompt,
)
from smartstudy.services.wellbeing import compute_wellbeing

log = logging.getLogger(__name__)

BUSY_MESSAGE = "The mentor is busy analyzing your personalized strategy. Please try again."
REFINE_BUSY_MESSAGE = "The mentor is busy updating your plan. Please try again."
CHAT_RETRY_MESSAGE = "Sorry, I need a moment to think. Could you ask again?"


@dataclass(frozen=True)
class PlanResult:
    markdown: str
    is_error: bool
    stats: WellbeingStats
    archetype: Archetype
    workload_score: float


def _clean_tasks(tasks: Iterable[Any]) -> List[StudyTask]:
    return [normalize_task(t) for t in tasks]


def generate_study_plan(
    tasks: Iterable[Any],
    profile: Any = None,
    now: Optional[datetime] = None,
) -> PlanResult:
    clean = _clean_tasks(tasks)
    if not clean:
        raise ValueError("at least one task is required to build a study plan")
    prof = normalize_profile(profile)

    stats = compute_wellbeing(clean, prof, now)
    score = workload_score(clean)
    archetype = classify_archetype(clean, prof, score)
    log.info(
        "[PLAN] %d tasks, wellbeing %d -> %d, archetype=%s",
        len(clean), stats.current, stats.projected, archetype.key,
    )

    prompt = build_guidebook_prompt(clean, prof, stats, archetype, score)
    text = llm.generate_text(prompt, purpose="analysis")
    return PlanResult(
        markdown=text or BUSY_MESSAGE,
        is_error=not text,
        stats=stats,
        archetype=archetype,
        workload_score=score,
    )


def refine_study_plan(
    tasks: Iterable[Any],
    current_plan: str,
    comment: str,
    profile: Any = None,
) -> PlanResult:
    if not (current_plan or "").strip():
        raise ValueError("there is no plan to refine yet")
    if not (comment or "").strip():
        raise ValueError("feedback comment must not be empty")

    clean = _clean_tasks(tasks)
    prof = normalize_profile(profile)
    stats = compute_wellbeing(clean, prof)
    score = workload_score(clean)
    archetype = classify_archetype(clean, prof, score)

    prompt = build_refine_prompt(archetype, prof, current_plan, comment.strip())
    text = llm.generate_text(prompt, purpose="refine")
    return PlanResult(
        markdown=text or REFINE_BUSY_MESSAGE,
        is_error=not text,
        stats=stats,
        archetype=archetype,
        workload_score=score,
    )


_MERMAID_FENCE = re.compile(r"```mermaid([\s\S]*?)```")


def extract_mermaid(text: str) -> str:
    match = _MERMAID_FENCE.search(text or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    return (text or "").replace("```mermaid", "").replace("```", "").strip()


def generate_mind_map(tasks: Iterable[Any], options: Optional[MindMapOptions] = None) -> str:
    clean = _clean_tasks(tasks)
    if not clean:
        return ""
    prompt = build_mind_map_prompt(clean, options or MindMapOptions())
    return extract_mermaid(llm.generate_text(prompt, purpose="analysis"))


def summarize_for_chat(tasks: Iterable[Any]) -> str:
    clean = _clean_tasks(tasks)
    if not clean:
        return "no tasks"
    parts = [f"{t.subject} ({t.estimated_hours:g}h, {t.difficulty.value})" for t in clean]
    return f"{len(clean)} tasks: " + "; ".join(parts)


def chat_with_mentor(
    message: str,
    plan: str,
    profile: Any = None,
    task_summary: str = "",
    history: Sequence[Dict[str, str]] = (),
) -> str:
    if not (message or "").strip():
        raise ValueError("message must not be empty")
    prompt = build_chat_prompt(message.strip(), plan or "", normalize_profile(profile), task_summary, history)
    return llm.generate_text(prompt, purpose="chat") or CHAT_RETRY_MESSAGE


# ---------------------------------------------------------------------------
# Guidebook sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SectionLine:
    kind: str  # bullet | quote | paragraph
    text: str


@dataclass(frozen=True)
class GuidebookSection:
    title: str
    kind: str
    lines: List[SectionLine] = field(default_factory=list)


# First matching keyword group decides the section kind.
_SECTION_KINDS = (
    ("overview", ("overview", "health", "profile")),
    ("strategy", ("strategy", "mindset")),
    ("roadmap", ("roadmap", "schedule")),
    ("focus", ("focus", "priority")),
    ("quote", ("message", "mentor", "wellbeing")),
)


def _section_kind(title: str) -> str:
    lowered = title.lower()
    for kind, keywords in _SECTION_KINDS:
        if any(k in lowered for k in keywords):
            return kind
    return "general"


def _classify_line(line: str) -> SectionLine:
    if line.startswith("- "):
        return SectionLine("bullet", line[2:].strip())
    if line.startswith(">"):
        return SectionLine("quote", line[1:].strip())
    return SectionLine("paragraph", line)


def parse_guidebook_sections(markdown: str) -> List[GuidebookSection]:
    sections = []
    for chunk in (markdown or "").split("###"):
        if not chunk.strip():
            continue
        lines = chunk.strip().split("\n")
        title = re.sub(r"^[*_]+|[*_]+$", "", lines[0].strip())
        body = [_classify_line(ln.strip()) for ln in lines[1:] if ln.strip()]
        sections.append(GuidebookSection(title=title, kind=_section_kind(title), lines=body))
    return sections
