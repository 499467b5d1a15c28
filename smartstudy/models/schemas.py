from pydantic import BaseModel, Field
from datetime import date
from typing import Dict, List, Literal, Optional

from smartstudy.models.domain import Difficulty, Performance, Priority


# Inputs are lenient on purpose: out-of-range or unknown values are
# normalized by the domain layer instead of being rejected with 422.

class TaskIn(BaseModel):
    subject: Optional[str] = None
    description: str = ""
    deadline: Optional[date] = None
    estimated_hours: Optional[float] = Field(None, description="Clamped to [0.5, 24]")
    difficulty: Optional[str] = Field(None, description="Easy | Medium | Hard | Very Hard")
    priority: Optional[str] = Field(None, description="Low | Medium | High")
    icon: Optional[str] = None
    is_completed: bool = False
    custom_session_duration: Optional[str] = Field(None, description='e.g. "45m" or "1.5h"')


class TaskPatch(BaseModel):
    subject: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[date] = None
    estimated_hours: Optional[float] = None
    difficulty: Optional[str] = None
    priority: Optional[str] = None
    icon: Optional[str] = None
    is_completed: Optional[bool] = None
    custom_session_duration: Optional[str] = None


class TaskOut(BaseModel):
    id: str
    subject: str
    description: str
    deadline: Optional[date]
    estimated_hours: float
    difficulty: Difficulty
    priority: Priority
    icon: str
    is_completed: bool
    custom_session_duration: Optional[str] = None


class ProfileIn(BaseModel):
    performance: Optional[str] = Field(None, description="Weak | Average | Good | Excellent")
    energy_level: Optional[float] = Field(None, description="Clamped to [1, 10]")
    learning_style: Optional[str] = None
    study_method: Optional[str] = None


class ProfileOut(BaseModel):
    performance: Performance
    energy_level: int
    learning_style: Optional[str] = None
    study_method: Optional[str] = None


class FactorsOut(BaseModel):
    workload: str
    pressure: str
    capacity: str


class WellbeingOut(BaseModel):
    total_hours: float
    current: int
    projected: int
    factors: FactorsOut


class WellbeingPreviewIn(BaseModel):
    tasks: List[TaskIn] = Field(default_factory=list)
    profile: Optional[ProfileIn] = None


class ArchetypeOut(BaseModel):
    key: str
    name: str
    description: str
    schedule_style: str
    icon: str
    workload_score: float


class WorkloadItemOut(BaseModel):
    subject: str
    hours: float
    difficulty_score: int


class StatsOut(BaseModel):
    count: int
    completed_count: int
    total_hours: float
    mean_hours: float
    median_hours: float
    stdev_hours: float
    average_difficulty: float
    hardest_subject: Optional[str]
    burnout_risk: str
    difficulty_distribution: Dict[str, int]
    workload: List[WorkloadItemOut]


class ActionItemOut(BaseModel):
    task: TaskOut
    session_type: str
    recommended_duration: str
    display_duration: str
    focus_seconds: int


class SectionLineOut(BaseModel):
    kind: str
    text: str


class SectionOut(BaseModel):
    title: str
    kind: str
    lines: List[SectionLineOut]


class GuidebookOut(BaseModel):
    markdown: str
    is_error: bool
    archetype: str
    wellbeing: WellbeingOut
    workload_score: float
    sections: List[SectionOut]


class StoredGuidebookOut(BaseModel):
    markdown: str
    archetype: str
    wellbeing_current: int
    wellbeing_projected: int
    sections: List[SectionOut]


class RefineIn(BaseModel):
    comment: str
    plan: Optional[str] = Field(None, description="Defaults to the latest stored guidebook")


class MindMapIn(BaseModel):
    show_difficulty: bool = True
    show_hours: bool = False
    show_deadline: bool = False


class MindMapOut(BaseModel):
    mermaid: str


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    content: str


class ChatIn(BaseModel):
    message: str
    history: List[ChatTurn] = Field(default_factory=list)
    plan: Optional[str] = Field(None, description="Defaults to the latest stored guidebook")


class ChatOut(BaseModel):
    reply: str
