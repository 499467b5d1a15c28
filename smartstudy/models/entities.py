# smartstudy/models/entities.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text
from .db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskRow(Base):
    __tablename__ = "study_tasks"
    id = Column(String(32), primary_key=True)
    subject = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    deadline = Column(Date, nullable=True)
    estimated_hours = Column(Float, nullable=False, default=2.0)
    difficulty = Column(String(20), nullable=False, default="Medium")
    priority = Column(String(20), nullable=False, default="Medium")
    icon = Column(String(16), nullable=False, default="📚")
    is_completed = Column(Boolean, nullable=False, default=False, server_default="0")
    custom_session_duration = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


class ProfileRow(Base):
    __tablename__ = "student_profiles"
    profile_key = Column(String(64), primary_key=True)
    performance = Column(String(20), nullable=False, default="Good")
    energy_level = Column(Integer, nullable=False, default=7)
    learning_style = Column(String(32), nullable=True)
    study_method = Column(String(32), nullable=True)


class GuidebookRow(Base):
    __tablename__ = "guidebooks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    profile_key = Column(String(64), index=True, nullable=False)
    markdown = Column(Text, nullable=False)
    archetype = Column(String(32), nullable=False)
    wellbeing_current = Column(Integer, nullable=False)
    wellbeing_projected = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow)
