import os
import tempfile
from datetime import datetime, timedelta

import pytest

# Must happen before anything imports smartstudy.core.config.
_DB_DIR = tempfile.mkdtemp(prefix="smartstudy-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")
os.environ["SEED_DEMO_TASKS"] = "0"
os.environ["GEMINI_API_KEY"] = ""
os.environ["GROQ_API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from smartstudy.models.db import Base, SessionLocal, engine  # noqa: E402
from smartstudy.services import llm  # noqa: E402

NOW = datetime(2026, 3, 2, 9, 0, 0)
TODAY = NOW.date()

GUIDEBOOK_REPLY = (
    "### 👤 Learning Profile\n- **Archetype**: test\n\n"
    "### 📅 Personalized Roadmap (Visual Schedule)\n- 08:00 - 08:25: Calculus"
)


def make_task(subject="Calculus", hours=2.0, difficulty="Medium", priority="Medium",
              due_in=10, **extra):
    task = {
        "subject": subject,
        "estimated_hours": hours,
        "difficulty": difficulty,
        "priority": priority,
        "deadline": TODAY + timedelta(days=due_in),
    }
    task.update(extra)
    return task


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def client(db):
    from smartstudy.main import app

    with TestClient(app) as c:
        yield c


class FakeLLM:
    def __init__(self, reply=GUIDEBOOK_REPLY):
        self.reply = reply
        self.calls = []

    def __call__(self, prompt, purpose="analysis"):
        self.calls.append((purpose, prompt))
        return self.reply


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm, "generate_text", fake)
    return fake
