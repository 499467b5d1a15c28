# smartstudy/main.py
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from smartstudy.core.config import settings
from smartstudy.models.db import engine, SessionLocal, Base
from smartstudy.models import entities  # noqa: F401  (registers the tables)
from smartstudy.routers import insights, planner, tasks
from smartstudy.services.llm import llm_status
from smartstudy.utils.csv_loader import bootstrap_from_csv

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

DEMO_TASKS_CSV = Path(__file__).resolve().parent.parent / "data" / "demo_tasks.csv"

app = FastAPI(title=settings.APP_NAME)

# --------------------------- CORS ---------------------------
# The browser front end usually runs on a different port in development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------------------------- DB init ---------------------------

def _init_db() -> None:
    Base.metadata.create_all(bind=engine)
    if not settings.SEED_DEMO_TASKS:
        return
    with SessionLocal() as db:
        bootstrap_from_csv(db, DEMO_TASKS_CSV)


_init_db()

# --------------------------- Routers ---------------------------
app.include_router(tasks.router)
app.include_router(insights.router)
app.include_router(planner.router)


# --------------------------- Root & Health ---------------------------
@app.get("/")
def root():
    return RedirectResponse(url="/docs")


@app.get("/healthz")
def health():
    return {"ok": True, "app": settings.APP_NAME}


@app.get("/debug/llm")
def debug_llm():
    return llm_status()
