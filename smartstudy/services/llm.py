"""
smartstudy/services/llm.py

Opaque text-in/text-out access to the hosted models:
- Gemini (google-generativeai) when GEMINI_API_KEY is set
- Groq chat completions as fallback, with retry on rate limits
Callers only ever see a string; failures are logged and come back as "".
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from smartstudy.core.config import settings

log = logging.getLogger(__name__)

PURPOSES = ("analysis", "refine", "chat")

# Lower temperature for structured outputs, a little more freedom for chat.
TEMPERATURE: Dict[str, float] = {"analysis": 0.4, "refine": 0.4, "chat": 0.7}

GROQ_MAX_RETRIES = 3
GROQ_MAX_TOKENS = 4096

_groq_client: Any = None


def _get_groq_client():
    global _groq_client
    if _groq_client is not None or not settings.HAS_GROQ:
        return _groq_client
    try:
        from groq import Groq
        _groq_client = Groq(api_key=settings.GROQ_API_KEY, timeout=settings.LLM_TIMEOUT_SECONDS)
        log.info("[LLM] Groq client initialized.")
    except Exception as e:
        log.error("[LLM] Groq initialization error: %s", e, exc_info=True)
        _groq_client = None
    return _groq_client


def _gemini_generate(prompt: str, purpose: str) -> Optional[str]:
    if not settings.HAS_GEMINI:
        return None
    try:
        import google.generativeai as genai

        genai.configure(api_key=settings.GEMINI_API_KEY)
        model = genai.GenerativeModel(settings.GEMINI_MODEL)
        response = model.generate_content(
            prompt,
            generation_config={"temperature": TEMPERATURE.get(purpose, 0.4)},
            request_options={"timeout": settings.LLM_TIMEOUT_SECONDS},
        )
        text = (response.text or "").strip()
        if not text:
            log.warning("[LLM] Gemini returned an empty response (%s)", purpose)
            return None
        return text
    except Exception as e:
        log.warning("[LLM] Gemini %s call failed: %s", purpose, e)
        return None


def _groq_generate(prompt: str, purpose: str) -> Optional[str]:
    client = _get_groq_client()
    if client is None:
        return None

    for attempt in range(GROQ_MAX_RETRIES):
        try:
            resp = client.chat.completions.create(
                model=settings.GROQ_MODEL,
                temperature=TEMPERATURE.get(purpose, 0.4),
                max_tokens=GROQ_MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
            content = resp.choices[0].message.content
            return (content or "").strip() or None
        except Exception as e:
            error_msg = str(e).lower()
            if "rate limit" in error_msg and attempt < GROQ_MAX_RETRIES - 1:
                wait_time = 2 ** attempt  # 1, 2, 4 seconds
                log.warning(
                    "[LLM] Rate limit hit, retrying in %d seconds (attempt %d/%d): %s",
                    wait_time, attempt + 1, GROQ_MAX_RETRIES, e,
                )
                time.sleep(wait_time)
                continue
            log.error("[LLM] Groq %s failed after %d attempts: %s", purpose, attempt + 1, e, exc_info=True)
            return None
    return None


def generate_text(prompt: str, purpose: str = "analysis") -> str:
    """Send ``prompt`` to the first available provider; "" when none answers."""
    if purpose not in PURPOSES:
        raise ValueError(f"unknown LLM purpose: {purpose}")

    text = _gemini_generate(prompt, purpose)
    if text is None:
        text = _groq_generate(prompt, purpose)
    if text is None:
        log.info("[LLM] no provider produced text for %s", purpose)
        return ""
    return text


def llm_status() -> Dict[str, Any]:
    # Never expose the keys, only whether one is configured.
    return {
        "gemini": {"has_key": settings.HAS_GEMINI, "model": settings.GEMINI_MODEL},
        "groq": {"has_key": settings.HAS_GROQ, "model": settings.GROQ_MODEL},
    }
