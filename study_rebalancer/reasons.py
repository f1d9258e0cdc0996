"""Human-readable rationales for schedule changes.

The rebalancer decides dates mechanically and hands every proposal to a
``ReasonGenerator`` for its wording. ``TemplateReasonGenerator`` is the
deterministic default. ``OpenAIReasonGenerator`` asks an OpenAI-compatible
chat endpoint to rephrase the templated reason and falls back to the template
whenever the call fails, so the date assignment never depends on the network.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from openai import OpenAI, OpenAIError

from study_rebalancer.config import LLMSettings
from study_rebalancer.schema import ScheduleChange

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
OVERFLOW_REASON = "All days are full. Added to tomorrow with overflow."

_SYSTEM_PROMPT = (
    "You are a study schedule assistant. Rewrite the given scheduling reason as one short, "
    "encouraging sentence for a student. Keep the weekday and any session counts unchanged. "
    "Reply with the sentence only."
)


class ReasonGenerator(Protocol):
    def __call__(self, change: ScheduleChange) -> str: ...


def template_reason(change: ScheduleChange) -> str:
    """Deterministic rationale from the destination day's prior load."""

    if change.overflow:
        return OVERFLOW_REASON
    weekday = WEEKDAYS[change.new_date.weekday()]
    if change.prior_load == 0:
        return f"Moved to {weekday} as it has no scheduled sessions."
    if change.prior_load < 2:
        return f"Moved to {weekday} which has light load ({change.prior_load} sessions)."
    return f"Moved to {weekday} to balance weekly workload."


class TemplateReasonGenerator:
    """Default generator; no I/O, always the same text for the same change."""

    def __call__(self, change: ScheduleChange) -> str:
        return template_reason(change)


class OpenAIReasonGenerator:
    """Rephrase templated reasons through a chat completion endpoint."""

    def __init__(self, settings: LLMSettings, client=None, fallback: Optional[ReasonGenerator] = None):
        self.settings = settings
        self.client = client or OpenAI(api_key=settings.api_key, base_url=settings.base_url, timeout=settings.timeout)
        self.fallback = fallback or TemplateReasonGenerator()

    def _prompt(self, change: ScheduleChange, templated: str) -> str:
        original = change.original_date.date().isoformat() if change.original_date else "not set"
        return (
            f"Task: {change.title} ({change.subject})\n"
            f"Original date: {original}\n"
            f"New date: {change.new_date.date().isoformat()}\n"
            f"Reason: {templated}"
        )

    def __call__(self, change: ScheduleChange) -> str:
        templated = self.fallback(change)
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": self._prompt(change, templated)},
                ],
                temperature=0.3,
            )
        except OpenAIError as exc:
            logger.warning("Reason generation failed for %s, using template: %s", change.item_id, exc)
            return templated

        choices = getattr(response, "choices", None) or []
        content = (choices[0].message.content or "").strip() if choices else ""
        if not content:
            logger.warning("Empty reason from model for %s, using template", change.item_id)
            return templated
        return content


def build_reason_generator(settings: Optional[LLMSettings] = None) -> ReasonGenerator:
    """Pick the LLM generator when an API key is configured."""

    settings = settings or LLMSettings.from_env()
    if settings.enabled:
        logger.info("Using %s for schedule change reasons", settings.model)
        return OpenAIReasonGenerator(settings)
    return TemplateReasonGenerator()
