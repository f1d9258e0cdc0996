"""Rebalancer configuration.

Defaults match the study planner's behaviour: three items a day for bulk
rebalancing, four sessions a day when replanning a missed session, a 14 day
search horizon and a fixed 10:00 start for moved items. Every value can be
overridden through ``STUDY_REBALANCER_*`` environment variables (a ``.env``
file is honoured).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

KEEP_POLICIES = ("insertion", "priority")

_ENV_PREFIX = "STUDY_REBALANCER_"


class InvalidConfiguration(ValueError):
    """Raised when rebalancer parameters cannot produce a valid schedule."""


def _parse_time(value: str) -> time:
    try:
        hour, minute = value.strip().split(":", maxsplit=1)
        return time(int(hour), int(minute))
    except (ValueError, TypeError) as exc:
        raise InvalidConfiguration(f"reschedule time must be HH:MM, got {value!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidConfiguration(f"{_ENV_PREFIX + name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw in (None, ""):
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise InvalidConfiguration(f"{_ENV_PREFIX + name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class RebalanceConfig:
    """Tunable parameters for the day-capacity rebalancer."""

    capacity_per_day: int = 3
    horizon_days: int = 14
    replan_capacity: int = 4
    reschedule_time: time = time(10, 0)
    keep_policy: str = "insertion"
    reschedule_overdue: bool = False
    timezone: Optional[str] = None

    def validate(self) -> "RebalanceConfig":
        if self.capacity_per_day <= 0:
            raise InvalidConfiguration(f"capacity_per_day must be positive, got {self.capacity_per_day}")
        if self.horizon_days <= 0:
            raise InvalidConfiguration(f"horizon_days must be positive, got {self.horizon_days}")
        if self.replan_capacity <= 0:
            raise InvalidConfiguration(f"replan_capacity must be positive, got {self.replan_capacity}")
        if self.keep_policy not in KEEP_POLICIES:
            raise InvalidConfiguration(f"keep_policy must be one of {KEEP_POLICIES}, got {self.keep_policy!r}")
        if self.timezone is not None:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise InvalidConfiguration(f"unknown timezone {self.timezone!r}") from exc
        return self

    @classmethod
    def from_env(cls) -> "RebalanceConfig":
        load_dotenv()
        defaults = cls()
        raw_time = os.getenv(_ENV_PREFIX + "RESCHEDULE_TIME")
        config = cls(
            capacity_per_day=_env_int("CAPACITY_PER_DAY", defaults.capacity_per_day),
            horizon_days=_env_int("HORIZON_DAYS", defaults.horizon_days),
            replan_capacity=_env_int("REPLAN_CAPACITY", defaults.replan_capacity),
            reschedule_time=_parse_time(raw_time) if raw_time else defaults.reschedule_time,
            keep_policy=os.getenv(_ENV_PREFIX + "KEEP_POLICY") or defaults.keep_policy,
            reschedule_overdue=_env_bool("RESCHEDULE_OVERDUE", defaults.reschedule_overdue),
            timezone=os.getenv(_ENV_PREFIX + "TIMEZONE") or None,
        )
        return config.validate()


@dataclass(frozen=True)
class LLMSettings:
    """Connection settings for the OpenAI-compatible rationale gateway."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gpt-4o-mini"
    timeout: float = 20.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "LLMSettings":
        load_dotenv()
        raw_timeout = os.getenv(_ENV_PREFIX + "LLM_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else cls.timeout
        except ValueError as exc:
            raise InvalidConfiguration(f"{_ENV_PREFIX}LLM_TIMEOUT must be a number, got {raw_timeout!r}") from exc
        return cls(
            api_key=os.getenv(_ENV_PREFIX + "LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv(_ENV_PREFIX + "LLM_BASE_URL") or None,
            model=os.getenv(_ENV_PREFIX + "LLM_MODEL") or cls.model,
            timeout=timeout,
        )
