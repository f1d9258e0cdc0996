from datetime import time

import pytest

from study_rebalancer.config import InvalidConfiguration, LLMSettings, RebalanceConfig


def test_defaults_are_valid():
    config = RebalanceConfig().validate()
    assert config.capacity_per_day == 3
    assert config.horizon_days == 14
    assert config.replan_capacity == 4
    assert config.reschedule_time == time(10, 0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capacity_per_day": 0},
        {"horizon_days": 0},
        {"replan_capacity": -1},
        {"keep_policy": "random"},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(InvalidConfiguration):
        RebalanceConfig(**kwargs).validate()


def test_from_env(monkeypatch):
    monkeypatch.setenv("STUDY_REBALANCER_CAPACITY_PER_DAY", "4")
    monkeypatch.setenv("STUDY_REBALANCER_HORIZON_DAYS", "7")
    monkeypatch.setenv("STUDY_REBALANCER_RESCHEDULE_TIME", "09:30")
    monkeypatch.setenv("STUDY_REBALANCER_KEEP_POLICY", "priority")
    monkeypatch.setenv("STUDY_REBALANCER_RESCHEDULE_OVERDUE", "true")

    config = RebalanceConfig.from_env()

    assert config.capacity_per_day == 4
    assert config.horizon_days == 7
    assert config.reschedule_time == time(9, 30)
    assert config.keep_policy == "priority"
    assert config.reschedule_overdue is True


def test_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("STUDY_REBALANCER_CAPACITY_PER_DAY", "many")
    with pytest.raises(InvalidConfiguration):
        RebalanceConfig.from_env()

    monkeypatch.setenv("STUDY_REBALANCER_CAPACITY_PER_DAY", "0")
    with pytest.raises(InvalidConfiguration):
        RebalanceConfig.from_env()


def test_bad_reschedule_time(monkeypatch):
    monkeypatch.setenv("STUDY_REBALANCER_RESCHEDULE_TIME", "ten")
    with pytest.raises(InvalidConfiguration):
        RebalanceConfig.from_env()


def test_llm_settings_from_env(monkeypatch):
    monkeypatch.delenv("STUDY_REBALANCER_LLM_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("STUDY_REBALANCER_LLM_MODEL", "gemini-2.5-flash")

    settings = LLMSettings.from_env()

    assert settings.enabled
    assert settings.api_key == "sk-test"
    assert settings.model == "gemini-2.5-flash"
    assert not LLMSettings().enabled


def test_unknown_boolean_env_value_is_rejected(monkeypatch):
    monkeypatch.setenv("STUDY_REBALANCER_RESCHEDULE_OVERDUE", "maybe")
    with pytest.raises(InvalidConfiguration):
        RebalanceConfig.from_env()

    monkeypatch.setenv("STUDY_REBALANCER_RESCHEDULE_OVERDUE", "off")
    assert RebalanceConfig.from_env().reschedule_overdue is False
