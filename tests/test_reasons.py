from datetime import datetime
from types import SimpleNamespace

from openai import OpenAIError

from study_rebalancer.config import LLMSettings
from study_rebalancer.reasons import (
    OVERFLOW_REASON,
    OpenAIReasonGenerator,
    TemplateReasonGenerator,
    build_reason_generator,
    template_reason,
)
from study_rebalancer.schema import ScheduleChange


def change(prior_load=0, overflow=False):
    return ScheduleChange(
        item_id="t1",
        title="Lab report draft",
        subject="Chemistry",
        original_date=datetime(2025, 1, 7, 20, 0),
        new_date=datetime(2025, 1, 8, 10, 0),  # Wednesday
        reason="",
        prior_load=prior_load,
        overflow=overflow,
    )


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_template_reason_by_load():
    assert template_reason(change(0)) == "Moved to Wednesday as it has no scheduled sessions."
    assert template_reason(change(1)) == "Moved to Wednesday which has light load (1 sessions)."
    assert template_reason(change(2)) == "Moved to Wednesday to balance weekly workload."
    assert template_reason(change(5, overflow=True)) == OVERFLOW_REASON
    assert TemplateReasonGenerator()(change(0)) == template_reason(change(0))


def test_llm_generator_uses_model_reply():
    completions = FakeCompletions(content="  Wednesday is free, a good day for your lab report.  ")
    generator = OpenAIReasonGenerator(LLMSettings(api_key="test", model="test-model"), client=fake_client(completions))

    assert generator(change(0)) == "Wednesday is free, a good day for your lab report."
    assert completions.calls[0]["model"] == "test-model"
    assert "Moved to Wednesday" in completions.calls[0]["messages"][1]["content"]


def test_llm_generator_falls_back_on_api_error():
    completions = FakeCompletions(error=OpenAIError("gateway down"))
    generator = OpenAIReasonGenerator(LLMSettings(api_key="test"), client=fake_client(completions))

    assert generator(change(1)) == "Moved to Wednesday which has light load (1 sessions)."


def test_llm_generator_falls_back_on_empty_reply():
    generator = OpenAIReasonGenerator(LLMSettings(api_key="test"), client=fake_client(FakeCompletions(content="")))
    assert generator(change(0, overflow=True)) == OVERFLOW_REASON


def test_build_reason_generator_requires_api_key():
    assert isinstance(build_reason_generator(LLMSettings()), TemplateReasonGenerator)
    assert isinstance(build_reason_generator(LLMSettings(api_key="sk-test")), OpenAIReasonGenerator)
