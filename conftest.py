import asyncio

import pytest

from listkeeper.providers.base import LLMProvider, LLMResponse
from listkeeper.runtime import build_runtime
from listkeeper.settings import ListkeeperSettings


class FakeProvider(LLMProvider):
    """Answers keyed by system instruction; unknown instructions fail like a dead API."""

    def __init__(self, answers: dict[str, str] | None = None, api_key: str | None = "test-key", delay: float = 0.0):
        super().__init__(api_key=api_key)
        self.answers = dict(answers or {})
        self.delay = delay
        self.calls: list[str] = []

    async def chat(self, messages, model=None, max_tokens=500, temperature=0.3) -> LLMResponse:
        system = messages[0]["content"]
        self.calls.append(system)
        if self.delay:
            await asyncio.sleep(self.delay)
        answer = self.answers.get(system)
        if answer is None:
            return LLMResponse(content=None, finish_reason="error")
        return LLMResponse(content=answer, usage={"total_tokens": len(answer)})

    def get_default_model(self) -> str:
        return "fake/model"


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def make_runtime():
    def _make(provider=None, **overrides):
        settings = ListkeeperSettings(_env_file=None, **overrides)
        return build_runtime(settings, provider=provider or FakeProvider())
    return _make
