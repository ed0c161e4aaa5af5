"""Classifier adapter: one bounded completion call, one failure type."""

from __future__ import annotations

import asyncio

from loguru import logger

from listkeeper.errors import ClassifierUnavailable
from listkeeper.providers.base import LLMProvider

DEFAULT_SYSTEM = "Você é um assistente útil."


class Classifier:
    """Wraps an ``LLMProvider`` behind ``complete(prompt, system) -> text``.

    Missing credentials, transport errors, timeouts and empty answers all
    raise ``ClassifierUnavailable``. There are no retries here; callers
    decide what to do on failure.
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        timeout: float = 10.0,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> None:
        self.provider = provider
        self.model = model or provider.get_default_model()
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, prompt: str, system_instruction: str = DEFAULT_SYSTEM) -> str:
        if not self.provider.api_key:
            raise ClassifierUnavailable("no API key configured for the classifier")

        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": prompt},
        ]
        try:
            # wait_for cancels the call on timeout, so a late answer is dropped
            response = await asyncio.wait_for(
                self.provider.chat(
                    messages,
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ClassifierUnavailable(f"classifier timed out after {self.timeout}s") from exc
        except Exception as exc:
            raise ClassifierUnavailable(f"classifier call failed: {exc}") from exc

        if response.failed:
            raise ClassifierUnavailable(f"classifier returned an error ({self.model})")
        content = (response.content or "").strip()
        if not content:
            raise ClassifierUnavailable("classifier returned an empty completion")

        tokens = response.usage.get("total_tokens", "?")
        logger.debug(f"Classifier answer ({len(content)} chars, {tokens} tokens): {content[:80]!r}")
        return content
