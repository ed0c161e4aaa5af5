"""LLM provider abstraction module."""

from listkeeper.providers.base import LLMProvider, LLMResponse
from listkeeper.providers.litellm_provider import LiteLLMProvider

__all__ = ["LLMProvider", "LLMResponse", "LiteLLMProvider"]
