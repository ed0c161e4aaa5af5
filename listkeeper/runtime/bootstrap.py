"""Assemble provider, classifier, store, router and loop from settings."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from listkeeper.agent.loop import AgentLoop
from listkeeper.agent.router import IntentRouter
from listkeeper.bus.queue import MessageBus
from listkeeper.lists.operations import ListOperations
from listkeeper.lists.store import ListStore
from listkeeper.nl.classifier import Classifier
from listkeeper.nl.extraction import ExtractionPipeline
from listkeeper.nl.intent_engine import IntentEngine
from listkeeper.providers.base import LLMProvider
from listkeeper.providers.litellm_provider import LiteLLMProvider
from listkeeper.settings import ListkeeperSettings


@dataclass
class Runtime:
    settings: ListkeeperSettings
    bus: MessageBus
    store: ListStore
    router: IntentRouter
    agent: AgentLoop

    def close(self) -> None:
        self.agent.stop()
        self.store.close()


def make_provider(settings: ListkeeperSettings) -> LiteLLMProvider:
    return LiteLLMProvider(
        api_key=settings.api_key or None,
        api_base=settings.api_base,
        default_model=settings.model,
    )


def build_runtime(
    settings: ListkeeperSettings,
    provider: LLMProvider | None = None,
    bus: MessageBus | None = None,
) -> Runtime:
    provider = provider or make_provider(settings)
    if not provider.api_key:
        logger.warning("No classifier API key configured, running on heuristics only")

    classifier = Classifier(
        provider,
        model=settings.model,
        timeout=settings.classifier_timeout,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )
    pipeline = ExtractionPipeline(classifier)
    store = ListStore(
        IntentEngine(pipeline),
        authorized=settings.authorized_groups,
        warn_after=settings.lock_warn_after,
    )
    operations = ListOperations(
        pipeline,
        currency=settings.currency,
        expense_insights=settings.expense_insights,
        digest_every=settings.digest_every,
    )
    router = IntentRouter(store, operations, require_activation=settings.require_activation)
    bus = bus or MessageBus()
    agent = AgentLoop(bus, router, max_concurrent_workers=settings.max_concurrent_workers)
    return Runtime(settings=settings, bus=bus, store=store, router=router, agent=agent)
