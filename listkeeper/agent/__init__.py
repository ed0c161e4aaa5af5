"""Agent core module."""

from listkeeper.agent.loop import AgentLoop
from listkeeper.agent.router import IntentRouter

__all__ = ["AgentLoop", "IntentRouter"]
