"""Message bus module for decoupled channel-agent communication."""

from listkeeper.bus.events import InboundMessage, OutboundMessage
from listkeeper.bus.queue import MessageBus

__all__ = ["MessageBus", "InboundMessage", "OutboundMessage"]
