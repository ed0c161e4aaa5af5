"""Base channel interface for chat platforms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from listkeeper.bus.events import InboundMessage, OutboundMessage
from listkeeper.bus.queue import MessageBus


class BaseChannel(ABC):
    """
    Abstract base class for chat channel implementations.

    A channel turns platform updates into ``InboundMessage`` events on the
    bus and delivers ``OutboundMessage`` replies back to the platform.
    """

    name: str = "base"

    def __init__(self, bus: MessageBus) -> None:
        self.bus = bus
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """Connect and listen; runs until ``stop()``."""

    @abstractmethod
    async def stop(self) -> None:
        """Disconnect and release resources."""

    @abstractmethod
    async def send(self, msg: OutboundMessage) -> None:
        """Deliver one reply."""

    @property
    def is_running(self) -> bool:
        return self._running

    async def _handle_message(
        self,
        sender_id: str,
        chat_id: str,
        content: str,
        metadata: dict[str, Any] | None = None,
        sender_name: str = "",
        chat_type: str = "private",
        broadcast: bool = False,
    ) -> None:
        """Publish a platform message to the bus."""
        msg = InboundMessage(
            channel=self.name,
            sender_id=str(sender_id),
            chat_id=str(chat_id),
            content=content,
            metadata=metadata or {},
            sender_name=sender_name,
            chat_type=chat_type,
            broadcast=broadcast,
        )
        logger.debug(f"{self.name} inbound {msg.session_key}: {content[:50]!r}")
        await self.bus.publish_inbound(msg)
