"""Channel manager: starts channels and delivers outbound messages."""

from __future__ import annotations

import asyncio

from loguru import logger

from listkeeper.bus.queue import MessageBus
from listkeeper.channels.base import BaseChannel


class ChannelManager:
    def __init__(self, bus: MessageBus, channels: list[BaseChannel] | None = None) -> None:
        self.bus = bus
        self.channels: dict[str, BaseChannel] = {c.name: c for c in channels or []}
        self._dispatch_task: asyncio.Task[None] | None = None

    @property
    def enabled_channels(self) -> list[str]:
        return list(self.channels)

    async def start_all(self) -> None:
        """Start every channel plus the outbound dispatcher; returns when all stop."""
        if not self.channels:
            logger.warning("No channels enabled")
            return
        self._dispatch_task = asyncio.create_task(self._dispatch_outbound())
        await asyncio.gather(*(self._start_channel(c) for c in self.channels.values()))

    async def _start_channel(self, channel: BaseChannel) -> None:
        try:
            await channel.start()
        except Exception as e:
            logger.exception(f"Channel {channel.name} failed: {e}")

    async def stop_all(self) -> None:
        if self._dispatch_task:
            self._dispatch_task.cancel()
            self._dispatch_task = None
        for channel in self.channels.values():
            try:
                await channel.stop()
            except Exception as e:
                logger.warning(f"Error stopping {channel.name}: {e}")

    async def _dispatch_outbound(self) -> None:
        while True:
            msg = await self.bus.consume_outbound()
            channel = self.channels.get(msg.channel)
            if channel is None:
                logger.warning(f"Outbound for unknown channel {msg.channel!r} dropped")
                continue
            try:
                await channel.send(msg)
            except Exception as e:
                logger.error(f"Error sending to {msg.channel}:{msg.chat_id}: {e}")
