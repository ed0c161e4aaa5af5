"""Async message queue for decoupled channel-agent communication."""

import asyncio

from listkeeper.bus.events import InboundMessage, OutboundMessage


class MessageBus:
    """
    Two asyncio queues: channels publish inbound messages and the agent
    loop publishes replies, which the channel manager delivers.
    """

    def __init__(self) -> None:
        self.inbound: asyncio.Queue[InboundMessage] = asyncio.Queue()
        self.outbound: asyncio.Queue[OutboundMessage] = asyncio.Queue()

    async def publish_inbound(self, msg: InboundMessage) -> None:
        await self.inbound.put(msg)

    async def consume_inbound(self) -> InboundMessage:
        return await self.inbound.get()

    async def publish_outbound(self, msg: OutboundMessage) -> None:
        await self.outbound.put(msg)

    async def consume_outbound(self) -> OutboundMessage:
        return await self.outbound.get()
