"""Agent loop: consumes inbound messages and publishes replies."""

import asyncio
from typing import Any

from loguru import logger

from listkeeper.agent.router import IntentRouter
from listkeeper.bus.events import InboundMessage, OutboundMessage
from listkeeper.bus.queue import MessageBus

GENERIC_ERROR = "❌ Erro ao processar mensagem. Tente novamente."


class AgentLoop:
    """
    The agent loop is the processing engine.

    It:
    1. Receives messages from the bus
    2. Hands each one to the intent router
    3. Sends replies back (messages the router answers with ``None`` get none)

    Each message is isolated: an unexpected exception is logged, answered
    with a generic apology, and the workers keep going.
    """

    def __init__(
        self,
        bus: MessageBus,
        router: IntentRouter,
        max_concurrent_workers: int = 4,
    ):
        self.bus = bus
        self.router = router
        self.max_concurrent_workers = max(1, int(max_concurrent_workers))
        self._running = False
        self._worker_tasks: list[asyncio.Task[None]] = []

    async def _reply_for(self, msg: InboundMessage) -> str | None:
        try:
            return await self.router.handle(msg)
        except Exception as e:
            logger.exception(f"Error processing message from {msg.session_key}: {e}")
            return GENERIC_ERROR

    async def _process_inbound_message(self, msg: InboundMessage) -> None:
        content = await self._reply_for(msg)
        if not content:
            return
        await self.bus.publish_outbound(OutboundMessage(
            channel=msg.channel,
            chat_id=msg.chat_id,
            content=content,
            reply_to=str(msg.metadata.get("message_id", "")) or None,
            metadata=msg.metadata or {},
        ))

    async def _worker_loop(self, worker_id: int) -> None:
        """Worker loop consuming inbound queue concurrently."""
        while self._running:
            try:
                msg = await asyncio.wait_for(self.bus.consume_inbound(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Worker {worker_id} failed to consume inbound: {e}")
                continue
            await self._process_inbound_message(msg)

    async def run(self) -> None:
        """Run the agent loop with concurrent workers."""
        self._running = True
        logger.info(f"Agent loop started with {self.max_concurrent_workers} workers")
        self._worker_tasks = [
            asyncio.create_task(self._worker_loop(i + 1))
            for i in range(self.max_concurrent_workers)
        ]
        try:
            await asyncio.gather(*self._worker_tasks)
        finally:
            for task in self._worker_tasks:
                task.cancel()
            await asyncio.gather(*self._worker_tasks, return_exceptions=True)
            self._worker_tasks.clear()

    def stop(self) -> None:
        """Stop the agent loop and cancel worker tasks."""
        self._running = False
        for task in self._worker_tasks:
            task.cancel()
        logger.info("Agent loop stopping")

    async def process_direct(
        self,
        content: str,
        channel: str = "cli",
        chat_id: str = "direct",
        *,
        sender_id: str = "user",
        sender_name: str = "",
        chat_type: str = "private",
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """
        Process a message directly (for CLI usage).

        Returns:
            The reply, or an empty string when the message gets no reply.
        """
        msg = InboundMessage(
            channel=channel,
            sender_id=sender_id,
            chat_id=chat_id,
            content=content,
            sender_name=sender_name,
            chat_type=chat_type,
            metadata=metadata or {},
        )
        return await self._reply_for(msg) or ""
