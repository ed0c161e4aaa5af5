"""Telegram channel implementation using python-telegram-bot."""

from __future__ import annotations

import asyncio
import re

from loguru import logger
from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters
from telegram.request import HTTPXRequest

from listkeeper.bus.events import OutboundMessage
from listkeeper.bus.queue import MessageBus
from listkeeper.channels.base import BaseChannel

_TELEGRAM_LIMIT = 4096


def _to_telegram_html(text: str) -> str:
    """Convert the chat-style markup of our replies (*bold*) to Telegram HTML."""
    if not text:
        return ""
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return re.sub(r"\*([^*\n]+)\*", r"<b>\1</b>", text)


def _split_into_chunks(text: str, limit: int = _TELEGRAM_LIMIT) -> list[str]:
    """Split on line boundaries so every chunk fits one Telegram message."""
    stripped = text.strip()
    if not stripped:
        return []
    chunks: list[str] = []
    current = ""
    for line in stripped.split("\n"):
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit and current:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def _privacy_warning(bot_info) -> str:
    """Explain why group messages will never arrive, if privacy mode is on."""
    if getattr(bot_info, "can_read_all_group_messages", True):
        return ""
    return (
        f"Telegram bot @{bot_info.username} has privacy mode enabled: group messages "
        "such as !ativar will not reach it. Disable it with BotFather /setprivacy."
    )


class TelegramChannel(BaseChannel):
    """
    Telegram channel using long polling.

    Simple and reliable - no webhook/public IP needed. Commands are plain
    ``!`` messages handled by the router, so every text update is forwarded.

    Group messages only arrive with the bot's privacy mode disabled
    (BotFather ``/setprivacy``) or with the bot as group admin.
    """

    name = "telegram"

    def __init__(self, token: str, bus: MessageBus, proxy: str | None = None):
        super().__init__(bus)
        self.token = token
        self.proxy = proxy
        self._app: Application | None = None

    async def start(self) -> None:
        """Start the Telegram bot with long polling."""
        if not self.token:
            logger.error("Telegram bot token not configured")
            return

        self._running = True

        # the proxy goes on the request object; the builder refuses both
        req = HTTPXRequest(
            connection_pool_size=16, pool_timeout=5.0, connect_timeout=30.0, read_timeout=30.0, proxy=self.proxy,
        )
        self._app = Application.builder().token(self.token).request(req).get_updates_request(req).build()
        self._app.add_error_handler(self._on_error)
        self._app.add_handler(MessageHandler(filters.TEXT, self._on_message))

        logger.info("Starting Telegram bot (polling mode)...")
        await self._app.initialize()
        await self._app.start()

        bot_info = await self._app.bot.get_me()
        logger.info(f"Telegram bot @{bot_info.username} connected")
        warning = _privacy_warning(bot_info)
        if warning:
            logger.warning(warning)

        await self._app.updater.start_polling(
            allowed_updates=["message"],
            drop_pending_updates=True,  # Ignore old messages on startup
        )

        while self._running:
            await asyncio.sleep(1)

    async def stop(self) -> None:
        """Stop the Telegram bot."""
        self._running = False
        if self._app:
            logger.info("Stopping Telegram bot...")
            await self._app.updater.stop()
            await self._app.stop()
            await self._app.shutdown()
            self._app = None

    async def send(self, msg: OutboundMessage) -> None:
        """Send a reply, threaded under the originating message when known."""
        if not self._app:
            logger.warning("Telegram bot not running")
            return

        try:
            chat_id = int(msg.chat_id)
        except ValueError:
            logger.error(f"Invalid chat_id: {msg.chat_id}")
            return

        reply_to = int(msg.reply_to) if msg.reply_to and msg.reply_to.isdigit() else None
        for i, chunk in enumerate(_split_into_chunks(msg.content)):
            await self._send_single(chat_id, chunk, reply_to if i == 0 else None)

    async def _send_single(self, chat_id: int, text: str, reply_to: int | None) -> None:
        """Send one text chunk to Telegram, with plain-text fallback."""
        try:
            await self._app.bot.send_message(
                chat_id=chat_id,
                text=_to_telegram_html(text),
                parse_mode="HTML",
                reply_to_message_id=reply_to,
            )
        except Exception as e:
            logger.warning(f"HTML parse failed, falling back to plain text: {e}")
            try:
                await self._app.bot.send_message(chat_id=chat_id, text=text)
            except Exception as e2:
                logger.error(f"Error sending Telegram message: {e2}")

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Forward text messages to the bus."""
        message = update.message
        if not message or not update.effective_user or not message.text:
            return

        user = update.effective_user
        chat_type = "private" if message.chat.type == "private" else "group"
        await self._handle_message(
            sender_id=str(user.id),
            chat_id=str(message.chat_id),
            content=message.text,
            metadata={
                "message_id": message.message_id,
                "username": user.username,
            },
            sender_name=(user.full_name or user.first_name or user.username or ""),
            chat_type=chat_type,
            broadcast=message.chat.type == "channel",
        )

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log polling / handler errors instead of silently swallowing them."""
        logger.error(f"Telegram error: {context.error}")
