"""Event types for the message bus."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Pseudo-senders used by messaging platforms for status/broadcast traffic.
BROADCAST_CHAT_IDS = frozenset({"status@broadcast", "broadcast"})


@dataclass
class InboundMessage:
    """Message received from a chat channel."""

    channel: str  # telegram, whatsapp, cli, …
    sender_id: str  # Platform-level user identifier
    chat_id: str  # Chat/group identifier
    content: str  # Message text
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)  # Channel-specific data
    sender_name: str = ""  # display name for group-chat attribution
    chat_type: str = "private"  # "private" | "group"
    broadcast: bool = False  # status/broadcast traffic, never answered

    @property
    def session_key(self) -> str:
        """Key of the conversation's list state."""
        return f"{self.channel}:{self.chat_id}"

    @property
    def is_group(self) -> bool:
        return self.chat_type == "group"

    @property
    def is_broadcast(self) -> bool:
        return self.broadcast or self.chat_id in BROADCAST_CHAT_IDS


@dataclass
class OutboundMessage:
    """Message to send to a chat channel."""

    channel: str
    chat_id: str
    content: str
    reply_to: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
