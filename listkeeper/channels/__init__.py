"""Chat channels module with plugin architecture."""

from listkeeper.channels.base import BaseChannel
from listkeeper.channels.manager import ChannelManager

__all__ = ["BaseChannel", "ChannelManager"]
