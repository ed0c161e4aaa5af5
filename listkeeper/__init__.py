"""listkeeper - group chat assistant for shared lists."""

__version__ = "0.1.0"
__logo__ = "📝"
