"""Per-group list state: models, store, operations and formatting."""

from listkeeper.lists.models import DomainType, GroupContext

__all__ = ["DomainType", "GroupContext"]
