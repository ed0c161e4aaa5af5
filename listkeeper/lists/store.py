"""Process-scoped group state store.

Maps a conversation key (``channel:chat_id``) to its ``GroupContext`` and
keeps the set of group chats where the assistant was activated.

State lives in memory only: every list and every activation is lost when the
process stops. This is a known limitation, not an oversight; swapping in a
persistent backend means replacing this class, the router does not care.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from loguru import logger

from listkeeper.lists import formatter
from listkeeper.lists.models import DomainType, GroupContext
from listkeeper.nl.intent_engine import IntentEngine


class ListStore:
    def __init__(
        self,
        engine: IntentEngine,
        authorized: Iterable[str] = (),
        warn_after: float | None = 30.0,
    ) -> None:
        self._engine = engine
        self._warn_after = warn_after
        self._groups: dict[str, GroupContext] = {}
        self._authorized: set[str] = set(authorized)
        self._locks: dict[str, asyncio.Lock] = {}

    # ── per-group serialization ─────────────────────────────────────

    @asynccontextmanager
    async def lock(self, group_id: str) -> AsyncIterator[None]:
        """Hold the single-writer lock of *group_id*.

        The wait itself is unbounded: a holder only blocks on classifier
        calls, and each of those has its own timeout, so the lock always
        comes free. Waiters queue in arrival order. A wait longer than
        ``warn_after`` seconds is logged.
        """
        local = self._locks.setdefault(group_id, asyncio.Lock())
        if self._warn_after is None or not local.locked():
            await local.acquire()
        else:
            acquire = asyncio.ensure_future(local.acquire())
            try:
                done, _ = await asyncio.wait({acquire}, timeout=self._warn_after)
                if not done:
                    logger.warning(
                        f"Group {group_id}: message waiting for the group lock "
                        f"for more than {self._warn_after}s"
                    )
                    await acquire
            except asyncio.CancelledError:
                if acquire.done() and not acquire.cancelled():
                    local.release()
                else:
                    acquire.cancel()
                raise
        try:
            yield
        finally:
            local.release()

    # ── contexts ────────────────────────────────────────────────────

    def get(self, group_id: str) -> GroupContext | None:
        return self._groups.get(group_id)

    async def get_or_create(self, group_id: str, first_message: str | None = None) -> GroupContext:
        """Return the group's context, detecting its domain on first contact.

        Detection runs at most once per group: once the context holds a
        concrete domain it is returned as is. Without *first_message* (e.g.
        for a command) the context stays undetermined until real content
        arrives. Callers mutating the context are expected to hold
        ``lock(group_id)``.
        """
        ctx = self._groups.get(group_id)
        if ctx is None:
            ctx = GroupContext(group_id=group_id)
            self._groups[group_id] = ctx
            logger.info(f"New group context: {group_id}")
        if not ctx.is_ready and first_message:
            detection = await self._engine.detect(first_message)
            ctx.domain_type = detection.domain_type
        return ctx

    def clear(self, group_id: str) -> int:
        """Empty the group's items, keep its domain. Returns the removed count."""
        ctx = self._groups.get(group_id)
        if ctx is None:
            return 0
        count = len(ctx.items)
        ctx.items = []
        logger.info(f"Group {group_id} cleared ({count} items removed)")
        return count

    def set_type(self, group_id: str, domain_type: DomainType) -> GroupContext:
        """Force the group's domain. Items are dropped when the domain changes."""
        ctx = self._groups.setdefault(group_id, GroupContext(group_id=group_id))
        if ctx.domain_type is not domain_type:
            if ctx.items:
                logger.info(
                    f"Group {group_id}: {ctx.domain_type.value} -> {domain_type.value}, "
                    f"dropping {len(ctx.items)} items"
                )
            ctx.items = []
            ctx.domain_type = domain_type
        return ctx

    def summarize(self, group_id: str, currency: str = "", insight: str = "") -> str:
        ctx = self._groups.get(group_id) or GroupContext(group_id=group_id)
        return formatter.summarize(ctx, currency, insight)

    @property
    def group_count(self) -> int:
        return len(self._groups)

    # ── authorization ───────────────────────────────────────────────

    def authorize(self, group_id: str) -> bool:
        """Activate the assistant in *group_id*. Returns False if already active."""
        if group_id in self._authorized:
            return False
        self._authorized.add(group_id)
        logger.info(f"Group authorized: {group_id}")
        return True

    def revoke(self, group_id: str) -> bool:
        if group_id not in self._authorized:
            return False
        self._authorized.discard(group_id)
        logger.info(f"Group deauthorized: {group_id}")
        return True

    def is_authorized(self, group_id: str) -> bool:
        return group_id in self._authorized

    @property
    def authorized_count(self) -> int:
        return len(self._authorized)

    # ── teardown ────────────────────────────────────────────────────

    def close(self) -> None:
        logger.info(
            f"Store closing: {len(self._groups)} groups, "
            f"{len(self._authorized)} authorizations discarded"
        )
        self._groups.clear()
        self._authorized.clear()
        self._locks.clear()
