"""Per-domain list operations.

Each append runs the classifier extraction first and the heuristic second,
validates the result completely, and only then writes to the context. A
message that neither path can read raises ``InputRejected`` carrying the
usage hint for the user.
"""

from __future__ import annotations

from loguru import logger

from listkeeper.errors import GroupNotReady, InputRejected
from listkeeper.lists import formatter
from listkeeper.lists.models import DomainType, EntertainmentItem, ExpenseItem, GroupContext
from listkeeper.nl import heuristics
from listkeeper.nl.extraction import ExtractionPipeline
from listkeeper.nl.results import Invalid, Ok, first_ok

TITLE_HINT = "🎬 Envie o nome de um filme, série, livro... Ex: 'Interestelar'"
SHOPPING_EMPTY_HINT = "🛒 Não identifiquei itens na sua mensagem. Tente: 'leite, pão, ovos'"
ALL_ITEMS_PRESENT = "ℹ️ Todos os itens já estão na lista!"

_SHOPPING_QUERY_WORDS = ("mostrar", "lista")


class ListOperations:
    def __init__(
        self,
        pipeline: ExtractionPipeline,
        currency: str = "",
        expense_insights: bool = True,
        digest_every: int = 3,
    ) -> None:
        self.pipeline = pipeline
        self.currency = currency
        self.expense_insights = expense_insights
        self.digest_every = max(1, digest_every)

    async def dispatch(self, ctx: GroupContext, text: str, sender_name: str = "") -> str | None:
        if ctx.domain_type is DomainType.ENTERTAINMENT:
            return await self.add_entertainment(ctx, text, sender_name)
        if ctx.domain_type is DomainType.EXPENSE:
            return await self.add_expense(ctx, text, sender_name)
        if ctx.domain_type is DomainType.SHOPPING:
            return await self.add_shopping(ctx, text)
        raise GroupNotReady(f"group {ctx.group_id} has no domain yet")

    # ── entertainment ───────────────────────────────────────────────

    async def add_entertainment(self, ctx: GroupContext, text: str, sender_name: str = "") -> str:
        title = text.strip()
        if len(title) < 2:
            raise InputRejected(TITLE_HINT)

        existing = ctx.find_title(title)
        if existing is None:
            result = first_ok(
                await self.pipeline.categorize_entertainment(title),
                lambda: heuristics.categorize_title(title),
            )
            category = result.value.category
            # re-checked inside add_title, the classifier call may have yielded
            stored, created = ctx.add_title(
                EntertainmentItem(name=title, category=category, added_by=sender_name)
            )
            if created:
                logger.info(f"{ctx.group_id}: added title {title!r} ({category.value})")
                return f'🎬 "{stored.name}" adicionado como {stored.category.label}!'
            existing = stored

        return f'ℹ️ "{existing.name}" já está na lista como {existing.category.label}.'

    def mark_watched(self, ctx: GroupContext, title: str) -> str:
        title = title.strip()
        if not title:
            raise InputRejected("🎬 Formato: '!visto <título>'")
        item = ctx.mark_watched(title)
        if item is None:
            return f'❓ "{title}" não está na lista.'
        return f'✅ "{item.name}" marcado como assistido!'

    # ── expenses ────────────────────────────────────────────────────

    async def add_expense(self, ctx: GroupContext, text: str, sender_name: str = "") -> str:
        result = first_ok(
            await self.pipeline.extract_expense(text),
            lambda: heuristics.parse_expense(text),
        )
        if isinstance(result, Invalid):
            logger.info(f"{ctx.group_id}: expense rejected ({result.reason})")
            raise InputRejected(result.hint or heuristics.EXPENSE_HINT)

        extracted = result.value
        item = ExpenseItem(
            description=extracted.description,
            value=extracted.value,
            category=extracted.category,
            added_by=sender_name,
            original_message=text,
        )
        count = ctx.add_expense(item)
        logger.info(
            f"{ctx.group_id}: expense #{count} {item.description!r} "
            f"{item.value:.2f} ({item.category.value})"
        )

        if count == 1 or count % self.digest_every == 0:
            return await self.expense_digest(ctx)
        return formatter.expense_ack(item, self.currency)

    async def expense_insight(self, ctx: GroupContext) -> str:
        """One advisory sentence for an expense digest, or ``""``."""
        if not self.expense_insights or ctx.domain_type is not DomainType.EXPENSE or not ctx.items:
            return ""
        total, ranked = formatter.expense_totals(ctx)
        return await self.pipeline.analyze_expenses(
            formatter.format_money(total, self.currency),
            ", ".join(
                f"{cat.label}: {formatter.format_money(sub, self.currency)}"
                for cat, sub in ranked
            ),
        )

    async def expense_digest(self, ctx: GroupContext) -> str:
        return formatter.expense_summary(ctx, self.currency, await self.expense_insight(ctx))

    # ── shopping ────────────────────────────────────────────────────

    async def add_shopping(self, ctx: GroupContext, text: str) -> str:
        lowered = text.lower()
        if any(word in lowered for word in _SHOPPING_QUERY_WORDS):
            return formatter.shopping_list(ctx)

        result = await self.pipeline.extract_shopping(text)
        if isinstance(result, Ok) and not result.value:
            raise InputRejected(SHOPPING_EMPTY_HINT)
        result = first_ok(result, lambda: heuristics.parse_shopping(text))
        if isinstance(result, Invalid):
            raise InputRejected(result.hint or heuristics.SHOPPING_HINT)

        added = ctx.add_shopping(result.value)
        if added == 0:
            return ALL_ITEMS_PRESENT
        logger.info(f"{ctx.group_id}: {added} shopping item(s) added")
        return f"🛒 {added} item(s) adicionado(s)! Lista atual: {len(ctx.items)} itens."
