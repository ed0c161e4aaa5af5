"""Human-readable digests of group list state.

Everything here is a pure function of a ``GroupContext`` (plus display
options); nothing mutates state or calls out.
"""

from __future__ import annotations

from collections import Counter

from listkeeper.lists.models import DomainType, ExpenseCategory, ExpenseItem, GroupContext

EMPTY_SHOPPING = "🛒 Lista de compras vazia!"
EMPTY_ENTERTAINMENT = "🎬 Lista de entretenimento vazia!"
EMPTY_EXPENSES = "💰 Nenhum gasto registrado ainda!"


def format_money(value: float, currency: str = "") -> str:
    return f"{currency} {value:.2f}" if currency else f"{value:.2f}"


# ── expenses ────────────────────────────────────────────────────────


def expense_totals(ctx: GroupContext) -> tuple[float, list[tuple[ExpenseCategory, float]]]:
    """Grand total and per-category subtotals, largest subtotal first."""
    by_category: dict[ExpenseCategory, float] = {}
    for item in ctx.items:
        by_category[item.category] = by_category.get(item.category, 0.0) + item.value
    total = sum(by_category.values())
    ranked = sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)
    return total, ranked


def expense_ack(item: ExpenseItem, currency: str = "") -> str:
    return (
        f"✅ Gasto registrado: {item.description} - "
        f"{format_money(item.value, currency)} ({item.category.label})"
    )


def expense_summary(ctx: GroupContext, currency: str = "", insight: str = "") -> str:
    if not ctx.items:
        return EMPTY_EXPENSES

    total, ranked = expense_totals(ctx)
    lines = [
        f"💰 *RESUMO DE GASTOS* - Total: {format_money(total, currency)}",
        f"📊 {len(ctx.items)} gastos registrados",
        "",
    ]
    for category, subtotal in ranked:
        percentage = (subtotal / total * 100) if total else 0.0
        lines.append(
            f"📁 *{category.label.upper()}* - {format_money(subtotal, currency)} ({percentage:.1f}%)"
        )
    if insight:
        lines.append(f"\n💡 {insight}")
    lines.append("\n💡 Adicione gastos descrevendo o que foi e o valor")
    return "\n".join(lines)


# ── entertainment ───────────────────────────────────────────────────


def entertainment_summary(ctx: GroupContext) -> str:
    if not ctx.items:
        return EMPTY_ENTERTAINMENT

    pending = [item for item in ctx.items if not item.watched]
    watched = [item for item in ctx.items if item.watched]

    lines = [f"🎬 *LISTA DE ENTRETENIMENTO* ({len(ctx.items)} itens)", ""]
    lines.append(f"⏳ Para assistir ({len(pending)}):")
    for i, item in enumerate(pending, 1):
        lines.append(f"{i}. {item.name} ({item.category.label})")
    lines.append("")
    lines.append(f"✅ Já vistos ({len(watched)}):")
    for i, item in enumerate(watched, 1):
        lines.append(f"{i}. {item.name}")
    return "\n".join(lines)


# ── shopping ────────────────────────────────────────────────────────


def shopping_list(ctx: GroupContext) -> str:
    if not ctx.items:
        return EMPTY_SHOPPING
    lines = [f"🛒 *LISTA DE COMPRAS* ({len(ctx.items)} itens)", ""]
    lines.extend(f"{i}. {item}" for i, item in enumerate(ctx.items, 1))
    return "\n".join(lines)


# ── dispatch ────────────────────────────────────────────────────────


def summarize(ctx: GroupContext, currency: str = "", insight: str = "") -> str:
    if ctx.domain_type is DomainType.EXPENSE:
        return expense_summary(ctx, currency, insight)
    if ctx.domain_type is DomainType.ENTERTAINMENT:
        return entertainment_summary(ctx)
    if ctx.domain_type is DomainType.SHOPPING:
        return shopping_list(ctx)
    return f"📊 {len(ctx.items)} itens no grupo"


def status_line(ctx: GroupContext, currency: str = "") -> str:
    count = len(ctx.items)
    if ctx.domain_type is DomainType.ENTERTAINMENT:
        categories = Counter(item.category.label for item in ctx.items)
        distribution = ", ".join(f"{cat}: {qty}" for cat, qty in categories.items())
        return f"🎬 Status: {count} itens ({distribution})"
    if ctx.domain_type is DomainType.EXPENSE:
        total = sum(item.value for item in ctx.items)
        return f"💰 Status: {count} gastos - Total: {format_money(total, currency)}"
    if ctx.domain_type is DomainType.SHOPPING:
        return f"🛒 Status: {count} itens na lista de compras"
    return f"📊 Status: {count} itens no grupo"


def type_line(ctx: GroupContext) -> str:
    return f"📊 Este grupo está configurado como: *{ctx.domain_type.label}*"


_BASE_HELP = """🤖 *BOT DE LISTAS* - Usa IA para categorização inteligente

Comandos:
!ajuda - Mostra esta mensagem
!lista - Mostra a lista completa
!limpar - Limpa os dados do grupo
!status - Mostra status atual
!tipo - Mostra o tipo do grupo (!tipo gastos muda o tipo)
!desativar - Desativa o bot neste grupo

💡 Funciona automaticamente - apenas envie suas mensagens!"""

_DOMAIN_HELP = {
    DomainType.ENTERTAINMENT: (
        "🎬 *Entretenimento*: Envie nomes de filmes, séries, etc.\n"
        "A IA categoriza automaticamente!\n"
        "!visto <título> - Marca como assistido"
    ),
    DomainType.EXPENSE: (
        "💰 *Gastos*: Descreva gastos com valores\n"
        'Ex: "jantar 80", "uber 25", "mercado 150"'
    ),
    DomainType.SHOPPING: (
        "🛒 *Compras*: Liste itens para comprar\n"
        'Ex: "leite, pão, ovos" ou "preciso comprar café e açúcar"'
    ),
}


def help_message(domain_type: DomainType) -> str:
    extra = _DOMAIN_HELP.get(domain_type)
    return f"{_BASE_HELP}\n\n{extra}" if extra else _BASE_HELP
