from listkeeper.lists import formatter
from listkeeper.lists.models import (
    DomainType,
    EntertainmentCategory,
    EntertainmentItem,
    ExpenseCategory,
    ExpenseItem,
    GroupContext,
)


def _expenses(*rows: tuple[str, float, ExpenseCategory]) -> GroupContext:
    ctx = GroupContext(group_id="tg:E", domain_type=DomainType.EXPENSE)
    for description, value, category in rows:
        ctx.add_expense(ExpenseItem(description=description, value=value, category=category))
    return ctx


def test_expense_summary_ranks_categories_with_percentages() -> None:
    ctx = _expenses(
        ("uber", 15.0, ExpenseCategory.TRANSPORT),
        ("pizza", 40.0, ExpenseCategory.FOOD),
        ("onibus", 5.0, ExpenseCategory.TRANSPORT),
        ("cinema", 20.0, ExpenseCategory.LEISURE),
    )

    text = formatter.expense_summary(ctx)
    lines = text.splitlines()

    assert lines[0] == "💰 *RESUMO DE GASTOS* - Total: 80.00"
    assert lines[1] == "📊 4 gastos registrados"
    category_lines = [line for line in lines if line.startswith("📁")]
    assert category_lines == [
        "📁 *COMIDA* - 40.00 (50.0%)",
        "📁 *TRANSPORTE* - 20.00 (25.0%)",
        "📁 *LAZER* - 20.00 (25.0%)",
    ]


def test_expense_summary_with_insight_and_currency() -> None:
    ctx = _expenses(("uber", 15.0, ExpenseCategory.TRANSPORT))

    text = formatter.expense_summary(ctx, currency="R$", insight="Transporte domina.")

    assert "Total: R$ 15.00" in text
    assert "💡 Transporte domina." in text


def test_empty_summaries() -> None:
    assert formatter.expense_summary(GroupContext("tg:a", DomainType.EXPENSE)) == formatter.EMPTY_EXPENSES
    assert formatter.shopping_list(GroupContext("tg:b", DomainType.SHOPPING)) == "🛒 Lista de compras vazia!"
    assert formatter.entertainment_summary(GroupContext("tg:c", DomainType.ENTERTAINMENT)) == formatter.EMPTY_ENTERTAINMENT


def test_entertainment_summary_splits_watched() -> None:
    ctx = GroupContext(group_id="tg:M", domain_type=DomainType.ENTERTAINMENT)
    ctx.add_title(EntertainmentItem(name="Dark", category=EntertainmentCategory.SERIES))
    ctx.add_title(EntertainmentItem(name="Interestelar", category=EntertainmentCategory.FILM))
    ctx.mark_watched("Dark")

    text = formatter.entertainment_summary(ctx)

    assert "⏳ Para assistir (1):\n1. Interestelar (filme)" in text
    assert "✅ Já vistos (1):\n1. Dark" in text


def test_entertainment_summary_always_counts_both_sections() -> None:
    ctx = GroupContext(group_id="tg:M2", domain_type=DomainType.ENTERTAINMENT)
    ctx.add_title(EntertainmentItem(name="Dark", category=EntertainmentCategory.SERIES))

    lines = formatter.entertainment_summary(ctx).splitlines()

    assert "⏳ Para assistir (1):" in lines
    assert lines[-1] == "✅ Já vistos (0):"


def test_shopping_list_is_numbered_in_insertion_order() -> None:
    ctx = GroupContext(group_id="tg:S", domain_type=DomainType.SHOPPING)
    ctx.add_shopping(["leite", "pão"])

    assert formatter.shopping_list(ctx).splitlines()[-2:] == ["1. leite", "2. pão"]


def test_status_and_type_lines() -> None:
    ctx = _expenses(("uber", 15.0, ExpenseCategory.TRANSPORT), ("pizza", 40.5, ExpenseCategory.FOOD))

    assert formatter.status_line(ctx) == "💰 Status: 2 gastos - Total: 55.50"
    assert formatter.type_line(ctx) == "📊 Este grupo está configurado como: *gastos*"


def test_help_mentions_domain_commands() -> None:
    assert "!visto" in formatter.help_message(DomainType.ENTERTAINMENT)
    assert "!visto" not in formatter.help_message(DomainType.UNDETERMINED)
