import asyncio

import pytest

from listkeeper.errors import GroupNotReady
from listkeeper.lists.models import (
    DomainType,
    EntertainmentCategory,
    EntertainmentItem,
    ExpenseCategory,
    ExpenseItem,
    GroupContext,
)
from listkeeper.lists.store import ListStore
from listkeeper.nl import prompts
from listkeeper.nl.classifier import Classifier
from listkeeper.nl.extraction import ExtractionPipeline
from listkeeper.nl.intent_engine import IntentEngine


def _store(provider, **kwargs) -> ListStore:
    return ListStore(IntentEngine(ExtractionPipeline(Classifier(provider))), **kwargs)


def test_get_or_create_detects_once(fake_provider) -> None:
    provider = fake_provider({prompts.DETECTION_SYSTEM: "entretenimento"})
    store = _store(provider)

    async def scenario():
        first = await store.get_or_create("tg:G1", "Interestelar")
        second = await store.get_or_create("tg:G1", "uber 15")
        return first, second

    first, second = asyncio.run(scenario())

    assert first is second
    assert second.domain_type is DomainType.ENTERTAINMENT
    assert provider.calls == [prompts.DETECTION_SYSTEM]


def test_get_or_create_falls_back_to_heuristic(fake_provider) -> None:
    store = _store(fake_provider({}))

    ctx = asyncio.run(store.get_or_create("tg:G2", "pizza 40"))

    assert ctx.domain_type is DomainType.EXPENSE


def test_clear_keeps_type_and_reports_count(fake_provider) -> None:
    store = _store(fake_provider({}))
    ctx = asyncio.run(store.get_or_create("tg:G3", "leite, pão"))
    ctx.add_shopping(["leite", "pão"])

    assert store.clear("tg:G3") == 2
    assert ctx.items == []
    assert ctx.domain_type is DomainType.SHOPPING
    assert store.clear("tg:unknown") == 0


def test_set_type_drops_items_only_on_change(fake_provider) -> None:
    store = _store(fake_provider({}))
    ctx = asyncio.run(store.get_or_create("tg:G4", "leite"))
    ctx.add_shopping(["leite"])

    store.set_type("tg:G4", DomainType.SHOPPING)
    assert ctx.items == ["leite"]

    store.set_type("tg:G4", DomainType.EXPENSE)
    assert ctx.items == []
    assert ctx.domain_type is DomainType.EXPENSE


def test_authorization_set(fake_provider) -> None:
    store = _store(fake_provider({}), authorized=["tg:pre"])

    assert store.is_authorized("tg:pre")
    assert store.authorize("tg:new") is True
    assert store.authorize("tg:new") is False
    assert store.authorized_count == 2
    assert store.revoke("tg:new") is True
    assert not store.is_authorized("tg:new")

    store.close()
    assert store.authorized_count == 0
    assert store.group_count == 0


def test_lock_waiters_outlast_the_warning_and_keep_order(fake_provider) -> None:
    store = _store(fake_provider({}), warn_after=0.01)
    order: list[str] = []

    async def hold(name: str, seconds: float) -> None:
        async with store.lock("tg:G5"):
            order.append(f"{name}+")
            await asyncio.sleep(seconds)
            order.append(f"{name}-")

    async def scenario():
        await asyncio.gather(hold("a", 0.05), hold("b", 0.01), hold("c", 0.0))

    asyncio.run(scenario())

    assert order == ["a+", "a-", "b+", "b-", "c+", "c-"]


def test_cancelled_waiter_does_not_keep_the_lock(fake_provider) -> None:
    store = _store(fake_provider({}), warn_after=0.01)

    async def scenario():
        async def waiter():
            async with store.lock("tg:G5b"):
                pass

        async with store.lock("tg:G5b"):
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0.03)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        async with store.lock("tg:G5b"):
            return True

    assert asyncio.run(asyncio.wait_for(scenario(), timeout=1.0))


def test_get_or_create_without_content_leaves_domain_open(fake_provider) -> None:
    provider = fake_provider({prompts.DETECTION_SYSTEM: "gastos"})
    store = _store(provider)

    async def scenario():
        first = await store.get_or_create("tg:G10")
        undetermined = first.domain_type
        second = await store.get_or_create("tg:G10", "uber 15")
        return undetermined, second.domain_type

    assert asyncio.run(scenario()) == (DomainType.UNDETERMINED, DomainType.EXPENSE)
    assert provider.calls == [prompts.DETECTION_SYSTEM]


def test_summarize_renders_the_group_digest(fake_provider) -> None:
    store = _store(fake_provider({}))
    ctx = asyncio.run(store.get_or_create("tg:G11", "pizza 40"))
    ctx.add_expense(ExpenseItem(description="pizza", value=40.0, category=ExpenseCategory.FOOD))

    text = store.summarize("tg:G11", currency="R$", insight="Só comida por enquanto.")

    assert text.startswith("💰 *RESUMO DE GASTOS* - Total: R$ 40.00")
    assert "💡 Só comida por enquanto." in text
    assert store.summarize("tg:unknown") == "📊 0 itens no grupo"
    assert store.get("tg:unknown") is None


def test_undetermined_context_refuses_mutation() -> None:
    ctx = GroupContext(group_id="tg:G6")

    with pytest.raises(GroupNotReady):
        ctx.add_shopping(["leite"])
    with pytest.raises(GroupNotReady):
        ctx.add_title(EntertainmentItem(name="Dark", category=EntertainmentCategory.SERIES))
    assert ctx.items == []


def test_title_dedup_is_case_insensitive() -> None:
    ctx = GroupContext(group_id="tg:G7", domain_type=DomainType.ENTERTAINMENT)

    stored, created = ctx.add_title(EntertainmentItem(name="Dark", category=EntertainmentCategory.SERIES))
    again, created_again = ctx.add_title(EntertainmentItem(name="dARK", category=EntertainmentCategory.FILM))

    assert created and not created_again
    assert again is stored
    assert again.category is EntertainmentCategory.SERIES
    assert len(ctx.items) == 1


def test_shopping_dedup_within_and_across_batches() -> None:
    ctx = GroupContext(group_id="tg:G8", domain_type=DomainType.SHOPPING)

    assert ctx.add_shopping(["leite", "leite", "pão"]) == 2
    assert ctx.add_shopping(["LEITE", "ovos"]) == 1
    assert ctx.items == ["leite", "pão", "ovos"]


@pytest.mark.parametrize("value", [-1.0, float("nan"), float("inf")])
def test_expense_item_rejects_bad_values(value) -> None:
    with pytest.raises(ValueError):
        ExpenseItem(description="uber", value=value, category=ExpenseCategory.TRANSPORT)


def test_mark_watched_sets_date_once() -> None:
    ctx = GroupContext(group_id="tg:G9", domain_type=DomainType.ENTERTAINMENT)
    ctx.add_title(EntertainmentItem(name="Dark", category=EntertainmentCategory.SERIES))

    item = ctx.mark_watched("dark")
    first_date = item.watched_at

    assert item.watched
    assert ctx.mark_watched("Dark").watched_at == first_date
    assert ctx.mark_watched("Lost") is None
