import asyncio

import pytest
from loguru import logger

from listkeeper.errors import ClassifierUnavailable, ExtractionInvalid
from listkeeper.lists.models import DomainType, EntertainmentCategory, ExpenseCategory
from listkeeper.nl import extraction, prompts
from listkeeper.nl.classifier import Classifier
from listkeeper.nl.extraction import ExtractionPipeline
from listkeeper.nl.results import Invalid, Ok


def test_parse_expense_accepts_fenced_json_with_portuguese_keys() -> None:
    raw = '```json\n{"descricao": "Pizza", "valor": "40.5", "categoria": "Comida"}\n```'

    expense = extraction.parse_expense(raw)

    assert expense.description == "Pizza"
    assert expense.value == 40.5
    assert expense.category is ExpenseCategory.FOOD


def test_parse_expense_finds_object_inside_prose() -> None:
    raw = 'Claro! {"description": "uber", "value": 15, "category": "transporte"} Espero ter ajudado.'

    assert extraction.parse_expense(raw).category is ExpenseCategory.TRANSPORT


@pytest.mark.parametrize("raw", [
    "não sei",
    '{"description": "uber", "category": "transporte"}',
    '{"description": "uber", "value": "quinze", "category": "transporte"}',
    '{"description": "uber", "value": -3, "category": "transporte"}',
    '{"description": "uber", "value": true, "category": "transporte"}',
    '{"description": "  ", "value": 3, "category": "transporte"}',
])
def test_parse_expense_rejects_incomplete_or_non_numeric(raw) -> None:
    with pytest.raises(ExtractionInvalid):
        extraction.parse_expense(raw)


def test_unknown_expense_category_maps_to_other() -> None:
    raw = '{"description": "presente", "value": 80, "category": "presentes"}'

    assert extraction.parse_expense(raw).category is ExpenseCategory.OTHER


def test_parse_shopping_trims_and_allows_empty() -> None:
    assert extraction.parse_shopping('{"itens": [" leite ", "", "pão"]}') == ["leite", "pão"]
    assert extraction.parse_shopping('{"items": []}') == []
    with pytest.raises(ExtractionInvalid):
        extraction.parse_shopping('{"items": "leite"}')


@pytest.mark.parametrize("raw, expected", [
    ("entretenimento", DomainType.ENTERTAINMENT),
    ("  Gastos.  ", DomainType.EXPENSE),
    ("compras", DomainType.SHOPPING),
    ("expense", DomainType.EXPENSE),
    ("não faço ideia", DomainType.SHOPPING),
    ("indefinido", DomainType.SHOPPING),
])
def test_parse_domain_defaults_to_shopping(raw, expected) -> None:
    assert extraction.parse_domain(raw) is expected


def test_classifier_fails_closed_without_credentials(fake_provider) -> None:
    provider = fake_provider({prompts.DETECTION_SYSTEM: "gastos"}, api_key=None)
    classifier = Classifier(provider)

    with pytest.raises(ClassifierUnavailable):
        asyncio.run(classifier.complete("oi", prompts.DETECTION_SYSTEM))
    assert provider.calls == []


def test_classifier_timeout_is_unavailable(fake_provider) -> None:
    provider = fake_provider({prompts.DETECTION_SYSTEM: "gastos"}, delay=1.0)
    classifier = Classifier(provider, timeout=0.05)

    with pytest.raises(ClassifierUnavailable):
        asyncio.run(classifier.complete("oi", prompts.DETECTION_SYSTEM))


def test_classifier_error_response_is_unavailable(fake_provider) -> None:
    classifier = Classifier(fake_provider({}))

    with pytest.raises(ClassifierUnavailable):
        asyncio.run(classifier.complete("oi", prompts.DETECTION_SYSTEM))


def test_pipeline_returns_ok_for_valid_answers(fake_provider) -> None:
    provider = fake_provider({
        prompts.ENTERTAINMENT_SYSTEM: "Série",
        prompts.SHOPPING_SYSTEM: '{"items": ["café", "açúcar"]}',
    })
    pipeline = ExtractionPipeline(Classifier(provider))

    title = asyncio.run(pipeline.categorize_entertainment("Dark"))
    items = asyncio.run(pipeline.extract_shopping("preciso comprar café e açúcar"))

    assert isinstance(title, Ok)
    assert title.value.name == "Dark"
    assert title.value.category is EntertainmentCategory.SERIES
    assert items == Ok(["café", "açúcar"])


def test_pipeline_turns_failures_into_invalid(fake_provider) -> None:
    provider = fake_provider({prompts.EXPENSE_SYSTEM: "quinze reais no uber"})
    pipeline = ExtractionPipeline(Classifier(provider))

    malformed = asyncio.run(pipeline.extract_expense("uber 15"))
    unavailable = asyncio.run(pipeline.detect_domain("uber 15"))

    assert isinstance(malformed, Invalid)
    assert isinstance(unavailable, Invalid)
    assert asyncio.run(pipeline.analyze_expenses("15.00", "transporte: 15.00")) == ""


def test_classifier_logs_token_usage(fake_provider) -> None:
    classifier = Classifier(fake_provider({prompts.DETECTION_SYSTEM: "gastos"}))
    messages: list[str] = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        asyncio.run(classifier.complete("uber 15", prompts.DETECTION_SYSTEM))
    finally:
        logger.remove(sink_id)

    assert any("6 tokens" in message for message in messages)
