import pytest

from listkeeper.lists.models import DomainType, EntertainmentCategory, ExpenseCategory
from listkeeper.nl import heuristics
from listkeeper.nl.results import Invalid, Ok


@pytest.mark.parametrize("title, expected", [
    ("Dark 2a temporada", EntertainmentCategory.SERIES),
    ("filme do Batman", EntertainmentCategory.FILM),
    ("desenho da Peppa", EntertainmentCategory.CARTOON),
    ("Naruto anime", EntertainmentCategory.ANIME),
    ("doc sobre o espaço", EntertainmentCategory.DOCUMENTARY),
    ("livro Duna", EntertainmentCategory.BOOK),
    ("Interestelar", EntertainmentCategory.OTHER),
])
def test_entertainment_category_keyword_table(title, expected) -> None:
    assert heuristics.entertainment_category(title) is expected


def test_entertainment_category_first_row_wins() -> None:
    # both a series and a film marker: the series row comes first
    assert heuristics.entertainment_category("série e filme") is EntertainmentCategory.SERIES
    assert heuristics.entertainment_category("filme em livro") is EntertainmentCategory.FILM


def test_parse_expense_description_then_value() -> None:
    result = heuristics.parse_expense("uber 15")

    assert isinstance(result, Ok)
    assert result.value.description == "uber"
    assert result.value.value == 15.0
    assert result.value.category is ExpenseCategory.TRANSPORT


def test_parse_expense_value_then_description_with_comma_decimal() -> None:
    result = heuristics.parse_expense("40,50 pizza")

    assert isinstance(result, Ok)
    assert result.value.description == "pizza"
    assert result.value.value == 40.5
    assert result.value.category is ExpenseCategory.FOOD


@pytest.mark.parametrize("text", ["jantar", "uber 1.2.3", "uber ,", ""])
def test_parse_expense_rejects_without_usable_number(text) -> None:
    result = heuristics.parse_expense(text)

    assert isinstance(result, Invalid)
    assert result.hint == heuristics.EXPENSE_HINT


def test_parse_number_refuses_non_finite() -> None:
    assert heuristics.parse_number("12,5") == 12.5
    assert heuristics.parse_number("nan") is None
    assert heuristics.parse_number("inf") is None


def test_parse_shopping_splits_and_trims() -> None:
    result = heuristics.parse_shopping(" leite , pão,, ovos ")

    assert result == Ok(["leite", "pão", "ovos"])


def test_parse_shopping_empty_gives_hint() -> None:
    result = heuristics.parse_shopping(" , ,")

    assert isinstance(result, Invalid)
    assert result.hint == heuristics.SHOPPING_HINT


@pytest.mark.parametrize("text, expected", [
    ("vamos assistir algo", DomainType.ENTERTAINMENT),
    ("a new movie", DomainType.ENTERTAINMENT),
    ("gastei no mercado", DomainType.EXPENSE),
    ("pizza 40", DomainType.EXPENSE),
    ("leite e pão", DomainType.SHOPPING),
    ("Interestelar", DomainType.SHOPPING),
])
def test_detect_domain_fallback(text, expected) -> None:
    assert heuristics.detect_domain(text) is expected
